"""Prompt templates for recipe generation.

Provides the fixed ChefMate system instruction and a factory that renders the
user prompt from an ingredient set and a user profile. The template asks for
eight output sections; the provider is instructed, not guaranteed, to follow
them, so the completion is handled as best-effort structured text.
"""

from typing import Optional, Sequence

from chefmate.models.models import UserProfile

SYSTEM_INSTRUCTION = (
    "You are ChefMate, a friendly and knowledgeable AI cooking assistant. "
    "Always provide practical, delicious recipes with clear instructions."
)

DEFAULT_CUISINE = "any cuisine"
DEFAULT_DIETARY_NEEDS = "no dietary restrictions"
DEFAULT_SKILL_LEVEL = "beginner"

RECIPE_SECTIONS = (
    "Recipe name",
    "Brief description",
    "Prep time and cook time",
    "Difficulty level",
    "Complete ingredient list (including amounts for ingredients provided, suggest amounts for missing ingredients)",
    "Step-by-step cooking instructions",
    "Serving size",
    "Any helpful tips",
)


def build_recipe_prompt(ingredients: Sequence[str], profile: Optional[UserProfile] = None) -> str:
    """Render the recipe request for the provider.

    Args:
        ingredients: Normalized ingredient set (non-empty, validated by caller).
        profile: User profile. None renders every preference with its default.

    Returns:
        Prompt text with preferences, ingredient list and the numbered output sections.
    """
    profile = profile or UserProfile()

    cuisine = ", ".join(profile.cuisine_preferences) or DEFAULT_CUISINE
    dietary = ", ".join(profile.dietary_needs) or DEFAULT_DIETARY_NEEDS
    skill_level = profile.skill_level or DEFAULT_SKILL_LEVEL

    preference_lines = [
        f"- Cuisine preferences: {cuisine}",
        f"- Dietary needs: {dietary}",
        f"- Cooking skill level: {skill_level}",
    ]
    if profile.location:
        preference_lines.append(f"- Location: {profile.location}")

    sections = "\n".join(f"{idx}. {section}" for idx, section in enumerate(RECIPE_SECTIONS, start=1))
    preferences = "\n".join(preference_lines)

    return f"""You are ChefMate, a helpful AI cooking assistant. Create a delicious recipe using these available ingredients: {", ".join(ingredients)}.

User preferences:
{preferences}

Please provide:
{sections}

Format your response as a well-structured recipe that's easy to follow for someone with {skill_level} cooking skills."""
