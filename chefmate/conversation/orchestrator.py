"""Conversation orchestrator: one recipe turn per user action.

Glues the normalizer, profile store, generation service and chat history:

1. Normalize ingredients, resolve the profile and append the user's request
   to history
2. Ask the generation service for a recipe
3. Append the assistant reply: the recipe on success, a fixed apology on any
   generation failure (failures never abort the turn)
4. Return the assistant message

Turn state machine (per user):
    IDLE -> AWAITING_GENERATION -> DELIVERED | DEGRADED_DELIVERED -> IDLE

Only pending turns are kept in memory. The outcome of a resolved turn is
logged and the user reads as IDLE again.

Only one turn per user may be pending; a second request while the first is
awaiting generation raises ConversationBusyError. The orchestrator keeps no
persistent state of its own; profile and history are reloaded on every call.
"""

import asyncio
from enum import Enum
from typing import Optional, Sequence

from chefmate.generation.recipe_service import RecipeGenerationService
from chefmate.ingredients.normalizer import DECORATIVE_MARKERS, normalize_ingredients
from chefmate.models.models import Message, UserProfile
from chefmate.storage.chat_history import ChatHistoryStore
from chefmate.storage.profile_store import ProfileStore
from chefmate.utils.errors import ConversationBusyError, NotFoundError, ValidationError
from chefmate.utils.logger import logger

RECIPE_REPLY_TEXT = "Here's a recipe I created with your ingredients! 👨‍🍳"
APOLOGY_TEXT = "Sorry, I couldn't generate a recipe right now. Please try again! 😅"

# Emoji that decorate cuisine choices in the onboarding wizard
CUISINE_MARKERS = ("🍝", "🌮", "🥢", "🍛", "🫒", "🍔", "🥐", "🍜", "🍱", "🥟", "🧆", "🥙")


class TurnState(str, Enum):
    IDLE = "idle"
    AWAITING_GENERATION = "awaiting_generation"
    DELIVERED = "delivered"
    DEGRADED_DELIVERED = "degraded_delivered"


def describe_ingredients(ingredients: Sequence[str]) -> str:
    """User-facing request text summarizing the ingredient set."""
    return f"I have these ingredients: {', '.join(ingredients)}. Can you create a recipe for me?"


def welcome_text(profile: UserProfile) -> str:
    """Greeting shown before the first turn, personalized from the profile."""
    cuisines = ", ".join(profile.cuisine_preferences)
    for marker in CUISINE_MARKERS + tuple(DECORATIVE_MARKERS):
        cuisines = cuisines.replace(marker, "")
    cuisines = " ".join(cuisines.split()) or "any"

    skill = profile.skill_level or "beginner"
    skill = (skill[:1].upper() + skill[1:]).replace("-", " ")

    return (
        f"Welcome to ChefMate! 🍳✨ I see you enjoy {cuisines} cuisine and are at a {skill} level! "
        "Add your ingredients and I'll create personalized recipes just for you! 🎯"
    )


class ConversationOrchestrator:
    """Run recipe turns against the chat history and the generation service."""

    def __init__(
        self,
        history: ChatHistoryStore,
        profiles: ProfileStore,
        generator: RecipeGenerationService,
    ) -> None:
        self.history_store = history
        self.profiles = profiles
        self.generator = generator
        self._turns: dict[str, TurnState] = {}

    def turn_state(self, user_id: str) -> TurnState:
        return self._turns.get(user_id, TurnState.IDLE)

    def is_pending(self, user_id: str) -> bool:
        """Busy flag: True while a generation request for this user is outstanding."""
        return self.turn_state(user_id) is TurnState.AWAITING_GENERATION

    async def history(self, user_id: str) -> list[Message]:
        return await self.history_store.load_history(user_id)

    async def ask_for_recipe(
        self,
        user_id: Optional[str],
        ingredients: Sequence[str],
        profile: Optional[UserProfile] = None,
    ) -> Message:
        """Run one recipe turn and return the assistant's reply.

        Args:
            user_id: Caller-supplied user identifier.
            ingredients: Ingredients as entered; normalized and deduplicated here.
            profile: Profile to use. None loads the stored profile, falling back
                to defaults for users without one.

        Returns:
            The assistant Message appended to history (recipe or apology).

        Raises:
            ValidationError: If user_id is missing or no ingredient survives
                normalization. Nothing is written.
            ConversationBusyError: If a turn for this user is already pending.
            StoreError: If the history cannot be written.
        """
        if not user_id:
            raise ValidationError("Missing userId")
        normalized = normalize_ingredients(ingredients)
        if not normalized:
            raise ValidationError("Please provide at least one ingredient")
        if self.is_pending(user_id):
            raise ConversationBusyError("A recipe is already being created for this user")

        self._turns[user_id] = TurnState.AWAITING_GENERATION
        task = asyncio.ensure_future(self._run_turn(user_id, normalized, profile))
        # Caller cancellation must not interrupt the history writes of a started turn
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            task.add_done_callback(self._log_detached_turn)
            raise

    async def _run_turn(self, user_id: str, ingredients: Sequence[str], profile: Optional[UserProfile]) -> Message:
        log_extra = {"user_id": user_id}
        try:
            if profile is None:
                profile = await self._load_profile(user_id)

            await self.history_store.append_message(user_id, describe_ingredients(ingredients), "user")

            try:
                recipe = await self.generator.generate(ingredients, profile)
            except Exception as e:
                logger.warning(f"Recipe generation failed for user_id={user_id}, sending apology: {e}", extra=log_extra)
                reply = await self.history_store.append_message(user_id, APOLOGY_TEXT, "assistant")
                outcome = TurnState.DEGRADED_DELIVERED
            else:
                reply = await self.history_store.append_message(
                    user_id, RECIPE_REPLY_TEXT, "assistant", recipe=recipe
                )
                outcome = TurnState.DELIVERED

            logger.info(f"Turn {outcome.value} for user_id={user_id} (message id={reply.id})", extra=log_extra)
            return reply
        finally:
            # Only pending turns are tracked; anything else reads as IDLE
            self._turns.pop(user_id, None)

    @staticmethod
    def _log_detached_turn(task: asyncio.Future) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Recipe turn failed after the caller went away: {error}")

    async def _load_profile(self, user_id: str) -> UserProfile:
        try:
            return await self.profiles.load_profile(user_id)
        except NotFoundError:
            logger.debug(f"No profile for user_id={user_id}, using defaults", extra={"user_id": user_id})
            return UserProfile()
