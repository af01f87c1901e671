"""Recipe generation via the Gemini API.

RecipeGenerationService turns an ingredient set and a user profile into recipe
text with exactly one provider call. Configuration is passed in explicitly
(no ambient credential lookup), which also lets tests run the service against a
Config built for the test.

**Contract:**
- Empty ingredients: ValidationError, provider never called
- Missing GEMINI_API_KEY: ConfigurationError (fatal for the request)
- Provider exception, timeout, or empty completion: GenerationError
- Success: completion text, returned as-is (no schema validation)

No retries: a failed call surfaces immediately to the caller.
"""

import asyncio
import time
from typing import Optional, Sequence

from google import genai
from google.genai import types

from chefmate.generation.prompts import SYSTEM_INSTRUCTION, build_recipe_prompt
from chefmate.models.models import UserProfile
from chefmate.utils.config import Config
from chefmate.utils.errors import ConfigurationError, GenerationError, ValidationError
from chefmate.utils.logger import logger

# Raw completion text; treated as opaque by everything downstream
RecipeResult = str


class RecipeGenerationService:
    """Build the provider prompt, call Gemini once, return the recipe text."""

    def __init__(self, config: Config) -> None:
        """Initialize the service.

        Args:
            config: Application configuration (credential, model, sampling, timeout).
        """
        self.config = config

    def _create_client(self, api_key: str) -> genai.Client:
        timeout_ms = int(self.config.GENERATION_TIMEOUT_SECONDS * 1000)
        return genai.Client(api_key=api_key, http_options=types.HttpOptions(timeout=timeout_ms))

    def _generation_config(self) -> types.GenerateContentConfig:
        options = {
            "system_instruction": SYSTEM_INSTRUCTION,
            "temperature": self.config.TEMPERATURE,
            "max_output_tokens": self.config.MAX_OUTPUT_TOKENS,
        }
        if self.config.THINKING_BUDGET is not None:
            options["thinking_config"] = types.ThinkingConfig(thinking_budget=self.config.THINKING_BUDGET)
        return types.GenerateContentConfig(**options)

    async def generate(self, ingredients: Sequence[str], profile: Optional[UserProfile] = None) -> RecipeResult:
        """Generate a recipe for the given ingredients and profile (single attempt).

        Args:
            ingredients: Normalized ingredient set.
            profile: User profile; None uses default preferences.

        Returns:
            Recipe text as produced by the provider.

        Raises:
            ValidationError: If ingredients is empty.
            ConfigurationError: If GEMINI_API_KEY is not configured.
            GenerationError: If the provider call fails, times out, or returns no text.
        """
        if not ingredients:
            raise ValidationError("Please provide at least one ingredient")

        api_key = self.config.GEMINI_API_KEY
        if not api_key:
            logger.error("GEMINI_API_KEY is not configured; cannot generate recipes")
            raise ConfigurationError("Gemini API key not configured")

        prompt = build_recipe_prompt(ingredients, profile)
        client = self._create_client(api_key)
        started = time.perf_counter()

        try:
            response = await asyncio.wait_for(
                asyncio.to_thread(
                    client.models.generate_content,
                    model=self.config.GEMINI_MODEL,
                    contents=prompt,
                    config=self._generation_config(),
                ),
                timeout=self.config.GENERATION_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Gemini call timed out after {self.config.GENERATION_TIMEOUT_SECONDS}s")
            raise GenerationError("Recipe generation timed out") from e
        except Exception as e:
            logger.warning(f"Gemini API error: {e}")
            raise GenerationError("Failed to generate recipe") from e

        recipe = (getattr(response, "text", None) or "").strip()
        if not recipe:
            logger.warning("Gemini returned an empty completion")
            raise GenerationError("No recipe generated")

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            f"Generated recipe for {len(ingredients)} ingredient(s) with {self.config.GEMINI_MODEL} "
            f"({len(recipe)} chars, {elapsed_ms}ms)"
        )
        return recipe
