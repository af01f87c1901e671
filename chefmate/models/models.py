"""Data models and schemas for ChefMate.

Defines Pydantic models for domain records (profile, chat message) and for the
HTTP request/response bodies. Wire and storage JSON use camelCase field names;
Python attributes are snake_case with aliases.
All models use Pydantic v2.
"""

from typing import Annotated, Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

Role = Literal["user", "assistant"]


class UserProfile(BaseModel):
    """Cooking profile captured during onboarding.

    cuisinePreferences and dietaryNeeds are sets semantically; they are kept as
    ordered, duplicate-free lists so they serialize to JSON unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    cuisine_preferences: Annotated[
        List[str], Field(default_factory=list, alias="cuisinePreferences", description="Preferred cuisines")
    ]
    dietary_needs: Annotated[
        List[str], Field(default_factory=list, alias="dietaryNeeds", description="Dietary restrictions")
    ]
    skill_level: Annotated[
        str, Field("beginner", alias="skillLevel", description="beginner, intermediate, advanced, ...")
    ]
    location: Annotated[str, Field("", description="Free-text location, optional")]

    @field_validator("cuisine_preferences", "dietary_needs", mode="before")
    @classmethod
    def dedupe_preferences(cls, values: Optional[List[str]]) -> List[str]:
        """Drop blanks and duplicates (first occurrence wins)."""
        if not values:
            return []
        cleaned = [str(value).strip() for value in values if value and str(value).strip()]
        return list(dict.fromkeys(cleaned))

    @field_validator("skill_level", mode="before")
    @classmethod
    def default_skill_level(cls, value: Optional[str]) -> str:
        return value or "beginner"

    @field_validator("location", mode="before")
    @classmethod
    def default_location(cls, value: Optional[str]) -> str:
        return value or ""

    def to_storage(self) -> dict:
        """JSON-ready dict using the wire field names."""
        return self.model_dump(by_alias=True)


class Message(BaseModel):
    """One immutable entry in a user's chat history.

    `recipe` is an opaque payload (the provider's completion text) rendered by
    the caller; it is never inspected here.
    """

    model_config = ConfigDict(frozen=True)

    id: Annotated[int, Field(ge=0, description="Time-derived id, strictly increasing per user")]
    text: Annotated[str, Field(min_length=1)]
    role: Role
    timestamp: Annotated[str, Field(description="ISO-8601 creation time (UTC)")]
    recipe: Optional[Any] = None


# ============================================================================
# HTTP request/response bodies
# ============================================================================
# Request fields are optional on purpose: missing values are reported by the
# core as ValidationError with the legacy error messages, not as pydantic 422s.


class SaveProfileRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    profile: Optional[UserProfile] = None


class GenerateRecipeRequest(BaseModel):
    ingredients: Optional[List[str]] = None
    profile: Optional[UserProfile] = None


class ChatMessageRequest(BaseModel):
    """Direct history append: `type` is the message role."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    message: Optional[str] = None
    type: Optional[str] = None


class AskRecipeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: Optional[str] = Field(None, alias="userId")
    ingredients: Optional[List[str]] = None
    profile: Optional[UserProfile] = None


class ParseIngredientsRequest(BaseModel):
    text: str = ""
    ingredients: List[str] = Field(default_factory=list)


class ProfileResponse(BaseModel):
    profile: dict


class RecipeTextResponse(BaseModel):
    recipe: str


class ChatSavedResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message_id: int = Field(alias="messageId")


class ChatHistoryResponse(BaseModel):
    messages: List[Message]


class AskRecipeResponse(BaseModel):
    message: Message


class IngredientListResponse(BaseModel):
    ingredients: List[str]
