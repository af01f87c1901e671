"""HTTP endpoints for ChefMate.

Routes are thin: they pull collaborators from app.state, call the core and
return its result. Core errors (ChefMateError subclasses) propagate to the
exception handler registered in chefmate.api.app, which renders them as
`{"error": message}` with the error's status code.
"""

from fastapi import APIRouter, Depends, Request

from chefmate.conversation.orchestrator import ConversationOrchestrator
from chefmate.generation.recipe_service import RecipeGenerationService
from chefmate.ingredients.normalizer import normalize_ingredients, parse_bulk_input
from chefmate.models.models import (
    AskRecipeRequest,
    AskRecipeResponse,
    ChatHistoryResponse,
    ChatMessageRequest,
    ChatSavedResponse,
    GenerateRecipeRequest,
    IngredientListResponse,
    ParseIngredientsRequest,
    ProfileResponse,
    RecipeTextResponse,
    SaveProfileRequest,
)
from chefmate.storage.chat_history import ChatHistoryStore
from chefmate.storage.profile_store import ProfileStore
from chefmate.utils.errors import StoreError, ValidationError
from chefmate.utils.logger import logger

router = APIRouter()


# -------------------------
# Dependencies via app.state
# -------------------------
def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise RuntimeError(f"{name} not initialized. Check app startup wiring.")
    return value


def get_profiles(request: Request) -> ProfileStore:
    return _state(request, "profiles")


def get_history(request: Request) -> ChatHistoryStore:
    return _state(request, "history")


def get_generator(request: Request) -> RecipeGenerationService:
    return _state(request, "generator")


def get_orchestrator(request: Request) -> ConversationOrchestrator:
    return _state(request, "orchestrator")


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.post("/profile")
async def save_profile(req: SaveProfileRequest, profiles: ProfileStore = Depends(get_profiles)) -> dict:
    try:
        await profiles.save_profile(req.user_id, req.profile)
    except StoreError as e:
        logger.error(f"Error saving profile: {e}")
        raise StoreError("Failed to save profile") from e
    return {"success": True}


@router.get("/profile/{user_id}", response_model=ProfileResponse)
async def get_profile(user_id: str, profiles: ProfileStore = Depends(get_profiles)) -> ProfileResponse:
    try:
        profile = await profiles.load_profile(user_id)
    except StoreError as e:
        logger.error(f"Error getting profile: {e}")
        raise StoreError("Failed to get profile") from e
    return ProfileResponse(profile=profile.to_storage())


@router.post("/generate-recipe", response_model=RecipeTextResponse)
async def generate_recipe(
    req: GenerateRecipeRequest,
    generator: RecipeGenerationService = Depends(get_generator),
) -> RecipeTextResponse:
    ingredients = normalize_ingredients(req.ingredients or [])
    recipe = await generator.generate(ingredients, req.profile)
    return RecipeTextResponse(recipe=recipe)


@router.post("/chat", response_model=ChatSavedResponse)
async def save_chat_message(
    req: ChatMessageRequest,
    history: ChatHistoryStore = Depends(get_history),
) -> ChatSavedResponse:
    try:
        message = await history.append_message(req.user_id, req.message, req.type)
    except StoreError as e:
        logger.error(f"Error saving chat message: {e}")
        raise StoreError("Failed to save message") from e
    return ChatSavedResponse(message_id=message.id)


@router.get("/chat/{user_id}", response_model=ChatHistoryResponse)
async def get_chat_history(user_id: str, history: ChatHistoryStore = Depends(get_history)) -> ChatHistoryResponse:
    return ChatHistoryResponse(messages=await history.load_history(user_id))


@router.post("/ask-recipe", response_model=AskRecipeResponse)
async def ask_recipe(
    req: AskRecipeRequest,
    orchestrator: ConversationOrchestrator = Depends(get_orchestrator),
) -> AskRecipeResponse:
    if not req.user_id or not req.ingredients:
        raise ValidationError("Missing userId or ingredients")
    message = await orchestrator.ask_for_recipe(req.user_id, req.ingredients, req.profile)
    return AskRecipeResponse(message=message)


@router.post("/ingredients/parse", response_model=IngredientListResponse)
async def parse_ingredients(req: ParseIngredientsRequest) -> IngredientListResponse:
    existing = normalize_ingredients(req.ingredients)
    return IngredientListResponse(ingredients=list(parse_bulk_input(req.text, existing)))
