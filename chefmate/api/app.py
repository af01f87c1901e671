"""FastAPI application factory for ChefMate.

Wires the pipeline components in sequence and exposes them to the routes via
app.state:
1. Key-value store (SQL or in-memory, from STORE_BACKEND)
2. Profile and chat history stores
3. Recipe generation service (Gemini)
4. Conversation orchestrator
5. HTTP middleware (CORS, request logging) and error handlers
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chefmate.api.routes import router
from chefmate.conversation.orchestrator import ConversationOrchestrator
from chefmate.generation.recipe_service import RecipeGenerationService
from chefmate.storage.chat_history import ChatHistoryStore
from chefmate.storage.kv_store import KVStore, create_kv_store
from chefmate.storage.profile_store import ProfileStore
from chefmate.utils.config import Config, config as default_config
from chefmate.utils.errors import ChefMateError
from chefmate.utils.logger import logger


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(ChefMateError)
    async def chefmate_error_handler(request: Request, exc: ChefMateError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug(f"Rejected malformed body on {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def _register_middleware(app: FastAPI, config: Config) -> None:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_headers=["Content-Type", "Authorization"],
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        expose_headers=["Content-Length"],
        max_age=600,
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:12]
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({elapsed_ms:.1f}ms)",
            extra={"request_id": request_id},
        )
        response.headers["X-Request-ID"] = request_id
        return response


def create_app(
    config: Optional[Config] = None,
    store: Optional[KVStore] = None,
    generator: Optional[RecipeGenerationService] = None,
) -> FastAPI:
    """Build the ChefMate API.

    Args:
        config: Application configuration. Default: module-level config.
        store: Key-value backend. Default: built from config.STORE_BACKEND.
        generator: Recipe generation service. Default: Gemini-backed service on config.

    Returns:
        Configured FastAPI application.
    """
    config = config or default_config
    logger.info("=== Initializing ChefMate API ===")

    logger.info("Step 1/4: Configuring key-value store...")
    store = store or create_kv_store(config)

    logger.info("Step 2/4: Initializing profile and chat history stores...")
    profiles = ProfileStore(store)
    history = ChatHistoryStore(store, max_messages=config.MAX_HISTORY_MESSAGES)
    if config.MAX_HISTORY_MESSAGES:
        logger.info(f"Chat history retention: {config.MAX_HISTORY_MESSAGES} messages per user")

    logger.info("Step 3/4: Initializing recipe generation service...")
    generator = generator or RecipeGenerationService(config)
    if not config.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set: recipe generation requests will fail")

    logger.info("Step 4/4: Initializing conversation orchestrator...")
    orchestrator = ConversationOrchestrator(history, profiles, generator)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        store.close()
        logger.info("Key-value store closed")

    app = FastAPI(title="ChefMate API", version="0.1.0", lifespan=lifespan)
    app.state.config = config
    app.state.store = store
    app.state.profiles = profiles
    app.state.history = history
    app.state.generator = generator
    app.state.orchestrator = orchestrator

    _register_middleware(app, config)
    _register_error_handlers(app)
    app.include_router(router)

    logger.info("=== ChefMate API initialization complete ===")
    return app
