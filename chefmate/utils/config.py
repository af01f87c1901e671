"""Configuration management for ChefMate.

Loads environment variables from system environment and .env file.
Priority order: system environment > .env file > hardcoded defaults
"""

import os
from typing import Optional

from dotenv import load_dotenv


# Load .env file (if exists, silently continues if missing)
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Gemini API Key: absence is reported per request as ConfigurationError, not at startup
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        # Default: gemini-2.5-flash (fast, cost-effective for recipe text)
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")
        # LLM Model Parameters
        # Temperature: Controls randomness (0.0 = deterministic, 1.0 = max randomness)
        # For recipes: 0.7 gives varied dishes for the same pantry
        self.TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.7"))
        # Max Output Tokens: 1000 fits one full recipe with instructions
        self.MAX_OUTPUT_TOKENS: int = int(os.getenv("MAX_OUTPUT_TOKENS", "1000"))
        # Thinking Budget: reasoning tokens for Gemini 2.5 models, counted against MAX_OUTPUT_TOKENS
        # Default: 0 (thinking disabled, the full budget goes to the recipe). Empty = model default
        thinking_budget = os.getenv("THINKING_BUDGET", "0").strip()
        self.THINKING_BUDGET: Optional[int] = int(thinking_budget) if thinking_budget else None
        # Upper bound for a single generation call, in seconds
        self.GENERATION_TIMEOUT_SECONDS: float = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "60"))
        # Store Backend: "sql" (SQLite/PostgreSQL via SQLAlchemy) or "memory" (process-local, for dev/tests)
        self.STORE_BACKEND: str = os.getenv("STORE_BACKEND", "sql").lower()
        # Database URL: any SQLAlchemy URL. Default: local SQLite file
        self.DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
        # SQLite file used when DATABASE_URL is not set
        self.SQLITE_DB_FILE: str = os.getenv("SQLITE_DB_FILE", "tmp/chefmate.db")
        # Retention: keep at most this many messages per user. 0 = unbounded
        self.MAX_HISTORY_MESSAGES: int = int(os.getenv("MAX_HISTORY_MESSAGES", "0"))
        # Server Port
        self.PORT: int = int(os.getenv("PORT", "7777"))
        # Comma-separated list of allowed CORS origins. Default: any origin
        self.CORS_ORIGINS: list[str] = [
            origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
        ]

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL for the SQL store (DATABASE_URL or the SQLite file)."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return f"sqlite:///{self.SQLITE_DB_FILE}"

    def validate(self) -> None:
        """Validate configuration values.

        GEMINI_API_KEY is intentionally not checked here: a missing key fails
        individual generation requests with ConfigurationError.

        Raises:
            ValueError: If invalid values provided.
        """
        if self.STORE_BACKEND not in ("sql", "memory"):
            raise ValueError(f"STORE_BACKEND must be 'sql' or 'memory', got: {self.STORE_BACKEND}")
        if not (0.0 <= self.TEMPERATURE <= 2.0):
            raise ValueError(f"TEMPERATURE must be between 0.0 and 2.0, got: {self.TEMPERATURE}")
        if self.MAX_OUTPUT_TOKENS < 256:
            raise ValueError(f"MAX_OUTPUT_TOKENS must be at least 256, got: {self.MAX_OUTPUT_TOKENS}")
        if self.THINKING_BUDGET is not None and self.THINKING_BUDGET < 0:
            raise ValueError(f"THINKING_BUDGET must be 0 or more, got: {self.THINKING_BUDGET}")
        if self.GENERATION_TIMEOUT_SECONDS <= 0:
            raise ValueError(
                f"GENERATION_TIMEOUT_SECONDS must be positive, got: {self.GENERATION_TIMEOUT_SECONDS}"
            )
        if self.MAX_HISTORY_MESSAGES < 0:
            raise ValueError(f"MAX_HISTORY_MESSAGES must be 0 or more, got: {self.MAX_HISTORY_MESSAGES}")
        if not (1 <= self.PORT <= 65535):
            raise ValueError(f"PORT must be between 1 and 65535, got: {self.PORT}")


# Create module-level config instance and validate immediately
config = Config()
config.validate()
