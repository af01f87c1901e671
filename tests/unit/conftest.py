"""Shared fixtures for unit tests.

All fixtures use the in-memory store and a Config built from a controlled
environment, so unit tests never touch the network or the filesystem
(except the SQL store tests, which use tmp_path).
"""

from unittest.mock import AsyncMock

import pytest

from chefmate.generation.recipe_service import RecipeGenerationService
from chefmate.storage.chat_history import ChatHistoryStore
from chefmate.storage.kv_store import InMemoryKVStore
from chefmate.storage.profile_store import ProfileStore
from chefmate.utils.config import Config

SAMPLE_RECIPE = """# Garlic Chicken Rice Bowl

A quick one-pan dinner.

- Prep time: 10 minutes
- Cook time: 25 minutes
"""


@pytest.fixture
def test_config(monkeypatch) -> Config:
    """Config with a fake API key and the in-memory store."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-test-model")
    monkeypatch.setenv("STORE_BACKEND", "memory")
    monkeypatch.setenv("TEMPERATURE", "0.7")
    monkeypatch.setenv("MAX_OUTPUT_TOKENS", "1000")
    monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "5")
    monkeypatch.setenv("MAX_HISTORY_MESSAGES", "0")
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("THINKING_BUDGET", raising=False)
    return Config()


@pytest.fixture
def kv_store() -> InMemoryKVStore:
    return InMemoryKVStore()


@pytest.fixture
def profile_store(kv_store) -> ProfileStore:
    return ProfileStore(kv_store)


@pytest.fixture
def history_store(kv_store) -> ChatHistoryStore:
    return ChatHistoryStore(kv_store)


@pytest.fixture
def fake_generator() -> AsyncMock:
    """Generation service double returning SAMPLE_RECIPE."""
    generator = AsyncMock(spec=RecipeGenerationService)
    generator.generate.return_value = SAMPLE_RECIPE
    return generator
