"""Pytest configuration and fixtures for integration tests.

Loads .env from the project root and skips the whole session when the Gemini
credential is missing. Integration tests call the live provider and use the
in-memory store, so they never touch a local database file.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env and force the in-memory store before collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    os.environ["STORE_BACKEND"] = "memory"

    print("\n" + "=" * 70)
    print("Note: These tests require a valid GEMINI_API_KEY")
    print(f"Environment loaded from: {env_path}")
    print("  - Store backend: memory")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip integration tests if GEMINI_API_KEY is not configured."""
    if not os.getenv("GEMINI_API_KEY"):
        pytest.skip("Missing required API key: GEMINI_API_KEY. Configure it in .env to run integration tests.")
