"""Unit tests for configuration management."""

import pytest

from chefmate.utils.config import Config


class TestConfigInitialization:
    """Test Config class initialization and environment variable loading."""

    def test_config_loads_default_values(self, monkeypatch):
        """Test that Config uses default values when env vars not set."""
        for name in (
            "GEMINI_API_KEY",
            "GEMINI_MODEL",
            "TEMPERATURE",
            "MAX_OUTPUT_TOKENS",
            "THINKING_BUDGET",
            "GENERATION_TIMEOUT_SECONDS",
            "STORE_BACKEND",
            "DATABASE_URL",
            "SQLITE_DB_FILE",
            "MAX_HISTORY_MESSAGES",
            "PORT",
            "CORS_ORIGINS",
        ):
            monkeypatch.delenv(name, raising=False)

        config = Config()

        assert config.GEMINI_API_KEY == ""
        assert config.GEMINI_MODEL == "gemini-2.5-flash"
        assert config.TEMPERATURE == 0.7
        assert config.MAX_OUTPUT_TOKENS == 1000
        assert config.THINKING_BUDGET == 0
        assert config.GENERATION_TIMEOUT_SECONDS == 60
        assert config.STORE_BACKEND == "sql"
        assert config.DATABASE_URL is None
        assert config.MAX_HISTORY_MESSAGES == 0
        assert config.PORT == 7777
        assert config.CORS_ORIGINS == ["*"]

    def test_config_loads_from_environment(self, monkeypatch):
        """Test that Config loads values from environment variables."""
        monkeypatch.setenv("GEMINI_API_KEY", "test_gemini_key")
        monkeypatch.setenv("GEMINI_MODEL", "custom-model")
        monkeypatch.setenv("TEMPERATURE", "0.3")
        monkeypatch.setenv("MAX_OUTPUT_TOKENS", "2048")
        monkeypatch.setenv("STORE_BACKEND", "MEMORY")
        monkeypatch.setenv("MAX_HISTORY_MESSAGES", "200")
        monkeypatch.setenv("PORT", "8888")
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")

        config = Config()

        assert config.GEMINI_API_KEY == "test_gemini_key"
        assert config.GEMINI_MODEL == "custom-model"
        assert config.TEMPERATURE == 0.3
        assert config.MAX_OUTPUT_TOKENS == 2048
        assert config.STORE_BACKEND == "memory"
        assert config.MAX_HISTORY_MESSAGES == 200
        assert config.PORT == 8888
        assert config.CORS_ORIGINS == ["https://a.example", "https://b.example"]

    def test_empty_thinking_budget_means_model_default(self, monkeypatch):
        """Test that an empty THINKING_BUDGET leaves the model default in place."""
        monkeypatch.setenv("THINKING_BUDGET", "")
        assert Config().THINKING_BUDGET is None

    def test_database_url_defaults_to_sqlite_file(self, monkeypatch):
        """Test database_url falls back to the SQLite file."""
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.setenv("SQLITE_DB_FILE", "tmp/test.db")
        assert Config().database_url == "sqlite:///tmp/test.db"

    def test_database_url_prefers_explicit_url(self, monkeypatch):
        """Test DATABASE_URL wins over the SQLite file."""
        monkeypatch.setenv("DATABASE_URL", "postgresql://user:pw@db:5432/chefmate")
        assert Config().database_url == "postgresql://user:pw@db:5432/chefmate"


class TestConfigValidation:
    """Test Config validation logic."""

    def test_validate_allows_missing_api_key(self, monkeypatch):
        """Test that a missing GEMINI_API_KEY does not fail startup validation."""
        monkeypatch.setenv("GEMINI_API_KEY", "")
        monkeypatch.setenv("STORE_BACKEND", "memory")
        Config().validate()  # Should not raise

    def test_validate_rejects_unknown_store_backend(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "redis")
        with pytest.raises(ValueError, match="STORE_BACKEND"):
            Config().validate()

    def test_validate_rejects_temperature_out_of_range(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "memory")
        monkeypatch.setenv("TEMPERATURE", "3.5")
        with pytest.raises(ValueError, match="TEMPERATURE"):
            Config().validate()

    def test_validate_rejects_small_output_budget(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "memory")
        monkeypatch.setenv("MAX_OUTPUT_TOKENS", "100")
        with pytest.raises(ValueError, match="MAX_OUTPUT_TOKENS"):
            Config().validate()

    def test_validate_rejects_non_positive_timeout(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "memory")
        monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValueError, match="GENERATION_TIMEOUT_SECONDS"):
            Config().validate()

    def test_validate_rejects_negative_retention(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "memory")
        monkeypatch.setenv("MAX_HISTORY_MESSAGES", "-1")
        with pytest.raises(ValueError, match="MAX_HISTORY_MESSAGES"):
            Config().validate()

    def test_validate_rejects_negative_thinking_budget(self, monkeypatch):
        monkeypatch.setenv("STORE_BACKEND", "memory")
        monkeypatch.setenv("THINKING_BUDGET", "-5")
        with pytest.raises(ValueError, match="THINKING_BUDGET"):
            Config().validate()
