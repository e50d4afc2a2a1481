"""Unit tests for core.config module.

Tests cover:
- Settings model_validator checks
- uses_postgres / uses_sqlite properties
- get_settings / clear_settings_cache lru_cache behavior
"""

import pytest
from pydantic import ValidationError

from core.config import Settings, clear_settings_cache, get_settings

PG_URL = "postgresql+asyncpg://localhost/compilations"


@pytest.mark.unit
class TestSettingsValidation:
    def test_postgres_accepted_outside_debug(self):
        settings = Settings(database_url=PG_URL, debug=False)

        assert settings.uses_postgres is True
        assert settings.uses_sqlite is False

    def test_requires_database_url(self):
        with pytest.raises(ValidationError, match="Database configuration"):
            Settings(database_url="", debug=True)

    def test_sqlite_rejected_outside_debug(self):
        with pytest.raises(ValidationError, match="DEBUG=true"):
            Settings(database_url="sqlite+aiosqlite:///./dev.db", debug=False)

    def test_sqlite_allowed_in_debug(self):
        settings = Settings(database_url="sqlite+aiosqlite:///./dev.db", debug=True)

        assert settings.uses_sqlite is True

    def test_page_size_must_be_positive(self):
        with pytest.raises(ValidationError, match="DEFAULT_PAGE_SIZE"):
            Settings(database_url=PG_URL, default_page_size=0)

    def test_defaults(self):
        settings = Settings(database_url=PG_URL)

        assert settings.default_page_size == 10
        assert settings.ratelimit_storage_uri == "memory://"
        assert settings.enable_docs is False

    def test_frozen(self):
        settings = Settings(database_url=PG_URL)

        with pytest.raises(ValidationError):
            settings.debug = True


@pytest.mark.unit
class TestSettingsCache:
    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_clear_picks_up_new_environment(self, monkeypatch):
        monkeypatch.setenv("DEFAULT_PAGE_SIZE", "25")
        clear_settings_cache()

        assert get_settings().default_page_size == 25

        monkeypatch.setenv("DEFAULT_PAGE_SIZE", "5")
        assert get_settings().default_page_size == 25
        clear_settings_cache()
        assert get_settings().default_page_size == 5
