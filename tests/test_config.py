"""Tests for settings loading and component wiring."""

from unittest.mock import MagicMock

import pytest
from flask import Flask
from pydantic import ValidationError

import app.main as entry

from expense_tracker.config import (
    AppSettings,
    AuthSettings,
    MongoSettings,
    get_settings,
    validate_all_settings,
)
from expense_tracker.orchestrator import create_app_components
from expense_tracker.services.storage import (
    InMemoryExpenseStorage,
    MongoExpenseStorage,
)


class TestSettings:
    """Tests for the settings classes."""

    def test_defaults(self, monkeypatch):
        """Test the default port, Mongo location and token lifetime."""
        for var in ("PORT", "MONGO_URI", "MONGO_DATABASE", "AUTH_TOKEN_EXPIRE_MINUTES"):
            monkeypatch.delenv(var, raising=False)
        assert AppSettings(_env_file=None).port == 5000
        assert MongoSettings(_env_file=None).uri == "mongodb://localhost:27017"
        assert MongoSettings(_env_file=None).database == "expense-tracker"
        assert AuthSettings(_env_file=None).token_expire_minutes == 60

    def test_environment_overrides(self, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
        monkeypatch.setenv("AUTH_SECRET_KEY", "from-env")
        monkeypatch.setenv("ENFORCE_EXPENSE_OWNERSHIP", "false")

        assert MongoSettings(_env_file=None).uri == "mongodb://db:27017"
        assert AuthSettings(_env_file=None).secret_key == "from-env"
        assert AppSettings(_env_file=None).enforce_expense_ownership is False

    def test_log_level_normalized(self):
        """Test that log levels are upper-cased."""
        assert AppSettings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        """Test that an unknown log level is rejected."""
        with pytest.raises(ValidationError):
            AppSettings(_env_file=None, log_level="chatty")

    def test_bcrypt_rounds_bounds(self):
        """Test that bcrypt cost below 4 is rejected."""
        with pytest.raises(ValidationError):
            AuthSettings(_env_file=None, bcrypt_rounds=3)

    def test_cors_origins_list(self):
        """Test parsing of the CORS origins setting."""
        assert AppSettings(_env_file=None, cors_origins="*").cors_origins_list == "*"
        origins = AppSettings(_env_file=None, cors_origins="http://a, http://b").cors_origins_list
        assert origins == ["http://a", "http://b"]

    def test_default_secret_flagged(self, monkeypatch):
        """Test that the built-in secret is detected."""
        monkeypatch.delenv("AUTH_SECRET_KEY", raising=False)
        assert AuthSettings(_env_file=None).uses_default_secret is True
        assert AuthSettings(_env_file=None, secret_key="x").uses_default_secret is False

    def test_get_settings_is_cached(self):
        """Test that get_settings returns one cached instance."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()

    def test_validate_all_settings_reports_groups(self):
        """Test that every settings group is reported."""
        results = validate_all_settings()
        assert {"mongo", "auth", "app"} <= set(results)


class TestComponentWiring:
    """Tests for building components from settings."""

    def test_memory_backend(self, settings):
        """Test that the memory backend needs no store client."""
        components = create_app_components(settings)
        assert isinstance(components.expense_storage, InMemoryExpenseStorage)
        assert components.store_client is None

    def test_mongo_backend_without_connecting(self, settings):
        """Test that the Mongo backend can be wired without a server."""
        settings.app.storage_backend = "mongo"

        components = create_app_components(settings, connect=False)

        assert isinstance(components.expense_storage, MongoExpenseStorage)
        assert components.store_client is not None
        components.close()

    def test_close_releases_store_client(self, settings):
        """Test that closing the components closes the Mongo client."""
        components = create_app_components(settings)
        components.store_client = MagicMock()

        components.close()

        components.store_client.close.assert_called_once()


class TestEntryPoint:
    """Tests for the server entry point."""

    def test_main_closes_components_when_server_stops(self, settings, monkeypatch):
        """Test that main closes the components once the server returns."""
        components = create_app_components(settings)
        components.close = MagicMock()
        monkeypatch.setattr(entry, "get_settings", lambda: settings)
        monkeypatch.setattr(entry, "create_app_components", lambda s: components)
        monkeypatch.setattr(Flask, "run", MagicMock(side_effect=KeyboardInterrupt))

        with pytest.raises(KeyboardInterrupt):
            entry.main()

        components.close.assert_called_once()
