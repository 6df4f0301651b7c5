"""
Shared fixtures.

Everything runs against the in-memory store; no MongoDB or network needed.
bcrypt runs at its minimum cost to keep the suite fast.
"""

import pytest

from expense_tracker.api import create_app
from expense_tracker.config import AppSettings, AuthSettings, MongoSettings, Settings
from expense_tracker.orchestrator import create_app_components


TEST_SECRET = "test-secret-key-for-the-expense-suite"


def make_settings(enforce_expense_ownership: bool = True) -> Settings:
    return Settings(
        mongo=MongoSettings(),
        auth=AuthSettings(secret_key=TEST_SECRET, bcrypt_rounds=4),
        app=AppSettings(
            storage_backend="memory",
            enforce_expense_ownership=enforce_expense_ownership,
            log_level="WARNING",
        ),
    )


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def components(settings):
    return create_app_components(settings)


@pytest.fixture
def app(components):
    app = create_app(components=components)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def compat_components():
    return create_app_components(make_settings(enforce_expense_ownership=False))


@pytest.fixture
def compat_client(compat_components):
    """Client for an app that trusts the userId sent by the caller."""
    app = create_app(components=compat_components)
    app.config["TESTING"] = True
    return app.test_client()
