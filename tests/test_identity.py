"""Tests for registration and credential checks."""

import asyncio

import pytest

from expense_tracker.config import AuthSettings
from expense_tracker.services import (
    DuplicateUserError,
    IdentityService,
    InvalidCredentialsError,
)
from expense_tracker.services.storage import InMemoryUserStorage


@pytest.fixture
def auth_settings():
    return AuthSettings(secret_key="identity-test-secret", bcrypt_rounds=4)


@pytest.fixture
def storage():
    return InMemoryUserStorage()


@pytest.fixture
def identity(storage, auth_settings):
    return IdentityService(storage, auth_settings)


class TestRegister:
    """Tests for IdentityService.register."""

    def test_register_stores_hash_not_password(self, identity, storage):
        """Test that only a bcrypt hash of the password is stored."""
        message = asyncio.run(identity.register("alice", "hunter2"))
        assert message == "User registered successfully"

        user = asyncio.run(storage.get_user_by_username("alice"))
        assert user is not None
        assert user.password_hash != "hunter2"
        assert user.password_hash.startswith("$2")

    def test_hash_uses_configured_cost(self, identity, storage):
        """Test that the bcrypt cost factor comes from settings."""
        asyncio.run(identity.register("alice", "hunter2"))
        user = asyncio.run(storage.get_user_by_username("alice"))
        assert user.password_hash.split("$")[2] == "04"

    def test_same_password_gets_different_salts(self, identity, storage):
        """Test that equal passwords produce different hashes."""
        asyncio.run(identity.register("alice", "same"))
        asyncio.run(identity.register("bob", "same"))
        alice = asyncio.run(storage.get_user_by_username("alice"))
        bob = asyncio.run(storage.get_user_by_username("bob"))
        assert alice.password_hash != bob.password_hash

    def test_register_twice_fails(self, identity):
        """Test that a taken username is rejected."""
        asyncio.run(identity.register("alice", "hunter2"))
        with pytest.raises(DuplicateUserError, match="User already exists"):
            asyncio.run(identity.register("alice", "other"))

    def test_default_cost_factor_is_ten(self):
        """Test the default bcrypt cost factor."""
        assert AuthSettings().bcrypt_rounds == 10


class TestLogin:
    """Tests for IdentityService.login."""

    def test_login_returns_user(self, identity, storage):
        """Test that correct credentials return the stored user."""
        asyncio.run(identity.register("alice", "hunter2"))

        user = asyncio.run(identity.login("alice", "hunter2"))

        stored = asyncio.run(storage.get_user_by_username("alice"))
        assert user.id == stored.id
        assert user.username == "alice"

    def test_wrong_password_and_unknown_user_look_the_same(self, identity):
        """Test that both failure causes raise the same error and message."""
        asyncio.run(identity.register("alice", "hunter2"))

        with pytest.raises(InvalidCredentialsError) as wrong_password:
            asyncio.run(identity.login("alice", "nope"))
        with pytest.raises(InvalidCredentialsError) as unknown_user:
            asyncio.run(identity.login("mallory", "hunter2"))

        assert wrong_password.value.message == "Invalid credentials"
        assert unknown_user.value.message == wrong_password.value.message

    def test_overlong_password_never_matches(self, identity):
        """Test that passwords past bcrypt's 72 bytes are not truncated into a match."""
        asyncio.run(identity.register("alice", "hunter2"))
        with pytest.raises(InvalidCredentialsError):
            asyncio.run(identity.login("alice", "hunter2" + "x" * 80))

    def test_corrupt_stored_hash_is_a_mismatch(self):
        """Test that a stored value that is not a bcrypt hash never matches."""
        assert IdentityService.check_password("pw", "not-a-bcrypt-hash") is False
