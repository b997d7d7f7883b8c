"""Tests for auth service module.

Tests password hashing, registration, login and credential lookup.
"""

import sqlite3

import jwt as pyjwt
import pytest

from taskkeeper.auth import service
from taskkeeper.auth.schemas import UserCredentials
from taskkeeper.auth.token import validate_access_token
from taskkeeper.exceptions import AuthenticationError, ConflictError, DatabaseError

TEST_SECRET = "test-secret-key"
TEST_PASSWORD = "TestPass123"


def creds(username="alice", password=TEST_PASSWORD) -> UserCredentials:
    return UserCredentials(username=username, password=password)


# ============================================================================
# Password Hashing and Verification Tests
# ============================================================================


class TestPasswordHashing:
    """Tests for password hashing and verification."""

    def test_hash_password_returns_bcrypt_string(self):
        hashed = service.hash_password("SecurePass123", rounds=4)
        assert isinstance(hashed, str)
        assert len(hashed) == 60  # Bcrypt hashes are always 60 characters
        assert hashed.startswith("$2b$04$")

    def test_hash_password_different_hashes(self):
        """Same password should produce different hashes (due to salt)."""
        hash1 = service.hash_password("SecurePass123", rounds=4)
        hash2 = service.hash_password("SecurePass123", rounds=4)
        assert hash1 != hash2

    def test_verify_password_valid(self):
        hashed = service.hash_password("SecurePass123", rounds=4)
        assert service.verify_password("SecurePass123", hashed) is True

    def test_verify_password_invalid(self):
        hashed = service.hash_password("SecurePass123", rounds=4)
        assert service.verify_password("WrongPass456", hashed) is False

    def test_verify_password_case_sensitive(self):
        hashed = service.hash_password("SecurePass123", rounds=4)
        assert service.verify_password("securepass123", hashed) is False

    def test_verify_password_malformed_hash(self):
        assert service.verify_password("SecurePass123", "not-a-hash") is False

    def test_hash_rounds(self):
        assert service.hash_rounds(service.hash_password("SecurePass123", rounds=5)) == 5

    def test_hash_rounds_malformed(self):
        assert service.hash_rounds("not-a-hash") is None
        assert service.hash_rounds("$2b$xx$abc") is None


# ============================================================================
# Registration Tests
# ============================================================================


class TestRegister:
    """Tests for AuthService.register."""

    def test_register_returns_public_user(self, auth_service):
        user = auth_service.register(creds())

        assert user.id is not None
        assert user.username == "alice"
        assert user.created_at is not None
        assert not hasattr(user, "password_hash")
        assert "password" not in user.model_dump()

    def test_register_stores_hash_not_plain_text(self, auth_service, database):
        auth_service.register(creds())

        with database.get_core() as core:
            row = core.user.get_by_username("alice")

        assert row["password_hash"] != TEST_PASSWORD
        assert row["password_hash"].startswith("$2b$")
        assert service.verify_password(TEST_PASSWORD, row["password_hash"])

    def test_register_duplicate_username_raises_conflict(self, auth_service):
        auth_service.register(creds())

        with pytest.raises(ConflictError) as exc_info:
            auth_service.register(creds(password="OtherPass456"))

        assert exc_info.value.details == {"username": "alice"}

    def test_register_usernames_are_case_sensitive(self, auth_service):
        first = auth_service.register(creds("alice"))
        second = auth_service.register(creds("Alice"))
        assert first.id != second.id

    def test_register_other_integrity_error_is_database_error(self, auth_service, database):
        """A constraint failure that is not the username uniqueness is internal."""
        with database.get_core() as core:
            core._conn.execute(
                """CREATE TRIGGER reject_users BEFORE INSERT ON users
                   BEGIN SELECT RAISE(ABORT, 'rejected'); END"""
            )

        with pytest.raises(DatabaseError):
            auth_service.register(creds())

    def test_register_unexpected_database_failure(self, auth_service, database):
        with database.get_core() as core:
            core._conn.execute("DROP TABLE tasks")
            core._conn.execute("DROP TABLE users")

        with pytest.raises(DatabaseError):
            auth_service.register(creds())

    def test_is_duplicate_username_only_for_username(self, test_db):
        test_db.execute(
            "INSERT INTO users (id, username, password_hash, created_at) VALUES ('1', 'a', 'h', 'now')"
        )
        with pytest.raises(sqlite3.IntegrityError) as by_name:
            test_db.execute(
                "INSERT INTO users (id, username, password_hash, created_at) VALUES ('2', 'a', 'h', 'now')"
            )
        with pytest.raises(sqlite3.IntegrityError) as by_id:
            test_db.execute(
                "INSERT INTO users (id, username, password_hash, created_at) VALUES ('1', 'b', 'h', 'now')"
            )

        assert service._is_duplicate_username(by_name.value) is True
        assert service._is_duplicate_username(by_id.value) is False


# ============================================================================
# Login Tests
# ============================================================================


class TestLogin:
    """Tests for AuthService.login."""

    def test_register_then_login_returns_verifiable_token(self, auth_service):
        auth_service.register(creds())

        result = auth_service.login(creds())

        assert result.token_type == "bearer"
        assert result.expires_in == 3600
        payload = validate_access_token(result.access_token, TEST_SECRET)
        assert payload.username == "alice"
        assert payload.exp - payload.iat == 3600

    def test_token_carries_no_password_material(self, auth_service):
        auth_service.register(creds())
        result = auth_service.login(creds())

        claims = pyjwt.decode(result.access_token, options={"verify_signature": False})
        assert set(claims) == {"username", "iat", "exp"}

    def test_login_wrong_password(self, auth_service):
        auth_service.register(creds())

        with pytest.raises(AuthenticationError):
            auth_service.login(creds(password="WrongPass456"))

    def test_login_unknown_user_indistinguishable_from_wrong_password(self, auth_service):
        auth_service.register(creds())

        with pytest.raises(AuthenticationError) as wrong_password:
            auth_service.login(creds(password="WrongPass456"))
        with pytest.raises(AuthenticationError) as unknown_user:
            auth_service.login(creds(username="nobody"))

        assert type(wrong_password.value) is type(unknown_user.value)
        assert wrong_password.value.message == unknown_user.value.message
        assert wrong_password.value.details == unknown_user.value.details

    def test_login_username_case_sensitive(self, auth_service):
        auth_service.register(creds("alice"))

        with pytest.raises(AuthenticationError):
            auth_service.login(creds("ALICE"))

    def test_login_uses_configured_expiry(self, database):
        short_lived = service.AuthService(
            database, secret_key=TEST_SECRET, token_expiry_seconds=60, bcrypt_rounds=4
        )
        short_lived.register(creds())

        result = short_lived.login(creds())

        assert result.expires_in == 60
        payload = validate_access_token(result.access_token, TEST_SECRET)
        assert payload.exp - payload.iat == 60

    def test_login_rehashes_password_stored_at_other_cost(self, database, auth_service):
        """Both failed-login paths cost the same once stored hashes match the configured cost."""
        stronger = service.AuthService(database, secret_key=TEST_SECRET, bcrypt_rounds=5)
        stronger.register(creds())
        with database.get_core() as core:
            assert core.user.get_by_username("alice")["password_hash"].startswith("$2b$05$")

        auth_service.login(creds())

        with database.get_core() as core:
            stored = core.user.get_by_username("alice")["password_hash"]
        assert service.hash_rounds(stored) == service.hash_rounds(auth_service._dummy_hash) == 4
        assert service.verify_password(TEST_PASSWORD, stored) is True

    def test_login_keeps_hash_at_configured_cost(self, database, auth_service):
        auth_service.register(creds())
        with database.get_core() as core:
            before = core.user.get_by_username("alice")["password_hash"]

        auth_service.login(creds())

        with database.get_core() as core:
            assert core.user.get_by_username("alice")["password_hash"] == before

    def test_failed_login_does_not_rehash(self, database, auth_service):
        stronger = service.AuthService(database, secret_key=TEST_SECRET, bcrypt_rounds=5)
        stronger.register(creds())

        with pytest.raises(AuthenticationError):
            auth_service.login(creds(password="WrongPass456"))

        with database.get_core() as core:
            assert service.hash_rounds(core.user.get_by_username("alice")["password_hash"]) == 5


class TestUserLookup:
    """Tests for user lookup helpers."""

    def test_get_user_by_username(self, auth_service, alice):
        found = auth_service.get_user_by_username("alice")
        assert found == alice

    def test_get_user_by_username_not_found(self, auth_service):
        assert auth_service.get_user_by_username("nobody") is None
