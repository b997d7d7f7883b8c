"""Credential store and authenticator.

Owns user identity records: registration (hash + uniqueness check) and
login (hash comparison + token issuance). Password hashes never leave
this module; everything returned is a public User or a token.
"""

import logging
import sqlite3
from functools import cached_property

import bcrypt

from ..db import Database
from ..exceptions import AuthenticationError, ConflictError, DatabaseError
from ..utils import isodatetime
from . import token
from .schemas import TokenResponse, User, UserCredentials

logger = logging.getLogger(__name__)

DEFAULT_BCRYPT_ROUNDS = 12

# Same message for unknown user and wrong password.
INVALID_CREDENTIALS_MESSAGE = "Invalid username or password"


# ============================================================================
# Password Hashing
# ============================================================================


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt and a fresh random salt.

    Returns:
        60-character bcrypt hash string ($2b$...)
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def hash_rounds(password_hash: str) -> int | None:
    """Cost factor of a bcrypt hash ('$2b$12$...' -> 12), or None if malformed."""
    try:
        return int(password_hash.split("$")[2])
    except (IndexError, ValueError):
        return None


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain text password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash or over-long password
        return False


def row_to_user(row: sqlite3.Row) -> User:
    """Convert a users row to the public User schema (drops password_hash)."""
    return User(
        id=row["id"],
        username=row["username"],
        created_at=isodatetime.to_datetime(row["created_at"]),
    )


def _is_duplicate_username(error: sqlite3.IntegrityError) -> bool:
    """Tell a username uniqueness violation apart from other integrity errors."""
    return (
        error.sqlite_errorname == "SQLITE_CONSTRAINT_UNIQUE"
        and "users.username" in str(error)
    )


# ============================================================================
# Auth Service
# ============================================================================


class AuthService:
    """Registration and login against the user store.

    Args:
        database: Database handle
        secret_key: JWT signing secret
        token_expiry_seconds: Lifetime of issued tokens
        bcrypt_rounds: bcrypt cost factor for new hashes
    """

    def __init__(
        self,
        database: Database,
        secret_key: str,
        token_expiry_seconds: int = token.DEFAULT_EXPIRY_SECONDS,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
    ):
        self._database = database
        self._secret_key = secret_key
        self._token_expiry_seconds = token_expiry_seconds
        self._bcrypt_rounds = bcrypt_rounds

    @cached_property
    def _dummy_hash(self) -> str:
        # Compared against when the username is unknown so both failure
        # paths pay for one bcrypt check. Stored hashes are brought to the
        # same cost on login (see _upgrade_hash), so the costs match.
        return hash_password("not-a-real-password", rounds=self._bcrypt_rounds)

    def _upgrade_hash(self, core, row: sqlite3.Row, password: str) -> None:
        """Re-hash a verified password stored at a different bcrypt cost."""
        if hash_rounds(row["password_hash"]) == self._bcrypt_rounds:
            return
        core.user.update_password_hash(
            row["id"], hash_password(password, rounds=self._bcrypt_rounds)
        )
        logger.info(f"Password hash re-hashed at cost {self._bcrypt_rounds}: {row['username']}")

    def register(self, credentials: UserCredentials) -> User:
        """Create a user account.

        Raises:
            ConflictError: If the username is already taken
            DatabaseError: On any other persistence failure
        """
        password_hash = hash_password(credentials.password, rounds=self._bcrypt_rounds)

        try:
            with self._database.get_core() as core:
                user_id = core.user.create(credentials.username, password_hash)
                row = core.user.get_by_id(user_id)
        except sqlite3.IntegrityError as e:
            if _is_duplicate_username(e):
                logger.warning(f"Registration failed (username exists): {credentials.username}")
                raise ConflictError(
                    "Username already exists",
                    {"username": credentials.username}
                ) from e
            logger.error(f"Registration failed with integrity error: {e}")
            raise DatabaseError("Failed to register user") from e
        except sqlite3.Error as e:
            logger.error(f"Registration failed with database error: {e}")
            raise DatabaseError("Failed to register user") from e

        logger.info(f"User registered: {credentials.username}")
        return row_to_user(row)

    def login(self, credentials: UserCredentials) -> TokenResponse:
        """Verify credentials and issue an access token.

        Raises:
            AuthenticationError: If the user does not exist or the password
                is wrong (indistinguishable)
        """
        with self._database.get_core() as core:
            row = core.user.get_by_username(credentials.username)

            if row is None:
                verify_password(credentials.password, self._dummy_hash)
                valid = False
            else:
                valid = verify_password(credentials.password, row["password_hash"])

            if valid:
                self._upgrade_hash(core, row, credentials.password)

        if not valid:
            logger.warning(f"Failed login attempt for username: {credentials.username}")
            raise AuthenticationError(INVALID_CREDENTIALS_MESSAGE)

        access_token = token.generate_access_token(
            row["username"],
            self._secret_key,
            expiry_seconds=self._token_expiry_seconds,
        )

        logger.info(f"Successful login: {row['username']}")
        return TokenResponse(
            access_token=access_token,
            token_type="bearer",
            expires_in=self._token_expiry_seconds,
        )

    def get_user_by_username(self, username: str) -> User | None:
        """Public view of a stored user, or None if the username is unknown."""
        with self._database.get_core() as core:
            row = core.user.get_by_username(username)
        return row_to_user(row) if row else None
