"""User repository operations.

IMPORT CONVENTION:
- Core accesses these through core.user property
- NO direct import needed when using Core API

Usernames are stored exactly as given and compared case-sensitively.
The users.username UNIQUE constraint is the source of truth for
uniqueness; create() lets the resulting sqlite3.IntegrityError propagate.
"""

import sqlite3

from ..utils import isodatetime, uid


class UserOperations:
    """User identity records.

    Rows returned here include password_hash. Callers convert them to
    public schemas before anything leaves the service layer.
    """

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def create(self, username: str, password_hash: str) -> str:
        """Insert a user with an auto-generated UUID.

        Args:
            username: Unique, case-sensitive username
            password_hash: bcrypt hash of the password

        Returns:
            The new user ID

        Raises:
            sqlite3.IntegrityError: If the username already exists
        """
        user_id = uid.generate_uuid()
        self._conn.execute(
            """INSERT INTO users (id, username, password_hash, created_at)
               VALUES (?, ?, ?, ?)""",
            (user_id, username, password_hash, isodatetime.now())
        )
        return user_id

    def get_by_username(self, username: str) -> sqlite3.Row | None:
        """Look up a user by exact username, or None."""
        return self._conn.execute(
            "SELECT * FROM users WHERE username = ?",
            (username,)
        ).fetchone()

    def get_by_id(self, user_id: str) -> sqlite3.Row | None:
        """Look up a user by ID, or None."""
        return self._conn.execute(
            "SELECT * FROM users WHERE id = ?",
            (user_id,)
        ).fetchone()

    def update_password_hash(self, user_id: str, password_hash: str) -> int:
        """Replace a user's password hash. Returns rows affected."""
        cursor = self._conn.execute(
            "UPDATE users SET password_hash = ? WHERE id = ?",
            (password_hash, user_id)
        )
        return cursor.rowcount
