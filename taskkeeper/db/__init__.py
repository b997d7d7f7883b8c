"""Database module for TaskKeeper.

This module provides the Core API for database operations.
Core encapsulates one connection (one unit of work) and exposes the
repositories for each entity type.

ARCHITECTURE:
- Database knows where the store lives and hands out Core instances
- Core owns its connection (no Flask g.db dependency)
- Core is a context manager: commit on success, rollback on error,
  connection closed on exit
- Each entity type gets an encapsulated operations class (repository)

    database = Database(settings.database_path)
    with database.get_core() as core:
        user_id = core.user.create("alice", password_hash)
        task_id = core.task.create(user_id, "Title", "Description")

LOADING POLICY:
Repositories never load related records implicitly. Fetching a user does
not fetch its tasks; callers ask core.task for them with the owner id.

ID GENERATION POLICY:
All entity IDs are auto-generated UUIDs inside the repositories. Callers
never supply ids on create.
"""

import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .task import TaskOperations
    from .user import UserOperations

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).parent / "schema.sql"


class Core:
    """
    Database Core with entity operations.

    Maintains its own connection and transaction state.
    Provides access to entity operations through properties.
    """

    def __init__(self, connection: sqlite3.Connection):
        """Initialize Core with a database connection.

        Args:
            connection: SQLite connection with row_factory set to sqlite3.Row
        """
        self._conn = connection
        self._user_ops = None
        self._task_ops = None

    @property
    def user(self) -> "UserOperations":
        """User operations.

        Lazy-loaded to avoid circular import issues.
        Operations are created on first access and cached.
        """
        if self._user_ops is None:
            from .user import UserOperations
            self._user_ops = UserOperations(self._conn)
        return self._user_ops

    @property
    def task(self) -> "TaskOperations":
        """Task operations, always scoped by owner id."""
        if self._task_ops is None:
            from .task import TaskOperations
            self._task_ops = TaskOperations(self._conn)
        return self._task_ops

    def __enter__(self) -> "Core":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager, committing or rolling back transaction.

        Args:
            exc_type: Exception type if exception occurred, else None
            exc_val: Exception value if exception occurred, else None
            exc_tb: Exception traceback if exception occurred, else None
        """
        try:
            if exc_type is None:
                self._conn.commit()
            else:
                self._conn.rollback()
        finally:
            self._conn.close()


def create_connection(database_path: str) -> sqlite3.Connection:
    """Create a fresh database connection.

    Returns:
        SQLite connection with row_factory set to sqlite3.Row,
        foreign keys enabled, and a ``casefold`` SQL function registered
        for Unicode-aware case-insensitive matching.
    """
    if database_path != ":memory:":
        Path(database_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(database_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    return conn


def _casefold(value):
    if value is None:
        return None
    return str(value).casefold()


class Database:
    """Handle on the relational store.

    Constructed once per application and passed explicitly to the services
    that need persistence.
    """

    def __init__(self, database_path: str):
        self.database_path = database_path

    def connect(self) -> sqlite3.Connection:
        return create_connection(self.database_path)

    def get_core(self) -> Core:
        """
        Get a database Core instance for one unit of work.

        Examples:
            >>> with database.get_core() as core:
            ...     row = core.task.get_by_id(task_id, owner_id)
            ...     # Committed and closed on exit
        """
        return Core(self.connect())

    def init_db(self) -> bool:
        """Initialize database by running schema.sql if not already initialized.

        Returns:
            True if the schema was applied, False if it already existed.
        """
        with self.get_core() as core:
            cursor = core._conn.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name='_schema_metadata'"
            )
            if cursor.fetchone():
                return False

            schema_sql = SCHEMA_PATH.read_text()
            core._conn.executescript(schema_sql)

        logger.info(f"Database schema applied at {self.database_path}")
        return True
