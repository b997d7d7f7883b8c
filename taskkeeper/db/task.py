"""Task repository operations.

IMPORT CONVENTION:
- Core accesses these through core.task property

OWNERSHIP SCOPING:
Every read and write takes owner_id and puts it in the WHERE clause.
There is no way to reach a task through this class without naming its
owner, so a task belonging to someone else looks exactly like a task
that does not exist.
"""

import sqlite3
from typing import Any

from . import query
from ..exceptions import ResourceNotFound
from ..utils import isodatetime, uid

# Substring match on title or description, case-insensitive.
# casefold() is registered on every connection by create_connection().
_SEARCH_FRAGMENT = (
    "(instr(casefold(title), casefold(?)) > 0"
    " OR instr(casefold(description), casefold(?)) > 0)"
)


class TaskOperations:
    """Task operations scoped by owner."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def create(
        self,
        owner_id: str,
        title: str,
        description: str,
        status: str = "OPEN"
    ) -> str:
        """Create a task with an auto-generated UUID.

        Args:
            owner_id: ID of the owning user
            title: Task title
            description: Task description
            status: Initial status (default: OPEN)

        Returns:
            The new task ID

        Raises:
            sqlite3.IntegrityError: If owner_id does not reference a user
        """
        task_id = uid.generate_uuid()
        now = isodatetime.now()

        self._conn.execute(
            """INSERT INTO tasks (id, title, description, status, owner_id, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (task_id, title, description, status, owner_id, now, now)
        )

        return task_id

    def get_by_id(self, task_id: str, owner_id: str) -> sqlite3.Row:
        """Get task by ID within the owner's tasks.

        Raises:
            ResourceNotFound: If no task with that ID belongs to owner_id
        """
        row = self._conn.execute(
            "SELECT * FROM tasks WHERE id = ? AND owner_id = ?",
            (task_id, owner_id)
        ).fetchone()

        if not row:
            raise ResourceNotFound(
                f"Task '{task_id}' not found",
                {"task_id": task_id}
            )

        return row

    def list(self, owner_id: str, filters: dict[str, Any] | None = None) -> list[sqlite3.Row]:
        """List the owner's tasks with optional filtering.

        Args:
            owner_id: ID of the owning user
            filters: Dictionary of filter conditions:
                - status: exact status value
                - search: substring of title or description (case-insensitive)

        Returns:
            List of sqlite3.Row objects. No ordering is applied.
        """
        filters = filters or {}
        conditions = {
            "owner_id": owner_id,
            "status": filters.get("status"),
            "search": filters.get("search"),
        }

        where_clause, params = query.build_where_clause(
            conditions,
            param_map={"search": _SEARCH_FRAGMENT}
        )

        return self._conn.execute(
            f"SELECT * FROM tasks WHERE {where_clause}",
            params
        ).fetchall()

    def update(self, task_id: str, owner_id: str, data: dict[str, Any]) -> int:
        """Update the owner's task with partial data.

        Note:
            - Only non-None fields in data are updated
            - id and owner_id are never updated
            - updated_at is refreshed whenever something changes

        Returns:
            Number of rows affected (0 or 1)
        """
        update_clause, params = query.build_update_clause(
            data,
            exclude={"id", "owner_id", "created_at", "updated_at"}
        )

        if not update_clause:
            return 0

        params.extend([isodatetime.now(), task_id, owner_id])
        cursor = self._conn.execute(
            f"UPDATE tasks SET {update_clause}, updated_at = ? WHERE id = ? AND owner_id = ?",
            params
        )
        return cursor.rowcount

    def delete(self, task_id: str, owner_id: str) -> int:
        """Hard-delete the owner's task.

        Returns:
            Number of rows affected. 0 means the task does not exist
            or belongs to someone else.
        """
        cursor = self._conn.execute(
            "DELETE FROM tasks WHERE id = ? AND owner_id = ?",
            (task_id, owner_id)
        )
        return cursor.rowcount
