"""Task operations scoped to the authenticated user."""

import logging
import sqlite3

from ..auth.schemas import User
from ..db import Database
from ..exceptions import ResourceNotFound
from ..utils import isodatetime
from .schemas import Task, TaskCreate, TaskFilter, TaskStatus

logger = logging.getLogger(__name__)


def row_to_task(row: sqlite3.Row) -> Task:
    """Convert a tasks row to the Task schema."""
    return Task(
        id=row["id"],
        title=row["title"],
        description=row["description"],
        status=TaskStatus(row["status"]),
        owner_id=row["owner_id"],
        created_at=isodatetime.to_datetime(row["created_at"]),
        updated_at=isodatetime.to_datetime(row["updated_at"]),
    )


class TaskService:
    """CRUD over tasks, every call scoped to ``owner``.

    Args:
        database: Database handle
    """

    def __init__(self, database: Database):
        self._database = database

    def create(self, data: TaskCreate, owner: User) -> Task:
        """Create a task with status OPEN owned by ``owner``."""
        with self._database.get_core() as core:
            task_id = core.task.create(
                owner_id=owner.id,
                title=data.title,
                description=data.description,
                status=TaskStatus.OPEN.value,
            )
            row = core.task.get_by_id(task_id, owner.id)

        logger.info(f"Task created: {task_id} for user {owner.username}")
        return row_to_task(row)

    def list(self, filters: TaskFilter, owner: User) -> list[Task]:
        """List the owner's tasks matching every given filter.

        The result has no defined order.
        """
        with self._database.get_core() as core:
            rows = core.task.list(
                owner.id,
                {
                    "status": filters.status.value if filters.status else None,
                    "search": filters.search,
                },
            )
        return [row_to_task(row) for row in rows]

    def get_by_id(self, task_id: str, owner: User) -> Task:
        """Get one of the owner's tasks.

        Raises:
            ResourceNotFound: If the task does not exist or is not the owner's
        """
        with self._database.get_core() as core:
            row = core.task.get_by_id(task_id, owner.id)
        return row_to_task(row)

    def update_status(self, task_id: str, status: TaskStatus, owner: User) -> Task:
        """Set a task's status. Any status may follow any other.

        Raises:
            ResourceNotFound: If the task does not exist or is not the owner's
        """
        with self._database.get_core() as core:
            core.task.get_by_id(task_id, owner.id)
            core.task.update(task_id, owner.id, {"status": status.value})
            row = core.task.get_by_id(task_id, owner.id)

        logger.info(f"Task {task_id} status set to {status.value}")
        return row_to_task(row)

    def delete(self, task_id: str, owner: User) -> None:
        """Permanently delete one of the owner's tasks.

        Raises:
            ResourceNotFound: If no row was deleted
        """
        with self._database.get_core() as core:
            affected = core.task.delete(task_id, owner.id)

        if affected == 0:
            raise ResourceNotFound(
                f"Task '{task_id}' not found",
                {"task_id": task_id}
            )

        logger.info(f"Task deleted: {task_id} by user {owner.username}")
