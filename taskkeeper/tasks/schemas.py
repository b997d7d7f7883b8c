"""Task Pydantic schemas for API validation."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field


class TaskStatus(str, Enum):
    """Task status. Any value may follow any other."""

    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskCreate(BaseModel):
    """Request body for creating a task."""

    title: str = Field(..., min_length=1, description="Task title")
    description: str = Field(..., min_length=1, description="Task description")


class TaskStatusUpdate(BaseModel):
    """Request body for changing a task's status."""

    status: TaskStatus


class TaskFilter(BaseModel):
    """Query parameters for listing tasks. All fields optional."""

    status: TaskStatus | None = None
    search: str | None = Field(
        default=None,
        min_length=1,
        description="Case-insensitive substring of title or description"
    )


class Task(BaseModel):
    """Task record as returned to its owner."""

    id: str
    title: str
    description: str
    status: TaskStatus
    owner_id: str
    created_at: datetime
    updated_at: datetime
