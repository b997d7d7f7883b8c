"""Task endpoints for TaskKeeper API.

This module implements RESTful endpoints for task management:
- POST   /api/v1/tasks                 - Create task
- GET    /api/v1/tasks                 - List with filtering
- GET    /api/v1/tasks/{id}            - Get single task
- PATCH  /api/v1/tasks/{id}/status     - Update task status
- DELETE /api/v1/tasks/{id}            - Delete task

All endpoints act on flask.g.user's tasks only; the ApiV1 blueprint
sets g.user before any of these run.
"""

from flask import Blueprint, g, jsonify, request

from ...tasks.schemas import TaskCreate, TaskFilter, TaskStatusUpdate
from ...tasks.service import TaskService
from ..validation import validate_body, validate_query


def create_tasks_blueprint(task_service: TaskService) -> Blueprint:
    """Build the tasks blueprint around a TaskService."""
    tasks_bp = Blueprint("tasks", __name__, url_prefix="/tasks")

    @tasks_bp.post("")
    def create_task():
        """
        Create a new task with status OPEN.

        Request Body (TaskCreate):
            - title: str (required, non-empty)
            - description: str (required, non-empty)

        Returns:
            201: Task
            400: Validation error
        """
        data = validate_body(TaskCreate, request.get_json(silent=True))
        task = task_service.create(data, g.user)
        return jsonify(task.model_dump(mode="json")), 201

    @tasks_bp.get("")
    def list_tasks():
        """
        List the caller's tasks.

        Query Parameters:
            - status: OPEN | IN_PROGRESS | DONE
            - search: substring of title or description (case-insensitive)

        Returns:
            200: Array of Task objects, in no particular order
            400: Validation error
        """
        filters = validate_query(TaskFilter, request.args)
        tasks = task_service.list(filters, g.user)
        return jsonify([task.model_dump(mode="json") for task in tasks])

    @tasks_bp.get("/<task_id>")
    def get_task(task_id: str):
        """
        Get a single task by ID.

        Returns:
            200: Task
            404: Task not found
        """
        task = task_service.get_by_id(task_id, g.user)
        return jsonify(task.model_dump(mode="json"))

    @tasks_bp.patch("/<task_id>/status")
    def update_task_status(task_id: str):
        """
        Change a task's status.

        Request Body (TaskStatusUpdate):
            - status: OPEN | IN_PROGRESS | DONE

        Returns:
            200: Task with the new status
            400: Validation error
            404: Task not found
        """
        data = validate_body(TaskStatusUpdate, request.get_json(silent=True))
        task = task_service.update_status(task_id, data.status, g.user)
        return jsonify(task.model_dump(mode="json"))

    @tasks_bp.delete("/<task_id>")
    def delete_task(task_id: str):
        """
        Permanently delete a task.

        Returns:
            204: No content
            404: Task not found
        """
        task_service.delete(task_id, g.user)
        return "", 204

    return tasks_bp
