"""API v1 endpoints for TaskKeeper.

The ApiV1 blueprint aggregates all v1 resources (currently tasks) and
authenticates every request before it reaches an endpoint. The resolved
user is stored in flask.g.user.
"""

from flask import Blueprint, g, request

from ...auth.guard import AccessGuard
from ...tasks.service import TaskService
from .tasks import create_tasks_blueprint


def create_api_v1_blueprint(task_service: TaskService, guard: AccessGuard) -> Blueprint:
    """Build the ApiV1 blueprint with authentication middleware."""
    api_v1_bp = Blueprint("api_v1", __name__)

    @api_v1_bp.before_request
    def authenticate():
        """
        Require authentication for all API v1 endpoints.

        Raises:
            AuthenticationError: If no valid bearer token is provided
        """
        g.user = guard.authenticate(request.headers.get("Authorization"))

    # tasks blueprint has url_prefix="/tasks", full path is <api_v1_prefix>/tasks
    api_v1_bp.register_blueprint(create_tasks_blueprint(task_service))

    return api_v1_bp


__all__ = ["create_api_v1_blueprint"]
