"""Authentication endpoints for TaskKeeper.

These endpoints handle user authentication and return JSON responses:
- POST /auth/register - Create account
- POST /auth/login - Authenticate and return JWT token
- GET /auth/me - Get current user info

Services are passed in by create_auth_blueprint(); nothing here reaches
for global state.
"""

from flask import Blueprint, jsonify, request

from ..auth.guard import AccessGuard
from ..auth.schemas import UserCredentials
from ..auth.service import AuthService
from .validation import validate_body


def create_auth_blueprint(auth_service: AuthService, guard: AccessGuard) -> Blueprint:
    """Build the auth blueprint around the given services."""
    auth_bp = Blueprint("auth", __name__, url_prefix="/auth")

    @auth_bp.post("/register")
    def register():
        """
        Create a user account.

        Example request:
        ```json
        {"username": "alice", "password": "SecurePass123"}
        ```

        Returns:
            201: User (id, username, created_at)
            400: Validation error
            409: Username already exists
        """
        data = validate_body(UserCredentials, request.get_json(silent=True))
        user = auth_service.register(data)
        return jsonify(user.model_dump(mode="json")), 201

    @auth_bp.post("/login")
    def login():
        """
        Authenticate user and return JWT token.

        Example response:
        ```json
        {
            "access_token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
            "token_type": "bearer",
            "expires_in": 3600
        }
        ```

        Returns:
            200: TokenResponse
            400: Validation error
            401: Invalid username or password
        """
        data = validate_body(UserCredentials, request.get_json(silent=True))
        token_response = auth_service.login(data)
        return jsonify(token_response.model_dump()), 200

    @auth_bp.get("/me")
    def get_current_user():
        """
        Get current user info from JWT token.

        Requires Authorization: Bearer <token>.

        Returns:
            200: User
            401: Missing, invalid or expired token
        """
        user = guard.authenticate(request.headers.get("Authorization"))
        return jsonify(user.model_dump(mode="json")), 200

    return auth_bp
