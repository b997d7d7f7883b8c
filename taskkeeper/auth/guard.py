"""Access guard for protected endpoints.

Stateless bearer-token verification: every request is checked on its own.
The guard verifies signature and expiry, then re-resolves the username
claim against the store so deleted users lose access immediately.

The api/v1 blueprint runs the guard in before_request and stores the
resolved user in flask.g.user.
"""

import logging

import jwt

from ..exceptions import AuthenticationError
from . import token
from .schemas import User
from .service import AuthService

logger = logging.getLogger(__name__)


def parse_bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        AuthenticationError: If the header is missing or malformed
    """
    if not authorization:
        raise AuthenticationError(
            "Authentication required",
            {"code": "missing_auth", "expected": "Authorization: Bearer <token>"}
        )

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0].lower() != "bearer" or not parts[1]:
        raise AuthenticationError(
            "Invalid authorization header format",
            {"code": "invalid_auth_header", "expected": "Authorization: Bearer <token>"}
        )

    return parts[1]


class AccessGuard:
    """Resolves bearer tokens to users.

    Args:
        auth_service: Resolves the username claim to a stored user
        secret_key: JWT signing secret
    """

    def __init__(self, auth_service: AuthService, secret_key: str):
        self._auth_service = auth_service
        self._secret_key = secret_key

    def authenticate(self, authorization: str | None) -> User:
        """Authenticate an Authorization header value."""
        return self.verify(parse_bearer_token(authorization))

    def verify(self, access_token: str) -> User:
        """Verify a token and return the user it names.

        Raises:
            AuthenticationError: If the token is invalid or expired, or the
                user no longer exists
        """
        try:
            payload = token.validate_access_token(access_token, self._secret_key)
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token expired")
            raise AuthenticationError("Token has expired", {"code": "token_expired"})
        except jwt.InvalidTokenError as e:
            logger.warning(f"Invalid JWT token: {e}")
            raise AuthenticationError("Invalid token", {"code": "invalid_token"})

        user = self._auth_service.get_user_by_username(payload.username)
        if user is None:
            logger.warning(f"Token for unknown user: {payload.username}")
            raise AuthenticationError("Invalid token", {"code": "invalid_token"})

        logger.debug(f"JWT authentication successful for user {payload.username}")
        return user
