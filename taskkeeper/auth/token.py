"""JWT access tokens.

Tokens are HS256-signed and carry three claims:
- username: identifies the user (re-resolved against the store on use)
- iat: issued-at, Unix seconds
- exp: expiry, Unix seconds

The secret and lifetime are configuration; callers pass them in.
"""

from typing import Any

import jwt
from pydantic import ValidationError as PydanticValidationError

from ..utils import isodatetime
from .schemas import TokenPayload

ALGORITHM = "HS256"
DEFAULT_EXPIRY_SECONDS = 3600
REQUIRED_CLAIMS = ["username", "iat", "exp"]


def generate_access_token(
    username: str,
    secret_key: str,
    expiry_seconds: int = DEFAULT_EXPIRY_SECONDS
) -> str:
    """Generate a signed access token for a username.

    Args:
        username: Username to embed
        secret_key: HMAC signing secret
        expiry_seconds: Token lifetime (default: one hour)

    Returns:
        Encoded JWT string
    """
    issued_at = isodatetime.now_unix()
    payload = {
        "username": username,
        "iat": issued_at,
        "exp": issued_at + expiry_seconds,
    }
    return jwt.encode(payload, secret_key, algorithm=ALGORITHM)


def validate_access_token(token: str, secret_key: str) -> TokenPayload:
    """Verify signature and expiry, and return the token claims.

    Raises:
        jwt.ExpiredSignatureError: If the token has expired
        jwt.InvalidTokenError: If the signature is wrong, the token is
            malformed, or a required claim is missing
    """
    payload = jwt.decode(
        token,
        secret_key,
        algorithms=[ALGORITHM],
        options={"require": REQUIRED_CLAIMS},
    )
    try:
        return TokenPayload(**payload)
    except PydanticValidationError as e:
        raise jwt.InvalidTokenError(f"Malformed token claims: {e.error_count()} error(s)") from e


def decode_token_no_validation(token: str) -> dict[str, Any]:
    """Decode claims without checking signature or expiry.

    For introspection only; never use the result to authenticate.
    """
    return jwt.decode(token, options={"verify_signature": False, "verify_exp": False})


def get_token_expiry_remaining(token: str) -> int:
    """Seconds until the token expires (negative once expired)."""
    payload = decode_token_no_validation(token)
    return int(payload["exp"]) - isodatetime.now_unix()


def is_token_expired(token: str) -> bool:
    return get_token_expiry_remaining(token) <= 0
