"""Authentication Pydantic schemas for API validation."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

USERNAME_MIN_LENGTH = 4
USERNAME_MAX_LENGTH = 20
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 32
# bcrypt only looks at the first 72 bytes of its input
PASSWORD_MAX_BYTES = 72


class UserCredentials(BaseModel):
    """Username and password, used for both registration and login."""

    username: str = Field(
        ...,
        min_length=USERNAME_MIN_LENGTH,
        max_length=USERNAME_MAX_LENGTH,
        description="Unique, case-sensitive username"
    )
    password: str = Field(
        ...,
        min_length=PASSWORD_MIN_LENGTH,
        max_length=PASSWORD_MAX_LENGTH,
        description="Plain text password (hashed before storage)"
    )

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        """Require upper case, lower case, and a digit or symbol."""
        if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
            raise ValueError(f"password must be at most {PASSWORD_MAX_BYTES} bytes")
        if not any(c.isupper() for c in value):
            raise ValueError("password must contain an upper-case letter")
        if not any(c.islower() for c in value):
            raise ValueError("password must contain a lower-case letter")
        if not any(not c.isalpha() for c in value):
            raise ValueError("password must contain a digit or symbol")
        return value


class User(BaseModel):
    """Public user record. Never carries the password hash."""

    id: str
    username: str
    created_at: datetime


class TokenPayload(BaseModel):
    """Claims embedded in an access token."""

    username: str
    iat: int
    exp: int


class TokenResponse(BaseModel):
    """Response body for a successful login."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
