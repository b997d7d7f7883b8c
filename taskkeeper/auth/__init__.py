"""Authentication module for TaskKeeper.

This module provides authentication and authorization functionality:
- Schema validation for credentials and tokens
- Password hashing and verification (bcrypt)
- JWT token generation and validation
- Access guard resolving bearer tokens to users

Auth endpoints (top-level routes, not under /api/v1/):
- POST /auth/register - Create account
- POST /auth/login - Authenticate and return JWT token
- GET /auth/me - Get current user info
"""

from . import schemas, token

__all__ = ["schemas", "token"]
