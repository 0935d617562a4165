"""Authentication infrastructure components.

This module provides password hashing, JWT token services and session
cookie handling.
"""

from acquisitions.infrastructure.auth.cookies import (
    SESSION_COOKIE_NAME,
    SessionCookieManager,
)
from acquisitions.infrastructure.auth.jwt_service import (
    InvalidTokenError,
    JWTService,
    TokenClaims,
)
from acquisitions.infrastructure.auth.password_hasher import (
    ComparisonFailure,
    HashingFailure,
    dummy_password_hash,
    hash_password,
    needs_rehash,
    verify_password,
)

__all__ = [
    "ComparisonFailure",
    "HashingFailure",
    "InvalidTokenError",
    "JWTService",
    "SESSION_COOKIE_NAME",
    "SessionCookieManager",
    "TokenClaims",
    "dummy_password_hash",
    "hash_password",
    "needs_rehash",
    "verify_password",
]
