"""Domain services for the Acquisitions API.

Services contain the business logic that sits between the HTTP handlers and
the persistence layer.
"""

from acquisitions.domain.services.auth_service import (
    INVALID_CREDENTIALS,
    DUPLICATE_EMAIL,
    AuthFailure,
    AuthFailureKind,
    AuthResult,
    AuthService,
    AuthSuccess,
    StoreFailure,
    normalize_email,
)

__all__ = [
    "AuthFailure",
    "AuthFailureKind",
    "AuthResult",
    "AuthService",
    "AuthSuccess",
    "DUPLICATE_EMAIL",
    "INVALID_CREDENTIALS",
    "StoreFailure",
    "normalize_email",
]
