"""Pydantic schemas for API requests and responses."""

from acquisitions.infrastructure.api.schemas.auth_schemas import (
    AuthResponse,
    ErrorResponse,
    HealthResponse,
    MessageResponse,
    SessionResponse,
    SessionUser,
    SignInRequest,
    SignUpRequest,
    UserResponse,
    ValidationErrorDetail,
    ValidationErrorResponse,
)

__all__ = [
    "AuthResponse",
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "SessionResponse",
    "SessionUser",
    "SignInRequest",
    "SignUpRequest",
    "UserResponse",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
]
