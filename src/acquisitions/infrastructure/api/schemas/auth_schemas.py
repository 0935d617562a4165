"""Pydantic schemas for authentication endpoints."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field, field_validator

from acquisitions.domain.entities import PublicUser
from acquisitions.infrastructure.auth import TokenClaims

MAX_EMAIL_LENGTH = 255


def _normalize_email(value: object) -> object:
    if isinstance(value, str):
        return value.strip().lower()
    return value


def _check_email_length(value: str) -> str:
    if len(value) > MAX_EMAIL_LENGTH:
        raise ValueError(f"Email must be at most {MAX_EMAIL_LENGTH} characters")
    return value.lower()


class SignUpRequest(BaseModel):
    """Request body for user sign-up."""

    name: str = Field(..., min_length=2, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=6, max_length=128, description="User's password")
    role: Literal["user", "admin"] = Field("user", description="User's role")

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)

    @field_validator("email")
    @classmethod
    def check_email_length(cls, v: str) -> str:
        return _check_email_length(v)


class SignInRequest(BaseModel):
    """Request body for user sign-in."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, max_length=128, description="User's password")

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return _normalize_email(v)

    @field_validator("email")
    @classmethod
    def check_email_length(cls, v: str) -> str:
        return _check_email_length(v)


class UserResponse(BaseModel):
    """User information in auth responses."""

    id: int = Field(..., description="User ID")
    name: str = Field(..., description="Display name")
    email: str = Field(..., description="User's email address")
    role: str = Field(..., description="User's role name")

    @classmethod
    def from_public_user(cls, user: PublicUser) -> "UserResponse":
        return cls(id=user.id, name=user.name, email=user.email, role=user.role)


class AuthResponse(BaseModel):
    """Response for a successful sign-up or sign-in."""

    message: str = Field(..., description="Human-readable outcome")
    user: UserResponse = Field(..., description="User information")


class SessionUser(BaseModel):
    """Claims of the current session token."""

    id: int
    email: str
    role: str

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> "SessionUser":
        return cls(id=claims.id, email=claims.email, role=claims.role)


class SessionResponse(BaseModel):
    """Response for the current-session endpoint."""

    user: SessionUser


class MessageResponse(BaseModel):
    """Plain message response."""

    message: str


class ErrorResponse(BaseModel):
    """Response for business-rule and internal errors."""

    error: str = Field(..., description="Error summary")
    message: str | None = Field(None, description="Additional detail")


class ValidationErrorDetail(BaseModel):
    """Detail for a single validation error."""

    field: str = Field(..., description="Field name that failed validation")
    message: str = Field(..., description="Human-readable error message")


class ValidationErrorResponse(BaseModel):
    """Response for validation errors."""

    error: str = Field(..., description="Error type")
    details: list[ValidationErrorDetail] = Field(..., description="List of validation errors")


class HealthResponse(BaseModel):
    """Liveness information."""

    status: str
    timestamp: str
    uptime_seconds: float = Field(..., serialization_alias="uptimeSeconds")
