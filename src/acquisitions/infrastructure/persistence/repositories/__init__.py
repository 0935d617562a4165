"""Repositories wrapping database access for the domain services."""

from acquisitions.infrastructure.persistence.repositories.user_repository import (
    DuplicateEmailError,
    UserRepository,
)

__all__ = ["DuplicateEmailError", "UserRepository"]
