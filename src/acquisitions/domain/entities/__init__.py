"""Domain entities for the Acquisitions API."""

from acquisitions.domain.entities.user import PublicUser, UserRole

__all__ = ["PublicUser", "UserRole"]
