"""User projections shared between the service and API layers.

The persisted row lives in ``UserModel``; outside the persistence layer a user
is only ever handed around as a ``PublicUser``, which has no password field.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class UserRole(str, Enum):
    """Roles a user can hold."""

    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class PublicUser:
    """A user with the password attribute stripped.

    Attributes:
        id: Store-assigned identifier.
        name: Display name.
        email: Normalised (trimmed, lowercased) email address.
        role: Role name, ``"user"`` or ``"admin"``.
        created_at: When the user row was created.
    """

    id: int
    name: str
    email: str
    role: str
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, model: Any) -> "PublicUser":
        """Build the projection from a persisted user row."""
        return cls(
            id=model.id,
            name=model.name,
            email=model.email,
            role=model.role,
            created_at=model.created_at,
        )
