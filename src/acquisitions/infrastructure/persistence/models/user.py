"""SQLAlchemy model for the users table.

Emails are stored trimmed and lowercased, so the unique constraint on the
column gives case-insensitive uniqueness.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from acquisitions.infrastructure.persistence.database import Base

EMAIL_UNIQUE_CONSTRAINT = "uq_users_email"


class UserModel(Base):
    """SQLAlchemy model for the users table.

    Attributes:
        id: Primary key assigned by the database.
        name: Display name.
        email: Normalised email address (unique).
        password: Argon2 hash of the user's password.
        role: ``"user"`` or ``"admin"``.
        created_at: Timestamp when the user was created.
        updated_at: Timestamp when the user was last updated.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Trimmed, lowercased email address",
    )
    password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Argon2 password hash",
    )
    role: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="user",
        server_default="user",
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (UniqueConstraint("email", name=EMAIL_UNIQUE_CONSTRAINT),)

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
