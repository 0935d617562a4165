"""User repository for database operations."""

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from acquisitions.infrastructure.persistence.models import UserModel
from acquisitions.infrastructure.persistence.models.user import EMAIL_UNIQUE_CONSTRAINT


class DuplicateEmailError(Exception):
    """Raised when an insert violates the unique email constraint."""

    pass


def is_duplicate_email_violation(error: IntegrityError) -> bool:
    """Check whether an IntegrityError comes from the email unique constraint.

    Postgres reports the constraint name, SQLite reports ``users.email``.
    """
    message = str(error.orig)
    return EMAIL_UNIQUE_CONSTRAINT in message or (
        "UNIQUE constraint failed" in message and "users.email" in message
    )


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        """Insert a new user and flush so the id is assigned.

        Args:
            user: User model to create.

        Returns:
            Created user model.

        Raises:
            DuplicateEmailError: If another row already holds the email.
            IntegrityError: For any other constraint violation.
        """
        self.session.add(user)
        try:
            await self.session.flush()
        except IntegrityError as e:
            if is_duplicate_email_violation(e):
                raise DuplicateEmailError(user.email) from e
            raise
        return user

    async def get_by_email(self, email: str) -> UserModel | None:
        """Get a user by normalised email.

        Args:
            email: Trimmed, lowercased email address.

        Returns:
            User model if found, None otherwise.
        """
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email).limit(1)
        )
        return result.scalar_one_or_none()

    async def email_exists(self, email: str) -> bool:
        """Check if an email is already registered.

        Args:
            email: Trimmed, lowercased email address.

        Returns:
            True if the email exists, False otherwise.
        """
        result = await self.session.execute(
            select(UserModel.id).where(UserModel.email == email).limit(1)
        )
        return result.scalar_one_or_none() is not None
