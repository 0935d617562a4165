"""Authentication service.

Orchestrates password hashing, the user store and the session cookie for the
three authentication operations: register, authenticate and terminate
session. Business outcomes come back as ``AuthResult`` values; exceptions are
reserved for faults the caller cannot act on (store or hashing failures).
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Literal

from fastapi import Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from acquisitions.core.logging import get_logger
from acquisitions.domain.entities import PublicUser, UserRole
from acquisitions.infrastructure.auth import (
    SESSION_COOKIE_NAME,
    ComparisonFailure,
    SessionCookieManager,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from acquisitions.infrastructure.persistence.models import UserModel
from acquisitions.infrastructure.persistence.repositories import (
    DuplicateEmailError,
    UserRepository,
)

logger = get_logger(__name__)


class StoreFailure(Exception):
    """Raised when the user store fails for a reason other than a duplicate email."""

    pass


class AuthFailureKind(str, Enum):
    """Business outcomes that end an authentication operation."""

    DUPLICATE_EMAIL = "duplicate_email"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True)
class AuthSuccess:
    """Successful register/authenticate outcome."""

    user: PublicUser
    ok: Literal[True] = True


@dataclass(frozen=True)
class AuthFailure:
    """Failed register/authenticate outcome.

    Attributes:
        kind: Which business rule rejected the request.
        message: Caller-safe message; identical for every cause of a kind.
    """

    kind: AuthFailureKind
    message: str
    ok: Literal[False] = False


AuthResult = AuthSuccess | AuthFailure

DUPLICATE_EMAIL = AuthFailure(
    kind=AuthFailureKind.DUPLICATE_EMAIL,
    message="User with this email already exists",
)
INVALID_CREDENTIALS = AuthFailure(
    kind=AuthFailureKind.INVALID_CREDENTIALS,
    message="Invalid email or password",
)


def normalize_email(email: str) -> str:
    """Trim and lowercase an email address."""
    return email.strip().lower()


def _verify_against_dummy(password: str) -> None:
    verify_password(password, dummy_password_hash())


class AuthService:
    """Service for user registration, sign-in and sign-out."""

    def __init__(self, session: AsyncSession, cookie_manager: SessionCookieManager) -> None:
        """Initialize the auth service.

        Args:
            session: Request-scoped SQLAlchemy async session.
            cookie_manager: Session cookie helper.
        """
        self.session = session
        self.cookie_manager = cookie_manager
        self.user_repo = UserRepository(session)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: str = UserRole.USER.value,
    ) -> AuthResult:
        """Create a new user.

        The email pre-check is an optimisation; the unique constraint checked
        at insert time decides concurrent registrations.

        Args:
            name: Display name.
            email: Email address (normalised here).
            password: Plaintext password.
            role: ``"user"`` or ``"admin"``.

        Returns:
            AuthSuccess with the new user, or AuthFailure(DUPLICATE_EMAIL).

        Raises:
            HashingFailure: If the password could not be hashed.
            StoreFailure: If the store fails for any other reason.
        """
        email = normalize_email(email)

        try:
            if await self.user_repo.email_exists(email):
                logger.info("Registration rejected: email exists", email=email)
                return DUPLICATE_EMAIL

            password_hash = await asyncio.to_thread(hash_password, password)

            user = UserModel(name=name, email=email, password=password_hash, role=role)
            await self.user_repo.create(user)
            await self.session.commit()
            await self.session.refresh(user)
        except DuplicateEmailError:
            await self.session.rollback()
            logger.info("Registration rejected: unique constraint", email=email)
            return DUPLICATE_EMAIL
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Error creating the user", email=email, error=str(e), exc_info=True)
            raise StoreFailure("Failed to create user") from e

        logger.info("User created successfully", user_id=user.id, email=user.email)
        return AuthSuccess(user=PublicUser.from_model(user))

    async def authenticate(self, email: str, password: str) -> AuthResult:
        """Check a user's credentials.

        Unknown email, wrong password and an unreadable stored hash all give
        the same AuthFailure.

        Args:
            email: Email address (normalised here).
            password: Plaintext password.

        Returns:
            AuthSuccess with the user, or AuthFailure(INVALID_CREDENTIALS).

        Raises:
            StoreFailure: If the lookup fails.
        """
        email = normalize_email(email)

        try:
            user = await self.user_repo.get_by_email(email)
        except SQLAlchemyError as e:
            logger.error("Error looking up user", email=email, error=str(e), exc_info=True)
            raise StoreFailure("Failed to look up user") from e

        if user is None:
            await asyncio.to_thread(_verify_against_dummy, password)
            logger.info("Authentication failed", email=email)
            return INVALID_CREDENTIALS

        try:
            password_valid = await asyncio.to_thread(verify_password, password, user.password)
        except ComparisonFailure:
            logger.error("Stored password hash is unreadable", user_id=user.id, exc_info=True)
            return INVALID_CREDENTIALS

        if not password_valid:
            logger.info("Authentication failed", email=email)
            return INVALID_CREDENTIALS

        logger.info("User authenticated successfully", user_id=user.id, email=user.email)
        return AuthSuccess(user=PublicUser.from_model(user))

    def terminate_session(self, response: Response) -> None:
        """Clear the session cookie. Safe to call without an active session."""
        self.cookie_manager.clear(response, SESSION_COOKIE_NAME)
