"""JWT token service.

Signs and verifies the session token carried in the ``token`` cookie. The
claim set is ``{id, email, role}`` plus issuer, subject and timestamps.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from acquisitions.core.config import Settings
from acquisitions.core.logging import get_logger

logger = get_logger(__name__)


class InvalidTokenError(Exception):
    """Raised when a token cannot be verified.

    Expired, tampered and malformed tokens all raise this same error with the
    same message; the reason is only logged.
    """

    pass


@dataclass(frozen=True)
class TokenClaims:
    """Claims carried by a session token."""

    id: int
    email: str
    role: str


class JWTService:
    """Service for signing and verifying session tokens."""

    ALGORITHM = "HS256"
    ISSUER = "acquisitions"

    def __init__(self, secret_key: str, expires_delta: timedelta = timedelta(days=1)) -> None:
        """Initialize the JWT service.

        Args:
            secret_key: Secret key for signing tokens.
            expires_delta: Default token lifetime.
        """
        if not secret_key:
            raise ValueError("JWT secret key is required")
        self._secret_key = secret_key
        self.expires_delta = expires_delta

    @classmethod
    def from_settings(cls, settings: Settings) -> "JWTService":
        """Build the service from application settings."""
        return cls(secret_key=settings.jwt_secret, expires_delta=settings.jwt_expires_delta)

    def sign(self, claims: TokenClaims, expires_delta: timedelta | None = None) -> str:
        """Sign a token for the given claims.

        Args:
            claims: Subject id, email and role.
            expires_delta: Custom lifetime. Defaults to the configured one.

        Returns:
            Encoded JWT.
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta if expires_delta is not None else self.expires_delta)

        payload = {
            "iss": self.ISSUER,
            "sub": str(claims.id),
            "iat": now,
            "exp": expire,
            "id": claims.id,
            "email": claims.email,
            "role": claims.role,
        }

        return jwt.encode(payload, self._secret_key, algorithm=self.ALGORITHM)

    def verify(self, token: str) -> TokenClaims:
        """Verify a token's signature, issuer and expiry.

        Args:
            token: The encoded JWT.

        Returns:
            The claims the token was signed with.

        Raises:
            InvalidTokenError: If the token is expired, tampered or malformed.
        """
        try:
            payload: dict[str, Any] = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.ALGORITHM],
                issuer=self.ISSUER,
                options={"require": ["exp", "iat", "sub"]},
            )
            return TokenClaims(
                id=int(payload["id"]),
                email=str(payload["email"]),
                role=str(payload["role"]),
            )
        except jwt.ExpiredSignatureError as e:
            logger.info("Token rejected", reason="expired")
            raise InvalidTokenError("Invalid token") from e
        except jwt.InvalidTokenError as e:
            logger.info("Token rejected", reason=type(e).__name__)
            raise InvalidTokenError("Invalid token") from e
        except (KeyError, TypeError, ValueError) as e:
            logger.info("Token rejected", reason="missing or malformed claims")
            raise InvalidTokenError("Invalid token") from e
