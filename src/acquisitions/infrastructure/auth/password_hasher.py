"""Password hashing utility using Argon2.

Provides salted password hashing and verification using the Argon2id
algorithm with a fixed cost profile. Primitive failures are reported as
``HashingFailure`` / ``ComparisonFailure`` so callers can tell a broken hash
apart from a wrong password.
"""

from functools import lru_cache

from argon2 import PasswordHasher
from argon2.exceptions import (
    HashingError,
    InvalidHashError,
    VerificationError,
    VerifyMismatchError,
)

from acquisitions.core.logging import get_logger

logger = get_logger(__name__)

# RFC 9106 low-memory profile; fixed for every hash this service writes.
_hasher = PasswordHasher(time_cost=3, memory_cost=65536, parallelism=4)

_DUMMY_PASSWORD = "dummy_password_for_timing_safety"


class HashingFailure(Exception):
    """Raised when the hashing primitive fails to produce a hash."""

    pass


class ComparisonFailure(Exception):
    """Raised when a stored hash cannot be compared (malformed input)."""

    pass


def hash_password(password: str) -> str:
    """Hash a password using Argon2id.

    Args:
        password: The plaintext password to hash.

    Returns:
        The hashed password string.

    Raises:
        HashingFailure: If the underlying primitive errors.

    Example:
        >>> hashed = hash_password("secret1")
        >>> hashed.startswith("$argon2id$")
        True
    """
    try:
        return _hasher.hash(password)
    except (HashingError, MemoryError) as e:
        logger.error("Password hashing error", error=str(e), exc_info=True)
        raise HashingFailure("Hashing error") from e


def verify_password(password: str, hashed: str) -> bool:
    """Verify a password against a hash.

    Uses constant-time comparison to prevent timing attacks.

    Args:
        password: The plaintext password to verify.
        hashed: The hashed password to verify against.

    Returns:
        True if the password matches, False otherwise.

    Raises:
        ComparisonFailure: If ``hashed`` is not a valid Argon2 hash.
    """
    try:
        return _hasher.verify(hashed, password)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError) as e:
        logger.error("Password comparison error", error=str(e))
        raise ComparisonFailure("Password comparison error") from e


def needs_rehash(hashed: str) -> bool:
    """Check if a password hash was made with different parameters.

    Args:
        hashed: The hashed password to check.

    Returns:
        True if the hash should be updated, False otherwise.
    """
    return _hasher.check_needs_rehash(hashed)


@lru_cache(maxsize=1)
def dummy_password_hash() -> str:
    """Hash used to keep sign-in timing flat when the email is unknown."""
    return _hasher.hash(_DUMMY_PASSWORD)
