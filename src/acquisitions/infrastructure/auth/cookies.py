"""Session cookie helpers.

Cookies written here are always HttpOnly, SameSite=strict, Secure in
production and short-lived by default.
"""

from typing import Any, Literal

from fastapi import Request, Response

from acquisitions.core.config import Settings
from acquisitions.core.logging import get_logger

logger = get_logger(__name__)

SESSION_COOKIE_NAME = "token"

_ALLOWED_OVERRIDES = frozenset({"max_age", "expires", "path", "domain", "secure", "samesite"})


class SessionCookieManager:
    """Sets, reads and clears the session cookie."""

    def __init__(self, settings: Settings) -> None:
        self.secure = settings.is_production
        self.samesite: Literal["lax", "strict", "none"] = "strict"
        self.max_age = settings.cookie_max_age_seconds
        self.path = "/"

    def options(self, **overrides: Any) -> dict[str, Any]:
        """Cookie attributes with caller overrides applied.

        ``httponly`` cannot be overridden.
        """
        if "httponly" in overrides:
            overrides.pop("httponly")
            logger.warning("Ignoring httponly cookie override")

        unknown = set(overrides) - _ALLOWED_OVERRIDES
        if unknown:
            raise ValueError(f"Unsupported cookie options: {', '.join(sorted(unknown))}")

        options: dict[str, Any] = {
            "httponly": True,
            "secure": self.secure,
            "samesite": self.samesite,
            "max_age": self.max_age,
            "path": self.path,
        }
        options.update(overrides)
        return options

    def set(self, response: Response, name: str, value: str, **overrides: Any) -> None:
        response.set_cookie(key=name, value=value, **self.options(**overrides))

    def get(self, request: Request, name: str) -> str | None:
        return request.cookies.get(name)

    def clear(self, response: Response, name: str) -> None:
        """Overwrite the cookie with an immediately expiring one."""
        response.delete_cookie(
            key=name,
            path=self.path,
            secure=self.secure,
            httponly=True,
            samesite=self.samesite,
        )
