"""Security headers middleware.

Adds browser security headers to every HTTP response: MIME sniffing and
framing protection, a content security policy and, in production, HSTS.
"""

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from acquisitions.core.config import Settings


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses.

    Headers added:
    - X-Content-Type-Options: Prevents MIME type sniffing
    - X-Frame-Options: Prevents clickjacking attacks
    - X-XSS-Protection: Enables browser XSS protection
    - Strict-Transport-Security: Enforces HTTPS (production only)
    - Content-Security-Policy: Restricts script and frame sources
    - Permissions-Policy: Restricts browser features
    - Referrer-Policy: Controls referrer information
    """

    def __init__(self, app: ASGIApp, settings: Settings) -> None:
        super().__init__(app)
        self.settings = settings

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        if not self.settings.security_headers_enabled:
            return response

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-XSS-Protection"] = "1; mode=block"

        if self.settings.is_production:
            response.headers["Strict-Transport-Security"] = (
                f"max-age={self.settings.hsts_max_age}; includeSubDomains"
            )

        response.headers["Content-Security-Policy"] = self.settings.csp_policy
        response.headers["Permissions-Policy"] = self.settings.permissions_policy
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response
