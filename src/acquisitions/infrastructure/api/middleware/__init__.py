"""HTTP middleware package."""

from acquisitions.infrastructure.api.middleware.security_headers_middleware import (
    SecurityHeadersMiddleware,
)

__all__ = ["SecurityHeadersMiddleware"]
