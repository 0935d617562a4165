"""Acquisitions API - authentication backend for a business-acquisitions marketplace."""

__version__ = "1.0.0"

__all__ = ["__version__"]
