"""SQLAlchemy models for the Acquisitions API.

All models inherit from the Base class defined in database.py.
"""

from acquisitions.infrastructure.persistence.models.user import UserModel

__all__ = ["UserModel"]
