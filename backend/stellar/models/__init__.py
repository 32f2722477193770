"""SQLAlchemy models."""

from stellar.models.user import User
from stellar.models.location import Location
from stellar.models.empire import Empire

__all__ = ["User", "Location", "Empire"]
