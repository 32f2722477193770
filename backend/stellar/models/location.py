"""Location model."""

from __future__ import annotations

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from stellar.db.base import Base


class Location(Base):
    """An area inside a star system."""

    __tablename__ = "locations"

    id: Mapped[int] = mapped_column(primary_key=True)
    star_system: Mapped[str] = mapped_column(String(100), nullable=False)
    area: Mapped[str] = mapped_column(String(100), nullable=False)
