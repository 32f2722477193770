"""Location schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class LocationBase(BaseModel):
    """Base location schema."""

    star_system: str = Field(..., min_length=1, max_length=100)
    area: str = Field(..., min_length=1, max_length=100)


class LocationCreate(LocationBase):
    """Location creation schema."""

    pass


class LocationUpdate(BaseModel):
    """Location update schema."""

    star_system: Optional[str] = Field(None, min_length=1, max_length=100)
    area: Optional[str] = Field(None, min_length=1, max_length=100)


class LocationResponse(LocationBase):
    """Location response schema."""

    id: int

    model_config = {"from_attributes": True}
