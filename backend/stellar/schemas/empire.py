"""Empire schemas."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class EmpireBase(BaseModel):
    """Base empire schema."""

    name: str = Field(..., min_length=1, max_length=100)
    slogan: str = Field(..., max_length=100)
    location_id: int
    description: str


class EmpireCreate(EmpireBase):
    """Empire creation schema."""

    pass


class EmpireUpdate(BaseModel):
    """Empire update schema."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slogan: Optional[str] = Field(None, max_length=100)
    location_id: Optional[int] = None
    description: Optional[str] = None


class EmpireResponse(EmpireBase):
    """Empire response schema."""

    id: int

    model_config = {"from_attributes": True}
