"""
Pydantic schemas for property listing endpoints.
"""
import re
from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Filter values the browsing page uses for "no filter"
EMPTY_FILTER_VALUES = {"", "any", "all"}

_BEDROOMS_PATTERN = re.compile(r"^(\d+)(\+?)$")


def _blank_to_none(value):
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if value.lower() in EMPTY_FILTER_VALUES:
            return None
    return value


class PropertyFilters(BaseModel):
    """
    Query filters for GET /api/resource.

    Empty, "Any" and "All" values are treated as absent.
    """
    model_config = ConfigDict(populate_by_name=True)

    search: Optional[str] = None
    town: Optional[str] = None
    type: Optional[str] = None
    bedrooms: Optional[str] = None  # "2" exact, "5+" at least 5
    min_price: Optional[int] = Field(None, alias="minPrice", ge=0)
    max_price: Optional[int] = Field(None, alias="maxPrice", ge=0)

    @field_validator("search", "town", "type", "bedrooms", "min_price", "max_price", mode="before")
    @classmethod
    def drop_empty(cls, value):
        return _blank_to_none(value)

    @field_validator("bedrooms")
    @classmethod
    def check_bedrooms(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not _BEDROOMS_PATTERN.match(value):
            raise ValueError("bedrooms must be a number, optionally followed by '+'")
        return value

    def bedrooms_bound(self) -> Optional[Tuple[int, bool]]:
        """Return (count, at_least) for the bedrooms filter, or None."""
        if self.bedrooms is None:
            return None
        match = _BEDROOMS_PATTERN.match(self.bedrooms)
        return int(match.group(1)), bool(match.group(2))


class PropertyCreate(BaseModel):
    """Fields of the listing-submission form (image handled separately)."""
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    location: str = ""
    price: Optional[int] = Field(None, ge=0)
    bedrooms: int = Field(1, ge=0)
    type: str = "Apartment"

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("price", mode="before")
    @classmethod
    def empty_price(cls, value):
        return _blank_to_none(value)


class PropertyResponse(BaseModel):
    """Schema for property response."""
    id: str
    name: str
    description: str
    location: str
    price: Optional[int] = None
    bedrooms: int
    type: str
    image_url: str
    owner_uid: str
    created_at: datetime

    class Config:
        from_attributes = True
