from __future__ import annotations

from pydantic import Field

from ..storage.models import CamelModel, Category, Location, PriceRange


class PlaceCreate(CamelModel):
    external_id: str | None = None
    name: str = Field(..., min_length=1)
    category: Category
    location: Location
    description: str | None = None
    price_range: PriceRange = PriceRange.unspecified
    images: list[str] = Field(default_factory=list)


class PlaceUpdate(CamelModel):
    """Partial update.  Aggregate rating fields are not accepted here."""

    external_id: str | None = None
    name: str | None = Field(default=None, min_length=1)
    category: Category | None = None
    location: Location | None = None
    description: str | None = None
    price_range: PriceRange | None = None
    images: list[str] | None = None
