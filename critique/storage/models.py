from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
    )


class Category(str, Enum):
    restaurant = "restaurant"
    coffee_shop = "coffee_shop"
    bar = "bar"
    cafe = "cafe"
    other = "other"


class PriceRange(str, Enum):
    unspecified = ""
    low = "$"
    medium = "$$"
    high = "$$$"


# ── Places ───────────────────────────────────────────────────────────────


class Coordinates(CamelModel):
    lat: float | None = None
    lng: float | None = None


class Location(CamelModel):
    address: str = Field(..., min_length=1)
    city: str = Field(..., min_length=1)
    state: str | None = None
    zip_code: str | None = None
    coordinates: Coordinates | None = None


class Place(CamelModel):
    id: str = Field(default_factory=new_id)
    external_id: str | None = None
    name: str
    category: Category
    location: Location
    description: str | None = None
    price_range: PriceRange = PriceRange.unspecified
    # Written only by the rating aggregator.
    average_rating: float = Field(default=0.0, ge=0.0, le=5.0)
    review_count: int = Field(default=0, ge=0)
    images: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class PlaceSummary(CamelModel):
    id: str
    name: str
    location: Location
    category: Category
    price_range: PriceRange = PriceRange.unspecified
    average_rating: float = 0.0


# ── Users ────────────────────────────────────────────────────────────────


class Preferences(CamelModel):
    favorite_categories: list[Category] = Field(default_factory=list)
    price_range: PriceRange = PriceRange.unspecified
    dietary_restrictions: list[str] = Field(default_factory=list)


class User(CamelModel):
    id: str = Field(default_factory=new_id)
    email: str
    password_hash: str
    name: str
    profile_picture: str = ""
    preferences: Preferences = Field(default_factory=Preferences)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def public(self) -> UserOut:
        return UserOut(
            id=self.id,
            email=self.email,
            name=self.name,
            profile_picture=self.profile_picture,
            preferences=self.preferences,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class UserOut(CamelModel):
    id: str
    email: str
    name: str
    profile_picture: str = ""
    preferences: Preferences = Field(default_factory=Preferences)
    created_at: datetime
    updated_at: datetime


class UserSummary(CamelModel):
    id: str
    name: str
    profile_picture: str = ""


# ── Reviews ──────────────────────────────────────────────────────────────


class Review(CamelModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    place_id: str
    rating: int = Field(..., ge=1, le=5)
    content: str | None = None
    is_blog_post: bool = False
    images: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ReviewOut(CamelModel):
    """A review with its author and place resolved."""

    id: str
    user: UserSummary | None = None
    place: PlaceSummary | None = None
    rating: int
    content: str | None = None
    is_blog_post: bool = False
    images: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


# ── Favorites ────────────────────────────────────────────────────────────


class Favorite(CamelModel):
    id: str = Field(default_factory=new_id)
    user_id: str
    place_id: str
    created_at: datetime = Field(default_factory=utcnow)


class FavoriteOut(CamelModel):
    id: str
    place: Place
    created_at: datetime
