from __future__ import annotations

from ..storage.models import CamelModel, Place


class RecommendationItem(CamelModel):
    place: Place
    explanation: str
    match_score: int


class CategoryRating(CamelModel):
    category: str
    average_rating: float


class TasteProfile(CamelModel):
    total_reviews: int
    favorite_categories: list[CategoryRating]
    price_range_preference: str | None = None
