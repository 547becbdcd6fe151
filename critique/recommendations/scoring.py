"""
Deterministic match scoring and explanation text for recommended places.

Score factors (single highest tier per factor, total capped at 100):

    category in preferred categories        +40
    rating >= 4.5 / >= 4.0 / >= 3.5         +30 / +25 / +20
    price range equals user preference      +20
    reviews >= 20 / >= 10 / >= 5            +10 / +7 / +5
"""
from __future__ import annotations

from typing import Collection

from ..storage.models import Place, Preferences

MAX_SCORE = 100

_RATING_TIERS: tuple[tuple[float, int], ...] = ((4.5, 30), (4.0, 25), (3.5, 20))
_POPULARITY_TIERS: tuple[tuple[int, int], ...] = ((20, 10), (10, 7), (5, 5))

HIGHLY_RATED_THRESHOLD = 4.5
POPULAR_REVIEW_COUNT = 10
FALLBACK_EXPLANATION = "Recommended based on your preferences"


def _tier_points(value: float, tiers: tuple[tuple[float, int], ...]) -> int:
    for threshold, points in tiers:
        if value >= threshold:
            return points
    return 0


def humanize_category(category: str) -> str:
    return category.replace("_", " ")


def price_matches(place: Place, preferences: Preferences) -> bool:
    return bool(preferences.price_range) and place.price_range == preferences.price_range


def calculate_match_score(
    place: Place,
    preferences: Preferences,
    preferred_categories: Collection[str],
) -> int:
    score = 0
    if place.category in preferred_categories:
        score += 40
    score += _tier_points(place.average_rating, _RATING_TIERS)
    if price_matches(place, preferences):
        score += 20
    score += _tier_points(place.review_count, _POPULARITY_TIERS)
    return min(score, MAX_SCORE)


def generate_explanation(
    place: Place,
    preferences: Preferences,
    preferred_categories: Collection[str],
) -> str:
    reasons: list[str] = []
    if place.category in preferred_categories:
        reasons.append(f"matches your interest in {humanize_category(place.category)}s")
    if place.average_rating >= HIGHLY_RATED_THRESHOLD:
        reasons.append("highly rated by other users")
    if place.review_count >= POPULAR_REVIEW_COUNT:
        reasons.append("popular with many reviews")
    if price_matches(place, preferences):
        reasons.append("fits your price range")

    if not reasons:
        return FALLBACK_EXPLANATION
    return "Recommended because it " + ", ".join(reasons)


def popular_explanation(place: Place) -> str:
    return (
        f"Popular {humanize_category(place.category)} with {place.review_count} reviews "
        f"and {place.average_rating:.1f} average rating"
    )
