from __future__ import annotations

import logging
import re
from typing import Any

from ..config import DEFAULT_CONFIG, AppConfig
from ..errors import NotFoundError
from ..storage.document_store import DEFAULT_PLACE_SORT, DocumentStore
from ..storage.models import Place, Review, User
from .models import CategoryRating, RecommendationItem, TasteProfile
from .scoring import calculate_match_score, generate_explanation, popular_explanation

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def resolve_limit(raw: Any, default: int = DEFAULT_LIMIT) -> int:
    """Parse a caller-supplied limit from its leading integer (``"3.7"`` is 3);
    absent, non-numeric or non-positive values fall back to *default*."""
    if raw is None or isinstance(raw, bool):
        return default
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return default
    value = int(match.group(1))
    return value if value > 0 else default


class RecommendationEngine:
    """Read-only recommendation queries over the document store.

    Users with no reviews (cold) get popular places; users with at least
    one review (warm) get unreviewed places in the categories they rated
    well or marked as favorites.
    """

    def __init__(self, store: DocumentStore, config: AppConfig = DEFAULT_CONFIG) -> None:
        self._store = store
        self._config = config

    def _get_user(self, user_id: str) -> User:
        user = self._store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def _reviews_with_places(self, reviews: list[Review]) -> list[tuple[Review, Place]]:
        pairs: list[tuple[Review, Place]] = []
        for review in reviews:
            place = self._store.get_place(review.place_id)
            if place is None:
                logger.warning("Review %s references missing place %s", review.id, review.place_id)
                continue
            pairs.append((review, place))
        return pairs

    def get_recommendations(self, user_id: str, limit: Any = None) -> list[RecommendationItem]:
        limit = resolve_limit(limit, self._config.default_recommendation_limit)
        user = self._get_user(user_id)
        history = self._reviews_with_places(self._store.reviews_for_user(user_id))

        if history:
            return self.get_personalized_recommendations(user, history, limit)
        return self.get_popular_places(user.preferences.favorite_categories, limit)

    def get_personalized_recommendations(
        self,
        user: User,
        history: list[tuple[Review, Place]],
        limit: int,
    ) -> list[RecommendationItem]:
        liked_categories = [
            place.category
            for review, place in history
            if review.rating >= self._config.liked_rating_threshold
        ]
        # Ordered union, liked categories first.
        preferred_categories = list(dict.fromkeys(
            [*liked_categories, *user.preferences.favorite_categories]
        ))
        reviewed_place_ids = {place.id for _, place in history}

        candidates = self._store.find_places(
            categories=preferred_categories,
            exclude_ids=reviewed_place_ids,
            min_rating=self._config.min_candidate_rating,
            sort=DEFAULT_PLACE_SORT,
            limit=limit,
        )
        logger.debug(
            "User %s: %d candidates for categories %s",
            user.id, len(candidates), preferred_categories,
        )

        return [
            RecommendationItem(
                place=place,
                explanation=generate_explanation(place, user.preferences, preferred_categories),
                match_score=calculate_match_score(place, user.preferences, preferred_categories),
            )
            for place in candidates
        ]

    def get_popular_places(
        self,
        categories: list[str] | None = None,
        limit: int = DEFAULT_LIMIT,
    ) -> list[RecommendationItem]:
        places = self._store.find_places(
            categories=categories or None,
            sort=DEFAULT_PLACE_SORT,
            limit=limit,
        )
        return [
            RecommendationItem(
                place=place,
                explanation=popular_explanation(place),
                match_score=self._config.popular_match_score,
            )
            for place in places
        ]

    def analyze_user_taste(self, user_id: str) -> TasteProfile:
        """Per-category mean ratings over the user's reviews.

        ``total_reviews`` counts every review the user wrote; reviews of
        deleted places are left out of the category and price breakdowns.
        """
        self._get_user(user_id)
        reviews = self._store.reviews_for_user(user_id)
        history = self._reviews_with_places(reviews)

        category_ratings: dict[str, list[int]] = {}
        price_range_ratings: dict[str, list[int]] = {}
        for review, place in history:
            category_ratings.setdefault(place.category, []).append(review.rating)
            if place.price_range:
                price_range_ratings.setdefault(place.price_range, []).append(review.rating)

        favorite_categories = sorted(
            (
                CategoryRating(category=category, average_rating=sum(r) / len(r))
                for category, r in category_ratings.items()
            ),
            key=lambda c: c.average_rating,
            reverse=True,
        )

        # First price range seen in review order, not the best-rated one.
        price_range_preference = next(iter(price_range_ratings), None)

        return TasteProfile(
            total_reviews=len(reviews),
            favorite_categories=favorite_categories,
            price_range_preference=price_range_preference,
        )
