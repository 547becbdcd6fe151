from __future__ import annotations

import logging

from ..errors import ForbiddenError, NotFoundError
from ..ratings.aggregator import RatingAggregator
from ..storage.document_store import DocumentStore
from ..storage.models import PlaceSummary, Review, ReviewOut, UserSummary
from .models import ReviewUpdate

logger = logging.getLogger(__name__)


def populate_review(store: DocumentStore, review: Review) -> ReviewOut:
    """Resolve a review's user and place references for API output."""
    user = store.get_user(review.user_id)
    place = store.get_place(review.place_id)
    return ReviewOut(
        id=review.id,
        user=UserSummary(
            id=user.id, name=user.name, profile_picture=user.profile_picture,
        ) if user else None,
        place=PlaceSummary(
            id=place.id,
            name=place.name,
            location=place.location,
            category=place.category,
            price_range=place.price_range,
            average_rating=place.average_rating,
        ) if place else None,
        rating=review.rating,
        content=review.content,
        is_blog_post=review.is_blog_post,
        images=review.images,
        created_at=review.created_at,
        updated_at=review.updated_at,
    )


def newest_first(reviews: list[Review]) -> list[Review]:
    return sorted(reviews, key=lambda r: r.created_at, reverse=True)


class ReviewService:
    """Review lifecycle.  Every write that changes a place's rating set is
    followed by an explicit ``RatingAggregator.recompute`` for that place."""

    def __init__(
        self,
        store: DocumentStore,
        aggregator: RatingAggregator,
        recompute_on_update: bool = True,
    ) -> None:
        self._store = store
        self._aggregator = aggregator
        self._recompute_on_update = recompute_on_update

    def create_review(
        self,
        user_id: str,
        place_id: str,
        rating: int,
        content: str | None = None,
        is_blog_post: bool = False,
        images: list[str] | None = None,
    ) -> ReviewOut:
        if self._store.get_user(user_id) is None:
            raise NotFoundError("User not found")
        if self._store.get_place(place_id) is None:
            raise NotFoundError("Place not found")

        review = self._store.add_review(Review(
            user_id=user_id,
            place_id=place_id,
            rating=rating,
            content=content.strip() if content else content,
            is_blog_post=is_blog_post,
            images=images or [],
        ))
        self._aggregator.recompute(place_id)
        logger.info("User %s reviewed place %s (%d stars)", user_id, place_id, rating)
        return populate_review(self._store, review)

    def _owned_review(self, review_id: str, user_id: str) -> Review:
        review = self._store.get_review(review_id)
        if review is None:
            raise NotFoundError("Review not found")
        if review.user_id != user_id:
            raise ForbiddenError("Access denied")
        return review

    def update_review(self, review_id: str, user_id: str, updates: ReviewUpdate) -> ReviewOut:
        review = self._owned_review(review_id, user_id)
        fields = {
            name: getattr(updates, name)
            for name in updates.model_fields_set
            if getattr(updates, name) is not None or name == "content"
        }
        updated = self._store.update_review(review.id, fields)
        if updated is None:
            raise NotFoundError("Review not found")

        if "rating" in fields:
            if self._recompute_on_update:
                self._aggregator.recompute(updated.place_id)
            else:
                logger.info(
                    "Rating of review %s changed; place %s aggregate left as is",
                    review.id, updated.place_id,
                )
        return populate_review(self._store, updated)

    def delete_review(self, review_id: str, user_id: str) -> Review:
        review = self._owned_review(review_id, user_id)
        deleted = self._store.delete_review(review.id)
        if deleted is None:
            raise NotFoundError("Review not found")
        self._aggregator.recompute(deleted.place_id)
        return deleted

    def get_reviews_by_place(self, place_id: str) -> list[ReviewOut]:
        reviews = newest_first(self._store.reviews_for_place(place_id))
        return [populate_review(self._store, r) for r in reviews]

    def get_reviews_by_user(self, user_id: str) -> list[ReviewOut]:
        reviews = newest_first(self._store.reviews_for_user(user_id))
        return [populate_review(self._store, r) for r in reviews]

    def delete_reviews_for_user(self, user_id: str) -> int:
        removed = self._store.delete_reviews_for_user(user_id)
        for place_id in dict.fromkeys(r.place_id for r in removed):
            self._aggregator.recompute(place_id)
        return len(removed)
