from __future__ import annotations

from typing import Any, Iterable, Sequence

from .models import Favorite, Place, Review, User, utcnow

DEFAULT_PLACE_SORT: tuple[str, ...] = ("-average_rating", "-review_count")


class DuplicateKeyError(Exception):
    """Raised when an insert or update violates a unique index."""

    def __init__(self, collection: str, field: str) -> None:
        super().__init__(f"duplicate {field} in {collection}")
        self.collection = collection
        self.field = field


def _sort_documents(docs: list[Any], sort: Sequence[str]) -> list[Any]:
    # Stable sorts applied from the least to the most significant key.
    ordered = list(docs)
    for key in reversed(sort):
        descending = key.startswith("-")
        field = key.lstrip("-+")
        ordered.sort(key=lambda d: getattr(d, field), reverse=descending)
    return ordered


class DocumentStore:
    """
    In-process document store holding the users, places, reviews and
    favorites collections.

    Documents are pydantic models keyed by id; dict insertion order is the
    natural order of every collection.  Reads hand out copies so callers
    can only change stored state through the methods below.  Queries iterate
    over a snapshot of each collection, so reads may run alongside writes
    from other request threads.
    """

    def __init__(self) -> None:
        self._users: dict[str, User] = {}
        self._places: dict[str, Place] = {}
        self._reviews: dict[str, Review] = {}
        self._favorites: dict[str, Favorite] = {}

    @staticmethod
    def _snapshot(collection: dict[str, Any]) -> list[Any]:
        # Copied in one call so concurrent writers cannot resize it mid-iteration.
        return list(collection.values())

    # ── Users ────────────────────────────────────────────────────────────

    def add_user(self, user: User) -> User:
        if self.find_user_by_email(user.email) is not None:
            raise DuplicateKeyError("users", "email")
        self._users[user.id] = user.model_copy(deep=True)
        return user.model_copy(deep=True)

    def get_user(self, user_id: str) -> User | None:
        user = self._users.get(user_id)
        return user.model_copy(deep=True) if user else None

    def find_user_by_email(self, email: str) -> User | None:
        for user in self._snapshot(self._users):
            if user.email == email:
                return user.model_copy(deep=True)
        return None

    def update_user(self, user_id: str, fields: dict[str, Any]) -> User | None:
        user = self._users.get(user_id)
        if user is None:
            return None
        updated = user.model_copy(update={**fields, "updated_at": utcnow()}, deep=True)
        self._users[user_id] = updated
        return updated.model_copy(deep=True)

    def delete_user(self, user_id: str) -> User | None:
        return self._users.pop(user_id, None)

    # ── Places ───────────────────────────────────────────────────────────

    def add_place(self, place: Place) -> Place:
        if place.external_id and self.find_place_by_external_id(place.external_id):
            raise DuplicateKeyError("places", "external_id")
        self._places[place.id] = place.model_copy(deep=True)
        return place.model_copy(deep=True)

    def get_place(self, place_id: str) -> Place | None:
        place = self._places.get(place_id)
        return place.model_copy(deep=True) if place else None

    def find_place_by_external_id(self, external_id: str) -> Place | None:
        for place in self._snapshot(self._places):
            if place.external_id == external_id:
                return place.model_copy(deep=True)
        return None

    def find_places(
        self,
        *,
        categories: Iterable[str] | None = None,
        exclude_ids: Iterable[str] | None = None,
        min_rating: float | None = None,
        name: str | None = None,
        city: str | None = None,
        category: str | None = None,
        price_range: str | None = None,
        sort: Sequence[str] = DEFAULT_PLACE_SORT,
        limit: int | None = None,
    ) -> list[Place]:
        """Filter, sort and truncate the places collection.

        ``categories`` keeps places whose category is in the given set
        (``None`` means no category filter).  ``name`` and ``city`` are
        case-insensitive substring matches.
        """
        category_set = set(categories) if categories is not None else None
        excluded = set(exclude_ids or ())
        name_lower = name.strip().lower() if name else None
        city_lower = city.strip().lower() if city else None

        matches: list[Place] = []
        for place in self._snapshot(self._places):
            if place.id in excluded:
                continue
            if category_set is not None and place.category not in category_set:
                continue
            if category and place.category != category:
                continue
            if price_range and place.price_range != price_range:
                continue
            if min_rating is not None and place.average_rating < min_rating:
                continue
            if name_lower and name_lower not in place.name.lower():
                continue
            if city_lower and city_lower not in place.location.city.lower():
                continue
            matches.append(place)

        ordered = _sort_documents(matches, sort)
        if limit is not None:
            ordered = ordered[:limit]
        return [p.model_copy(deep=True) for p in ordered]

    def update_place(self, place_id: str, fields: dict[str, Any]) -> Place | None:
        place = self._places.get(place_id)
        if place is None:
            return None
        external_id = fields.get("external_id")
        if external_id and external_id != place.external_id:
            if self.find_place_by_external_id(external_id):
                raise DuplicateKeyError("places", "external_id")
        updated = place.model_copy(update={**fields, "updated_at": utcnow()}, deep=True)
        self._places[place_id] = updated
        return updated.model_copy(deep=True)

    def update_place_aggregates(
        self, place_id: str, average_rating: float, review_count: int,
    ) -> bool:
        """Overwrite the two aggregate fields of a place; ``False`` if absent."""
        place = self._places.get(place_id)
        if place is None:
            return False
        self._places[place_id] = place.model_copy(
            update={"average_rating": average_rating, "review_count": review_count},
        )
        return True

    def delete_place(self, place_id: str) -> Place | None:
        return self._places.pop(place_id, None)

    # ── Reviews ──────────────────────────────────────────────────────────

    def add_review(self, review: Review) -> Review:
        self._reviews[review.id] = review.model_copy(deep=True)
        return review.model_copy(deep=True)

    def get_review(self, review_id: str) -> Review | None:
        review = self._reviews.get(review_id)
        return review.model_copy(deep=True) if review else None

    def update_review(self, review_id: str, fields: dict[str, Any]) -> Review | None:
        review = self._reviews.get(review_id)
        if review is None:
            return None
        updated = review.model_copy(update={**fields, "updated_at": utcnow()}, deep=True)
        self._reviews[review_id] = updated
        return updated.model_copy(deep=True)

    def delete_review(self, review_id: str) -> Review | None:
        return self._reviews.pop(review_id, None)

    def reviews_for_place(self, place_id: str) -> list[Review]:
        return [
            r.model_copy(deep=True) for r in self._snapshot(self._reviews) if r.place_id == place_id
        ]

    def reviews_for_user(self, user_id: str) -> list[Review]:
        return [
            r.model_copy(deep=True) for r in self._snapshot(self._reviews) if r.user_id == user_id
        ]

    def delete_reviews_for_user(self, user_id: str) -> list[Review]:
        removed = [r for r in self._snapshot(self._reviews) if r.user_id == user_id]
        for review in removed:
            self._reviews.pop(review.id, None)
        return removed

    def delete_reviews_for_place(self, place_id: str) -> list[Review]:
        removed = [r for r in self._snapshot(self._reviews) if r.place_id == place_id]
        for review in removed:
            self._reviews.pop(review.id, None)
        return removed

    # ── Favorites ────────────────────────────────────────────────────────

    def add_favorite(self, favorite: Favorite) -> Favorite:
        if self.find_favorite(favorite.user_id, favorite.place_id) is not None:
            raise DuplicateKeyError("favorites", "user_id+place_id")
        self._favorites[favorite.id] = favorite.model_copy(deep=True)
        return favorite.model_copy(deep=True)

    def find_favorite(self, user_id: str, place_id: str) -> Favorite | None:
        for favorite in self._snapshot(self._favorites):
            if favorite.user_id == user_id and favorite.place_id == place_id:
                return favorite.model_copy(deep=True)
        return None

    def delete_favorite(self, user_id: str, place_id: str) -> Favorite | None:
        favorite = self.find_favorite(user_id, place_id)
        if favorite is None:
            return None
        return self._favorites.pop(favorite.id, None)

    def favorites_for_user(self, user_id: str) -> list[Favorite]:
        return [
            f.model_copy(deep=True) for f in self._snapshot(self._favorites) if f.user_id == user_id
        ]

    def delete_favorites_for_user(self, user_id: str) -> int:
        removed = [f.id for f in self._snapshot(self._favorites) if f.user_id == user_id]
        for fid in removed:
            self._favorites.pop(fid, None)
        return len(removed)

    def delete_favorites_for_place(self, place_id: str) -> int:
        removed = [f.id for f in self._snapshot(self._favorites) if f.place_id == place_id]
        for fid in removed:
            self._favorites.pop(fid, None)
        return len(removed)

    def clear(self) -> None:
        self._users.clear()
        self._places.clear()
        self._reviews.clear()
        self._favorites.clear()
