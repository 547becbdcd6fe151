from __future__ import annotations

import logging

from pydantic.alias_generators import to_snake

from ..errors import BadRequestError, ConflictError, NotFoundError
from ..storage.document_store import DocumentStore, DuplicateKeyError
from ..storage.models import Place
from .models import PlaceCreate, PlaceUpdate

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {"average_rating", "review_count", "name", "created_at"}
_NULLABLE_FIELDS = {"external_id", "description"}


def parse_sort(sort: str | None) -> tuple[str, ...]:
    """Turn ``"-averageRating -reviewCount"`` into store sort keys."""
    if not sort or not sort.strip():
        return ("-average_rating",)
    keys: list[str] = []
    for token in sort.replace(",", " ").split():
        prefix = "-" if token.startswith("-") else ""
        field = to_snake(token.lstrip("-+"))
        if field not in SORTABLE_FIELDS:
            raise BadRequestError(f"Cannot sort by '{token.lstrip('-+')}'")
        keys.append(prefix + field)
    return tuple(keys)


class PlaceService:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def search_places(
        self,
        name: str | None = None,
        city: str | None = None,
        category: str | None = None,
        price_range: str | None = None,
        sort: str | None = None,
    ) -> list[Place]:
        return self._store.find_places(
            name=name,
            city=city,
            category=category,
            price_range=price_range,
            sort=parse_sort(sort),
        )

    def get_place(self, place_id: str) -> Place:
        place = self._store.get_place(place_id)
        if place is None:
            raise NotFoundError("Place not found")
        return place

    def get_place_by_external_id(self, external_id: str) -> Place | None:
        return self._store.find_place_by_external_id(external_id)

    def create_place(self, data: PlaceCreate) -> Place:
        place = Place(**data.model_dump())
        try:
            created = self._store.add_place(place)
        except DuplicateKeyError:
            raise ConflictError("Place with this external id already exists") from None
        logger.info("Created place %s (%s)", created.id, created.name)
        return created

    def update_place(self, place_id: str, data: PlaceUpdate) -> Place:
        fields = {
            name: getattr(data, name)
            for name in data.model_fields_set
            if getattr(data, name) is not None or name in _NULLABLE_FIELDS
        }
        try:
            place = self._store.update_place(place_id, fields)
        except DuplicateKeyError:
            raise ConflictError("Place with this external id already exists") from None
        if place is None:
            raise NotFoundError("Place not found")
        return place

    def delete_place(self, place_id: str) -> Place:
        place = self._store.delete_place(place_id)
        if place is None:
            raise NotFoundError("Place not found")
        reviews = self._store.delete_reviews_for_place(place_id)
        favorites = self._store.delete_favorites_for_place(place_id)
        logger.info(
            "Deleted place %s with %d reviews and %d favorites",
            place_id, len(reviews), favorites,
        )
        return place
