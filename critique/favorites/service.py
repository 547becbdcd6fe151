from __future__ import annotations

from ..errors import ConflictError, NotFoundError
from ..storage.document_store import DocumentStore, DuplicateKeyError
from ..storage.models import Favorite, FavoriteOut, Place


class FavoritesService:
    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def add_favorite(self, user_id: str, place_id: str) -> FavoriteOut:
        place = self._store.get_place(place_id)
        if place is None:
            raise NotFoundError("Place not found")
        try:
            favorite = self._store.add_favorite(Favorite(user_id=user_id, place_id=place_id))
        except DuplicateKeyError:
            raise ConflictError("Place already in favorites") from None
        return FavoriteOut(id=favorite.id, place=place, created_at=favorite.created_at)

    def remove_favorite(self, user_id: str, place_id: str) -> Favorite:
        favorite = self._store.delete_favorite(user_id, place_id)
        if favorite is None:
            raise NotFoundError("Favorite not found")
        return favorite

    def get_user_favorites(self, user_id: str) -> list[Place]:
        """Favorited places, most recently favorited first."""
        favorites = sorted(
            self._store.favorites_for_user(user_id),
            key=lambda f: f.created_at,
            reverse=True,
        )
        places = (self._store.get_place(f.place_id) for f in favorites)
        return [p for p in places if p is not None]

    def is_favorite(self, user_id: str, place_id: str) -> bool:
        return self._store.find_favorite(user_id, place_id) is not None
