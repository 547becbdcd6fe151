from __future__ import annotations

import logging

from ..auth.users import AuthService, verify_password
from ..errors import NotFoundError, UnauthorizedError
from ..favorites.service import FavoritesService
from ..reviews.service import ReviewService, newest_first, populate_review
from ..storage.document_store import DocumentStore
from ..storage.models import Preferences, User, UserOut
from .models import ProfileUpdate, UserHistory

logger = logging.getLogger(__name__)

HISTORY_REVIEW_LIMIT = 10


class UserService:
    def __init__(
        self,
        store: DocumentStore,
        auth: AuthService,
        reviews: ReviewService,
        favorites: FavoritesService,
    ) -> None:
        self._store = store
        self._auth = auth
        self._reviews = reviews
        self._favorites = favorites

    def _get(self, user_id: str) -> User:
        user = self._store.get_user(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def get_user(self, user_id: str) -> UserOut:
        return self._get(user_id).public()

    def update_profile(self, user_id: str, profile: ProfileUpdate) -> UserOut:
        fields = {
            name: getattr(profile, name)
            for name in profile.model_fields_set
            if getattr(profile, name) is not None
        }
        user = self._store.update_user(user_id, fields)
        if user is None:
            raise NotFoundError("User not found")
        return user.public()

    def get_preferences(self, user_id: str) -> Preferences:
        return self._get(user_id).preferences

    def update_preferences(self, user_id: str, preferences: Preferences) -> Preferences:
        user = self._store.update_user(user_id, {"preferences": preferences})
        if user is None:
            raise NotFoundError("User not found")
        return user.preferences

    def change_password(self, user_id: str, current_password: str, new_password: str) -> str:
        user = self._get(user_id)
        if not verify_password(current_password, user.password_hash):
            raise UnauthorizedError("Current password is incorrect")
        self._store.update_user(user_id, {"password_hash": self._auth.hash_password(new_password)})
        return "Password updated successfully"

    def delete_account(self, user_id: str, password: str) -> str:
        user = self._get(user_id)
        if not verify_password(password, user.password_hash):
            raise UnauthorizedError("Password is incorrect")

        removed_reviews = self._reviews.delete_reviews_for_user(user_id)
        removed_favorites = self._store.delete_favorites_for_user(user_id)
        self._store.delete_user(user_id)
        logger.info(
            "Deleted user %s with %d reviews and %d favorites",
            user_id, removed_reviews, removed_favorites,
        )
        return "Account deleted successfully"

    def get_user_history(self, user_id: str) -> UserHistory:
        user = self._get(user_id)
        reviews = newest_first(self._store.reviews_for_user(user_id))[:HISTORY_REVIEW_LIMIT]
        return UserHistory(
            user=user.public(),
            reviews=[populate_review(self._store, r) for r in reviews],
            favorites=self._favorites.get_user_favorites(user_id),
        )
