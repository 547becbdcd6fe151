from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from critique.app import create_app
from critique.config import AppConfig
from critique.storage.document_store import DocumentStore
from critique.storage.models import Location, Place, Preferences, Review, User

FAST_CONFIG = AppConfig(bcrypt_rounds=4, seed_on_startup=False, log_level="WARNING")


@pytest.fixture
def config() -> AppConfig:
    return FAST_CONFIG


@pytest.fixture
def store() -> DocumentStore:
    return DocumentStore()


@pytest.fixture
def client(config: AppConfig, store: DocumentStore) -> TestClient:
    return TestClient(create_app(config, store))


@pytest.fixture
def make_place(store: DocumentStore):
    def _make(
        name: str = "Somewhere",
        category: str = "restaurant",
        price_range: str = "",
        average_rating: float = 0.0,
        review_count: int = 0,
        city: str = "Atlanta",
    ) -> Place:
        place = store.add_place(Place(
            name=name,
            category=category,
            price_range=price_range,
            location=Location(address="1 Test St", city=city),
        ))
        if average_rating or review_count:
            store.update_place_aggregates(place.id, average_rating, review_count)
        return store.get_place(place.id)

    return _make


@pytest.fixture
def make_user(store: DocumentStore):
    def _make(
        email: str = "reader@example.com",
        favorite_categories: list[str] | None = None,
        price_range: str = "",
    ) -> User:
        return store.add_user(User(
            email=email,
            password_hash="not-a-real-hash",
            name="Reader",
            preferences=Preferences(
                favorite_categories=favorite_categories or [],
                price_range=price_range,
            ),
        ))

    return _make


@pytest.fixture
def make_review(store: DocumentStore):
    def _make(user: User, place: Place, rating: int) -> Review:
        return store.add_review(Review(user_id=user.id, place_id=place.id, rating=rating))

    return _make
