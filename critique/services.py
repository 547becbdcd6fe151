from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from .auth.users import AuthService
from .config import AppConfig
from .favorites.service import FavoritesService
from .places.service import PlaceService
from .ratings.aggregator import RatingAggregator
from .recommendations.engine import RecommendationEngine
from .reviews.service import ReviewService
from .storage.document_store import DocumentStore
from .users.service import UserService


@dataclass(frozen=True)
class Services:
    store: DocumentStore
    auth: AuthService
    places: PlaceService
    reviews: ReviewService
    favorites: FavoritesService
    users: UserService
    recommendations: RecommendationEngine


def build_services(store: DocumentStore, config: AppConfig) -> Services:
    """Wire every service once, around a single store."""
    aggregator = RatingAggregator(store)
    auth = AuthService(store, bcrypt_rounds=config.bcrypt_rounds)
    reviews = ReviewService(
        store, aggregator, recompute_on_update=config.recompute_on_review_update,
    )
    favorites = FavoritesService(store)
    return Services(
        store=store,
        auth=auth,
        places=PlaceService(store),
        reviews=reviews,
        favorites=favorites,
        users=UserService(store, auth, reviews, favorites),
        recommendations=RecommendationEngine(store, config),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
