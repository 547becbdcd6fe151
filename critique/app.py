from __future__ import annotations

from fastapi import APIRouter, Depends, FastAPI, Query, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from .auth.dependencies import login_session, require_self, require_user
from .auth.models import AuthResponse, LoginRequest, RegisterRequest
from .config import DEFAULT_CONFIG, AppConfig
from .data_seed.seed import seed_places
from .errors import ServiceError
from .favorites.models import FavoriteCheck, FavoriteCreate
from .places.models import PlaceCreate, PlaceUpdate
from .recommendations.models import RecommendationItem, TasteProfile
from .reviews.models import ReviewCreate, ReviewUpdate
from .services import Services, build_services, get_services
from .storage.document_store import DocumentStore
from .storage.models import (
    Category,
    FavoriteOut,
    Place,
    Preferences,
    PriceRange,
    ReviewOut,
    UserOut,
)
from .users.models import (
    AccountDeleteRequest,
    MessageResponse,
    PasswordChangeRequest,
    ProfileUpdate,
    UserHistory,
)
from .utils.logging import configure_logging

router = APIRouter()
api = APIRouter(prefix="/api")


def handle_service_error(request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# ── Public endpoints ─────────────────────────────────────────────────────


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/metadata")
def metadata(services: Services = Depends(get_services)) -> dict:
    places = services.store.find_places()
    cities = sorted({p.location.city for p in places})
    return {
        "categories": [c.value for c in Category],
        "priceRanges": [p.value for p in PriceRange if p.value],
        "cities": cities,
    }


# ── Auth endpoints ───────────────────────────────────────────────────────


@api.post("/auth/register", response_model=AuthResponse, status_code=201)
def register(
    body: RegisterRequest,
    request: Request,
    services: Services = Depends(get_services),
) -> AuthResponse:
    user = services.auth.register(body.email, body.password, body.name)
    login_session(request, user.id, user.email)
    return AuthResponse(user=user.public())


@api.post("/auth/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    request: Request,
    services: Services = Depends(get_services),
) -> AuthResponse:
    user = services.auth.authenticate(body.email, body.password)
    login_session(request, user.id, user.email)
    return AuthResponse(user=user.public())


@api.post("/auth/logout")
def logout(request: Request) -> dict:
    request.session.clear()
    return {"status": "logged_out"}


@api.get("/auth/me", response_model=UserOut)
def auth_me(
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> UserOut:
    return services.users.get_user(user["id"])


# ── User endpoints ───────────────────────────────────────────────────────


@api.get("/users/{user_id}", response_model=UserOut)
def get_user(user_id: str, services: Services = Depends(get_services)) -> UserOut:
    return services.users.get_user(user_id)


@api.put("/users/{user_id}", response_model=UserOut, dependencies=[Depends(require_self)])
def update_user(
    user_id: str,
    body: ProfileUpdate,
    services: Services = Depends(get_services),
) -> UserOut:
    return services.users.update_profile(user_id, body)


@api.get(
    "/users/{user_id}/preferences",
    response_model=Preferences,
    dependencies=[Depends(require_self)],
)
def get_preferences(user_id: str, services: Services = Depends(get_services)) -> Preferences:
    return services.users.get_preferences(user_id)


@api.put(
    "/users/{user_id}/preferences",
    response_model=Preferences,
    dependencies=[Depends(require_self)],
)
def update_preferences(
    user_id: str,
    body: Preferences,
    services: Services = Depends(get_services),
) -> Preferences:
    return services.users.update_preferences(user_id, body)


@api.get(
    "/users/{user_id}/history",
    response_model=UserHistory,
    dependencies=[Depends(require_self)],
)
def user_history(user_id: str, services: Services = Depends(get_services)) -> UserHistory:
    return services.users.get_user_history(user_id)


@api.put(
    "/users/{user_id}/password",
    response_model=MessageResponse,
    dependencies=[Depends(require_self)],
)
def change_password(
    user_id: str,
    body: PasswordChangeRequest,
    services: Services = Depends(get_services),
) -> MessageResponse:
    message = services.users.change_password(user_id, body.current_password, body.new_password)
    return MessageResponse(message=message)


@api.delete(
    "/users/{user_id}",
    response_model=MessageResponse,
    dependencies=[Depends(require_self)],
)
def delete_account(
    user_id: str,
    body: AccountDeleteRequest,
    request: Request,
    services: Services = Depends(get_services),
) -> MessageResponse:
    message = services.users.delete_account(user_id, body.password)
    request.session.clear()
    return MessageResponse(message=message)


# ── Place endpoints ──────────────────────────────────────────────────────


@api.get("/places", response_model=list[Place])
def search_places(
    name: str | None = None,
    location: str | None = None,
    category: Category | None = None,
    price_range: PriceRange | None = Query(default=None, alias="priceRange"),
    sort: str | None = None,
    services: Services = Depends(get_services),
) -> list[Place]:
    return services.places.search_places(
        name=name,
        city=location,
        category=category.value if category else None,
        price_range=price_range.value if price_range else None,
        sort=sort,
    )


@api.get("/places/{place_id}", response_model=Place)
def get_place(place_id: str, services: Services = Depends(get_services)) -> Place:
    return services.places.get_place(place_id)


@api.post(
    "/places",
    response_model=Place,
    status_code=201,
    dependencies=[Depends(require_user)],
)
def create_place(body: PlaceCreate, services: Services = Depends(get_services)) -> Place:
    return services.places.create_place(body)


@api.put("/places/{place_id}", response_model=Place, dependencies=[Depends(require_user)])
def update_place(
    place_id: str,
    body: PlaceUpdate,
    services: Services = Depends(get_services),
) -> Place:
    return services.places.update_place(place_id, body)


@api.delete("/places/{place_id}", status_code=204, dependencies=[Depends(require_user)])
def delete_place(place_id: str, services: Services = Depends(get_services)) -> Response:
    services.places.delete_place(place_id)
    return Response(status_code=204)


# ── Review endpoints ─────────────────────────────────────────────────────


@api.get("/reviews/place/{place_id}", response_model=list[ReviewOut])
def reviews_for_place(place_id: str, services: Services = Depends(get_services)) -> list[ReviewOut]:
    return services.reviews.get_reviews_by_place(place_id)


@api.get("/reviews/user/{user_id}", response_model=list[ReviewOut])
def reviews_for_user(user_id: str, services: Services = Depends(get_services)) -> list[ReviewOut]:
    return services.reviews.get_reviews_by_user(user_id)


@api.post("/reviews", response_model=ReviewOut, status_code=201)
def create_review(
    body: ReviewCreate,
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> ReviewOut:
    return services.reviews.create_review(
        user["id"],
        body.place_id,
        body.rating,
        body.content,
        body.is_blog_post,
        body.images,
    )


@api.put("/reviews/{review_id}", response_model=ReviewOut)
def update_review(
    review_id: str,
    body: ReviewUpdate,
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> ReviewOut:
    return services.reviews.update_review(review_id, user["id"], body)


@api.delete("/reviews/{review_id}", status_code=204)
def delete_review(
    review_id: str,
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> Response:
    services.reviews.delete_review(review_id, user["id"])
    return Response(status_code=204)


# ── Favorite endpoints ───────────────────────────────────────────────────


@api.get("/favorites", response_model=list[Place])
def list_favorites(
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> list[Place]:
    return services.favorites.get_user_favorites(user["id"])


@api.post("/favorites", response_model=FavoriteOut, status_code=201)
def add_favorite(
    body: FavoriteCreate,
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> FavoriteOut:
    return services.favorites.add_favorite(user["id"], body.place_id)


@api.delete("/favorites/{place_id}", status_code=204)
def remove_favorite(
    place_id: str,
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> Response:
    services.favorites.remove_favorite(user["id"], place_id)
    return Response(status_code=204)


@api.get("/favorites/check/{place_id}", response_model=FavoriteCheck)
def check_favorite(
    place_id: str,
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> FavoriteCheck:
    return FavoriteCheck(is_favorite=services.favorites.is_favorite(user["id"], place_id))


# ── Recommendation endpoints ─────────────────────────────────────────────


@api.get("/recommendations", response_model=list[RecommendationItem])
def recommendations(
    limit: str | None = None,
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> list[RecommendationItem]:
    # Raw string so malformed limits fall back to the default instead of 422.
    return services.recommendations.get_recommendations(user["id"], limit)


@api.get("/recommendations/taste-profile", response_model=TasteProfile)
def taste_profile(
    user: dict = Depends(require_user),
    services: Services = Depends(get_services),
) -> TasteProfile:
    return services.recommendations.analyze_user_taste(user["id"])


# ── Application factory ──────────────────────────────────────────────────


def create_app(config: AppConfig | None = None, store: DocumentStore | None = None) -> FastAPI:
    config = config or DEFAULT_CONFIG
    configure_logging(config.log_level)

    store = store if store is not None else DocumentStore()
    if config.seed_on_startup:
        seed_places(store)

    app = FastAPI(title="Critique API", version="1.0.0")
    app.state.config = config
    app.state.services = build_services(store, config)

    app.add_middleware(SessionMiddleware, secret_key=config.session_secret)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[config.frontend_url],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ServiceError, handle_service_error)

    app.include_router(router)
    app.include_router(api)
    return app


app = create_app()
