from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class AppConfig:
    session_secret: str = os.getenv("SESSION_SECRET", "critique-secret-change-in-production")
    frontend_url: str = os.getenv("FRONTEND_URL", "http://localhost:5173")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "10"))
    seed_on_startup: bool = _env_flag("SEED_PLACES", "false")

    # Recommendation tuning
    default_recommendation_limit: int = 5
    min_candidate_rating: float = 3.5
    liked_rating_threshold: int = 4
    popular_match_score: int = 75

    # Rating changes made through PUT /reviews/{id} refresh the place aggregate.
    recompute_on_review_update: bool = _env_flag("RECOMPUTE_ON_REVIEW_UPDATE", "true")


DEFAULT_CONFIG = AppConfig()
