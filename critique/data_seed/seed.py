from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import pandas as pd

from ..places.models import PlaceCreate
from ..storage.document_store import DocumentStore
from ..storage.models import Category, Coordinates, Location, Place, PriceRange
from .config import DEFAULT_SEED_CONFIG, SeedConfig

logger = logging.getLogger(__name__)

SEED_COLUMNS: List[str] = [
    "external_id",
    "name",
    "category",
    "address",
    "city",
    "state",
    "zip_code",
    "lat",
    "lng",
    "description",
    "price_range",
]

_CATEGORIES = {c.value for c in Category}
_PRICE_RANGES = {p.value for p in PriceRange}


def _normalize_category(raw: object) -> str:
    value = str(raw).strip().lower().replace(" ", "_") if pd.notna(raw) else ""
    return value if value in _CATEGORIES else Category.other.value


def _normalize_price_range(raw: object) -> str:
    value = str(raw).strip() if pd.notna(raw) else ""
    return value if value in _PRICE_RANGES else PriceRange.unspecified.value


def _optional_str(raw: object) -> str | None:
    if raw is None or pd.isna(raw):
        return None
    value = str(raw).strip()
    return value or None


def _optional_float(raw: object) -> float | None:
    if raw is None or pd.isna(raw):
        return None
    try:
        return float(str(raw).strip())
    except (TypeError, ValueError):
        return None


def load_seed_places(path: Path) -> list[PlaceCreate]:
    """Read a places CSV and map each usable row to a ``PlaceCreate``.

    Rows without a name, address or city are skipped.
    """
    df = pd.read_csv(path, dtype=str)
    for col in SEED_COLUMNS:
        if col not in df.columns:
            df[col] = pd.NA

    df = df.dropna(subset=["name", "address", "city"])

    places: list[PlaceCreate] = []
    for _, row in df.iterrows():
        lat, lng = _optional_float(row["lat"]), _optional_float(row["lng"])
        places.append(PlaceCreate(
            external_id=_optional_str(row["external_id"]),
            name=str(row["name"]).strip(),
            category=_normalize_category(row["category"]),
            location=Location(
                address=str(row["address"]).strip(),
                city=str(row["city"]).strip(),
                state=_optional_str(row["state"]),
                zip_code=_optional_str(row["zip_code"]),
                coordinates=Coordinates(lat=lat, lng=lng) if lat is not None and lng is not None else None,
            ),
            description=_optional_str(row["description"]),
            price_range=_normalize_price_range(row["price_range"]),
        ))
    return places


def seed_places(store: DocumentStore, config: SeedConfig = DEFAULT_SEED_CONFIG) -> int:
    """
    Insert seed places into *store*.

    Places whose ``external_id`` is already present are skipped.  Seeded
    places start with no reviews, so their aggregates are 0 / 0.
    """
    inserted = 0
    for data in load_seed_places(config.places_path):
        if data.external_id and store.find_place_by_external_id(data.external_id):
            continue
        store.add_place(Place(**data.model_dump()))
        inserted += 1
    logger.info("Seeded %d places from %s", inserted, config.places_path)
    return inserted


if __name__ == "__main__":
    count = seed_places(DocumentStore())
    print(f"Seed file parsed. {count} places would be inserted.")
