from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SeedConfig:
    """
    Configuration for the place seed loader.
    """

    data_dir: Path = Path(__file__).resolve().parent / "data"
    places_filename: str = "seed_places.csv"

    @property
    def places_path(self) -> Path:
        return self.data_dir / self.places_filename


DEFAULT_SEED_CONFIG = SeedConfig()
