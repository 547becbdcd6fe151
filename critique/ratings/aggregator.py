from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from ..storage.document_store import DocumentStore

logger = logging.getLogger(__name__)

_ONE_DECIMAL = Decimal("0.1")


def average_rating(ratings: Sequence[int]) -> float:
    """Mean of *ratings* rounded half-up to one decimal; ``0.0`` when empty.

    >>> average_rating([5, 5, 4])
    4.7
    >>> average_rating([5, 4, 4, 4])
    4.3
    """
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


class RatingAggregator:
    """Keeps a place's aggregate fields consistent with its review set.

    Invoked explicitly by the review service after every write that can
    change a place's ratings; there are no implicit store hooks.
    """

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    def recompute(self, place_id: str) -> None:
        try:
            ratings = [r.rating for r in self._store.reviews_for_place(place_id)]
            average = average_rating(ratings)
            count = len(ratings)
            if not self._store.update_place_aggregates(place_id, average, count):
                logger.info("Skipped rating recompute for missing place %s", place_id)
                return
            logger.debug(
                "Place %s aggregates: averageRating=%s reviewCount=%d",
                place_id, average, count,
            )
        except Exception:
            # The next review write for this place repairs the aggregate.
            logger.warning("Rating recompute failed for place %s", place_id, exc_info=True)
