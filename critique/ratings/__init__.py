"""
Place rating aggregation.

Responsibilities:
- Recompute a place's ``averageRating`` / ``reviewCount`` from its reviews.
- Round the mean half-up to one decimal with decimal arithmetic.
- Never fail the review operation that triggered the recompute.
"""
from .aggregator import RatingAggregator, average_rating

__all__ = ["RatingAggregator", "average_rating"]
