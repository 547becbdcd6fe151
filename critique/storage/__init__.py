"""
Persistence layer.

Responsibilities:
- Define the stored entities (users, places, reviews, favorites).
- Hold them in an in-process document store with the queries the
  services need: reviews per place, reviews per user, filtered and
  sorted place listings, and the aggregate-field update for places.
"""
from .document_store import DocumentStore, DuplicateKeyError

__all__ = ["DocumentStore", "DuplicateKeyError"]
