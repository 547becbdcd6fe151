"""
Recommendation engine.

Responsibilities:
- Pick candidate places for a user: personalized from their rating
  history (warm) or popular places for users with no reviews (cold).
- Score each candidate with a deterministic 0-100 match score.
- Explain each recommendation in plain language.
- Summarize a user's taste from their reviews.
"""
