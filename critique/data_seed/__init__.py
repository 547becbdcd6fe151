"""
Place seed data.

Responsibilities:
- Read the bundled (or a supplied) CSV of places.
- Normalize rows into the canonical place schema.
- Insert places that are not in the store yet.
"""
