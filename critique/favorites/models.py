from __future__ import annotations

from pydantic import Field

from ..storage.models import CamelModel


class FavoriteCreate(CamelModel):
    place_id: str = Field(..., min_length=1)


class FavoriteCheck(CamelModel):
    is_favorite: bool
