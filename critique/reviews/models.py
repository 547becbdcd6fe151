from __future__ import annotations

from pydantic import Field

from ..storage.models import CamelModel


class ReviewCreate(CamelModel):
    place_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    content: str | None = None
    is_blog_post: bool = False
    images: list[str] = Field(default_factory=list)


class ReviewUpdate(CamelModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    content: str | None = None
    is_blog_post: bool | None = None
    images: list[str] | None = None
