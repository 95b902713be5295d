"""Pydantic models describing manifest structures."""

from __future__ import annotations

import datetime as dt
from typing import Any, Optional

from pydantic import BaseModel, Field


def utc_now() -> dt.datetime:
    return dt.datetime.now(tz=dt.timezone.utc)


class ManifestItem(BaseModel):
    """Slim post representation handed to the site renderer."""

    identifier: str = Field(description="Post key in YYYY-MM-DD-slug form.")
    date: dt.date
    slug: str
    title: str
    layout: str = Field(default="")
    description: Optional[str] = Field(default=None)
    excerpt: Optional[str] = Field(default=None)
    categories: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    comments_enabled: bool = Field(default=False)
    word_count: int = Field(default=0, ge=0)
    reading_time_minutes: int = Field(default=0, ge=0)
    source_path: Optional[str] = Field(default=None)
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Full front matter, including keys unknown to the schema.",
    )


class ManifestPage(BaseModel):
    """Chunked payload distributed to the renderer."""

    id: str = Field(description="Stable identifier for the page (e.g., 'posts-001').")
    page: int = Field(ge=1)
    total_pages: int = Field(ge=1)
    total_items: int = Field(ge=0)
    items: list[ManifestItem] = Field(default_factory=list)
    generated_at: dt.datetime = Field(default_factory=utc_now)
