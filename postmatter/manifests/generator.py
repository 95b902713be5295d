"""Utilities for building paginated manifest files."""

from __future__ import annotations

import re
from math import ceil
from typing import Iterable, Iterator, Optional, Tuple

from ..content.models import Post
from .models import ManifestItem, ManifestPage

DEFAULT_PAGE_SIZE = 200
EXCERPT_LIMIT = 240

_IMAGE_PATTERN = re.compile(r"!\[[^\]]*\]\([^)]+\)")
_LINK_PATTERN = re.compile(r"\[([^\]]+)\]\([^)]+\)")
_CODE_PATTERN = re.compile(r"`([^`]+)`")
_LIQUID_PATTERN = re.compile(r"\{[%{].*?[%}]\}")


class ManifestGenerator:
    """Generate manifest pages from posts that are already newest-first."""

    def __init__(self, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be positive")
        self.page_size = page_size

    def build_pages(self, posts: Iterable[Post], prefix: str = "posts") -> list[ManifestPage]:
        ordered = list(posts)
        chunks = list(chunk_posts(ordered, self.page_size))
        total_items = len(ordered)
        total_pages = max(len(chunks), 1)

        pages: list[ManifestPage] = []
        for index, chunk in enumerate(chunks, start=1):
            pages.append(
                ManifestPage(
                    id=f"{prefix}-{index:03d}",
                    page=index,
                    total_pages=total_pages,
                    total_items=total_items,
                    items=[self._to_item(post) for post in chunk],
                )
            )

        if not pages:
            pages.append(
                ManifestPage(
                    id=f"{prefix}-001",
                    page=1,
                    total_pages=1,
                    total_items=0,
                    items=[],
                )
            )

        return pages

    @staticmethod
    def _to_item(post: Post) -> ManifestItem:
        excerpt, word_count = _summarize(post)
        return ManifestItem(
            identifier=post.key,
            date=post.date,
            slug=post.slug,
            title=post.title,
            layout=post.layout,
            description=post.description,
            excerpt=excerpt,
            categories=sorted(post.categories),
            tags=list(post.tags),
            comments_enabled=post.comments_enabled,
            word_count=word_count,
            reading_time_minutes=_reading_time_minutes(word_count),
            source_path=post.source_path,
            metadata=post.metadata.to_plain(),
        )


def chunk_posts(posts: Iterable[Post], page_size: int = DEFAULT_PAGE_SIZE) -> Iterator[list[Post]]:
    """Yield posts in deterministic page-sized chunks."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")

    batch: list[Post] = []
    for post in posts:
        batch.append(post)
        if len(batch) >= page_size:
            yield batch
            batch = []
    if batch:
        yield batch


def _summarize(post: Post) -> Tuple[Optional[str], int]:
    plain = _extract_plain_text(post.body)
    if post.description:
        excerpt: str | None = post.description
    else:
        excerpt = _truncate(plain, EXCERPT_LIMIT) if plain else None
    word_count = len(plain.split()) if plain else 0
    return excerpt, word_count


def _extract_plain_text(body: str) -> str:
    text_parts: list[str] = []
    in_fence = False
    for line in body.splitlines():
        line = line.strip()
        if line.startswith("```"):
            in_fence = not in_fence
            continue
        if in_fence or not line:
            continue
        line = _LIQUID_PATTERN.sub("", line)
        line = _IMAGE_PATTERN.sub("", line)
        line = _LINK_PATTERN.sub(r"\1", line)
        line = _CODE_PATTERN.sub(r"\1", line)
        line = line.lstrip("#>*-1234567890. ").strip()
        if line:
            text_parts.append(line)
    return " ".join(text_parts)


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    truncated = text[:limit].rsplit(" ", 1)[0]
    return f"{truncated}…"


def _reading_time_minutes(word_count: int) -> int:
    if word_count == 0:
        return 0
    return max(1, ceil(word_count / 200))
