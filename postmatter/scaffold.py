"""Utilities for scaffolding new posts."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path

from .config import Config
from .content import FrontMatter, ScalarValue, SequenceValue, render_document

SLUG_PATTERN = re.compile(r"[^a-z0-9\-]+")
WHITESPACE_PATTERN = re.compile(r"\s+")

DEFAULT_BODY = "Write the post here."


class ScaffoldError(RuntimeError):
    """Raised when scaffolding cannot continue."""


@dataclass(slots=True)
class ScaffoldResult:
    """Details about filesystem writes performed during scaffolding."""

    created: list[Path] = field(default_factory=list)
    updated: list[Path] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)

    def record(self, path: Path, existed: bool) -> None:
        if existed:
            self.updated.append(path)
        else:
            self.created.append(path)


def slugify(value: str) -> str:
    """Convert arbitrary text into a filesystem-safe slug."""
    text = value.strip().lower()
    text = WHITESPACE_PATTERN.sub("-", text)
    text = re.sub(r"_+", "-", text)
    text = SLUG_PATTERN.sub("-", text)
    text = re.sub(r"-{2,}", "-", text)
    return text.strip("-")


def normalize_slug(raw: str) -> str:
    """Convert user input into a slug, rejecting input with nothing usable."""
    slug = slugify(raw)
    if not slug:
        raise ScaffoldError("Unable to derive a valid slug. Provide letters, numbers, or hyphens.")
    return slug


def default_title(slug: str) -> str:
    """Generate a human-friendly title from a slug."""
    words = [word.capitalize() for word in slug.split("-") if word]
    return " ".join(words) or "Untitled"


def post_filename(published: date, slug: str) -> str:
    return f"{published.isoformat()}-{slug}.md"


def scaffold_post(
    config: Config,
    slug: str,
    title: str | None = None,
    *,
    published: date | None = None,
    layout: str = "post",
    force: bool = False,
) -> ScaffoldResult:
    """Write a new ``YYYY-MM-DD-slug.md`` post into the content directory."""
    slug = normalize_slug(slug)
    title = " ".join(title.split()) if title else ""
    if not title:
        title = default_title(slug)
    published = published or date.today()

    post_path = config.content_dir / post_filename(published, slug)
    existed = _write_text(post_path, _render_post(layout, title), force=force)

    result = ScaffoldResult()
    result.record(post_path, existed)
    result.notes.append("Fill in 'description' and 'tags' before publishing; 'postmatter lint' flags them.")
    return result


def _render_post(layout: str, title: str) -> str:
    front_matter = FrontMatter(
        entries={
            "layout": ScalarValue(value=layout),
            "title": ScalarValue(value=title),
            "description": ScalarValue(value=""),
            "categories": SequenceValue(items=[]),
            "tags": SequenceValue(items=[]),
            "comments": ScalarValue(value="true"),
        }
    )
    return render_document(front_matter, DEFAULT_BODY)


def _write_text(path: Path, content: str, *, force: bool) -> bool:
    path.parent.mkdir(parents=True, exist_ok=True)
    existed = path.exists()
    if existed and not force:
        raise ScaffoldError(f"Path already exists: {path}")
    path.write_text(content, encoding="utf-8")
    return existed
