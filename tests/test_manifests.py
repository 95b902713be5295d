from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from postmatter.content import FrontMatter, Post, PostIdentifier, ScalarValue
from postmatter.manifests import ManifestGenerator, chunk_posts, write_manifest_pages


def _post(day: int, slug: str, *, body: str = "Some body text.", description: str | None = None) -> Post:
    metadata = FrontMatter(
        entries={"layout": ScalarValue(value="post"), "title": ScalarValue(value=slug.title())}
    )
    return Post(
        identifier=PostIdentifier(date=date(2021, 1, day), slug=slug),
        layout="post",
        title=slug.title(),
        categories=frozenset({"zeta", "alpha"}),
        tags=["one", "two"],
        description=description,
        metadata=metadata,
        body=body,
        source_path=f"_posts/2021-01-{day:02d}-{slug}.md",
    )


def test_build_pages_chunks_in_given_order() -> None:
    posts = [_post(5, "e"), _post(4, "d"), _post(3, "c"), _post(2, "b"), _post(1, "a")]
    pages = ManifestGenerator(page_size=2).build_pages(posts)

    assert [page.id for page in pages] == ["posts-001", "posts-002", "posts-003"]
    assert [len(page.items) for page in pages] == [2, 2, 1]
    assert all(page.total_pages == 3 and page.total_items == 5 for page in pages)
    assert [item.slug for item in pages[0].items] == ["e", "d"]
    assert pages[0].items[0].identifier == "2021-01-05-e"


def test_build_pages_returns_single_empty_page_without_posts() -> None:
    pages = ManifestGenerator(page_size=10).build_pages([], prefix="archive")

    assert len(pages) == 1
    assert pages[0].id == "archive-001"
    assert pages[0].items == []


def test_manifest_item_summarizes_post() -> None:
    body = (
        "Intro with a [link](https://example.com) and `code`.\n\n"
        "```python\nprint('skipped')\n```\n"
        "{% include note.html %}\n"
        "Closing line."
    )
    item = ManifestGenerator().build_pages([_post(1, "summary", body=body)])[0].items[0]

    assert item.excerpt == "Intro with a link and code. Closing line."
    assert item.word_count == 8
    assert item.reading_time_minutes == 1
    assert item.categories == ["alpha", "zeta"]
    assert item.metadata == {"layout": "post", "title": "Summary"}


def test_description_takes_precedence_over_excerpt() -> None:
    item = ManifestGenerator().build_pages([_post(1, "described", description="Short.")])[0].items[0]

    assert item.excerpt == "Short."
    assert item.description == "Short."


def test_long_excerpt_is_truncated() -> None:
    body = " ".join(["word"] * 200)
    item = ManifestGenerator().build_pages([_post(1, "long", body=body)])[0].items[0]

    assert item.excerpt is not None
    assert item.excerpt.endswith("…")
    assert len(item.excerpt) <= 241


def test_chunk_posts_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        list(chunk_posts([], 0))


def test_write_manifest_pages_prunes_stale_files(tmp_path: Path) -> None:
    destination = tmp_path / "manifests"
    destination.mkdir()
    stale = destination / "posts-009.json"
    stale.write_text("{}", encoding="utf-8")
    unrelated = destination / "tags.json"
    unrelated.write_text("{}", encoding="utf-8")

    pages = ManifestGenerator(page_size=1).build_pages([_post(2, "b"), _post(1, "a")])
    written = write_manifest_pages(pages, destination)

    assert sorted(path.name for path in written) == ["posts-001.json", "posts-002.json"]
    assert not stale.exists()
    assert unrelated.exists()
    payload = json.loads((destination / "posts-001.json").read_text(encoding="utf-8"))
    assert payload["items"][0]["identifier"] == "2021-01-02-b"
    assert payload["items"][0]["date"] == "2021-01-02"
