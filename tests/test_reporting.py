from __future__ import annotations

import json
from pathlib import Path

from postmatter.config import Config
from postmatter.ingest import SourceDocument, process_batch
from postmatter.manifests import ManifestGenerator
from postmatter.reporting import (
    REPORT_FILENAME,
    assemble_report,
    build_document_stats,
    build_manifest_stats,
    write_report,
)

VALID = "---\nlayout: post\ntitle: {title}\n---\nBody."


def _result():
    documents = [
        SourceDocument("2021-02-01-first.md", VALID.format(title="First")),
        SourceDocument("2021-02-02-second.md", VALID.format(title="Second")),
        SourceDocument("2021-02-03-broken.md", "---\ntitle: Broken\n"),
        SourceDocument("2021-02-04-untitled.md", "---\nlayout: post\n---\nBody."),
        SourceDocument("2021-02-01-first.markdown", VALID.format(title="Copy")),
    ]
    return process_batch(documents, Config())


def test_build_document_stats_counts_outcomes() -> None:
    stats = build_document_stats(_result())

    assert stats.total == 5
    assert stats.registered == 2
    assert stats.failed == 3


def test_build_manifest_stats_counts_items() -> None:
    result = _result()
    pages = ManifestGenerator(page_size=1).build_pages(result.registry.posts())

    stats = build_manifest_stats(pages)

    assert stats.pages == 2
    assert stats.items == 2


def test_assemble_report_groups_failures_by_type() -> None:
    result = _result()
    manifests = build_manifest_stats(ManifestGenerator().build_pages(result.registry.posts()))

    report = assemble_report(project="Blog", duration_seconds=0.5, result=result, manifests=manifests)

    assert report.failures_by_type == {
        "DuplicateIdentifier": 1,
        "MalformedDocument": 1,
        "MissingRequiredField": 1,
    }
    assert [failure.reference for failure in report.failures] == [
        "2021-02-03-broken.md",
        "2021-02-04-untitled.md",
        "2021-02-01-first.markdown",
    ]


def test_write_report_writes_json(tmp_path: Path) -> None:
    result = _result()
    manifests = build_manifest_stats(ManifestGenerator().build_pages(result.registry.posts()))
    report = assemble_report(project="Blog", duration_seconds=1.25, result=result, manifests=manifests)

    target = write_report(report, tmp_path / "out")

    assert target == tmp_path / "out" / REPORT_FILENAME
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert payload["project"] == "Blog"
    assert payload["documents"] == {"total": 5, "registered": 2, "failed": 3}
    assert payload["manifests"] == {"pages": 1, "items": 2}
    assert payload["failures"][0]["error_type"] == "MalformedDocument"


def test_validation_failures_are_counted_per_violation() -> None:
    documents = [
        SourceDocument("2021-03-01-messy.md", "---\ntags: solo\ncomments: maybe\n---\nBody."),
        SourceDocument("2021-03-02-untitled.md", "---\nlayout: post\n---\nBody."),
    ]
    result = process_batch(documents, Config())
    manifests = build_manifest_stats(ManifestGenerator().build_pages(result.registry.posts()))

    report = assemble_report(project="Blog", duration_seconds=0.1, result=result, manifests=manifests)

    assert report.failures_by_type == {"MissingRequiredField": 3, "TypeMismatch": 2}
    assert [failure.error_type for failure in report.failures] == [
        "FrontMatterValidationError",
        "FrontMatterValidationError",
    ]
