"""Build reporting helpers for postmatter."""

from __future__ import annotations

import json
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field

from .errors import FrontMatterValidationError
from .ingest import BatchFailure, BatchResult
from .manifests import ManifestPage

REPORT_FILENAME = "build-report.json"


class DocumentStats(BaseModel):
    total: int
    registered: int
    failed: int


class ManifestStats(BaseModel):
    pages: int
    items: int


class FailureDetail(BaseModel):
    reference: str
    error_type: str
    message: str


class BuildReport(BaseModel):
    project: str
    generated_at: datetime
    duration_seconds: float
    documents: DocumentStats
    manifests: ManifestStats
    failures_by_type: dict[str, int] = Field(default_factory=dict)
    failures: list[FailureDetail] = Field(default_factory=list)


def build_document_stats(result: BatchResult) -> DocumentStats:
    return DocumentStats(
        total=result.total,
        registered=len(result.registry),
        failed=len(result.failures),
    )


def build_manifest_stats(pages: Iterable[ManifestPage]) -> ManifestStats:
    pages_list = list(pages)
    total_items = sum(len(page.items) for page in pages_list)
    return ManifestStats(pages=len(pages_list), items=total_items)


def describe_failure(failure: BatchFailure) -> FailureDetail:
    return FailureDetail(
        reference=failure.reference,
        error_type=type(failure.error).__name__,
        message=str(failure.error),
    )


def assemble_report(
    *,
    project: str,
    duration_seconds: float,
    result: BatchResult,
    manifests: ManifestStats,
) -> BuildReport:
    failures = [describe_failure(failure) for failure in result.failures]
    counts = Counter(name for failure in result.failures for name in _failure_types(failure))
    return BuildReport(
        project=project,
        generated_at=datetime.now(timezone.utc),
        duration_seconds=duration_seconds,
        documents=build_document_stats(result),
        manifests=manifests,
        failures_by_type=dict(sorted(counts.items())),
        failures=failures,
    )


def _failure_types(failure: BatchFailure) -> list[str]:
    """Name the violation classes behind a validation failure, else the error class."""
    error = failure.error
    if isinstance(error, FrontMatterValidationError):
        return [type(violation).__name__ for violation in error.violations]
    return [type(error).__name__]


def write_report(report: BuildReport, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    target = output_dir / REPORT_FILENAME
    with target.open("w", encoding="utf-8") as handle:
        json.dump(report.model_dump(mode="json"), handle, ensure_ascii=False, indent=2)
    return target
