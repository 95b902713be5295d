"""Write manifest pages to disk."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from .models import ManifestPage

logger = logging.getLogger(__name__)


def write_manifest_pages(
    pages: Iterable[ManifestPage],
    destination: Path,
    *,
    prefix: str = "posts",
) -> list[Path]:
    """Write one ``<page id>.json`` file per page.

    Pages named ``<prefix>-*.json`` that this run did not produce are deleted,
    so shrinking the post count never leaves stale pages behind. Other files in
    *destination* are left alone.
    """
    destination.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []
    for page in pages:
        target = destination / f"{page.id}.json"
        target.write_text(page.model_dump_json(indent=2), encoding="utf-8")
        written.append(target)

    keep = set(written)
    for stale in sorted(destination.glob(f"{prefix}-*.json")):
        if stale not in keep:
            logger.debug("Removing stale manifest page %s", stale)
            stale.unlink()
    return written
