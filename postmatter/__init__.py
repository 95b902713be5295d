"""Front matter parsing, validation, and post registry for Markdown blogs."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as load_pkg_version
from pathlib import Path
import tomllib

from .ingest import BatchFailure, BatchResult, SourceDocument, load_post, load_posts, process_batch
from .registry import PostRegistry

__all__ = [
    "BatchFailure",
    "BatchResult",
    "PostRegistry",
    "SourceDocument",
    "__version__",
    "load_post",
    "load_posts",
    "process_batch",
]


def _read_local_project_version() -> str:
    """Read the project version from pyproject.toml when the package is uninstalled."""
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return "0.0.0"
    return data.get("project", {}).get("version", "0.0.0")


try:
    __version__ = load_pkg_version("postmatter")
except PackageNotFoundError:
    __version__ = _read_local_project_version()
