"""Manifest data structures and helpers."""

from .generator import ManifestGenerator, chunk_posts
from .models import ManifestItem, ManifestPage
from .writer import write_manifest_pages

__all__ = [
    "ManifestGenerator",
    "ManifestItem",
    "ManifestPage",
    "chunk_posts",
    "write_manifest_pages",
]
