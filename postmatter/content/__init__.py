"""Utilities for parsing and rendering post front matter."""

from .models import (
    FrontMatter,
    MappingValue,
    MetadataValue,
    Post,
    PostIdentifier,
    ScalarValue,
    SequenceValue,
)
from .parsers import ParsedDocument, load_document, parse_document, split_front_matter
from .serializer import render_document, render_front_matter

__all__ = [
    "FrontMatter",
    "MappingValue",
    "MetadataValue",
    "ParsedDocument",
    "Post",
    "PostIdentifier",
    "ScalarValue",
    "SequenceValue",
    "load_document",
    "parse_document",
    "render_document",
    "render_front_matter",
    "split_front_matter",
]
