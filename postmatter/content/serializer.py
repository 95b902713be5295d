"""Render front matter back into the block syntax read by the parser."""

from __future__ import annotations

import re

from .models import FrontMatter, MappingValue, MetadataValue, ScalarValue, SequenceValue
from .parsers import MARKER

INDENT = "  "

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")
_QUOTE_PREFIXES = frozenset("\"'[]{}#-&*!|>%@`,?")


def render_front_matter(front_matter: FrontMatter) -> str:
    """Render a full front matter block, including both ``---`` markers."""
    lines = [MARKER]
    for key, value in front_matter.items():
        lines.extend(_render_entry(key, value, depth=0))
    lines.append(MARKER)
    return "\n".join(lines) + "\n"


def render_document(front_matter: FrontMatter, body: str) -> str:
    """Render front matter followed by *body* as a complete document."""
    text = render_front_matter(front_matter)
    body = body.strip()
    if body:
        text += f"{body}\n"
    return text


def _render_entry(key: str, value: MetadataValue, *, depth: int) -> list[str]:
    if not _KEY_PATTERN.match(key):
        raise ValueError(f"Front matter key '{key}' cannot be rendered.")
    prefix = INDENT * depth

    if isinstance(value, ScalarValue):
        return [f"{prefix}{key}: {render_scalar(value.value)}"]
    if isinstance(value, SequenceValue):
        if not value.items:
            return [f"{prefix}{key}: []"]
        lines = [f"{prefix}{key}:"]
        lines.extend(f"{prefix}{INDENT}- {render_scalar(item)}" for item in value.items)
        return lines
    if isinstance(value, MappingValue):
        lines = [f"{prefix}{key}:"]
        for child_key, child in value.entries.items():
            lines.extend(_render_entry(child_key, child, depth=depth + 1))
        return lines
    raise TypeError(f"Unsupported metadata value for '{key}': {value!r}")


def render_scalar(value: str) -> str:
    """Quote *value* only when the parser would otherwise read it differently."""
    if "\n" in value or "\r" in value:
        raise ValueError("Front matter values must fit on a single line.")
    if _needs_quotes(value):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


def _needs_quotes(value: str) -> bool:
    if not value or value != value.strip():
        return True
    if value[0] in _QUOTE_PREFIXES:
        return True
    return ": " in value or value.endswith(":") or " #" in value
