"""Split post documents and parse their front matter into tagged values."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ..errors import InvalidFieldSyntax, MalformedDocument
from .models import FrontMatter, MappingValue, MetadataValue, ScalarValue, SequenceValue

MARKER = "---"

_FIELD_PATTERN = re.compile(r"^(?P<key>[A-Za-z0-9_][A-Za-z0-9_.-]*)[ \t]*:(?:[ \t]+(?P<value>.*))?$")
_DOUBLE_QUOTE_ESCAPE = re.compile(r'\\(["\\])')


@dataclass(frozen=True)
class ParsedDocument:
    """Front matter and body text of a single document."""

    metadata: FrontMatter
    body: str


@dataclass(frozen=True, slots=True)
class _Line:
    number: int
    indent: int
    text: str
    raw: str


def parse_document(text: str) -> ParsedDocument:
    """Parse raw document text into front matter and body.

    The first line must be the ``---`` marker and a second marker line must
    close the block. Everything after the closing marker is the body, with
    surrounding whitespace stripped.

    Raises:
        MalformedDocument: If the opening marker is not the first line or the
            closing marker is missing.
        InvalidFieldSyntax: If a metadata line cannot be parsed.
    """
    block, body = split_front_matter(text)
    metadata = parse_metadata_block(block, first_line_number=2)
    return ParsedDocument(metadata=metadata, body=body.strip())


def load_document(path: str | Path) -> ParsedDocument:
    """Read *path* as UTF-8 and parse it with :func:`parse_document`."""
    return parse_document(Path(path).read_text(encoding="utf-8"))


def split_front_matter(text: str) -> tuple[list[str], str]:
    """Return the lines between the two markers and the remaining body text."""
    if text.startswith("\ufeff"):
        text = text[1:]
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if lines[0].rstrip() != MARKER:
        raise MalformedDocument("Document must start with a '---' front matter marker.")

    for idx in range(1, len(lines)):
        if lines[idx].rstrip() == MARKER:
            return lines[1:idx], "\n".join(lines[idx + 1 :])
    raise MalformedDocument("Closing front matter delimiter '---' missing.")


def parse_metadata_block(lines: Sequence[str], *, first_line_number: int = 1) -> FrontMatter:
    """Parse the lines of a front matter block into an ordered :class:`FrontMatter`."""
    tokens = _tokenize(lines, first_line_number)
    parser = _BlockParser(tokens)
    return FrontMatter(entries=parser.parse())


def _tokenize(lines: Sequence[str], first_line_number: int) -> list[_Line]:
    tokens: list[_Line] = []
    for offset, raw in enumerate(lines):
        number = first_line_number + offset
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        leading = raw[: len(raw) - len(raw.lstrip())]
        if "\t" in leading:
            raise InvalidFieldSyntax(number, raw, "tabs cannot be used for indentation")
        tokens.append(_Line(number=number, indent=len(leading), text=stripped, raw=raw))
    return tokens


class _BlockParser:
    """Recursive descent over indented ``key: value`` and ``- item`` lines."""

    def __init__(self, lines: list[_Line]) -> None:
        self._lines = lines
        self._pos = 0

    def parse(self) -> dict[str, MetadataValue]:
        if not self._lines:
            return {}
        entries = self._parse_entries(0)
        if self._pos < len(self._lines):
            line = self._lines[self._pos]
            raise InvalidFieldSyntax(line.number, line.raw, "unexpected indentation")
        return entries

    def _peek(self) -> _Line | None:
        if self._pos < len(self._lines):
            return self._lines[self._pos]
        return None

    def _parse_entries(self, indent: int) -> dict[str, MetadataValue]:
        entries: dict[str, MetadataValue] = {}
        while True:
            line = self._peek()
            if line is None:
                break
            if line.indent < indent:
                break
            if line.indent > indent:
                raise InvalidFieldSyntax(line.number, line.raw, "unexpected indentation")
            if _is_item(line.text):
                raise InvalidFieldSyntax(line.number, line.raw, "sequence item without a key")

            match = _FIELD_PATTERN.match(line.text)
            if match is None:
                raise InvalidFieldSyntax(line.number, line.raw)
            key = match["key"]
            if key in entries:
                raise InvalidFieldSyntax(line.number, line.raw, f"duplicate key '{key}'")

            self._pos += 1
            raw_value = (match["value"] or "").strip()
            if raw_value:
                entries[key] = _parse_inline(raw_value, line)
            else:
                entries[key] = self._parse_nested(indent)
        return entries

    def _parse_nested(self, parent_indent: int) -> MetadataValue:
        line = self._peek()
        if line is None:
            return ScalarValue(value="")
        # YAML permits block sequence items at the same column as their key.
        if _is_item(line.text) and line.indent >= parent_indent:
            return self._parse_sequence(line.indent)
        if line.indent > parent_indent:
            return MappingValue(entries=self._parse_entries(line.indent))
        return ScalarValue(value="")

    def _parse_sequence(self, indent: int) -> SequenceValue:
        items: list[str] = []
        while True:
            line = self._peek()
            if line is None:
                break
            if line.indent != indent or not _is_item(line.text):
                break
            item = line.text[1:].strip()
            items.append(_unquote(item, line) if item else "")
            self._pos += 1
        return SequenceValue(items=items)


def _is_item(text: str) -> bool:
    return text == "-" or text.startswith("- ")


def _parse_inline(raw_value: str, line: _Line) -> MetadataValue:
    if raw_value.startswith("["):
        if not raw_value.endswith("]"):
            raise InvalidFieldSyntax(line.number, line.raw, "unterminated inline sequence")
        return SequenceValue(items=_split_flow(raw_value[1:-1], line))
    return ScalarValue(value=_unquote(raw_value, line))


def _split_flow(inner: str, line: _Line) -> list[str]:
    if not inner.strip():
        return []

    parts: list[str] = []
    current: list[str] = []
    quote: str | None = None
    idx = 0
    while idx < len(inner):
        char = inner[idx]
        if quote is not None:
            current.append(char)
            if char == "\\" and quote == '"' and idx + 1 < len(inner):
                current.append(inner[idx + 1])
                idx += 2
                continue
            if char == quote:
                quote = None
        elif char in "\"'" and not "".join(current).strip():
            quote = char
            current.append(char)
        elif char == ",":
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        idx += 1

    if quote is not None:
        raise InvalidFieldSyntax(line.number, line.raw, "unterminated quoted item")
    parts.append("".join(current).strip())

    # Allow a single trailing comma, as in ``[a, b,]``.
    if len(parts) > 1 and parts[-1] == "":
        parts.pop()
    if any(part == "" for part in parts):
        raise InvalidFieldSyntax(line.number, line.raw, "empty item in inline sequence")
    return [_unquote(part, line) for part in parts]


def _unquote(text: str, line: _Line) -> str:
    if not text or text[0] not in "\"'":
        return text
    quote = text[0]
    if len(text) < 2 or text[-1] != quote:
        raise InvalidFieldSyntax(line.number, line.raw, "unterminated quoted value")
    inner = text[1:-1]
    if quote == "'":
        return inner.replace("''", "'")
    return _DOUBLE_QUOTE_ESCAPE.sub(lambda match: match.group(1), inner)
