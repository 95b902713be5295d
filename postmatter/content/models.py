"""Typed representations of blog posts and their front matter."""

from __future__ import annotations

import re
import datetime as dt
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..errors import MalformedDocument

FILENAME_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})-(?P<slug>.+?)(?:\.(?i:md|markdown))?$"
)


class ScalarValue(BaseModel):
    """A single string value, e.g. ``title: Hello``."""

    kind: Literal["scalar"] = "scalar"
    value: str = ""


class SequenceValue(BaseModel):
    """An ordered list of strings, written inline or as ``- item`` lines."""

    kind: Literal["sequence"] = "sequence"
    items: list[str] = Field(default_factory=list)


class MappingValue(BaseModel):
    """A nested block of ``key: value`` entries."""

    kind: Literal["mapping"] = "mapping"
    entries: dict[str, "MetadataValue"] = Field(default_factory=dict)


MetadataValue = Annotated[
    Union[ScalarValue, SequenceValue, MappingValue],
    Field(discriminator="kind"),
]

MappingValue.model_rebuild()


def to_plain(value: MetadataValue) -> Any:
    """Collapse a tagged metadata value into plain str/list/dict data."""
    if isinstance(value, ScalarValue):
        return value.value
    if isinstance(value, SequenceValue):
        return list(value.items)
    if isinstance(value, MappingValue):
        return {key: to_plain(entry) for key, entry in value.entries.items()}
    raise TypeError(f"Unsupported metadata value: {value!r}")


class FrontMatter(BaseModel):
    """Ordered mapping of front-matter keys to tagged values."""

    entries: dict[str, MetadataValue] = Field(default_factory=dict)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __getitem__(self, key: str) -> MetadataValue:
        return self.entries[key]

    def keys(self):
        return self.entries.keys()

    def __len__(self) -> int:
        return len(self.entries)

    def get(self, key: str) -> Optional[MetadataValue]:
        return self.entries.get(key)

    def items(self):
        return self.entries.items()

    def scalar(self, key: str) -> Optional[str]:
        """Return the value of *key* when it holds a scalar, else ``None``."""
        value = self.entries.get(key)
        if isinstance(value, ScalarValue):
            return value.value
        return None

    def sequence(self, key: str) -> list[str]:
        value = self.entries.get(key)
        if isinstance(value, SequenceValue):
            return list(value.items)
        return []

    def to_plain(self) -> dict[str, Any]:
        return {key: to_plain(value) for key, value in self.entries.items()}


class PostIdentifier(BaseModel):
    """Publication date and slug taken from a ``YYYY-MM-DD-slug.md`` filename."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    slug: str

    @field_validator("slug")
    def _normalize_slug(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("slug cannot be empty")
        return cleaned

    @classmethod
    def from_filename(cls, name: str) -> PostIdentifier:
        """Parse an identifier from a post filename (any leading directories are ignored)."""
        basename = name.replace("\\", "/").rsplit("/", 1)[-1]
        match = FILENAME_PATTERN.match(basename)
        if match is None:
            raise MalformedDocument(
                f"filename '{basename}' does not follow the YYYY-MM-DD-slug.md convention"
            )
        try:
            published = dt.date(int(match["year"]), int(match["month"]), int(match["day"]))
        except ValueError as exc:
            raise MalformedDocument(f"filename '{basename}' has an invalid date: {exc}") from exc
        try:
            return cls(date=published, slug=match["slug"])
        except ValidationError as exc:
            raise MalformedDocument(f"filename '{basename}' has an empty slug") from exc

    @classmethod
    def parse(cls, text: str) -> PostIdentifier:
        return cls.from_filename(text)

    @property
    def sort_key(self) -> tuple[dt.date, str]:
        return (self.date, self.slug)

    def __str__(self) -> str:
        return f"{self.date.isoformat()}-{self.slug}"


class Post(BaseModel):
    """A validated post: identifier, typed metadata, and opaque body text."""

    identifier: PostIdentifier
    layout: str
    title: str
    categories: frozenset[str] = Field(default_factory=frozenset)
    tags: list[str] = Field(default_factory=list)
    description: Optional[str] = None
    comments_enabled: bool = False
    metadata: FrontMatter = Field(default_factory=FrontMatter)
    body: str
    source_path: Optional[str] = None

    @field_validator("title", "body")
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value cannot be empty")
        return value

    @property
    def date(self) -> dt.date:
        return self.identifier.date

    @property
    def slug(self) -> str:
        return self.identifier.slug

    @property
    def key(self) -> str:
        return str(self.identifier)
