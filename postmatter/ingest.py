"""High-level ingestion helpers to load posts from the workspace."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

from .config import Config, FrontMatterSchema
from .content import ParsedDocument, Post, PostIdentifier, parse_document
from .errors import (
    FrontMatterValidationError,
    MalformedDocument,
    MissingRequiredField,
    PostmatterError,
)
from .registry import PostRegistry
from .validation import parse_boolean, validate_front_matter

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = {".md", ".markdown"}


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """A document to ingest and the reference used to report on it.

    Either ``text`` is given directly or the document is read from ``path``
    when it is processed, so unreadable files fail on their own.
    """

    reference: str
    text: str | None = None
    identifier: PostIdentifier | None = None
    path: Path | None = None

    def resolve_identifier(self) -> PostIdentifier:
        if self.identifier is not None:
            return self.identifier
        return PostIdentifier.from_filename(self.reference)

    def read_text(self) -> str:
        if self.text is not None:
            return self.text
        return read_source(self.path or Path(self.reference))


@dataclass(frozen=True, slots=True)
class BatchFailure:
    """A document that was excluded from the registry and why."""

    reference: str
    error: PostmatterError


@dataclass(slots=True)
class BatchResult:
    """Registered posts and ordered failures for one ingestion run."""

    registry: PostRegistry = field(default_factory=PostRegistry)
    failures: list[BatchFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def total(self) -> int:
        return len(self.registry) + len(self.failures)


def build_post(
    parsed: ParsedDocument,
    identifier: PostIdentifier,
    *,
    schema: FrontMatterSchema | None = None,
    source_path: str | None = None,
) -> Post:
    """Validate parsed front matter and convert it into a :class:`Post`."""
    metadata = parsed.metadata
    validate_front_matter(metadata, schema)

    title = (metadata.scalar("title") or "").strip()
    if not title:
        raise FrontMatterValidationError([MissingRequiredField("title")])
    if not parsed.body.strip():
        raise MalformedDocument("Document body is empty.")

    description = metadata.scalar("description")
    return Post(
        identifier=identifier,
        layout=metadata.scalar("layout") or "",
        title=title,
        categories=frozenset(metadata.sequence("categories")),
        tags=metadata.sequence("tags"),
        description=description if description else None,
        comments_enabled=bool(parse_boolean(metadata.get("comments"))),
        metadata=metadata,
        body=parsed.body,
        source_path=source_path,
    )


def load_post(
    text: str,
    identifier: PostIdentifier,
    *,
    config: Config | None = None,
    source_path: str | None = None,
) -> Post:
    """Parse, validate, and build a post from raw document text.

    The schema is chosen by the document's ``layout`` via
    :meth:`Config.schema_for`.
    """
    config = config or Config()
    parsed = parse_document(text)
    schema = config.schema_for(parsed.metadata.scalar("layout"))
    return build_post(parsed, identifier, schema=schema, source_path=source_path)


def load_post_file(path: str | Path, config: Config | None = None) -> Post:
    """Load a ``YYYY-MM-DD-slug.md`` file into a post."""
    source_path = Path(path)
    identifier = PostIdentifier.from_filename(source_path.name)
    text = read_source(source_path)
    return load_post(text, identifier, config=config, source_path=str(source_path))


def read_source(path: Path) -> str:
    """Read *path* as UTF-8, reporting unreadable files as malformed documents."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise MalformedDocument(f"Cannot read {path}: {exc.strerror or exc}") from exc
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedDocument(
            f"{path.name} is not valid UTF-8 (byte 0x{raw[exc.start]:02x} at offset {exc.start})"
        ) from exc


def process_batch(documents: Iterable[SourceDocument], config: Config | None = None) -> BatchResult:
    """Parse, validate, and register a batch of documents.

    Documents are processed independently (in a thread pool when
    ``config.workers > 1``) and registered in input order, so the first of
    two documents sharing an identifier always wins. Failures are collected
    rather than raised.
    """
    config = config or Config()
    items = list(documents)

    if config.workers > 1 and len(items) > 1:
        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            outcomes = list(executor.map(lambda doc: _load_source(doc, config), items))
    else:
        outcomes = [_load_source(doc, config) for doc in items]

    result = BatchResult()
    for document, outcome in zip(items, outcomes):
        if isinstance(outcome, PostmatterError):
            _record_failure(result, document, outcome)
            continue
        try:
            result.registry.add(outcome)
        except PostmatterError as exc:
            _record_failure(result, document, exc)

    logger.info(
        "Processed %d document(s): %d registered, %d failed",
        len(items),
        len(result.registry),
        len(result.failures),
    )
    return result


def discover_documents(config: Config) -> Iterator[SourceDocument]:
    """Yield every markdown file under ``config.content_dir`` in sorted order."""
    root = config.content_dir
    if not root.exists():
        logger.warning("Content directory %s does not exist", root)
        return
    for path in _iter_content_files(root):
        yield SourceDocument(reference=str(path), path=path)


def load_posts(config: Config) -> BatchResult:
    """Discover and process all posts in the configured content directory."""
    return process_batch(discover_documents(config), config)


def _load_source(document: SourceDocument, config: Config) -> Post | PostmatterError:
    try:
        identifier = document.resolve_identifier()
        return load_post(
            document.read_text(),
            identifier,
            config=config,
            source_path=document.reference,
        )
    except PostmatterError as exc:
        return exc


def _record_failure(result: BatchResult, document: SourceDocument, error: PostmatterError) -> None:
    logger.warning("Skipping %s: %s", document.reference, error)
    result.failures.append(BatchFailure(reference=document.reference, error=error))


def _iter_content_files(root: Path) -> Iterator[Path]:
    directories = sorted(p for p in root.rglob("*") if p.is_dir())
    directories.insert(0, root)

    for directory in directories:
        for path in sorted(directory.iterdir()):
            if path.is_file() and path.suffix.lower() in SUPPORTED_SUFFIXES:
                yield path

