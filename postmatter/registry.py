"""In-memory registry of validated posts keyed by identifier."""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Iterator

from .content.models import Post, PostIdentifier
from .errors import DuplicateIdentifier, MalformedDocument

logger = logging.getLogger(__name__)


def _newest_first(post: Post) -> tuple[int, str]:
    """Sort by date descending, then slug ascending for posts sharing a date."""
    return (-post.date.toordinal(), post.slug)


class PostSequence:
    """Lazy view of registry posts, newest first.

    Each iteration takes a fresh snapshot, so the sequence can be walked any
    number of times and reflects posts added in between.
    """

    def __init__(self, registry: PostRegistry) -> None:
        self._registry = registry

    def __iter__(self) -> Iterator[Post]:
        snapshot = self._registry.snapshot()
        for post in sorted(snapshot, key=_newest_first):
            yield post

    def __len__(self) -> int:
        return len(self._registry)


class PostRegistry:
    """Accumulate posts and reject duplicate identifiers.

    Inserts are serialised with a lock so concurrent producers get a
    deterministic :class:`DuplicateIdentifier` for the later insert. Reads do
    not lock.
    """

    def __init__(self, posts: Iterable[Post] = ()) -> None:
        self._posts: dict[PostIdentifier, Post] = {}
        self._lock = threading.Lock()
        self.extend(posts)

    def add(self, post: Post) -> None:
        with self._lock:
            existing = self._posts.get(post.identifier)
            if existing is not None:
                raise DuplicateIdentifier(
                    post.identifier,
                    existing_source=existing.source_path,
                    new_source=post.source_path,
                )
            self._posts[post.identifier] = post
        logger.debug("Registered post %s", post.identifier)

    def extend(self, posts: Iterable[Post]) -> None:
        """Add *posts* in order, stopping at the first duplicate."""
        for post in posts:
            self.add(post)

    def get(self, identifier: PostIdentifier | str) -> Post | None:
        key = _coerce_identifier(identifier)
        if key is None:
            return None
        return self._posts.get(key)

    def __getitem__(self, identifier: PostIdentifier | str) -> Post:
        post = self.get(identifier)
        if post is None:
            raise KeyError(str(identifier))
        return post

    def __contains__(self, identifier: object) -> bool:
        if not isinstance(identifier, (PostIdentifier, str)):
            return False
        return self.get(identifier) is not None

    def __len__(self) -> int:
        return len(self._posts)

    def snapshot(self) -> list[Post]:
        return list(self._posts.values())

    def posts(self) -> PostSequence:
        return PostSequence(self)

    def as_mapping(self) -> dict[str, Post]:
        """Return posts keyed by ``YYYY-MM-DD-slug``, newest first."""
        return {post.key: post for post in self.posts()}


def _coerce_identifier(identifier: PostIdentifier | str) -> PostIdentifier | None:
    if isinstance(identifier, PostIdentifier):
        return identifier
    try:
        return PostIdentifier.parse(identifier)
    except MalformedDocument:
        return None
