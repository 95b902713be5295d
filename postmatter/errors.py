"""Exception types raised while parsing, validating, and registering posts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .content.models import PostIdentifier


class PostmatterError(ValueError):
    """Base class for every recoverable postmatter failure."""


class FrontMatterError(PostmatterError):
    """Raised when a document's front matter cannot be parsed."""


class MalformedDocument(FrontMatterError):
    """Raised when the front matter delimiters or document layout are invalid."""


class InvalidFieldSyntax(FrontMatterError):
    """Raised when a metadata line is not a recognised field or sequence item."""

    def __init__(self, line_number: int, line: str, reason: str | None = None) -> None:
        message = f"line {line_number}: invalid front matter syntax: {line.strip()!r}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)
        self.line_number = line_number
        self.line = line
        self.reason = reason


class FrontMatterViolation(PostmatterError):
    """A single schema violation reported by the validator."""

    field: str


class MissingRequiredField(FrontMatterViolation):
    def __init__(self, field: str) -> None:
        super().__init__(f"missing required field '{field}'")
        self.field = field


class TypeMismatch(FrontMatterViolation):
    def __init__(self, field: str, expected: str, actual: str) -> None:
        super().__init__(f"field '{field}' must be a {expected}, got {actual}")
        self.field = field
        self.expected = expected
        self.actual = actual


class FrontMatterValidationError(PostmatterError):
    """Raised when front matter breaks one or more schema rules."""

    def __init__(self, violations: Sequence[FrontMatterViolation]) -> None:
        self.violations = list(violations)
        details = "; ".join(str(violation) for violation in self.violations)
        super().__init__(f"{len(self.violations)} front matter violation(s): {details}")


class DuplicateIdentifier(PostmatterError):
    """Raised when a post identifier is already present in the registry."""

    def __init__(
        self,
        identifier: PostIdentifier,
        *,
        existing_source: str | None = None,
        new_source: str | None = None,
    ) -> None:
        message = f"duplicate post identifier '{identifier}'"
        if existing_source:
            message += f" (already registered from {existing_source})"
        super().__init__(message)
        self.identifier = identifier
        self.existing_source = existing_source
        self.new_source = new_source
