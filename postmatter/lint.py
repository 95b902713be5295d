"""Lint diagnostics for a workspace of posts."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .config import Config
from .content import Post
from .errors import FrontMatterValidationError, InvalidFieldSyntax
from .ingest import BatchFailure, load_posts


class IssueSeverity(Enum):
    """Severity level for lint issues."""

    ERROR = auto()
    WARNING = auto()


@dataclass(slots=True)
class DocumentIssue:
    """Represents a lint finding for a document."""

    source_path: str
    message: str
    severity: IssueSeverity
    pointer: str | None = None


@dataclass(slots=True)
class LintReport:
    """Aggregate lint results for a workspace."""

    issues: list[DocumentIssue] = field(default_factory=list)
    document_count: int = 0

    def add(self, issue: DocumentIssue) -> None:
        self.issues.append(issue)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is IssueSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity is IssueSeverity.WARNING)


def lint_post(post: Post) -> list[DocumentIssue]:
    """Run advisory checks against a registered post."""
    issues: list[DocumentIssue] = []
    source_path = post.source_path or post.key

    if not post.description:
        issues.append(
            DocumentIssue(
                source_path=source_path,
                message="Post has no description; summaries and previews will be empty.",
                severity=IssueSeverity.WARNING,
                pointer="description",
            )
        )
    if not post.tags:
        issues.append(
            DocumentIssue(
                source_path=source_path,
                message="Post has no tags.",
                severity=IssueSeverity.WARNING,
                pointer="tags",
            )
        )
    return issues


def failure_issues(failure: BatchFailure) -> list[DocumentIssue]:
    """Expand a batch failure into one error issue per underlying problem."""
    error = failure.error
    if isinstance(error, FrontMatterValidationError):
        return [
            DocumentIssue(
                source_path=failure.reference,
                message=str(violation),
                severity=IssueSeverity.ERROR,
                pointer=violation.field,
            )
            for violation in error.violations
        ]

    pointer = f"line {error.line_number}" if isinstance(error, InvalidFieldSyntax) else None
    return [
        DocumentIssue(
            source_path=failure.reference,
            message=str(error),
            severity=IssueSeverity.ERROR,
            pointer=pointer,
        )
    ]


def lint_workspace(config: Config) -> LintReport:
    """Collect posts and emit lint diagnostics for the configured workspace."""
    result = load_posts(config)
    report = LintReport(document_count=result.total)

    for failure in result.failures:
        for issue in failure_issues(failure):
            report.add(issue)

    for post in result.registry.posts():
        for issue in lint_post(post):
            report.add(issue)

    return report
