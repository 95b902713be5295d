"""CLI entrypoints for postmatter."""

import logging
import time
from datetime import date
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from .config import Config, load_config
from .ingest import BatchResult, load_posts
from .lint import DocumentIssue, IssueSeverity, lint_workspace
from .manifests import ManifestGenerator, write_manifest_pages
from .reporting import assemble_report, build_manifest_stats, write_report
from .scaffold import ScaffoldError, ScaffoldResult, normalize_slug, scaffold_post

console = Console()
app = typer.Typer(help="Parse, validate, and index blog post front matter.")

ConfigPathOption = Annotated[
    str,
    typer.Option(
        "--config",
        "-c",
        help="Path to postmatter.yml or to the directory that holds it.",
    ),
]


@app.callback()
def main(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """Parse, validate, and index blog post front matter."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


@app.command()
def new(
    slug: Annotated[str, typer.Argument(help="Slug used in the post filename.")],
    title: Annotated[
        Optional[str],
        typer.Option("--title", "-t", help="Override the default title derived from the slug."),
    ] = None,
    published: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Publication date (YYYY-MM-DD); defaults to today."),
    ] = None,
    layout: Annotated[str, typer.Option("--layout", help="Value for the 'layout' field.")] = "post",
    config_path: ConfigPathOption = ".",
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite the post if it already exists."),
    ] = False,
) -> None:
    """Create a new post with front matter that passes validation."""
    try:
        normalized_slug = normalize_slug(slug)
    except ScaffoldError as exc:
        console.print(f"[bold red]Cannot scaffold[/]: {exc}")
        raise typer.Exit(code=1) from exc

    publish_date = _parse_date(published)
    config = _load(config_path)

    try:
        result = scaffold_post(
            config,
            normalized_slug,
            title,
            published=publish_date,
            layout=layout,
            force=force,
        )
    except ScaffoldError as exc:
        console.print(f"[bold red]Cannot scaffold[/]: {exc}")
        raise typer.Exit(code=1) from exc

    if normalized_slug != slug:
        console.print(f"[bold yellow]Note[/]: slug normalized to '{normalized_slug}'.")
    _print_scaffold_summary(normalized_slug, result)


@app.command()
def lint(
    config_path: ConfigPathOption = ".",
    strict: Annotated[bool, typer.Option("--strict", help="Treat warnings as errors.")] = False,
) -> None:
    """Validate every post and report problems."""
    config = _load(config_path)
    report = lint_workspace(config)

    if not report.issues:
        console.print(
            f"[bold green]Lint clean[/]: no issues detected across {report.document_count} post(s)."
        )
        raise typer.Exit()

    for issue in sorted(report.issues, key=_lint_sort_key):
        style = "red" if issue.severity is IssueSeverity.ERROR else "yellow"
        location = _display_path(Path(issue.source_path))
        if issue.pointer:
            location = f"{location} :: {issue.pointer}"
        console.print(f"[bold {style}]{issue.severity.name}[/] {location} - {issue.message}")

    console.print(
        f"[bold blue]Summary[/]: {report.error_count} error(s), {report.warning_count} warning(s) "
        f"across {report.document_count} post(s)."
    )

    exit_code = 0
    if report.error_count > 0 or (strict and report.warning_count > 0):
        exit_code = 1
    raise typer.Exit(code=exit_code)


@app.command()
def build(
    config_path: ConfigPathOption = ".",
    fail_on_error: Annotated[
        bool,
        typer.Option("--fail-on-error", help="Exit with status 1 if any post failed to load."),
    ] = False,
) -> None:
    """Load all posts and write the post manifests and build report."""
    config = _load(config_path)
    start = time.perf_counter()

    result = load_posts(config)

    generator = ManifestGenerator(page_size=config.manifest_page_size)
    pages = generator.build_pages(result.registry.posts(), prefix="posts")
    manifest_dir = config.output_dir / "manifests"
    written = write_manifest_pages(pages, manifest_dir)
    manifest_stats = build_manifest_stats(pages)

    duration = time.perf_counter() - start
    report = assemble_report(
        project=config.project_name,
        duration_seconds=duration,
        result=result,
        manifests=manifest_stats,
    )
    report_path = write_report(report, config.output_dir)

    console.print(
        f"[bold green]Posts[/]: {report.documents.registered} registered, "
        f"{report.documents.failed} failed ({report.documents.total} total)"
    )
    console.print(
        f"[bold green]Manifests[/]: {manifest_stats.pages} page(s) with {manifest_stats.items} item(s); "
        f"written {len(written)} file(s) to {_display_path(manifest_dir)}"
    )
    console.print(f"[bold green]Report[/]: {_display_path(report_path)} (duration {duration:.2f}s)")

    _print_failures(result)

    if fail_on_error and not result.ok:
        raise typer.Exit(code=1)


@app.command("list")
def list_posts(
    config_path: ConfigPathOption = ".",
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-n", min=1, help="Show at most this many posts."),
    ] = None,
) -> None:
    """Show registered posts, newest first."""
    config = _load(config_path)
    result = load_posts(config)

    shown = 0
    for post in result.registry.posts():
        if limit is not None and shown >= limit:
            break
        tags = f" [dim]({', '.join(post.tags)})[/]" if post.tags else ""
        console.print(f"{post.date.isoformat()}  [bold]{post.slug}[/]  {post.title}{tags}", highlight=False)
        shown += 1

    if shown == 0:
        console.print(f"[bold yellow]No posts found[/] in {_display_path(config.content_dir)}")
    _print_failures(result)


def _print_failures(result: BatchResult) -> None:
    if not result.failures:
        return
    console.print("[bold red]Failures:[/]")
    for failure in result.failures:
        console.print(
            f"- {_display_path(Path(failure.reference))}: "
            f"{type(failure.error).__name__}: {failure.error}",
            highlight=False,
        )


def _print_scaffold_summary(slug: str, result: ScaffoldResult) -> None:
    console.print(f"[bold green]Scaffold ready[/]: post '{slug}'")

    for path in result.created:
        console.print(f"- {_display_path(path)} (new)")
    for path in result.updated:
        console.print(f"- {_display_path(path)} (updated)")

    if result.notes:
        console.print("[bold blue]Next steps[/]:")
        for note in result.notes:
            console.print(f"- {note}")


def _lint_sort_key(issue: DocumentIssue) -> tuple[int, str, str]:
    severity_order = 0 if issue.severity is IssueSeverity.ERROR else 1
    pointer = issue.pointer or ""
    return (severity_order, issue.source_path, pointer)


def _parse_date(value: str | None) -> date | None:
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid date '{value}'; expected YYYY-MM-DD.", param_name="date") from exc


def _display_path(path: Path) -> str:
    try:
        return path.relative_to(Path.cwd()).as_posix()
    except ValueError:
        return path.as_posix()


def _load(path: str) -> Config:
    try:
        return load_config(path)
    except FileNotFoundError as exc:
        raise typer.BadParameter(f"Config file not found: {path}") from exc
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
