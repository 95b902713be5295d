from __future__ import annotations

from datetime import date
from pathlib import Path

from typer.testing import CliRunner

from postmatter.cli import app
from postmatter.config import Config
from postmatter.ingest import load_post_file


def test_new_creates_post_that_passes_validation() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        Path("postmatter.yml").write_text("project_name: Test\n", encoding="utf-8")

        result = runner.invoke(app, ["new", "My First Post", "--date", "2024-04-01"])
        assert result.exit_code == 0, result.output
        assert "slug normalized to 'my-first-post'" in result.output

        post_path = Path("_posts/2024-04-01-my-first-post.md")
        assert post_path.exists()

        post = load_post_file(post_path, Config())
        assert post.date == date(2024, 4, 1)
        assert post.title == "My First Post"
        assert post.comments_enabled is True
        assert post.tags == []
        assert post.description is None


def test_new_respects_title_and_refuses_overwrite() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        args = ["new", "release-notes", "--date", "2024-04-02", "--title", "Release: v2"]

        first = runner.invoke(app, args)
        assert first.exit_code == 0, first.output
        text = Path("_posts/2024-04-02-release-notes.md").read_text(encoding="utf-8")
        assert 'title: "Release: v2"' in text
        assert load_post_file(Path("_posts/2024-04-02-release-notes.md")).title == "Release: v2"

        second = runner.invoke(app, args)
        assert second.exit_code == 1
        assert "Cannot scaffold" in second.output

        forced = runner.invoke(app, [*args, "--force"])
        assert forced.exit_code == 0, forced.output


def test_new_rejects_invalid_date() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["new", "dated", "--date", "April first"])
        assert result.exit_code != 0
        assert not Path("_posts").exists()


def test_new_rejects_unusable_slug() -> None:
    runner = CliRunner()
    with runner.isolated_filesystem():
        result = runner.invoke(app, ["new", "!!!"])
        assert result.exit_code == 1
        assert "Cannot scaffold" in result.output
