"""Tests for the command-line interface."""

import json

import git
from typer.testing import CliRunner

from gitmine.cli import app

runner = CliRunner()


def test_log_lists_commits(test_repo):
    """Test the log command table output."""
    head = git.Repo(test_repo).head.commit.hexsha

    result = runner.invoke(app, ["log", str(test_repo), "--max", "2"])

    assert result.exit_code == 0
    assert head[:7] in result.output
    assert "Add logo" in result.output


def test_log_writes_json(test_repo, tmp_path):
    """Test exporting commits to a JSON file."""
    output = tmp_path / "out" / "commits.json"

    result = runner.invoke(app, ["log", str(test_repo), "--output", str(output), "--backend", "library"])

    assert result.exit_code == 0
    data = json.loads(output.read_text())
    assert len(data) == 4
    assert set(data[0]) == {"hash", "author", "date", "message", "checkout_path"}


def test_show_with_stats(test_repo):
    """Test the show command with file statistics."""
    result = runner.invoke(app, ["show", str(test_repo), "v1.0", "--stats"])

    assert result.exit_code == 0
    assert "Add main.py" in result.output
    assert "main.py" in result.output


def test_stats_binary(test_repo):
    """Test the stats command for a commit adding a binary file."""
    result = runner.invoke(app, ["stats", str(test_repo), "HEAD"])

    assert result.exit_code == 0
    assert "logo.png" in result.output
    assert "bin" in result.output


def test_show_unknown_ref(test_repo):
    """Test that errors exit with status 1."""
    result = runner.invoke(app, ["show", str(test_repo), "does-not-exist"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_log_not_a_repository(tmp_path):
    """Test the log command outside a repository."""
    result = runner.invoke(app, ["log", str(tmp_path)])

    assert result.exit_code == 1
    assert "Not a git repository" in result.output


def test_init(tmp_path):
    """Test the init command."""
    root = tmp_path / "checkout"

    result = runner.invoke(app, ["init", str(root), "https://example.com/org/project.git"])

    assert result.exit_code == 0
    assert git.Repo(root).remotes.origin.url == "https://example.com/org/project.git"


def test_log_output_write_error(test_repo, tmp_path):
    """Test that an unwritable output path is reported, not raised."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    result = runner.invoke(app, ["log", str(test_repo), "--output", str(blocker / "commits.json")])

    assert result.exit_code == 1
    assert "Error" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_show_and_stats_accept_timeout(test_repo):
    """Test the --timeout option of show and stats."""
    show = runner.invoke(app, ["show", str(test_repo), "HEAD", "--timeout", "60"])
    stats = runner.invoke(app, ["stats", str(test_repo), "HEAD", "--timeout", "60"])

    assert show.exit_code == 0
    assert "Add logo" in show.output
    assert stats.exit_code == 0
    assert "logo.png" in stats.output
