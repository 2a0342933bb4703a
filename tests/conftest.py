"""Shared fixtures for gitmine tests."""

import tempfile
from pathlib import Path
from typing import List, Optional

import git
import pytest

from gitmine.errors import classify_process_failure
from gitmine.process import CommandResult


@pytest.fixture
def test_repo():
    """Create a temporary Git repository with four commits and a tag.

    History, oldest first: Initial commit, Add main.py, Fix: Update hello
    message, Add logo (binary file). The tag v1.0 is annotated and points
    at the second commit.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        repo_path = Path(tmpdir)
        repo = git.Repo.init(repo_path)

        # Configure git
        repo.config_writer().set_value("user", "name", "Test User").release()
        repo.config_writer().set_value("user", "email", "test@example.com").release()

        (repo_path / "README.md").write_text("# Test Project\n")
        repo.index.add(["README.md"])
        repo.index.commit("Initial commit")

        (repo_path / "main.py").write_text("def hello():\n    print('Hello, World!')\n")
        repo.index.add(["main.py"])
        second = repo.index.commit("Add main.py")
        repo.create_tag("v1.0", ref=second, message="First release")

        (repo_path / "main.py").write_text("def hello():\n    print('Hello, gitmine!')\n")
        repo.index.add(["main.py"])
        repo.index.commit("Fix: Update hello message\n\nGreets the right project now.\n")

        (repo_path / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x01")
        repo.index.add(["logo.png"])
        repo.index.commit("Add logo")

        yield repo_path


class FakeRunner:
    """ProcessRunner stand-in returning canned output and recording calls."""

    def __init__(self, stdout: str = "", returncode: int = 0, stderr: str = "") -> None:
        self.stdout = stdout
        self.returncode = returncode
        self.stderr = stderr
        self.calls: List[List[str]] = []

    @property
    def last_args(self) -> Optional[List[str]]:
        return self.calls[-1] if self.calls else None

    def run(self, context, command: str, args: List[str]) -> CommandResult:
        self.calls.append(list(args))
        if self.returncode != 0:
            raise classify_process_failure([command] + list(args), self.returncode, self.stderr)
        return CommandResult(stdout=self.stdout, stderr=self.stderr)


@pytest.fixture
def make_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner
