"""Unit tests for the process runner, context and failure classification."""

import sys
import threading
import time

import pytest

from gitmine.context import GitContext
from gitmine.errors import (
    AuthenticationError,
    CancelledError,
    ProcessError,
    classify_process_failure,
)
from gitmine.process import ProcessRunner


def python_args(code):
    return ["-c", code]


@pytest.fixture
def runner():
    return ProcessRunner(ask_pass_script="/tmp/ask-pass.sh", poll_interval=0.05)


def test_run_captures_output(runner):
    """Test that stdout and stderr are captured."""
    result = runner.run(
        GitContext(),
        sys.executable,
        python_args("import sys; sys.stdout.write('out'); sys.stderr.write('err')"),
    )

    assert result.stdout == "out"
    assert result.stderr == "err"


def test_run_nonzero_exit(runner):
    """Test that a failing command raises ProcessError with its details."""
    with pytest.raises(ProcessError) as exc_info:
        runner.run(
            GitContext(),
            sys.executable,
            python_args("import sys; sys.stderr.write('fatal: broken'); sys.exit(3)"),
        )

    assert not isinstance(exc_info.value, AuthenticationError)
    assert exc_info.value.returncode == 3
    assert "fatal: broken" in exc_info.value.stderr


def test_run_authentication_failure(runner):
    """Test that an authentication message in stderr is classified."""
    code = "import sys; sys.stderr.write('fatal: Authentication failed for https://x'); sys.exit(128)"

    with pytest.raises(AuthenticationError):
        runner.run(GitContext(), sys.executable, python_args(code))


def test_run_missing_binary(runner):
    """Test that a command that cannot start raises ProcessError."""
    with pytest.raises(ProcessError, match="Could not start"):
        runner.run(GitContext(), "definitely-not-a-real-binary-xyz", [])


def test_run_cancelled_before_start(runner):
    """Test that a cancelled context never starts the command."""
    context = GitContext()
    context.cancel()

    with pytest.raises(CancelledError):
        runner.run(context, sys.executable, python_args("print('hi')"))


def test_run_deadline_kills_process(runner):
    """Test that the deadline stops a long running command."""
    started = time.monotonic()

    with pytest.raises(CancelledError):
        runner.run(GitContext(timeout=0.3), sys.executable, python_args("import time; time.sleep(30)"))

    assert time.monotonic() - started < 10


def test_run_cancel_from_other_thread(runner):
    """Test that cancel() from another thread stops the command."""
    context = GitContext()
    timer = threading.Timer(0.3, context.cancel)
    timer.start()
    started = time.monotonic()

    try:
        with pytest.raises(CancelledError):
            runner.run(context, sys.executable, python_args("import time; time.sleep(30)"))
    finally:
        timer.cancel()

    assert time.monotonic() - started < 10


def test_run_passes_credentials(runner):
    """Test that credentials reach the child through the environment."""
    context = GitContext(username="ci", password="s3cret")
    code = (
        "import os, sys; "
        "sys.stdout.write('|'.join(os.environ[k] for k in "
        "('GIT_ASKPASS', 'GIT_USERNAME', 'GIT_PASSWORD', 'GIT_TERMINAL_PROMPT')))"
    )

    result = runner.run(context, sys.executable, python_args(code))

    assert result.stdout == "/tmp/ask-pass.sh|ci|s3cret|0"


def test_context_without_credentials():
    """Test that no environment overrides are produced without credentials."""
    assert GitContext().auth_env("/git-ask-pass.sh") == {}


def test_context_remaining_and_cancelled():
    """Test deadline bookkeeping."""
    assert GitContext().remaining() is None
    assert not GitContext(timeout=60).cancelled
    assert GitContext(timeout=0).cancelled
    with pytest.raises(CancelledError, match="deadline"):
        GitContext(timeout=0).raise_if_cancelled()


def test_classify_authentication_failure():
    """Test the stderr substring heuristic."""
    error = classify_process_failure(["git", "fetch"], 128, "remote: Authentication failed for 'x'")

    assert isinstance(error, AuthenticationError)
    assert error.command == ["git", "fetch"]


def test_classify_generic_failure():
    """Test that other failures stay generic."""
    error = classify_process_failure(["git", "log"], 128, "fatal: not a git repository\n")

    assert type(error) is ProcessError
    assert "not a git repository" in str(error)
