"""Exception hierarchy for gitmine."""

from typing import List, Optional

AUTHENTICATION_FAILED_ERROR = "Authentication failed"


class GitMineError(Exception):
    """Base exception for all gitmine errors."""

    pass


class RepositoryIOError(GitMineError, OSError):
    """Raised when a filesystem operation on a checkout fails."""

    pass


class InitError(GitMineError):
    """Raised when git metadata could not be initialized."""

    pass


class RemoteError(GitMineError):
    """Raised when the origin remote could not be registered."""

    pass


class NotARepositoryError(GitMineError):
    """Raised when a path does not contain git metadata."""

    pass


class ProcessError(GitMineError):
    """Raised when an external command could not run or exited abnormally."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command or []
        self.returncode = returncode
        self.stderr = stderr


class AuthenticationError(ProcessError):
    """Raised when git output indicates failed authentication.

    Detection is a substring match on stderr and is best-effort only.
    """

    pass


class DecodeError(GitMineError, ValueError):
    """Raised when git output cannot be decoded."""

    pass


class NotFoundError(GitMineError, LookupError):
    """Raised when a commit lookup yields no commit."""

    pass


class CancelledError(GitMineError):
    """Raised when the GitContext was cancelled or its deadline passed."""

    pass


class ExhaustedError(GitMineError):
    """Raised when a CommitIterator is advanced past its end."""

    pass


def classify_process_failure(
    command: List[str], returncode: Optional[int], stderr: str
) -> ProcessError:
    """Build the most specific error for a failed git invocation.

    Args:
        command: Full command line that was run
        returncode: Exit status of the process
        stderr: Captured standard error

    Returns:
        AuthenticationError if stderr reports an authentication failure,
        otherwise a plain ProcessError
    """
    detail = stderr.strip()
    if AUTHENTICATION_FAILED_ERROR in stderr:
        return AuthenticationError(
            "authentication failed", command=command, returncode=returncode, stderr=stderr
        )
    return ProcessError(
        f"git exited with status {returncode}: {detail}",
        command=command,
        returncode=returncode,
        stderr=stderr,
    )
