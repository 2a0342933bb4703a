"""Execution context passed through every git operation."""

import threading
import time
from typing import Dict, Optional

from gitmine.errors import CancelledError


class GitContext:
    """Cancellable execution context with optional credentials.

    A context may be cancelled explicitly from any thread with ``cancel()``,
    or implicitly once its deadline passes. Operations running under a
    cancelled context stop their git process and raise CancelledError.

    Example:
        >>> ctx = GitContext(timeout=30, username="ci", password="token")
        >>> manager.commits_for_range(ctx, repo, request)
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> None:
        """Initialize the context.

        Args:
            timeout: Seconds until the context expires (None for no deadline)
            username: Username handed to git through the ask-pass helper
            password: Password or token handed to git through the ask-pass helper
        """
        self._cancelled = threading.Event()
        self.deadline = time.monotonic() + timeout if timeout is not None else None
        self.username = username
        self.password = password

    def cancel(self) -> None:
        self._cancelled.set()

    @property
    def cancelled(self) -> bool:
        """True once cancel() was called or the deadline has passed."""
        if self._cancelled.is_set():
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, or None without one."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_cancelled(self) -> None:
        if self._cancelled.is_set():
            raise CancelledError("operation cancelled")
        if self.cancelled:
            raise CancelledError("context deadline exceeded")

    @property
    def has_credentials(self) -> bool:
        return bool(self.username or self.password)

    def auth_env(self, ask_pass_script: str) -> Dict[str, str]:
        """Environment variables that let git authenticate non-interactively.

        Args:
            ask_pass_script: Path of the GIT_ASKPASS helper that echoes
                GIT_USERNAME / GIT_PASSWORD

        Returns:
            Environment overrides; empty when the context carries no credentials
        """
        if not self.has_credentials:
            return {}
        return {
            "GIT_ASKPASS": ask_pass_script,
            "GIT_USERNAME": self.username or "",
            "GIT_PASSWORD": self.password or "",
            "GIT_TERMINAL_PROMPT": "0",
        }
