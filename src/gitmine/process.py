"""Subprocess boundary: runs git under a GitContext."""

import os
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional

import structlog

from gitmine.context import GitContext
from gitmine.errors import CancelledError, ProcessError, classify_process_failure

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Captured output of a successful command."""

    stdout: str
    stderr: str


class ProcessRunner:
    """Runs external commands, honouring cancellation of the context.

    The child is polled every ``poll_interval`` seconds; when the context is
    cancelled (or its deadline passes) the child is killed and
    CancelledError is raised. Output of a cancelled run is discarded.
    """

    def __init__(self, ask_pass_script: str = "/git-ask-pass.sh", poll_interval: float = 0.1) -> None:
        self.ask_pass_script = ask_pass_script
        self.poll_interval = poll_interval

    def run(self, context: GitContext, command: str, args: List[str]) -> CommandResult:
        """Run a command to completion.

        Args:
            context: Execution context (cancellation, deadline, credentials)
            command: Executable name, e.g. "git"
            args: Command arguments

        Returns:
            CommandResult with decoded stdout and stderr

        Raises:
            CancelledError: If the context was cancelled before or during the run
            AuthenticationError: If stderr reports an authentication failure
            ProcessError: If the command could not start or exited non-zero
        """
        context.raise_if_cancelled()
        cmd = [command] + list(args)
        logger.debug("running_command", command=cmd)

        try:
            proc = subprocess.Popen(
                cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self._build_env(context),
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise ProcessError(f"Could not start {command}: {e}", command=cmd) from e

        stdout, stderr = self._wait(context, proc, cmd)

        if proc.returncode != 0:
            error = classify_process_failure(cmd, proc.returncode, stderr)
            logger.error(
                "command_failed",
                command=cmd,
                returncode=proc.returncode,
                stderr=stderr.strip(),
                error_type=type(error).__name__,
            )
            raise error

        logger.debug("command_finished", command=cmd, stdout_bytes=len(stdout))
        return CommandResult(stdout=stdout, stderr=stderr)

    def _wait(self, context: GitContext, proc: subprocess.Popen, cmd: List[str]):
        while True:
            try:
                return proc.communicate(timeout=self._next_timeout(context))
            except subprocess.TimeoutExpired:
                if not context.cancelled:
                    continue
                proc.kill()
                proc.communicate()
                logger.warning("command_cancelled", command=cmd)
                raise CancelledError(f"Cancelled while running: {' '.join(cmd)}")

    def _next_timeout(self, context: GitContext) -> float:
        remaining = context.remaining()
        if remaining is None:
            return self.poll_interval
        # Wake up exactly at the deadline when it is closer than the next poll
        return max(min(self.poll_interval, remaining), 0.001)

    def _build_env(self, context: GitContext) -> Optional[Dict[str, str]]:
        overrides = context.auth_env(self.ask_pass_script)
        if not overrides:
            return None
        env = dict(os.environ)
        env.update(overrides)
        return env
