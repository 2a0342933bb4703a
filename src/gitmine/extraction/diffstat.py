"""Per-file diff statistics from ``git diff --numstat``."""

from typing import List

import structlog

from gitmine.context import GitContext
from gitmine.errors import DecodeError
from gitmine.models import FileStat, FileStats
from gitmine.process import ProcessRunner

logger = structlog.get_logger(__name__)

BINARY_MARKER = "-"

# -z keeps paths unquoted so non-ASCII names come back as they are
NUMSTAT_ARGS = ["--numstat", "-z"]


def numstat_revisions(revision_a: str, revision_b: str) -> List[str]:
    """Old and new revision of a diff.

    An empty ``revision_b`` means the changes made by ``revision_a`` itself,
    i.e. the diff between its parent and it.
    """
    if not revision_b:
        return [f"{revision_a}^", revision_a]
    return [revision_a, revision_b]


def _parse_count(value: str, line: str) -> int:
    try:
        count = int(value)
    except ValueError:
        raise DecodeError(f"Unexpected count in git diff --numstat record: {line!r}") from None
    if count < 0:
        raise DecodeError(f"Unexpected count in git diff --numstat record: {line!r}")
    return count


def decode_numstat(raw: str) -> FileStats:
    """Decode ``git diff --numstat -z`` output.

    Records are NUL terminated and read ``<additions>\\t<deletions>\\t<path>``,
    with the path verbatim (no C-style quoting). A rename or copy leaves the
    path empty and follows the record with the old and the new path; the new
    path is the key. Binary files show ``-`` for both counts and are recorded
    with FileStat.for_binary().

    Args:
        raw: numstat output produced with ``-z``

    Returns:
        Mapping of path to FileStat, in output order

    Raises:
        DecodeError: If a record is not three tab separated fields, a rename
            lacks its paths, or a count is neither a number nor the binary
            marker
    """
    stats: FileStats = {}
    records = iter(raw.split("\0"))
    for record in records:
        if not record.strip("\n"):
            continue
        parts = record.split("\t", 2)
        if len(parts) != 3:
            raise DecodeError(f"Unexpected git diff --numstat record: {record!r}")
        added, deleted, path = parts
        if not path:
            next(records, "")
            path = next(records, "")
            if not path:
                raise DecodeError(f"Rename without paths in git diff --numstat record: {record!r}")
        if added == BINARY_MARKER and deleted == BINARY_MARKER:
            stats[path] = FileStat.for_binary()
            continue
        stats[path] = FileStat(
            additions=_parse_count(added, record),
            deletions=_parse_count(deleted, record),
        )
    return stats


class DiffStatCollector:
    """Runs ``git diff --numstat -z`` between two revisions."""

    def __init__(self, runner: ProcessRunner, git_binary: str = "git") -> None:
        self.runner = runner
        self.git_binary = git_binary

    def diff_stat(
        self,
        context: GitContext,
        revision_a: str,
        revision_b: str,
        checkout_path: str,
    ) -> FileStats:
        """Collect file statistics between two revisions.

        Args:
            context: Execution context
            revision_a: First revision
            revision_b: Second revision, or "" for the parent diff of revision_a
            checkout_path: Checkout to run in

        Returns:
            FileStats for every changed path
        """
        args = ["-C", checkout_path, "diff"] + NUMSTAT_ARGS + numstat_revisions(revision_a, revision_b)
        result = self.runner.run(context, self.git_binary, args)
        stats = decode_numstat(result.stdout)
        logger.debug("diff_stat_collected", checkout_path=checkout_path, files=len(stats))
        return stats
