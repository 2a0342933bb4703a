"""Forward-only iteration over an already fetched batch of commits."""

from typing import List

from gitmine.errors import ExhaustedError
from gitmine.models import Commit


class CommitIterator:
    """Single-pass view over a list of commits.

    All commits were fetched by one git invocation before the iterator was
    created; advancing it never runs git again. The list is borrowed, not
    copied. Instances must not be advanced from two threads at once.
    """

    def __init__(self, commits: List[Commit]) -> None:
        self._commits = commits
        self._position = 0

    def has_next(self) -> bool:
        return self._position < len(self._commits)

    def next_commit(self) -> Commit:
        """Return the next commit.

        Raises:
            ExhaustedError: If every commit has already been returned
        """
        if not self.has_next():
            raise ExhaustedError(f"no commits left after {len(self._commits)}")
        commit = self._commits[self._position]
        self._position += 1
        return commit

    def __iter__(self) -> "CommitIterator":
        return self

    def __next__(self) -> Commit:
        if not self.has_next():
            raise StopIteration
        return self.next_commit()

    def __len__(self) -> int:
        """Number of commits not yet returned."""
        return len(self._commits) - self._position
