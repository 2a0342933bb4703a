"""gitmine: commit history and diff statistics extracted from git checkouts."""

from gitmine.context import GitContext
from gitmine.extraction import CommitIterator, GitManager, create_git_manager
from gitmine.models import Commit, FileStat, FileStats, IteratorRequest, Repository, Settings

__version__ = "0.1.0"

__all__ = [
    "GitContext",
    "GitManager",
    "CommitIterator",
    "create_git_manager",
    "Commit",
    "FileStat",
    "FileStats",
    "IteratorRequest",
    "Repository",
    "Settings",
]
