"""Data models for git history extraction."""

from gitmine.models.commit import Commit, FileStat, FileStats, IteratorRequest, Repository
from gitmine.models.config import Settings

__all__ = [
    "Commit",
    "FileStat",
    "FileStats",
    "IteratorRequest",
    "Repository",
    "Settings",
]
