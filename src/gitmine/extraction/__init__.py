"""Git history extraction: range selection, output decoding and repository operations."""

from gitmine.extraction.decoder import PRETTY_FORMAT, decode_log_output
from gitmine.extraction.diffstat import DiffStatCollector, decode_numstat
from gitmine.extraction.iterator import CommitIterator
from gitmine.extraction.manager import (
    GitCliManager,
    GitLibManager,
    GitManager,
    create_git_manager,
)
from gitmine.extraction.range import build_log_args, resolve_range

__all__ = [
    "PRETTY_FORMAT",
    "decode_log_output",
    "DiffStatCollector",
    "decode_numstat",
    "CommitIterator",
    "GitManager",
    "GitCliManager",
    "GitLibManager",
    "create_git_manager",
    "build_log_args",
    "resolve_range",
]
