"""Data models for git commit information."""

from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Commit(BaseModel):
    """A single commit decoded from git output."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "hash": "9fceb02d0ae598e95dc970b74767f19372d61af8",
                "author": "John Doe <john@example.com>",
                "date": "2024-01-15T10:30:00+01:00",
                "message": "Fix authentication bug\nResolves issue with token validation\n",
                "checkout_path": "/path/to/repo",
            }
        },
    )

    hash: str = Field(..., min_length=1, description="Full commit SHA hash")
    author: str = Field(..., description='Committer in "Name <email>" form')
    date: str = Field(..., description="Commit date, ISO-8601 strict with offset")
    message: str = Field(..., description="Subject and body separated by a newline")
    checkout_path: str = Field(..., description="Checkout the commit was read from")

    @property
    def short_hash(self) -> str:
        """Short commit SHA hash (7 chars)."""
        return self.hash[:7]

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]


class FileStat(BaseModel):
    """Line counts for one path in a diff-stat.

    Binary files have no line counts; they are flagged with ``binary`` and
    carry None rather than zero.
    """

    model_config = ConfigDict(frozen=True)

    additions: Optional[int] = Field(None, ge=0, description="Number of lines added")
    deletions: Optional[int] = Field(None, ge=0, description="Number of lines deleted")
    binary: bool = Field(False, description="Whether git reported the file as binary")

    @classmethod
    def for_binary(cls) -> "FileStat":
        return cls(binary=True)


# Path -> counts, in the order git reported them
FileStats = Dict[str, FileStat]


class IteratorRequest(BaseModel):
    """Parameters of a commit range query."""

    branch_ref: str = Field(..., description="Ref the history is read from, e.g. origin/main")
    branch: str = Field("", description="Branch name the ref belongs to")
    commit_count: int = Field(..., gt=0, description="Maximum commits to return")
    from_commit_hash: Optional[str] = Field(None, description="Oldest commit of the range")
    to_commit_hash: Optional[str] = Field(None, description="Newest commit of the range")

    @field_validator("from_commit_hash", "to_commit_hash")
    @classmethod
    def _blank_is_unset(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class Repository(BaseModel):
    """Handle to an on-disk checkout containing git metadata."""

    model_config = ConfigDict(frozen=True)

    root_dir: Path = Field(..., description="Absolute path of the checkout")
