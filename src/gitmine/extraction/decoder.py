"""Decoding of git log/show output into Commit objects.

git is asked to print every commit as a JSON object followed by a comma
(see PRETTY_FORMAT). The stream is neither valid JSON nor wrapped in an
array, so it is repaired first: the final separator is stripped and the
remainder wrapped in brackets.
"""

import json
from typing import List

import structlog
from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from gitmine.errors import DecodeError
from gitmine.models import Commit

logger = structlog.get_logger(__name__)

SEPARATOR = ","

PRETTY_FORMAT = (
    '--pretty=format:{"commit":"%H",'
    '"commiter":{"name":"%cN","email":"%cE","date":"%cd"},'
    '"subject":"%s","body":"%b"}' + SEPARATOR
)


class LogCommitter(BaseModel):
    """Committer block of one log entry."""

    name: str
    email: str
    date: str


class LogEntry(BaseModel):
    """One commit as printed by PRETTY_FORMAT."""

    commit: str = Field(..., min_length=1)
    # Key spelling matches the format template
    commiter: LogCommitter
    subject: str = ""
    body: str = ""

    def to_commit(self, checkout_path: str) -> Commit:
        return Commit(
            hash=self.commit,
            author=f"{self.commiter.name} <{self.commiter.email}>",
            date=self.commiter.date,
            message=f"{self.subject}\n{self.body}",
            checkout_path=checkout_path,
        )


_entries_adapter = TypeAdapter(List[LogEntry])


def repair_log_output(raw: str) -> str:
    """Turn the separator-terminated fragment stream into a JSON array.

    Args:
        raw: Non-empty output of a log/show query

    Returns:
        The fragments wrapped in ``[`` and ``]``

    Raises:
        DecodeError: If the output does not end with the separator
    """
    text = raw.rstrip()
    if not text.endswith(SEPARATOR):
        raise DecodeError(f"git log output does not end with {SEPARATOR!r}")
    return f"[{text[:-1]}]"


def decode_log_output(raw: str, checkout_path: str) -> List[Commit]:
    """Decode log/show output into commits, all or nothing.

    Args:
        raw: Output produced with PRETTY_FORMAT
        checkout_path: Checkout the output was read from

    Returns:
        Commits in output order; empty list for empty output

    Raises:
        DecodeError: If any part of the output is malformed
    """
    if not raw.strip():
        return []

    payload = repair_log_output(raw)
    try:
        # Bodies may contain raw newlines, which strict JSON rejects
        data = json.loads(payload, strict=False)
        entries = _entries_adapter.validate_python(data)
    except (json.JSONDecodeError, ValidationError) as e:
        logger.error("log_decode_failed", checkout_path=checkout_path, error=str(e))
        raise DecodeError(f"Malformed git log output: {e}") from e

    return [entry.to_commit(checkout_path) for entry in entries]
