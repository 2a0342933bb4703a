"""Revision range selection for history queries."""

from typing import List, Optional

from gitmine.extraction.decoder import PRETTY_FORMAT


def resolve_range(branch_ref: str, from_hash: Optional[str], to_hash: Optional[str]) -> List[str]:
    """Select the revision arguments of a log query.

    The caret form makes ``from`` itself part of the result, together with
    everything after it up to ``to``. The branches are checked in this
    order and exactly one applies:

    - from and to: ``from^..to``
    - only from: ``from^..branch_ref``
    - only to: ``to`` (the commit and its ancestors, up to the count)
    - neither: ``branch_ref``

    Args:
        branch_ref: Ref the history is read from
        from_hash: Optional lower bound (empty string counts as unset)
        to_hash: Optional upper bound (empty string counts as unset)

    Returns:
        Revision arguments for ``git log``
    """
    if from_hash and to_hash:
        return [f"{from_hash}^..{to_hash}"]
    if from_hash:
        return [f"{from_hash}^..{branch_ref}"]
    if to_hash:
        return [to_hash]
    return [branch_ref]


def build_log_args(
    root_dir: str,
    branch_ref: str,
    commit_count: int,
    from_hash: Optional[str] = None,
    to_hash: Optional[str] = None,
) -> List[str]:
    """Full argument list of a ``git log`` range query."""
    return (
        ["-C", root_dir, "log"]
        + resolve_range(branch_ref, from_hash, to_hash)
        + ["-n", str(commit_count), "--date=iso-strict", PRETTY_FORMAT]
    )


def build_show_args(root_dir: str, ref: str) -> List[str]:
    """Argument list of a single commit ``git show`` query.

    The ref is peeled so annotated tags resolve to their commit.
    """
    return ["-C", root_dir, "show", f"{ref}^{{commit}}", "--date=iso-strict", PRETTY_FORMAT, "-s"]
