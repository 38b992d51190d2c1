"""Commit-graph queries."""

from branchsync.models import CommitDelta
from branchsync.vcs import RefResolutionError, VersionControl


def delta(vcs: VersionControl, ref_a: str, ref_b: str) -> CommitDelta:
    """Count how far ``ref_a`` is ahead of and behind ``ref_b``.

    Both refs must be full ref names. A ref that does not exist is an error,
    never an empty delta.

    Raises:
        RefResolutionError: If either ref does not resolve
    """
    for ref in (ref_a, ref_b):
        if not vcs.ref_exists(ref):
            raise RefResolutionError(f"Cannot resolve {ref}")
    return vcs.commit_delta(ref_a, ref_b)
