"""Version-control capability interface.

The reconciliation engine only talks to a :class:`VersionControl`. Everything
that shells out to git and parses its output lives in an implementation of
this interface (see :mod:`branchsync.git`).
"""

from abc import ABC, abstractmethod
from typing import Optional

from branchsync.models import Branch, CommitDelta, Remote


class GitError(Exception):
    """Git operation error."""


class NotARepositoryError(GitError):
    """The path is not inside a git working copy."""


class NoRemotesError(GitError):
    """The repository has no remotes configured."""


class RemoteNotFoundError(GitError):
    """A requested remote does not exist."""


class FetchError(GitError):
    """Fetching from the selected remote failed."""


class RefResolutionError(GitError):
    """A ref could not be resolved to a commit."""


class VersionControl(ABC):
    """Operations the reconciliation engine needs from a working copy."""

    @abstractmethod
    def list_remotes(self) -> list[Remote]:
        """List configured remotes in configuration order."""

    @abstractmethod
    def fetch(self, remote: str) -> None:
        """Fetch from a remote, pruning stale remote-tracking refs.

        Raises:
            FetchError: If the fetch fails
        """

    @abstractmethod
    def ref_exists(self, ref: str) -> bool:
        """Check whether a full ref name exists."""

    @abstractmethod
    def short_sha(self, ref: str) -> str:
        """Abbreviated commit id a ref points to.

        Raises:
            RefResolutionError: If the ref does not resolve
        """

    @abstractmethod
    def commit_delta(self, ref_a: str, ref_b: str) -> CommitDelta:
        """Count commits in ``ref_a`` missing from ``ref_b`` and the reverse.

        Raises:
            RefResolutionError: If either ref does not resolve
        """

    @abstractmethod
    def symbolic_ref(self, ref: str) -> Optional[str]:
        """Target of a symbolic ref, or None if it is not one."""

    @abstractmethod
    def branch_remote(self, branch: str) -> Optional[str]:
        """Remote configured as the upstream remote of a branch."""

    @abstractmethod
    def upstream_ref(self, branch: str) -> Optional[str]:
        """Full name of the branch's configured upstream, or None if it does not resolve."""

    @abstractmethod
    def set_upstream(self, branch: str, remote: str, remote_branch: str) -> None:
        """Persist the upstream configuration of a branch."""

    @abstractmethod
    def list_branches(self) -> list[Branch]:
        """List local branches."""

    @abstractmethod
    def current_branch(self) -> Optional[str]:
        """Checked-out branch name, or None on a detached HEAD."""

    @abstractmethod
    def worktree_branches(self) -> dict[str, str]:
        """Branches checked out in other worktrees, mapped to the worktree path."""

    @abstractmethod
    def merge_fast_forward(self, ref: str) -> None:
        """Fast-forward the checked-out branch to ``ref``; fails if not a pure fast-forward."""

    @abstractmethod
    def update_branch(self, branch: str, ref: str) -> None:
        """Point a branch that is not checked out at ``ref``."""

    @abstractmethod
    def delete_branch(self, branch: str, force: bool = False) -> None:
        """Delete a local branch."""

    @abstractmethod
    def checkout(self, branch: str, start_point: Optional[str] = None) -> None:
        """Switch to ``branch``, creating it at ``start_point`` when given."""
