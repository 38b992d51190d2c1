"""Branch reconciliation data model."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Remote:
    """A configured remote."""

    name: str
    url: str = ""


@dataclass(frozen=True)
class Branch:
    """A local branch."""

    name: str

    @property
    def ref(self) -> str:
        """Full ref name of the branch."""
        return f"refs/heads/{self.name}"


@dataclass(frozen=True)
class CommitDelta:
    """Commit-count divergence between two refs.

    ``ahead`` counts commits reachable from the first ref but not the second,
    ``behind`` the reverse.
    """

    ahead: int
    behind: int

    @property
    def in_sync(self) -> bool:
        return self.ahead == 0 and self.behind == 0


class UpstreamStatus(Enum):
    """Upstream status of a branch against the target remote."""

    PRESENT = "present"
    GONE = "gone"
    UNTRACKED = "untracked"


@dataclass(frozen=True)
class Upstream:
    """Resolved upstream of a branch."""

    status: UpstreamStatus
    ref: Optional[str] = None

    @classmethod
    def present(cls, ref: str) -> "Upstream":
        return cls(UpstreamStatus.PRESENT, ref)

    @classmethod
    def gone(cls) -> "Upstream":
        return cls(UpstreamStatus.GONE)

    @classmethod
    def untracked(cls) -> "Upstream":
        return cls(UpstreamStatus.UNTRACKED)


class Action(Enum):
    """What to do with a branch."""

    NOOP = "up to date"
    FAST_FORWARD = "fast-forward"
    WARN = "ahead"
    DELETE = "delete"
    WARN_UNMERGED = "unmerged"


@dataclass(frozen=True)
class Disposition:
    """Classification result for one branch.

    ``compared_to`` is the ref the branch was measured against: its upstream
    for a present upstream, the default branch of the remote for a gone one.
    """

    branch: Branch
    action: Action
    compared_to: str
    delta: CommitDelta
    target_ref: Optional[str] = None
    reason: str = ""

    @property
    def unpushed_commits(self) -> int:
        return self.delta.ahead


@dataclass(frozen=True)
class Outcome:
    """Result of carrying out a disposition."""

    disposition: Disposition
    applied: bool = False
    old_commit: str = ""
    new_commit: str = ""
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class SyncContext:
    """What a reconciliation pass runs against."""

    remote: Remote
    default_branch: str

    @property
    def default_ref(self) -> str:
        """Remote-tracking ref of the remote's default branch."""
        return f"refs/remotes/{self.remote.name}/{self.default_branch}"
