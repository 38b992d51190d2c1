"""Shared test helpers."""

import re
from pathlib import Path
from typing import Optional

from git import Actor, Repo

from branchsync.models import Branch, CommitDelta, Remote
from branchsync.vcs import FetchError, GitError, RefResolutionError, VersionControl

AUTHOR = Actor("Test User", "test@example.com")


def configure(repo: Repo) -> None:
    """Set up git identity for a test repository."""
    with repo.config_writer() as config:
        config.set_value("user", "name", AUTHOR.name)
        config.set_value("user", "email", AUTHOR.email)
        config.set_value("commit", "gpgsign", "false")


def commit(repo: Repo, message: str) -> str:
    """Create a commit adding one file named after the message. Returns its sha."""
    filename = re.sub(r"[^a-z0-9]+", "_", message.lower()).strip("_") + ".txt"
    path = Path(repo.working_tree_dir) / filename
    path.write_text(message)
    repo.index.add([filename])
    return repo.index.commit(message, author=AUTHOR, committer=AUTHOR).hexsha


def push_branch(repo: Repo, name: str, *messages: str) -> None:
    """Create ``name`` from HEAD in ``repo``, commit ``messages`` on it and push it with tracking."""
    repo.git.checkout("-b", name)
    for message in messages:
        commit(repo, message)
    repo.git.push("-u", repo.remotes[0].name, name)


class FakeGit(VersionControl):
    """In-memory working copy.

    ``refs`` maps full ref names to commit ids. Deltas between refs pointing
    at the same commit are (0, 0); any other pair must be listed in
    ``deltas`` or the comparison fails like an unresolvable ref.
    """

    def __init__(
        self,
        *,
        remotes: Optional[list[Remote]] = None,
        refs: Optional[dict[str, str]] = None,
        deltas: Optional[dict[tuple[str, str], CommitDelta]] = None,
        tracking: Optional[dict[str, str]] = None,
        upstreams: Optional[dict[str, str]] = None,
        symbolic_refs: Optional[dict[str, str]] = None,
        current: Optional[str] = None,
        worktrees: Optional[dict[str, str]] = None,
        fetch_fails: bool = False,
        failing_operations: tuple[str, ...] = (),
    ) -> None:
        self.remotes = list(remotes or [])
        self.refs = dict(refs or {})
        self.deltas = dict(deltas or {})
        self.tracking = dict(tracking or {})
        self.upstreams = dict(upstreams or {})
        self.symbolic_refs = dict(symbolic_refs or {})
        self.current = current
        self.worktrees = dict(worktrees or {})
        self.fetch_fails = fetch_fails
        self.failing_operations = failing_operations

        self.fetched: list[str] = []
        self.merged: list[str] = []
        self.updated: list[tuple[str, str]] = []
        self.deleted: list[tuple[str, bool]] = []
        self.checked_out: list[str] = []
        self.network_calls = 0

    def _check(self, operation: str) -> None:
        if operation in self.failing_operations:
            raise GitError(f"{operation} failed")

    def list_remotes(self) -> list[Remote]:
        return list(self.remotes)

    def fetch(self, remote: str) -> None:
        self.network_calls += 1
        if self.fetch_fails:
            raise FetchError(f"Failed to fetch from {remote}")
        self.fetched.append(remote)

    def ref_exists(self, ref: str) -> bool:
        return ref in self.refs

    def short_sha(self, ref: str) -> str:
        if ref not in self.refs:
            raise RefResolutionError(f"Cannot resolve {ref}")
        return self.refs[ref][:7]

    def commit_delta(self, ref_a: str, ref_b: str) -> CommitDelta:
        for ref in (ref_a, ref_b):
            if ref not in self.refs:
                raise RefResolutionError(f"Cannot resolve {ref}")
        if (ref_a, ref_b) in self.deltas:
            return self.deltas[(ref_a, ref_b)]
        if self.refs[ref_a] == self.refs[ref_b]:
            return CommitDelta(0, 0)
        raise RefResolutionError(f"Cannot compare {ref_a} with {ref_b}")

    def symbolic_ref(self, ref: str) -> Optional[str]:
        return self.symbolic_refs.get(ref)

    def branch_remote(self, branch: str) -> Optional[str]:
        return self.tracking.get(branch)

    def upstream_ref(self, branch: str) -> Optional[str]:
        ref = self.upstreams.get(branch)
        return ref if ref in self.refs else None

    def set_upstream(self, branch: str, remote: str, remote_branch: str) -> None:
        self._check("set_upstream")
        self.tracking[branch] = remote
        self.upstreams[branch] = f"refs/remotes/{remote}/{remote_branch}"

    def list_branches(self) -> list[Branch]:
        return sorted(
            (Branch(ref[len("refs/heads/") :]) for ref in self.refs if ref.startswith("refs/heads/")),
            key=lambda branch: branch.name,
        )

    def current_branch(self) -> Optional[str]:
        return self.current

    def worktree_branches(self) -> dict[str, str]:
        return dict(self.worktrees)

    def merge_fast_forward(self, ref: str) -> None:
        self._check("merge_fast_forward")
        self.refs[f"refs/heads/{self.current}"] = self.refs[ref]
        self.merged.append(ref)

    def update_branch(self, branch: str, ref: str) -> None:
        self._check("update_branch")
        if branch == self.current:
            raise GitError(f"Refusing to update checked out branch {branch}")
        self.refs[f"refs/heads/{branch}"] = self.refs[ref]
        self.updated.append((branch, ref))

    def delete_branch(self, branch: str, force: bool = False) -> None:
        self._check("delete_branch")
        if branch == self.current:
            raise GitError(f"Cannot delete checked out branch {branch}")
        del self.refs[f"refs/heads/{branch}"]
        self.deleted.append((branch, force))

    def checkout(self, branch: str, start_point: Optional[str] = None) -> None:
        self._check("checkout")
        if start_point is not None:
            self.refs[f"refs/heads/{branch}"] = self.refs[start_point]
        elif f"refs/heads/{branch}" not in self.refs:
            raise GitError(f"No such branch {branch}")
        self.current = branch
        self.checked_out.append(branch)
