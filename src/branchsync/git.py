"""Git repository operations."""

import logging
from pathlib import Path
from typing import Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from branchsync.models import Branch, CommitDelta, Remote
from branchsync.vcs import FetchError, GitError, NotARepositoryError, RefResolutionError, VersionControl

logger = logging.getLogger(__name__)


class GitRepo(VersionControl):
    """Git repository operations backed by GitPython."""

    def __init__(self, path: Path) -> None:
        """Initialize repository.

        Args:
            path: Any path inside the working copy

        Raises:
            NotARepositoryError: If ``path`` is not inside a git working copy
        """
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise NotARepositoryError(f"Not a git repository: {path}") from err
        if self.repo.bare:
            raise NotARepositoryError("Cannot operate on bare repository")

    def list_remotes(self) -> list[Remote]:
        remotes = []
        for remote in self.repo.remotes:
            try:
                url = self.repo.git.remote("get-url", remote.name).strip()
            except GitCommandError:
                url = ""
            remotes.append(Remote(remote.name, url))
        return remotes

    def fetch(self, remote: str) -> None:
        try:
            logger.debug("Fetching from %s", remote)
            self.repo.git.fetch("--prune", "--quiet", remote)
        except GitCommandError as err:
            raise FetchError(f"Failed to fetch from {remote}: {err}") from err

    def ref_exists(self, ref: str) -> bool:
        try:
            self.repo.git.show_ref("--verify", "--quiet", ref)
            return True
        except GitCommandError:
            return False

    def _resolve(self, ref: str) -> str:
        """Resolve a ref to a full commit id."""
        try:
            return self.repo.git.rev_parse("--verify", "--quiet", f"{ref}^{{commit}}").strip()
        except GitCommandError as err:
            raise RefResolutionError(f"Cannot resolve {ref}") from err

    def short_sha(self, ref: str) -> str:
        try:
            return self.repo.git.rev_parse("--short", "--verify", "--quiet", f"{ref}^{{commit}}").strip()
        except GitCommandError as err:
            raise RefResolutionError(f"Cannot resolve {ref}") from err

    def commit_delta(self, ref_a: str, ref_b: str) -> CommitDelta:
        sha_a = self._resolve(ref_a)
        sha_b = self._resolve(ref_b)
        try:
            # Left side counts commits only in A, right side commits only in B
            counts = self.repo.git.rev_list("--left-right", "--count", f"{sha_a}...{sha_b}").split()
        except GitCommandError as err:
            raise RefResolutionError(f"Cannot compare {ref_a} with {ref_b}") from err
        if len(counts) != 2:
            raise RefResolutionError(f"Unexpected rev-list output comparing {ref_a} with {ref_b}: {counts}")
        return CommitDelta(ahead=int(counts[0]), behind=int(counts[1]))

    def symbolic_ref(self, ref: str) -> Optional[str]:
        try:
            return self.repo.git.symbolic_ref("--quiet", ref).strip() or None
        except GitCommandError:
            return None

    def branch_remote(self, branch: str) -> Optional[str]:
        try:
            return self.repo.git.config("--get", f"branch.{branch}.remote").strip() or None
        except GitCommandError:
            # No remote tracking configuration
            return None

    def upstream_ref(self, branch: str) -> Optional[str]:
        try:
            return self.repo.git.rev_parse("--symbolic-full-name", f"{branch}@{{upstream}}").strip() or None
        except GitCommandError:
            # Upstream configured but its remote-tracking ref is gone
            return None

    def set_upstream(self, branch: str, remote: str, remote_branch: str) -> None:
        try:
            self.repo.git.branch(f"--set-upstream-to={remote}/{remote_branch}", branch)
        except GitCommandError as err:
            raise GitError(f"Failed to set upstream of {branch}: {err}") from err

    def list_branches(self) -> list[Branch]:
        try:
            names = self.repo.git.for_each_ref("--format=%(refname:strip=2)", "refs/heads/").splitlines()
        except GitCommandError as err:
            raise GitError(f"Failed to list branches: {err}") from err
        return [Branch(name) for name in sorted(name.strip() for name in names if name.strip())]

    def current_branch(self) -> Optional[str]:
        try:
            return self.repo.active_branch.name
        except TypeError:
            # We're in a detached HEAD state
            return None

    def worktree_branches(self) -> dict[str, str]:
        try:
            output = self.repo.git.worktree("list", "--porcelain")
        except GitCommandError as err:
            raise GitError(f"Failed to list worktrees: {err}") from err

        own = Path(self.repo.working_tree_dir).resolve()
        branches: dict[str, str] = {}
        path = None
        # Records are "worktree <path>" followed by "HEAD", "branch" or "detached" lines
        for line in output.splitlines():
            if line.startswith("worktree "):
                path = line[len("worktree ") :]
            elif line.startswith("branch refs/heads/") and path is not None:
                if Path(path).resolve() != own:
                    branches[line[len("branch refs/heads/") :]] = path
        return branches

    def merge_fast_forward(self, ref: str) -> None:
        try:
            self.repo.git.merge("--ff-only", "--quiet", ref)
        except GitCommandError as err:
            raise GitError(f"Failed to fast-forward to {ref}: {err}") from err

    def update_branch(self, branch: str, ref: str) -> None:
        worktree = self.worktree_branches().get(branch)
        if worktree is not None:
            # Moving the ref would leave that worktree's index and files behind
            raise GitError(f"{branch} is checked out in worktree {worktree}")
        old = self._resolve(f"refs/heads/{branch}")
        new = self._resolve(ref)
        try:
            # Passing the old value makes the update fail if the branch moved meanwhile
            self.repo.git.update_ref("-m", f"branchsync: fast-forward to {ref}", f"refs/heads/{branch}", new, old)
        except GitCommandError as err:
            raise GitError(f"Failed to update {branch}: {err}") from err

    def delete_branch(self, branch: str, force: bool = False) -> None:
        try:
            self.repo.git.branch("-D" if force else "-d", branch)
        except GitCommandError as err:
            raise GitError(f"Failed to delete {branch}: {err}") from err

    def checkout(self, branch: str, start_point: Optional[str] = None) -> None:
        args = ["-b", branch, start_point] if start_point else [branch]
        try:
            self.repo.git.checkout("--quiet", *args)
        except GitCommandError as err:
            raise GitError(f"Failed to switch to {branch}: {err}") from err
        logger.debug("Switched to %s", branch)
