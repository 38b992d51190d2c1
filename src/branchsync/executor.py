"""Carry out branch dispositions."""

import logging

from branchsync.models import Action, Disposition, Outcome, SyncContext
from branchsync.vcs import GitError, VersionControl

logger = logging.getLogger(__name__)


class Executor:
    """Apply dispositions to the working copy, one branch at a time."""

    def __init__(self, vcs: VersionControl, context: SyncContext, dry_run: bool = False) -> None:
        self.vcs = vcs
        self.context = context
        self.dry_run = dry_run

    def apply(self, disposition: Disposition) -> Outcome:
        """Apply a disposition.

        Failures are reported in the returned outcome instead of raised so one
        branch can never stop the others.
        """
        try:
            if disposition.action is Action.FAST_FORWARD:
                return self._fast_forward(disposition)
            if disposition.action is Action.DELETE:
                return self._delete(disposition)
            return Outcome(disposition)
        except GitError as err:
            logger.debug("Failed to apply %s to %s: %s", disposition.action.value, disposition.branch.name, err)
            return Outcome(disposition, error=str(err))

    def _fast_forward(self, disposition: Disposition) -> Outcome:
        branch = disposition.branch
        target = disposition.target_ref
        self._check_not_in_other_worktree(branch.name)
        old = self.vcs.short_sha(branch.ref)
        new = self.vcs.short_sha(target)
        if self.dry_run:
            return Outcome(disposition, old_commit=old, new_commit=new)

        if self.vcs.current_branch() == branch.name:
            # Ahead is zero, so a plain fast-forward merge must succeed
            self.vcs.merge_fast_forward(target)
        else:
            self.vcs.update_branch(branch.name, target)
        logger.debug("Fast-forwarded %s from %s to %s", branch.name, old, new)
        return Outcome(disposition, applied=True, old_commit=old, new_commit=new)

    def _delete(self, disposition: Disposition) -> Outcome:
        branch = disposition.branch
        self._check_not_in_other_worktree(branch.name)
        old = self.vcs.short_sha(branch.ref)
        if self.dry_run:
            return Outcome(disposition, old_commit=old)

        if self.vcs.current_branch() == branch.name:
            self._switch_to_default()
        # Containment in the default branch was already checked
        self.vcs.delete_branch(branch.name, force=True)
        logger.debug("Deleted %s (was %s)", branch.name, old)
        return Outcome(disposition, applied=True, old_commit=old)

    def _check_not_in_other_worktree(self, name: str) -> None:
        worktree = self.vcs.worktree_branches().get(name)
        if worktree is not None:
            raise GitError(f"{name} is checked out in worktree {worktree}")

    def _switch_to_default(self) -> None:
        default = self.context.default_branch
        if any(branch.name == default for branch in self.vcs.list_branches()):
            self.vcs.checkout(default)
            return
        self.vcs.checkout(default, start_point=self.context.default_ref)
        self.vcs.set_upstream(default, self.context.remote.name, default)
