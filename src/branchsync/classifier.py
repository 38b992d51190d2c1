"""Branch classification.

Decides, for every local branch, whether it is left alone, fast-forwarded,
deleted or warned about. Nothing here touches the repository.
"""

import logging
from typing import Iterator, Optional

from branchsync import oracle
from branchsync.models import Action, Branch, Disposition, SyncContext, UpstreamStatus
from branchsync.resolver import resolve_upstream
from branchsync.vcs import GitError, VersionControl

logger = logging.getLogger(__name__)


class Classifier:
    """Classify local branches against a remote."""

    def __init__(self, vcs: VersionControl, context: SyncContext) -> None:
        self.vcs = vcs
        self.context = context

    def classify(self, branch: Branch) -> Optional[Disposition]:
        """Classify one branch.

        Returns:
            The disposition, or None if the branch is untracked or could not
            be evaluated
        """
        try:
            upstream = resolve_upstream(self.vcs, branch, self.context.remote)
        except GitError as err:
            logger.debug("Skipping %s: %s", branch.name, err)
            return None

        if upstream.status is UpstreamStatus.PRESENT:
            return self._classify_present(branch, upstream.ref)
        if upstream.status is UpstreamStatus.GONE:
            return self._classify_gone(branch)
        return None

    def _classify_present(self, branch: Branch, upstream_ref: str) -> Optional[Disposition]:
        try:
            delta = oracle.delta(self.vcs, branch.ref, upstream_ref)
        except GitError as err:
            logger.debug("Skipping %s: %s", branch.name, err)
            return None

        if delta.ahead > 0:
            action = Action.WARN
        elif delta.behind > 0:
            action = Action.FAST_FORWARD
        else:
            action = Action.NOOP
        return Disposition(
            branch=branch,
            action=action,
            compared_to=upstream_ref,
            delta=delta,
            target_ref=upstream_ref if action is Action.FAST_FORWARD else None,
        )

    def _classify_gone(self, branch: Branch) -> Optional[Disposition]:
        # The original upstream no longer exists, so the default branch stands
        # in for "has this work landed"
        default_ref = self.context.default_ref
        try:
            delta = oracle.delta(self.vcs, branch.ref, default_ref)
        except GitError as err:
            logger.debug("Skipping %s: %s", branch.name, err)
            return None

        if delta.ahead == 0:
            return Disposition(
                branch=branch,
                action=Action.DELETE,
                compared_to=default_ref,
                delta=delta,
                reason=f"upstream gone and merged into {self.context.remote.name}/{self.context.default_branch}",
            )
        return Disposition(
            branch=branch,
            action=Action.WARN_UNMERGED,
            compared_to=default_ref,
            delta=delta,
            reason=f"upstream gone but not merged into {self.context.remote.name}/{self.context.default_branch}",
        )

    def classify_all(self) -> Iterator[Disposition]:
        """Classify every local branch in name order, skipping those without a disposition."""
        for branch in sorted(self.vcs.list_branches(), key=lambda b: b.name):
            disposition = self.classify(branch)
            if disposition is not None:
                yield disposition
