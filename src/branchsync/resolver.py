"""Remote selection and upstream tracking resolution."""

import logging
from typing import Optional, Sequence

from branchsync.models import Branch, Remote, Upstream
from branchsync.vcs import NoRemotesError, RemoteNotFoundError, VersionControl

logger = logging.getLogger(__name__)

REMOTE_PRIORITY = ("upstream", "github", "origin")
DEFAULT_BRANCH_CANDIDATES = ("main", "master")
FALLBACK_DEFAULT_BRANCH = "main"


def select_remote(remotes: Sequence[Remote], preferred: Optional[str] = None) -> Remote:
    """Pick the remote to reconcile against.

    An explicitly ``preferred`` remote wins. Otherwise the first remote named
    in :data:`REMOTE_PRIORITY` wins, falling back to the first remote listed.

    Raises:
        NoRemotesError: If there are no remotes
        RemoteNotFoundError: If ``preferred`` is not among ``remotes``
    """
    if not remotes:
        raise NoRemotesError("No git remotes found")

    by_name = {remote.name: remote for remote in remotes}
    if preferred is not None:
        if preferred not in by_name:
            raise RemoteNotFoundError(f"Remote '{preferred}' not found")
        return by_name[preferred]

    for name in REMOTE_PRIORITY:
        if name in by_name:
            return by_name[name]
    return remotes[0]


def default_branch_of(vcs: VersionControl, remote: Remote) -> str:
    """Detect the default branch of a remote from its fetched refs.

    Looks at ``<remote>/HEAD`` first, then at ``main`` and ``master``. Only
    local remote-tracking refs are inspected.
    """
    prefix = f"refs/remotes/{remote.name}/"
    head = vcs.symbolic_ref(f"{prefix}HEAD")
    if head and head.startswith(prefix) and head != f"{prefix}HEAD":
        return head[len(prefix) :]

    for name in DEFAULT_BRANCH_CANDIDATES:
        if vcs.ref_exists(f"{prefix}{name}"):
            return name
    return FALLBACK_DEFAULT_BRANCH


def tracking_link_for(vcs: VersionControl, branch: Branch) -> Optional[str]:
    """Name of the remote a branch is configured to track, if any."""
    return vcs.branch_remote(branch.name)


def resolve_upstream(vcs: VersionControl, branch: Branch, remote: Remote) -> Upstream:
    """Resolve the upstream of ``branch`` on ``remote``.

    A branch configured to track ``remote`` has a present upstream when that
    upstream resolves and a gone one when it does not. Any other branch falls
    back to ``<remote>/<branch>`` if such a remote-tracking ref exists.
    """
    if tracking_link_for(vcs, branch) == remote.name:
        ref = vcs.upstream_ref(branch.name)
        if ref is None:
            logger.debug("Upstream of %s on %s is gone", branch.name, remote.name)
            return Upstream.gone()
        return Upstream.present(ref)

    conventional = f"refs/remotes/{remote.name}/{branch.name}"
    if vcs.ref_exists(conventional):
        return Upstream.present(conventional)
    return Upstream.untracked()
