"""Reconciliation pass."""

import logging
from typing import Iterator, Optional

from branchsync.classifier import Classifier
from branchsync.executor import Executor
from branchsync.models import Outcome, SyncContext
from branchsync.resolver import default_branch_of, select_remote
from branchsync.vcs import VersionControl

logger = logging.getLogger(__name__)


def prepare(vcs: VersionControl, remote_name: Optional[str] = None, fetch: bool = True) -> SyncContext:
    """Select the remote, fetch from it and detect its default branch.

    Raises:
        NoRemotesError: If the repository has no remotes
        RemoteNotFoundError: If ``remote_name`` is not a configured remote
        FetchError: If fetching fails
    """
    remote = select_remote(vcs.list_remotes(), preferred=remote_name)
    logger.debug("Reconciling against %s (%s)", remote.name, remote.url)
    if fetch:
        vcs.fetch(remote.name)
    default_branch = default_branch_of(vcs, remote)
    logger.debug("Default branch of %s is %s", remote.name, default_branch)
    return SyncContext(remote=remote, default_branch=default_branch)


def reconcile(vcs: VersionControl, context: SyncContext, dry_run: bool = False) -> Iterator[Outcome]:
    """Classify and act on each local branch in turn.

    Each branch is fully handled before the next one is classified.
    """
    classifier = Classifier(vcs, context)
    executor = Executor(vcs, context, dry_run=dry_run)
    for disposition in classifier.classify_all():
        yield executor.apply(disposition)
