"""RepositorySynchronizer: brings a single checkout up to date with its remote."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from pyrepos.models import OperationResult, RepositoryTarget, SyncConfig, SyncOutcome
from pyrepos.protocols import GitRepository
from pyrepos.repository import GitCommandRepository, resolve_working_dir

RepositoryFactory = Callable[[Path, SyncConfig], GitRepository]

NO_CHECKOUT = "no checkout found"


def git_command_repository(path: Path, config: SyncConfig) -> GitRepository:
    """Default factory: a GitCommandRepository configured from config."""
    return GitCommandRepository(path, remote_name=config.remote_name, timeout=config.git_timeout)


def describe_failure(label: str, result: OperationResult) -> str:
    """Render '<label>: <error>' followed by the captured git output, if any."""
    detail = f"{label}: {result.error}" if result.error is not None else label
    if result.output:
        detail += f"\n{result.output}"
    return detail


class RepositorySynchronizer:
    """Responsible for synchronizing a single repository.

    The steps run strictly in order against the resolved working directory:
    read HEAD, switch to the remote default branch, fetch, fast-forward
    merge, prune worktrees, read HEAD again. The first failing step ends the
    sync; nothing is retried.
    """

    def __init__(
        self,
        config: SyncConfig,
        repository_factory: RepositoryFactory = git_command_repository,
    ):
        """Create a synchronizer; repository_factory builds the git backend per checkout."""
        self.config = config
        self.repository_factory = repository_factory
        self._logger = logging.getLogger(__name__)

    def sync(self, target: RepositoryTarget) -> SyncOutcome:
        """Sync one target. Always returns an outcome, never raises."""
        try:
            return self._sync(target)
        except Exception as e:
            self._logger.exception("Unexpected error syncing %s", target.path)
            return SyncOutcome.failed(target.name, f"unexpected error: {e}")

    def _sync(self, target: RepositoryTarget) -> SyncOutcome:
        name = target.name
        working_dir = resolve_working_dir(target.path, self.config.worktree_dir)
        if working_dir is None:
            return SyncOutcome.failed(name, NO_CHECKOUT)

        repo = self.repository_factory(working_dir, self.config)

        head = repo.read_head()
        if not head.success:
            return SyncOutcome.failed(name, describe_failure("could not read current revision", head))
        previous = head.output

        def failed(label: str, result: OperationResult) -> SyncOutcome:
            return SyncOutcome.failed(name, describe_failure(label, result), previous)

        default_branch = repo.remote_default_branch()
        if not default_branch.success:
            return failed("could not determine remote default branch", default_branch)

        checkout = repo.checkout(default_branch.output)
        if not checkout.success:
            return failed("could not switch to default branch", checkout)

        fetch = repo.fetch(self.config.fetch_jobs)
        if not fetch.success:
            return failed("fetch failed", fetch)

        # Diverged history fails here; never rewrite or merge-commit
        merge = repo.merge_fast_forward()
        if not merge.success:
            return failed("merge failed", merge)

        prune = repo.prune_worktrees()
        if not prune.success:
            return failed("worktree prune failed", prune)

        head = repo.read_head()
        if not head.success:
            return failed("could not read new revision", head)

        self._logger.debug("%s: %s -> %s", name, previous, head.output)
        return SyncOutcome.succeeded(name, previous, head.output)
