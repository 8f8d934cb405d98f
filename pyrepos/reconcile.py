"""Reconcile the local checkout set against a hosted account's repository list."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from pyrepos.models import (
    OperationType,
    ReconcileAction,
    ReconcilePlan,
    RemoteRepository,
)
from pyrepos.protocols import OutputHandler, RepositoryLister
from pyrepos.repository import run_git
from pyrepos.scanner import RepositoryScanner
from pyrepos.synchronizer import describe_failure

logger = logging.getLogger(__name__)


def plan_reconcile(
    remote: Iterable[RemoteRepository],
    local_names: Iterable[str],
    include_archived: bool = False,
    prune: bool = False,
) -> ReconcilePlan:
    """Diff the hosted inventory against local directory names.

    Repositories are matched by name only; if several owners publish the
    same name, the last one listed wins. Clones are ordered by (owner, name),
    removals by name. Removals are only planned when prune is set.
    """
    wanted: dict[str, RemoteRepository] = {}
    for repo in remote:
        if repo.archived and not include_archived:
            continue
        wanted[repo.name] = repo

    local = set(local_names)
    to_clone = sorted(
        (repo for name, repo in wanted.items() if name not in local),
        key=lambda r: (r.owner, r.name),
    )
    to_remove = sorted(local - wanted.keys()) if prune else []
    return ReconcilePlan(to_clone=to_clone, to_remove=to_remove)


class Reconciler:
    """Applies a ReconcilePlan under a base directory"""

    def __init__(
        self,
        base_dir: Path,
        output: OutputHandler,
        worktree: bool = False,
        worktree_dir: str = 'default',
        dry_run: bool = False,
        timeout: float | None = None,
    ):
        self.base_dir = base_dir
        self.output = output
        self.worktree = worktree
        self.worktree_dir = worktree_dir
        self.dry_run = dry_run
        self.timeout = timeout

    def reconcile(
        self,
        lister: RepositoryLister,
        include_archived: bool = False,
        prune: bool = False,
    ) -> list[ReconcileAction]:
        """Fetch the hosted inventory, plan against base_dir, and apply."""
        local_names = RepositoryScanner().list_directory_names(self.base_dir)
        plan = plan_reconcile(lister.list_repositories(), local_names,
                              include_archived=include_archived, prune=prune)
        return self.apply(plan)

    def apply(self, plan: ReconcilePlan) -> list[ReconcileAction]:
        """Clone, then remove. A failed action never stops the ones after it."""
        actions = [self._clone(repo) for repo in plan.to_clone]
        actions.extend(self._remove(name) for name in plan.to_remove)
        return actions

    def _clone(self, repo: RemoteRepository) -> ReconcileAction:
        destination = f"{repo.name}/{self.worktree_dir}" if self.worktree else repo.name
        command = f"git clone {repo.clone_url} {destination}"
        error = ""
        if not self.dry_run:
            result = run_git(self.base_dir, ['clone', repo.clone_url, destination],
                             OperationType.CLONE, self.timeout)
            if not result.success:
                error = describe_failure("clone failed", result)
        return self._emit(ReconcileAction(command, error))

    def _remove(self, name: str) -> ReconcileAction:
        command = f"rm -rf {name}"
        error = ""
        if not self.dry_run:
            try:
                shutil.rmtree(self.base_dir / name)
            except OSError as e:
                error = str(e)
        return self._emit(ReconcileAction(command, error))

    def _emit(self, action: ReconcileAction) -> ReconcileAction:
        if action.error:
            logger.debug("reconcile action failed: %s", action)
            self.output.error(str(action))
        else:
            self.output.info(str(action))
        return action
