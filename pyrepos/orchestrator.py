"""SyncOrchestrator: fans repository syncs out to a bounded worker pool."""

from __future__ import annotations

import concurrent.futures
import logging
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path

from tqdm import tqdm

from pyrepos.models import RepositoryTarget, SyncConfig, SyncOutcome
from pyrepos.output import NullOutputHandler
from pyrepos.protocols import OutputHandler
from pyrepos.reporter import OutcomeReporter
from pyrepos.scanner import RepositoryScanner
from pyrepos.synchronizer import (
    RepositoryFactory,
    RepositorySynchronizer,
    git_command_repository,
)

logger = logging.getLogger(__name__)


class SyncOrchestrator:
    """Main orchestrator - coordinates all sync operations"""

    def __init__(
        self,
        config: SyncConfig,
        output: OutputHandler,
        repository_factory: RepositoryFactory = git_command_repository,
    ):
        """Create an orchestrator with the given config, output handler, and git backend."""
        self.config = config
        self.output = output
        self.scanner = RepositoryScanner(config.exclude_patterns)
        self.synchronizer = RepositorySynchronizer(config, repository_factory)
        self.reporter = OutcomeReporter(output)

    def run(self, base_dir: Path) -> list[SyncOutcome]:
        """Enumerate the checkouts under base_dir, sync them, and report each outcome.

        A failure listing base_dir propagates before any sync starts.
        """
        targets = self.scanner.list_targets(base_dir)
        if not targets:
            self.output.warning(f"No repositories found in {base_dir}")
            return []

        self.output.debug(f"Found {len(targets)} repositories")
        outcomes = []
        for outcome in self.sync_all(targets):
            self.reporter.report(outcome)
            outcomes.append(outcome)
        return outcomes

    def sync_all(self, targets: Iterable[RepositoryTarget]) -> Iterator[SyncOutcome]:
        """Sync every target with config.parallel workers.

        Yields exactly one outcome per target in completion order, not input
        order. A failing target never affects the others.
        """
        if self.config.parallel < 1:
            raise ValueError(f"parallel must be at least 1, got {self.config.parallel}")
        return self._sync_parallel(list(targets))

    def _sync_parallel(self, targets: list[RepositoryTarget]) -> Iterator[SyncOutcome]:
        """Drain the pre-loaded queue of targets and stream outcomes as they complete."""
        if not targets:
            return

        logger.debug("Syncing %d repositories with %d workers", len(targets), self.config.parallel)
        executor = concurrent.futures.ThreadPoolExecutor(
            max_workers=self.config.parallel, thread_name_prefix="pyrepos-sync")
        try:
            futures = {executor.submit(self.synchronizer.sync, target): target for target in targets}

            with tqdm(total=len(targets), desc="Syncing", unit="repo", file=sys.stderr,
                      leave=False, disable=not self.config.show_progress) as pbar:
                for future in concurrent.futures.as_completed(futures):
                    target = futures[future]
                    try:
                        outcome = future.result()
                    except Exception as e:
                        logger.exception("Worker crashed on %s", target.path)
                        outcome = SyncOutcome.failed(target.name, f"unexpected error: {e}")
                    pbar.set_postfix_str(target.name, refresh=False)
                    pbar.update(1)
                    yield outcome
        finally:
            # Targets not yet started are dropped if the consumer stops early
            executor.shutdown(wait=True, cancel_futures=True)


def sync_all(
    targets: Iterable[RepositoryTarget],
    concurrency: int,
    config: SyncConfig | None = None,
    repository_factory: RepositoryFactory = git_command_repository,
) -> Iterator[SyncOutcome]:
    """Sync targets with a pool of `concurrency` workers, yielding outcomes as they arrive."""
    config = (config or SyncConfig()).with_updates(parallel=concurrency)
    orchestrator = SyncOrchestrator(config, NullOutputHandler(), repository_factory)
    return orchestrator.sync_all(targets)
