"""Concrete GitPython-based repository implementation."""

from __future__ import annotations

import logging
from pathlib import Path

from git import Git, GitCommandError
from git.exc import GitCommandNotFound

from pyrepos.models import OperationResult, OperationType

logger = logging.getLogger(__name__)


def run_git(
    working_dir: Path,
    args: list[str],
    operation: OperationType,
    timeout: float | None = None,
) -> OperationResult:
    """Run ``git <args>`` in working_dir and wait for it to exit.

    Never raises for git failures: a non-zero exit becomes a failed result
    carrying a GitCommandError and the combined stdout/stderr, and a missing
    executable or working directory becomes a failed result carrying the
    raised exception.
    """
    command = ['git', *args]
    # Git.execute silently falls back to the process cwd for unusable dirs
    if not working_dir.is_dir():
        return OperationResult(False, operation, "",
                               NotADirectoryError(f"not a directory: {working_dir}"))

    logger.debug("%s (cwd=%s)", ' '.join(command), working_dir)
    try:
        status, stdout, stderr = Git(working_dir).execute(
            command,
            with_extended_output=True,
            with_exceptions=False,
            kill_after_timeout=timeout,
        )
    except (GitCommandNotFound, OSError) as e:
        logger.debug("%s failed to start: %s", ' '.join(command), e)
        return OperationResult(False, operation, "", e)

    stdout = (stdout or "").strip()
    stderr = (stderr or "").strip()
    if status != 0:
        combined = "\n".join(part for part in (stdout, stderr) if part)
        logger.debug("%s exited %s: %s", ' '.join(command), status, combined)
        return OperationResult(False, operation, combined, GitCommandError(command, status))
    return OperationResult(True, operation, stdout)


def has_git_metadata(directory: Path) -> bool:
    """Return True if directory holds a .git directory or gitfile."""
    return (directory / '.git').exists()


def resolve_working_dir(target: Path, worktree_dir: str = 'default') -> Path | None:
    """Pick the checkout to sync: <target>/<worktree_dir> first, then <target>."""
    if worktree_dir:
        nested = target / worktree_dir
        if has_git_metadata(nested):
            return nested
    if has_git_metadata(target):
        return target
    return None


class GitCommandRepository:
    """Concrete implementation shelling out through GitPython"""

    def __init__(self, repo_path: Path, remote_name: str = 'origin', timeout: float | None = None):
        """Bind git commands to a working directory and remote."""
        self._path = repo_path
        self._remote = remote_name
        self._timeout = timeout

    @property
    def path(self) -> Path:
        """Working directory the commands run in."""
        return self._path

    def _run(self, operation: OperationType, *args: str) -> OperationResult:
        return run_git(self._path, list(args), operation, self._timeout)

    def read_head(self) -> OperationResult:
        """Short hash of the checked-out commit."""
        return self._run(OperationType.READ_HEAD, 'rev-parse', '--short', 'HEAD')

    def remote_default_branch(self) -> OperationResult:
        """Branch the remote's HEAD points at, without the remote prefix."""
        result = self._run(OperationType.READ_DEFAULT_BRANCH,
                           'rev-parse', '--abbrev-ref', f'{self._remote}/HEAD')
        if not result.success:
            return result
        prefix = f'{self._remote}/'
        branch = result.output[len(prefix):] if result.output.startswith(prefix) else ""
        if not branch or branch == 'HEAD':
            return OperationResult(False, result.operation, result.output,
                                   ValueError(f"{self._remote}/HEAD does not name a branch"))
        return OperationResult(True, result.operation, branch)

    def checkout(self, branch: str) -> OperationResult:
        """Switch the working copy to a local branch."""
        return self._run(OperationType.CHECKOUT, 'checkout', branch)

    def fetch(self, jobs: int = 10) -> OperationResult:
        """Fetch everything, pruning deleted branches and tags and forcing tag updates."""
        return self._run(OperationType.FETCH, 'fetch', '--tags', '--prune', '--prune-tags',
                         '--force', f'--jobs={jobs}')

    def merge_fast_forward(self) -> OperationResult:
        """Fast-forward to the upstream, stashing local changes around the merge."""
        return self._run(OperationType.MERGE, 'merge', '--ff-only', '--autostash')

    def prune_worktrees(self) -> OperationResult:
        """Remove stale worktree administrative data."""
        return self._run(OperationType.WORKTREE_PRUNE, 'worktree', 'prune')
