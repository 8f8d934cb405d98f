"""Protocols and abstract interfaces for dependency injection."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from pyrepos.models import OperationResult, RemoteRepository


class GitRepository(Protocol):
    """Protocol for the git operations a sync needs"""

    def read_head(self) -> OperationResult: ...
    def remote_default_branch(self) -> OperationResult: ...
    def checkout(self, branch: str) -> OperationResult: ...
    def fetch(self, jobs: int = 10) -> OperationResult: ...
    def merge_fast_forward(self) -> OperationResult: ...
    def prune_worktrees(self) -> OperationResult: ...

    @property
    def path(self) -> Path: ...


class OutputHandler(Protocol):
    """Protocol for handling output"""

    def info(self, message: str, indent: int = 0) -> None: ...
    def success(self, message: str, indent: int = 0) -> None: ...
    def warning(self, message: str, indent: int = 0) -> None: ...
    def error(self, message: str, indent: int = 0) -> None: ...
    def section(self, title: str) -> None: ...
    def debug(self, message: str) -> None: ...


class RepositoryLister(Protocol):
    """Protocol for a hosted account's repository inventory"""

    def list_repositories(self) -> Iterable[RemoteRepository]: ...
