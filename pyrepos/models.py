"""Domain models: enums, dataclasses, and configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class SyncStatus(Enum):
    """Final state of a single repository sync"""
    SUCCESS = auto()
    FAILED = auto()


class OperationType(Enum):
    """Types of git operations"""
    READ_HEAD = auto()
    READ_DEFAULT_BRANCH = auto()
    CHECKOUT = auto()
    FETCH = auto()
    MERGE = auto()
    WORKTREE_PRUNE = auto()
    CLONE = auto()


@dataclass(frozen=True)
class RepositoryTarget:
    """A directory believed to hold a working checkout"""
    path: Path

    @property
    def name(self) -> str:
        """Short name used for reporting (final path segment)."""
        return self.path.name


@dataclass(frozen=True)
class OperationResult:
    """Result of a single git operation.

    ``output`` is the stripped stdout on success and the combined
    stdout/stderr on failure.
    """
    success: bool
    operation: OperationType
    output: str = ""
    error: Exception | None = None


@dataclass(frozen=True)
class SyncOutcome:
    """Immutable result of synchronizing one repository"""
    name: str
    status: SyncStatus
    previous_revision: str = ""
    new_revision: str = ""
    failure_detail: str = ""

    @classmethod
    def succeeded(cls, name: str, previous_revision: str, new_revision: str) -> SyncOutcome:
        return cls(name, SyncStatus.SUCCESS, previous_revision, new_revision)

    @classmethod
    def failed(cls, name: str, detail: str, previous_revision: str = "") -> SyncOutcome:
        return cls(name, SyncStatus.FAILED, previous_revision, "", detail)

    @property
    def ok(self) -> bool:
        return self.status is SyncStatus.SUCCESS

    @property
    def changed(self) -> bool:
        """True if the sync moved HEAD."""
        return self.ok and self.previous_revision != self.new_revision

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict for JSON output."""
        return {
            'name': self.name,
            'status': self.status.name,
            'previous_revision': self.previous_revision,
            'new_revision': self.new_revision,
            'failure_detail': self.failure_detail,
        }


@dataclass(frozen=True)
class RemoteRepository:
    """A repository published by a hosted account"""
    name: str
    owner: str
    archived: bool = False

    @property
    def clone_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}"


@dataclass(frozen=True)
class ReconcilePlan:
    """What to clone and what to delete to match the hosted inventory"""
    to_clone: list[RemoteRepository] = field(default_factory=list)
    to_remove: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.to_clone and not self.to_remove


@dataclass(frozen=True)
class ReconcileAction:
    """A single executed (or printed) reconcile step"""
    command: str
    error: str = ""

    def __str__(self) -> str:
        if self.error:
            return f"{self.command}: {self.error}"
        return self.command


@dataclass(frozen=True)
class SyncConfig:
    """Configuration for sync operations"""
    parallel: int = 5
    remote_name: str = 'origin'
    fetch_jobs: int = 10
    worktree_dir: str = 'default'
    exclude_patterns: list[str] = field(default_factory=list)
    json_output: bool = False
    verbose: bool = False
    show_progress: bool = False
    git_timeout: float | None = None

    def with_updates(self, **kwargs) -> SyncConfig:
        """Return a new SyncConfig with the given fields replaced."""
        current = {f.name: getattr(self, f.name) for f in self.__dataclass_fields__.values()}
        current.update(kwargs)
        return SyncConfig(**current)
