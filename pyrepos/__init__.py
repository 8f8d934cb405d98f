"""
pyrepos: manage a directory of git checkouts

Synchronizes every checkout under a directory with its remote in parallel,
and reconciles the checkout set against a hosted account's repository list.
"""

from colorama import init as colorama_init

colorama_init(autoreset=True)

__version__ = "0.3.0"

# Re-export public API so `from pyrepos import X` keeps working.
from pyrepos.cli import main  # noqa: E402
from pyrepos.config import create_argument_parser, load_config_file  # noqa: E402
from pyrepos.models import (  # noqa: E402
    OperationResult,
    OperationType,
    ReconcileAction,
    ReconcilePlan,
    RemoteRepository,
    RepositoryTarget,
    SyncConfig,
    SyncOutcome,
    SyncStatus,
)
from pyrepos.orchestrator import SyncOrchestrator, sync_all  # noqa: E402
from pyrepos.output import (  # noqa: E402
    SECTION_WIDTH,
    BufferedOutputHandler,
    ConsoleOutputHandler,
    NullOutputHandler,
)
from pyrepos.protocols import GitRepository, OutputHandler, RepositoryLister  # noqa: E402
from pyrepos.reconcile import Reconciler, plan_reconcile  # noqa: E402
from pyrepos.reporter import OutcomeReporter, format_line  # noqa: E402
from pyrepos.repository import GitCommandRepository, resolve_working_dir, run_git  # noqa: E402
from pyrepos.scanner import RepositoryScanner  # noqa: E402
from pyrepos.synchronizer import RepositorySynchronizer, git_command_repository  # noqa: E402

__all__ = [
    "__version__",
    # Models
    "OperationResult",
    "OperationType",
    "ReconcileAction",
    "ReconcilePlan",
    "RemoteRepository",
    "RepositoryTarget",
    "SyncConfig",
    "SyncOutcome",
    "SyncStatus",
    # Protocols
    "GitRepository",
    "OutputHandler",
    "RepositoryLister",
    # Implementations
    "GitCommandRepository",
    "BufferedOutputHandler",
    "ConsoleOutputHandler",
    "NullOutputHandler",
    "SECTION_WIDTH",
    "git_command_repository",
    "resolve_working_dir",
    "run_git",
    # Services
    "OutcomeReporter",
    "Reconciler",
    "RepositoryScanner",
    "RepositorySynchronizer",
    "SyncOrchestrator",
    "format_line",
    "plan_reconcile",
    "sync_all",
    # Config / CLI
    "create_argument_parser",
    "load_config_file",
    "main",
]
