"""Repository scanner: lists candidate checkouts directly under a directory."""

from __future__ import annotations

from pathlib import Path

from pyrepos.models import RepositoryTarget


class RepositoryScanner:
    """Responsible for enumerating repository targets"""

    def __init__(self, exclude_patterns: list[str] = None):
        """Create a scanner with optional substring-based exclude patterns."""
        self.exclude_patterns = exclude_patterns or []

    def list_targets(self, base_dir: Path) -> list[RepositoryTarget]:
        """Return every immediate subdirectory of base_dir, sorted by name.

        Symlinked directories are not targets.

        Errors reading base_dir propagate; they abort the whole run.
        """
        return [RepositoryTarget(path) for path in self._subdirectories(base_dir)]

    def list_directory_names(self, base_dir: Path) -> set[str]:
        """Names of the immediate subdirectories of base_dir."""
        return {path.name for path in self._subdirectories(base_dir)}

    def _subdirectories(self, base_dir: Path) -> list[Path]:
        # Symlinks are skipped so no working tree is queued twice
        entries = sorted(base_dir.iterdir(), key=lambda p: p.name)
        return [p for p in entries
                if p.is_dir() and not p.is_symlink() and not self._should_exclude(p)]

    def _should_exclude(self, path: Path) -> bool:
        """Return True if any exclude pattern is a substring of the path."""
        path_str = str(path)
        return any(pattern in path_str for pattern in self.exclude_patterns)
