"""Configuration: argument parser and config file loader."""

from __future__ import annotations

import argparse
import sys
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = '.pyreposrc.toml'


def create_argument_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser with all pyrepos flags."""
    # Lazy import to avoid circular dependency with __init__.py
    from pyrepos import __version__

    parser = argparse.ArgumentParser(
        prog='pyrepos',
        allow_abbrev=False,
        description="Pull in updates for every git checkout directly under a directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                     # Sync checkouts in the current dir
  %(prog)s ~/src --parallel 10                 # More concurrent syncs
  %(prog)s ~/src --exclude archive --json      # Skip a dir, JSON report
        """
    )

    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('directory', nargs='?', default='.',
                       help='Directory holding the checkouts (default: current)')
    parser.add_argument('--parallel', type=int, default=5,
                       help='Repositories to sync concurrently (default: 5)')
    parser.add_argument('--remote', default='origin',
                       help='Remote to sync from (default: origin)')
    parser.add_argument('--fetch-jobs', type=int, default=10,
                       help='Parallel connections per fetch (default: 10)')
    parser.add_argument('--worktree-dir', default='default',
                       help='Nested checkout preferred over the repo dir itself (default: default)')
    parser.add_argument('--exclude', action='append', default=[],
                       help='Exclude pattern (can specify multiple)')
    parser.add_argument('--timeout', type=float, default=None,
                       help='Kill any single git command after N seconds (default: no limit)')
    parser.add_argument('--progress', dest='show_progress', action='store_true',
                       help='Show a progress bar')
    parser.add_argument('--json', dest='json_output', action='store_true',
                       help='Output results as JSON (suppresses normal output)')
    parser.add_argument('--verbose', action='store_true',
                       help='Verbose output')
    parser.add_argument('--config', type=str, default=None,
                       help=f'Path to config file (default: {CONFIG_FILENAME} in directory or home)')

    return parser


def load_config_file(search_dir: Path, config_path: str | None = None) -> dict[str, Any]:
    """Load .pyreposrc.toml from explicit path, search dir, or home dir.

    Returns empty dict if not found or unparsable.
    """
    candidates = [Path(config_path)] if config_path else [search_dir / CONFIG_FILENAME, Path.home() / CONFIG_FILENAME]
    for path in candidates:
        if path.is_file():
            try:
                with open(path, 'rb') as f:
                    return tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                print(f"Warning: Failed to parse {path}: {e}", file=sys.stderr)
                return {}
    if config_path:
        print(f"Warning: Config file '{config_path}' not found. Ignoring.", file=sys.stderr)
    return {}
