"""CLI entry point: main() function."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

from colorama import Fore, Style

from pyrepos.config import create_argument_parser, load_config_file
from pyrepos.models import SyncConfig
from pyrepos.orchestrator import SyncOrchestrator
from pyrepos.output import ConsoleOutputHandler, NullOutputHandler


def main(argv: list[str] | None = None):
    """Main entry point"""
    argv = sys.argv[1:] if argv is None else argv
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    base_dir = Path(args.directory).resolve()
    file_config = load_config_file(base_dir, args.config)

    # Determine which args were explicitly set on CLI
    cli_explicit = set()
    for action in parser._actions:
        if action.dest in ('help', 'version'):
            continue
        for opt_string in action.option_strings:
            if any(arg == opt_string or arg.startswith(opt_string + '=') for arg in argv):
                cli_explicit.add(action.dest)
                break

    def effective(dest: str, toml_key: str):
        if dest in cli_explicit:
            return getattr(args, dest)
        if toml_key in file_config:
            return file_config[toml_key]
        return getattr(args, dest)

    exclude_raw = effective('exclude', 'exclude_patterns')

    config = SyncConfig(
        parallel=effective('parallel', 'parallel'),
        remote_name=effective('remote', 'remote_name'),
        fetch_jobs=effective('fetch_jobs', 'fetch_jobs'),
        worktree_dir=effective('worktree_dir', 'worktree_dir'),
        exclude_patterns=list(exclude_raw) if exclude_raw else [],
        json_output=effective('json_output', 'json_output'),
        verbose=effective('verbose', 'verbose'),
        show_progress=effective('show_progress', 'show_progress'),
        git_timeout=effective('timeout', 'git_timeout'),
    )

    for flag, value in (('--parallel', config.parallel), ('--fetch-jobs', config.fetch_jobs)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            parser.error(f"{flag} must be a positive integer, got {value!r}")
    timeout = config.git_timeout
    if timeout is not None and (isinstance(timeout, bool) or not isinstance(timeout, (int, float))
                                or timeout <= 0):
        parser.error(f"--timeout must be a positive number of seconds, got {timeout!r}")

    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    if not base_dir.is_dir():
        print(f"{Fore.RED}Error: Invalid directory '{base_dir}'{Style.RESET_ALL}", file=sys.stderr)
        sys.exit(1)

    output = NullOutputHandler() if config.json_output else ConsoleOutputHandler(verbose=config.verbose)

    orchestrator = SyncOrchestrator(config, output)

    try:
        orchestrator.run(base_dir)
    except KeyboardInterrupt:
        if not config.json_output:
            output.warning("\n\nInterrupted by user")
        sys.exit(130)
    except OSError as e:
        if config.json_output:
            print(json.dumps({'error': f"read {base_dir}: {e}"}, indent=2))
        else:
            output.error(f"sync: read {base_dir}: {e}")
        sys.exit(1)

    if config.json_output:
        print(json.dumps(orchestrator.reporter.to_dict(), indent=2))
    else:
        orchestrator.reporter.print_summary()

    # Individual repository failures are reported above, not in the exit status
    sys.exit(0)
