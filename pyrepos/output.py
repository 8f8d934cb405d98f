"""Output handler implementations: console, null, buffered."""

from __future__ import annotations

import sys
from typing import TextIO

from colorama import Fore, Style
from tqdm import tqdm

SECTION_WIDTH = 50


class ConsoleOutputHandler:
    """Console output with colors.

    Writes go through tqdm.write so an active progress bar is redrawn below
    them. Defaults to stderr, the diagnostic stream; stdout is reserved for
    machine-readable output.
    """

    def __init__(self, verbose: bool = False, stream: TextIO | None = None):
        """Create a console handler. Set verbose=True to enable debug output."""
        self.verbose = verbose
        self.stream = stream

    def _write(self, line: str) -> None:
        tqdm.write(line, file=self.stream or sys.stderr)

    def info(self, message: str, indent: int = 0) -> None:
        """Print an informational message."""
        self._write("  " * indent + message)

    def success(self, message: str, indent: int = 0) -> None:
        """Print a green success message."""
        self._write("  " * indent + f"{Fore.GREEN}{message}{Style.RESET_ALL}")

    def warning(self, message: str, indent: int = 0) -> None:
        """Print a yellow warning message."""
        self._write("  " * indent + f"{Fore.YELLOW}{message}{Style.RESET_ALL}")

    def error(self, message: str, indent: int = 0) -> None:
        """Print a red error message."""
        self._write("  " * indent + f"{Fore.RED}{message}{Style.RESET_ALL}")

    def section(self, title: str) -> None:
        """Print a section header with a divider line."""
        self._write("")
        self._write(title)
        self._write("-" * SECTION_WIDTH)

    def debug(self, message: str) -> None:
        """Print a cyan debug message (only when verbose is enabled)."""
        if self.verbose:
            self._write(f"{Fore.CYAN}[DEBUG] {message}{Style.RESET_ALL}")


class NullOutputHandler:
    """Silent output handler for testing and JSON mode."""

    def info(self, message: str, indent: int = 0) -> None:
        pass

    def success(self, message: str, indent: int = 0) -> None:
        pass

    def warning(self, message: str, indent: int = 0) -> None:
        pass

    def error(self, message: str, indent: int = 0) -> None:
        pass

    def section(self, title: str) -> None:
        pass

    def debug(self, message: str) -> None:
        pass


class BufferedOutputHandler:
    """Collects uncoloured output lines in memory.

    For library callers that want the report as text instead of on the console.
    """

    def __init__(self):
        """Initialize with an empty message buffer."""
        self.messages: list[str] = []

    def info(self, message: str, indent: int = 0) -> None:
        self.messages.append("  " * indent + message)

    def success(self, message: str, indent: int = 0) -> None:
        self.messages.append("  " * indent + message)

    def warning(self, message: str, indent: int = 0) -> None:
        self.messages.append("  " * indent + message)

    def error(self, message: str, indent: int = 0) -> None:
        self.messages.append("  " * indent + message)

    def section(self, title: str) -> None:
        self.messages.append("")
        self.messages.append(title)
        self.messages.append("-" * SECTION_WIDTH)

    def debug(self, message: str) -> None:
        """No-op (debug is never buffered)."""
        pass
