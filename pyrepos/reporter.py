"""OutcomeReporter: prints one numbered line per sync outcome, then a summary."""

from __future__ import annotations

from typing import Any

from pyrepos.models import SyncOutcome
from pyrepos.protocols import OutputHandler


def format_line(ordinal: int, outcome: SyncOutcome) -> str:
    """Render '<ordinal> <name>: <old> -> <new>', '<rev>' if unchanged, or the failure."""
    prefix = f"{ordinal:4d} {outcome.name}: "
    if not outcome.ok:
        return prefix + outcome.failure_detail
    if outcome.changed:
        return prefix + f"{outcome.previous_revision} -> {outcome.new_revision}"
    return prefix + outcome.new_revision


class OutcomeReporter:
    """Reports outcomes in arrival order and keeps them for the summary"""

    def __init__(self, output: OutputHandler):
        """Create a reporter that writes to the given output handler."""
        self.output = output
        self.outcomes: list[SyncOutcome] = []

    def report(self, outcome: SyncOutcome) -> None:
        """Print one line for an outcome, numbered by arrival."""
        self.outcomes.append(outcome)
        line = format_line(len(self.outcomes), outcome)
        if not outcome.ok:
            self.output.error(line)
        elif outcome.changed:
            self.output.success(line)
        else:
            self.output.info(line)

    @property
    def failed(self) -> list[SyncOutcome]:
        return [o for o in self.outcomes if not o.ok]

    @property
    def updated(self) -> list[SyncOutcome]:
        return [o for o in self.outcomes if o.changed]

    def print_summary(self) -> None:
        """Print totals: repositories synced, updated, and failed."""
        self.output.section("Summary")
        self.output.info(
            f"{len(self.outcomes)} synced, {len(self.updated)} updated, {len(self.failed)} failed"
        )
        if self.failed:
            self.output.warning("Failed: " + ", ".join(o.name for o in self.failed))

    def to_dict(self) -> dict[str, Any]:
        """Serialize all reported outcomes to a plain dict for JSON output."""
        return {
            'repos_processed': len(self.outcomes),
            'repos_updated': len(self.updated),
            'repos_failed': len(self.failed),
            'outcomes': [o.to_dict() for o in self.outcomes],
        }
