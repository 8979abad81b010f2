"""Reconciliation options and per-report execution context.

FixOptions replaces process-wide flags: it is built once (usually from the
command line) and handed to the Fixer's constructor. FixContext tracks the
state of one fix pass over one report.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from common_lib.logger import get_logger

from src.core.data.report import NoteType, Report

logger = get_logger(__name__)


@dataclass(frozen=True)
class FixOptions:
    """Switches controlling a reconciliation pass."""

    # Run the autofixer even when the initial lint is clean.
    force: bool = False
    # Do not look for missing GHSA and CVE aliases.
    skip_alias: bool = False
    # Do not load packages to refresh derived symbols.
    skip_symbols: bool = False
    # Batch mode: record problems as notes on the report instead of only logging them.
    add_notes: bool = False


@dataclass
class FixContext:
    """
    Execution context for one fix pass over a single report.

    Collects the errors that keep the report from being fully fixed and,
    in batch mode, mirrors them onto the report as FIX notes so the problem
    is visible in the persisted file.
    """

    report: Report
    add_notes: bool = False

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    fixed: bool = True
    errors: List[str] = field(default_factory=list)
    aliases_added: int = 0

    @property
    def elapsed_seconds(self) -> float:
        return (datetime.now(timezone.utc) - self.started_at).total_seconds()

    def add_error(self, fmt: str, *args: Any) -> None:
        """Record a problem that requires manual review."""
        message = fmt % args if args else fmt
        logger.error("%s: %s", self.report.id, message)
        if self.add_notes:
            self.report.add_note(NoteType.FIX, message)
        self.errors.append(message)
        self.fixed = False

    def fail(self) -> None:
        self.fixed = False

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.report.id,
            "fixed": self.fixed,
            "error_count": len(self.errors),
            "aliases_added": self.aliases_added,
            "elapsed_seconds": self.elapsed_seconds,
        }
