"""리포트 자동 보정 서비스(Report reconciliation service)."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from common_lib.logger import get_logger
from osv_generator.app.repository import OSVRepository
from osv_generator.app.service import generate_osv_entry
from src.core.context import FixContext, FixOptions
from src.core.data.report import NoteType, Report
from src.core.errors import ReconciliationFailure

from .aliases import AliasFinder
from .linter import Linter
from .references import ReferenceChecker
from .repository import ReportRepository
from .symbols import SymbolRefresher

logger = get_logger(__name__)


class Fixer:
    """
    리포트 보정기(Runs one reconciliation pass over a report).

    Steps run in order with no retries: lint and autofix, symbol refresh,
    alias merge, reference check, final lint.
    """

    def __init__(
        self,
        linter: Linter,
        symbol_refresher: Optional[SymbolRefresher],
        alias_finder: AliasFinder,
        reference_checker: ReferenceChecker,
        reports: ReportRepository,
        osv: OSVRepository,
        options: Optional[FixOptions] = None,
    ) -> None:
        self._linter = linter
        self._symbols = symbol_refresher
        self._aliases = alias_finder
        self._references = reference_checker
        self._reports = reports
        self._osv = osv
        self._options = options or FixOptions()

    async def fix(self, r: Report) -> bool:
        """
        보정 실행(Reconcile a report in place).

        Returns:
            True if no problem remains that needs manual review
        """
        fc = FixContext(report=r, add_notes=self._options.add_notes)

        lints = self._linter.lint(r)
        if self._options.force or lints:
            logger.info("%s: fixing %d lint(s)", r.id, len(lints))
            self._linter.fix(r)

        if not self._options.skip_symbols and self._symbols is not None:
            logger.info("%s: checking packages and symbols", r.id)
            try:
                errors = await self._symbols.refresh(r)
            except Exception as exc:
                errors = [exc]
            for err in errors:
                fc.add_error("package or symbol error: %s", err)

        if not self._options.skip_alias:
            logger.info("%s: checking for missing GHSAs and CVEs", r.id)
            try:
                added = await self._aliases.add_missing_aliases(r)
            except Exception as exc:
                # Alias lookups never decide the outcome of a pass.
                logger.warning("%s: alias lookup failed: %s", r.id, exc)
                if self._options.add_notes:
                    r.add_note(NoteType.FIX, "alias lookup failed: %s", exc)
            else:
                fc.aliases_added = added
                if added:
                    logger.info("%s: added %d missing alias(es)", r.id, added)

        logger.info("%s: checking that all references are reachable", r.id)
        for result in await self._references.check_all(r.references):
            if result.defect:
                fc.add_error("%s", result.message)

        if self._options.add_notes:
            if self._linter.lint_as_notes(r):
                logger.warning("%s: still has lint errors after fix", r.id)
                fc.fail()
        else:
            residual = self._linter.lint(r)
            for lint in residual:
                logger.warning("%s: lint: %s", r.id, lint)
            if residual:
                fc.fail()

        logger.info("%s: fix pass finished", r.id, extra=fc.summary())
        return fc.fixed

    def write_derived(self, r: Report) -> Path:
        """파생 OSV 엔트리 저장(Write the public entry derived from a report)."""

        return self._osv.write(generate_osv_entry(r))

    async def fix_and_write(self, r: Report) -> None:
        """
        보정 후 저장(Reconcile, then persist).

        The report is always written, even when the pass raises. The derived
        entry is written only when the pass succeeded.

        Raises:
            ReconciliationFailure: the report needs manual review
        """
        try:
            fixed = await self.fix(r)
        finally:
            self._reports.write(r)
        if not fixed:
            raise ReconciliationFailure(r.id)
        self.write_derived(r)
