"""리포트 변환/보정 파이프라인 오케스트레이터(Report conversion and reconciliation orchestrator)."""
from __future__ import annotations

import asyncio
import dataclasses
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Callable, Dict, Iterable, List, Optional, Union

import httpx

from common_lib.config import Settings, get_settings
from common_lib.logger import get_logger
from common_lib.observability import bind_report_id
from cve_converter.app.service import CVEConverter, load_record
from osv_generator.app.repository import OSVRepository
from osv_generator.app.service import generate_osv_entry
from report_fixer.app.aliases import AliasFinder, OSVAliasFinder
from report_fixer.app.linter import Linter
from report_fixer.app.references import ReferenceChecker
from report_fixer.app.repository import ReportRepository
from report_fixer.app.service import Fixer
from report_fixer.app.symbols import CommandSymbolExporter, SymbolExporter, SymbolRefresher
from src.core.context import FixOptions
from src.core.data.report import NoteType
from src.core.errors import PipelineError, ReconciliationFailure
from src.core.versions import current_go_version

ProgressCallback = Callable[[str, str], None]

logger = get_logger(__name__)

STATUS_FIXED = "fixed"
STATUS_NEEDS_REVIEW = "needs review"


def _noop_progress(step: str, message: str) -> None:
    return None


class ReportOrchestrator:
    """변환/보정/생성 단계를 조율하는 오케스트레이터(Coordinates conversion, reconciliation and generation)."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        options: Optional[FixOptions] = None,
        exporter: Optional[SymbolExporter] = None,
        alias_finder: Optional[AliasFinder] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._options = options or FixOptions()
        self._exporter = exporter
        self._alias_finder = alias_finder
        self._transport = transport
        self.reports = ReportRepository(self._settings.reports_dir)
        self.osv = OSVRepository(self._settings.osv_dir)

    def _resolve_exporter(self) -> Optional[SymbolExporter]:
        if self._exporter is not None:
            return self._exporter
        if self._settings.symbol_exporter_cmd:
            return CommandSymbolExporter(self._settings.symbol_exporter_cmd, timeout=self._settings.symbol_timeout)
        return None

    @asynccontextmanager
    async def _fixer(self) -> AsyncIterator[Fixer]:
        """공유 HTTP 클라이언트와 함께 Fixer 구성(Build a Fixer around one shared HTTP client)."""

        options = self._options
        exporter = self._resolve_exporter()
        if exporter is None and not options.skip_symbols:
            logger.warning("VR_SYMBOL_EXPORTER_CMD is not set; skipping symbol checks")
            options = dataclasses.replace(options, skip_symbols=True)

        go_version = ""
        if not options.skip_symbols:
            go_version = await current_go_version(self._settings.go_version)

        async with httpx.AsyncClient(timeout=self._settings.http_timeout, transport=self._transport) as client:
            alias_finder = self._alias_finder or OSVAliasFinder(
                client,
                self._settings.osv_api_url,
                allow_external=self._settings.allow_external_calls,
            )
            yield Fixer(
                linter=Linter(),
                symbol_refresher=SymbolRefresher(exporter, go_version) if exporter is not None else None,
                alias_finder=alias_finder,
                reference_checker=ReferenceChecker(client),
                reports=self.reports,
                osv=self.osv,
                options=options,
            )

    async def _fix_one(self, fixer: Fixer, report_id: str, sem: asyncio.Semaphore, progress_cb: ProgressCallback) -> str:
        async with sem:
            with bind_report_id(report_id):
                progress_cb("FIX", f"{report_id}: 보정 시작(starting fix)")
                try:
                    report = self.reports.read(report_id)
                    await fixer.fix_and_write(report)
                except ReconciliationFailure as exc:
                    logger.warning("%s", exc)
                    progress_cb("FIX", f"{report_id}: {STATUS_NEEDS_REVIEW}")
                    return STATUS_NEEDS_REVIEW
                except PipelineError as exc:
                    logger.error("%s: %s", report_id, exc)
                    progress_cb("FIX", f"{report_id}: 실패(failed): {exc}")
                    return str(exc)
                except OSError as exc:
                    logger.error("%s: write failed: %s", report_id, exc)
                    progress_cb("FIX", f"{report_id}: 실패(failed): {exc}")
                    return f"write failed: {exc}"
                except Exception as exc:
                    # One broken report must not take down the rest of the batch.
                    logger.exception("%s: unexpected error", report_id)
                    progress_cb("FIX", f"{report_id}: 실패(failed): {exc}")
                    return f"unexpected error: {exc}"
                progress_cb("FIX", f"{report_id}: {STATUS_FIXED}")
                return STATUS_FIXED

    async def fix_reports(
        self,
        report_ids: Iterable[str],
        progress_cb: ProgressCallback = _noop_progress,
    ) -> Dict[str, str]:
        """
        여러 리포트 보정(Reconcile several reports concurrently).

        Returns:
            Map of report id to "fixed", "needs review" or an error message
        """
        ids: List[str] = list(dict.fromkeys(report_ids))
        progress_cb("INIT", f"{len(ids)}개 리포트 보정 준비(Preparing to fix {len(ids)} report(s))")
        sem = asyncio.Semaphore(self._settings.max_concurrency)
        async with self._fixer() as fixer:
            statuses = await asyncio.gather(*(self._fix_one(fixer, rid, sem, progress_cb) for rid in ids))
        results = dict(zip(ids, statuses))
        progress_cb("DONE", f"{sum(1 for s in statuses if s == STATUS_FIXED)}/{len(ids)} fixed")
        return results

    async def create_from_cve(
        self,
        path: Union[str, Path],
        report_id: str,
        module_path: str = "",
        progress_cb: ProgressCallback = _noop_progress,
    ) -> Dict[str, str]:
        """
        CVE 레코드로부터 리포트 생성(Create, reconcile and persist a report from a CVE file).

        Returns:
            Map of the report id to "fixed", "needs review" or a write error

        Raises:
            ConversionError: the record cannot be converted; nothing is written
        """
        with bind_report_id(report_id):
            progress_cb("CONVERT", f"{path} -> {report_id}")
            report = CVEConverter().to_report(load_record(path), report_id, module_path, source=str(path))
            report.add_note(NoteType.CREATE, "created from %s", Path(path).name)

            progress_cb("FIX", f"{report_id}: 보정 시작(starting fix)")
            async with self._fixer() as fixer:
                try:
                    await fixer.fix_and_write(report)
                except ReconciliationFailure as exc:
                    logger.warning("%s", exc)
                    return {report_id: STATUS_NEEDS_REVIEW}
                except OSError as exc:
                    logger.error("%s: write failed: %s", report_id, exc)
                    return {report_id: f"write failed: {exc}"}
            progress_cb("DONE", f"{report_id}: {STATUS_FIXED}")
            return {report_id: STATUS_FIXED}

    def generate_osv(
        self,
        report_ids: Iterable[str],
        progress_cb: ProgressCallback = _noop_progress,
    ) -> Dict[str, str]:
        """저장된 리포트로부터 OSV 재생성(Regenerate public entries from persisted reports)."""

        results: Dict[str, str] = {}
        for report_id in report_ids:
            with bind_report_id(report_id):
                try:
                    report = self.reports.read(report_id)
                    path = self.osv.write(generate_osv_entry(report))
                except (PipelineError, OSError) as exc:
                    logger.error("%s: %s", report_id, exc)
                    results[report_id] = str(exc)
                    continue
                progress_cb("OSV", f"{report_id} -> {path}")
                results[report_id] = str(path)
        return results

