"""파생 심볼 갱신(Derived symbol refresh)."""
from __future__ import annotations

import asyncio
import json
import shlex
from typing import List, Protocol, Sequence

from common_lib.logger import get_logger
from osv_generator.app.ranges import affected_ranges, affects_semver
from src.core.data.report import Module, Package, Report
from src.core.errors import InvalidVersionError, SymbolExtractionError
from src.core.versions import UNKNOWN_VERSION, semver_for_go_version

logger = get_logger(__name__)


class SymbolExporter(Protocol):
    """패키지의 공개 심볼 계산기(Computes the exported symbols of a package)."""

    async def exported(self, module: Module, package: Package) -> List[str]:
        """Return exported symbols; raise SymbolExtractionError on failure."""
        ...


class CommandSymbolExporter:
    """
    외부 명령 기반 심볼 추출기(Symbol exporter backed by an external command).

    The command is invoked as `<cmd...> <module> <version> <package> [symbol...]`
    and must print a JSON list of symbol names on stdout.
    """

    def __init__(self, command: str, timeout: float = 120.0) -> None:
        self._argv = shlex.split(command)
        self._timeout = timeout
        if not self._argv:
            raise ValueError("symbol exporter command is empty")

    def _build_args(self, module: Module, package: Package) -> List[str]:
        return [*self._argv, module.module, module.vulnerable_at or "", package.package, *package.symbols]

    async def exported(self, module: Module, package: Package) -> List[str]:
        args = self._build_args(module, package)
        try:
            proc = await asyncio.create_subprocess_exec(
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise SymbolExtractionError(package.package, f"cannot run {self._argv[0]}: {exc}") from exc

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            proc.kill()
            await proc.wait()
            raise SymbolExtractionError(package.package, f"timed out after {self._timeout:.0f}s") from exc

        if proc.returncode != 0:
            detail = stderr.decode("utf-8", errors="replace").strip()
            raise SymbolExtractionError(package.package, f"exit status {proc.returncode}: {detail}")
        try:
            syms = json.loads(stdout or b"[]")
        except json.JSONDecodeError as exc:
            raise SymbolExtractionError(package.package, f"unexpected output: {exc}") from exc
        if not isinstance(syms, list) or not all(isinstance(s, str) for s in syms):
            raise SymbolExtractionError(package.package, "output is not a JSON list of strings")
        return syms


def remove_excluded(report_id: str, syms: Sequence[str], excluded: Sequence[str]) -> List[str]:
    """사람이 제외한 심볼 제거(Remove symbols a human marked as excluded)."""

    if not excluded:
        return list(syms)
    kept: List[str] = []
    for s in syms:
        if s in excluded:
            logger.info("%s: removed excluded symbol %s", report_id, s)
            continue
        kept.append(s)
    return kept


class SymbolRefresher:
    """파생 심볼 갱신기(Refreshes DerivedSymbols for every package of a report)."""

    def __init__(self, exporter: SymbolExporter, go_version: str = "") -> None:
        """
        Args:
            exporter: Collaborator computing exported symbols
            go_version: Tag of the Go toolchain the exporter runs with (e.g. "go1.21.3"); empty if unknown
        """
        self._exporter = exporter
        self._go_version = go_version

    def _toolchain_matches(self, r: Report, m: Module) -> bool:
        ver = semver_for_go_version(self._go_version)
        # Symbols derived under a different toolchain than the vulnerable one may be wrong.
        if ver == UNKNOWN_VERSION:
            logger.warning(
                "%s: current Go version %r is not a release tag, skipping symbol checks for module %s",
                r.id, self._go_version, m.module,
            )
            return False
        if not affects_semver(affected_ranges(m.versions), ver):
            logger.warning(
                "%s: current Go version %r is not in a vulnerable range, skipping symbol checks for module %s",
                r.id, self._go_version, m.module,
            )
            return False
        if ver != m.vulnerable_at:
            logger.warning(
                "%s: current Go version %r does not match vulnerable_at version (%s) for module %s",
                r.id, ver, m.vulnerable_at, m.module,
            )
        return True

    async def refresh(self, r: Report) -> List[SymbolExtractionError]:
        """
        심볼 갱신 실행(Refresh derived symbols in place).

        Returns:
            One error per module whose refresh was aborted; other modules are still processed
        """
        errors: List[SymbolExtractionError] = []
        if r.is_excluded():
            logger.info("%s: excluded, skipping symbol checks", r.id)
            return errors

        for m in r.modules:
            if m.is_first_party():
                try:
                    if not self._toolchain_matches(r, m):
                        continue
                except InvalidVersionError as exc:
                    errors.append(SymbolExtractionError(m.module, str(exc)))
                    continue

            try:
                for p in m.packages:
                    await self._refresh_package(r, m, p)
            except SymbolExtractionError as exc:
                errors.append(exc)
        return errors

    async def _refresh_package(self, r: Report, m: Module, p: Package) -> None:
        if p.skip_fix:
            logger.info("%s: skipping symbol checks for package %s (reason: %r)", r.id, p.package, p.skip_fix)
            return
        syms = await self._exporter.exported(m, p)
        syms = remove_excluded(r.id, syms, p.excluded_symbols)
        if syms != p.derived_symbols:
            p.derived_symbols = syms
            logger.info("%s: updated derived symbols for package %s", r.id, p.package)
