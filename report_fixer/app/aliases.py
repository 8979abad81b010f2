"""누락된 별칭 탐색(Missing alias discovery)."""
from __future__ import annotations

from typing import Any, Dict, List, Protocol

import httpx
from tenacity import AsyncRetrying

from common_lib.logger import get_logger
from common_lib.retry_config import get_retry_strategy
from src.core.data.report import Report
from src.core.errors import ExternalAPIError

logger = get_logger(__name__)


class AliasFinder(Protocol):
    async def add_missing_aliases(self, report: Report) -> int:
        """Add aliases not yet on the report; return how many were added."""
        ...


class OSVAliasFinder:
    """
    OSV API 기반 별칭 탐색기(Alias finder backed by the OSV API).

    Every alias already on the report is looked up; CVE and GHSA ids found in
    the responses and missing from the report are merged in.
    """

    def __init__(self, client: httpx.AsyncClient, api_url: str, allow_external: bool = True) -> None:
        self._client = client
        self._api_url = api_url.rstrip("/")
        self._allow_external = allow_external

    async def _fetch(self, alias: str) -> Dict[str, Any]:
        url = f"{self._api_url}/vulns/{alias}"
        async for attempt in AsyncRetrying(**get_retry_strategy()):
            with attempt:
                response = await self._client.get(url)
                if response.status_code == 404:
                    return {}
                response.raise_for_status()
        try:
            data = response.json()
        except ValueError as exc:
            raise ExternalAPIError("OSV", response.status_code, f"invalid JSON for {alias}") from exc
        if not isinstance(data, dict):
            raise ExternalAPIError("OSV", response.status_code, f"unexpected payload for {alias}")
        return data

    async def _related(self, alias: str) -> List[str]:
        try:
            data = await self._fetch(alias)
        except httpx.HTTPStatusError as exc:
            raise ExternalAPIError("OSV", exc.response.status_code, str(exc)) from exc
        except httpx.HTTPError as exc:
            raise ExternalAPIError("OSV", message=str(exc)) from exc
        found: List[str] = []
        if data.get("id"):
            found.append(str(data["id"]))
        found.extend(str(a) for a in data.get("aliases") or [])
        return found

    async def add_missing_aliases(self, report: Report) -> int:
        """
        누락된 별칭 추가(Merge missing CVE/GHSA aliases into the report).

        Returns:
            Number of aliases added; lookup failures are logged and skipped
        """
        if not self._allow_external:
            logger.info("%s: external alias lookups disabled", report.id)
            return 0

        known = report.get_aliases()
        primary = report.cve_metadata.id if report.cve_metadata is not None else None
        added = 0
        for alias in list(known):
            try:
                related = await self._related(alias)
            except ExternalAPIError as exc:
                logger.warning("%s: alias lookup for %s failed: %s", report.id, alias, exc)
                continue
            for candidate in related:
                if candidate in known or candidate == report.id:
                    continue
                if candidate.startswith("CVE-"):
                    if candidate == primary:
                        continue
                    report.cves.append(candidate)
                elif candidate.startswith("GHSA-"):
                    report.ghsas.append(candidate)
                else:
                    continue
                known.append(candidate)
                added += 1
                logger.info("%s: added alias %s (via %s)", report.id, candidate, alias)
        return added
