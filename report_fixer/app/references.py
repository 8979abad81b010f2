"""참조 URL 검증(Reference URL validation)."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import httpx

from common_lib.logger import get_logger
from src.core.data.report import Reference

logger = get_logger(__name__)


class ReferenceStatus(str, Enum):
    OK = "ok"
    NOT_FOUND = "not_found"
    UNREACHABLE = "unreachable"


@dataclass(frozen=True)
class ReferenceCheck:
    """단일 참조 검사 결과(Outcome of checking one reference URL)."""

    url: str
    status: ReferenceStatus
    status_code: Optional[int] = None
    detail: str = ""

    @property
    def defect(self) -> bool:
        return self.status is not ReferenceStatus.OK

    @property
    def message(self) -> str:
        if self.status is ReferenceStatus.NOT_FOUND:
            return f"{self.url} returns status 404"
        if self.status is ReferenceStatus.UNREACHABLE:
            return f"{self.url} may not exist: {self.detail}"
        return f"{self.url} is reachable (status {self.status_code})"


class ReferenceChecker:
    """
    참조 URL 존재 여부 확인(Checks that reference URLs exist).

    Only a 404 or a transport failure counts as a defect. Rate limiting,
    access denial and server errors do not mean the page is gone.
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def check(self, url: str) -> ReferenceCheck:
        try:
            response = await self._client.head(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            logger.debug("HEAD %s failed: %s", url, exc)
            return ReferenceCheck(url=url, status=ReferenceStatus.UNREACHABLE, detail=str(exc) or type(exc).__name__)

        if response.status_code == 404:
            return ReferenceCheck(url=url, status=ReferenceStatus.NOT_FOUND, status_code=404)
        return ReferenceCheck(url=url, status=ReferenceStatus.OK, status_code=response.status_code)

    async def check_all(self, refs: Sequence[Reference]) -> List[ReferenceCheck]:
        """모든 참조 순차 검사(Check every reference in order)."""

        results: List[ReferenceCheck] = []
        for ref in refs:
            results.append(await self.check(ref.url))
        return results
