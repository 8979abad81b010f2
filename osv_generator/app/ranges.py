"""영향 범위 생성 및 판정(Affected range synthesis and membership checks)."""
from __future__ import annotations

from typing import List, Sequence

from src.core import semver
from src.core.data.report import VersionRange

from .models import RANGE_TYPE_SEMVER, Range, RangeEvent


def affected_ranges(versions: Sequence[VersionRange]) -> List[Range]:
    """
    리포트 버전 범위를 OSV 범위로 변환(Turn report version ranges into one OSV range).

    An implicit introduced="0" event comes first when there are no ranges or
    the first range has no introduced version. Events then follow the input
    order exactly; nothing is merged, deduplicated or reordered.
    """
    events: List[RangeEvent] = []
    if not versions or not versions[0].introduced:
        events.append(RangeEvent(introduced="0"))
    for v in versions:
        if v.introduced:
            events.append(RangeEvent(introduced=v.introduced))
        if v.fixed:
            events.append(RangeEvent(fixed=v.fixed))
    return [Range(type=RANGE_TYPE_SEMVER, events=events)]


def _event_key(e: RangeEvent):
    if e.introduced == "0":
        return (0, ())
    return (1, semver.parse(e.introduced or e.fixed or ""))


def _contains_semver(r: Range, version: str) -> bool:
    # The beginning of time sorts first; stable for equal versions.
    events = sorted(r.events, key=_event_key)
    affected = False
    for e in events:
        if not affected and e.introduced:
            affected = e.introduced == "0" or semver.compare(version, e.introduced) >= 0
        elif affected and e.fixed:
            affected = semver.compare(version, e.fixed) < 0
    return affected


def affects_semver(ranges: Sequence[Range], version: str) -> bool:
    """
    버전이 범위 내에 있는지 확인(Report whether version falls inside any SEMVER range).

    An empty range list affects every version.

    Raises:
        InvalidVersionError: if version or any event version is not a semantic version.
    """
    semver.parse(version)
    if not ranges:
        return True
    for r in ranges:
        if r.type != RANGE_TYPE_SEMVER:
            continue
        if _contains_semver(r, version):
            return True
    return False
