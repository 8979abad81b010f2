"""리포트로부터 OSV 엔트리 생성(Generate OSV entries from reports)."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from common_lib.logger import get_logger
from src.core import stdlib
from src.core.data.report import Module, ReferenceType, Report
from src.core.utils.text import trim_whitespace
from src.core.utils.timestamps import utc_now

from .models import (
    GO_ECOSYSTEM,
    Affected,
    Credit,
    DatabaseSpecific,
    EcosystemSpecific,
    Entry,
    ImportedPackage,
    OSVModule,
    OSVReference,
)
from .ranges import affected_ranges

logger = get_logger(__name__)

# Version of the OSV schema entries are exported with.
SCHEMA_VERSION = "1.3.1"

ADVISORY_BASE_URL = "https://pkg.go.dev/vuln/"


def advisory_link(go_id: str) -> str:
    """공개 권고 링크(Canonical advisory URL for a report id)."""

    return ADVISORY_BASE_URL + go_id


def generate_imports(m: Module) -> List[ImportedPackage]:
    imports: List[ImportedPackage] = []
    for p in m.packages:
        # Curated and derived symbols are concatenated, then sorted; duplicates are kept.
        syms = sorted(list(p.symbols) + list(p.derived_symbols))
        imports.append(
            ImportedPackage(path=p.package, goos=list(p.goos), goarch=list(p.goarch), symbols=syms)
        )
    return imports


def generate_affected(m: Module) -> Affected:
    return Affected(
        module=OSVModule(path=stdlib.osv_module_path(m.module), ecosystem=GO_ECOSYSTEM),
        ranges=affected_ranges(m.versions),
        ecosystem_specific=EcosystemSpecific(imports=generate_imports(m)),
    )


def generate_osv_entry(report: Report, go_id: Optional[str] = None, last_modified: Optional[datetime] = None) -> Entry:
    """
    리포트를 OSV 엔트리로 투영(Project a report into an OSV entry).

    Args:
        report: A reconciled report
        go_id: Entry id (defaults to the report id)
        last_modified: Modification time (defaults to now)

    Returns:
        A new Entry; the report is not modified
    """
    go_id = go_id or report.id
    modified = last_modified or utc_now()
    published = report.published or modified

    entry = Entry(
        schema_version=SCHEMA_VERSION,
        id=go_id,
        modified=modified,
        published=published,
        withdrawn=report.withdrawn,
        details=trim_whitespace(report.description),
        credits=[Credit(name=c) for c in report.credits],
        affected=[generate_affected(m) for m in report.modules],
        references=[
            OSVReference(type=(ref.type or ReferenceType.WEB).value, url=ref.url)
            for ref in report.references
        ],
        aliases=report.get_aliases(),
        database_specific=DatabaseSpecific(url=advisory_link(go_id)),
    )
    logger.debug("Generated OSV entry %s with %d affected module(s)", go_id, len(entry.affected))
    return entry


def modules_for_entry(entry: Entry) -> List[str]:
    """엔트리의 영향 모듈 목록(Distinct module paths affected by an entry, in first-seen order)."""

    seen: List[str] = []
    for a in entry.affected:
        if a.module.path not in seen:
            seen.append(a.module.path)
    return seen
