"""Report data model: the canonical, human-curated form of a vulnerability."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.core import stdlib


class Placeholder(str, Enum):
    """Values standing in for data a human still has to supply."""

    UNRESOLVED = "TODO"


class NoteType(str, Enum):
    """Kinds of notes attached to a report during processing."""

    LINT = "lint"
    FIX = "fix"
    CREATE = "create"


class ReferenceType(str, Enum):
    """Reference types used in OSV entries."""

    ADVISORY = "ADVISORY"
    ARTICLE = "ARTICLE"
    REPORT = "REPORT"
    FIX = "FIX"
    PACKAGE = "PACKAGE"
    EVIDENCE = "EVIDENCE"
    WEB = "WEB"


class _ReportModel(BaseModel):
    model_config = ConfigDict(validate_assignment=True)


class VersionRange(_ReportModel):
    """One introduced/fixed pair; an empty side is open-ended."""

    introduced: Optional[str] = Field(default=None, description="First affected version (empty: from the beginning)")
    fixed: Optional[str] = Field(default=None, description="First fixed version (empty: not yet fixed)")


class Package(_ReportModel):
    """An affected package within a module."""

    package: str = Field(..., description="Import path")
    goos: List[str] = Field(default_factory=list)
    goarch: List[str] = Field(default_factory=list)
    symbols: List[str] = Field(default_factory=list, description="Curated vulnerable symbols")
    derived_symbols: List[str] = Field(default_factory=list, description="Computed exported symbols")
    excluded_symbols: List[str] = Field(
        default_factory=list, description="Symbols a human removed from the derived set"
    )
    skip_fix: Optional[str] = Field(default=None, description="Reason to skip symbol refresh for this package")


class Module(_ReportModel):
    """An affected module."""

    module: str = Field(..., description="Module path, or the std/cmd sentinels")
    versions: List[VersionRange] = Field(default_factory=list)
    vulnerable_at: Optional[str] = Field(default=None, description="A version at which the module is vulnerable")
    packages: List[Package] = Field(default_factory=list)

    def is_first_party(self) -> bool:
        """Report whether the module ships with the Go toolchain itself."""
        return stdlib.is_std_module(self.module) or stdlib.is_cmd_module(self.module)

    def is_unresolved(self) -> bool:
        return self.module == Placeholder.UNRESOLVED.value


class Reference(_ReportModel):
    type: Optional[ReferenceType] = None
    url: str


class CVEMeta(_ReportModel):
    """CVE metadata for reports whose CVE is issued by this database's CNA."""

    id: str
    cwe: str = Placeholder.UNRESOLVED.value


class Note(_ReportModel):
    type: NoteType
    body: str


class Report(_ReportModel):
    """A vulnerability report."""

    id: str
    modules: List[Module] = Field(default_factory=list)
    summary: Optional[str] = None
    description: str = ""
    published: Optional[datetime] = None
    withdrawn: Optional[datetime] = None
    excluded: Optional[str] = Field(default=None, description="Reason the report is excluded from OSV output")
    cves: List[str] = Field(default_factory=list)
    ghsas: List[str] = Field(default_factory=list)
    cve_metadata: Optional[CVEMeta] = None
    credits: List[str] = Field(default_factory=list)
    references: List[Reference] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)

    def is_excluded(self) -> bool:
        return bool(self.excluded)

    def get_aliases(self) -> List[str]:
        """All known aliases: the CNA-issued CVE first, then other CVEs, then GHSAs."""
        aliases: List[str] = []
        if self.cve_metadata is not None:
            aliases.append(self.cve_metadata.id)
        aliases.extend(self.cves)
        aliases.extend(self.ghsas)
        return aliases

    def add_cve(self, cve_id: str, module_path: str) -> None:
        """Attach a CVE id according to who maintains module_path.

        Standard library, toolchain and golang.org/x CVEs are likely issued by
        the same authority that runs this database, so they become the primary
        CVE metadata; any other CVE is a plain alias.
        """
        if (
            stdlib.is_std_module(module_path)
            or stdlib.is_cmd_module(module_path)
            or stdlib.is_x_module(module_path)
        ):
            self.cve_metadata = CVEMeta(id=cve_id)
        else:
            self.cves.append(cve_id)

    def add_note(self, note_type: NoteType, body: str, *args: Any) -> None:
        if args:
            body = body % args
        self.notes.append(Note(type=note_type, body=body))

    def clear_notes(self, note_type: NoteType) -> None:
        self.notes = [n for n in self.notes if n.type != note_type]

    def to_document(self) -> Dict[str, Any]:
        """Plain-data form used for YAML persistence; empty fields are omitted."""
        return _prune(self.model_dump(mode="json", exclude_none=True))


def _prune(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _prune(v) for k, v in value.items() if v != [] and v != {}}
    if isinstance(value, list):
        return [_prune(v) for v in value]
    return value
