"""OSV 엔트리 데이터 모델(OSV entry data models)."""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from src.core.utils.timestamps import format_rfc3339

GO_ECOSYSTEM = "Go"
RANGE_TYPE_SEMVER = "SEMVER"


class _OSVModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class RangeEvent(_OSVModel):
    """범위 이벤트(A single introduced or fixed event)."""

    introduced: Optional[str] = None
    fixed: Optional[str] = None


class Range(_OSVModel):
    type: str = RANGE_TYPE_SEMVER
    events: List[RangeEvent] = Field(default_factory=list)


class OSVModule(_OSVModel):
    """영향받는 모듈(Affected module; serialised under "package")."""

    path: str = Field(..., serialization_alias="name", validation_alias="name")
    ecosystem: str = GO_ECOSYSTEM


class ImportedPackage(_OSVModel):
    path: str
    goos: List[str] = Field(default_factory=list)
    goarch: List[str] = Field(default_factory=list)
    symbols: List[str] = Field(default_factory=list)


class EcosystemSpecific(_OSVModel):
    imports: List[ImportedPackage] = Field(default_factory=list)


class Affected(_OSVModel):
    module: OSVModule = Field(..., serialization_alias="package", validation_alias="package")
    ranges: List[Range] = Field(default_factory=list)
    ecosystem_specific: Optional[EcosystemSpecific] = None


class OSVReference(_OSVModel):
    type: str
    url: str


class Credit(_OSVModel):
    name: str


class DatabaseSpecific(_OSVModel):
    url: str


class Entry(_OSVModel):
    """OSV 엔트리(Public OSV entry). Field order matches the published JSON."""

    schema_version: str
    id: str
    modified: datetime
    published: datetime
    withdrawn: Optional[datetime] = None
    aliases: List[str] = Field(default_factory=list)
    details: str = ""
    affected: List[Affected] = Field(default_factory=list)
    references: List[OSVReference] = Field(default_factory=list)
    credits: List[Credit] = Field(default_factory=list)
    database_specific: Optional[DatabaseSpecific] = None

    @field_serializer("modified", "published", "withdrawn")
    def _serialize_time(self, value: Optional[datetime]) -> Optional[str]:
        return format_rfc3339(value) if value is not None else None

    def to_json_dict(self) -> Dict[str, Any]:
        """JSON 직렬화용 딕셔너리(Dictionary ready for JSON output, empty fields omitted)."""

        return _omit_empty(self.model_dump(mode="json", by_alias=True, exclude_none=True))


def _omit_empty(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _omit_empty(v) for k, v in value.items() if v != [] and v != ""}
    if isinstance(value, list):
        return [_omit_empty(v) for v in value]
    return value
