"""CVE 레코드를 리포트로 변환하는 서비스(Service converting CVE records into reports)."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple, Union

from pydantic import ValidationError

from common_lib.logger import get_logger
from src.core import stdlib
from src.core.data.report import Module, Package, Placeholder, Reference, Report
from src.core.errors import ConversionError

from .models import CVE, CVERecord

logger = get_logger(__name__)

CVERecordType = Union[CVE, CVERecord]


def load_record(path: Union[str, Path]) -> Dict[str, Any]:
    """CVE JSON 파일 읽기(Read a CVE JSON file)."""

    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise ConversionError(str(path), f"invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ConversionError(str(path), "top-level JSON value is not an object")
    return data


def parse_record(data: Dict[str, Any], source: str = "record") -> CVERecordType:
    """레코드 형식 판별 및 검증(Detect the record shape and validate it)."""

    if not isinstance(data, dict):
        raise ConversionError(source, "record is not a JSON object")
    try:
        if "cveMetadata" in data:
            return CVERecord.model_validate(data)
        if "CVE_data_meta" in data:
            return CVE.model_validate(data)
    except ValidationError as exc:
        raise ConversionError(source, f"malformed CVE record: {exc.error_count()} validation error(s): {exc}") from exc
    raise ConversionError(source, "neither a CVE JSON 4.0 nor a CVE JSON 5.x record")


def _resolve_paths(module_path: str, candidate_pkg: str) -> Tuple[str, str]:
    pkg_path = candidate_pkg
    if stdlib.contains(module_path):
        pkg_path = module_path
        module_path = stdlib.MODULE_PATH
    if module_path == "":
        module_path = Placeholder.UNRESOLVED.value
    if pkg_path == "":
        pkg_path = module_path
    return module_path, pkg_path


def _skeleton(
    report_id: str,
    module_path: str,
    pkg_path: str,
    description: str,
    credits: List[str],
    refs: List[Reference],
) -> Report:
    return Report(
        id=report_id,
        modules=[Module(module=module_path, packages=[Package(package=pkg_path)])],
        description=description,
        credits=credits,
        references=refs,
    )


class CVEConverter:
    """CVE 4/5 레코드 변환기(Converter for CVE JSON 4.0 and 5.x records)."""

    def to_report(self, data: Dict[str, Any], report_id: str, module_path: str = "", source: str = "record") -> Report:
        """
        원시 CVE 데이터로부터 리포트 생성(Create a report skeleton from raw CVE data).

        Args:
            data: Decoded CVE JSON object (either schema generation)
            report_id: Identifier of the report to create
            module_path: Candidate module path (may be empty)
            source: Label used in error messages

        Returns:
            Report skeleton; no lint fixes have been applied

        Raises:
            ConversionError: if the record is malformed
        """
        record = parse_record(data, source)
        if isinstance(record, CVERecord):
            return self.cve5_to_report(record, report_id, module_path)
        return self.cve_to_report(record, report_id, module_path)

    def cve_to_report(self, c: CVE, report_id: str, module_path: str) -> Report:
        """CVE JSON 4.0 레코드 변환(Convert a CVE JSON 4.0 record)."""

        description = "".join(d.value + "\n" for d in c.description.data)
        refs = [Reference(url=r.url) for r in c.references.data]
        credits: List[str] = []
        if c.credit.data is not None:
            credits = [v.value for v in c.credit.data.description.data]

        candidate = ""
        vendors = c.affects.vendor.data
        if vendors and vendors[0].product.data:
            candidate = vendors[0].product.data[0].product_name

        module_path, pkg_path = _resolve_paths(module_path, candidate)
        r = _skeleton(report_id, module_path, pkg_path, description, credits, refs)
        r.add_cve(c.metadata.id, module_path)
        logger.debug("Converted CVE 4.0 record %s into %s", c.metadata.id, report_id)
        return r

    def cve5_to_report(self, c: CVERecord, report_id: str, module_path: str) -> Report:
        """CVE JSON 5.x 레코드 변환(Convert a CVE JSON 5.x record)."""

        cna = c.containers.cna
        description = "".join(d.value + "\n" for d in cna.descriptions if d.lang == "en")
        credits = [cr.value for cr in cna.credits]
        refs = [Reference(url=ref.url) for ref in cna.references]

        # Only the first affected block is considered for the package path.
        candidate = cna.affected[0].product if cna.affected else ""

        module_path, pkg_path = _resolve_paths(module_path, candidate)
        r = _skeleton(report_id, module_path, pkg_path, description, credits, refs)
        if cna.title:
            r.summary = cna.title
        r.add_cve(c.metadata.id, module_path)
        logger.debug("Converted CVE 5 record %s into %s", c.metadata.id, report_id)
        return r
