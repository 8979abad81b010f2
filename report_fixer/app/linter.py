"""리포트 린트 및 자동 수정(Report lint checks and autofixes)."""
from __future__ import annotations

import re
from typing import List, Optional
from urllib.parse import urlparse

from common_lib.logger import get_logger
from src.core import semver
from src.core.data.report import Module, NoteType, Placeholder, Reference, ReferenceType, Report
from src.core.versions import semver_for_go_version

logger = get_logger(__name__)

ID_PATTERN = re.compile(r"^GO-\d{4}-\d{4,}$")
CVE_PATTERN = re.compile(r"^CVE-\d{4}-\d{4,}$")
GHSA_PATTERN = re.compile(r"^GHSA-[2-9cfghjmpqrvwx]{4}-[2-9cfghjmpqrvwx]{4}-[2-9cfghjmpqrvwx]{4}$")
MODULE_PATH_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._~\-/]*$")

_FIX_PATTERNS = [
    re.compile(r"^https://github\.com/[^/]+/[^/]+/(commit|pull)/"),
    re.compile(r"^https://go\.dev/cl/"),
    re.compile(r"^https://go-review\.googlesource\.com/"),
    re.compile(r"^https://gitlab\.com/.+/-/(commit|merge_requests)/"),
]
_REPORT_PATTERNS = [
    re.compile(r"^https://github\.com/[^/]+/[^/]+/issues/"),
    re.compile(r"^https://go\.dev/issue/"),
    re.compile(r"^https://gitlab\.com/.+/-/issues/"),
]
_ADVISORY_PATTERNS = [
    re.compile(r"^https://nvd\.nist\.gov/vuln/detail/"),
    re.compile(r"^https://github\.com/advisories/GHSA-"),
    re.compile(r"^https://github\.com/[^/]+/[^/]+/security/advisories/GHSA-"),
]


def reference_type_for_url(url: str) -> ReferenceType:
    """URL로부터 참조 유형 추론(Infer a reference type from its URL)."""

    if any(p.match(url) for p in _FIX_PATTERNS):
        return ReferenceType.FIX
    if any(p.match(url) for p in _REPORT_PATTERNS):
        return ReferenceType.REPORT
    if any(p.match(url) for p in _ADVISORY_PATTERNS):
        return ReferenceType.ADVISORY
    return ReferenceType.WEB


def canonical_version(version: str, first_party: bool) -> str:
    """버전 문자열 정규화(Canonical form of a version: no "v" prefix, Go tags as semver)."""

    if first_party and version.startswith("go"):
        converted = semver_for_go_version(version)
        if converted:
            return converted
    if version.startswith("v") and semver.is_valid(version[1:]):
        return version[1:]
    return version


def _dedupe(values: List[str]) -> List[str]:
    seen: List[str] = []
    for v in values:
        if v not in seen:
            seen.append(v)
    return seen


class Linter:
    """리포트 린터(Report linter and autofixer)."""

    def lint(self, r: Report) -> List[str]:
        """
        리포트 검사(Check a report for structural problems).

        Returns:
            Human-readable lint messages; empty when the report is clean
        """
        lints: List[str] = []

        if not ID_PATTERN.match(r.id):
            lints.append(f"id {r.id!r} does not match GO-YYYY-NNNN")

        if not r.modules and not r.is_excluded():
            lints.append("no modules")
        for i, m in enumerate(r.modules):
            lints.extend(f"modules[{i}]: {msg}" for msg in self._lint_module(m))

        if not r.description.strip():
            lints.append("description is empty")
        elif r.description != r.description.strip():
            lints.append("description has leading or trailing whitespace")

        lints.extend(self._lint_references(r.references))

        for cve in r.cves:
            if not CVE_PATTERN.match(cve):
                lints.append(f"malformed CVE id {cve!r}")
        for ghsa in r.ghsas:
            if not GHSA_PATTERN.match(ghsa):
                lints.append(f"malformed GHSA id {ghsa!r}")
        aliases = r.get_aliases()
        if len(aliases) != len(set(aliases)):
            lints.append("duplicate aliases")

        if r.cve_metadata is not None:
            if not CVE_PATTERN.match(r.cve_metadata.id):
                lints.append(f"cve_metadata: malformed CVE id {r.cve_metadata.id!r}")
            if r.cve_metadata.cwe == Placeholder.UNRESOLVED.value:
                lints.append("cve_metadata: cwe is unresolved")

        return lints

    def _lint_module(self, m: Module) -> List[str]:
        lints: List[str] = []
        if m.is_unresolved():
            lints.append("module path is unresolved")
        elif not MODULE_PATH_PATTERN.match(m.module):
            lints.append(f"malformed module path {m.module!r}")

        for j, v in enumerate(m.versions):
            for side, value in (("introduced", v.introduced), ("fixed", v.fixed)):
                if not value:
                    continue
                if not semver.is_valid(value):
                    lints.append(f"versions[{j}]: invalid {side} version {value!r}")
                elif value.startswith(("v", "go")):
                    lints.append(f"versions[{j}]: {side} version {value!r} is not canonical")

        if m.is_first_party() and not m.vulnerable_at:
            lints.append("missing vulnerable_at")
        elif m.vulnerable_at and not semver.is_valid(m.vulnerable_at):
            lints.append(f"invalid vulnerable_at version {m.vulnerable_at!r}")

        if not m.packages:
            lints.append("no packages")
        for j, p in enumerate(m.packages):
            if not p.package:
                lints.append(f"packages[{j}]: empty package path")
        return lints

    def _lint_references(self, refs: List[Reference]) -> List[str]:
        lints: List[str] = []
        seen: List[str] = []
        for i, ref in enumerate(refs):
            parsed = urlparse(ref.url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                lints.append(f"references[{i}]: {ref.url!r} is not an http(s) URL")
            if ref.type is None:
                lints.append(f"references[{i}]: missing type")
            if ref.url in seen:
                lints.append(f"references[{i}]: duplicate reference {ref.url}")
            seen.append(ref.url)
        return lints

    def lint_as_notes(self, r: Report) -> bool:
        """
        린트 결과를 노트로 기록(Record lint results as notes on the report).

        Previous lint notes are replaced.

        Returns:
            True if the report has lint errors
        """
        r.clear_notes(NoteType.LINT)
        lints = self.lint(r)
        for lint in lints:
            r.add_note(NoteType.LINT, lint)
        return bool(lints)

    def fix(self, r: Report) -> None:
        """자동 수정 적용(Apply mechanical fixes in place)."""

        r.description = r.description.strip()

        for m in r.modules:
            first_party = m.is_first_party()
            for v in m.versions:
                if v.introduced:
                    v.introduced = canonical_version(v.introduced, first_party)
                if v.fixed:
                    v.fixed = canonical_version(v.fixed, first_party)
            if m.vulnerable_at:
                m.vulnerable_at = canonical_version(m.vulnerable_at, first_party)

        refs: List[Reference] = []
        seen: List[str] = []
        for ref in r.references:
            url = ref.url.strip()
            if url in seen:
                continue
            seen.append(url)
            ref.url = url
            if ref.type is None:
                ref.type = reference_type_for_url(url)
            refs.append(ref)
        r.references = refs

        primary: Optional[str] = r.cve_metadata.id if r.cve_metadata is not None else None
        r.cves = [c for c in _dedupe([c.strip().upper() for c in r.cves]) if c != primary]
        r.ghsas = _dedupe([g.strip() for g in r.ghsas])
        logger.debug("%s: applied autofixes", r.id)
