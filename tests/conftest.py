"""Pytest configuration and shared fixtures."""
from datetime import datetime, timezone
from typing import Any, Dict, List
from unittest.mock import AsyncMock

import pytest

from common_lib.config import Settings
from src.core.data.report import CVEMeta, Module, Package, Reference, Report, VersionRange


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at temporary storage with outbound calls disabled."""
    return Settings(
        reports_dir=str(tmp_path / "reports"),
        osv_dir=str(tmp_path / "osv"),
        allow_external_calls=False,
        symbol_exporter_cmd="",
        go_version="go1.21.3",
        max_concurrency=2,
    )


@pytest.fixture
def cve4_record() -> Dict[str, Any]:
    """A CVE JSON 4.0 record for a third-party module."""
    return {
        "data_type": "CVE",
        "data_format": "MITRE",
        "data_version": "4.0",
        "CVE_data_meta": {"ID": "CVE-2023-1234", "ASSIGNER": "security@example.com", "STATE": "PUBLIC"},
        "affects": {
            "vendor": {
                "vendor_data": [
                    {
                        "vendor_name": "example",
                        "product": {"product_data": [{"product_name": "github.com/example/lib/parser"}]},
                    }
                ]
            }
        },
        "description": {
            "description_data": [
                {"lang": "eng", "value": "Improper input validation in the parser"},
                {"lang": "eng", "value": "allows a denial of service."},
            ]
        },
        "references": {
            "reference_data": [
                {"url": "https://github.com/example/lib/issues/12"},
                {"url": "https://github.com/example/lib/commit/abc123"},
            ]
        },
        "credit": {
            "credit_data": {"description": {"description_data": [{"lang": "eng", "value": "Jane Researcher"}]}}
        },
    }


@pytest.fixture
def cve5_record() -> Dict[str, Any]:
    """A CVE JSON 5.x record for a standard library package."""
    return {
        "dataType": "CVE_RECORD",
        "dataVersion": "5.0",
        "cveMetadata": {"cveId": "CVE-2023-5678", "assignerOrgId": "go", "state": "PUBLISHED"},
        "containers": {
            "cna": {
                "title": "Excessive memory use in net/http",
                "descriptions": [
                    {"lang": "en", "value": "A crafted request causes excessive memory use."},
                    {"lang": "es", "value": "Una solicitud manipulada."},
                ],
                "affected": [{"vendor": "Go standard library", "product": "net/http"}],
                "references": [{"url": "https://go.dev/issue/60000"}],
                "credits": [{"lang": "en", "value": "Alex Finder"}],
            }
        },
    }


@pytest.fixture
def sample_report() -> Report:
    """A clean, lint-free third-party report."""
    return Report(
        id="GO-2023-0001",
        modules=[
            Module(
                module="github.com/example/lib",
                versions=[VersionRange(introduced="1.2.0", fixed="1.4.1")],
                vulnerable_at="1.4.0",
                packages=[Package(package="github.com/example/lib/parser", symbols=["Parse"])],
            )
        ],
        description="Improper input validation in the parser allows a denial of service.",
        published=datetime(2023, 6, 1, 12, 0, tzinfo=timezone.utc),
        cves=["CVE-2023-1234"],
        credits=["Jane Researcher"],
        references=[Reference(type="FIX", url="https://github.com/example/lib/commit/abc123")],
    )


@pytest.fixture
def std_report() -> Report:
    """A standard library report."""
    return Report(
        id="GO-2023-0002",
        modules=[
            Module(
                module="std",
                versions=[VersionRange(fixed="1.20.5"), VersionRange(introduced="1.21.0-0", fixed="1.21.4")],
                vulnerable_at="1.21.3",
                packages=[Package(package="net/http", symbols=["Server.Serve"])],
            )
        ],
        description="A crafted request causes excessive memory use.",
        cve_metadata=CVEMeta(id="CVE-2023-5678", cwe="CWE-400: Uncontrolled Resource Consumption"),
        references=[Reference(type="REPORT", url="https://go.dev/issue/60000")],
    )


class FakeExporter:
    """Symbol exporter returning canned results and recording calls."""

    def __init__(self, symbols: Dict[str, List[str]], failing: tuple = ()):
        self.symbols = symbols
        self.failing = failing
        self.calls: List[str] = []

    async def exported(self, module, package):
        from src.core.errors import SymbolExtractionError

        self.calls.append(package.package)
        if package.package in self.failing:
            raise SymbolExtractionError(package.package, "cannot load package")
        return list(self.symbols.get(package.package, []))


@pytest.fixture
def fake_exporter_cls():
    return FakeExporter


@pytest.fixture
def no_aliases():
    finder = AsyncMock()
    finder.add_missing_aliases.return_value = 0
    return finder
