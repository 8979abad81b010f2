"""Unit tests for CVE record conversion."""
import json

import pytest

from cve_converter.app.service import CVEConverter, load_record
from osv_generator.app.service import generate_osv_entry
from src.core.errors import ConversionError


@pytest.fixture
def converter():
    return CVEConverter()


class TestCve4:
    """Test CVE JSON 4.0 conversion."""

    def test_third_party_record(self, converter, cve4_record):
        r = converter.to_report(cve4_record, "GO-2023-0001", "github.com/example/lib")

        assert r.id == "GO-2023-0001"
        assert r.description == "Improper input validation in the parser\nallows a denial of service.\n"
        assert [m.module for m in r.modules] == ["github.com/example/lib"]
        assert r.modules[0].packages[0].package == "github.com/example/lib/parser"
        assert [ref.url for ref in r.references] == [
            "https://github.com/example/lib/issues/12",
            "https://github.com/example/lib/commit/abc123",
        ]
        assert all(ref.type is None for ref in r.references)
        assert r.credits == ["Jane Researcher"]
        assert r.cves == ["CVE-2023-1234"]
        assert r.cve_metadata is None

    def test_unknown_module_is_placeholder(self, converter, cve4_record):
        cve4_record["affects"]["vendor"]["vendor_data"][0]["product"]["product_data"][0]["product_name"] = "foo"
        r = converter.to_report(cve4_record, "GO-2023-0001", "")
        assert r.modules[0].module == "TODO"
        assert r.modules[0].packages[0].package == "foo"

    def test_stdlib_without_product(self, converter, cve4_record):
        del cve4_record["affects"]
        r = converter.to_report(cve4_record, "GO-2023-0002", "std")

        assert r.modules[0].module == "std"
        assert r.modules[0].packages[0].package == "std"
        assert r.cve_metadata is not None and r.cve_metadata.id == "CVE-2023-1234"
        assert r.cves == []

        entry = generate_osv_entry(r)
        assert entry.affected[0].module.path == "stdlib"

    def test_x_module_gets_cve_metadata(self, converter, cve4_record):
        r = converter.to_report(cve4_record, "GO-2023-0001", "golang.org/x/net")
        assert r.cve_metadata.id == "CVE-2023-1234"
        assert r.modules[0].packages[0].package == "github.com/example/lib/parser"

    def test_missing_credit(self, converter, cve4_record):
        del cve4_record["credit"]
        assert converter.to_report(cve4_record, "GO-2023-0001", "github.com/example/lib").credits == []


class TestCve5:
    """Test CVE JSON 5.x conversion."""

    def test_stdlib_package(self, converter, cve5_record):
        r = converter.to_report(cve5_record, "GO-2023-0002", "net/http")

        assert r.modules[0].module == "std"
        assert r.modules[0].packages[0].package == "net/http"
        assert r.description == "A crafted request causes excessive memory use.\n"
        assert r.summary == "Excessive memory use in net/http"
        assert r.credits == ["Alex Finder"]
        assert r.cve_metadata.id == "CVE-2023-5678"

    def test_product_used_as_package(self, converter, cve5_record):
        cve5_record["containers"]["cna"]["affected"][0]["product"] = "github.com/example/lib/parser"
        r = converter.to_report(cve5_record, "GO-2023-0003", "github.com/example/lib")
        assert r.modules[0].packages[0].package == "github.com/example/lib/parser"
        assert r.cves == ["CVE-2023-5678"]

    def test_no_affected_block(self, converter, cve5_record):
        cve5_record["containers"]["cna"]["affected"] = []
        r = converter.to_report(cve5_record, "GO-2023-0003", "github.com/example/lib")
        assert r.modules[0].packages[0].package == "github.com/example/lib"


class TestMalformedRecords:
    """Malformed input aborts the record with ConversionError."""

    @pytest.mark.parametrize(
        "data",
        [
            {},
            {"CVE_data_meta": {"ASSIGNER": "x"}, "description": {"description_data": []}},
            {"CVE_data_meta": {"ID": "CVE-2023-1"}},
            {"cveMetadata": {"cveId": "CVE-2023-1"}},
            {"cveMetadata": {}, "containers": {"cna": {}}},
        ],
    )
    def test_rejected(self, converter, data):
        with pytest.raises(ConversionError):
            converter.to_report(data, "GO-2023-0001", "github.com/example/lib")

    def test_not_a_mapping(self, converter):
        with pytest.raises(ConversionError):
            converter.to_report(["not", "a", "record"], "GO-2023-0001")

    def test_load_record_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConversionError):
            load_record(path)

    def test_load_record(self, tmp_path, cve5_record):
        path = tmp_path / "CVE-2023-5678.json"
        path.write_text(json.dumps(cve5_record), encoding="utf-8")
        assert load_record(path)["cveMetadata"]["cveId"] == "CVE-2023-5678"
