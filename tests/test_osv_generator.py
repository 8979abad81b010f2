"""Unit tests for OSV range synthesis and entry generation."""
import json
from datetime import datetime, timezone

import pytest

from osv_generator.app.models import Range, RangeEvent
from osv_generator.app.ranges import affected_ranges, affects_semver
from osv_generator.app.repository import OSVRepository
from osv_generator.app.service import SCHEMA_VERSION, generate_osv_entry, modules_for_entry
from src.core.data.report import Module, Package, VersionRange
from src.core.errors import InvalidVersionError

MODIFIED = datetime(2023, 7, 1, 8, 30, tzinfo=timezone.utc)


def _events(ranges):
    return [e.model_dump(exclude_none=True) for e in ranges[0].events]


class TestAffectedRanges:
    """Test affected_ranges function."""

    def test_no_versions(self):
        ranges = affected_ranges([])
        assert len(ranges) == 1
        assert ranges[0].type == "SEMVER"
        assert _events(ranges) == [{"introduced": "0"}]

    def test_leading_zero_when_first_introduced_empty(self):
        ranges = affected_ranges([VersionRange(fixed="1.2.3"), VersionRange(introduced="1.3.0", fixed="1.3.2")])
        assert _events(ranges) == [
            {"introduced": "0"},
            {"fixed": "1.2.3"},
            {"introduced": "1.3.0"},
            {"fixed": "1.3.2"},
        ]

    def test_first_introduced_set(self):
        ranges = affected_ranges([VersionRange(introduced="1.0.0")])
        assert _events(ranges) == [{"introduced": "1.0.0"}]

    def test_input_order_preserved(self):
        ranges = affected_ranges([VersionRange(introduced="2.0.0", fixed="2.0.1"), VersionRange(introduced="1.0.0")])
        assert _events(ranges) == [{"introduced": "2.0.0"}, {"fixed": "2.0.1"}, {"introduced": "1.0.0"}]


class TestAffectsSemver:
    """Test affects_semver function."""

    def test_empty_ranges_affect_everything(self):
        assert affects_semver([], "1.0.0")

    @pytest.mark.parametrize(
        "version, expected",
        [("1.20.4", True), ("1.20.5", False), ("1.21.0", True), ("1.21.3", True), ("1.21.4", False)],
    )
    def test_multiple_windows(self, version, expected):
        ranges = affected_ranges([VersionRange(fixed="1.20.5"), VersionRange(introduced="1.21.0", fixed="1.21.4")])
        assert affects_semver(ranges, version) is expected

    def test_events_sorted_before_walk(self):
        ranges = affected_ranges([VersionRange(introduced="2.0.0", fixed="2.0.1"), VersionRange(introduced="1.0.0", fixed="1.1.0")])
        assert affects_semver(ranges, "1.0.5")
        assert not affects_semver(ranges, "1.5.0")
        assert affects_semver(ranges, "2.0.0")

    def test_non_semver_ranges_ignored(self):
        ranges = [Range(type="GIT", events=[RangeEvent(introduced="0")])]
        assert not affects_semver(ranges, "1.0.0")

    def test_invalid_version(self):
        with pytest.raises(InvalidVersionError):
            affects_semver([], "not-a-version")

    def test_invalid_event(self):
        with pytest.raises(InvalidVersionError):
            affects_semver(affected_ranges([VersionRange(fixed="bogus")]), "1.0.0")


class TestGenerateOsvEntry:
    """Test generate_osv_entry function."""

    def test_third_party_entry(self, sample_report):
        sample_report.modules[0].packages[0].derived_symbols = ["Decode", "Parse"]
        entry = generate_osv_entry(sample_report, last_modified=MODIFIED)
        doc = entry.to_json_dict()

        assert doc["schema_version"] == SCHEMA_VERSION == "1.3.1"
        assert doc["id"] == "GO-2023-0001"
        assert doc["modified"] == "2023-07-01T08:30:00Z"
        assert doc["published"] == "2023-06-01T12:00:00Z"
        assert "withdrawn" not in doc
        assert doc["aliases"] == ["CVE-2023-1234"]
        assert doc["affected"][0]["package"] == {"name": "github.com/example/lib", "ecosystem": "Go"}
        assert doc["affected"][0]["ranges"] == [
            {"type": "SEMVER", "events": [{"introduced": "1.2.0"}, {"fixed": "1.4.1"}]}
        ]
        # Concatenated and sorted; duplicates are kept.
        assert doc["affected"][0]["ecosystem_specific"]["imports"] == [
            {"path": "github.com/example/lib/parser", "symbols": ["Decode", "Parse", "Parse"]}
        ]
        assert doc["references"] == [{"type": "FIX", "url": "https://github.com/example/lib/commit/abc123"}]
        assert doc["credits"] == [{"name": "Jane Researcher"}]
        assert doc["database_specific"] == {"url": "https://pkg.go.dev/vuln/GO-2023-0001"}
        assert list(doc) == [
            "schema_version", "id", "modified", "published", "aliases", "details",
            "affected", "references", "credits", "database_specific",
        ]

    def test_stdlib_and_toolchain_names(self, std_report):
        std_report.modules.append(Module(module="cmd", packages=[Package(package="cmd/go")]))
        entry = generate_osv_entry(std_report, last_modified=MODIFIED)
        assert modules_for_entry(entry) == ["stdlib", "toolchain"]
        assert entry.aliases == ["CVE-2023-5678"]

    def test_published_defaults_to_modified(self, std_report):
        entry = generate_osv_entry(std_report, last_modified=MODIFIED)
        assert entry.published == MODIFIED

    def test_details_normalised(self, sample_report):
        sample_report.description = "First line\nsecond line.\n\n\nNext paragraph.\n"
        entry = generate_osv_entry(sample_report, last_modified=MODIFIED)
        assert entry.details == "First line second line.\n\nNext paragraph."

    def test_missing_reference_type_defaults_to_web(self, sample_report):
        sample_report.references[0].type = None
        entry = generate_osv_entry(sample_report, last_modified=MODIFIED)
        assert entry.references[0].type == "WEB"

    def test_withdrawn_and_custom_id(self, sample_report):
        sample_report.withdrawn = datetime(2023, 8, 1, tzinfo=timezone.utc)
        entry = generate_osv_entry(sample_report, go_id="GO-2023-0100", last_modified=MODIFIED)
        doc = entry.to_json_dict()
        assert doc["id"] == "GO-2023-0100"
        assert doc["withdrawn"] == "2023-08-01T00:00:00Z"

    def test_report_not_mutated(self, sample_report):
        before = sample_report.model_dump()
        generate_osv_entry(sample_report, last_modified=MODIFIED)
        assert sample_report.model_dump() == before


class TestOSVRepository:
    def test_write_and_read(self, tmp_path, std_report):
        repo = OSVRepository(tmp_path)
        entry = generate_osv_entry(std_report, last_modified=MODIFIED)
        path = repo.write(entry)

        assert path == tmp_path / "GO-2023-0002.json"
        doc = json.loads(path.read_text(encoding="utf-8"))
        assert doc["affected"][0]["package"]["name"] == "stdlib"
        assert repo.read("GO-2023-0002").to_json_dict() == entry.to_json_dict()
