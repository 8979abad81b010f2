"""Unit tests for Go version tags and semantic version precedence."""

import pytest

from src.core import semver
from src.core.errors import InvalidVersionError
from src.core.versions import UNKNOWN_VERSION, current_go_version, semver_for_go_version


class TestSemverForGoVersion:
    """Test the Go release tag parser."""

    @pytest.mark.parametrize(
        "tag, expected",
        [
            ("go1.21.3", "1.21.3"),
            ("go1.21", "1.21.0"),
            ("go1.21beta1", "1.21.0-beta.1"),
            ("go1.20rc2", "1.20.0-rc.2"),
            ("go1.19.13", "1.19.13"),
        ],
    )
    def test_release_tags(self, tag, expected):
        assert semver_for_go_version(tag) == expected

    @pytest.mark.parametrize("tag", ["1.21.3", "", "go1", "go1.21.3-devel", "devel go1.22", "go1.21alpha1"])
    def test_unknown_tags(self, tag):
        assert semver_for_go_version(tag) == UNKNOWN_VERSION

    def test_result_is_valid_semver(self):
        assert semver.is_valid(semver_for_go_version("go1.21rc1"))


class TestSemverCompare:
    """Test semantic version precedence."""

    def test_numeric_ordering(self):
        assert semver.compare("1.10.0", "1.9.0") == 1
        assert semver.compare("1.2.3", "1.2.3") == 0
        assert semver.compare("0.9.9", "1.0.0") == -1

    def test_prefixes_are_ignored(self):
        assert semver.compare("v1.2.3", "1.2.3") == 0
        assert semver.compare("go1.21.0", "1.21.0") == 0

    def test_prerelease_sorts_before_release(self):
        assert semver.compare("1.21.0-rc.1", "1.21.0") == -1
        assert semver.compare("1.21.0-beta.1", "1.21.0-rc.1") == -1
        assert semver.compare("1.0.0-alpha.2", "1.0.0-alpha.10") == -1

    def test_build_metadata_ignored(self):
        assert semver.compare("1.0.0+build.1", "1.0.0+build.2") == 0

    def test_shorthand_versions(self):
        assert semver.compare("1.2", "1.2.0") == 0
        assert semver.compare("v1", "1.0.0") == 0
        assert semver.compare("1.2", "1.10") == -1

    def test_pseudo_versions(self):
        assert semver.compare("0.0.0-20220101000000-abcdef123456", "0.0.0-20230101000000-abcdef123456") == -1
        assert semver.compare("0.0.0-20220101000000-abcdef123456", "0.1.0") == -1

    @pytest.mark.parametrize("bad", ["", "latest", "1.2.3.4", "01.2.3", "1.2.3-01", "1.2-rc.1", "1+build"])
    def test_invalid_versions(self, bad):
        assert not semver.is_valid(bad)
        with pytest.raises(InvalidVersionError):
            semver.parse(bad)


class TestCurrentGoVersion:
    """Test toolchain version discovery."""

    @pytest.mark.asyncio
    async def test_override_wins(self):
        assert await current_go_version("go1.20.1") == "go1.20.1"

    @pytest.mark.asyncio
    async def test_missing_go_binary(self, monkeypatch):
        monkeypatch.setattr("src.core.versions.shutil.which", lambda name: None)
        assert await current_go_version("") == ""
