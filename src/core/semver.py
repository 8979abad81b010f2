"""Semantic version parsing and precedence for Go module versions.

Thin layer over the ``semver`` package that follows Go's x/mod/semver rules:
the shorthands "1" and "1.2" are accepted, build metadata is ignored for
precedence, and pseudo-versions such as "0.0.0-20220101000000-abcdef123456"
are ordinary prereleases. Versions may carry a "v" or "go" prefix.
"""

from semver import Version

from src.core.errors import InvalidVersionError


def trim_prefix(version: str) -> str:
    """Remove a leading "go" or "v" from version."""
    if version.startswith("go"):
        return version[2:]
    if version.startswith("v"):
        return version[1:]
    return version


def parse(version: str) -> Version:
    """Parse version into a comparable ``semver.Version``.

    Raises:
        InvalidVersionError: if version is not a semantic version.
    """
    text = trim_prefix(version or "")
    core = text.split("+", 1)[0].split("-", 1)[0]
    # Shorthands may not carry a prerelease or build suffix.
    if core != text and core.count(".") != 2:
        raise InvalidVersionError(version)
    try:
        parsed = Version.parse(text, optional_minor_and_patch=True)
    except ValueError as exc:
        raise InvalidVersionError(version) from exc
    for ident in (parsed.prerelease or "").split("."):
        if len(ident) > 1 and ident.isdigit() and ident[0] == "0":
            raise InvalidVersionError(version)
    return parsed


def is_valid(version: str) -> bool:
    try:
        parse(version)
    except InvalidVersionError:
        return False
    return True


def compare(a: str, b: str) -> int:
    """Compare two versions, returning -1, 0 or 1."""
    return parse(a).compare(parse(b))
