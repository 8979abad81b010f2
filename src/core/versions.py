"""Go toolchain version tags and their semantic versions."""

import asyncio
import re
import shutil

from common_lib.logger import get_logger

logger = get_logger(__name__)

# Go release tags. The groups are:
#   minor       the major.minor version
#   patch       the patch version (".3"), or empty if none
#   prerelease  the entire prerelease ("beta1", "rc2"), if present
#   kind        the prerelease type ("beta" or "rc")
#   number      the prerelease number
_TAG_RE = re.compile(
    r"^go(?P<minor>\d+\.\d+)"
    r"(?P<patch>\.\d+|)"
    r"(?P<prerelease>(?P<kind>beta|rc)(?P<number>\d+))?$"
)

# Returned when a tag is not a Go release or prerelease.
UNKNOWN_VERSION = ""


def semver_for_go_version(tag: str) -> str:
    """Return the semantic version for a Go version tag.

    "go1.21.3" -> "1.21.3", "go1.21beta1" -> "1.21.0-beta.1". Anything that is
    not a Go release tag, including bare versions like "1.21.3", yields
    UNKNOWN_VERSION.
    """
    m = _TAG_RE.match(tag or "")
    if m is None:
        return UNKNOWN_VERSION
    version = m.group("minor")
    version += m.group("patch") or ".0"
    if m.group("prerelease"):
        version += "-" + m.group("kind") + "." + m.group("number")
    return version


async def current_go_version(override: str = "", timeout: float = 10.0) -> str:
    """Return the tag of the Go toolchain used for symbol derivation.

    An explicit override wins. Otherwise `go env GOVERSION` is consulted; any
    failure returns an empty tag, which downstream code treats as unknown.
    """
    if override:
        return override
    go = shutil.which("go")
    if go is None:
        logger.info("go binary not found on PATH; toolchain version unknown")
        return ""
    try:
        proc = await asyncio.create_subprocess_exec(
            go, "env", "GOVERSION",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        logger.warning("failed to run go env: %s", exc)
        return ""
    try:
        stdout, _ = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        logger.warning("go env GOVERSION timed out after %.0fs", timeout)
        return ""
    if proc.returncode != 0:
        return ""
    return stdout.decode("utf-8", errors="replace").strip()
