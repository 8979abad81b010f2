"""Classification of Go standard library and first-party module paths."""

# Internal sentinel module paths used in reports.
MODULE_PATH = "std"
TOOLCHAIN_MODULE_PATH = "cmd"

# Paths used for the same modules in published OSV entries.
OSV_STD_MODULE_PATH = "stdlib"
OSV_CMD_MODULE_PATH = "toolchain"

X_MODULE_PREFIX = "golang.org/x/"


def contains(path: str) -> bool:
    """Report whether path looks like a standard library import path.

    Standard library paths have no dot in their first element
    ("net/http", "crypto/tls", "std").
    """
    if not path:
        return False
    first = path.split("/", 1)[0]
    if not first:
        return False
    return "." not in first


def is_std_module(module_path: str) -> bool:
    return module_path == MODULE_PATH


def is_cmd_module(module_path: str) -> bool:
    return module_path == TOOLCHAIN_MODULE_PATH


def is_x_module(module_path: str) -> bool:
    """Report whether module_path is one of the golang.org/x repositories."""
    return module_path.startswith(X_MODULE_PREFIX)


def osv_module_path(module_path: str) -> str:
    """Map the internal sentinels onto their published names."""
    if module_path == MODULE_PATH:
        return OSV_STD_MODULE_PATH
    if module_path == TOOLCHAIN_MODULE_PATH:
        return OSV_CMD_MODULE_PATH
    return module_path
