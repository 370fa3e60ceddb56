"""Map a dependency file path to the package that owns it."""
from typing import NamedTuple

from compat_lint.errors import NotInDependencyTreeError

DEPENDENCY_ROOT = "node_modules"
PACKAGE_MANIFEST = "package.json"


class ResolvedPath(NamedTuple):
    """Owning package of a file inside a dependency tree."""

    package_name: str
    package_json_path: str
    relative_file_path: str


def resolve_package_path(file_path: str) -> ResolvedPath:
    """Resolve the package name, manifest path and package-relative path.

    The innermost package wins: for
    ``app/node_modules/a/node_modules/@s/b/index.js`` the owner is ``@s/b``.
    Backslashes are treated as separators, and returned paths always use
    forward slashes.

    Args:
        file_path: Path of a file inside a node_modules tree

    Returns:
        ResolvedPath for the owning package

    Raises:
        NotInDependencyTreeError: If no package follows a node_modules segment
    """
    parts = file_path.replace("\\", "/").split("/")

    try:
        marker = len(parts) - 1 - parts[::-1].index(DEPENDENCY_ROOT)
    except ValueError:
        raise NotInDependencyTreeError(file_path) from None

    package_parts = parts[marker + 1 :]
    if not package_parts or not package_parts[0]:
        raise NotInDependencyTreeError(file_path)

    if package_parts[0].startswith("@"):
        if len(package_parts) < 2 or not package_parts[1]:
            raise NotInDependencyTreeError(file_path)
        package_name = "/".join(package_parts[:2])
        root_end = marker + 3
    else:
        package_name = package_parts[0]
        root_end = marker + 2

    package_json_path = "/".join(parts[:root_end] + [PACKAGE_MANIFEST])
    relative_file_path = "/".join(parts[root_end:])

    return ResolvedPath(package_name, package_json_path, relative_file_path)
