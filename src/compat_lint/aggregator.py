"""Attribution of per-file violations to packages and compliance check."""
from collections.abc import Iterable

from compat_lint.errors import (
    ManifestReadError,
    MissingVersionFieldError,
    NotInDependencyTreeError,
)
from compat_lint.logging_config import get_logger
from compat_lint.package_version import PackageVersionLookup, get_default_lookup
from compat_lint.path_resolver import resolve_package_path
from compat_lint.types import (
    FileError,
    FileResult,
    LinterResult,
    PackageIdentity,
    PackageResult,
)

logger = get_logger(__name__)


def aggregate(
    file_results: Iterable[FileResult],
    allow_list: Iterable[str] | None = None,
    *,
    version_lookup: PackageVersionLookup | None = None,
    fail_fast: bool = False,
) -> LinterResult:
    """Group files with violations by package name and version.

    Files without violations are ignored. Each kept file's path is rewritten
    relative to its package root. Packages are sorted by name, then version.

    Args:
        file_results: Per-file detection results
        allow_list: Package names whose violations are accepted
        version_lookup: Manifest version cache (defaults to the process-wide one)
        fail_fast: Raise attribution errors instead of recording them

    Returns:
        LinterResult; compliant when every package with violations is allowed
        and every file with violations could be attributed to a package

    Raises:
        NotInDependencyTreeError, ManifestReadError, MissingVersionFieldError:
            Only when fail_fast is set
    """
    lookup = version_lookup or get_default_lookup()
    groups: dict[str, PackageResult] = {}
    errors: list[FileError] = []

    for file_result in file_results:
        if not file_result.violations:
            continue

        try:
            resolved = resolve_package_path(file_result.file_path)
        except NotInDependencyTreeError as e:
            if fail_fast:
                raise
            logger.warning(str(e))
            errors.append(
                FileError(
                    file_result.file_path, "resolution", str(e), tuple(file_result.violations)
                )
            )
            continue

        try:
            version = lookup.version_of(resolved.package_json_path)
        except (ManifestReadError, MissingVersionFieldError) as e:
            if fail_fast:
                raise
            logger.error(f"Cannot attribute {file_result.file_path}: {e}")
            errors.append(
                FileError(
                    file_result.file_path, "manifest", str(e), tuple(file_result.violations)
                )
            )
            continue

        identity = PackageIdentity(resolved.package_name, version)
        key = str(identity)
        if key not in groups:
            groups[key] = PackageResult(identity=identity)
        groups[key].files.append(
            FileResult(resolved.relative_file_path, list(file_result.violations))
        )

    packages = sorted(groups.values(), key=lambda p: (p.identity.name, p.identity.version))

    # Violations that cannot be attributed cannot be allowed either
    allowed = set(allow_list or ())
    is_compliant = not errors and all(p.identity.name in allowed for p in packages)

    return LinterResult(packages=packages, is_compliant=is_compliant, errors=errors)
