"""compat-lint: find restricted library APIs in a dependency tree."""

from compat_lint.__version__ import __version__
from compat_lint.aggregator import aggregate
from compat_lint.config import Config, RestrictedImport, get_default_config, load_config
from compat_lint.detector import analyze_source, detect
from compat_lint.orchestrator import run_linter, run_linter_from_module_list
from compat_lint.package_version import get_package_version
from compat_lint.path_resolver import resolve_package_path
from compat_lint.restrictions import Restriction, RestrictionTable
from compat_lint.types import (
    FileResult,
    LinterResult,
    PackageIdentity,
    PackageResult,
    Violation,
    ViolationKind,
)

__all__ = [
    "__version__",
    "Config",
    "RestrictedImport",
    "load_config",
    "get_default_config",
    "Restriction",
    "RestrictionTable",
    "detect",
    "analyze_source",
    "resolve_package_path",
    "get_package_version",
    "aggregate",
    "run_linter",
    "run_linter_from_module_list",
    "Violation",
    "ViolationKind",
    "FileResult",
    "PackageIdentity",
    "PackageResult",
    "LinterResult",
]
