"""Candidate file collection from a module list or a dependency tree scan."""
import json
from pathlib import Path, PurePath

from compat_lint.config import Config
from compat_lint.parser import SUPPORTED_LANGUAGES, is_supported
from compat_lint.path_resolver import DEPENDENCY_ROOT
from compat_lint.validation import validate_module_list


def load_module_list(list_path: Path) -> list[str]:
    """Load the JSON array of module paths written by the bundler plugin.

    Args:
        list_path: Path to the modules list JSON file

    Returns:
        File paths in file order

    Raises:
        FileNotFoundError: If the list file does not exist
        ValueError: If the file is not a JSON array of strings
    """
    if not list_path.exists():
        raise FileNotFoundError(f"Modules list not found: {list_path}")

    with list_path.open(encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in modules list {list_path}: {e}") from e

    validate_module_list(data)
    return list(data)


def scan_dependency_tree(root_path: Path, config: Config) -> list[str]:
    """Collect every JavaScript/TypeScript file below a node_modules directory.

    Args:
        root_path: Project root or node_modules directory to walk
        config: Configuration with exclude patterns

    Returns:
        Sorted list of matching file paths
    """
    found = set()
    for extension in SUPPORTED_LANGUAGES:
        for file_path in root_path.rglob(f"*{extension}"):
            if file_path.is_file() and DEPENDENCY_ROOT in file_path.parts:
                found.add(str(file_path))

    return filter_candidate_files(sorted(found), config)


def filter_candidate_files(file_paths: list[str], config: Config) -> list[str]:
    """Keep supported dependency files that are not excluded.

    Order is preserved and duplicates are dropped.

    Args:
        file_paths: Candidate paths
        config: Configuration with exclude patterns

    Returns:
        Filtered paths
    """
    seen = set()
    filtered = []

    for file_path in file_paths:
        if file_path in seen:
            continue
        seen.add(file_path)

        normalized = PurePath(file_path.replace("\\", "/"))
        if not is_supported(file_path) or DEPENDENCY_ROOT not in normalized.parts:
            continue
        if is_excluded(normalized, config.exclude):
            continue
        filtered.append(file_path)

    return filtered


def is_excluded(path: PurePath, exclude_patterns: list[str]) -> bool:
    """Check if file is excluded by patterns.

    Supports ``**/name/**``, ``prefix/**`` and ``**/suffix`` forms on top of
    plain PurePath.match() patterns.

    Args:
        path: File path
        exclude_patterns: List of exclude patterns

    Returns:
        True if file should be excluded
    """
    for pattern in exclude_patterns:
        if path.match(pattern):
            return True

        if "**" not in pattern:
            continue

        if pattern.startswith("**/") and pattern.endswith("/**"):
            # "**/dirname/**": any directory component matches
            if pattern[3:-3] in path.parts[:-1]:
                return True
        elif pattern.endswith("/**"):
            prefix = pattern[:-3]
            for parent in path.parents:
                if parent.match(prefix) or str(parent) == prefix:
                    return True
        elif pattern.startswith("**/"):
            if path.match(pattern[3:]):
                return True

    return False
