"""Input validation functions."""
from pathlib import Path
from typing import Any


def validate_scan_root(scan_root: Path) -> None:
    """Validate the directory to scan exists.

    Args:
        scan_root: Path to validate

    Raises:
        ValueError: If path does not exist or is not a directory
    """
    if not scan_root.exists():
        raise ValueError(f"Scan root does not exist: {scan_root}")

    if not scan_root.is_dir():
        raise ValueError(f"Scan root is not a directory: {scan_root}")


def validate_module_list(data: Any) -> None:
    """Validate a decoded modules list.

    Args:
        data: Decoded JSON content

    Raises:
        ValueError: If data is not a list of non-empty strings
    """
    if not isinstance(data, list):
        raise ValueError(f"Modules list must be a JSON array, got {type(data).__name__}")

    for index, entry in enumerate(data):
        if not isinstance(entry, str) or not entry:
            raise ValueError(f"Modules list entry {index} is not a file path: {entry!r}")


def validate_allow_list(allow_list: list[str]) -> None:
    """Validate allowed package names.

    Raises:
        ValueError: If a name is empty or a malformed scoped name
    """
    for name in allow_list:
        if not name.strip():
            raise ValueError("Allowed package names cannot be empty")
        if name.startswith("@") and name.count("/") != 1:
            raise ValueError(f"Scoped package name must look like @scope/name: {name}")
