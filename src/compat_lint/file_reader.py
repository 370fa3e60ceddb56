"""File reading with size limits."""
from pathlib import Path

from compat_lint.logging_config import get_logger

logger = get_logger(__name__)


def read_source(file_path: str, max_size_bytes: int) -> bytes | None:
    """Read a source file as bytes, skipping oversized files.

    tree-sitter parses raw bytes, so no decoding happens here.

    Args:
        file_path: Path to file
        max_size_bytes: Maximum allowed file size in bytes

    Returns:
        File content, or None if the file exceeds the size limit

    Raises:
        OSError: If the file cannot be read
    """
    path = Path(file_path)

    file_size = path.stat().st_size
    if file_size > max_size_bytes:
        logger.warning(
            f"File {file_path} exceeds size limit "
            f"({file_size / 1024 / 1024:.2f}MB > "
            f"{max_size_bytes / 1024 / 1024:.2f}MB), skipping"
        )
        return None

    return path.read_bytes()
