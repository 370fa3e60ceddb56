"""File operation utilities."""
from pathlib import Path


def atomic_write_text(text: str, target_path: Path) -> None:
    """Write text atomically so readers never see a partial report.

    Writes to a temporary file next to the target, then replaces the target.

    Args:
        text: Content to write
        target_path: Target file path

    Raises:
        OSError: If write fails
    """
    tmp_path = target_path.with_suffix(target_path.suffix + ".tmp")

    try:
        with tmp_path.open("w", encoding="utf-8") as f:
            f.write(text)
            if not text.endswith("\n"):
                f.write("\n")

        tmp_path.replace(target_path)
    except Exception:
        if tmp_path.exists():
            tmp_path.unlink()
        raise
