from pathlib import Path
from unittest.mock import patch

import pytest

from compat_lint.file_utils import atomic_write_text


def test_atomic_write_text_success(tmp_path):
    """Test successful atomic write."""
    target = tmp_path / "report.json"

    atomic_write_text('{"isCompliant": true}', target)

    assert target.read_text() == '{"isCompliant": true}\n'
    assert not (tmp_path / "report.json.tmp").exists()


def test_atomic_write_text_keeps_trailing_newline(tmp_path):
    """Test text that already ends in a newline is written as is."""
    target = tmp_path / "report.txt"

    atomic_write_text("done\n", target)

    assert target.read_text() == "done\n"


def test_atomic_write_text_no_corruption_on_failure(tmp_path):
    """Test that existing file is not corrupted on write failure."""
    target = tmp_path / "report.json"
    target.write_text("original")

    with patch.object(Path, "replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError, match="disk full"):
            atomic_write_text("new", target)

    assert target.read_text() == "original"
    assert not (tmp_path / "report.json.tmp").exists()
