"""
Tests for common.path_utils and common.filesystem

Test Coverage:
- Extension classification (case-insensitive)
- Resized copy naming
- FileSystemAdapter unique names and reads
"""
import pytest

from collage_toolkit.common import FileSystemAdapter
from collage_toolkit.common.path_utils import (
    file_extension,
    is_excluded,
    is_pdf,
    is_xml,
    resized_filename,
)
from collage_toolkit.errors import ResourceError


def test_file_extension_lowercases():
    assert file_extension("/a/B.JPG") == ".jpg"
    assert file_extension("noext") == ""


def test_excluded_extensions():
    assert is_excluded("meta.XML")
    assert is_excluded("form.pdf")
    assert not is_excluded("photo.jpeg")
    assert is_pdf("x.Pdf")
    assert is_xml("x.xml")


def test_resized_filename():
    assert resized_filename("/uploads/car.jpg") == "car_resized.jpg"


def test_unique_filename_counts_up(tmp_path):
    fs = FileSystemAdapter()
    (tmp_path / "car.jpg").touch()
    (tmp_path / "car(1).jpg").touch()

    assert fs.generate_unique_filename(tmp_path, "car.jpg") == "car(2).jpg"
    assert fs.generate_unique_filename(tmp_path, "bus.jpg") == "bus.jpg"


def test_read_all_bytes(tmp_path):
    fs = FileSystemAdapter()
    (tmp_path / "a.bin").write_bytes(b"abc")

    assert fs.read_all_bytes(tmp_path / "a.bin") == b"abc"
    with pytest.raises(ResourceError):
        fs.read_all_bytes(tmp_path / "missing.bin")
