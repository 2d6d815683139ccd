import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import fitz
import pytest
from PIL import Image

# Add src to sys.path so we can import collage_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from collage_toolkit.engine import resources  # noqa: E402
from collage_toolkit.images.ops import ImageOps  # noqa: E402


# ─────────────────────────────────────────────────────────────────────────────
# In-memory image backend
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(eq=False)
class FakeImage:
    """Stand-in for a decoded image: dimensions plus an operation log."""

    width: int
    height: int
    source: str = ""
    quality: Optional[int] = None
    closed: bool = False
    history: List[str] = field(default_factory=list)

    def derive(self, op: str, width: Optional[int] = None, height: Optional[int] = None) -> "FakeImage":
        return FakeImage(
            width=self.width if width is None else width,
            height=self.height if height is None else height,
            source=self.source,
            quality=self.quality,
            history=self.history + [op],
        )


class FakeImageOps(ImageOps):
    """ImageOps that never decodes pixels."""

    def __init__(self, sizes: Optional[Dict[str, Tuple[int, int]]] = None) -> None:
        self.sizes = dict(sizes or {})
        self.created: List[FakeImage] = []
        self.saved: List[Tuple[FakeImage, Path, str, int]] = []
        self.fail_on: set = set()

    def _new(self, image: FakeImage) -> FakeImage:
        self.created.append(image)
        return image

    def load(self, path):
        name = Path(path).name
        if name in self.fail_on:
            from collage_toolkit.errors import ProcessingError
            raise ProcessingError(f"corrupt: {name}")
        width, height = self.sizes[name]
        return self._new(FakeImage(width, height, source=name, history=["load"]))

    def rotate(self, image, degrees):
        return self._new(image.derive(f"rotate{int(degrees)}", image.height, image.width))

    def resize(self, image, width, height):
        return self._new(image.derive(f"resize{width}x{height}", width, height))

    def enhance(self, image):
        return self._new(image.derive("enhance"))

    def auto_level(self, image):
        return self._new(image.derive("auto_level"))

    def auto_gamma(self, image):
        return self._new(image.derive("auto_gamma"))

    def strip(self, image):
        image.history.append("strip")
        return image

    def set_quality(self, image, quality):
        image.quality = quality
        return image

    def montage(self, images, plan):
        width, height = plan.canvas_size
        return self._new(FakeImage(width, height, source="montage", history=["montage"]))

    def save(self, image, path, mime_type, quality):
        Path(path).write_bytes(b"fake-" + mime_type.encode())
        self.saved.append((image, Path(path), mime_type, quality))

    def close(self, image):
        image.closed = True


@pytest.fixture
def fake_ops():
    """Factory for FakeImageOps keyed by file name."""
    def _make(sizes=None):
        return FakeImageOps(sizes)
    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Real files
# ─────────────────────────────────────────────────────────────────────────────

@pytest.fixture
def make_jpeg(tmp_path: Path):
    """Write a solid-colour JPEG and return its path."""
    def _make(name: str, width: int, height: int, color=(120, 160, 200)) -> Path:
        path = tmp_path / name
        Image.new("RGB", (width, height), color=color).save(path, format="JPEG", quality=90)
        return path
    return _make


@pytest.fixture
def make_pdf(tmp_path: Path):
    """Write a PDF with the given page sizes (in points) and return its path."""
    def _make(name: str, page_sizes) -> Path:
        path = tmp_path / name
        doc = fitz.open()
        for i, (width, height) in enumerate(page_sizes, start=1):
            page = doc.new_page(width=width, height=height)
            page.insert_text((20, 40), f"Page {i}", fontsize=18)
        doc.save(str(path))
        doc.close()
        return path
    return _make


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture(autouse=True)
def reset_engine_memory_limit(monkeypatch):
    """Keep the process-wide decode limit from leaking between tests."""
    monkeypatch.setattr(resources, "_applied_percentage", None)
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", Image.MAX_IMAGE_PIXELS)
    yield
