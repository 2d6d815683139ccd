"""
Tests for output.pdf_writer

Test Coverage:
- One PDF page per image, in order
- Page size derived from pixel size and DPI
- Empty page list rejected
- Transparent pages flattened onto white
- No temporary files left behind
"""
from pathlib import Path

import fitz
import pytest
from PIL import Image

from collage_toolkit.output.pdf_writer import _px_to_pt, render_pages_to_pdf


def test_px_to_pt():
    assert _px_to_pt(150, 150) == 72.0
    assert _px_to_pt(600, 72) == 600.0


def test_writes_one_page_per_image(tmp_path: Path):
    pages = [
        Image.new("RGB", (600, 300), "white"),
        Image.new("L", (600, 800), 200),
    ]
    out = tmp_path / "doc.pdf"

    render_pages_to_pdf(pages, out, dpi=72)

    with fitz.open(str(out)) as doc:
        assert doc.page_count == 2
        assert (round(doc[0].rect.width), round(doc[0].rect.height)) == (600, 300)
        assert (round(doc[1].rect.width), round(doc[1].rect.height)) == (600, 800)
    assert list(tmp_path.iterdir()) == [out]


def test_page_size_scales_with_dpi(tmp_path: Path):
    out = tmp_path / "doc.pdf"

    render_pages_to_pdf([Image.new("RGB", (300, 150))], out, dpi=150)

    with fitz.open(str(out)) as doc:
        assert (round(doc[0].rect.width), round(doc[0].rect.height)) == (144, 72)


def test_recorded_quality_is_used(tmp_path: Path):
    noisy = Image.effect_noise((400, 400), 80).convert("RGB")
    low, high = tmp_path / "low.pdf", tmp_path / "high.pdf"

    noisy.info["quality"] = 10
    render_pages_to_pdf([noisy], low)
    noisy.info["quality"] = 95
    render_pages_to_pdf([noisy], high)

    assert low.stat().st_size < high.stat().st_size


def test_empty_pages_rejected(tmp_path: Path):
    with pytest.raises(ValueError):
        render_pages_to_pdf([], tmp_path / "doc.pdf")
    assert not (tmp_path / "doc.pdf").exists()


def test_transparent_page_rendered_on_white(tmp_path: Path):
    page = Image.new("RGBA", (144, 144), (0, 0, 0, 0))
    out = tmp_path / "doc.pdf"

    render_pages_to_pdf([page], out, dpi=72)

    with fitz.open(str(out)) as doc:
        pix = doc[0].get_pixmap(alpha=False)
        assert all(channel >= 250 for channel in pix.pixel(pix.width // 2, pix.height // 2))
