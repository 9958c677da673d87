from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from pdf_pagekit.backends import PyMuPDFEngine
from pdf_pagekit.config import RenderSettings, scale_for_dpi
from pdf_pagekit.exceptions import ParseError, RenderError
from pdf_pagekit.renderer import encode_raster, render_page_to_bytes
from pdf_pagekit.thumbnails import PreviewCache, generate_thumbnails, render_preview

from conftest import PAGE_HEIGHT, PdfFactory, page_width


def test_parse_reports_page_count(engine: PyMuPDFEngine, sample_pdf: Path) -> None:
    document = engine.parse(sample_pdf.read_bytes())
    try:
        assert document.page_count == 5
        assert not document.is_encrypted
        assert document.page_size(2) == pytest.approx((page_width(2), PAGE_HEIGHT))
    finally:
        document.release()


def test_parse_flags_encrypted_pdf(engine: PyMuPDFEngine, encrypted_pdf: Path) -> None:
    document = engine.parse(encrypted_pdf.read_bytes())
    try:
        assert document.is_encrypted
        assert document.page_count == 3
    finally:
        document.release()


def test_parse_rejects_garbage(engine: PyMuPDFEngine, garbage_pdf: Path) -> None:
    with pytest.raises(ParseError):
        engine.parse(garbage_pdf.read_bytes())


def test_parse_requires_user_password(engine: PyMuPDFEngine, pdf_factory: PdfFactory) -> None:
    path = pdf_factory("secret.pdf", pages=2, owner_password="owner", user_password="open-sesame")
    data = path.read_bytes()

    with pytest.raises(ParseError, match="password"):
        engine.parse(data)
    with pytest.raises(ParseError):
        engine.parse(data, password="wrong")

    document = engine.parse(data, password="open-sesame")
    assert document.page_count == 2
    document.release()


def test_render_uses_scale_and_white_background(engine: PyMuPDFEngine, sample_pdf: Path) -> None:
    document = engine.parse(sample_pdf.read_bytes())
    try:
        with document.render(1, 2.0) as raster:
            assert raster.width == round(page_width(1) * 2.0)
            assert raster.height == PAGE_HEIGHT * 2
            assert raster.image.mode == "RGB"
            assert raster.image.getpixel((0, 0)) == (255, 255, 255)
    finally:
        document.release()


def test_render_out_of_range_page(engine: PyMuPDFEngine, sample_pdf: Path) -> None:
    document = engine.parse(sample_pdf.read_bytes())
    try:
        with pytest.raises(RenderError, match="out of range"):
            document.render(6, 1.0)
        with pytest.raises(RenderError):
            document.render(0, 1.0)
    finally:
        document.release()


def test_render_after_release_fails(engine: PyMuPDFEngine, sample_pdf: Path) -> None:
    document = engine.parse(sample_pdf.read_bytes())
    document.release()
    document.release()
    assert document.released
    with pytest.raises(RenderError, match="closed"):
        document.render(1, 1.0)


def test_encode_raster_formats(engine: PyMuPDFEngine, sample_pdf: Path) -> None:
    document = engine.parse(sample_pdf.read_bytes())
    try:
        with document.render(1, 1.0) as raster:
            png = encode_raster(raster, "PNG")
            jpeg = encode_raster(raster, "JPEG", quality=80)
    finally:
        document.release()

    assert png.startswith(b"\x89PNG")
    assert jpeg.startswith(b"\xff\xd8")


def test_render_page_to_bytes_returns_pixel_size(engine: PyMuPDFEngine, sample_pdf: Path) -> None:
    document = engine.parse(sample_pdf.read_bytes())
    try:
        data, width, height = render_page_to_bytes(document, 3, 1.0, "PNG")
    finally:
        document.release()

    assert (width, height) == (page_width(3), PAGE_HEIGHT)
    assert Image.open(io.BytesIO(data)).size == (width, height)


def test_generate_thumbnails_in_page_order(engine: PyMuPDFEngine, sample_pdf: Path) -> None:
    document = engine.parse(sample_pdf.read_bytes())
    progress: list[tuple[int, int]] = []
    try:
        pages = generate_thumbnails(document, lambda current, total: progress.append((current, total)))
    finally:
        document.release()

    assert [page.page_number for page in pages] == [1, 2, 3, 4, 5]
    assert progress == [(1, 5), (2, 5), (3, 5), (4, 5), (5, 5)]
    assert pages[1].width == pytest.approx(page_width(2))
    assert pages[1].height == pytest.approx(PAGE_HEIGHT)
    assert pages[0].data_url.startswith("data:image/jpeg;base64,")

    thumbnail = Image.open(io.BytesIO(pages[0].thumbnail))
    assert thumbnail.format == "JPEG"
    width, height = thumbnail.size
    assert abs(width - page_width(1) * 0.3) <= 1
    assert abs(height - PAGE_HEIGHT * 0.3) <= 1


def test_preview_cache_renders_once(
    monkeypatch: pytest.MonkeyPatch, engine: PyMuPDFEngine, sample_pdf: Path
) -> None:
    document = engine.parse(sample_pdf.read_bytes())
    calls: list[int] = []

    def counting_preview(doc, page_number, *, settings=None):
        calls.append(page_number)
        return render_preview(doc, page_number, settings=settings)

    monkeypatch.setattr("pdf_pagekit.thumbnails.render_preview", counting_preview)
    cache = PreviewCache(document, RenderSettings(preview_scale=1.0))
    try:
        first = cache.get(2)
        second = cache.get(2)
    finally:
        document.release()

    assert first == second
    assert calls == [2]
    assert 2 in cache
    cache.clear()
    assert len(cache) == 0


def test_render_settings_validation() -> None:
    assert RenderSettings().export_scale == pytest.approx(300 / 72)
    assert scale_for_dpi(144) == pytest.approx(2.0)
    with pytest.raises(ValueError):
        RenderSettings(export_dpi=0)
    with pytest.raises(ValueError):
        RenderSettings(thumbnail_quality=0)


def test_parse_accepts_pdf_without_pages(engine: PyMuPDFEngine, pdf_factory: PdfFactory) -> None:
    document = engine.parse(pdf_factory("empty.pdf", pages=0).read_bytes())
    try:
        assert document.page_count == 0
        assert generate_thumbnails(document) == []
        with pytest.raises(RenderError):
            document.render(1, 1.0)
    finally:
        document.release()
