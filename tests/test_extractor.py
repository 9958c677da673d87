from __future__ import annotations

import io
from pathlib import Path

import pytest
from pypdf import PdfReader

from pdf_pagekit.backends import PyMuPDFEngine, PypdfBackend
from pdf_pagekit.config import RenderSettings
from pdf_pagekit.exceptions import ExtractionError, OperationCancelled, StructuralCopyError
from pdf_pagekit.extractor import extract_pages, generate_output_file_name, normalize_selection

from conftest import PAGE_HEIGHT, page_width


def _widths(data: bytes) -> list[float]:
    reader = PdfReader(io.BytesIO(data))
    return [float(page.mediabox.width) for page in reader.pages]


def test_extract_pages_in_ascending_order(sample_pdf: Path) -> None:
    data = sample_pdf.read_bytes()

    output = extract_pages(data, [5, 2, 2, 4])

    assert _widths(output) == [page_width(2), page_width(4), page_width(5)]


def test_extract_does_not_modify_source(sample_pdf: Path) -> None:
    data = sample_pdf.read_bytes()
    before = bytes(data)

    extract_pages(data, [1, 3])
    second = extract_pages(data, [3, 1])

    assert data == before
    assert _widths(second) == [page_width(1), page_width(3)]


def test_extract_all_pages_round_trip(sample_pdf: Path) -> None:
    data = sample_pdf.read_bytes()
    source = PdfReader(io.BytesIO(data))

    output = PdfReader(io.BytesIO(extract_pages(data, range(1, 6))))

    assert len(output.pages) == len(source.pages) == 5
    for copied, original in zip(output.pages, source.pages):
        assert copied.mediabox == original.mediabox
        assert copied.get_contents() == original.get_contents()


def test_structural_copy_keeps_pages_free_of_images(sample_pdf: Path) -> None:
    output = extract_pages(sample_pdf.read_bytes(), [1])
    page = PdfReader(io.BytesIO(output)).pages[0]
    assert len(page.images) == 0


def test_extract_empty_selection(sample_pdf: Path) -> None:
    with pytest.raises(ExtractionError, match="No pages selected"):
        extract_pages(sample_pdf.read_bytes(), [])


def test_extract_out_of_bounds(sample_pdf: Path) -> None:
    with pytest.raises(ExtractionError, match="out of bounds"):
        extract_pages(sample_pdf.read_bytes(), [2, 9])


def test_encrypted_pdf_falls_back_to_images(
    engine: PyMuPDFEngine, encrypted_pdf: Path, fast_settings: RenderSettings
) -> None:
    data = encrypted_pdf.read_bytes()
    document = engine.parse(data)
    try:
        output = extract_pages(data, [3, 1], document, settings=fast_settings)
    finally:
        document.release()

    reader = PdfReader(io.BytesIO(output))
    assert not reader.is_encrypted
    assert len(reader.pages) == 2
    for page, number in zip(reader.pages, [1, 3]):
        assert float(page.mediabox.width) == pytest.approx(page_width(number), abs=0.01)
        assert float(page.mediabox.height) == pytest.approx(PAGE_HEIGHT, abs=0.01)
        assert len(page.images) == 1


def test_encrypted_pdf_without_document(encrypted_pdf: Path) -> None:
    with pytest.raises(ExtractionError, match="encrypted or restricted"):
        extract_pages(encrypted_pdf.read_bytes(), [1])


def test_structural_write_failure_triggers_fallback(
    monkeypatch: pytest.MonkeyPatch,
    engine: PyMuPDFEngine,
    sample_pdf: Path,
    fast_settings: RenderSettings,
) -> None:
    real_write = PypdfBackend.write
    calls: list[int] = []

    def write_fails_once(self, writer):
        calls.append(1)
        if len(calls) == 1:
            raise StructuralCopyError("disk full")
        return real_write(self, writer)

    monkeypatch.setattr(PypdfBackend, "write", write_fails_once)

    data = sample_pdf.read_bytes()
    document = engine.parse(data)
    try:
        output = extract_pages(data, [2], document, settings=fast_settings)
    finally:
        document.release()

    assert len(calls) == 2
    page = PdfReader(io.BytesIO(output)).pages[0]
    assert len(page.images) == 1


def test_extract_cancelled(engine: PyMuPDFEngine, encrypted_pdf: Path, fast_settings: RenderSettings) -> None:
    data = encrypted_pdf.read_bytes()
    document = engine.parse(data)
    polls: list[int] = []

    def should_cancel() -> bool:
        polls.append(1)
        return len(polls) > 2

    try:
        with pytest.raises(OperationCancelled):
            extract_pages(data, [1, 2, 3], document, settings=fast_settings, should_cancel=should_cancel)
    finally:
        document.release()


def test_normalize_selection() -> None:
    assert normalize_selection([5, 2, 2, 8]) == [2, 5, 8]


@pytest.mark.parametrize(
    ("original", "expected"),
    [
        ("report.pdf", "report_selected.pdf"),
        ("Report.PDF", "Report_selected.pdf"),
        ("/home/user/scan.pdf", "scan_selected.pdf"),
        ("notes", "notes_selected.pdf"),
    ],
)
def test_generate_output_file_name(original: str, expected: str) -> None:
    assert generate_output_file_name(original) == expected
