from __future__ import annotations

import io
from pathlib import Path

import pytest

from pdf_pagekit.exceptions import InvalidUploadError, ReadError
from pdf_pagekit.loader import copy_bytes, has_pdf_signature, read_as_bytes, validate_upload
from pdf_pagekit.utils import mask_file_name, strip_pdf_suffix


def test_read_as_bytes_from_path(sample_pdf: Path) -> None:
    data = read_as_bytes(sample_pdf)
    assert data == sample_pdf.read_bytes()
    assert has_pdf_signature(data)


def test_read_as_bytes_from_file_object() -> None:
    stream = io.BytesIO(b"%PDF-1.4 body")
    stream.name = "/uploads/incoming/file.pdf"
    assert read_as_bytes(stream) == b"%PDF-1.4 body"


def test_read_missing_file_reports_base_name_only(tmp_path: Path) -> None:
    with pytest.raises(ReadError) as excinfo:
        read_as_bytes(tmp_path / "nested" / "missing.pdf")
    assert "missing.pdf" in excinfo.value.message
    assert str(tmp_path) not in excinfo.value.message


def test_read_directory_fails(tmp_path: Path) -> None:
    with pytest.raises(ReadError):
        read_as_bytes(tmp_path)


def test_read_text_mode_file_fails() -> None:
    with pytest.raises(ReadError):
        read_as_bytes(io.StringIO("%PDF"))


def test_copy_bytes_is_independent() -> None:
    original = b"%PDF-1.4 content"
    copy = copy_bytes(original)
    assert copy == original
    assert copy is not original


@pytest.mark.parametrize(
    ("name", "mime_type"),
    [("scan.PDF", None), ("upload", "application/pdf"), ("upload.bin", "application/pdf; charset=binary")],
)
def test_validate_upload_accepts_pdfs(name: str, mime_type: str | None) -> None:
    validate_upload(name, b"%PDF-1.7 ...", mime_type)


def test_validate_upload_rejects_other_extensions() -> None:
    with pytest.raises(InvalidUploadError, match="Not a PDF file: notes.txt"):
        validate_upload("notes.txt", b"%PDF-1.7")


def test_validate_upload_rejects_missing_signature() -> None:
    with pytest.raises(InvalidUploadError, match="does not contain PDF data"):
        validate_upload("fake.pdf", b"PK\x03\x04 zip")


def test_mask_file_name() -> None:
    assert mask_file_name("document.pdf") == "d***.pdf"
    assert mask_file_name("a.pdf") == "***.pdf"
    assert mask_file_name("") == "***"


def test_strip_pdf_suffix_is_case_insensitive() -> None:
    assert strip_pdf_suffix("Report.PDF") == "Report"
    assert strip_pdf_suffix("archive.pdf.pdf") == "archive.pdf"
