from __future__ import annotations

from pathlib import Path
from typing import Callable
import sys

import pytest
from pypdf import PdfWriter

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from pdf_pagekit.backends import PyMuPDFEngine  # noqa: E402
from pdf_pagekit.config import RenderSettings  # noqa: E402

PAGE_HEIGHT = 200


def page_width(page_number: int) -> int:
    """Pages of generated PDFs are told apart by their width."""
    return 99 + page_number


PdfFactory = Callable[..., Path]


@pytest.fixture()
def pdf_factory(tmp_path: Path) -> PdfFactory:
    def _create(
        filename: str,
        pages: int = 3,
        *,
        owner_password: str | None = None,
        user_password: str = "",
    ) -> Path:
        path = tmp_path / filename
        writer = PdfWriter()
        for number in range(1, pages + 1):
            writer.add_blank_page(width=page_width(number), height=PAGE_HEIGHT)
        if owner_password is not None:
            writer.encrypt(user_password=user_password, owner_password=owner_password)
        with path.open("wb") as handle:
            writer.write(handle)
        return path

    return _create


@pytest.fixture()
def sample_pdf(pdf_factory: PdfFactory) -> Path:
    return pdf_factory("report.pdf", pages=5)


@pytest.fixture()
def encrypted_pdf(pdf_factory: PdfFactory) -> Path:
    return pdf_factory("locked.pdf", pages=3, owner_password="owner")


@pytest.fixture()
def garbage_pdf(tmp_path: Path) -> Path:
    path = tmp_path / "broken.pdf"
    path.write_bytes(b"%PDF-1.7\nthis is not really a pdf at all\n")
    return path


@pytest.fixture()
def engine() -> PyMuPDFEngine:
    return PyMuPDFEngine()


@pytest.fixture()
def fast_settings() -> RenderSettings:
    return RenderSettings(export_dpi=72)
