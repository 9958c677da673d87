"""pypdf backend implementation for structural page copy."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Sequence

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PdfReadError

from ..exceptions import StructuralCopyError
from ..types import PageBatch
from .base import StructuralBackend, StructuralDocument

LOGGER = logging.getLogger("pdf_pagekit.backends.pypdf")


@dataclass
class PypdfDocument(StructuralDocument):
    reader: PdfReader

    def get_page(self, index: int) -> object:
        return self.reader.pages[index]


class PypdfBackend(StructuralBackend):
    """Backend implementation that uses `pypdf` under the hood.

    Encrypted sources are refused rather than decrypted so that restricted
    documents always go through the rasterized path.
    """

    def load(self, data: bytes) -> PypdfDocument:
        try:
            reader = PdfReader(io.BytesIO(data))
        except PdfReadError as exc:
            raise StructuralCopyError(f"Corrupted or invalid PDF. Error: {exc}") from exc
        except Exception as exc:
            raise StructuralCopyError(f"Unexpected error reading PDF. Error: {exc}") from exc

        if reader.is_encrypted:
            raise StructuralCopyError("PDF is encrypted and cannot be copied structurally.")

        try:
            num_pages = len(reader.pages)
        except Exception as exc:
            raise StructuralCopyError(f"Unable to read the page tree. Error: {exc}") from exc

        LOGGER.debug("Loaded %d page(s) for structural copy", num_pages)
        return PypdfDocument(num_pages=num_pages, reader=reader)

    def copy_pages(self, document: StructuralDocument, indices: Sequence[int]) -> PageBatch:
        try:
            pages = [document.get_page(index) for index in indices]
        except Exception as exc:
            raise StructuralCopyError(f"Unable to copy pages. Error: {exc}") from exc
        return PageBatch(kind="structural", pages=pages)

    def new_writer(self) -> PdfWriter:
        return PdfWriter()

    def write(self, writer: PdfWriter) -> bytes:
        buffer = io.BytesIO()
        try:
            writer.write(buffer)
        except Exception as exc:
            raise StructuralCopyError(f"Unable to serialize PDF. Error: {exc}") from exc
        return buffer.getvalue()
