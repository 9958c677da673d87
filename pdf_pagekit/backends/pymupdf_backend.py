"""PyMuPDF backend implementation for parsing and rendering pages."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

import fitz  # PyMuPDF
from PIL import Image
from pypdf import PdfReader

from ..exceptions import ParseError, RenderError
from ..types import PageBatch, RasterImage
from .base import ParsedDocument, RasterPageBuilder, RenderEngine

LOGGER = logging.getLogger("pdf_pagekit.backends.pymupdf")


@dataclass
class PyMuPDFDocument(ParsedDocument):
    handle: fitz.Document = field(repr=False)

    def page_size(self, page_number: int) -> Tuple[float, float]:
        self.check_page(page_number)
        try:
            rect = self.handle.load_page(page_number - 1).rect
        except Exception as exc:
            raise RenderError(f"Unable to read page {page_number}.") from exc
        return float(rect.width), float(rect.height)

    def render(self, page_number: int, scale: float) -> RasterImage:
        self.check_page(page_number)
        if scale <= 0:
            raise RenderError(f"Render scale must be positive, got {scale}.")

        try:
            page = self.handle.load_page(page_number - 1)
            # alpha=False fills the pixmap with white before drawing.
            pixmap = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        except Exception as exc:
            raise RenderError(f"Failed to render page {page_number}.") from exc

        try:
            image = Image.frombytes("RGB", (pixmap.width, pixmap.height), pixmap.samples)
        except Exception as exc:
            raise RenderError(f"Failed to convert page {page_number} to an image.") from exc
        finally:
            del pixmap

        LOGGER.debug(
            "Rendered page %d at scale %.3f (%dx%d px)",
            page_number,
            scale,
            image.width,
            image.height,
        )
        return RasterImage(image=image, width=image.width, height=image.height, scale=scale)

    def release(self) -> None:
        if self.released:
            return
        self.released = True
        self.handle.close()
        LOGGER.debug("Released document with %d page(s)", self.page_count)


class PyMuPDFPageBuilder(RasterPageBuilder):
    """Builds image-only pages into a scratch PyMuPDF document."""

    def __init__(self) -> None:
        self._document = fitz.open()

    def add_page(self, image_data: bytes, width: float, height: float) -> None:
        page = self._document.new_page(width=width, height=height)
        page.insert_image(page.rect, stream=image_data, keep_proportion=False)

    def finish(self) -> PageBatch:
        try:
            data = self._document.tobytes(garbage=3, deflate=True)
        finally:
            self._document.close()
        reader = PdfReader(io.BytesIO(data))
        return PageBatch(kind="rasterized", pages=list(reader.pages))

    def close(self) -> None:
        if not self._document.is_closed:
            self._document.close()


class PyMuPDFEngine(RenderEngine):
    """Rendering engine backed by PyMuPDF.

    Construct one instance at application start-up and pass it to every
    component that parses or renders; it holds no per-document state.
    """

    def parse(self, data: bytes, password: Optional[str] = None) -> PyMuPDFDocument:
        try:
            handle = fitz.open(stream=data, filetype="pdf")
        except Exception as exc:
            raise ParseError("Corrupted or invalid PDF file.") from exc

        if handle.needs_pass:
            if not password or not handle.authenticate(password):
                handle.close()
                raise ParseError("PDF is password protected. Supply the password to open it.")

        page_count = handle.page_count
        if page_count == 0 and handle.is_repaired:
            handle.close()
            raise ParseError("Corrupted or invalid PDF file.")

        is_encrypted = bool(handle.is_encrypted or (handle.metadata or {}).get("encryption"))
        LOGGER.debug("Parsed PDF with %d page(s), encrypted=%s", page_count, is_encrypted)
        return PyMuPDFDocument(
            page_count=page_count,
            engine=self,
            is_encrypted=is_encrypted,
            handle=handle,
        )

    def new_page_builder(self) -> PyMuPDFPageBuilder:
        return PyMuPDFPageBuilder()
