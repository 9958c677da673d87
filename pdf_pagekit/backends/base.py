"""Backend protocols for parsing, rendering and structural page copy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol, Sequence, Tuple

from ..exceptions import RenderError
from ..types import PageBatch, RasterImage


@dataclass
class ParsedDocument:
    """A renderable, page-addressable document.

    Created by :meth:`RenderEngine.parse` and released exactly once with
    :meth:`release` when no longer needed.
    """

    page_count: int
    engine: "RenderEngine"
    is_encrypted: bool
    released: bool = field(default=False, init=False)

    def check_page(self, page_number: int) -> None:
        if self.released:
            raise RenderError("The document has already been closed.")
        if page_number < 1 or page_number > self.page_count:
            raise RenderError(
                f"Page {page_number} is out of range. PDF has {self.page_count} pages."
            )

    def page_size(self, page_number: int) -> Tuple[float, float]:
        """Return ``(width, height)`` of a page in PDF points."""
        raise NotImplementedError

    def render(self, page_number: int, scale: float) -> RasterImage:
        """Rasterize a 1-based page at *scale* on an opaque white background."""
        raise NotImplementedError

    def release(self) -> None:
        raise NotImplementedError


class RasterPageBuilder(Protocol):
    """Accumulates image-only pages of fixed physical size."""

    def add_page(self, image_data: bytes, width: float, height: float) -> None:
        """Append a page of ``width`` x ``height`` points filled by *image_data*."""

    def finish(self) -> PageBatch:
        """Return the accumulated pages as a ``rasterized`` batch."""

    def close(self) -> None:
        """Discard any pages accumulated so far."""


class RenderEngine(Protocol):
    """Rendering engine created once by the application and shared by callers."""

    def parse(self, data: bytes, password: Optional[str] = None) -> ParsedDocument:
        """Parse *data* into a :class:`ParsedDocument`."""

    def new_page_builder(self) -> RasterPageBuilder:
        """Return an empty builder for rasterized pages."""


@dataclass
class StructuralDocument:
    """A PDF loaded for lossless page copying."""

    num_pages: int

    def get_page(self, index: int) -> object:
        raise NotImplementedError


class StructuralBackend(Protocol):
    """Protocol for structure-preserving PDF reading and writing."""

    def load(self, data: bytes) -> StructuralDocument:
        """Load *data*; raise ``StructuralCopyError`` when it cannot be copied."""

    def copy_pages(self, document: StructuralDocument, indices: Sequence[int]) -> PageBatch:
        """Return the zero-based *indices* as a ``structural`` batch."""

    def new_writer(self) -> object:
        """Return an empty output document."""

    def write(self, writer: object) -> bytes:
        """Serialize *writer* to PDF bytes."""
