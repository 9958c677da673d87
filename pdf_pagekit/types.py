"""
Type definitions and dataclasses for PDF Pagekit.

This module defines data structures used throughout the library.
"""

from __future__ import annotations

import base64
import uuid
from dataclasses import dataclass, field
from typing import Any, List, Literal

from PIL import Image

Strategy = Literal["structural", "rasterized"]


@dataclass
class RasterImage:
    """
    A rendered page held in memory.

    Attributes:
        image: RGB Pillow image with an opaque white background
        width: Width in pixels
        height: Height in pixels
        scale: Scale relative to the page's 72-points-per-inch space
    """
    image: Image.Image
    width: int
    height: int
    scale: float

    def close(self) -> None:
        """Release the pixel buffer. Safe to call more than once."""
        self.image.close()

    def __enter__(self) -> "RasterImage":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass
class PageDescriptor:
    """
    One entry of a document's page gallery.

    Attributes:
        page_number: 1-based page number
        thumbnail: Encoded thumbnail image
        width: Native page width in PDF points
        height: Native page height in PDF points
        mime_type: MIME type of ``thumbnail``
    """
    page_number: int
    thumbnail: bytes
    width: float
    height: float
    mime_type: str = "image/jpeg"

    @property
    def data_url(self) -> str:
        encoded = base64.b64encode(self.thumbnail).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def _new_item_id() -> str:
    return uuid.uuid4().hex


@dataclass
class MergeItem:
    """
    One uploaded PDF waiting in a merge queue.

    ``page_count`` is captured when the file is added and is not re-validated.
    ``data`` is this item's own copy of the source bytes.
    """
    display_name: str
    page_count: int
    data: bytes = field(repr=False)
    id: str = field(default_factory=_new_item_id)


@dataclass
class OutputArtifact:
    """A freshly produced PDF and the file name suggested for it."""
    data: bytes = field(repr=False)
    file_name: str

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass
class PageBatch:
    """Pages produced by one extraction strategy.

    Attributes:
        kind: ``"structural"`` for copied page objects, ``"rasterized"`` for
            pages rebuilt from rendered images
        pages: pypdf page objects ready to be added to a writer
    """
    kind: Strategy
    pages: List[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.pages)
