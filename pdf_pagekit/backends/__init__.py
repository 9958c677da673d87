"""Backend abstractions for PDF Pagekit."""

from .base import (
    ParsedDocument,
    RasterPageBuilder,
    RenderEngine,
    StructuralBackend,
    StructuralDocument,
)
from .pymupdf_backend import PyMuPDFDocument, PyMuPDFEngine
from .pypdf_backend import PypdfBackend

__all__ = [
    "ParsedDocument",
    "RasterPageBuilder",
    "RenderEngine",
    "StructuralBackend",
    "StructuralDocument",
    "PyMuPDFDocument",
    "PyMuPDFEngine",
    "PypdfBackend",
]
