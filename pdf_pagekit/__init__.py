"""
PDF Pagekit - extract pages from a PDF or merge several PDFs into one.

Pages are copied structurally whenever possible, which keeps text and vector
content intact. Encrypted or restricted PDFs that cannot be copied that way
are rebuilt from 300 DPI page renders at their original page size.

Quick Start:
    >>> from pdf_pagekit import PyMuPDFEngine, DocumentSession
    >>> engine = PyMuPDFEngine()
    >>> with DocumentSession(engine) as session:
    ...     gallery = session.load_file('report.pdf')
    ...     session.selection.toggle(2)
    ...     artifact = session.extract()

Main Classes:
    - PyMuPDFEngine: Rendering engine, create once and share
    - DocumentSession: One opened document with thumbnails and selection
    - MergeQueue: Ordered list of PDFs to merge
    - PageSelection: Click and shift-click page selection

Functions:
    - extract_pages / merge_pdfs: The two document operations
    - generate_thumbnails / render_preview: Page gallery rendering
    - deliver: Save a produced PDF for the user

For CLI usage, use the 'pdf-pagekit' command after installation.
"""

from pdf_pagekit.backends import PyMuPDFEngine, PypdfBackend, ParsedDocument
from pdf_pagekit.config import DEFAULT_SETTINGS, DeliverySettings, RenderSettings
from pdf_pagekit.delivery import deliver
from pdf_pagekit.exceptions import (
    PagekitError,
    ReadError,
    InvalidUploadError,
    ParseError,
    RenderError,
    ExtractionError,
    MergeError,
    DeliveryError,
    DeliveryCancelled,
    OperationCancelled,
    InvalidRangeError,
    PageOutOfBoundsError,
)
from pdf_pagekit.extractor import extract_pages, generate_output_file_name
from pdf_pagekit.loader import copy_bytes, read_as_bytes, validate_upload
from pdf_pagekit.merger import (
    MergeQueue,
    generate_merged_file_name,
    get_total_page_count,
    merge_pdfs,
)
from pdf_pagekit.selection import PageSelection, parse_page_spec
from pdf_pagekit.session import DocumentSession
from pdf_pagekit.thumbnails import PreviewCache, generate_thumbnails, render_preview
from pdf_pagekit.types import MergeItem, OutputArtifact, PageDescriptor

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Engine and backends
    "PyMuPDFEngine",
    "PypdfBackend",
    "ParsedDocument",
    # Settings
    "RenderSettings",
    "DeliverySettings",
    "DEFAULT_SETTINGS",
    # Operations
    "extract_pages",
    "merge_pdfs",
    "generate_thumbnails",
    "render_preview",
    "deliver",
    "read_as_bytes",
    "copy_bytes",
    "validate_upload",
    "generate_output_file_name",
    "generate_merged_file_name",
    "get_total_page_count",
    "parse_page_spec",
    # Stateful helpers
    "DocumentSession",
    "MergeQueue",
    "PageSelection",
    "PreviewCache",
    # Data types
    "MergeItem",
    "OutputArtifact",
    "PageDescriptor",
    # Exceptions
    "PagekitError",
    "ReadError",
    "InvalidUploadError",
    "ParseError",
    "RenderError",
    "ExtractionError",
    "MergeError",
    "DeliveryError",
    "DeliveryCancelled",
    "OperationCancelled",
    "InvalidRangeError",
    "PageOutOfBoundsError",
    # Version info
    "__version__",
]
