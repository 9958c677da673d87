"""Page extraction built on a structural copy with a rasterized fallback."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

from .backends.base import ParsedDocument, StructuralBackend
from .backends.pypdf_backend import PypdfBackend
from .config import RenderSettings
from .exceptions import (
    ExtractionError,
    OperationCancelled,
    PagekitError,
    StructuralCopyError,
)
from .loader import copy_bytes
from .rasterize import rasterize_pages
from .types import PageBatch
from .utils import CancelCheck, display_name, ensure_not_cancelled, strip_pdf_suffix

LOGGER = logging.getLogger("pdf_pagekit.extractor")

EXTRACT_SUFFIX = "_selected"


def normalize_selection(selected_pages: Iterable[int]) -> List[int]:
    """Return the distinct selected page numbers in ascending order.

    The order in which pages were picked is irrelevant to the output.
    """

    return sorted(set(int(page) for page in selected_pages))


def _check_bounds(pages: Sequence[int], total_pages: int) -> None:
    for page_number in pages:
        if page_number < 1 or page_number > total_pages:
            raise ExtractionError(
                f"Page {page_number} is out of bounds. PDF has {total_pages} pages."
            )


def write_batches(backend: StructuralBackend, batches: Iterable[PageBatch]) -> bytes:
    """Add every page of *batches* to a fresh writer and serialize it."""

    writer = backend.new_writer()
    for batch in batches:
        for page in batch.pages:
            writer.add_page(page)  # type: ignore[attr-defined]
    return backend.write(writer)


def _extract_structural(
    backend: StructuralBackend, data: bytes, pages: Sequence[int]
) -> bytes:
    source = backend.load(data)
    _check_bounds(pages, source.num_pages)
    batch = backend.copy_pages(source, [page - 1 for page in pages])
    try:
        return write_batches(backend, [batch])
    except StructuralCopyError:
        raise
    except Exception as exc:
        raise StructuralCopyError(f"Unable to copy pages. Error: {exc}") from exc


def _extract_rasterized(
    backend: StructuralBackend,
    document: ParsedDocument,
    pages: Sequence[int],
    settings: Optional[RenderSettings],
    should_cancel: Optional[CancelCheck],
) -> bytes:
    _check_bounds(pages, document.page_count)
    try:
        batch = rasterize_pages(
            document, pages, settings=settings, should_cancel=should_cancel
        )
        return write_batches(backend, [batch])
    except (ExtractionError, OperationCancelled):
        raise
    except PagekitError as exc:
        raise ExtractionError(f"Failed to convert pages to images: {exc.message}") from exc
    except Exception as exc:
        raise ExtractionError("Failed to convert pages to images.") from exc


def extract_pages(
    data: bytes,
    selected_pages: Iterable[int],
    document: Optional[ParsedDocument] = None,
    *,
    settings: Optional[RenderSettings] = None,
    backend: Optional[StructuralBackend] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> bytes:
    """Return a new PDF holding only *selected_pages*, in ascending order.

    Args:
        data: The source PDF bytes. Not modified; a private copy is parsed.
        selected_pages: 1-based page numbers in any order, duplicates allowed.
        document: Parsed handle for the same source. Only used when the
            structural copy fails (typically an encrypted PDF), and required
            in that case.
        settings: Render settings for the rasterized path.
        backend: Structural backend; defaults to :class:`PypdfBackend`.
        should_cancel: Polled between pages; returning ``True`` stops the run
            with :class:`OperationCancelled`.

    Raises:
        ExtractionError: When the selection is empty or out of range, or both
            extraction paths fail.
    """

    pages = normalize_selection(selected_pages)
    if not pages:
        raise ExtractionError("No pages selected.")

    backend = backend or PypdfBackend()
    ensure_not_cancelled(should_cancel)

    try:
        output = _extract_structural(backend, copy_bytes(data), pages)
    except StructuralCopyError as exc:
        LOGGER.warning("Structural extraction failed, rasterizing pages instead: %s", exc.message)
    else:
        LOGGER.info("Extracted %d page(s) structurally", len(pages))
        return output

    if document is None:
        raise ExtractionError(
            "This PDF is encrypted or restricted. Open it for rendering to extract its pages."
        )

    output = _extract_rasterized(backend, document, pages, settings, should_cancel)
    LOGGER.info("Extracted %d page(s) as images", len(pages))
    return output


def generate_output_file_name(original_file_name: str) -> str:
    """``report.pdf`` becomes ``report_selected.pdf``."""

    base_name = strip_pdf_suffix(display_name(original_file_name))
    return f"{base_name}{EXTRACT_SUFFIX}.pdf"


__all__ = [
    "EXTRACT_SUFFIX",
    "extract_pages",
    "generate_output_file_name",
    "normalize_selection",
    "write_batches",
]
