"""Rebuild pages from high resolution renders when structural copy is blocked.

Each page is rendered at the export scale, PNG encoded and placed on a new
page with the source page's native size, so the output keeps the original
dimensions while its content becomes an image.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from .backends.base import ParsedDocument
from .config import DEFAULT_SETTINGS, RenderSettings
from .renderer import encode_raster
from .types import PageBatch
from .utils import CancelCheck, ensure_not_cancelled

LOGGER = logging.getLogger("pdf_pagekit.rasterize")


def rasterize_pages(
    document: ParsedDocument,
    page_numbers: Iterable[int],
    *,
    settings: Optional[RenderSettings] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> PageBatch:
    """Return *page_numbers* (1-based, in the given order) as rasterized pages.

    Raises:
        RenderError: If a page cannot be rendered or encoded.
    """

    page_numbers = list(page_numbers)
    if not page_numbers:
        return PageBatch(kind="rasterized")

    settings = settings or DEFAULT_SETTINGS
    scale = settings.export_scale
    builder = document.engine.new_page_builder()

    try:
        for page_number in page_numbers:
            ensure_not_cancelled(should_cancel)
            width, height = document.page_size(page_number)
            with document.render(page_number, scale) as raster:
                image_data = encode_raster(raster, "PNG")
            builder.add_page(image_data, width, height)
            del image_data
            LOGGER.debug(
                "Rasterized page %d at %d DPI onto %.1fx%.1f pt",
                page_number,
                settings.export_dpi,
                width,
                height,
            )
        return builder.finish()
    finally:
        builder.close()


__all__ = ["rasterize_pages"]
