"""Thumbnail gallery generation and cached single-page previews."""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from .backends.base import ParsedDocument
from .config import DEFAULT_SETTINGS, RenderSettings
from .renderer import render_page_to_bytes
from .types import PageDescriptor

LOGGER = logging.getLogger("pdf_pagekit.thumbnails")

ProgressCallback = Callable[[int, int], None]


def generate_thumbnails(
    document: ParsedDocument,
    on_progress: Optional[ProgressCallback] = None,
    *,
    settings: Optional[RenderSettings] = None,
) -> List[PageDescriptor]:
    """Render a JPEG thumbnail for every page, in page order.

    Pages are rendered one at a time so only a single raster is alive at any
    moment. ``on_progress(current, total)`` is called after each page.
    """

    settings = settings or DEFAULT_SETTINGS
    total = document.page_count
    pages: List[PageDescriptor] = []

    for page_number in range(1, total + 1):
        width, height = document.page_size(page_number)
        thumbnail, _, _ = render_page_to_bytes(
            document,
            page_number,
            settings.thumbnail_scale,
            "JPEG",
            quality=settings.thumbnail_quality,
        )
        pages.append(
            PageDescriptor(
                page_number=page_number,
                thumbnail=thumbnail,
                width=width,
                height=height,
            )
        )
        if on_progress:
            on_progress(page_number, total)

    LOGGER.info("Generated %d thumbnail(s)", total)
    return pages


def render_preview(
    document: ParsedDocument,
    page_number: int,
    *,
    settings: Optional[RenderSettings] = None,
) -> bytes:
    """Render one page at preview scale as JPEG bytes."""

    settings = settings or DEFAULT_SETTINGS
    data, _, _ = render_page_to_bytes(
        document,
        page_number,
        settings.preview_scale,
        "JPEG",
        quality=settings.preview_quality,
    )
    return data


class PreviewCache:
    """Per-document cache of enlarged previews keyed by page number.

    The source document never changes while it is open, so a page is rendered
    at most once until :meth:`clear` is called.
    """

    def __init__(self, document: ParsedDocument, settings: Optional[RenderSettings] = None) -> None:
        self.document = document
        self.settings = settings or DEFAULT_SETTINGS
        self._previews: Dict[int, bytes] = {}

    def get(self, page_number: int) -> bytes:
        cached = self._previews.get(page_number)
        if cached is not None:
            return cached

        preview = render_preview(self.document, page_number, settings=self.settings)
        self._previews[page_number] = preview
        LOGGER.debug("Cached preview for page %d", page_number)
        return preview

    def clear(self) -> None:
        self._previews.clear()

    def __contains__(self, page_number: object) -> bool:
        return page_number in self._previews

    def __len__(self) -> int:
        return len(self._previews)


__all__ = ["ProgressCallback", "generate_thumbnails", "render_preview", "PreviewCache"]
