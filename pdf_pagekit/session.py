"""Lifecycle of one opened document: load, browse, extract, reset."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from .backends.base import ParsedDocument, RenderEngine, StructuralBackend
from .config import DEFAULT_SETTINGS, RenderSettings
from .extractor import extract_pages, generate_output_file_name
from .loader import FileSource, copy_bytes, read_as_bytes, validate_upload
from .selection import PageSelection
from .thumbnails import PreviewCache, ProgressCallback, generate_thumbnails
from .types import OutputArtifact, PageDescriptor
from .utils import CancelCheck, display_name, mask_file_name

LOGGER = logging.getLogger("pdf_pagekit.session")


class DocumentSession:
    """Holds the open document behind a page gallery.

    The parsed handle is kept for previews and for extracting encrypted PDFs,
    and is released on :meth:`reset`, before another file is loaded, and when
    the session is used as a context manager and exits.
    """

    def __init__(
        self,
        engine: RenderEngine,
        *,
        settings: Optional[RenderSettings] = None,
        backend: Optional[StructuralBackend] = None,
    ) -> None:
        self.engine = engine
        self.settings = settings or DEFAULT_SETTINGS
        self.backend = backend
        self.selection = PageSelection()
        self.file_name: Optional[str] = None
        self.pages: List[PageDescriptor] = []
        self._source: Optional[bytes] = None
        self._document: Optional[ParsedDocument] = None
        self._previews: Optional[PreviewCache] = None

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load_file(
        self,
        file: FileSource,
        *,
        file_name: Optional[str] = None,
        mime_type: Optional[str] = None,
        password: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[PageDescriptor]:
        """Read, validate, parse and thumbnail *file*, replacing any open one."""

        self.reset()

        if file_name is None:
            file_name = file if isinstance(file, str) else getattr(file, "name", "upload.pdf")
        name = display_name(file_name)
        data = read_as_bytes(file)
        validate_upload(name, data, mime_type)

        source = copy_bytes(data)
        document = self.engine.parse(data, password=password)
        try:
            pages = generate_thumbnails(document, on_progress, settings=self.settings)
        except BaseException:
            document.release()
            raise

        self.file_name = name
        self.pages = pages
        self._source = source
        self._document = document
        self._previews = PreviewCache(document, self.settings)
        self.selection.reset(document.page_count)
        LOGGER.info("Loaded %s with %d page(s)", mask_file_name(name), document.page_count)
        return pages

    def reset(self) -> None:
        if self._document is not None:
            self._document.release()
        if self._previews is not None:
            self._previews.clear()
        self._document = None
        self._previews = None
        self._source = None
        self.file_name = None
        self.pages = []
        self.selection.reset()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def is_loaded(self) -> bool:
        return self._document is not None

    @property
    def document(self) -> ParsedDocument:
        if self._document is None:
            raise RuntimeError("No document is loaded")
        return self._document

    @property
    def total_pages(self) -> int:
        return self.document.page_count

    def preview(self, page_number: int) -> bytes:
        if self._previews is None:
            raise RuntimeError("No document is loaded")
        return self._previews.get(page_number)

    # ------------------------------------------------------------------
    # Extraction
    # ------------------------------------------------------------------
    def extract(
        self,
        pages: Optional[Iterable[int]] = None,
        *,
        should_cancel: Optional[CancelCheck] = None,
    ) -> OutputArtifact:
        """Extract *pages*, or the current selection when omitted."""

        if self._source is None or self.file_name is None:
            raise RuntimeError("No document is loaded")

        selected = list(pages) if pages is not None else self.selection.pages
        data = extract_pages(
            copy_bytes(self._source),
            selected,
            self.document,
            settings=self.settings,
            backend=self.backend,
            should_cancel=should_cancel,
        )
        return OutputArtifact(data=data, file_name=generate_output_file_name(self.file_name))

    def __enter__(self) -> "DocumentSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.reset()


__all__ = ["DocumentSession"]
