"""Merge functionality for :mod:`pdf_pagekit`."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .backends.base import RenderEngine, StructuralBackend
from .backends.pypdf_backend import PypdfBackend
from .config import RenderSettings
from .exceptions import MergeError, OperationCancelled, PagekitError, StructuralCopyError
from .extractor import write_batches
from .loader import FileSource, copy_bytes, read_as_bytes, validate_upload
from .rasterize import rasterize_pages
from .types import MergeItem, OutputArtifact, PageBatch
from .utils import CancelCheck, display_name, ensure_not_cancelled, mask_file_name, strip_pdf_suffix

LOGGER = logging.getLogger("pdf_pagekit.merge")

MERGE_SUFFIX = "_merged"
DEFAULT_MERGED_NAME = "merged.pdf"


def _copy_item_structural(backend: StructuralBackend, item: MergeItem) -> PageBatch:
    """Copy every page of *item* into standalone page objects.

    The pages are added to a scratch writer and re-read, so any failure of the
    actual copy surfaces here, for this item, and not when the merged output
    is assembled.
    """

    source = backend.load(copy_bytes(item.data))
    batch = backend.copy_pages(source, range(source.num_pages))
    try:
        copied = write_batches(backend, [batch])
    except StructuralCopyError:
        raise
    except Exception as exc:
        raise StructuralCopyError(f"Unable to copy pages. Error: {exc}") from exc

    scratch = backend.load(copied)
    return backend.copy_pages(scratch, range(scratch.num_pages))


def _copy_item_rasterized(
    engine: RenderEngine,
    item: MergeItem,
    settings: Optional[RenderSettings],
    should_cancel: Optional[CancelCheck],
) -> PageBatch:
    document = engine.parse(copy_bytes(item.data))
    try:
        return rasterize_pages(
            document,
            range(1, document.page_count + 1),
            settings=settings,
            should_cancel=should_cancel,
        )
    finally:
        document.release()


def _collect_item_pages(
    item: MergeItem,
    backend: StructuralBackend,
    engine: Optional[RenderEngine],
    settings: Optional[RenderSettings],
    should_cancel: Optional[CancelCheck],
) -> PageBatch:
    try:
        return _copy_item_structural(backend, item)
    except StructuralCopyError as exc:
        LOGGER.warning(
            "Structural copy failed for %s, rasterizing instead: %s",
            mask_file_name(item.display_name),
            exc.message,
        )

    failure = f"Failed to merge PDF: {item.display_name}"
    if engine is None:
        raise MergeError(failure, item_name=item.display_name)

    try:
        return _copy_item_rasterized(engine, item, settings, should_cancel)
    except OperationCancelled:
        raise
    except Exception as exc:
        LOGGER.error("Rasterized copy failed for %s: %s", mask_file_name(item.display_name), exc)
        raise MergeError(failure, item_name=item.display_name) from exc


def merge_pdfs(
    items: Sequence[MergeItem],
    *,
    engine: Optional[RenderEngine] = None,
    settings: Optional[RenderSettings] = None,
    backend: Optional[StructuralBackend] = None,
    on_progress: Optional[Callable[[int, int], None]] = None,
    should_cancel: Optional[CancelCheck] = None,
) -> bytes:
    """Concatenate every page of *items*, in list order, into one PDF.

    Each item is copied structurally when possible. An item that cannot be
    (typically an encrypted PDF) is rebuilt from page renders, which needs
    *engine*. Other items are unaffected by one item's fallback.

    The merge is all-or-nothing: if any item fails both ways, nothing is
    returned and :class:`MergeError` names that item.
    """

    backend = backend or PypdfBackend()
    total = len(items)
    batches: List[PageBatch] = []

    for index, item in enumerate(items, start=1):
        ensure_not_cancelled(should_cancel)
        LOGGER.debug("Processing item %d/%d (%s)", index, total, mask_file_name(item.display_name))
        batch = _collect_item_pages(item, backend, engine, settings, should_cancel)
        batches.append(batch)
        if on_progress:
            on_progress(index, total)

    try:
        output = write_batches(backend, batches)
    except PagekitError as exc:
        raise MergeError(f"Failed to write the merged PDF: {exc.message}") from exc
    except Exception as exc:
        raise MergeError("Failed to write the merged PDF.") from exc

    rasterized = sum(1 for batch in batches if batch.kind == "rasterized")
    LOGGER.info(
        "Merged %d PDF(s) into %d page(s), %d rasterized",
        total,
        sum(len(batch) for batch in batches),
        rasterized,
    )
    return output


def generate_merged_file_name(items: Sequence[MergeItem]) -> str:
    """Name the merge output after the first item."""

    if not items:
        return DEFAULT_MERGED_NAME
    if len(items) == 1:
        return items[0].display_name

    base_name = strip_pdf_suffix(items[0].display_name)
    return f"{base_name}{MERGE_SUFFIX}.pdf"


def get_total_page_count(items: Iterable[MergeItem]) -> int:
    return sum(item.page_count for item in items)


class MergeQueue:
    """User-ordered list of PDFs waiting to be merged."""

    def __init__(
        self,
        engine: RenderEngine,
        *,
        settings: Optional[RenderSettings] = None,
        backend: Optional[StructuralBackend] = None,
    ) -> None:
        self.engine = engine
        self.settings = settings
        self.backend = backend
        self._items: List[MergeItem] = []

    @property
    def items(self) -> Tuple[MergeItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)

    def _build_item(self, file_name: str, data: bytes, mime_type: Optional[str]) -> MergeItem:
        name = display_name(file_name)
        validate_upload(name, data, mime_type)
        item_data = copy_bytes(data)
        document = self.engine.parse(data)
        try:
            page_count = document.page_count
        finally:
            document.release()
        return MergeItem(display_name=name, page_count=page_count, data=item_data)

    def add_bytes(self, file_name: str, data: bytes, mime_type: Optional[str] = None) -> MergeItem:
        item = self._build_item(file_name, data, mime_type)
        self._items.append(item)
        return item

    def add_files(self, files: Iterable[FileSource]) -> List[MergeItem]:
        """Read, validate and append *files* in the given order.

        Either every file is added or, if one fails, none of them are.
        """

        new_items: List[MergeItem] = []
        for file in files:
            name = file if isinstance(file, str) else getattr(file, "name", None)
            data = read_as_bytes(file)
            new_items.append(self._build_item(str(name or "upload.pdf"), data, None))

        self._items.extend(new_items)
        LOGGER.debug("Added %d file(s); queue holds %d", len(new_items), len(self._items))
        return new_items

    def remove(self, item_id: str) -> None:
        self._items = [item for item in self._items if item.id != item_id]

    def move(self, old_index: int, new_index: int) -> None:
        """Move the item at *old_index* so that it ends up at *new_index*."""

        if not 0 <= old_index < len(self._items):
            raise IndexError(f"No item at position {old_index}")
        if not 0 <= new_index < len(self._items):
            raise IndexError(f"Cannot move item to position {new_index}")
        item = self._items.pop(old_index)
        self._items.insert(new_index, item)

    def clear(self) -> None:
        self._items.clear()

    @property
    def total_page_count(self) -> int:
        return get_total_page_count(self._items)

    @property
    def suggested_file_name(self) -> str:
        return generate_merged_file_name(self._items)

    def merge(
        self,
        *,
        on_progress: Optional[Callable[[int, int], None]] = None,
        should_cancel: Optional[CancelCheck] = None,
    ) -> OutputArtifact:
        data = merge_pdfs(
            self._items,
            engine=self.engine,
            settings=self.settings,
            backend=self.backend,
            on_progress=on_progress,
            should_cancel=should_cancel,
        )
        return OutputArtifact(data=data, file_name=self.suggested_file_name)


__all__ = [
    "MERGE_SUFFIX",
    "DEFAULT_MERGED_NAME",
    "MergeQueue",
    "merge_pdfs",
    "generate_merged_file_name",
    "get_total_page_count",
]
