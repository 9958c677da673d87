"""Page selection state for the thumbnail gallery and page specifications."""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Set

from .exceptions import InvalidRangeError, PageOutOfBoundsError

_RANGE = re.compile(r"^(\d+)-(\d+)$")


def parse_page_spec(page_spec: str) -> List[int]:
    """Parse ``"1,3,5-7"`` into sorted unique page numbers."""

    if not page_spec or not page_spec.strip():
        raise InvalidRangeError("Page specification cannot be empty")

    pages: Set[int] = set()
    for token in page_spec.split(","):
        token = token.strip()
        if "-" in token:
            match = _RANGE.match(token)
            if not match:
                raise InvalidRangeError(
                    f"Invalid page range format: '{token}'. Expected 'start-end'."
                )

            start = int(match.group(1))
            end = int(match.group(2))
            if start > end:
                raise InvalidRangeError(
                    f"Invalid range '{token}': start page ({start}) must be <= end page ({end})."
                )
            if start < 1:
                raise PageOutOfBoundsError(
                    f"Invalid range '{token}': page numbers must be >= 1."
                )

            pages.update(range(start, end + 1))
        else:
            if not token.isdigit():
                raise InvalidRangeError(
                    f"Invalid page number: '{token}'. Expected a positive integer."
                )

            page_num = int(token)
            if page_num < 1:
                raise PageOutOfBoundsError(
                    f"Invalid page number: {page_num}. Page numbers must be >= 1."
                )

            pages.add(page_num)

    return sorted(pages)


class PageSelection:
    """Set of selected 1-based page numbers, always read in ascending order.

    A plain toggle flips one page. A shift toggle adds every page between the
    previously clicked page and this one, inclusive. Which clicks produced the
    selection never affects its order.
    """

    def __init__(self, total_pages: Optional[int] = None) -> None:
        self.total_pages = total_pages
        self._selected: Set[int] = set()
        self._last_clicked: Optional[int] = None

    def _check(self, page_number: int) -> None:
        if page_number < 1 or (self.total_pages is not None and page_number > self.total_pages):
            limit = f" PDF has {self.total_pages} pages." if self.total_pages is not None else ""
            raise PageOutOfBoundsError(f"Page {page_number} is out of bounds.{limit}")

    def toggle(self, page_number: int, shift: bool = False) -> None:
        self._check(page_number)
        if shift and self._last_clicked is not None:
            start = min(self._last_clicked, page_number)
            end = max(self._last_clicked, page_number)
            self._selected.update(range(start, end + 1))
        elif page_number in self._selected:
            self._selected.discard(page_number)
        else:
            self._selected.add(page_number)
        self._last_clicked = page_number

    def select_all(self, total_pages: Optional[int] = None) -> None:
        if total_pages is not None:
            self.total_pages = total_pages
        if self.total_pages is None:
            raise ValueError("select_all needs the document's page count")
        self._selected = set(range(1, self.total_pages + 1))

    def deselect_all(self) -> None:
        self._selected.clear()

    def reset(self, total_pages: Optional[int] = None) -> None:
        self._selected.clear()
        self._last_clicked = None
        self.total_pages = total_pages

    @property
    def pages(self) -> List[int]:
        return sorted(self._selected)

    def __contains__(self, page_number: object) -> bool:
        return page_number in self._selected

    def __iter__(self) -> Iterator[int]:
        return iter(self.pages)

    def __len__(self) -> int:
        return len(self._selected)

    def __bool__(self) -> bool:
        return bool(self._selected)


__all__ = ["PageSelection", "parse_page_spec"]
