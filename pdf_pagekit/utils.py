"""Small helpers shared across :mod:`pdf_pagekit`."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Optional, Union

from .exceptions import OperationCancelled

PathLike = Union[str, Path]
CancelCheck = Callable[[], bool]

_PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


def ensure_path(path: PathLike) -> Path:
    """Return a :class:`~pathlib.Path` instance for *path*."""

    return Path(path).expanduser().resolve()


def display_name(name: PathLike) -> str:
    """Return only the final component of *name*, never a directory path."""

    return Path(str(name)).name or str(name)


def strip_pdf_suffix(file_name: str) -> str:
    """Drop a trailing ``.pdf`` (any case) from *file_name*."""

    return _PDF_SUFFIX.sub("", file_name)


def mask_file_name(file_name: str) -> str:
    """
    Mask a file name for log records while keeping its extension.

    ``document.pdf`` becomes ``d***.pdf``.
    """
    if not file_name:
        return "***"

    name, dot, ext = file_name.rpartition(".")
    if not dot:
        name, ext = file_name, ""
    if len(name) <= 1:
        masked = "***"
    else:
        masked = name[0] + "*" * min(3, len(name) - 1)
    return f"{masked}.{ext}" if dot else masked


def format_file_size(size_bytes: float) -> str:
    """
    Format file size in human-readable format.

    Args:
        size_bytes: File size in bytes

    Returns:
        Formatted string (e.g., "1.5 MB", "500 KB")
    """
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"


def ensure_not_cancelled(should_cancel: Optional[CancelCheck]) -> None:
    """Raise :class:`OperationCancelled` when the caller asked to stop."""

    if should_cancel is not None and should_cancel():
        raise OperationCancelled()


__all__ = [
    "PathLike",
    "CancelCheck",
    "ensure_not_cancelled",
    "ensure_path",
    "display_name",
    "strip_pdf_suffix",
    "mask_file_name",
    "format_file_size",
]
