"""Read uploaded files into memory and hand out independent byte copies."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .exceptions import InvalidUploadError, ReadError
from .utils import display_name, mask_file_name

LOGGER = logging.getLogger("pdf_pagekit.loader")

PDF_SIGNATURE = b"%PDF"
PDF_MIME_TYPE = "application/pdf"

FileSource = Union[str, Path, BinaryIO]


def read_as_bytes(file: FileSource) -> bytes:
    """Read *file* fully into memory.

    *file* is either a path or an open binary file object (for example the
    ``file`` attribute of an uploaded form part).

    Raises:
        ReadError: If the underlying I/O fails.
    """

    if isinstance(file, (str, Path)):
        path = Path(file)
        name = display_name(path)
        try:
            data = path.read_bytes()
        except FileNotFoundError as exc:
            raise ReadError(f"File not found: {name}") from exc
        except IsADirectoryError as exc:
            raise ReadError(f"Not a file: {name}") from exc
        except OSError as exc:
            raise ReadError(f"Unable to read file: {name}") from exc
    else:
        name = display_name(getattr(file, "name", "") or "upload")
        try:
            data = file.read()
        except (OSError, ValueError) as exc:
            raise ReadError(f"Unable to read file: {name}") from exc
        if not isinstance(data, (bytes, bytearray)):
            raise ReadError(f"File is not opened in binary mode: {name}")
        data = bytes(data)

    LOGGER.debug("Read %d bytes from %s", len(data), mask_file_name(name))
    return data


def copy_bytes(data: bytes) -> bytes:
    """Return an independent copy of *data* for a single consumer.

    Parsers may keep a reference to, or take over, the buffer they are given.
    Each consumer therefore gets its own object.
    """

    return bytes(bytearray(data))


def has_pdf_signature(data: bytes) -> bool:
    """Return ``True`` when *data* starts with the ``%PDF`` header."""

    return data[:4] == PDF_SIGNATURE


def looks_like_pdf(file_name: str, mime_type: Optional[str] = None) -> bool:
    """Loose pre-check on the upload's name and declared MIME type."""

    if mime_type and mime_type.split(";")[0].strip().lower() == PDF_MIME_TYPE:
        return True
    return file_name.lower().endswith(".pdf")


def validate_upload(file_name: str, data: bytes, mime_type: Optional[str] = None) -> None:
    """Reject uploads that are not PDFs before any parsing happens.

    Raises:
        InvalidUploadError: When the name/MIME check or the signature check fails.
    """

    name = display_name(file_name)
    if not looks_like_pdf(name, mime_type):
        raise InvalidUploadError(f"Not a PDF file: {name}")
    if not has_pdf_signature(data):
        raise InvalidUploadError(f"File does not contain PDF data: {name}")


__all__ = [
    "PDF_SIGNATURE",
    "PDF_MIME_TYPE",
    "read_as_bytes",
    "copy_bytes",
    "has_pdf_signature",
    "looks_like_pdf",
    "validate_upload",
]
