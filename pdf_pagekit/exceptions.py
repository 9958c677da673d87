"""
Custom exceptions for PDF Pagekit.

Every error raised to callers derives from :class:`PagekitError` and carries a
human readable ``message`` that is safe to show to an end user.
"""

from typing import Optional


class PagekitError(Exception):
    """Base exception for all PDF Pagekit errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF error occurred."


class ReadError(PagekitError):
    """Raised when an uploaded file cannot be read into memory."""

    @property
    def default_message(self) -> str:
        return "The file could not be read."


class InvalidUploadError(PagekitError):
    """Raised when an upload is not recognisably a PDF file."""

    @property
    def default_message(self) -> str:
        return "Only PDF files can be uploaded."


class ParseError(PagekitError):
    """Raised when bytes do not form a well-formed PDF document."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class RenderError(PagekitError):
    """Raised when a page cannot be rasterized."""

    @property
    def default_message(self) -> str:
        return "The page could not be rendered."


class ExtractionError(PagekitError):
    """Raised when page extraction fails on every available path."""

    @property
    def default_message(self) -> str:
        return "Failed to extract pages from the PDF."


class MergeError(PagekitError):
    """Raised when a merge cannot be completed; names the failing item."""

    def __init__(self, message: str = "", item_name: Optional[str] = None) -> None:
        super().__init__(message)
        self.item_name = item_name

    @property
    def default_message(self) -> str:
        return "Failed to merge the PDFs."


class DeliveryError(PagekitError):
    """Raised when a produced PDF cannot be written to its destination."""

    @property
    def default_message(self) -> str:
        return "The PDF could not be saved."


class DeliveryCancelled(PagekitError):
    """Raised when the user aborts the save dialog. Not a failure."""

    @property
    def default_message(self) -> str:
        return "Download cancelled."


class OperationCancelled(PagekitError):
    """Raised when a running extract or merge is cancelled between pages."""

    @property
    def default_message(self) -> str:
        return "The operation was cancelled."


class StructuralCopyError(PagekitError):
    """Raised by the structural copy path so callers can fall back."""

    @property
    def default_message(self) -> str:
        return "The PDF cannot be copied structurally."


class InvalidRangeError(PagekitError):
    """Raised when a page specification string is malformed."""

    @property
    def default_message(self) -> str:
        return "Invalid page range specification."


class PageOutOfBoundsError(PagekitError):
    """Raised when a page number falls outside the document."""

    @property
    def default_message(self) -> str:
        return "Requested page number is out of bounds."
