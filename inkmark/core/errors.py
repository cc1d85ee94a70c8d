"""
Exception types raised by the annotation engine and its document collaborators.
"""


class InkmarkError(Exception):
    """Base class for all Inkmark errors."""


class InvalidPageError(InkmarkError, ValueError):
    """An annotation references a page outside the loaded document."""

    def __init__(self, page: int, page_count: int):
        super().__init__(f"Page {page} is outside 1..{page_count}")
        self.page = page
        self.page_count = page_count


class AnnotationFormatError(InkmarkError, ValueError):
    """Serialized annotation data could not be decoded."""


class DocumentLoadError(InkmarkError):
    """The source document bytes are corrupt or not a PDF."""


class ExportError(InkmarkError):
    """Writing the annotated copy of a document failed."""
