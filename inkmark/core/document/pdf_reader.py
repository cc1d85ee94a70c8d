"""
PDF document loading and page rendering.
"""
import logging
import os
from typing import Optional, Tuple

import fitz  # PyMuPDF
from PyQt5.QtGui import QImage

from inkmark.core.errors import DocumentLoadError

logger = logging.getLogger(__name__)


class PDFDocumentReader:
    """Handles PDF document loading, rendering, and basic operations."""

    def __init__(self):
        self.doc: Optional[fitz.Document] = None
        self.total_pages: int = 0
        self.current_file_path: Optional[str] = None
        self.document_name: Optional[str] = None
        self.source_bytes: Optional[bytes] = None

    def load_pdf(self, file_path: str) -> int:
        """
        Load a PDF document from disk.

        Args:
            file_path: Path to the PDF file

        Returns:
            Number of pages

        Raises:
            DocumentLoadError: If the file cannot be read or is not a PDF
        """
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise DocumentLoadError(f"Could not read {file_path}: {e}") from e

        page_count = self.load_bytes(data, os.path.basename(file_path))
        self.current_file_path = file_path
        return page_count

    def load_bytes(self, data: bytes, document_name: str) -> int:
        """
        Load a PDF document from memory.

        Args:
            data: Raw PDF bytes
            document_name: Name shown to the user and used for storage keys

        Returns:
            Number of pages

        Raises:
            DocumentLoadError: If the bytes are corrupt or not a PDF
        """
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            raise DocumentLoadError(f"Error loading PDF {document_name}: {e}") from e

        if doc.page_count == 0:
            doc.close()
            raise DocumentLoadError(f"{document_name} has no pages")

        # Close existing document if any
        if self.doc:
            self.close_document()

        self.doc = doc
        self.total_pages = doc.page_count
        self.document_name = document_name
        self.source_bytes = data
        logger.info("Loaded %s (%d pages)", document_name, self.total_pages)
        return self.total_pages

    def close_document(self) -> None:
        """Close the current PDF document and clear all state."""
        if self.doc:
            self.doc.close()
            self.doc = None

        self.total_pages = 0
        self.current_file_path = None
        self.document_name = None
        self.source_bytes = None

    def get_page(self, page_number: int) -> Optional[fitz.Page]:
        """
        Get a page object for direct operations.

        Args:
            page_number: 1-based page number

        Returns:
            PyMuPDF page object, or None if invalid
        """
        if not self.doc or not 1 <= page_number <= self.total_pages:
            return None
        return self.doc.load_page(page_number - 1)

    def get_page_size(self, page_number: int) -> Tuple[float, float]:
        """
        Get the size of a page in points.

        Args:
            page_number: 1-based page number

        Returns:
            Tuple of (width, height) in points
        """
        page = self.get_page(page_number)
        if page:
            rect = page.rect
            return rect.width, rect.height
        return 0.0, 0.0

    def render_page(self, page_number: int, scale: float,
                    rotation: int = 0) -> Optional[QImage]:
        """
        Render a single page to an image.

        Args:
            page_number: 1-based page number
            scale: Zoom factor for rendering
            rotation: Clockwise rotation in degrees, a multiple of 90

        Returns:
            The rendered page, or None if the page does not exist
        """
        page = self.get_page(page_number)
        if page is None:
            return None

        mat = fitz.Matrix(scale, scale).prerotate(rotation)
        pix = page.get_pixmap(matrix=mat, alpha=False)
        img = QImage(pix.samples, pix.width, pix.height, pix.stride, QImage.Format_RGB888)

        # QImage does not own pix.samples
        return img.copy()

    def is_loaded(self) -> bool:
        """Check if a document is currently loaded."""
        return self.doc is not None

    def get_file_path(self) -> Optional[str]:
        """Get the path of the currently loaded file."""
        return self.current_file_path

    def get_page_count(self) -> int:
        """Get the total number of pages."""
        return self.total_pages
