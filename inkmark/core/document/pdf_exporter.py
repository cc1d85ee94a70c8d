"""
PDF writer: replays composed draw instructions onto a copy of the document.
"""
import logging
import os
from typing import Callable, Iterable, List, Optional

import fitz  # PyMuPDF

from inkmark.core.annotations.models import Annotation
from inkmark.core.errors import ExportError
from .export_composer import ExportComposer
from .instructions import (
    LineInstruction,
    PageInstructions,
    RectangleInstruction,
    TextInstruction,
)

logger = logging.getLogger(__name__)

TEXT_FONT = "helv"  # Helvetica, one of the PDF base-14 fonts

ProgressCallback = Callable[[int, int], None]


def derive_output_name(file_name: str, suffix: str = "_annotated") -> str:
    """
    Name for the annotated copy of a document.

    >>> derive_output_name("report.pdf")
    'report_annotated.pdf'
    """
    stem, ext = os.path.splitext(file_name)
    return f"{stem}{suffix}{ext or '.pdf'}"


class PDFExporter:
    """Writes annotations into a new copy of a PDF."""

    def __init__(self, composer: Optional[ExportComposer] = None):
        self.composer = composer or ExportComposer()

    def export_to_bytes(self, source_bytes: bytes, annotations: Iterable[Annotation],
                        progress_callback: Optional[ProgressCallback] = None) -> bytes:
        """
        Bake annotations into a copy of a PDF held in memory.

        Args:
            source_bytes: The original PDF
            annotations: Committed annotations to draw
            progress_callback: Called with (pages done, pages total)

        Returns:
            The serialized annotated PDF

        Raises:
            ExportError: If the source cannot be parsed or writing fails
        """
        try:
            doc = fitz.open(stream=source_bytes, filetype="pdf")
        except Exception as e:
            logger.error("Failed to open source PDF: %s", e)
            raise ExportError(f"Could not read the source PDF: {e}") from e

        try:
            page_heights = {
                index + 1: doc[index].rect.height for index in range(doc.page_count)
            }
            pages = self.composer.compose(annotations, page_heights)

            # One font object serves every text instruction in the document
            font = fitz.Font(TEXT_FONT) if any(p.needs_font for p in pages) else None

            total = len(pages)
            for done, page_instructions in enumerate(pages):
                if progress_callback:
                    progress_callback(done, total)
                self._apply_page(doc[page_instructions.page - 1], page_instructions, font)
            if progress_callback:
                progress_callback(total, total)

            return doc.tobytes(garbage=4, deflate=True)
        except Exception as e:
            logger.error("Failed to write annotated PDF: %s", e)
            raise ExportError(f"Could not write the annotated PDF: {e}") from e
        finally:
            doc.close()

    def export_to_file(self, source_path: str, output_path: str,
                       annotations: Iterable[Annotation],
                       progress_callback: Optional[ProgressCallback] = None) -> None:
        """
        Export annotations from one PDF file into another.

        Raises:
            ExportError: If reading, composing or writing fails
        """
        try:
            with open(source_path, 'rb') as f:
                source_bytes = f.read()
        except OSError as e:
            raise ExportError(f"Could not read {source_path}: {e}") from e

        data = self.export_to_bytes(source_bytes, annotations, progress_callback)

        try:
            with open(output_path, 'wb') as f:
                f.write(data)
        except OSError as e:
            raise ExportError(f"Could not write {output_path}: {e}") from e

    def _apply_page(self, page: fitz.Page, page_instructions: PageInstructions,
                    font: Optional[fitz.Font]) -> None:
        """Replay one page's instructions in order."""
        height = page_instructions.height
        shape = page.new_shape()
        pending: List[object] = []

        for instruction in page_instructions.instructions:
            if isinstance(instruction, TextInstruction):
                # Commit shapes drawn so far so text keeps its paint order
                if pending:
                    shape.commit()
                    shape = page.new_shape()
                    pending = []
                self._draw_text(page, instruction, height, font)
            elif isinstance(instruction, RectangleInstruction):
                self._draw_rectangle(shape, instruction, height)
                pending.append(instruction)
            elif isinstance(instruction, LineInstruction):
                self._draw_line(shape, instruction, height)
                pending.append(instruction)

        if pending:
            shape.commit()

    @staticmethod
    def _to_page_point(page: fitz.Page, x: float, y: float, height: float) -> fitz.Point:
        """
        Map a PDF-space point on the page as displayed to PyMuPDF drawing space.

        PyMuPDF addresses pages from the top-left corner of the unrotated page,
        while annotations were placed on the page as shown, with ``/Rotate`` applied.
        """
        return fitz.Point(x, height - y) * page.derotation_matrix

    def _draw_rectangle(self, shape: fitz.Shape, instruction: RectangleInstruction,
                        height: float) -> None:
        page = shape.page
        rect = fitz.Rect(
            self._to_page_point(page, instruction.x, instruction.y + instruction.height, height),
            self._to_page_point(page, instruction.x + instruction.width, instruction.y, height),
        )
        shape.draw_rect(rect.normalize())
        shape.finish(
            color=instruction.border_color,
            fill=instruction.fill_color,
            width=instruction.border_width if instruction.border_color else 0,
            fill_opacity=instruction.opacity,
            stroke_opacity=instruction.opacity,
        )

    def _draw_line(self, shape: fitz.Shape, instruction: LineInstruction,
                   height: float) -> None:
        page = shape.page
        shape.draw_line(
            self._to_page_point(page, *instruction.start, height),
            self._to_page_point(page, *instruction.end, height),
        )
        shape.finish(color=instruction.color, width=instruction.thickness,
                     lineCap=1, lineJoin=1, closePath=False)

    def _draw_text(self, page: fitz.Page, instruction: TextInstruction,
                   height: float, font: fitz.Font) -> None:
        derotate = page.derotation_matrix
        origin = self._to_page_point(page, instruction.x, instruction.y, height)

        writer = fitz.TextWriter(page.rect * derotate, color=instruction.color)
        writer.append(origin, instruction.text, font=font, fontsize=instruction.size)

        morph = None
        if page.rotation:
            # Turn the line with the page so it reads upright as displayed
            morph = (origin, fitz.Matrix(derotate.a, derotate.b, derotate.c, derotate.d, 0, 0))
        writer.write_text(page, morph=morph)
