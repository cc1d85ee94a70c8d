"""
PDF document handling: reading, export composition and writing.
"""
from .export_composer import ExportComposer
from .instructions import (
    LineInstruction,
    PageInstructions,
    RectangleInstruction,
    TextInstruction,
)
from .pdf_exporter import PDFExporter, derive_output_name
from .pdf_reader import PDFDocumentReader

__all__ = [
    'ExportComposer',
    'LineInstruction',
    'PageInstructions',
    'RectangleInstruction',
    'TextInstruction',
    'PDFExporter',
    'derive_output_name',
    'PDFDocumentReader',
]
