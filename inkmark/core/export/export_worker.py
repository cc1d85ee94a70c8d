# inkmark/core/export/export_worker.py

import logging
import os
import shutil
import tempfile

from PyQt5.QtCore import QThread, pyqtSignal

from inkmark.core.document.pdf_exporter import PDFExporter
from inkmark.core.errors import ExportError

logger = logging.getLogger(__name__)


class ExportWorker(QThread):
    """Worker thread for exporting annotations to PDF without freezing the UI."""

    # Signals
    export_finished = pyqtSignal(bool, str)  # success, message
    progress = pyqtSignal(str)  # status message
    page_progress = pyqtSignal(int, int)  # current, total pages

    def __init__(self, source_bytes, output_pdf, annotations, exporter=None):
        """
        Args:
            source_bytes: The original PDF
            output_pdf: Destination path for the annotated copy
            annotations: Detached copy of the annotations to bake in
            exporter: PDFExporter to use, mainly for tests
        """
        super().__init__()
        self.source_bytes = source_bytes
        self.output_pdf = output_pdf
        self.annotations = tuple(annotations)
        self.exporter = exporter or PDFExporter()
        self.temp_path = None

    def run(self):
        """Execute the export in a background thread."""
        try:
            self.progress.emit("Preparing annotated PDF...")
            data = self.exporter.export_to_bytes(
                self.source_bytes,
                self.annotations,
                self._on_page_progress,
            )

            self.progress.emit("Finalizing...")
            # Write next to the target, then move into place
            output_dir = os.path.dirname(os.path.abspath(self.output_pdf))
            temp_fd, self.temp_path = tempfile.mkstemp(suffix='.pdf', dir=output_dir)
            with os.fdopen(temp_fd, 'wb') as f:
                f.write(data)
            shutil.move(self.temp_path, self.output_pdf)
            self.temp_path = None

            logger.info("Exported annotated PDF to %s", self.output_pdf)
            self.export_finished.emit(True, "Annotated PDF saved successfully!")

        except ExportError as e:
            self._cleanup()
            self.export_finished.emit(False, f"Failed to create annotated PDF: {e}")
        except OSError as e:
            self._cleanup()
            logger.error("Could not save %s: %s", self.output_pdf, e)
            self.export_finished.emit(False, f"Could not save the annotated PDF: {e}")

    def _cleanup(self):
        # Clean up temp file if it exists
        if self.temp_path and os.path.exists(self.temp_path):
            os.remove(self.temp_path)
        self.temp_path = None

    def _on_page_progress(self, current, total):
        """Handle page-level progress updates."""
        self.page_progress.emit(current, total)
