"""
Main application window for Inkmark.
"""

import logging
import os
from typing import Optional

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import (
    QFileDialog,
    QFrame,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QSizePolicy,
    QSpacerItem,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from inkmark.config import EditorSettings
from inkmark.controllers import AnnotationController
from inkmark.core.document import PDFDocumentReader, derive_output_name
from inkmark.core.errors import DocumentLoadError
from .annotation_toolbar import AnnotationToolbar
from .page_label import PageCanvas

logger = logging.getLogger(__name__)

TOOL_NAMES = {
    "pencil": "Draw",
    "text": "Text",
    "highlight": "Highlight",
    "rectangle": "Shape",
    "eraser": "Eraser",
}


class MainWindow(QMainWindow):
    """Single-page annotation editor."""

    def __init__(self, file_path: Optional[str] = None,
                 settings: Optional[EditorSettings] = None):
        super().__init__()
        self.settings = settings or EditorSettings()

        self._init_core_components()
        self._setup_window()
        self._setup_ui()
        self._setup_connections()

        if file_path and os.path.exists(file_path):
            self.load_pdf(file_path)
        else:
            self._update_view_state()

    def _init_core_components(self):
        """Initialize core business logic components."""
        self.pdf_reader = PDFDocumentReader()
        self.annotation_controller = AnnotationController(self.settings)

        # View state
        self.current_page = 1
        self.zoom = self.settings.default_zoom
        self.rotation = 0

    def _setup_window(self):
        self.setWindowTitle("Inkmark")
        self.setMinimumSize(800, 600)

    def _setup_ui(self):
        """Setup the user interface."""
        self._create_toolbar()

        self.annotation_toolbar = AnnotationToolbar()

        self.page_canvas = PageCanvas(self.annotation_controller)
        self.scroll_area = QScrollArea()
        self.scroll_area.setAlignment(Qt.AlignCenter)
        self.scroll_area.setWidget(self.page_canvas)

        self.status_label = QLabel()
        self.status_label.setObjectName("StatusLabel")
        self.status_label.setContentsMargins(10, 4, 10, 4)

        body = QHBoxLayout()
        body.setContentsMargins(0, 0, 0, 0)
        body.addWidget(self.annotation_toolbar)
        body.addWidget(self.scroll_area, 1)

        central = QWidget()
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(0, 0, 0, 0)
        main_layout.setSpacing(0)
        main_layout.addWidget(self.top_frame)
        main_layout.addLayout(body, 1)
        main_layout.addWidget(self.status_label)
        self.setCentralWidget(central)

    def _create_toolbar(self):
        """Create the top toolbar."""
        self.top_frame = QFrame()
        self.top_frame.setObjectName("TopFrame")
        self.top_layout = QHBoxLayout(self.top_frame)
        self.top_layout.setContentsMargins(10, 8, 10, 8)
        self.top_layout.setSpacing(8)

        # File operations
        self._add_toolbar_button("Open", "Open PDF (Ctrl+O)", self.open_pdf)
        self.close_button = self._add_toolbar_button(
            "Close", "Close editor (Ctrl+W)", self.close_pdf)

        self._add_toolbar_separator()

        # Navigation
        self.prev_button = self._add_toolbar_button("◀", "Previous page", self.prev_page)
        self.page_label = QLabel()
        self.top_layout.addWidget(self.page_label)
        self.next_button = self._add_toolbar_button("▶", "Next page", self.next_page)

        self._add_toolbar_separator()

        # View
        self.zoom_out_button = self._add_toolbar_button("−", "Zoom out", self.zoom_out)
        self.zoom_label = QLabel()
        self.top_layout.addWidget(self.zoom_label)
        self.zoom_in_button = self._add_toolbar_button("+", "Zoom in", self.zoom_in)
        self.rotate_button = self._add_toolbar_button("⟳", "Rotate clockwise", self.rotate)

        self._add_toolbar_spacer(20, expanding=True)

        # Output
        self.save_button = self._add_toolbar_button(
            "Save", "Save annotations (Ctrl+S)", self.save_annotations)
        self.download_button = self._add_toolbar_button(
            "Download", "Download annotated PDF", self.download_annotated_pdf)

    def _add_toolbar_button(self, text: str, tooltip: str, callback) -> QToolButton:
        """Add a button to the toolbar."""
        btn = QToolButton(self.top_frame)
        btn.setText(text)
        btn.setToolTip(tooltip)
        btn.clicked.connect(callback)
        self.top_layout.addWidget(btn)
        return btn

    def _add_toolbar_separator(self):
        separator = QFrame()
        separator.setFrameShape(QFrame.VLine)
        separator.setFrameShadow(QFrame.Sunken)
        separator.setStyleSheet("background-color: #d1d5db; max-width: 1px;")
        self.top_layout.addWidget(separator)

    def _add_toolbar_spacer(self, width: int, expanding: bool = False):
        policy = QSizePolicy.Expanding if expanding else QSizePolicy.Fixed
        self.top_layout.addSpacerItem(QSpacerItem(width, 20, policy, QSizePolicy.Minimum))

    def _setup_connections(self):
        controller = self.annotation_controller
        self.annotation_toolbar.tool_selected.connect(controller.select_tool)
        controller.tool_changed.connect(self.annotation_toolbar.set_active_tool)
        controller.tool_changed.connect(lambda _tool: self._update_status())
        controller.annotations_changed.connect(self._update_status)
        controller.export_started.connect(self._update_view_state)
        controller.export_progress.connect(self.status_label.setText)
        controller.export_page_progress.connect(self._on_export_page_progress)
        controller.export_finished.connect(self._on_export_finished)

    # File Operations

    def open_pdf(self):
        """Ask for a PDF and load it."""
        file_path, _ = QFileDialog.getOpenFileName(
            self, "Open PDF", "", "PDF Files (*.pdf)")
        if file_path:
            self.load_pdf(file_path)

    def load_pdf(self, file_path: str) -> bool:
        """
        Load a PDF file and restore its stored annotations.

        Returns:
            True if the document was loaded
        """
        try:
            page_count = self.pdf_reader.load_pdf(file_path)
        except DocumentLoadError as e:
            logger.error("%s", e)
            QMessageBox.critical(self, "Error", f"Could not open the PDF:\n{e}")
            return False

        self.current_page = 1
        self.zoom = self.settings.default_zoom
        self.rotation = 0

        restored = self.annotation_controller.open_document(
            self.pdf_reader.document_name, page_count)
        self.annotation_controller.set_scale(self.zoom)

        self.setWindowTitle(f"Inkmark - {self.pdf_reader.document_name}")
        self._render_current_page()
        self._update_view_state()
        if restored:
            self.status_label.setText(f"Restored {restored} annotation(s)")

        return True

    def close_pdf(self):
        """Close the editor, discarding the document and its annotations."""
        if not self.pdf_reader.is_loaded():
            return
        if not self._confirm_discard():
            return

        self.annotation_controller.close_document()
        self.pdf_reader.close_document()
        self.page_canvas.clear_page()
        self.setWindowTitle("Inkmark")
        self._update_view_state()

    def save_annotations(self) -> bool:
        """Store the annotations so they are restored next time."""
        if not self.annotation_controller.has_document:
            return False
        if not self.annotation_controller.save_annotations():
            QMessageBox.warning(self, "Save Failed",
                                "The annotations could not be saved.")
            return False
        self.status_label.setText("Annotations saved")
        return True

    def download_annotated_pdf(self) -> bool:
        """Write a copy of the PDF with the annotations baked in."""
        if not self.pdf_reader.is_loaded():
            QMessageBox.warning(self, "No PDF", "No PDF document is currently loaded.")
            return False

        default_name = derive_output_name(self.pdf_reader.document_name,
                                          self.settings.export_suffix)
        source_dir = os.path.dirname(self.pdf_reader.get_file_path() or "")
        output_path, _ = QFileDialog.getSaveFileName(
            self,
            "Save Annotated PDF",
            os.path.join(source_dir, default_name),
            "PDF Files (*.pdf)",
        )
        if not output_path:
            return False

        return self.annotation_controller.start_export(
            self.pdf_reader.source_bytes, output_path)

    def _on_export_page_progress(self, done: int, total: int):
        if total:
            self.status_label.setText(f"Exporting: page {min(done + 1, total)} of {total}")

    def _on_export_finished(self, success: bool, message: str):
        self._update_view_state()
        if success:
            QMessageBox.information(self, "Success", message)
        else:
            QMessageBox.critical(self, "Export Failed", message)

    # Navigation and View

    def prev_page(self):
        self.go_to_page(self.current_page - 1)

    def next_page(self):
        self.go_to_page(self.current_page + 1)

    def go_to_page(self, page: int):
        if not self.annotation_controller.annotation_manager.is_valid_page(page):
            return
        self.current_page = page
        self.annotation_controller.set_page(page)
        self._render_current_page()
        self._update_view_state()

    def zoom_in(self):
        self._set_zoom(self.settings.zoom_in(self.zoom))

    def zoom_out(self):
        self._set_zoom(self.settings.zoom_out(self.zoom))

    def _set_zoom(self, zoom: float):
        if zoom == self.zoom:
            return
        self.zoom = zoom
        self.annotation_controller.set_scale(zoom)
        self._render_current_page()
        self._update_view_state()

    def rotate(self):
        """Rotate the displayed page clockwise by a quarter turn."""
        self.rotation = (self.rotation + 90) % 360
        self._render_current_page()

    def _render_current_page(self):
        image = self.pdf_reader.render_page(self.current_page, self.zoom, self.rotation)
        if image is None:
            self.page_canvas.clear_page()
            return
        self.page_canvas.set_page_image(image)

    # Status

    def _update_view_state(self):
        loaded = self.pdf_reader.is_loaded()
        page_count = self.pdf_reader.get_page_count()
        processing = self.annotation_controller.is_processing

        self.page_label.setText(f"{self.current_page} / {page_count}" if loaded else "- / -")
        self.zoom_label.setText(f"{round(self.zoom * 100)}%")

        self.prev_button.setEnabled(loaded and self.current_page > 1)
        self.next_button.setEnabled(loaded and self.current_page < page_count)
        for button in (self.zoom_in_button, self.zoom_out_button,
                       self.rotate_button, self.save_button, self.close_button):
            button.setEnabled(loaded)
        self.download_button.setEnabled(loaded and not processing)
        self.download_button.setText("Processing..." if processing else "Download")
        self.annotation_toolbar.setEnabled(loaded)

        self._update_status()

    def _update_status(self):
        self.status_label.setText(self.status_text())

    def status_text(self) -> str:
        """Active tool and unsaved-changes marker for the status line."""
        if not self.pdf_reader.is_loaded():
            return "No document"

        tool = self.annotation_controller.active_tool
        text = f"Tool: {TOOL_NAMES[tool.value] if tool else 'None'}"
        if self.annotation_controller.annotation_manager.has_unsaved_changes:
            text += " (Unsaved changes)"
        return text

    # Event Handlers

    def keyPressEvent(self, event):
        modifiers = event.modifiers()
        key = event.key()

        if modifiers & Qt.ControlModifier:
            if key == Qt.Key_O:
                self.open_pdf()
                return
            if key == Qt.Key_S:
                self.save_annotations()
                return
            if key == Qt.Key_W:
                self.close_pdf()
                return
            if key in (Qt.Key_Plus, Qt.Key_Equal):
                self.zoom_in()
                return
            if key == Qt.Key_Minus:
                self.zoom_out()
                return
        elif key in (Qt.Key_Left, Qt.Key_PageUp):
            self.prev_page()
            return
        elif key in (Qt.Key_Right, Qt.Key_PageDown):
            self.next_page()
            return

        super().keyPressEvent(event)

    def _confirm_discard(self) -> bool:
        """Offer to save unsaved annotations; False means the user cancelled."""
        if not self.annotation_controller.annotation_manager.has_unsaved_changes:
            return True

        result = QMessageBox.question(
            self,
            "Unsaved Changes",
            "You have unsaved annotations. Do you want to save them before closing?",
            QMessageBox.Save | QMessageBox.Discard | QMessageBox.Cancel,
            QMessageBox.Save,
        )
        if result == QMessageBox.Save:
            return self.save_annotations()
        return result == QMessageBox.Discard

    def closeEvent(self, event):  # type: ignore[override]
        """Handle window close, offering to save unsaved annotations."""
        if not self._confirm_discard():
            event.ignore()
            return

        # Let a running export finish writing its file
        self.annotation_controller.wait_for_export()
        self.pdf_reader.close_document()
        event.accept()
