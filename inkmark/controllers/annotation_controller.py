"""
Controller for managing annotation operations.
"""
import logging
from typing import Optional

from PyQt5.QtCore import QObject, pyqtSignal

from inkmark.config import EditorSettings
from inkmark.core.annotations import (
    AnnotationManager,
    AnnotationPersistence,
    AnnotationType,
)
from inkmark.core.export import ExportWorker
from inkmark.core.session import CaptureState, DrawSession, PointerUpResult, TextCapture

logger = logging.getLogger(__name__)


class AnnotationController(QObject):
    """Connects pointer input, the annotation model, storage and export."""

    # Signals
    annotations_changed = pyqtSignal()  # Model changed, repaint and update status
    overlay_changed = pyqtSignal()  # Only the in-progress drawing changed
    tool_changed = pyqtSignal(object)  # AnnotationType or None
    text_capture_requested = pyqtSignal(object)  # TextCapture to show an input for
    session_reset = pyqtSignal()  # Pending drags and text inputs were dropped
    export_started = pyqtSignal()
    export_progress = pyqtSignal(str)
    export_page_progress = pyqtSignal(int, int)  # pages done, pages total
    export_finished = pyqtSignal(bool, str)  # success, message

    def __init__(self, settings: Optional[EditorSettings] = None,
                 persistence: Optional[AnnotationPersistence] = None):
        super().__init__()
        self.settings = settings or EditorSettings()
        self.annotation_manager = AnnotationManager()
        self.session = DrawSession(self.annotation_manager, self.settings)
        self.persistence = persistence or AnnotationPersistence()

        self.is_processing: bool = False
        self._export_worker: Optional[ExportWorker] = None

    # ------------------------------------------------------------------
    # Document lifecycle
    # ------------------------------------------------------------------

    def open_document(self, document_name: str, page_count: int) -> int:
        """
        Start annotating a freshly loaded document.

        Args:
            document_name: File name of the document
            page_count: Number of pages in it

        Returns:
            Number of stored annotations restored for it
        """
        self._reset_session()
        self.annotation_manager.set_document(document_name, page_count)
        self.session.set_page(1)
        restored = self.restore_annotations()
        self.annotations_changed.emit()
        return restored

    def close_document(self) -> None:
        """Forget the document and all its annotations."""
        self._reset_session()
        self.annotation_manager.clear_all()
        self.annotations_changed.emit()

    def _reset_session(self) -> None:
        self.session.reset()
        self.session_reset.emit()

    @property
    def has_document(self) -> bool:
        return self.annotation_manager.page_count > 0

    # ------------------------------------------------------------------
    # Tools and view state
    # ------------------------------------------------------------------

    @property
    def active_tool(self) -> Optional[AnnotationType]:
        return self.session.tool

    def select_tool(self, tool: Optional[AnnotationType]) -> None:
        """
        Activate a tool; selecting the active tool again deselects it.

        Args:
            tool: Tool to toggle, or None to deselect
        """
        new_tool = None if tool == self.session.tool else tool
        self.session.set_tool(new_tool)
        self.tool_changed.emit(new_tool)
        self.overlay_changed.emit()
        if new_tool:
            logger.debug("%s tool selected", new_tool.value)

    def set_page(self, page: int) -> None:
        self.session.set_page(page)
        self.overlay_changed.emit()

    def set_scale(self, scale: float) -> None:
        self.session.set_scale(scale)

    # ------------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------------

    def pointer_down(self, device_x: float, device_y: float) -> None:
        previous_text = self.session.pending_text
        capture = self.session.pointer_down(device_x, device_y)

        if previous_text is not None and previous_text.state == CaptureState.COMMITTED:
            self.annotations_changed.emit()

        if capture is not None:
            self.text_capture_requested.emit(capture)
        elif self.session.is_drawing:
            self.overlay_changed.emit()

    def pointer_move(self, device_x: float, device_y: float) -> None:
        if self.session.pointer_move(device_x, device_y):
            self.overlay_changed.emit()

    def pointer_up(self) -> PointerUpResult:
        was_drawing = self.session.is_drawing
        result = self.session.pointer_up()
        if result.changed:
            self.annotations_changed.emit()
        elif was_drawing:
            self.overlay_changed.emit()
        return result

    def finish_text(self, capture: TextCapture, text: str) -> bool:
        """
        Commit an inline text entry, as on blur or Enter.

        Returns:
            True if an annotation was added
        """
        capture.set_text(text)
        if capture.commit() is None:
            return False
        self.annotations_changed.emit()
        return True

    def cancel_text(self, capture: TextCapture) -> None:
        capture.discard()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save_annotations(self) -> bool:
        """
        Store a snapshot of the annotations for the current document.

        Returns:
            True if the snapshot was written
        """
        if not self.has_document:
            return False

        snapshot = self.annotation_manager.serialize_snapshot()
        if not self.persistence.save_snapshot(snapshot):
            return False

        self.annotation_manager.mark_saved()
        self.annotations_changed.emit()
        logger.info("Saved %d annotation(s) for %s",
                    len(snapshot.annotations), snapshot.document_name)
        return True

    def restore_annotations(self) -> int:
        """
        Load the stored snapshot for the current document, if any.

        Returns:
            Number of annotations loaded
        """
        document_name = self.annotation_manager.document_name
        if not document_name:
            return 0

        snapshot = self.persistence.load_snapshot(document_name)
        if snapshot is None:
            return 0

        count = self.annotation_manager.load_snapshot(snapshot)
        logger.info("Restored %d annotation(s) for %s", count, document_name)
        return count

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def start_export(self, source_bytes: bytes, output_path: str) -> bool:
        """
        Bake the annotations into a copy of the document in the background.

        Only one export runs at a time; the model is only read.

        Args:
            source_bytes: The original PDF
            output_path: Where to write the annotated copy

        Returns:
            True if the export was started
        """
        if self.is_processing:
            logger.warning("Export already in progress")
            return False

        self.is_processing = True
        worker = ExportWorker(source_bytes, output_path,
                              self.annotation_manager.annotations)
        worker.progress.connect(self.export_progress)
        worker.page_progress.connect(self.export_page_progress)
        worker.export_finished.connect(self._on_export_finished)
        self._export_worker = worker

        self.export_started.emit()
        worker.start()
        return True

    def wait_for_export(self, timeout_ms: int = 30000) -> bool:
        """Block until the running export thread ends."""
        if self._export_worker is None:
            return True
        return self._export_worker.wait(timeout_ms)

    def _on_export_finished(self, success: bool, message: str) -> None:
        self.is_processing = False
        if not success:
            logger.error(message)
        self.export_finished.emit(success, message)
