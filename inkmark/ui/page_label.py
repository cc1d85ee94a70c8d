from PyQt5.QtCore import QPoint, Qt
from PyQt5.QtGui import QPainter, QPixmap
from PyQt5.QtWidgets import QLabel, QLineEdit

from inkmark.core.annotations import AnnotationType
from inkmark.core.session import TextCapture
from .overlay_renderer import OverlayRenderer


class TextCaptureInput(QLineEdit):
    """Floating input for one text capture; Enter or losing focus commits it."""

    def __init__(self, capture: TextCapture, controller, parent=None):
        super().__init__(parent)
        self.capture = capture
        self.controller = controller
        self._finished = False

        self.setMinimumWidth(100)
        self.setStyleSheet("border: 1px dashed #3b82f6; padding: 4px; font-size: 16px;")
        self.returnPressed.connect(self._commit)

    def focusOutEvent(self, event):
        super().focusOutEvent(event)
        self._commit()

    def keyPressEvent(self, event):
        if event.key() == Qt.Key_Escape:
            self.dismiss()
            self.controller.cancel_text(self.capture)
            return
        super().keyPressEvent(event)

    def _commit(self):
        if self._finished:
            return
        self.dismiss()
        self.controller.finish_text(self.capture, self.text())

    def dismiss(self):
        """Remove the input without committing what was typed."""
        self._finished = True
        self.hide()
        self.deleteLater()


# Widget that displays one page and turns mouse input into annotations
class PageCanvas(QLabel):

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.renderer = OverlayRenderer()
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)

        controller.overlay_changed.connect(self.update)
        controller.annotations_changed.connect(self.update)
        controller.tool_changed.connect(self._on_tool_changed)
        controller.text_capture_requested.connect(self._show_text_input)
        controller.session_reset.connect(self.remove_text_inputs)

    def set_page_image(self, image):
        """Show a freshly rendered page; the overlay is resized to match."""
        self.setPixmap(QPixmap.fromImage(image))
        self.setFixedSize(image.width(), image.height())
        self.renderer.resize_surface(image.width(), image.height())
        self.update()

    def clear_page(self):
        self.clear()
        self.renderer.resize_surface(1, 1)

    def mousePressEvent(self, event):
        self.setFocus()
        if event.button() == Qt.LeftButton and self.controller.active_tool:
            self.controller.pointer_down(event.pos().x(), event.pos().y())
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if event.buttons() & Qt.LeftButton:
            self.controller.pointer_move(event.pos().x(), event.pos().y())
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.controller.pointer_up()
        super().mouseReleaseEvent(event)

    def leaveEvent(self, event):
        # Leaving the page ends a drag the same way releasing does
        self.controller.pointer_up()
        super().leaveEvent(event)

    def paintEvent(self, event):
        # 1. Draw the page pixmap
        super().paintEvent(event)

        pixmap = self.pixmap()
        if pixmap is None or pixmap.isNull():
            return

        # 2. Repaint the overlay from the model and draw it over the page
        session = self.controller.session
        overlay = self.renderer.render(
            self.controller.annotation_manager.annotations,
            session.page,
            session.scale,
            session.in_progress,
        )

        painter = QPainter(self)
        painter.setCompositionMode(QPainter.CompositionMode_SourceOver)
        painter.drawImage(0, 0, overlay)
        painter.end()

    def _on_tool_changed(self, tool):
        self.setCursor(Qt.CrossCursor if tool is not None else Qt.ArrowCursor)
        if tool != AnnotationType.TEXT:
            self.remove_text_inputs()

    def remove_text_inputs(self):
        for child in self.findChildren(TextCaptureInput):
            child.dismiss()

    def _show_text_input(self, capture: TextCapture):
        text_input = TextCaptureInput(capture, self.controller, self)
        x, y = capture.device_anchor
        text_input.move(QPoint(int(x), int(y)))
        text_input.show()
        text_input.setFocus()
        capture.begin_editing()
