from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QColor
from PyQt5.QtWidgets import (
    QFrame, QVBoxLayout, QToolButton, QGraphicsDropShadowEffect, QSizePolicy
)

from inkmark.core.annotations import AnnotationType

# (tool, button text, tooltip)
TOOLS = [
    (AnnotationType.HIGHLIGHT, "🖍", "Highlight"),
    (AnnotationType.FREEHAND, "✎", "Draw"),
    (AnnotationType.TEXT, "T", "Add Text"),
    (AnnotationType.RECTANGLE, "▭", "Add Shape"),
    (AnnotationType.ERASER, "⌫", "Eraser"),
]


class AnnotationToolbar(QFrame):
    """Vertical strip of editing tools on the left of the page view."""

    tool_selected = pyqtSignal(object)  # AnnotationType

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("AnnotationToolbar")
        self.buttons = {}

        self.setup_ui()

    def setup_ui(self):
        self.setFixedWidth(56)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Preferred)

        main_layout = QVBoxLayout(self)
        main_layout.setContentsMargins(8, 16, 8, 16)
        main_layout.setSpacing(16)

        for tool, text, tooltip in TOOLS:
            button = QToolButton(self)
            button.setText(text)
            button.setToolTip(tooltip)
            button.setCheckable(True)
            button.setFixedSize(40, 40)
            button.clicked.connect(lambda _checked, t=tool: self.tool_selected.emit(t))
            main_layout.addWidget(button, alignment=Qt.AlignHCenter)
            self.buttons[tool] = button

        main_layout.addStretch()

        self.setStyleSheet("""
            QToolButton {
                border: none;
                border-radius: 8px;
                color: #6b7280;
                font-size: 18px;
            }
            QToolButton:hover {
                background-color: #e5e7eb;
            }
            QToolButton:checked {
                background-color: #3b82f6;
                color: white;
            }
        """)

        # Add shadow
        shadow = QGraphicsDropShadowEffect()
        shadow.setBlurRadius(20)
        shadow.setColor(QColor(0, 0, 0, 80))
        shadow.setOffset(0, 2)
        self.setGraphicsEffect(shadow)

    def set_active_tool(self, tool):
        """Reflect the controller's active tool in the button states."""
        for button_tool, button in self.buttons.items():
            button.setChecked(button_tool == tool)
