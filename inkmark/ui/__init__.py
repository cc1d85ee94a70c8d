"""
Widgets and windows for the annotation editor.
"""

from .annotation_toolbar import AnnotationToolbar
from .main_window import MainWindow
from .overlay_renderer import OverlayRenderer
from .page_label import PageCanvas, TextCaptureInput

__all__ = [
    "AnnotationToolbar",
    "MainWindow",
    "OverlayRenderer",
    "PageCanvas",
    "TextCaptureInput",
]
