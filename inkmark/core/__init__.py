"""
Core business logic for Inkmark.
"""
from .annotations import Annotation, AnnotationManager, AnnotationType
from .errors import (
    AnnotationFormatError,
    DocumentLoadError,
    ExportError,
    InkmarkError,
    InvalidPageError,
)
from .session import DrawSession, TextCapture

__all__ = [
    "Annotation",
    "AnnotationManager",
    "AnnotationType",
    "AnnotationFormatError",
    "DocumentLoadError",
    "ExportError",
    "InkmarkError",
    "InvalidPageError",
    "DrawSession",
    "TextCapture",
]
