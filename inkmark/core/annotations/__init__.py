"""
Annotation model, eraser hit-testing and snapshot persistence.
"""
from .models import (
    Annotation,
    AnnotationSnapshot,
    AnnotationType,
    FreehandAnnotation,
    RegionAnnotation,
    TextAnnotation,
    annotation_from_dict,
)
from .hit_testing import EraseRegion, find_erased, intersects
from .manager import AnnotationManager
from .persistence import AnnotationPersistence

__all__ = [
    'Annotation',
    'AnnotationSnapshot',
    'AnnotationType',
    'FreehandAnnotation',
    'RegionAnnotation',
    'TextAnnotation',
    'annotation_from_dict',
    'EraseRegion',
    'find_erased',
    'intersects',
    'AnnotationManager',
    'AnnotationPersistence',
]
