"""
Eraser hit-testing.

The eraser is a rectangle dragged in document space. An annotation is erased
as a whole when its geometry touches that rectangle; strokes are never split.
"""
from dataclasses import dataclass
from typing import Iterable, List

from inkmark.core.geometry import normalize_rect
from .models import (
    Annotation,
    AnnotationType,
    FreehandAnnotation,
    RegionAnnotation,
    TextAnnotation,
)


@dataclass(frozen=True)
class EraseRegion:
    """Axis-aligned erase rectangle with inclusive bounds."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @staticmethod
    def from_corners(x0: float, y0: float, x1: float, y1: float) -> 'EraseRegion':
        """Build a region from two opposite corners in any drag direction."""
        return EraseRegion(*normalize_rect(x0, y0, x1, y1))

    @staticmethod
    def from_annotation(annotation: RegionAnnotation) -> 'EraseRegion':
        return EraseRegion(*annotation.bounds)

    def contains_point(self, x: float, y: float) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y

    def overlaps(self, min_x: float, min_y: float, max_x: float, max_y: float) -> bool:
        """Standard AABB overlap test, touching edges count."""
        return (max_x >= self.min_x and min_x <= self.max_x and
                max_y >= self.min_y and min_y <= self.max_y)


def intersects(annotation: Annotation, region: EraseRegion) -> bool:
    """
    Check whether an annotation is hit by the eraser region.

    Args:
        annotation: Annotation to test
        region: Normalized erase rectangle in document space

    Returns:
        True if the annotation should be erased
    """
    annotation_type = annotation.annotation_type

    if annotation_type == AnnotationType.TEXT:
        # Only the anchor counts, not the rendered text extent
        text: TextAnnotation = annotation
        return region.contains_point(text.x, text.y)

    if annotation_type == AnnotationType.FREEHAND:
        stroke: FreehandAnnotation = annotation
        return any(region.contains_point(x, y) for x, y in stroke.points)

    if annotation_type in (AnnotationType.HIGHLIGHT, AnnotationType.RECTANGLE):
        return region.overlaps(*annotation.bounds)

    # Eraser drags are never part of the collection
    return False


def find_erased(annotations: Iterable[Annotation], region: EraseRegion,
                page: int) -> List[Annotation]:
    """
    Get the annotations on ``page`` that the eraser region hits.

    Args:
        annotations: Annotations to test, in collection order
        region: Normalized erase rectangle
        page: 1-based page the eraser was used on

    Returns:
        Matching annotations, in collection order
    """
    return [ann for ann in annotations
            if ann.page == page and intersects(ann, region)]
