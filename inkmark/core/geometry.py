"""
Coordinate transforms between device pixels and document space.

Device space is the on-screen page surface at the current zoom, origin top-left.
Document space is the unscaled page, still top-left for storage; the y-axis is
only flipped to the PDF's bottom-left origin when export instructions are built.
"""
from typing import Tuple

Point = Tuple[float, float]
Rect = Tuple[float, float, float, float]  # min_x, min_y, max_x, max_y


def to_document_space(point: Point, scale: float) -> Point:
    """Map a device point to document space at the given zoom."""
    return point[0] / scale, point[1] / scale


def to_device_space(point: Point, scale: float) -> Point:
    """Map a document point to device pixels at the given zoom."""
    return point[0] * scale, point[1] * scale


def normalize_rect(x0: float, y0: float, x1: float, y1: float) -> Rect:
    """Order two opposite corners into (min_x, min_y, max_x, max_y)."""
    return min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1)


def flip_y(y: float, page_height: float) -> float:
    """Convert a top-left-origin y into the PDF's bottom-left origin."""
    return page_height - y
