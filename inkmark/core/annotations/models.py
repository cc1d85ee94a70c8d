"""
Annotation records.

Every annotation carries its tag in ``annotation_type``; code that needs to
treat kinds differently dispatches on that tag rather than on which fields
happen to be present.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from inkmark.core.errors import AnnotationFormatError
from inkmark.core.geometry import Rect, normalize_rect


class AnnotationType(Enum):
    """Annotation kinds; also used as the identifier of the active tool."""
    FREEHAND = "pencil"
    TEXT = "text"
    HIGHLIGHT = "highlight"
    RECTANGLE = "rectangle"
    ERASER = "eraser"

    @property
    def is_region(self) -> bool:
        """True for tools defined by two opposite corners."""
        return self in REGION_TYPES


REGION_TYPES = frozenset({
    AnnotationType.HIGHLIGHT,
    AnnotationType.RECTANGLE,
    AnnotationType.ERASER,
})


@dataclass
class FreehandAnnotation:
    """A pencil stroke stored as a polyline in document space."""
    page: int  # 1-based page number
    color: str
    stroke_width: float
    points: List[Tuple[float, float]] = field(default_factory=list)

    annotation_type = AnnotationType.FREEHAND

    @property
    def is_renderable(self) -> bool:
        return len(self.points) >= 2

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.annotation_type.value,
            'page': self.page,
            'color': self.color,
            'stroke_width': self.stroke_width,
            'points': [[x, y] for x, y in self.points],
        }


@dataclass
class TextAnnotation:
    """A line of text anchored at its baseline start point."""
    page: int
    color: str
    x: float
    y: float
    text: str
    font_size: float

    annotation_type = AnnotationType.TEXT

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.annotation_type.value,
            'page': self.page,
            'color': self.color,
            'x': self.x,
            'y': self.y,
            'text': self.text,
            'font_size': self.font_size,
        }


@dataclass
class RegionAnnotation:
    """A highlight, rectangle or eraser drag defined by two opposite corners."""
    kind: AnnotationType
    page: int
    color: str
    stroke_width: float
    start_x: float
    start_y: float
    end_x: float
    end_y: float

    def __post_init__(self):
        if not self.kind.is_region:
            raise ValueError(f"{self.kind} is not a region kind")

    @property
    def annotation_type(self) -> AnnotationType:
        return self.kind

    @property
    def bounds(self) -> Rect:
        """Normalized (min_x, min_y, max_x, max_y) of the two corners."""
        return normalize_rect(self.start_x, self.start_y, self.end_x, self.end_y)

    @property
    def is_degenerate(self) -> bool:
        """True when the drag never left its starting point."""
        return self.start_x == self.end_x and self.start_y == self.end_y

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.kind.value,
            'page': self.page,
            'color': self.color,
            'stroke_width': self.stroke_width,
            'start_x': self.start_x,
            'start_y': self.start_y,
            'end_x': self.end_x,
            'end_y': self.end_y,
        }


Annotation = Union[FreehandAnnotation, TextAnnotation, RegionAnnotation]


def annotation_from_dict(data: Dict[str, Any]) -> Annotation:
    """
    Create an annotation from its dictionary form.

    Args:
        data: Dictionary produced by ``to_dict``

    Returns:
        The decoded annotation

    Raises:
        AnnotationFormatError: If the type is unknown or a field is missing
    """
    try:
        annotation_type = AnnotationType(data['type'])

        if annotation_type == AnnotationType.FREEHAND:
            points = [(float(p[0]), float(p[1])) for p in data['points']]
            if not points:
                raise AnnotationFormatError("Freehand annotation has no points")
            return FreehandAnnotation(
                page=int(data['page']),
                color=data['color'],
                stroke_width=float(data.get('stroke_width', 2.0)),
                points=points,
            )

        if annotation_type == AnnotationType.TEXT:
            return TextAnnotation(
                page=int(data['page']),
                color=data['color'],
                x=float(data['x']),
                y=float(data['y']),
                text=str(data['text']),
                font_size=float(data['font_size']),
            )

        return RegionAnnotation(
            kind=annotation_type,
            page=int(data['page']),
            color=data['color'],
            stroke_width=float(data.get('stroke_width', 2.0)),
            start_x=float(data['start_x']),
            start_y=float(data['start_y']),
            end_x=float(data['end_x']),
            end_y=float(data['end_y']),
        )
    except AnnotationFormatError:
        raise
    except (KeyError, TypeError, ValueError, IndexError) as e:
        raise AnnotationFormatError(f"Invalid annotation data {data!r}: {e}") from e


@dataclass
class AnnotationSnapshot:
    """Serializable state of one document's annotations."""
    document_name: str
    annotations: List[Annotation]
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'document_name': self.document_name,
            'annotations': [ann.to_dict() for ann in self.annotations],
            'timestamp': self.timestamp,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any],
                  skipped: Optional[List[Dict[str, Any]]] = None) -> 'AnnotationSnapshot':
        """
        Create a snapshot from its dictionary form.

        Entries that cannot be decoded are left out and appended to ``skipped``
        when a list is given, so one bad record never sinks the whole load.
        """
        annotations = []
        for ann_data in data.get('annotations', []):
            try:
                annotations.append(annotation_from_dict(ann_data))
            except AnnotationFormatError:
                if skipped is not None:
                    skipped.append(ann_data)

        return AnnotationSnapshot(
            document_name=data.get('document_name', ''),
            annotations=annotations,
            timestamp=data.get('timestamp', ''),
        )
