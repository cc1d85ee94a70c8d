"""
Paints annotations onto a transparent overlay the size of the displayed page.
"""
from typing import Iterable, Optional

from PyQt5.QtCore import QPointF, QRectF, Qt
from PyQt5.QtGui import QBrush, QColor, QFont, QImage, QPainter, QPainterPath, QPen

from inkmark.core.annotations import (
    Annotation,
    AnnotationType,
    FreehandAnnotation,
    RegionAnnotation,
    TextAnnotation,
)
from inkmark.utils.colors import parse_color_or_black

ERASER_PREVIEW_COLOR = QColor(255, 0, 0)
ERASER_DASH_PATTERN = [5, 5]
TEXT_FONT_FAMILY = "Arial"


def to_qcolor(value: Optional[str]) -> QColor:
    """Convert a stored color string into a QColor, black when malformed."""
    r, g, b, alpha = parse_color_or_black(value)
    return QColor(r, g, b, round(alpha * 255))


class OverlayRenderer:
    """
    Owns the overlay surface and repaints it from the annotation model.

    All painting happens in document coordinates; the painter is scaled once
    per frame instead of converting every point.
    """

    def __init__(self):
        self._surface = QImage(1, 1, QImage.Format_ARGB32_Premultiplied)
        self._surface.fill(Qt.transparent)

    @property
    def surface(self) -> QImage:
        return self._surface

    def resize_surface(self, width: int, height: int) -> bool:
        """
        Recreate the surface for a new displayed page size.

        Returns:
            True if the surface was recreated
        """
        width, height = max(1, int(width)), max(1, int(height))
        if self._surface.width() == width and self._surface.height() == height:
            return False
        self._surface = QImage(width, height, QImage.Format_ARGB32_Premultiplied)
        self._surface.fill(Qt.transparent)
        return True

    def render(self, annotations: Iterable[Annotation], page: int, scale: float,
               in_progress: Optional[Annotation] = None) -> QImage:
        """
        Repaint the overlay.

        Args:
            annotations: Committed annotations in paint order
            page: 1-based page currently displayed
            scale: Current zoom factor
            in_progress: Annotation being drawn, painted on top

        Returns:
            The repainted surface
        """
        self._surface.fill(Qt.transparent)

        painter = QPainter(self._surface)
        try:
            painter.setRenderHint(QPainter.Antialiasing)
            painter.scale(scale, scale)

            for annotation in annotations:
                if annotation.page == page:
                    self._paint(painter, annotation)

            if in_progress is not None and in_progress.page == page:
                self._paint(painter, in_progress)
        finally:
            painter.end()

        return self._surface

    def _paint(self, painter: QPainter, annotation: Annotation) -> None:
        painter.save()
        annotation_type = annotation.annotation_type

        if annotation_type == AnnotationType.FREEHAND:
            self._paint_freehand(painter, annotation)
        elif annotation_type == AnnotationType.TEXT:
            self._paint_text(painter, annotation)
        elif annotation_type == AnnotationType.HIGHLIGHT:
            self._paint_highlight(painter, annotation)
        elif annotation_type == AnnotationType.RECTANGLE:
            self._paint_rectangle(painter, annotation)
        elif annotation_type == AnnotationType.ERASER:
            self._paint_eraser(painter, annotation)

        painter.restore()

    def _paint_freehand(self, painter: QPainter, annotation: FreehandAnnotation) -> None:
        if not annotation.is_renderable:
            return

        pen = QPen(to_qcolor(annotation.color), annotation.stroke_width)
        pen.setCapStyle(Qt.RoundCap)
        pen.setJoinStyle(Qt.RoundJoin)
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)

        path = QPainterPath()
        first_point = annotation.points[0]
        path.moveTo(first_point[0], first_point[1])
        for x, y in annotation.points[1:]:
            path.lineTo(x, y)
        painter.drawPath(path)

    def _paint_text(self, painter: QPainter, annotation: TextAnnotation) -> None:
        font = QFont(TEXT_FONT_FAMILY)
        font.setPixelSize(max(1, round(annotation.font_size)))
        painter.setFont(font)
        painter.setPen(to_qcolor(annotation.color))
        # The anchor is the start of the baseline
        painter.drawText(QPointF(annotation.x, annotation.y), annotation.text)

    def _paint_highlight(self, painter: QPainter, annotation: RegionAnnotation) -> None:
        painter.setPen(Qt.NoPen)
        painter.setBrush(QBrush(to_qcolor(annotation.color)))
        painter.drawRect(self._region_rect(annotation))

    def _paint_rectangle(self, painter: QPainter, annotation: RegionAnnotation) -> None:
        painter.setPen(QPen(to_qcolor(annotation.color), annotation.stroke_width))
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(self._region_rect(annotation))

    def _paint_eraser(self, painter: QPainter, annotation: RegionAnnotation) -> None:
        # Dashed red outline marks what is about to be deleted
        width = annotation.stroke_width
        pen = QPen(ERASER_PREVIEW_COLOR, width)
        # Qt measures dashes in pen widths
        pen.setDashPattern([d / max(width, 1.0) for d in ERASER_DASH_PATTERN])
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(self._region_rect(annotation))

    @staticmethod
    def _region_rect(annotation: RegionAnnotation) -> QRectF:
        min_x, min_y, max_x, max_y = annotation.bounds
        return QRectF(min_x, min_y, max_x - min_x, max_y - min_y)
