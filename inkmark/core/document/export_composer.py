"""
Turns the annotation model into per-page draw instructions.

The model stores y growing downward from the top of the page; PDF pages put
the origin at the bottom-left, so every y is flipped against the page height.
"""
import logging
from collections import OrderedDict
from typing import Dict, Iterable, List, Mapping

from inkmark.core.annotations.models import (
    Annotation,
    AnnotationType,
    FreehandAnnotation,
    RegionAnnotation,
    TextAnnotation,
)
from inkmark.core.geometry import flip_y
from inkmark.utils.colors import to_normalized_rgb
from .instructions import (
    Instruction,
    LineInstruction,
    PageInstructions,
    RectangleInstruction,
    TextInstruction,
)

logger = logging.getLogger(__name__)

HIGHLIGHT_FILL = (1.0, 1.0, 0.4)
HIGHLIGHT_OPACITY = 0.4


class ExportComposer:
    """Builds the instruction list the PDF writer replays onto each page."""

    def compose(self, annotations: Iterable[Annotation],
                page_heights: Mapping[int, float]) -> List[PageInstructions]:
        """
        Compose draw instructions for every annotated page.

        Args:
            annotations: Committed annotations in collection order
            page_heights: Height of each 1-based page in points

        Returns:
            One entry per annotated page, in ascending page order
        """
        by_page: Dict[int, PageInstructions] = OrderedDict()

        for annotation in annotations:
            height = page_heights.get(annotation.page)
            if height is None:
                logger.warning("Skipping annotation on missing page %d", annotation.page)
                continue

            instructions = self.compose_annotation(annotation, height)
            if not instructions:
                continue

            page = by_page.get(annotation.page)
            if page is None:
                page = by_page[annotation.page] = PageInstructions(annotation.page, height)
            page.instructions.extend(instructions)

        return [by_page[page] for page in sorted(by_page)]

    def compose_annotation(self, annotation: Annotation,
                           page_height: float) -> List[Instruction]:
        """
        Convert a single annotation into instructions for a page of the given height.
        """
        annotation_type = annotation.annotation_type

        if annotation_type == AnnotationType.HIGHLIGHT:
            return [self._highlight(annotation, page_height)]
        if annotation_type == AnnotationType.RECTANGLE:
            return [self._rectangle(annotation, page_height)]
        if annotation_type == AnnotationType.TEXT:
            return [self._text(annotation, page_height)]
        if annotation_type == AnnotationType.FREEHAND:
            return self._freehand(annotation, page_height)

        # Eraser drags never reach the collection
        return []

    def _highlight(self, annotation: RegionAnnotation, page_height: float) -> RectangleInstruction:
        # The stored color only tints the on-screen preview
        x, y, width, height = self._pdf_box(annotation, page_height)
        return RectangleInstruction(
            x=x, y=y, width=width, height=height,
            fill_color=HIGHLIGHT_FILL,
            opacity=HIGHLIGHT_OPACITY,
        )

    def _rectangle(self, annotation: RegionAnnotation, page_height: float) -> RectangleInstruction:
        x, y, width, height = self._pdf_box(annotation, page_height)
        return RectangleInstruction(
            x=x, y=y, width=width, height=height,
            border_color=to_normalized_rgb(annotation.color),
            border_width=annotation.stroke_width,
            opacity=1.0,
        )

    def _text(self, annotation: TextAnnotation, page_height: float) -> TextInstruction:
        return TextInstruction(
            x=annotation.x,
            y=flip_y(annotation.y, page_height),
            text=annotation.text,
            size=annotation.font_size,
            color=to_normalized_rgb(annotation.color),
        )

    def _freehand(self, annotation: FreehandAnnotation, page_height: float) -> List[LineInstruction]:
        color = to_normalized_rgb(annotation.color)
        points = [(x, flip_y(y, page_height)) for x, y in annotation.points]
        return [
            LineInstruction(
                start=start,
                end=end,
                thickness=annotation.stroke_width,
                color=color,
            )
            for start, end in zip(points, points[1:])
        ]

    @staticmethod
    def _pdf_box(annotation: RegionAnnotation, page_height: float):
        """Bottom-left corner and size of a region in PDF space."""
        min_x, min_y, max_x, max_y = annotation.bounds
        return min_x, flip_y(max_y, page_height), max_x - min_x, max_y - min_y
