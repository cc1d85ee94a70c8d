"""
Pointer-driven drawing state machine.

One pointer-down / move / up cycle produces at most one committed annotation,
or, with the eraser, removes any number of them. Input arrives in device
pixels and is stored in document space.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from inkmark.config import EditorSettings
from inkmark.core.annotations import (
    Annotation,
    AnnotationManager,
    AnnotationType,
    EraseRegion,
    FreehandAnnotation,
    RegionAnnotation,
)
from inkmark.core.errors import InvalidPageError
from inkmark.core.geometry import to_document_space
from .text_capture import TextCapture

logger = logging.getLogger(__name__)


class SessionState(Enum):
    IDLE = "idle"
    DRAWING = "drawing"


@dataclass
class PointerUpResult:
    """What a pointer-up did to the annotation model."""
    committed: Optional[Annotation] = None
    erased: List[Annotation] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return self.committed is not None or bool(self.erased)


class DrawSession:
    """Turns pointer events on the current page into annotation commits."""

    def __init__(self, manager: AnnotationManager,
                 settings: Optional[EditorSettings] = None):
        self.manager = manager
        self.settings = settings or EditorSettings()

        self.tool: Optional[AnnotationType] = None
        self.page: int = 1
        self.scale: float = self.settings.default_zoom

        self.state = SessionState.IDLE
        self.start_point: Optional[tuple] = None
        self.in_progress: Optional[Annotation] = None
        self._pending_text: Optional[TextCapture] = None

    @property
    def pending_text(self) -> Optional[TextCapture]:
        """The open text capture, if any."""
        if self._pending_text is not None and self._pending_text.is_open:
            return self._pending_text
        return None

    @property
    def is_drawing(self) -> bool:
        return self.state == SessionState.DRAWING

    def set_tool(self, tool: Optional[AnnotationType]) -> None:
        """
        Switch the active tool; ``None`` disables drawing.

        A drag in progress is dropped without committing.
        """
        if tool == self.tool:
            return
        self._discard_in_progress()
        if tool != AnnotationType.TEXT:
            self.discard_pending_text()
        self.tool = tool

    def set_page(self, page: int) -> None:
        """
        Change the page pointer input applies to.

        Raises:
            InvalidPageError: If the page is outside the loaded document
        """
        if not self.manager.is_valid_page(page):
            raise InvalidPageError(page, self.manager.page_count)
        if page != self.page:
            self._discard_in_progress()
        self.page = page

    def set_scale(self, scale: float) -> None:
        if scale <= 0:
            raise ValueError(f"Scale must be positive, got {scale}")
        self.scale = scale

    def reset(self) -> None:
        """Drop all transient state, as when a document is closed."""
        self._discard_in_progress()
        self.discard_pending_text()
        self.page = 1

    def pointer_down(self, device_x: float, device_y: float) -> Optional[TextCapture]:
        """
        Start an interaction at a device point.

        Returns:
            A new text capture when the text tool is active, otherwise None
        """
        if self.tool is None or self.is_drawing:
            return None

        x, y = to_document_space((device_x, device_y), self.scale)

        if self.tool == AnnotationType.TEXT:
            return self._spawn_text_capture((x, y), (device_x, device_y))

        self.start_point = (x, y)
        style = self.settings.style_for(self.tool)

        if self.tool == AnnotationType.FREEHAND:
            self.in_progress = FreehandAnnotation(
                page=self.page,
                color=style.color,
                stroke_width=style.stroke_width,
                points=[(x, y)],
            )
        else:
            self.in_progress = RegionAnnotation(
                kind=self.tool,
                page=self.page,
                color=style.color,
                stroke_width=style.stroke_width,
                start_x=x,
                start_y=y,
                end_x=x,
                end_y=y,
            )

        self.state = SessionState.DRAWING
        return None

    def pointer_move(self, device_x: float, device_y: float) -> bool:
        """
        Extend the drag to a device point.

        Returns:
            True if the in-progress annotation changed and needs a repaint
        """
        if not self.is_drawing or self.in_progress is None:
            return False

        x, y = to_document_space((device_x, device_y), self.scale)

        if self.in_progress.annotation_type == AnnotationType.FREEHAND:
            self.in_progress.points.append((x, y))
        else:
            # The start corner stays fixed; only the opposite corner follows
            self.in_progress.end_x = x
            self.in_progress.end_y = y
        return True

    def pointer_up(self) -> PointerUpResult:
        """Finish the drag, committing or erasing as the tool dictates."""
        if not self.is_drawing or self.in_progress is None:
            return PointerUpResult()

        annotation = self.in_progress
        self.in_progress = None
        self.start_point = None
        self.state = SessionState.IDLE

        annotation_type = annotation.annotation_type

        if annotation_type == AnnotationType.ERASER:
            region = EraseRegion.from_annotation(annotation)
            erased = self.manager.erase(region, annotation.page)
            if erased:
                logger.info("Erased %d annotation(s) on page %d",
                            len(erased), annotation.page)
            return PointerUpResult(erased=erased)

        if annotation_type == AnnotationType.FREEHAND:
            if not annotation.is_renderable:
                return PointerUpResult()
        elif annotation.is_degenerate:
            # A click without a drag leaves nothing visible
            return PointerUpResult()

        self.manager.add_annotation(annotation)
        return PointerUpResult(committed=annotation)

    def discard_pending_text(self) -> None:
        if self._pending_text is not None:
            self._pending_text.discard()
            self._pending_text = None

    def _spawn_text_capture(self, anchor, device_anchor) -> TextCapture:
        if self.pending_text is not None:
            # Clicking elsewhere blurs the open input, which commits it
            self.pending_text.commit()

        capture = TextCapture(
            page=self.page,
            anchor=anchor,
            device_anchor=device_anchor,
            font_size=self.settings.base_font_size / self.scale,
            color=self.settings.text_color,
            on_commit=self._commit_text,
        )
        self._pending_text = capture
        return capture

    def _commit_text(self, annotation) -> None:
        self.manager.add_annotation(annotation)

    def _discard_in_progress(self) -> None:
        if self.in_progress is not None:
            logger.debug("Discarding in-progress %s annotation",
                         self.in_progress.annotation_type.value)
        self.in_progress = None
        self.start_point = None
        self.state = SessionState.IDLE
