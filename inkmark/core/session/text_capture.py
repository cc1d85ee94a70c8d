"""
Inline text capture.

Clicking with the text tool does not start a pointer drag. It arms a small,
independent capture that lives until its input loses focus or Enter is
pressed (commit) or it is cancelled (discard). The pointer state machine keeps
running while a capture is open.
"""
import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from inkmark.core.annotations.models import TextAnnotation

logger = logging.getLogger(__name__)


class CaptureState(Enum):
    ARMED = "armed"
    EDITING = "editing"
    COMMITTED = "committed"
    DISCARDED = "discarded"


class TextCapture:
    """One pending text entry anchored on a page."""

    def __init__(self, page: int, anchor: Tuple[float, float],
                 device_anchor: Tuple[float, float], font_size: float,
                 color: str, on_commit: Callable[[TextAnnotation], None]):
        """
        Args:
            page: 1-based page the text belongs to
            anchor: Baseline start in document space
            device_anchor: Same point in device pixels, for placing the input
            font_size: Font size in document units
            color: Text color string
            on_commit: Receives the annotation when non-empty text is committed
        """
        self.page = page
        self.anchor = anchor
        self.device_anchor = device_anchor
        self.font_size = font_size
        self.color = color
        self.text = ""
        self.state = CaptureState.ARMED
        self.annotation: Optional[TextAnnotation] = None
        self._on_commit = on_commit

    @property
    def is_open(self) -> bool:
        return self.state in (CaptureState.ARMED, CaptureState.EDITING)

    def begin_editing(self) -> None:
        """The input surface is shown and focused."""
        if self.state == CaptureState.ARMED:
            self.state = CaptureState.EDITING

    def set_text(self, text: str) -> None:
        if self.is_open:
            self.text = text

    def commit(self) -> Optional[TextAnnotation]:
        """
        Finish the capture, as on blur or Enter.

        Returns:
            The committed annotation, or None if the text was blank or the
            capture had already finished
        """
        if not self.is_open:
            return None

        if not self.text.strip():
            self.state = CaptureState.DISCARDED
            return None

        self.annotation = TextAnnotation(
            page=self.page,
            color=self.color,
            x=self.anchor[0],
            y=self.anchor[1],
            text=self.text,
            font_size=self.font_size,
        )
        self.state = CaptureState.COMMITTED
        self._on_commit(self.annotation)
        return self.annotation

    def discard(self) -> None:
        """Cancel without committing."""
        if self.is_open:
            self.state = CaptureState.DISCARDED
            logger.debug("Discarded text capture on page %d", self.page)
