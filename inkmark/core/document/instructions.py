"""
Primitive draw instructions handed to the document writer.

All coordinates are PDF-native: unscaled points, origin at the bottom-left
corner of the page.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union

RGB = Tuple[float, float, float]  # channels in 0-1


@dataclass(frozen=True)
class RectangleInstruction:
    """Axis-aligned rectangle; (x, y) is its bottom-left corner."""
    x: float
    y: float
    width: float
    height: float
    fill_color: Optional[RGB] = None
    border_color: Optional[RGB] = None
    border_width: float = 0.0
    opacity: float = 1.0


@dataclass(frozen=True)
class LineInstruction:
    """Straight segment between two points."""
    start: Tuple[float, float]
    end: Tuple[float, float]
    thickness: float
    color: RGB


@dataclass(frozen=True)
class TextInstruction:
    """Single line of text; (x, y) is the start of its baseline."""
    x: float
    y: float
    text: str
    size: float
    color: RGB


Instruction = Union[RectangleInstruction, LineInstruction, TextInstruction]


@dataclass
class PageInstructions:
    """Ordered instructions for one page."""
    page: int  # 1-based
    height: float
    instructions: List[Instruction] = field(default_factory=list)

    @property
    def needs_font(self) -> bool:
        return any(isinstance(i, TextInstruction) for i in self.instructions)
