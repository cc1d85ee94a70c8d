"""
Color string handling.

Annotation colors are stored the way the toolbar produces them: CSS-style hex
(``#f00``, ``#ff0000``, ``#ff000080``) or ``rgb(...)``/``rgba(...)`` functions.
"""
import logging
import re
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, float]

BLACK: RGBA = (0, 0, 0, 1.0)

_HEX_RE = re.compile(r"^#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
_FUNC_RE = re.compile(r"^rgba?\(\s*([^)]*)\)$", re.IGNORECASE)


def parse_color(value: Optional[str]) -> Optional[RGBA]:
    """
    Decode a color string into an (r, g, b, alpha) tuple.

    Args:
        value: Hex or rgb()/rgba() color string

    Returns:
        Channels 0-255 and alpha 0.0-1.0, or None if the string is malformed
    """
    if not value or not isinstance(value, str):
        return None

    value = value.strip()

    match = _FUNC_RE.match(value)
    if match:
        parts = [p.strip() for p in match.group(1).split(",")]
        if len(parts) not in (3, 4):
            return None
        try:
            r, g, b = (int(float(p)) for p in parts[:3])
            alpha = float(parts[3]) if len(parts) == 4 else 1.0
        except ValueError:
            return None
        if not all(0 <= c <= 255 for c in (r, g, b)) or not 0.0 <= alpha <= 1.0:
            return None
        return r, g, b, alpha

    match = _HEX_RE.match(value)
    if not match:
        return None

    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)

    r = int(digits[0:2], 16)
    g = int(digits[2:4], 16)
    b = int(digits[4:6], 16)
    alpha = int(digits[6:8], 16) / 255.0 if len(digits) == 8 else 1.0
    return r, g, b, alpha


def parse_color_or_black(value: Optional[str]) -> RGBA:
    """Like parse_color, but malformed or missing colors become opaque black."""
    rgba = parse_color(value)
    if rgba is None:
        logger.warning("Unrecognized color %r, using black", value)
        return BLACK
    return rgba


def to_normalized_rgb(value: Optional[str]) -> Tuple[float, float, float]:
    """
    Decode a color string into channels in the 0-1 range used by PDF writers.

    Malformed or absent colors fall back to black rather than failing.
    """
    r, g, b, _ = parse_color_or_black(value)
    return r / 255.0, g / 255.0, b / 255.0
