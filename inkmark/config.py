"""
Editor settings: tool styles, zoom limits and export naming.

Settings are read from ``settings.json`` in the per-user config directory.
Any key may be omitted; a missing or broken file leaves the defaults in place.
"""
import json
import logging
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

from inkmark.utils.colors import parse_color
from inkmark.utils.resource_loader import get_config_dir

logger = logging.getLogger(__name__)

SETTINGS_FILE_NAME = "settings.json"


@dataclass(frozen=True)
class ToolStyle:
    """Color and stroke width a tool gives to new annotations."""
    color: str
    stroke_width: float


def _default_tool_styles() -> Dict[str, ToolStyle]:
    # Keyed by tool name as stored in annotations ("pencil", "highlight", ...)
    return {
        "pencil": ToolStyle("#ff0000", 2.0),
        "highlight": ToolStyle("rgba(255, 255, 0, 0.4)", 20.0),
        "rectangle": ToolStyle("#3b82f6", 2.0),
        "eraser": ToolStyle("#3b82f6", 2.0),
    }


@dataclass
class EditorSettings:
    """User-tunable editor behaviour."""
    tool_styles: Dict[str, ToolStyle] = field(default_factory=_default_tool_styles)
    text_color: str = "#000000"
    base_font_size: float = 16.0
    min_zoom: float = 0.5
    max_zoom: float = 3.0
    zoom_step: float = 0.2
    default_zoom: float = 1.0
    export_suffix: str = "_annotated"

    def style_for(self, tool) -> ToolStyle:
        """Style for a tool, given as an AnnotationType or its name."""
        return self.tool_styles[getattr(tool, "value", tool)]

    def clamp_zoom(self, scale: float) -> float:
        return max(self.min_zoom, min(self.max_zoom, scale))

    def zoom_in(self, scale: float) -> float:
        return self.clamp_zoom(round(scale + self.zoom_step, 2))

    def zoom_out(self, scale: float) -> float:
        return self.clamp_zoom(round(scale - self.zoom_step, 2))

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> 'EditorSettings':
        """
        Build settings from a parsed settings file.

        Unknown keys are ignored; values of the wrong type are logged and skipped.
        """
        settings = EditorSettings()
        scalar_fields = {f.name for f in fields(EditorSettings)
                         if f.name != 'tool_styles'}
        updates = {}

        for key, value in data.items():
            if key == 'tools':
                continue
            if key not in scalar_fields:
                logger.debug("Ignoring unknown setting %r", key)
                continue
            default = getattr(settings, key)
            try:
                updates[key] = type(default)(value)
            except (TypeError, ValueError):
                logger.warning("Invalid value %r for setting %r", value, key)

        if 'text_color' in updates and parse_color(updates['text_color']) is None:
            logger.warning("Invalid text color %r", updates.pop('text_color'))

        for key in ('zoom_step', 'base_font_size'):
            if key in updates and updates[key] <= 0:
                logger.warning("Setting %r must be positive, got %r", key, updates.pop(key))

        styles = dict(settings.tool_styles)
        tools = data.get('tools') or {}
        if not isinstance(tools, dict):
            logger.warning("Setting 'tools' must be an object")
            tools = {}
        for tool_name, style_data in tools.items():
            try:
                current = styles[tool_name]
                color = style_data.get('color', current.color)
                if parse_color(color) is None:
                    raise ValueError(f"bad color {color!r}")
                stroke_width = float(style_data.get('stroke_width', current.stroke_width))
                if stroke_width <= 0:
                    raise ValueError(f"stroke width must be positive, got {stroke_width!r}")
                styles[tool_name] = ToolStyle(color=color, stroke_width=stroke_width)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning("Ignoring style for tool %r: %s", tool_name, e)
        updates['tool_styles'] = styles

        settings = replace(settings, **updates)
        if not 0 < settings.min_zoom <= settings.default_zoom <= settings.max_zoom:
            logger.warning("Inconsistent zoom limits, using defaults")
            settings = replace(settings, min_zoom=0.5, max_zoom=3.0, default_zoom=1.0)
        return settings


def load_settings(path: Optional[Union[str, Path]] = None) -> EditorSettings:
    """
    Load editor settings.

    Args:
        path: Settings file, defaults to ``settings.json`` in the config dir

    Returns:
        Loaded settings, or defaults if the file is absent or unreadable
    """
    if path is None:
        path = get_config_dir() / SETTINGS_FILE_NAME
    path = Path(path)

    if not path.exists():
        return EditorSettings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning("Could not read settings from %s: %s", path, e)
        return EditorSettings()

    if not isinstance(data, dict):
        logger.warning("Settings file %s is not a JSON object", path)
        return EditorSettings()

    return EditorSettings.from_dict(data)
