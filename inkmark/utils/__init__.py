"""
Utility functions and helpers.
"""
from .colors import parse_color, parse_color_or_black, to_normalized_rgb
from .log import setup_logging
from .resource_loader import get_annotations_dir, get_app_data_dir, get_config_dir

__all__ = [
    # Colors
    'parse_color',
    'parse_color_or_black',
    'to_normalized_rgb',

    # Logging
    'setup_logging',

    # Directories
    'get_app_data_dir',
    'get_config_dir',
    'get_annotations_dir',
]
