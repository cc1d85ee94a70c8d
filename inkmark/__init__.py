"""
Inkmark: draw, highlight and write on PDF pages, then bake the markup into a copy.
"""

__version__ = "0.3.0"
