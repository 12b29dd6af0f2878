"""
Presentation — Display primitives

Contains display and formatting:
- Symbols: Glyph sets (unicode/ascii)
- Text: Escape-aware width, sanitizing, coloring
- Values: FieldValue formatting and color selection
"""

from .symbols import SymbolSet, UNICODE, ASCII, get_symbols
from .text import strip_escapes, visible_width, sanitize_control_chars, colorize
from .values import ValueFormatter, parse_date

__all__ = [
    # Symbols
    "SymbolSet", "UNICODE", "ASCII", "get_symbols",
    # Text
    "strip_escapes", "visible_width", "sanitize_control_chars", "colorize",
    # Values
    "ValueFormatter", "parse_date",
]
