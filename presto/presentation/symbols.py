"""
Symbols — Glyph sets for table borders and tree connectors

Two explicit sets, chosen by configuration (display.symbols):

    UNICODE   ┌─┬─┐ │ ├── └── │
    ASCII     +-+-+ | +-- `-- |

No terminal sniffing: callers pick the set.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SymbolSet:
    """Complete set of glyphs used by the layout renderers."""
    name: str

    # Tree connectors (4 columns each)
    tree_branch: str    # non-last child
    tree_last: str      # last child
    tree_continue: str  # ancestor prefix below a non-last node
    tree_indent: str    # ancestor prefix below a last node

    # Table borders
    box_h: str       # horizontal ─ or -
    box_v: str       # vertical │ or |
    box_tl: str      # top-left ┌ or +
    box_tr: str      # top-right ┐ or +
    box_bl: str      # bottom-left └ or +
    box_br: str      # bottom-right ┘ or +
    box_cross: str   # cross ┼ or +
    box_t_down: str  # T down ┬ or +
    box_t_up: str    # T up ┴ or +
    box_t_right: str # T right ├ or +
    box_t_left: str  # T left ┤ or +


UNICODE = SymbolSet(
    name='unicode',
    # Tree
    tree_branch='├── ',
    tree_last='└── ',
    tree_continue='│   ',
    tree_indent='    ',
    # Table borders
    box_h='─',
    box_v='│',
    box_tl='┌',
    box_tr='┐',
    box_bl='└',
    box_br='┘',
    box_cross='┼',
    box_t_down='┬',
    box_t_up='┴',
    box_t_right='├',
    box_t_left='┤',
)

ASCII = SymbolSet(
    name='ascii',
    # Tree
    tree_branch='+-- ',
    tree_last='`-- ',
    tree_continue='|   ',
    tree_indent='    ',
    # Table borders
    box_h='-',
    box_v='|',
    box_tl='+',
    box_tr='+',
    box_bl='+',
    box_br='+',
    box_cross='+',
    box_t_down='+',
    box_t_up='+',
    box_t_right='+',
    box_t_left='+',
)

SYMBOL_SETS = {
    'unicode': UNICODE,
    'ascii': ASCII,
}

VALID_SYMBOLS = tuple(SYMBOL_SETS)


def get_symbols(preference: Optional[str] = None) -> SymbolSet:
    """
    Get the symbol set for a preference.

    Args:
        preference: "unicode" or "ascii" (None = unicode)

    Returns:
        Matching SymbolSet

    Raises:
        ValueError: If preference names no known set
    """
    if preference is None:
        return UNICODE
    try:
        return SYMBOL_SETS[preference.lower()]
    except KeyError:
        valid = ", ".join(VALID_SYMBOLS)
        raise ValueError(f"Unknown symbol set '{preference}'. Valid: {valid}") from None
