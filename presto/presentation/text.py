"""
Text — Terminal text measurement and coloring

Layout code must measure what the terminal shows, not what the string
holds. strip_escapes() drops escape sequences:

    ESC '[' ... final byte in '@'..'~'   (CSI, e.g. colors)
    ESC <any single char>                (two-byte sequences)

Coloring uses rich styles so color names and hex codes share one parser.
"""

import logging
from typing import Optional

from rich.color import ColorSystem
from rich.errors import StyleSyntaxError
from rich.style import Style

logger = logging.getLogger(__name__)

ESC = "\x1b"

# Names accepted in annotations that rich spells differently
COLOR_ALIASES = {
    "gray": "bright_black",
    "grey": "bright_black",
}


def strip_escapes(text: str) -> str:
    """Remove terminal escape sequences from text."""
    if ESC not in text:
        return text

    result = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char != ESC:
            result.append(char)
            i += 1
            continue
        i += 1
        if i < length and text[i] == "[":
            i += 1
            while i < length and not ("@" <= text[i] <= "~"):
                i += 1
        # Skip the final byte (CSI) or the single escaped char
        i += 1
    return "".join(result)


def visible_width(text: str) -> int:
    """Display width of text once escape sequences are removed."""
    return len(strip_escapes(text))


def sanitize_control_chars(text: str) -> str:
    """
    Remove control characters from untrusted text.

    Preserves: newlines (\\n), tabs (\\t), carriage returns (\\r)
    """
    if not text:
        return text
    return "".join(ch for ch in text if ord(ch) >= 32 or ch in "\t\n\r")


def parse_style(color: Optional[str]) -> Optional[Style]:
    """Parse a color/style name into a rich Style; None when invalid."""
    if not color:
        return None
    try:
        return Style.parse(COLOR_ALIASES.get(color.lower(), color))
    except StyleSyntaxError:
        logger.debug("Ignoring unknown color '%s'", color)
        return None


def colorize(text: str, color: Optional[str]) -> str:
    """
    Wrap text in ANSI escape codes for a color name.

    Unknown colors leave the text unchanged.
    """
    style = parse_style(color)
    if style is None or not text:
        return text
    return style.render(text, color_system=ColorSystem.STANDARD)
