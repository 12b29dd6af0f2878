"""
TableRenderer — Fixed-width bordered grid layout

    ┌──────────┬──────────┐
    │ ID       │ Name     │
    ├──────────┼──────────┤
    │ TEST-001 │ widget   │
    └──────────┴──────────┘

Supports:
- Unicode and ASCII borders (from the SymbolSet)
- Escape-aware widths (colored cells align like plain ones)
- Column floor/ceiling clamping plus fixed padding

Content wider than the ceiling is not wrapped or cut; callers that want
truncation do it before rendering.
"""

from typing import List, Optional, Sequence, TYPE_CHECKING

from ..core.model import PresentationSchema, Row
from ..presentation.symbols import SymbolSet, UNICODE
from ..presentation.text import colorize, visible_width

if TYPE_CHECKING:
    from ..presentation.values import ValueFormatter


DEFAULT_MIN_WIDTH = 8
DEFAULT_MAX_WIDTH = 50
DEFAULT_PADDING = 2


class TableRenderer:
    """
    Render rows of cell strings as a bordered table (row 0 = header).

    Args:
        symbols: Border glyphs
        min_width: Content-width floor per column
        max_width: Content-width ceiling per column
        padding: Added to every clamped content width
    """

    def __init__(
        self,
        symbols: SymbolSet = UNICODE,
        min_width: int = DEFAULT_MIN_WIDTH,
        max_width: int = DEFAULT_MAX_WIDTH,
        padding: int = DEFAULT_PADDING,
    ):
        if min_width > max_width:
            raise ValueError(f"min_width ({min_width}) exceeds max_width ({max_width})")
        self.symbols = symbols
        self.min_width = min_width
        self.max_width = max_width
        self.padding = padding

    def render(self, rows: Sequence[Sequence[str]]) -> str:
        """
        Render a header row plus data rows.

        Args:
            rows: Cell strings; rows[0] is the header

        Returns:
            Table text without a trailing newline ("" for no rows)
        """
        if not rows:
            return ""

        columns = max(len(row) for row in rows)
        if columns == 0:
            return ""
        grid = [list(row) + [""] * (columns - len(row)) for row in rows]
        widths = self.column_widths(grid)

        lines = [self._separator(widths, "top"), self._row(grid[0], widths)]
        if len(grid) > 1:
            lines.append(self._separator(widths, "middle"))
            for row in grid[1:]:
                lines.append(self._row(row, widths))
        lines.append(self._separator(widths, "bottom"))
        return "\n".join(lines)

    def render_rows(
        self,
        rows: List[Row],
        schema: PresentationSchema,
        formatter: "ValueFormatter",
        color: bool = False,
    ) -> str:
        """
        Render model rows: labels as header, formatted values as cells.

        Columns follow schema order; hidden fields are skipped and missing
        cells are blank.
        """
        specs = [spec for spec in schema if not spec.is_hidden]
        grid = [[spec.label for spec in specs]]
        for row in rows:
            cells = []
            for spec in specs:
                fv = row.get(spec.name)
                if fv is None:
                    cells.append("")
                    continue
                text = formatter.formatted(fv)
                if color:
                    text = colorize(text, formatter.color(fv))
                cells.append(text)
            grid.append(cells)
        return self.render(grid)

    # =========================================================================
    # Width Calculation
    # =========================================================================

    def column_widths(self, grid: List[List[str]]) -> List[int]:
        """Padded width of each column."""
        widths = []
        for index in range(len(grid[0])):
            content = max(visible_width(row[index]) for row in grid)
            clamped = min(max(content, self.min_width), self.max_width)
            widths.append(clamped + self.padding)
        return widths

    # =========================================================================
    # Row Rendering
    # =========================================================================

    def _separator(self, widths: List[int], position: str = "middle") -> str:
        """Render horizontal border line."""
        s = self.symbols

        if position == "top":
            left, cross, right = s.box_tl, s.box_t_down, s.box_tr
        elif position == "bottom":
            left, cross, right = s.box_bl, s.box_t_up, s.box_br
        else:  # middle
            left, cross, right = s.box_t_right, s.box_cross, s.box_t_left

        parts = [left]
        for i, w in enumerate(widths):
            parts.append(s.box_h * w)
            parts.append(cross if i < len(widths) - 1 else right)

        return "".join(parts)

    def _row(self, cells: List[str], widths: List[int]) -> str:
        """Render one row: leading space, content, trailing fill."""
        s = self.symbols
        parts = [s.box_v]
        for cell, w in zip(cells, widths):
            fill = max(w - visible_width(cell) - 1, 0)
            parts.append(" " + cell + " " * fill)
            parts.append(s.box_v)
        return "".join(parts)


def render_table(rows: Sequence[Sequence[str]], symbols: Optional[SymbolSet] = None) -> str:
    """Convenience function to render a table with default widths."""
    return TableRenderer(symbols=symbols or UNICODE).render(rows)
