"""
MarkdownRenderer — GitHub-flavored Markdown output

    **Label**: value

    ### Title

    | Col | Col |
    | --- | --- |
    | a   | b   |

Trees go in fenced code blocks so connector art survives rendering.
"""

from typing import List

from ..core.model import FieldSpec, PresentationData, Row
from .base import BaseRenderer


def escape_cell(text: str) -> str:
    """Escape pipes and flatten newlines inside a table cell."""
    return text.replace("\\", "\\\\").replace("|", "\\|").replace("\n", "<br>")


class MarkdownRenderer(BaseRenderer):
    """Markdown summary lines, pipe tables, and fenced trees."""

    def render(self, data: PresentationData) -> str:
        if data.is_empty:
            return ""

        if self.is_standalone_content(data):
            spec = self.visible_fields(data)[0]
            fv = data.get_value(spec.name)
            return self.text(fv) if fv is not None else ""

        blocks: List[str] = []

        lines = [f"**{spec.label}**: {self.text(fv)}" for spec, fv in self.summary_fields(data)]
        if lines:
            # Two trailing spaces force a line break between summary lines
            blocks.append("  \n".join(lines))

        for spec, rows in self.table_fields(data):
            blocks.append(f"### {self.table_title(spec)}\n\n{self._table(spec, rows)}")

        for spec, fv in self.tree_fields(data):
            blocks.append(f"```\n{self.render_tree(fv)}```")

        return "\n\n".join(blocks)

    def _table(self, spec: FieldSpec, rows: List[Row]) -> str:
        columns = self.table_columns(spec)
        if not columns:
            return ""
        lines = [
            "| " + " | ".join(escape_cell(column.label) for column in columns) + " |",
            "| " + " | ".join("---" for _ in columns) + " |",
        ]
        for row in rows:
            cells = [escape_cell(self.cell_text(row, column)) for column in columns]
            lines.append("| " + " | ".join(cells) + " |")
        return "\n".join(lines)
