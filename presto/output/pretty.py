"""
PrettyRenderer — Terminal text output

Layout:
    Label: value          (summary fields, schema order)

    Title                 (one block per table field)
    ┌────┬────┐
    ...

    root                  (one block per tree field)
    └── child

Colors (conditional rules or fixed `color=`) are applied only when the
renderer is built with color=True.
"""

from typing import List

from ..core.model import PresentationData
from ..presentation.text import colorize
from .base import BaseRenderer


class PrettyRenderer(BaseRenderer):
    """Human-readable text with bordered tables and connector trees."""

    def render(self, data: PresentationData) -> str:
        if data.is_empty:
            return ""

        if self.is_standalone_content(data):
            spec = self.visible_fields(data)[0]
            fv = data.get_value(spec.name)
            return self.text(fv) if fv is not None else ""

        blocks: List[str] = []

        summary = self._render_summary(data)
        if summary:
            blocks.append(summary)

        for spec, rows in self.table_fields(data):
            table = self.table.render_rows(rows, spec.children, self.formatter, color=self.color)
            blocks.append(f"{self.table_title(spec)}\n{table}")

        for spec, fv in self.tree_fields(data):
            blocks.append(self.render_tree(fv).rstrip("\n"))

        return "\n\n".join(blocks)

    def _render_summary(self, data: PresentationData) -> str:
        lines = []
        for spec, fv in self.summary_fields(data):
            value = self.text(fv)
            if self.color:
                value = colorize(value, self.formatter.color(fv))
            lines.append(f"{spec.label}: {value}")
        return "\n".join(lines)
