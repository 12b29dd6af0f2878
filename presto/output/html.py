"""
HtmlRenderer — HTML fragment output

    <dl>        summary fields (<dt> label, <dd> value)
    <table>     one per table field, title as <caption>
    <pre>       one per tree field

All text is escaped. Field `style` annotations are opaque: they go to a
style translator callable. Without one, the style string is emitted as
the element's class attribute.
"""

import html
from typing import Callable, List, Optional

from ..core.model import FieldSpec, FieldValue, PresentationData, Row
from .base import BaseRenderer

# Translates an opaque style annotation into an inline CSS declaration
StyleTranslator = Callable[[str], str]


class HtmlRenderer(BaseRenderer):
    """Escaped HTML fragment: definition list, tables, and pre blocks."""

    def __init__(self, *args, style_translator: Optional[StyleTranslator] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.style_translator = style_translator

    def render(self, data: PresentationData) -> str:
        if data.is_empty:
            return ""

        if self.is_standalone_content(data):
            spec = self.visible_fields(data)[0]
            fv = data.get_value(spec.name)
            return f"<pre>{html.escape(self.text(fv))}</pre>" if fv is not None else ""

        blocks: List[str] = []

        summary = self.summary_fields(data)
        if summary:
            items = []
            for spec, fv in summary:
                label_attrs = self._attrs(spec.label_style)
                value_attrs = self._attrs(spec.style, self.formatter.color(fv))
                items.append(f"  <dt{label_attrs}>{html.escape(spec.label)}</dt>")
                items.append(f"  <dd{value_attrs}>{html.escape(self.text(fv))}</dd>")
            blocks.append("<dl>\n" + "\n".join(items) + "\n</dl>")

        for spec, rows in self.table_fields(data):
            blocks.append(self._table(spec, rows))

        for spec, fv in self.tree_fields(data):
            blocks.append(f"<pre>{html.escape(self.render_tree(fv))}</pre>")

        return "\n".join(blocks)

    # =========================================================================
    # Tables
    # =========================================================================

    def _table(self, spec: FieldSpec, rows: List[Row]) -> str:
        columns = self.table_columns(spec)
        lines = [f"<table{self._attrs(spec.style)}>"]
        lines.append(f"  <caption>{html.escape(self.table_title(spec))}</caption>")
        header = "".join(
            f"<th{self._attrs(column.label_style)}>{html.escape(column.label)}</th>"
            for column in columns
        )
        lines.append(f"  <thead><tr>{header}</tr></thead>")
        lines.append("  <tbody>")
        for row in rows:
            cells = "".join(self._cell(row.get(column.name), column) for column in columns)
            lines.append(f"    <tr>{cells}</tr>")
        lines.append("  </tbody>")
        lines.append("</table>")
        return "\n".join(lines)

    def _cell(self, fv: Optional[FieldValue], column: FieldSpec) -> str:
        if fv is None:
            return f"<td{self._attrs(column.style)}></td>"
        attrs = self._attrs(column.style, self.formatter.color(fv))
        return f"<td{attrs}>{html.escape(self.formatter.formatted(fv))}</td>"

    # =========================================================================
    # Attributes
    # =========================================================================

    def _attrs(self, style: Optional[str], color: Optional[str] = None) -> str:
        """Attribute string for an opaque style annotation plus a color."""
        declarations = []
        attrs = ""
        if style:
            if self.style_translator is not None:
                translated = self.style_translator(style)
                if translated:
                    declarations.append(translated.rstrip("; "))
            else:
                attrs += f' class="{html.escape(style, quote=True)}"'
        if color:
            declarations.append(f"color: {color}")
        if declarations:
            attrs += f' style="{html.escape("; ".join(declarations), quote=True)}"'
        return attrs
