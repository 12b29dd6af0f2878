"""
BaseRenderer — Abstract base class for format emitters

All emitters inherit from this class and implement render(data). The
base owns the shared collaborators (symbols, value formatter, tree and
table layout) and the schema-order walk every emitter performs:

    summary fields   plain values, in schema order
    table fields     resolved through data.tables
    tree fields      resolved through TreeRenderer
    hidden fields    skipped
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import List, Optional, Tuple

from ..core.model import FieldSpec, FieldValue, Format, PresentationData, Row
from ..presentation.symbols import ASCII, SymbolSet, UNICODE
from ..presentation.values import ValueFormatter
from .table import TableRenderer
from .tree import TreeOptions, TreeRenderer


class BaseRenderer(ABC):
    """
    Abstract base class for all format emitters.

    Provides:
    - Symbol set access (Unicode/ASCII)
    - Value formatting
    - Schema-order field grouping
    - Tree layout

    Subclasses must implement render() method.
    """

    def __init__(
        self,
        symbols: Optional[SymbolSet] = None,
        formatter: Optional[ValueFormatter] = None,
        tree_options: Optional[TreeOptions] = None,
        table: Optional[TableRenderer] = None,
        color: bool = False,
    ):
        """
        Initialize renderer.

        Args:
            symbols: SymbolSet for borders and connectors (unicode if None)
            formatter: ValueFormatter for cell and summary text
            tree_options: Tree layout options (symbols default to ours)
            table: TableRenderer for bordered grids
            color: Apply ANSI colors where the format supports them
        """
        self.symbols = symbols or UNICODE
        self.formatter = formatter or ValueFormatter()
        self.tree_options = tree_options or TreeOptions(symbols=self.symbols)
        self.table = table or TableRenderer(symbols=self.symbols)
        self.color = color

    @abstractmethod
    def render(self, data: PresentationData) -> str:
        """
        Render PresentationData to a string.

        Args:
            data: Built presentation model

        Returns:
            Formatted string for output
        """
        pass

    # =========================================================================
    # Field Grouping
    # =========================================================================

    def visible_fields(self, data: PresentationData) -> List[FieldSpec]:
        """Schema fields in order, hidden ones removed."""
        return [spec for spec in data.schema if not spec.is_hidden]

    def summary_fields(self, data: PresentationData) -> List[Tuple[FieldSpec, FieldValue]]:
        """(spec, value) pairs for non-table, non-tree fields that hold a value."""
        pairs = []
        for spec in self.visible_fields(data):
            if spec.is_table or spec.is_tree:
                continue
            fv = data.get_value(spec.name)
            if fv is not None:
                pairs.append((spec, fv))
        return pairs

    def table_fields(self, data: PresentationData) -> List[Tuple[FieldSpec, List[Row]]]:
        """(spec, rows) pairs for table fields present in data.tables."""
        pairs = []
        for spec in self.visible_fields(data):
            if spec.is_table:
                rows = data.get_table(spec.name)
                if rows is not None:
                    pairs.append((spec, rows))
        return pairs

    def tree_fields(self, data: PresentationData) -> List[Tuple[FieldSpec, FieldValue]]:
        """(spec, value) pairs for tree fields that hold a value."""
        pairs = []
        for spec in self.visible_fields(data):
            if spec.is_tree:
                fv = data.get_value(spec.name)
                if fv is not None and fv.value is not None:
                    pairs.append((spec, fv))
        return pairs

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def render_tree(self, fv: FieldValue) -> str:
        """Lay out a tree field's value (one root or a list of roots)."""
        return TreeRenderer(self.tree_options_for(fv.field)).render(fv.value)

    def tree_options_for(self, spec: FieldSpec) -> TreeOptions:
        """Renderer tree options with the field's own overrides applied."""
        overrides = {}
        if spec.max_depth is not None:
            overrides["max_depth"] = spec.max_depth
        if spec.ascii:
            overrides["symbols"] = ASCII
        if spec.no_icons:
            overrides["show_icons"] = False
        if spec.compact:
            overrides["compact"] = True
        if not overrides:
            return self.tree_options
        return replace(self.tree_options, **overrides)

    def text(self, fv: FieldValue) -> str:
        """Formatted value text."""
        return self.formatter.formatted(fv)

    def table_title(self, spec: FieldSpec) -> str:
        return spec.title or spec.label

    def table_columns(self, spec: FieldSpec) -> List[FieldSpec]:
        """Visible child columns of a table field."""
        if spec.children is None:
            return []
        return [child for child in spec.children if not child.is_hidden]

    def cell_text(self, row: Row, column: FieldSpec) -> str:
        fv = row.get(column.name)
        if fv is None:
            return ""
        return self.formatter.formatted(fv)

    def is_standalone_content(self, data: PresentationData) -> bool:
        """True when data wraps a single self-rendering object."""
        fields = self.visible_fields(data)
        return len(fields) == 1 and fields[0].format == Format.PRETTY
