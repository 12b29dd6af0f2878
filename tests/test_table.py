"""
Tests for TableRenderer — Bordered grid layout

These tests validate:
- Exact border and padding layout
- Equal line widths, escape-aware
- Header-only and ragged input
- Rendering model rows through the formatter
"""

import pytest

from presto.output.table import TableRenderer, render_table
from presto.presentation.symbols import ASCII
from presto.presentation.text import colorize, visible_width

from tests.samples import sample_order


class TestLayout:
    """Exact layout."""

    def test_single_column(self, table_renderer):
        text = table_renderer.render([["id"], ["TEST-001"]])
        assert text.split("\n") == [
            "┌──────────┐",
            "│ id       │",
            "├──────────┤",
            "│ TEST-001 │",
            "└──────────┘",
        ]

    def test_two_columns(self, table_renderer):
        text = table_renderer.render([["ID", "Name"], ["1", "widget"]])
        assert text.split("\n") == [
            "┌──────────┬──────────┐",
            "│ ID       │ Name     │",
            "├──────────┼──────────┤",
            "│ 1        │ widget   │",
            "└──────────┴──────────┘",
        ]

    def test_ascii(self, ascii_table_renderer):
        text = ascii_table_renderer.render([["id"], ["x"]])
        assert text.split("\n") == [
            "+----------+",
            "| id       |",
            "+----------+",
            "| x        |",
            "+----------+",
        ]

    def test_all_lines_equal_width(self, table_renderer):
        rows = [["Name", "Description"], ["a", "a much longer description"], ["bb", ""]]
        widths = {visible_width(line) for line in table_renderer.render(rows).split("\n")}
        assert len(widths) == 1

    def test_no_trailing_newline(self, table_renderer):
        assert not table_renderer.render([["a"], ["b"]]).endswith("\n")


class TestEdgeCases:
    """Empty, header-only, ragged, oversized."""

    def test_empty(self, table_renderer):
        assert table_renderer.render([]) == ""

    def test_header_only_has_no_separator(self, table_renderer):
        lines = table_renderer.render([["id"]]).split("\n")
        assert len(lines) == 3
        assert "├" not in "".join(lines)

    def test_ragged_rows_padded(self, table_renderer):
        lines = table_renderer.render([["a", "b"], ["1"]]).split("\n")
        assert lines[3] == "│ 1        │          │"

    def test_colored_cells_align(self, table_renderer):
        plain = table_renderer.render([["id"], ["TEST-001"]])
        colored = table_renderer.render([["id"], [colorize("TEST-001", "red")]])
        assert [visible_width(line) for line in colored.split("\n")] == \
            [visible_width(line) for line in plain.split("\n")]

    def test_wide_content_not_truncated(self, table_renderer):
        wide = "x" * 60
        text = table_renderer.render([["h"], [wide]])
        assert wide in text
        # Border is clamped at max_width + padding
        assert text.split("\n")[0] == "┌" + "─" * 52 + "┐"

    def test_custom_widths(self):
        renderer = TableRenderer(min_width=2, max_width=4, padding=0)
        assert renderer.render([["ab"]]).split("\n")[1] == "│ ab│"

    def test_min_above_max_rejected(self):
        with pytest.raises(ValueError):
            TableRenderer(min_width=10, max_width=5)

    def test_render_table_helper(self):
        assert render_table([["id"]]).startswith("┌")


class TestModelRows:
    """Rows from the introspector."""

    def test_render_rows(self, introspector, formatter, table_renderer):
        data = introspector.build(sample_order())
        spec = data.schema.get("lines")
        text = table_renderer.render_rows(data.tables["lines"], spec.children, formatter)
        lines = text.split("\n")
        assert lines[1] == "│ Name     │ Quantity │ Unit Price │"
        assert lines[3] == "│ anvil    │ 1        │ $120.00    │"
        assert len(lines) == 7

    def test_render_rows_colored(self, introspector, formatter, table_renderer):
        data = introspector.build([{"score": 80}, {"score": 10}])
        spec = data.schema.get("data")
        plain = table_renderer.render_rows(data.tables["data"], spec.children, formatter)
        colored = table_renderer.render_rows(data.tables["data"], spec.children, formatter, color=True)
        # No rules on this schema, so color changes nothing
        assert colored == plain
