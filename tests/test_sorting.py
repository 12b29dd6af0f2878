"""
Tests for Sorting — Sort-key projection and row ordering

These tests validate:
- Numeric projection keeps numeric order as string order
- nil / bool / string projections
- Multi-directive, stable row sorting
"""

from decimal import Decimal

import pytest

from presto.core.model import FieldSpec, FieldValue, Format, PresentationSchema, SortDirective
from presto.core.sorting import compare, sort_key, sort_rows, table_directives


def make_rows(*records):
    rows = []
    for record in records:
        rows.append({name: FieldValue(value, FieldSpec(name=name)) for name, value in record.items()})
    return rows


def column(rows, name):
    return [row[name].value if name in row else None for row in rows]


class TestSortKey:
    """Per-value projection."""

    def test_nil_first(self):
        assert sort_key(None) < sort_key(0)
        assert sort_key(None) < sort_key("")

    def test_bools(self):
        assert sort_key(False) == (1, "0")
        assert sort_key(True) == (1, "1")

    @pytest.mark.parametrize("values", [
        [-100, -5, -1, 0, 2, 10, 1000],
        [-2.5, -0.5, 0.0, 0.25, 3.75],
        [Decimal("-1.5"), 1, 2.5, Decimal("10")],
    ])
    def test_numbers_keep_order(self, values):
        """Mixed widths and signs sort numerically."""
        keys = [sort_key(v) for v in values]
        assert keys == sorted(keys)

    def test_negative_prefix(self):
        assert sort_key(-1)[1].startswith("!")
        assert sort_key(1)[1].startswith("#")

    def test_strings_use_default_form(self):
        assert sort_key("abc") == (1, "abc")

    def test_field_value_unwrapped(self):
        assert sort_key(FieldValue(3, FieldSpec(name="n"))) == sort_key(3)

    def test_compare(self):
        assert compare(1, 2) == -1
        assert compare(2, 2) == 0
        assert compare("b", "a") == 1


class TestSortRows:
    """Directive application."""

    def test_ascending(self):
        """Rows z, a, m sort to a, m, z."""
        rows = make_rows({"n": "z"}, {"n": "a"}, {"n": "m"})
        result = sort_rows(rows, [SortDirective("n", 1)])
        assert column(result, "n") == ["a", "m", "z"]

    def test_descending(self):
        rows = make_rows({"n": 1}, {"n": 3}, {"n": 2})
        result = sort_rows(rows, [SortDirective("n", 0, "desc")])
        assert column(result, "n") == [3, 2, 1]

    def test_input_not_modified(self):
        rows = make_rows({"n": 2}, {"n": 1})
        sort_rows(rows, [SortDirective("n")])
        assert column(rows, "n") == [2, 1]

    def test_stable_ties(self):
        """Equal keys keep input order."""
        rows = make_rows({"k": 1, "id": "a"}, {"k": 0, "id": "b"}, {"k": 1, "id": "c"})
        result = sort_rows(rows, [SortDirective("k")])
        assert column(result, "id") == ["b", "a", "c"]

    def test_priority_order(self):
        """Lower priority numbers dominate; later ones break ties."""
        rows = make_rows(
            {"group": "b", "n": 2},
            {"group": "a", "n": 9},
            {"group": "b", "n": 1},
            {"group": "a", "n": 3},
        )
        directives = [SortDirective("n", 2), SortDirective("group", 1)]
        result = sort_rows(rows, directives)
        assert list(zip(column(result, "group"), column(result, "n"))) == [
            ("a", 3), ("a", 9), ("b", 1), ("b", 2),
        ]

    def test_missing_cells_sort_as_nil(self):
        rows = make_rows({"n": 2}, {}, {"n": 1})
        result = sort_rows(rows, [SortDirective("n")])
        assert column(result, "n") == [None, 1, 2]

    def test_no_directives(self):
        rows = make_rows({"n": 2}, {"n": 1})
        assert column(sort_rows(rows, []), "n") == [2, 1]


class TestTableDirectives:
    """Collecting directives for a table field."""

    def test_child_and_table_level(self):
        children = PresentationSchema([
            FieldSpec(name="name"),
            FieldSpec(name="qty", sort=SortDirective("qty", 2)),
        ])
        table = FieldSpec(
            name="lines", format=Format.TABLE, children=children,
            sort=SortDirective("name", 0),
        )
        assert [d.field for d in table_directives(table)] == ["name", "qty"]

    def test_table_level_for_unknown_column_ignored(self):
        children = PresentationSchema([FieldSpec(name="name")])
        table = FieldSpec(
            name="lines", format=Format.TABLE, children=children,
            sort=SortDirective("lines", 1),
        )
        assert table_directives(table) == []
