"""
Tests for Introspector — Runtime values to PresentationData

These tests validate:
- Top-level shape dispatch (nil, trees, self-rendering, sequences, records)
- Schema inference from annotations
- Field resolution, dereferencing and nesting
- Cycle safety and partial failure handling
- Determinism
"""

import gc
import logging
import weakref

import pytest

from presto import InvalidShape, Introspector, PresentationData, SimpleTreeNode
from presto.core.introspect import CONTENT_FIELD, DATA_FIELD, TREE_FIELD
from presto.core.model import FieldSpec, FieldType, Format, PresentationSchema, SortDirective

from tests.samples import (
    Banner, Customer, Folder, Invoice, LineItem, Link, Release, Renamed, Ticket, sample_order,
)


class TestTopLevelShapes:
    """Dispatch on the kind of the input value."""

    def test_none_is_empty(self, introspector):
        data = introspector.build(None)
        assert data.is_empty
        assert data.values == {}
        assert data.tables == {}

    def test_dead_weakref_is_empty(self, introspector):
        target = Customer("Ada", "a@x")
        ref = weakref.ref(target)
        del target
        gc.collect()
        assert introspector.build(ref).is_empty

    def test_live_weakref_is_dereferenced(self, introspector):
        target = Customer("Ada", "a@x")
        data = introspector.build(weakref.ref(target))
        assert data.schema.names() == ["name", "email"]

    def test_prebuilt_data_passes_through(self, introspector):
        data = PresentationData()
        assert introspector.build(data) is data

    def test_tree_node(self, introspector):
        root = SimpleTreeNode("root")
        data = introspector.build(root)
        assert data.schema.names() == [TREE_FIELD]
        assert data.schema.get(TREE_FIELD).format == Format.TREE
        assert data.values[TREE_FIELD].value is root

    def test_self_rendering(self, introspector):
        banner = Banner("hi")
        data = introspector.build(banner)
        assert data.schema.names() == [CONTENT_FIELD]
        assert data.schema.get(CONTENT_FIELD).format == Format.PRETTY

    @pytest.mark.parametrize("value", [42, "text", 3.5, True])
    def test_scalar_raises(self, introspector, value):
        with pytest.raises(InvalidShape):
            introspector.build(value)

    def test_sequence_of_scalars_raises(self, introspector):
        with pytest.raises(InvalidShape, match="not records"):
            introspector.build([1, 2, 3])

    def test_invalid_shape_is_type_error(self, introspector):
        with pytest.raises(TypeError):
            introspector.build(7)

    def test_empty_sequence(self, introspector):
        assert introspector.build([]).is_empty


class TestSequences:
    """Sequences of records become a single data table."""

    def test_single_data_table(self, introspector):
        data = introspector.build([Customer("Ada", "a@x"), Customer("Bob", "b@x")])
        assert data.schema.names() == [DATA_FIELD]
        table = data.schema.get(DATA_FIELD)
        assert table.is_table
        assert table.children.names() == ["name", "email"]
        assert len(data.tables[DATA_FIELD]) == 2

    def test_none_elements_skipped(self, introspector):
        data = introspector.build([Customer("Ada", "a@x"), None, Customer("Bob", "b@x")])
        assert len(data.tables[DATA_FIELD]) == 2

    def test_bad_element_skipped_and_logged(self, introspector, caplog):
        """A non-record element is dropped; the rest of the table builds."""
        with caplog.at_level(logging.DEBUG, logger="presto.core.introspect"):
            data = introspector.build([Customer("Ada", "a@x"), 5, Customer("Bob", "b@x")])
        rows = data.tables[DATA_FIELD]
        assert [row["name"].value for row in rows] == ["Ada", "Bob"]
        assert "Row 1" in caplog.text

    def test_declared_sort_applied(self, introspector):
        """LineItem.name carries sort=1."""
        items = [LineItem("z", 1, 1.0), LineItem("a", 2, 2.0), LineItem("m", 3, 3.0)]
        rows = introspector.build(items).tables[DATA_FIELD]
        assert [row["name"].value for row in rows] == ["a", "m", "z"]

    def test_mapping_rows_with_explicit_schema(self, introspector):
        """Rows z, a, m with sort (n, priority 1, asc) come out a, m, z."""
        schema = PresentationSchema([FieldSpec(name="n", sort=SortDirective("n", 1))])
        data = introspector.build([{"n": "z"}, {"n": "a"}, {"n": "m"}], schema)
        rows = data.tables[DATA_FIELD]
        assert [row["n"].value for row in rows] == ["a", "m", "z"]

    def test_mapping_keys_unioned(self, introspector):
        """Heterogeneous dicts contribute all keys in first-seen order."""
        data = introspector.build([{"a": 1}, {"b": 2, "a": 3}])
        assert data.schema.get(DATA_FIELD).children.names() == ["a", "b"]
        first, second = data.tables[DATA_FIELD]
        assert "b" not in first
        assert second["b"].value == 2

    def test_tree_shaped_degrades_to_table_by_default(self, introspector):
        data = introspector.build([Folder("a", [Folder("b")])])
        assert data.schema.names() == [DATA_FIELD]

    def test_tree_shaped_promoted_when_enabled(self):
        data = Introspector(promote_trees=True).build([Folder("a", [Folder("b")]), Folder("c")])
        assert data.schema.names() == [TREE_FIELD]
        roots = data.values[TREE_FIELD].value
        assert [root.get_label() for root in roots] == ["a", "c"]
        assert roots[0].get_children()[0].get_label() == "b"


class TestRecords:
    """Schema inference for one record or mapping."""

    def test_fields_and_labels(self, introspector):
        data = introspector.build(Invoice("X-1", 9.5))
        assert data.schema.names() == ["id", "price"]
        assert [spec.label for spec in data.schema] == ["Id", "Price"]
        assert data.schema.get("price").format == Format.CURRENCY
        assert data.values["price"].value == 9.5

    def test_type_inference(self, introspector):
        data = introspector.build({"n": 1, "f": 1.5, "s": "x", "b": True, "m": {}, "l": []})
        types = {spec.name: spec.type for spec in data.schema}
        assert types == {
            "n": FieldType.INT, "f": FieldType.FLOAT, "s": FieldType.STRING,
            "b": FieldType.BOOL, "m": FieldType.MAP, "l": FieldType.SEQUENCE,
        }

    def test_hidden_fields_excluded(self, introspector):
        data = introspector.build(sample_order())
        assert "token" not in data.schema
        assert "token" not in data.values

    def test_annotated_table(self, introspector):
        data = introspector.build(sample_order())
        lines = data.schema.get("lines")
        assert lines.is_table
        assert lines.title == "Line Items"
        assert lines.children.names() == ["name", "qty", "unit_price"]
        assert "lines" not in data.values
        assert [row["name"].value for row in data.tables["lines"]] == ["anvil", "bolt", "widget"]

    def test_table_field_never_nested(self, introspector):
        data = introspector.build(sample_order())
        for row in data.tables["lines"]:
            for fv in row.values():
                assert fv.nested is None

    def test_nested_record(self, introspector):
        data = introspector.build(sample_order())
        customer = data.values["customer"]
        assert customer.has_nested
        assert customer.nested_keys() == ["name", "email"]
        assert customer.nested["name"].value == "Ada"

    def test_mapping_list_of_records_promoted(self, introspector):
        data = introspector.build({"name": "batch", "items": [{"a": 1}, {"a": 2}]})
        assert data.schema.get("items").is_table
        assert len(data.tables["items"]) == 2
        assert data.value_keys() == ["name"]

    def test_mapping_labels_prettified(self, introspector):
        data = introspector.build({"unit_price": 1})
        assert data.schema.get("unit_price").label == "Unit Price"

    def test_class_attribute_annotations(self, introspector):
        data = introspector.build(Ticket("T-1", 5.0))
        assert data.schema.names() == ["key", "cost"]
        assert data.schema.get("cost").format == Format.CURRENCY

    def test_declared_name(self, introspector):
        data = introspector.build(Renamed("RX", "Title"))
        assert data.schema.names() == ["code", "title"]
        assert data.values["code"].value == "RX"

    def test_table_of_scalars_degrades_to_plain(self, introspector):
        """A table annotation on a list of scalars keeps the list as a value."""
        data = introspector.build(Release("1.0", [3, 4]))
        assert data.schema.get("builds").format == Format.PLAIN
        assert data.tables == {}
        assert data.values["builds"].value == [3, 4]

    def test_empty_table_stays_table(self, introspector):
        data = introspector.build(Release("1.0", []))
        assert data.schema.get("builds").is_table
        assert data.tables["builds"] == []

    def test_explicit_table_of_scalars_degrades(self, introspector):
        schema = PresentationSchema([
            FieldSpec(name="ids", format=Format.TABLE, children=PresentationSchema()),
        ])
        data = introspector.build({"ids": [1, 2]}, schema)
        assert data.schema.get("ids").format == Format.PLAIN
        assert data.tables == {}
        assert data.values["ids"].value == [1, 2]


class TestResolution:
    """Explicit schemas and field lookup."""

    def test_case_insensitive_match(self, introspector):
        schema = PresentationSchema([FieldSpec(name="NAME")])
        data = introspector.build({"name": "Ada"}, schema)
        assert data.values["NAME"].value == "Ada"

    def test_annotation_declared_name(self, introspector):
        schema = PresentationSchema([FieldSpec(name="code")])
        data = introspector.build(Renamed("RX"), schema)
        assert data.values["code"].value == "RX"

    def test_missing_fields_omitted(self, introspector):
        schema = PresentationSchema([FieldSpec(name="name"), FieldSpec(name="absent")])
        data = introspector.build({"name": "Ada"}, schema)
        assert list(data.values) == ["name"]

    def test_table_on_non_sequence_degrades(self, introspector):
        table = FieldSpec(name="rows", format=Format.TABLE, children=PresentationSchema())
        data = introspector.build({"rows": "nope"}, PresentationSchema([table]))
        assert data.schema.get("rows").format == Format.PLAIN
        assert data.values["rows"].value == "nope"
        assert data.tables == {}

    def test_weakref_field_dereferenced(self, introspector):
        target = Customer("Ada", "a@x")
        data = introspector.build({"owner": weakref.ref(target)})
        assert data.values["owner"].value is target
        assert data.values["owner"].has_nested

    def test_nil_values_kept(self, introspector):
        data = introspector.build({"maybe": None})
        assert data.values["maybe"].value is None
        assert data.schema.get("maybe").type is None


class TestCycles:
    """Reference cycles never loop."""

    def test_self_reference(self, introspector):
        node = Link("a")
        node.next = node
        data = introspector.build(node)
        assert data.values["next"].circular

    def test_two_node_cycle(self, introspector):
        a, b = Link("a"), Link("b")
        a.next, b.next = b, a
        data = introspector.build(a)
        nxt = data.values["next"]
        assert nxt.nested["name"].value == "b"
        assert nxt.nested["next"].circular

    def test_cyclic_tables(self, introspector):
        """A record listing itself in a table field still builds."""
        root = {"name": "root", "items": []}
        root["items"].append(root)
        data = introspector.build(root)
        assert "items" in data.schema


class TestDeterminism:
    """Same input, same model."""

    def test_build_twice(self, introspector):
        first = introspector.build(sample_order())
        second = introspector.build(sample_order())
        assert first.schema == second.schema
        assert [row["name"].value for row in first.tables["lines"]] == \
            [row["name"].value for row in second.tables["lines"]]
