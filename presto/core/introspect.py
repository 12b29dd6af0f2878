"""
Introspector — Runtime values to PresentationData

Walks an arbitrary value once and produces the canonical model:

    None / dead weakref      -> empty PresentationData
    PresentationData         -> returned unchanged
    TreeNode                 -> single "tree" field
    __pretty__ object        -> single "content" field (format=pretty)
    sequence of records      -> single "data" table field, rows sorted
    record / mapping         -> one field per exported attribute or key
    anything else            -> InvalidShape

Per-field hints come from annotation strings (see annotations.py). Nested
records become FieldValue.nested recursively; a record already on the
current path is left un-nested so the formatter prints `<circular>`.
"""

import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from .annotations import annotation_for, Annotation
from .errors import InvalidShape, RowConversionError
from .kinds import (
    deref, field_type_for, is_record, is_structured, iter_elements, iter_items,
    kind_of, ValueKind,
)
from .model import (
    FieldSpec, FieldValue, Format, PresentationData, PresentationSchema, Row,
)
from .registry import RenderRegistry
from .sorting import sort_rows, table_directives
from .tree import has_children_field, is_self_rendering, is_tree_node, to_tree_node

logger = logging.getLogger(__name__)

DATA_FIELD = "data"
TREE_FIELD = "tree"
CONTENT_FIELD = "content"

_MISSING = object()


def _sequence_items(value: Any) -> Optional[List[Any]]:
    """Dereferenced non-None elements, or None when value is not a sequence."""
    if kind_of(value) != ValueKind.SEQUENCE:
        return None
    items = []
    for element in iter_elements(value):
        element = deref(element)
        if element is not None:
            items.append(element)
    return items


def _first_structured(items: List[Any]) -> Any:
    for item in items:
        if is_structured(item):
            return item
    return None


class Introspector:
    """
    Builds PresentationData from runtime values.

    Args:
        registry: Render functions; fields naming an unknown one are logged
        promote_trees: Render tree-shaped sequences as trees instead of tables
    """

    def __init__(self, registry: Optional[RenderRegistry] = None, promote_trees: bool = False):
        self.registry = registry if registry is not None else RenderRegistry()
        self.promote_trees = promote_trees

    # =========================================================================
    # Entry point
    # =========================================================================

    def build(self, value: Any, schema: Optional[PresentationSchema] = None) -> PresentationData:
        """
        Build the presentation model for a value.

        Args:
            value: Any runtime value
            schema: Explicit schema to use instead of the inferred one

        Returns:
            PresentationData (empty for None)

        Raises:
            InvalidShape: For scalars and sequences of non-records
        """
        original = value
        value = deref(value)

        if value is None:
            return PresentationData(original=original)
        if isinstance(value, PresentationData):
            return value

        if is_tree_node(value):
            return self._single(TREE_FIELD, Format.TREE, value, original)
        if is_self_rendering(value):
            return self._single(CONTENT_FIELD, Format.PRETTY, value, original)

        kind = kind_of(value)
        if kind == ValueKind.SEQUENCE:
            return self._build_sequence(value, schema, original)
        if kind in (ValueKind.MAPPING, ValueKind.RECORD):
            return self._build_structured(value, schema, original)

        raise InvalidShape(type(value).__name__, "expected a record, mapping, or sequence of records")

    def _single(self, name: str, fmt: Format, value: Any, original: Any) -> PresentationData:
        spec = FieldSpec(name=name, format=fmt)
        return PresentationData(
            schema=PresentationSchema([spec]),
            values={name: FieldValue(value, spec)},
            original=original,
        )

    # =========================================================================
    # Sequences
    # =========================================================================

    def _build_sequence(self, value: Any, schema: Optional[PresentationSchema],
                        original: Any) -> PresentationData:
        items = _sequence_items(value)
        if not items:
            return PresentationData(original=original)

        first = _first_structured(items)
        if first is None:
            raise InvalidShape(
                f"{type(value).__name__}[{type(items[0]).__name__}]",
                "sequence elements are not records",
            )

        if self.promote_trees and self._is_tree_shaped(first):
            roots = [to_tree_node(item) for item in items]
            spec = FieldSpec(name=TREE_FIELD, format=Format.TREE)
            return PresentationData(
                schema=PresentationSchema([spec]),
                values={TREE_FIELD: FieldValue(roots, spec)},
                original=original,
            )

        table = self._data_table_spec(items, schema)
        rows = self._rows(items, table, set())
        return PresentationData(
            schema=PresentationSchema([table]),
            tables={table.name: rows},
            original=original,
        )

    def _is_tree_shaped(self, element: Any) -> bool:
        if has_children_field(element):
            return True
        if not is_record(element):
            return False
        return any(
            annotation_for(element, name).format == Format.TREE
            for name, _ in iter_items(element)
        )

    def _data_table_spec(self, items: List[Any], schema: Optional[PresentationSchema]) -> FieldSpec:
        if schema is not None:
            for spec in schema:
                if spec.is_table:
                    return spec
            return FieldSpec(name=DATA_FIELD, format=Format.TABLE, children=schema)
        children = self._row_schema(items, set())
        return FieldSpec(name=DATA_FIELD, format=Format.TABLE, children=children)

    def _row_schema(self, items: List[Any], seen: Set[int]) -> PresentationSchema:
        """
        Child schema for a list of elements.

        Records share one shape so the first one decides. Mapping keys
        are unioned across elements in first-seen order.
        """
        first = _first_structured(items)
        if first is None:
            return PresentationSchema()
        if is_record(first):
            return self.schema_for(first, seen)

        specs: List[FieldSpec] = []
        names: Set[str] = set()
        for item in items:
            if not is_structured(item) or is_record(item):
                continue
            for spec in self.schema_for(item, seen):
                if spec.name not in names:
                    names.add(spec.name)
                    specs.append(spec)
        return PresentationSchema(specs)

    def _rows(self, items: List[Any], table: FieldSpec, path: Set[int]) -> List[Row]:
        children = table.children or PresentationSchema()
        rows: List[Row] = []
        for index, item in enumerate(items):
            try:
                rows.append(self._row(item, children, index, path))
            except RowConversionError as e:
                logger.debug("Skipping row in table '%s': %s", table.name, e)
        return sort_rows(rows, table_directives(table))

    def _row(self, item: Any, children: PresentationSchema, index: int, path: Set[int]) -> Row:
        if not is_structured(item):
            raise RowConversionError(index, f"element of type '{type(item).__name__}' is not a record")
        try:
            pairs = dict(iter_items(item))
        except (AttributeError, TypeError, ValueError) as e:
            raise RowConversionError(index, str(e)) from e

        row: Row = {}
        entered = id(item) not in path
        path.add(id(item))
        try:
            for spec in children:
                raw = self._resolve(item, pairs, spec.name)
                if raw is _MISSING:
                    continue
                row[spec.name] = self._field_value(raw, spec, path)
        finally:
            if entered:
                path.discard(id(item))
        return row

    # =========================================================================
    # Records and mappings
    # =========================================================================

    def _build_structured(self, value: Any, schema: Optional[PresentationSchema],
                          original: Any) -> PresentationData:
        path = {id(value)}
        if schema is None:
            schema = self.schema_for(value, set(path))

        pairs = dict(iter_items(value))
        specs: List[FieldSpec] = []
        values: Dict[str, FieldValue] = {}
        tables: Dict[str, List[Row]] = {}

        for spec in schema:
            raw = self._resolve(value, pairs, spec.name)
            if raw is _MISSING:
                specs.append(spec)
                continue
            if spec.is_table:
                items = _sequence_items(deref(raw))
                if items is not None and (not items or _first_structured(items) is not None):
                    specs.append(spec)
                    tables[spec.name] = self._rows(items, spec, path)
                    continue
                logger.debug("Table field '%s' holds no records; rendering as plain", spec.name)
                spec = self._degrade(spec)
            specs.append(spec)
            values[spec.name] = self._field_value(raw, spec, path)

        return PresentationData(
            schema=PresentationSchema(specs),
            values=values,
            tables=tables,
            original=original,
        )

    @staticmethod
    def _degrade(spec: FieldSpec) -> FieldSpec:
        return FieldSpec(
            name=spec.name, label=spec.label, type=spec.type, format=Format.PLAIN,
            color_rules=spec.color_rules, style=spec.style, label_style=spec.label_style,
            color=spec.color, render=spec.render, compact=spec.compact,
            options=dict(spec.options),
        )

    def schema_for(self, value: Any, seen: Optional[Set[int]] = None) -> PresentationSchema:
        """
        Infer the schema of one record or mapping.

        Records contribute their annotations; mapping keys are prettified.
        Mapping values holding non-empty lists of records become tables.
        """
        seen = seen if seen is not None else set()
        record = is_record(value)
        specs: List[FieldSpec] = []
        names: Set[str] = set()

        seen.add(id(value))
        try:
            for name, item in iter_items(value):
                annotation = annotation_for(value, name) if record else Annotation()
                if annotation.hidden:
                    continue
                spec = self._field_spec(name, deref(item), annotation, record, seen)
                if spec.name in names:
                    logger.debug("Duplicate field '%s' on %s ignored", spec.name, type(value).__name__)
                    continue
                names.add(spec.name)
                specs.append(spec)
        finally:
            seen.discard(id(value))
        return PresentationSchema(specs)

    def _field_spec(self, name: str, item: Any, annotation: Annotation,
                    record: bool, seen: Set[int]) -> FieldSpec:
        if annotation.render and annotation.render not in self.registry:
            logger.debug("Field '%s' names unknown render function '%s'", name, annotation.render)

        field_type = field_type_for(item)
        items = _sequence_items(item)
        wants_table = annotation.wants_table or (
            not record and annotation.format is None
            and bool(items) and _first_structured(items) is not None
        )
        if wants_table:
            # Scalar lists have no columns to show
            if items is None or (items and _first_structured(items) is None):
                return annotation.to_field_spec(name, field_type, format=Format.PLAIN)
            fresh = [element for element in items if id(element) not in seen]
            children = self._row_schema(fresh, seen)
            return annotation.to_field_spec(name, field_type, children=children, format=Format.TABLE)

        return annotation.to_field_spec(name, field_type)

    # =========================================================================
    # Values
    # =========================================================================

    def _resolve(self, container: Any, pairs: Dict[str, Any], name: str) -> Any:
        """
        Find the raw value for a schema field.

        Order: exact name, attribute whose annotation declares the name,
        case-insensitive match. Returns _MISSING when nothing matches.
        """
        if name in pairs:
            return pairs[name]
        if is_record(container):
            for attr in pairs:
                if annotation_for(container, attr).name == name:
                    return pairs[attr]
        lowered = name.lower()
        for attr, raw in pairs.items():
            if attr.lower() == lowered:
                return raw
        return _MISSING

    def _field_value(self, raw: Any, spec: FieldSpec, path: Set[int]) -> FieldValue:
        raw = deref(raw)
        if spec.is_tree:
            return FieldValue(self._tree_value(raw), spec)
        if spec.is_table:
            return FieldValue(raw, spec)
        if is_structured(raw) and id(raw) in path:
            return FieldValue(raw, spec, circular=True)
        return FieldValue(raw, spec, nested=self._nested(raw, path))

    @staticmethod
    def _tree_value(raw: Any) -> Any:
        if raw is None or is_tree_node(raw):
            return raw
        items = _sequence_items(raw)
        if items is not None:
            return [to_tree_node(item) for item in items]
        return to_tree_node(raw)

    def _nested(self, raw: Any, path: Set[int]) -> Optional[Dict[str, FieldValue]]:
        """Nested FieldValues for a record/mapping, None for leaves and cycles."""
        if not is_structured(raw) or is_tree_node(raw) or is_self_rendering(raw):
            return None
        if id(raw) in path:
            return None

        path.add(id(raw))
        try:
            pairs = dict(iter_items(raw))
            nested: Dict[str, FieldValue] = {}
            for spec in self.schema_for(raw, set(path)):
                value = self._resolve(raw, pairs, spec.name)
                if value is _MISSING:
                    continue
                nested[spec.name] = self._field_value(value, spec, path)
            return nested
        finally:
            path.discard(id(raw))


def build(value: Any, schema: Optional[PresentationSchema] = None, **kwargs) -> PresentationData:
    """Shortcut for Introspector(**kwargs).build(value, schema)."""
    return Introspector(**kwargs).build(value, schema)
