"""
Model — Canonical intermediate representation for presentation

Plain data only. The introspector builds these, emitters read them.

    PresentationSchema   ordered FieldSpecs, names unique
    FieldSpec            one field: label, hints, styling, nested schema
    FieldValue           raw value + its FieldSpec (+ nested values)
    Row                  name -> FieldValue, one table element
    PresentationData     schema + summary values + table rows + original

Lifecycle: PresentationData is built once per input, handed to one
emitter, and never mutated afterwards.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


# =============================================================================
# Hints
# =============================================================================

class FieldType(str, Enum):
    """Type hint inferred from (or declared for) a field value."""
    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    DATE = "date"
    RECORD = "record"
    SEQUENCE = "sequence"
    MAP = "map"


class Format(str, Enum):
    """Format hint controlling how a field is rendered."""
    PLAIN = "plain"
    CURRENCY = "currency"
    DATE = "date"
    FLOAT = "float"
    COLOR = "color"
    TABLE = "table"
    TREE = "tree"
    HIDE = "hide"
    STRUCT = "struct"
    PRETTY = "pretty"  # self-rendering pass-through

    @classmethod
    def parse(cls, text: str) -> "Format":
        """Parse a format name, falling back to PLAIN for unknown names."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            return cls.PLAIN


SORT_ASC = "asc"
SORT_DESC = "desc"


@dataclass(frozen=True)
class ColorRule:
    """One conditional color: color name applied when predicate matches."""
    color: str
    predicate: str


@dataclass(frozen=True)
class SortDirective:
    """
    Sort request for table rows.

    Attributes:
        field: Row field to compare
        priority: Lower runs first
        direction: "asc" | "desc"
    """
    field: str
    priority: int = 0
    direction: str = SORT_ASC

    @property
    def descending(self) -> bool:
        return self.direction == SORT_DESC


# =============================================================================
# Schema
# =============================================================================

@dataclass(frozen=True)
class FieldSpec:
    """
    Schema description of one field.

    `style` and `label_style` are opaque: they are handed to an external
    style translator and never interpreted here.
    """
    name: str
    label: str = ""
    type: Optional[FieldType] = None
    format: Format = Format.PLAIN
    children: Optional["PresentationSchema"] = None
    color_rules: Tuple[ColorRule, ...] = ()
    sort: Optional[SortDirective] = None
    style: Optional[str] = None
    label_style: Optional[str] = None
    title: Optional[str] = None
    color: Optional[str] = None
    render: Optional[str] = None
    compact: bool = False
    # Per-field tree layout; None / False inherit the renderer's options
    max_depth: Optional[int] = None
    ascii: bool = False
    no_icons: bool = False
    options: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)

    def __post_init__(self):
        if self.format == Format.TABLE and self.children is None:
            raise ValueError(f"Table field '{self.name}' requires a child schema")
        if not self.label:
            # Frozen: bypass the generated __setattr__
            from .annotations import prettify_field_name
            object.__setattr__(self, "label", prettify_field_name(self.name))

    @property
    def is_table(self) -> bool:
        return self.format == Format.TABLE

    @property
    def is_tree(self) -> bool:
        return self.format == Format.TREE

    @property
    def is_hidden(self) -> bool:
        return self.format == Format.HIDE


class PresentationSchema:
    """Ordered, name-unique sequence of FieldSpecs."""

    __slots__ = ("_fields", "_index")

    def __init__(self, fields: Optional[List[FieldSpec]] = None):
        self._fields: Tuple[FieldSpec, ...] = tuple(fields or ())
        self._index: Dict[str, FieldSpec] = {}
        for spec in self._fields:
            if spec.name in self._index:
                raise ValueError(f"Duplicate field name '{spec.name}' in schema")
            self._index[spec.name] = spec

    @property
    def fields(self) -> Tuple[FieldSpec, ...]:
        return self._fields

    def get(self, name: str) -> Optional[FieldSpec]:
        return self._index.get(name)

    def names(self) -> List[str]:
        return [spec.name for spec in self._fields]

    def sort_directives(self) -> List[SortDirective]:
        """Declared directives of this schema, lowest priority first."""
        directives = [spec.sort for spec in self._fields if spec.sort is not None]
        return sorted(directives, key=lambda d: d.priority)

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PresentationSchema):
            return NotImplemented
        return self._fields == other._fields

    def __hash__(self) -> int:
        return hash(self._fields)

    def __repr__(self) -> str:
        return f"PresentationSchema({', '.join(self.names())})"


# =============================================================================
# Values
# =============================================================================

@dataclass
class FieldValue:
    """
    A resolved value paired with its FieldSpec.

    `nested` is set only when the value is a mapping/record kept as a
    nested structure (never for table fields). `circular` marks a value
    that was already on the introspection path.
    """
    value: Any
    field: FieldSpec
    nested: Optional[Dict[str, "FieldValue"]] = None
    circular: bool = False

    @property
    def has_nested(self) -> bool:
        return bool(self.nested)

    def nested_keys(self) -> List[str]:
        return list(self.nested) if self.nested else []


Row = Dict[str, FieldValue]


@dataclass
class PresentationData:
    """
    Canonical intermediate model.

    Attributes:
        schema: Ordered field specs
        values: Summary field name -> FieldValue
        tables: Table field name -> rows
        original: The input value (for serializers that bypass the model)
    """
    schema: PresentationSchema = field(default_factory=PresentationSchema)
    values: Dict[str, FieldValue] = field(default_factory=dict)
    tables: Dict[str, List[Row]] = field(default_factory=dict)
    original: Any = None

    @property
    def is_empty(self) -> bool:
        return len(self.schema) == 0

    def table_names(self) -> List[str]:
        """Table names in schema order."""
        return [spec.name for spec in self.schema if spec.name in self.tables]

    def value_keys(self) -> List[str]:
        """Summary value names in schema order."""
        return [spec.name for spec in self.schema if spec.name in self.values]

    def get_table(self, name: str) -> Optional[List[Row]]:
        return self.tables.get(name)

    def get_value(self, name: str) -> Optional[FieldValue]:
        return self.values.get(name)
