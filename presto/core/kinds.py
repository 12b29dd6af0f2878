"""
Kinds — Tagged classification of runtime values

Every value the engine touches is classified once into a ValueKind; the
formatter and introspector then dispatch on the tag through explicit
per-kind tables instead of scattering isinstance checks.

Also owns record access: which attributes of an object count as its
exported fields, and one-level dereference of weak references.
"""

import dataclasses
import datetime
import weakref
from collections.abc import Mapping, Sequence, Set
from decimal import Decimal
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple

from .model import FieldType


class ValueKind(Enum):
    """Resolved value variants."""
    NIL = "nil"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    DATE = "date"
    ENUM = "enum"
    MAPPING = "mapping"
    RECORD = "record"
    SEQUENCE = "sequence"
    OTHER = "other"


NUMERIC_KINDS = frozenset({ValueKind.INT, ValueKind.FLOAT})

_KIND_TO_TYPE = {
    ValueKind.BOOL: FieldType.BOOL,
    ValueKind.INT: FieldType.INT,
    ValueKind.FLOAT: FieldType.FLOAT,
    ValueKind.STRING: FieldType.STRING,
    ValueKind.DATE: FieldType.DATE,
    ValueKind.ENUM: FieldType.STRING,
    ValueKind.MAPPING: FieldType.MAP,
    ValueKind.RECORD: FieldType.RECORD,
    ValueKind.SEQUENCE: FieldType.SEQUENCE,
}


def is_named_tuple(value: Any) -> bool:
    return isinstance(value, tuple) and hasattr(type(value), "_fields")


def is_record(value: Any) -> bool:
    """
    True for fixed-shape structured values with named fields.

    Dataclass instances, named tuples, and plain objects carrying a
    __dict__ qualify; classes, functions, and modules do not.
    """
    if value is None or isinstance(value, type):
        return False
    if dataclasses.is_dataclass(value):
        return True
    if is_named_tuple(value):
        return True
    if callable(value) or isinstance(value, (Enum, weakref.ReferenceType)):
        return False
    if type(value).__module__ == "builtins":
        return False
    return hasattr(value, "__dict__")


def kind_of(value: Any) -> ValueKind:
    """Classify a value. Order matters: bool before int, records before tuples."""
    if value is None:
        return ValueKind.NIL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, Enum):
        return ValueKind.ENUM
    if isinstance(value, int):
        return ValueKind.INT
    if isinstance(value, (float, Decimal)):
        return ValueKind.FLOAT
    if isinstance(value, (str, bytes)):
        return ValueKind.STRING
    if isinstance(value, (datetime.date, datetime.time)):
        return ValueKind.DATE
    if isinstance(value, Mapping):
        return ValueKind.MAPPING
    if is_record(value):
        return ValueKind.RECORD
    if isinstance(value, (Sequence, Set)):
        return ValueKind.SEQUENCE
    return ValueKind.OTHER


def field_type_for(value: Any) -> Optional[FieldType]:
    """FieldType hint for a value, None for nil/unknown."""
    return _KIND_TO_TYPE.get(kind_of(value))


def is_structured(value: Any) -> bool:
    """True for records and mappings."""
    return kind_of(value) in (ValueKind.MAPPING, ValueKind.RECORD)


def deref(value: Any) -> Any:
    """Dereference one level of weak reference; dead references become None."""
    if isinstance(value, weakref.ReferenceType):
        return value()
    return value


# =============================================================================
# Record access
# =============================================================================

def exported_names(record: Any) -> List[str]:
    """Exported field names of a record, in declaration order."""
    if dataclasses.is_dataclass(record):
        names = [f.name for f in dataclasses.fields(record)]
    elif is_named_tuple(record):
        names = list(type(record)._fields)
    else:
        names = list(vars(record))
    return [name for name in names if not name.startswith("_")]


def iter_items(value: Any) -> Iterator[Tuple[str, Any]]:
    """Iterate (name, value) pairs of a mapping or record."""
    if isinstance(value, Mapping):
        for key, item in value.items():
            yield str(key), item
        return
    for name in exported_names(value):
        yield name, getattr(value, name, None)


def iter_elements(value: Any) -> List[Any]:
    """Elements of a sequence or set as a list (sets in sorted repr order)."""
    if isinstance(value, Set):
        return sorted(value, key=repr)
    return list(value)
