"""
Core — Presentation model and introspection

Contains the foundational pieces:
- Model: PresentationSchema, FieldSpec, FieldValue, PresentationData
- Kinds: Tagged classification of runtime values
- Annotations: Per-field annotation mini-language
- Registry: Named custom render functions
- Tree: Hierarchical-node and self-rendering capabilities
- Sorting: Row ordering by sort directives
- Introspect: Runtime values to PresentationData
"""

from .model import (
    FieldType, Format, ColorRule, SortDirective,
    FieldSpec, PresentationSchema, FieldValue, Row, PresentationData,
)
from .kinds import ValueKind, kind_of, deref
from .annotations import pretty, parse_annotation, prettify_field_name, Annotation
from .registry import RenderRegistry
from .tree import TreeNode, SelfRendering, SimpleTreeNode, CompactListNode, to_tree_node
from .sorting import sort_key, sort_rows
from .errors import PrestoError, InvalidShape, RowConversionError
from .introspect import Introspector, build

__all__ = [
    # Model
    "FieldType", "Format", "ColorRule", "SortDirective",
    "FieldSpec", "PresentationSchema", "FieldValue", "Row", "PresentationData",
    # Kinds
    "ValueKind", "kind_of", "deref",
    # Annotations
    "pretty", "parse_annotation", "prettify_field_name", "Annotation",
    # Registry
    "RenderRegistry",
    # Tree
    "TreeNode", "SelfRendering", "SimpleTreeNode", "CompactListNode", "to_tree_node",
    # Sorting
    "sort_key", "sort_rows",
    # Errors
    "PrestoError", "InvalidShape", "RowConversionError",
    # Introspection
    "Introspector", "build",
]
