"""
Presto — Schema-driven presentation engine

Turns records, mappings, and sequences into readable output. Fields carry
small annotation strings; presto infers the rest.

Usage:
    from dataclasses import dataclass
    from presto import pretty, render

    @dataclass
    class Invoice:
        id: str
        price: float = pretty("format=currency")

    print(render(Invoice("X-1", 9.5)))
    # Id: X-1
    # Price: $9.50
"""

__version__ = "0.1.0"

# Core layer (model + introspection)
from .core.model import (
    FieldType, Format, ColorRule, SortDirective,
    FieldSpec, PresentationSchema, FieldValue, PresentationData,
)
from .core.annotations import pretty, parse_annotation
from .core.registry import RenderRegistry
from .core.tree import SimpleTreeNode, CompactListNode
from .core.errors import PrestoError, InvalidShape, RowConversionError
from .core.introspect import Introspector, build

# Presentation layer
from .presentation.symbols import UNICODE, ASCII, get_symbols
from .presentation.values import ValueFormatter

# Output layer
from .output import render, get_renderer, TableRenderer, TreeRenderer, TreeOptions

# Configuration
from .config import Config, ConfigManager, get_config

__all__ = [
    "__version__",
    # Core
    "FieldType", "Format", "ColorRule", "SortDirective",
    "FieldSpec", "PresentationSchema", "FieldValue", "PresentationData",
    "pretty", "parse_annotation", "RenderRegistry",
    "SimpleTreeNode", "CompactListNode",
    "PrestoError", "InvalidShape", "RowConversionError",
    "Introspector", "build",
    # Presentation
    "UNICODE", "ASCII", "get_symbols", "ValueFormatter",
    # Output
    "render", "get_renderer", "TableRenderer", "TreeRenderer", "TreeOptions",
    # Config
    "Config", "ConfigManager", "get_config",
]
