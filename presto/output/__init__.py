"""
Output Module — Format emitters for presentation data

Separates data from presentation. The introspector builds a
PresentationData; emitters turn it into text.

Usage:
    from presto.output import render

    print(render(invoice))                          # pretty text
    print(render(invoice, format="markdown"))
    print(render(rows, format="csv", config=config))
"""

from typing import Any, Optional, TYPE_CHECKING

from ..core.introspect import Introspector
from ..core.model import PresentationSchema
from ..core.registry import RenderRegistry
from ..presentation.symbols import get_symbols
from ..presentation.values import ValueFormatter

# Re-export for convenience
from .base import BaseRenderer
from .csv import CsvRenderer
from .html import HtmlRenderer
from .markdown import MarkdownRenderer
from .pretty import PrettyRenderer
from .table import TableRenderer, render_table
from .tree import TreeOptions, TreeRenderer

if TYPE_CHECKING:
    from ..config import Config


# =============================================================================
# Format Registry
# =============================================================================

# Maps format name to renderer class
RENDERERS = {
    "pretty": PrettyRenderer,
    "markdown": MarkdownRenderer,
    "html": HtmlRenderer,
    "csv": CsvRenderer,
}

# Valid format values for config/CLI
VALID_FORMATS = tuple(RENDERERS)


# =============================================================================
# Main Render Function
# =============================================================================

def get_renderer(
    format: str,
    config: Optional["Config"] = None,
    registry: Optional[RenderRegistry] = None,
    **kwargs,
) -> BaseRenderer:
    """
    Get appropriate renderer instance.

    Args:
        format: Format name from VALID_FORMATS
        config: Config supplying symbols, layout limits and value defaults
        registry: Render functions for `render=` fields
        **kwargs: Passed to the renderer (e.g. style_translator for html)

    Returns:
        Renderer instance

    Raises:
        ValueError: If format is invalid
    """
    if format not in RENDERERS:
        valid = ", ".join(RENDERERS.keys())
        raise ValueError(f"Unknown format '{format}'. Valid: {valid}")

    if config is None:
        from ..config import Config
        config = Config()

    symbols = get_symbols(config.display.symbols)
    kwargs.setdefault("symbols", symbols)
    kwargs.setdefault("color", config.display.color)
    kwargs.setdefault("formatter", ValueFormatter(
        registry=registry,
        date_format=config.values.date_format,
        float_digits=config.values.float_digits,
    ))
    kwargs.setdefault("tree_options", TreeOptions(
        symbols=symbols,
        max_depth=config.tree.max_depth,
        collapsed=set(config.tree.collapsed),
        compact=config.tree.compact,
        show_icons=config.tree.show_icons,
    ))
    kwargs.setdefault("table", TableRenderer(
        symbols=symbols,
        min_width=config.table.min_width,
        max_width=config.table.max_width,
        padding=config.table.padding,
    ))

    renderer_class = RENDERERS[format]
    return renderer_class(**kwargs)


def render(
    value: Any,
    format: Optional[str] = None,
    config: Optional["Config"] = None,
    registry: Optional[RenderRegistry] = None,
    schema: Optional[PresentationSchema] = None,
    **kwargs,
) -> str:
    """
    Build and render a value in one call.

    This is the main entry point for the output system.

    Args:
        value: Any record, mapping, sequence of records, tree node,
               self-rendering object, or prebuilt PresentationData
        format: "pretty" | "markdown" | "html" | "csv" (config default if None)
        config: Config (defaults if None)
        registry: Render functions for `render=` fields
        schema: Explicit schema instead of the inferred one
        **kwargs: Passed to the renderer

    Returns:
        Formatted string ready for printing

    Raises:
        InvalidShape: If value cannot be presented
        ValueError: If format is invalid
    """
    if config is None:
        from ..config import Config
        config = Config()

    effective_format = format or config.display.format
    renderer = get_renderer(effective_format, config=config, registry=registry, **kwargs)

    introspector = Introspector(registry=registry, promote_trees=config.tree.promote_trees)
    data = introspector.build(value, schema)
    return renderer.render(data)


__all__ = [
    "BaseRenderer", "PrettyRenderer", "MarkdownRenderer", "HtmlRenderer", "CsvRenderer",
    "TableRenderer", "TreeRenderer", "TreeOptions",
    "RENDERERS", "VALID_FORMATS",
    "get_renderer", "render", "render_table",
]
