"""
TreeRenderer — Render hierarchical nodes with box-drawing connectors

    root
    ├── child
    │   └── grandchild
    └── last: a, b, c        (compact list node)

Supports:
- Unicode and ASCII connectors (from the SymbolSet)
- Depth limit (max_depth, -1 = unlimited)
- Collapsed labels (children suppressed)
- Inline compact lists
- Optional node icons
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Set

from ..core.tree import is_tree_node
from ..presentation.symbols import SymbolSet, UNICODE


@dataclass
class TreeOptions:
    """
    Tree layout options.

    Attributes:
        symbols: Connector glyphs
        max_depth: Deepest depth rendered (-1 = unlimited)
        collapsed: Labels whose children are hidden
        compact: Render CompactListNodes inline
        show_icons: Prefix labels with node icons
    """
    symbols: SymbolSet = UNICODE
    max_depth: int = -1
    collapsed: Set[str] = field(default_factory=set)
    compact: bool = True
    show_icons: bool = True


class TreeRenderer:
    """Lays out TreeNode hierarchies as connector-prefixed lines."""

    def __init__(self, options: Optional[TreeOptions] = None):
        self.options = options or TreeOptions()

    def render(self, root: Any) -> str:
        """
        Render one tree.

        Args:
            root: TreeNode (or a list of roots, see render_many)

        Returns:
            Rendered tree, one newline-terminated line per node
        """
        if root is None:
            return ""
        if isinstance(root, (list, tuple)):
            return self.render_many(root)
        return self._render_node(root, "", True, 0)

    def render_many(self, roots: Iterable[Any]) -> str:
        """Render several trees, one after another."""
        return "".join(self.render(root) for root in roots)

    # =========================================================================
    # Layout
    # =========================================================================

    def _render_node(self, node: Any, prefix: str, is_last: bool, depth: int) -> str:
        opts = self.options
        if opts.max_depth >= 0 and depth > opts.max_depth:
            return ""

        label = self._label(node)
        if depth == 0:
            line = f"{label}\n"
        else:
            connector = opts.symbols.tree_last if is_last else opts.symbols.tree_branch
            line = f"{prefix}{connector}{label}\n"

        if self._is_compact(node) or self._label_text(node) in opts.collapsed:
            return line

        children = self._children(node)
        if not children:
            return line

        if depth == 0:
            child_prefix = ""
        else:
            extension = opts.symbols.tree_indent if is_last else opts.symbols.tree_continue
            child_prefix = prefix + extension

        parts = [line]
        for index, child in enumerate(children):
            last = index == len(children) - 1
            parts.append(self._render_node(child, child_prefix, last, depth + 1))
        return "".join(parts)

    # =========================================================================
    # Node access
    # =========================================================================

    @staticmethod
    def _label_text(node: Any) -> str:
        if is_tree_node(node):
            return str(node.get_label())
        return str(node)

    def _label(self, node: Any) -> str:
        text = self._label_text(node)
        if self._is_compact(node):
            items = node.get_items()
            if items:
                text = f"{text}: {', '.join(items)}"
        if self.options.show_icons and is_tree_node(node):
            icon = node.get_icon()
            if icon:
                text = f"{icon} {text}"
        return text

    def _is_compact(self, node: Any) -> bool:
        if not self.options.compact:
            return False
        is_compact = getattr(node, "is_compact", None)
        return callable(is_compact) and is_compact() and hasattr(node, "get_items")

    @staticmethod
    def _children(node: Any) -> List[Any]:
        if not is_tree_node(node):
            return []
        return [child for child in (node.get_children() or []) if child is not None]
