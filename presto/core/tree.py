"""
Tree — Hierarchical-node and self-rendering capabilities

Two structural capabilities the introspector checks for:

    TreeNode        get_label() / get_children() / get_icon()
    SelfRendering   __pretty__() -> str

Any object providing the methods qualifies; no base class is required.
SimpleTreeNode and CompactListNode are ready-made node types, and
to_tree_node() converts records/mappings that declare a `children` field.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, runtime_checkable

from .kinds import is_structured, iter_items, kind_of, ValueKind, iter_elements


@runtime_checkable
class TreeNode(Protocol):
    def get_label(self) -> str: ...

    def get_children(self) -> List["TreeNode"]: ...

    def get_icon(self) -> Optional[str]: ...


@runtime_checkable
class SelfRendering(Protocol):
    def __pretty__(self) -> str: ...


def is_tree_node(value: Any) -> bool:
    # Classes satisfy the protocol check too; only instances are nodes
    return not isinstance(value, type) and isinstance(value, TreeNode)


def is_self_rendering(value: Any) -> bool:
    return not isinstance(value, type) and isinstance(value, SelfRendering)


# =============================================================================
# Node types
# =============================================================================

@dataclass
class SimpleTreeNode:
    """Plain labelled node with ordered children."""
    label: str
    children: List[Any] = field(default_factory=list)
    icon: Optional[str] = None

    def get_label(self) -> str:
        return self.label

    def get_children(self) -> List[Any]:
        return list(self.children)

    def get_icon(self) -> Optional[str]:
        return self.icon

    def add(self, child: Any) -> "SimpleTreeNode":
        """Append a child and return it (for chained building)."""
        self.children.append(child)
        return child


@dataclass
class CompactListNode:
    """
    Leaf-list node: renders `label: a, b, c` on one line when compact.

    When not compact, items become ordinary child leaves.
    """
    label: str
    items: List[str] = field(default_factory=list)
    compact: bool = True
    icon: Optional[str] = None

    def get_label(self) -> str:
        return self.label

    def get_children(self) -> List[Any]:
        return [SimpleTreeNode(str(item)) for item in self.items]

    def get_icon(self) -> Optional[str]:
        return self.icon

    def get_items(self) -> List[str]:
        return [str(item) for item in self.items]

    def is_compact(self) -> bool:
        return self.compact


# =============================================================================
# Conversion
# =============================================================================

LABEL_KEYS = ("label", "name", "title", "id")
CHILDREN_KEY = "children"


def _lookup(pairs: dict, key: str) -> Any:
    for name, value in pairs.items():
        if name.lower() == key:
            return value
    return None


def has_children_field(value: Any) -> bool:
    """True when a record/mapping exposes a field named `children` (any case)."""
    if not is_structured(value):
        return False
    return any(name.lower() == CHILDREN_KEY for name, _ in iter_items(value))


def to_tree_node(value: Any, _path: Optional[set] = None) -> Any:
    """
    Convert a value into a TreeNode.

    Existing nodes are returned as-is. Records and mappings use the first
    of label/name/title/id as the label, an `icon` field if present, and
    recurse into `children`. Anything else becomes a leaf labelled with
    its string form. Cycles become `<circular>` leaves.
    """
    if is_tree_node(value):
        return value
    if not is_structured(value):
        return SimpleTreeNode(str(value))

    path = _path if _path is not None else set()
    if id(value) in path:
        return SimpleTreeNode("<circular>")
    path.add(id(value))
    try:
        pairs = dict(iter_items(value))
        label = None
        for key in LABEL_KEYS:
            label = _lookup(pairs, key)
            if label is not None:
                break
        icon = _lookup(pairs, "icon")
        node = SimpleTreeNode(
            label=str(label) if label is not None else type(value).__name__,
            icon=str(icon) if icon is not None else None,
        )
        children = _lookup(pairs, CHILDREN_KEY)
        if children is not None and kind_of(children) == ValueKind.SEQUENCE:
            for child in iter_elements(children):
                if child is not None:
                    node.children.append(to_tree_node(child, path))
        return node
    finally:
        path.discard(id(value))
