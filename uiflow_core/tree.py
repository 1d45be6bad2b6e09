# uiflow_core/tree.py
"""
@file tree.py
@brief View hierarchy nodes, resolved elements and device info.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from uiflow_core.geometry import Bounds, parse_bounds

BOUNDS_KEY = "bounds"


@dataclass(eq=False)
class TreeNode:
    """
    One node of a captured view hierarchy.

    Children are kept in paint order: the first child is drawn first and the
    last child is drawn on top. Nodes compare by identity; use same_node()
    for the structural "is this the same element" check.
    """
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List[TreeNode] = field(default_factory=list)

    @property
    def bounds(self) -> Optional[Bounds]:
        return parse_bounds(self.attributes.get(BOUNDS_KEY))

    @property
    def text(self) -> str:
        return self.attributes.get("text", "")

    def has_bounds(self) -> bool:
        return BOUNDS_KEY in self.attributes

    def walk(self) -> Iterator[TreeNode]:
        """Pre-order traversal, self first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def aggregate(self) -> List[TreeNode]:
        """Flatten the subtree into a pre-order list."""
        return list(self.walk())

    flatten = aggregate

    def identity_attributes(self) -> Dict[str, str]:
        return {k: v for k, v in self.attributes.items() if k != BOUNDS_KEY}

    def same_node(self, other: TreeNode) -> bool:
        """True if both nodes have equal attributes, ignoring bounds."""
        return self.identity_attributes() == other.identity_attributes()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attributes": dict(self.attributes),
            "children": [c.to_dict() for c in self.children],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TreeNode:
        return cls(
            attributes={str(k): str(v) for k, v in (data.get("attributes") or {}).items()},
            children=[cls.from_dict(c) for c in data.get("children") or []],
        )

    def __repr__(self) -> str:
        return f"TreeNode(attributes={self.attributes!r}, children={len(self.children)})"


@dataclass(frozen=True)
class UiElement:
    """An element resolved from the hierarchy, ready to be acted on."""
    tree_node: TreeNode
    bounds: Bounds

    @classmethod
    def from_tree_node(cls, node: TreeNode) -> UiElement:
        bounds = node.bounds
        if bounds is None:
            raise ValueError(f"Node has no parseable bounds: {node!r}")
        return cls(tree_node=node, bounds=bounds)


@dataclass(frozen=True)
class DeviceInfo:
    platform: str
    width_pixels: int
    height_pixels: int
