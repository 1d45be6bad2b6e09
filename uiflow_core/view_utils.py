# uiflow_core/view_utils.py
"""
@file view_utils.py
@brief Hit testing and element re-location over captured view hierarchies.
"""

from __future__ import annotations
from typing import Optional

from uiflow_core.tree import TreeNode


def is_visible(root: TreeNode, node: TreeNode) -> bool:
    """
    Check whether node is the topmost element at its own center point.

    @param root Root of the hierarchy node belongs to
    @param node Node to check (must be an instance from root's tree)
    @return False if node has no bounds or something is drawn over its center
    """
    if not node.has_bounds():
        return False
    bounds = node.bounds
    if bounds is None:
        return False

    center = bounds.center()
    return get_element_at(root, center.x, center.y) is node


def get_element_at(node: TreeNode, x: int, y: int) -> Optional[TreeNode]:
    """
    Return the topmost descendant of node whose bounds contain (x, y).

    Children are visited last-to-first since later siblings paint over earlier
    ones. A child's subtree is searched before the child itself, so the deepest
    topmost node wins. Nodes without bounds never match themselves.
    """
    for child in reversed(node.children):
        found = get_element_at(child, x, y) if child.children else None
        if found is not None:
            return found

        bounds = child.bounds if child.has_bounds() else None
        if bounds is not None and bounds.contains(x, y):
            return child
    return None


def refresh_element(root: TreeNode, node: TreeNode) -> Optional[TreeNode]:
    """
    Find the node in a freshly captured tree that is the same element as node.

    Matching ignores bounds, so an element that moved between captures is still
    found. Search is pre-order: an ancestor match wins over a deeper one.
    """
    if root.same_node(node):
        return root

    for child in root.children:
        found = refresh_element(child, node)
        if found is not None:
            return found
    return None
