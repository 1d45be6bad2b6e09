# uiflow_core/filters.py
"""
@file filters.py
@brief Composable element filters over flattened view hierarchies.

A filter takes the full flattened node list and returns the matching nodes in
their original order. Per-node predicates are lifted with as_filter(); filters
that need the whole list (relative position, index) work on it directly.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Pattern, Tuple

from uiflow_core.geometry import Bounds
from uiflow_core.tree import DeviceInfo, TreeNode, UiElement
from uiflow_core.view_utils import refresh_element

ElementFilter = Callable[[List[TreeNode]], List[TreeNode]]
NodePredicate = Callable[[TreeNode], bool]

REGEX_FLAGS = re.IGNORECASE | re.DOTALL | re.MULTILINE


@dataclass(frozen=True)
class FilterWithDescription:
    description: str
    filter_func: ElementFilter

    def matches(self, nodes: Iterable[TreeNode]) -> List[TreeNode]:
        return self.filter_func(list(nodes))


def compile_regex(pattern: str) -> Pattern[str]:
    return re.compile(pattern, REGEX_FLAGS)


def as_filter(predicate: NodePredicate) -> ElementFilter:
    def _filter(nodes: List[TreeNode]) -> List[TreeNode]:
        return [n for n in nodes if predicate(n)]
    return _filter


def _attribute_matches(key: str, regex: Pattern[str]) -> NodePredicate:
    def _predicate(node: TreeNode) -> bool:
        value = node.attributes.get(key)
        return value is not None and regex.search(value) is not None
    return _predicate


def text_matches(regex: Pattern[str]) -> NodePredicate:
    return _attribute_matches("text", regex)


def id_matches(regex: Pattern[str]) -> NodePredicate:
    return _attribute_matches("resource-id", regex)


def size_matches(
    width: Optional[int] = None,
    height: Optional[int] = None,
    tolerance: int = 0,
) -> NodePredicate:
    """Match nodes whose size is within tolerance of width/height (unset = any)."""
    def _predicate(node: TreeNode) -> bool:
        bounds = node.bounds
        if bounds is None:
            return False
        if width is not None and abs(bounds.width - width) > tolerance:
            return False
        if height is not None and abs(bounds.height - height) > tolerance:
            return False
        return True
    return _predicate


def _screen_bounds(node: TreeNode, device_info: Optional[DeviceInfo]) -> Optional[Bounds]:
    bounds = node.bounds
    if bounds is None or device_info is None:
        return bounds
    return bounds.clip(device_info.width_pixels, device_info.height_pixels)


def _relative_to(
    other: ElementFilter,
    device_info: Optional[DeviceInfo],
    position: Callable[[Bounds, Bounds], bool],
) -> ElementFilter:
    def _filter(nodes: List[TreeNode]) -> List[TreeNode]:
        refs: List[Tuple[TreeNode, Bounds]] = []
        for ref in other(nodes):
            ref_bounds = _screen_bounds(ref, device_info)
            if ref_bounds is not None:
                refs.append((ref, ref_bounds))
        if not refs:
            return []

        result = []
        for node in nodes:
            bounds = _screen_bounds(node, device_info)
            if bounds is None:
                continue
            if any(ref is not node and position(bounds, rb) for ref, rb in refs):
                result.append(node)
        return result
    return _filter


def below(other: ElementFilter, device_info: Optional[DeviceInfo] = None) -> ElementFilter:
    return _relative_to(other, device_info, lambda b, ref: b.top >= ref.bottom)


def above(other: ElementFilter, device_info: Optional[DeviceInfo] = None) -> ElementFilter:
    return _relative_to(other, device_info, lambda b, ref: b.bottom <= ref.top)


def left_of(other: ElementFilter, device_info: Optional[DeviceInfo] = None) -> ElementFilter:
    return _relative_to(other, device_info, lambda b, ref: b.right <= ref.left)


def right_of(other: ElementFilter, device_info: Optional[DeviceInfo] = None) -> ElementFilter:
    return _relative_to(other, device_info, lambda b, ref: b.left >= ref.right)


def contains_child(element: UiElement) -> NodePredicate:
    """Match strict ancestors of the given element (matched ignoring bounds)."""
    target = element.tree_node

    def _predicate(node: TreeNode) -> bool:
        return any(refresh_element(child, target) is not None for child in node.children)
    return _predicate


def intersect(filters: List[ElementFilter]) -> ElementFilter:
    """
    AND-combine filters. Each filter sees the full node list; the result keeps
    the input order. No filters means everything matches.
    """
    def _filter(nodes: List[TreeNode]) -> List[TreeNode]:
        result = list(nodes)
        for f in filters:
            keep = {id(n) for n in f(nodes)}
            result = [n for n in result if id(n) in keep]
        return result
    return _filter


def index(idx: int) -> ElementFilter:
    def _filter(nodes: List[TreeNode]) -> List[TreeNode]:
        if 0 <= idx < len(nodes):
            return [nodes[idx]]
        return []
    return _filter


def compose(filters: List[ElementFilter]) -> ElementFilter:
    """Apply filters one after another, each on the previous output."""
    def _filter(nodes: List[TreeNode]) -> List[TreeNode]:
        result = list(nodes)
        for f in filters:
            result = f(result)
        return result
    return _filter
