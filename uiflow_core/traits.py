# uiflow_core/traits.py
"""
@file traits.py
@brief Named trait filters that selectors can reference by name.
"""

from __future__ import annotations
from typing import Callable, Dict, List, Tuple

from uiflow_core.exceptions import ConfigError
from uiflow_core.filters import ElementFilter, FilterWithDescription
from uiflow_core.tree import TreeNode
from uiflow_core.view_utils import is_visible

# (node, all_nodes) -> bool; all_nodes[0] is the hierarchy root
TraitPredicate = Callable[[TreeNode, List[TreeNode]], bool]

LONG_TEXT_LENGTH = 200
SQUARE_TOLERANCE = 0.03

_TRAITS: Dict[str, Tuple[str, TraitPredicate]] = {}


def register_trait(name: str, description: str) -> Callable[[TraitPredicate], TraitPredicate]:
    """Decorator registering a trait predicate under a name."""
    def decorator(func: TraitPredicate) -> TraitPredicate:
        _TRAITS[name.lower()] = (description, func)
        return func
    return decorator


def available_traits() -> List[str]:
    return sorted(_TRAITS)


def trait_description(name: str) -> str:
    entry = _TRAITS.get(name.lower())
    if entry is None:
        return f"Trait: {name}"
    return entry[0]


def build_trait_filter(name: str) -> FilterWithDescription:
    entry = _TRAITS.get(name.lower())
    if entry is None:
        raise ConfigError(f"Unknown trait: {name}. Available: {available_traits()}")
    description, predicate = entry

    def _filter(nodes: List[TreeNode]) -> List[TreeNode]:
        return [n for n in nodes if predicate(n, nodes)]

    trait_filter: ElementFilter = _filter
    return FilterWithDescription(description, trait_filter)


def _flag(node: TreeNode, key: str) -> bool:
    return node.attributes.get(key, "").lower() == "true"


@register_trait("text", "Has text")
def _has_text(node: TreeNode, nodes: List[TreeNode]) -> bool:
    return bool(node.text.strip())


@register_trait("long-text", "Has long text")
def _has_long_text(node: TreeNode, nodes: List[TreeNode]) -> bool:
    return len(node.text) >= LONG_TEXT_LENGTH


@register_trait("square", "Is square")
def _is_square(node: TreeNode, nodes: List[TreeNode]) -> bool:
    bounds = node.bounds
    if bounds is None or bounds.height == 0:
        return False
    return abs(1 - bounds.width / bounds.height) < SQUARE_TOLERANCE


@register_trait("visible", "Is visible")
def _is_visible(node: TreeNode, nodes: List[TreeNode]) -> bool:
    return bool(nodes) and is_visible(nodes[0], node)


@register_trait("checked", "Is checked")
def _is_checked(node: TreeNode, nodes: List[TreeNode]) -> bool:
    return _flag(node, "checked")


@register_trait("enabled", "Is enabled")
def _is_enabled(node: TreeNode, nodes: List[TreeNode]) -> bool:
    return _flag(node, "enabled")


@register_trait("focused", "Is focused")
def _is_focused(node: TreeNode, nodes: List[TreeNode]) -> bool:
    return _flag(node, "focused")


@register_trait("selected", "Is selected")
def _is_selected(node: TreeNode, nodes: List[TreeNode]) -> bool:
    return _flag(node, "selected")


@register_trait("clickable", "Is clickable")
def _is_clickable(node: TreeNode, nodes: List[TreeNode]) -> bool:
    return _flag(node, "clickable")
