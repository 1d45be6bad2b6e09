# uiflow_core/selectors.py
"""
@file selectors.py
@brief Declarative, possibly nested element selectors.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from uiflow_core.traits import trait_description


@dataclass(frozen=True)
class SizeSelector:
    width: Optional[int] = None
    height: Optional[int] = None
    tolerance: int = 0

    def __str__(self) -> str:
        w = "*" if self.width is None else str(self.width)
        h = "*" if self.height is None else str(self.height)
        return f"{w}x{h} (tolerance {self.tolerance})"


@dataclass(frozen=True)
class ElementSelector:
    """
    Which element(s) to target.

    Every populated field narrows the match; a selector with no criteria
    matches every node. Field order is the order used in descriptions.
    """
    text_regex: Optional[str] = None
    id_regex: Optional[str] = None
    size: Optional[SizeSelector] = None
    below: Optional[ElementSelector] = None
    above: Optional[ElementSelector] = None
    left_of: Optional[ElementSelector] = None
    right_of: Optional[ElementSelector] = None
    contains_child: Optional[ElementSelector] = None
    traits: Tuple[str, ...] = field(default_factory=tuple)
    index: Optional[int] = None
    optional: bool = False

    def description_parts(self) -> List[str]:
        parts: List[str] = []
        if self.text_regex is not None:
            parts.append(f"Text matching regex: {self.text_regex}")
        if self.id_regex is not None:
            parts.append(f"Id matching regex: {self.id_regex}")
        if self.size is not None:
            parts.append(f"Size: {self.size}")
        if self.below is not None:
            parts.append(f"Below: {self.below.description()}")
        if self.above is not None:
            parts.append(f"Above: {self.above.description()}")
        if self.left_of is not None:
            parts.append(f"Left of: {self.left_of.description()}")
        if self.right_of is not None:
            parts.append(f"Right of: {self.right_of.description()}")
        if self.contains_child is not None:
            parts.append(f"Contains child: {self.contains_child.description()}")
        for name in self.traits:
            parts.append(trait_description(name))
        return parts

    def description(self) -> str:
        return ", ".join(self.description_parts())
