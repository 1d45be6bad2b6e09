# uiflow_core/geometry.py
"""
@file geometry.py
@brief Screen points and axis-aligned bounds.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Optional

_BOUNDS_PATTERN = re.compile(r"^\[(-?\d+),(-?\d+)\]\[(-?\d+),(-?\d+)\]$")


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    @classmethod
    def parse(cls, text: str) -> Point:
        """Parse "x,y" into a Point."""
        parts = [p.strip() for p in str(text).split(",")]
        if len(parts) != 2:
            raise ValueError(f"Invalid point: {text!r}")
        return cls(int(parts[0]), int(parts[1]))


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in screen pixels."""
    x: int
    y: int
    width: int
    height: int

    @property
    def left(self) -> int:
        return self.x

    @property
    def top(self) -> int:
        return self.y

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def center(self) -> Point:
        return Point(self.x + self.width // 2, self.y + self.height // 2)

    def contains(self, x: int, y: int) -> bool:
        """Edges are inclusive."""
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def clip(self, width: int, height: int) -> Optional[Bounds]:
        """
        Clip to the screen rectangle [0, width] x [0, height].

        @return Clipped bounds, or None if nothing of this rectangle is on screen
        """
        left = max(self.left, 0)
        top = max(self.top, 0)
        right = min(self.right, width)
        bottom = min(self.bottom, height)
        if right < left or bottom < top:
            return None
        return Bounds(left, top, right - left, bottom - top)


def parse_bounds(text: Optional[str]) -> Optional[Bounds]:
    """Parse the "[x1,y1][x2,y2]" bounds encoding used in view hierarchies."""
    if not text:
        return None
    m = _BOUNDS_PATTERN.match(text.strip())
    if not m:
        return None
    x1, y1, x2, y2 = (int(g) for g in m.groups())
    return Bounds(x1, y1, x2 - x1, y2 - y1)


def format_bounds(bounds: Bounds) -> str:
    return f"[{bounds.left},{bounds.top}][{bounds.right},{bounds.bottom}]"
