"""
In-memory driver, tree builder and clock used by the tests.
"""

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from uiflow_core.interfaces import IDriver
from uiflow_core.tree import DeviceInfo, TreeNode


def node(
    text: Optional[str] = None,
    id: Optional[str] = None,
    bounds: Optional[Tuple[int, int, int, int]] = None,
    children: Optional[List[TreeNode]] = None,
    **attrs: str,
) -> TreeNode:
    """Build a TreeNode; bounds is (x1, y1, x2, y2)."""
    attributes: Dict[str, str] = dict(attrs)
    if text is not None:
        attributes["text"] = text
    if id is not None:
        attributes["resource-id"] = id
    if bounds is not None:
        x1, y1, x2, y2 = bounds
        attributes["bounds"] = f"[{x1},{y1}][{x2},{y2}]"
    return TreeNode(attributes=attributes, children=list(children or []))


class FakeDriver(IDriver):
    """In-memory driver recording every action call."""

    def __init__(
        self,
        hierarchy: Union[TreeNode, Callable[[], TreeNode], None] = None,
        device: Optional[DeviceInfo] = None,
    ):
        self.hierarchy = hierarchy if hierarchy is not None else node(bounds=(0, 0, 1080, 1920))
        self.device = device or DeviceInfo(platform="android", width_pixels=1080, height_pixels=1920)
        self.calls: List[Tuple[Any, ...]] = []
        self.errors: Dict[str, BaseException] = {}
        self.captures = 0

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name,) + args)
        error = self.errors.get(name)
        if error is not None:
            raise error

    def call_names(self) -> List[str]:
        return [c[0] for c in self.calls]

    def capture_view_hierarchy(self) -> TreeNode:
        self.captures += 1
        if callable(self.hierarchy):
            return self.hierarchy()
        return self.hierarchy

    def device_info(self) -> DeviceInfo:
        return self.device

    def tap_on_element(self, element, retry_if_no_change, wait_until_visible, long_press):
        self._record("tap_on_element", element, retry_if_no_change, wait_until_visible, long_press)

    def tap_on_point(self, x, y, retry_if_no_change, long_press):
        self._record("tap_on_point", x, y, retry_if_no_change, long_press)

    def swipe(self, start, end):
        self._record("swipe", start, end)

    def back_press(self):
        self._record("back_press")

    def scroll_vertical(self):
        self._record("scroll_vertical")

    def input_text(self, text):
        self._record("input_text", text)

    def open_link(self, link):
        self._record("open_link", link)

    def launch_app(self, app_id):
        self._record("launch_app", app_id)

    def stop_app(self, app_id):
        self._record("stop_app", app_id)

    def clear_app_state(self, app_id):
        self._record("clear_app_state", app_id)

    def pull_app_state(self, app_id, file: Path):
        self._record("pull_app_state", app_id, file)
        Path(file).write_text(f"state of {app_id}", encoding="utf-8")

    def push_app_state(self, app_id, file: Path):
        self._record("push_app_state", app_id, file)


class FakeClock:
    """Replaces the polling clock; sleeping advances time instantly."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


