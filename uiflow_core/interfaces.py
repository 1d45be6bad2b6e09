"""
@file interfaces.py
@brief Abstract device driver consumed by the flow runner.

A driver wraps one device or emulator. Every call blocks until the device
side has completed; the runner puts no timeout around a single call.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from uiflow_core.geometry import Point
from uiflow_core.tree import DeviceInfo, TreeNode, UiElement


class IDriver(ABC):
    """
    Abstract driver interface for UI capture, input and app lifecycle.
    """

    @abstractmethod
    def capture_view_hierarchy(self) -> TreeNode:
        """
        Capture the current view hierarchy.

        Returns:
            Root node of a fresh tree; the tree is not mutated afterwards
        """
        pass

    @abstractmethod
    def device_info(self) -> DeviceInfo:
        """Screen size and platform of the device."""
        pass

    @abstractmethod
    def tap_on_element(
        self,
        element: UiElement,
        retry_if_no_change: bool,
        wait_until_visible: bool,
        long_press: bool,
    ) -> None:
        """
        Tap a resolved element.

        Args:
            element: Element resolved from a recent hierarchy
            retry_if_no_change: Tap again if the screen did not change
            wait_until_visible: Wait until nothing is drawn over the element first
            long_press: Long press instead of a tap
        """
        pass

    @abstractmethod
    def tap_on_point(self, x: int, y: int, retry_if_no_change: bool, long_press: bool) -> None:
        pass

    @abstractmethod
    def swipe(self, start: Point, end: Point) -> None:
        pass

    @abstractmethod
    def back_press(self) -> None:
        pass

    @abstractmethod
    def scroll_vertical(self) -> None:
        pass

    @abstractmethod
    def input_text(self, text: str) -> None:
        pass

    @abstractmethod
    def open_link(self, link: str) -> None:
        pass

    @abstractmethod
    def launch_app(self, app_id: str) -> None:
        pass

    @abstractmethod
    def stop_app(self, app_id: str) -> None:
        pass

    @abstractmethod
    def clear_app_state(self, app_id: str) -> None:
        """Wipe the app's on-disk state."""
        pass

    @abstractmethod
    def pull_app_state(self, app_id: str, file: Path) -> None:
        """
        Write the app's on-disk state into file.

        The file format belongs to the driver.
        """
        pass

    @abstractmethod
    def push_app_state(self, app_id: str, file: Path) -> None:
        """Restore on-disk state previously written by pull_app_state."""
        pass
