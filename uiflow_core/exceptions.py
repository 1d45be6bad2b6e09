# uiflow_core/exceptions.py
"""
@file exceptions.py
@brief Custom exception classes for the flow execution core.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from uiflow_core.tree import TreeNode


class FlowError(Exception):
    """Base exception for the framework."""
    pass


class ConfigError(FlowError):
    """Raised when YAML/JSON configuration or a flow file is invalid."""
    pass


class ElementNotFoundError(FlowError):
    """
    Raised when a selector does not match any element within the lookup timeout.

    Carries the view hierarchy captured at the moment of failure so callers
    can dump it for debugging.
    """

    def __init__(
        self,
        message: str,
        hierarchy: Optional[TreeNode] = None,
        description: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.message = message
        self.hierarchy = hierarchy
        self.description = description
        self.timeout = timeout
        super().__init__(self.__str__())

    def __str__(self) -> str:
        if self.timeout is not None:
            return f"{self.message} (timeout={self.timeout}s)"
        return self.message


class AssertionFailedError(FlowError):
    """
    Raised when an assertion command fails.

    Carries the view hierarchy captured when the assertion was decided.
    """

    def __init__(self, message: str, hierarchy: Optional[TreeNode] = None):
        self.message = message
        self.hierarchy = hierarchy
        super().__init__(message)


class UnableToClearStateError(FlowError):
    """Raised when the driver fails to clear app state before a launch."""

    def __init__(self, app_id: str, cause: Optional[BaseException] = None):
        self.app_id = app_id
        self.cause = cause
        super().__init__(f"Unable to clear state for app {app_id}")


class UnableToLaunchAppError(FlowError):
    """Raised when the driver fails to launch an app."""

    def __init__(self, app_id: str, cause: Optional[BaseException] = None):
        self.app_id = app_id
        self.cause = cause
        msg = f"Unable to launch app {app_id}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
