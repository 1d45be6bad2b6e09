"""
UIFlow Core - execution core for declarative UI test flows.

This package provides:
- FlowRunner: runs command lists with fail-fast semantics and app-state snapshots
- Resolver: compiles element selectors into filters and polls the device for matches
- view_utils: hit testing and element re-location over view hierarchies
- Waits: deadline-based polling
- Exceptions: common exception types
- Interfaces: abstract device driver
"""

from uiflow_core.commands import (
    ApplyConfigurationCommand,
    AssertCommand,
    BackPressCommand,
    Command,
    FlowConfig,
    InitFlow,
    InputTextCommand,
    LaunchAppCommand,
    OpenLinkCommand,
    ScrollCommand,
    SwipeCommand,
    TapOnElementCommand,
    TapOnPointCommand,
)
from uiflow_core.config import RunConfig, TimeConfig, TimeoutSettings
from uiflow_core.exceptions import (
    AssertionFailedError,
    ConfigError,
    ElementNotFoundError,
    FlowError,
    UnableToClearStateError,
    UnableToLaunchAppError,
)
from uiflow_core.filters import FilterWithDescription
from uiflow_core.geometry import Bounds, Point
from uiflow_core.interfaces import IDriver
from uiflow_core.loader import load_flow, parse_flow
from uiflow_core.resolver import Resolver
from uiflow_core.runner import AppState, FlowHooks, FlowRunner
from uiflow_core.selectors import ElementSelector, SizeSelector
from uiflow_core.tree import DeviceInfo, TreeNode, UiElement
from uiflow_core.waits import poll_until

__all__ = [
    "ApplyConfigurationCommand",
    "AssertCommand",
    "BackPressCommand",
    "Command",
    "FlowConfig",
    "InitFlow",
    "InputTextCommand",
    "LaunchAppCommand",
    "OpenLinkCommand",
    "ScrollCommand",
    "SwipeCommand",
    "TapOnElementCommand",
    "TapOnPointCommand",
    "RunConfig",
    "TimeConfig",
    "TimeoutSettings",
    "AssertionFailedError",
    "ConfigError",
    "ElementNotFoundError",
    "FlowError",
    "UnableToClearStateError",
    "UnableToLaunchAppError",
    "FilterWithDescription",
    "Bounds",
    "Point",
    "IDriver",
    "load_flow",
    "parse_flow",
    "Resolver",
    "AppState",
    "FlowHooks",
    "FlowRunner",
    "ElementSelector",
    "SizeSelector",
    "DeviceInfo",
    "TreeNode",
    "UiElement",
    "poll_until",
]

__version__ = "1.0.0"
