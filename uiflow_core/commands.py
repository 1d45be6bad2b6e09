# uiflow_core/commands.py
"""
@file commands.py
@brief Flow commands, one dataclass per command kind.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from uiflow_core.geometry import Point
from uiflow_core.selectors import ElementSelector


class Command:
    """Base class for all flow commands."""

    keyword = "command"

    def description(self) -> str:
        return self.keyword


@dataclass(frozen=True)
class TapOnElementCommand(Command):
    selector: ElementSelector
    retry_if_no_change: Optional[bool] = None
    wait_until_visible: Optional[bool] = None
    long_press: Optional[bool] = None

    keyword = "tapOn"

    def description(self) -> str:
        verb = "Long press on" if self.long_press else "Tap on"
        optional = " (optional)" if self.selector.optional else ""
        return f"{verb} {self.selector.description()}{optional}"


@dataclass(frozen=True)
class TapOnPointCommand(Command):
    x: int
    y: int
    retry_if_no_change: Optional[bool] = None
    long_press: Optional[bool] = None

    keyword = "tapOnPoint"

    def description(self) -> str:
        verb = "Long press on" if self.long_press else "Tap on"
        return f"{verb} point ({self.x},{self.y})"


@dataclass(frozen=True)
class BackPressCommand(Command):
    keyword = "back"

    def description(self) -> str:
        return "Press back"


@dataclass(frozen=True)
class ScrollCommand(Command):
    keyword = "scroll"

    def description(self) -> str:
        return "Scroll vertically"


@dataclass(frozen=True)
class SwipeCommand(Command):
    start_point: Point
    end_point: Point

    keyword = "swipe"

    def description(self) -> str:
        s, e = self.start_point, self.end_point
        return f"Swipe from ({s.x},{s.y}) to ({e.x},{e.y})"


@dataclass(frozen=True)
class AssertCommand(Command):
    visible: Optional[ElementSelector] = None
    not_visible: Optional[ElementSelector] = None

    keyword = "assert"

    def description(self) -> str:
        parts = []
        if self.visible is not None:
            parts.append(f"Assert visible {self.visible.description()}")
        if self.not_visible is not None:
            parts.append(f"Assert not visible {self.not_visible.description()}")
        return "; ".join(parts) or "Assert"


@dataclass(frozen=True)
class InputTextCommand(Command):
    text: str

    keyword = "inputText"

    def description(self) -> str:
        return "Input text"


@dataclass(frozen=True)
class LaunchAppCommand(Command):
    app_id: str
    clear_state: Optional[bool] = None

    keyword = "launchApp"

    def description(self) -> str:
        if self.clear_state:
            return f"Launch app {self.app_id} with clear state"
        return f"Launch app {self.app_id}"


@dataclass(frozen=True)
class OpenLinkCommand(Command):
    link: str

    keyword = "openLink"

    def description(self) -> str:
        return f"Open {self.link}"


@dataclass(frozen=True)
class InitFlow:
    """Commands run once to prepare app disk state for snapshotting."""
    app_id: str
    commands: List[Command] = field(default_factory=list)


@dataclass(frozen=True)
class FlowConfig:
    app_id: Optional[str] = None
    init_flow: Optional[InitFlow] = None


@dataclass(frozen=True)
class ApplyConfigurationCommand(Command):
    """Carries the flow config. Executing it does nothing."""
    config: FlowConfig

    keyword = "config"

    def description(self) -> str:
        return "Apply configuration"


def get_config(commands: Sequence[Command]) -> Optional[FlowConfig]:
    """Return the config of the first ApplyConfigurationCommand, if any."""
    for command in commands:
        if isinstance(command, ApplyConfigurationCommand):
            return command.config
    return None
