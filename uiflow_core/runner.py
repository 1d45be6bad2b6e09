# uiflow_core/runner.py
"""
@file runner.py
@brief Flow runner: executes commands in order with fail-fast semantics.
"""

from __future__ import annotations

import logging
import os
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence
from uuid import uuid4

from uiflow_core.commands import (ApplyConfigurationCommand, AssertCommand,
                                  BackPressCommand, Command, InitFlow,
                                  InputTextCommand, LaunchAppCommand,
                                  OpenLinkCommand, ScrollCommand, SwipeCommand,
                                  TapOnElementCommand, TapOnPointCommand,
                                  get_config)
from uiflow_core.config import RunConfig
from uiflow_core.eventlogger import EVENT_LOGGER
from uiflow_core.exceptions import (AssertionFailedError, ElementNotFoundError,
                                    UnableToClearStateError,
                                    UnableToLaunchAppError)
from uiflow_core.interfaces import IDriver
from uiflow_core.resolver import Resolver
from uiflow_core.selectors import ElementSelector
from uiflow_core.tree import TreeNode
from uiflow_core.waits import poll_until


@dataclass(frozen=True)
class AppState:
    """
    Snapshot of an app's on-disk state produced by an init flow.

    The file is written once and only read afterwards, so one snapshot can
    seed any number of runs.
    """
    app_id: str
    file: Path

    def discard(self) -> None:
        """Delete the snapshot file."""
        try:
            self.file.unlink()
        except FileNotFoundError:
            pass


def _reraise(index: int, command: Command, error: BaseException) -> None:
    raise error


@dataclass
class FlowHooks:
    """
    Lifecycle callbacks. They observe the run and cannot change its outcome:
    a failed command always stops the flow. The default failure hook
    re-raises the error to the caller of run_flow().
    """
    on_flow_start: Callable[[List[Command]], None] = lambda commands: None
    on_command_start: Callable[[int, Command], None] = lambda index, command: None
    on_command_complete: Callable[[int, Command], None] = lambda index, command: None
    on_command_failed: Callable[[int, Command, BaseException], None] = _reraise


class FlowRunner:
    """
    Runs flows against a device driver.

    Handles init-flow snapshots, dispatches each command to its handler and
    stops at the first command that fails.
    """

    def __init__(
        self,
        driver: IDriver,
        config: Optional[RunConfig] = None,
        hooks: Optional[FlowHooks] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        @param driver Device driver
        @param config Timeouts and state directory (defaults when None)
        @param hooks Lifecycle callbacks
        @param logger Logger for run diagnostics
        """
        self.driver = driver
        self.config = config or RunConfig()
        self.hooks = hooks or FlowHooks()
        self.log = logger or logging.getLogger("uiflow.runner")
        self.resolver = Resolver(driver, self.config.timings, logger=self.log.getChild("resolver"))

        events = self.config.events
        if events.enabled:
            EVENT_LOGGER.configure(
                console=events.console,
                file_path=events.file_path,
                level=events.level,
                format=events.format,
            )
            EVENT_LOGGER.enable()

        self._handlers: Dict[type, Callable[[Command], None]] = {
            TapOnElementCommand: self._tap_on_element,
            TapOnPointCommand: self._tap_on_point,
            BackPressCommand: lambda c: self.driver.back_press(),
            ScrollCommand: lambda c: self.driver.scroll_vertical(),
            SwipeCommand: self._swipe,
            AssertCommand: self._assert,
            InputTextCommand: self._input_text,
            LaunchAppCommand: self._launch_app,
            OpenLinkCommand: self._open_link,
            ApplyConfigurationCommand: lambda c: None,
        }

    def run_flow(self, commands: Sequence[Command], init_state: Optional[AppState] = None) -> bool:
        """
        Run a flow.

        If init_state is given it is restored onto the app and any init flow in
        the flow's config is skipped. Otherwise a configured init flow runs
        first; if it fails, no command of this flow runs.

        @return True if every command succeeded
        """
        commands = list(commands)
        run_id = str(uuid4())
        EVENT_LOGGER.set_run_id(run_id)

        state = init_state
        if state is None:
            config = get_config(commands)
            if config is not None and config.init_flow is not None:
                state = self.run_init_flow(config.init_flow)
                if state is None:
                    self.log.error("Init flow for %s failed, skipping flow", config.init_flow.app_id)
                    return False

        if state is not None:
            self.log.info("Restoring app state for %s from %s", state.app_id, state.file)
            self.driver.clear_app_state(state.app_id)
            self.driver.push_app_state(state.app_id, state.file)

        return self._run_commands(commands)

    def run_init_flow(self, init_flow: InitFlow) -> Optional[AppState]:
        """
        Run an init flow and snapshot the app's disk state.

        The init flow's own config is not consulted, so init flows do not nest.

        @return Snapshot in a new uniquely named file, or None if the flow failed
        """
        self.log.info("Running init flow for %s", init_flow.app_id)
        if not self._run_commands(list(init_flow.commands)):
            return None

        self.driver.stop_app(init_flow.app_id)

        state_dir = self.config.state_dir
        if state_dir:
            os.makedirs(state_dir, exist_ok=True)
        fd, path = tempfile.mkstemp(suffix=".state", dir=state_dir)
        os.close(fd)
        state_file = Path(path)

        try:
            self.driver.pull_app_state(init_flow.app_id, state_file)
        except Exception:
            state_file.unlink()
            raise
        self.log.info("Saved app state for %s to %s", init_flow.app_id, state_file)
        return AppState(app_id=init_flow.app_id, file=state_file)

    def _run_commands(self, commands: List[Command]) -> bool:
        self.hooks.on_flow_start(commands)
        EVENT_LOGGER.log(event="flow_start", metadata={"commands": len(commands)})
        flow_start = time.time()

        for index, command in enumerate(commands):
            self.hooks.on_command_start(index, command)
            start_time = time.time()
            EVENT_LOGGER.log(
                event="command_start",
                command=command.keyword,
                index=index,
                description=command.description(),
            )
            try:
                self.execute_command(command)
                duration_ms = int((time.time() - start_time) * 1000)
                self.hooks.on_command_complete(index, command)
                EVENT_LOGGER.log(
                    event="command_finish",
                    status="ok",
                    command=command.keyword,
                    index=index,
                    duration_ms=duration_ms,
                )
            except Exception as e:
                duration_ms = int((time.time() - start_time) * 1000)
                self.log.error("Command %d failed: %s: %s", index, command.description(), e)
                EVENT_LOGGER.log(
                    event="command_finish",
                    status="error",
                    command=command.keyword,
                    index=index,
                    duration_ms=duration_ms,
                    exception=e,
                )
                EVENT_LOGGER.log(
                    event="flow_finish",
                    status="failed",
                    duration_ms=int((time.time() - flow_start) * 1000),
                )
                self.hooks.on_command_failed(index, command, e)
                return False

        EVENT_LOGGER.log(
            event="flow_finish",
            status="passed",
            duration_ms=int((time.time() - flow_start) * 1000),
        )
        return True

    def execute_command(self, command: Command) -> None:
        """Execute a single command. Unknown commands are ignored."""
        handler = self._handlers.get(type(command))
        if handler is None:
            self.log.debug("Ignoring unsupported command: %r", command)
            return
        handler(command)

    def _tap_on_element(self, command: TapOnElementCommand) -> None:
        try:
            element = self.resolver.resolve(command.selector)
        except ElementNotFoundError:
            if not command.selector.optional:
                raise
            self.log.info("Optional element not found, skipping: %s", command.selector.description())
            return

        self.driver.tap_on_element(
            element,
            retry_if_no_change=_default(command.retry_if_no_change, True),
            wait_until_visible=_default(command.wait_until_visible, True),
            long_press=_default(command.long_press, False),
        )

    def _tap_on_point(self, command: TapOnPointCommand) -> None:
        self.driver.tap_on_point(
            command.x,
            command.y,
            retry_if_no_change=_default(command.retry_if_no_change, True),
            long_press=_default(command.long_press, False),
        )

    def _swipe(self, command: SwipeCommand) -> None:
        self.driver.swipe(command.start_point, command.end_point)

    def _input_text(self, command: InputTextCommand) -> None:
        self.driver.input_text(command.text)

    def _open_link(self, command: OpenLinkCommand) -> None:
        self.driver.open_link(command.link)

    def _assert(self, command: AssertCommand) -> None:
        if command.visible is not None:
            self._assert_visible(command.visible)
        if command.not_visible is not None:
            self._assert_not_visible(command.not_visible)

    def _assert_visible(self, selector: ElementSelector) -> None:
        self.resolver.resolve(selector, timeout=self.config.timings.lookup.timeout)

    def _assert_not_visible(self, selector: ElementSelector) -> None:
        """
        Probe repeatedly with a short lookup until the outer window elapses.
        The first probe that finds the element fails the assertion.
        """
        outer = self.config.timings.not_visible
        probe_timeout = self.config.timings.not_visible_probe.timeout

        def probe() -> Optional[TreeNode]:
            try:
                self.resolver.resolve(selector, timeout=probe_timeout)
            except ElementNotFoundError:
                return None
            return self.driver.capture_view_hierarchy()

        hierarchy = poll_until(
            outer.timeout,
            probe,
            interval=outer.interval,
            jitter=outer.jitter,
            description=f"'{selector.description()}' to stay hidden",
        )
        if hierarchy is not None:
            raise AssertionFailedError(f"{selector.description()} is visible", hierarchy)

    def _launch_app(self, command: LaunchAppCommand) -> None:
        try:
            if command.clear_state:
                self.driver.clear_app_state(command.app_id)
        except Exception as e:
            raise UnableToClearStateError(command.app_id, cause=e) from e

        try:
            self.driver.launch_app(command.app_id)
        except Exception as e:
            raise UnableToLaunchAppError(command.app_id, cause=e) from e


def _default(value: Optional[bool], default: bool) -> bool:
    return default if value is None else value
