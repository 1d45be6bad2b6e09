# uiflow_core/loader.py
"""
@file loader.py
@brief Reads YAML flow files into command lists.

A flow file holds an optional config document followed by the command list:

    appId: com.example.app
    initFlow: login.yaml
    ---
    - launchApp
    - tapOn: "Sign in"
    - assertVisible:
        text: "Welcome"
        below:
          id: "toolbar"
"""

from __future__ import annotations

import os
from typing import Any, Dict, List, Optional, Tuple

import yaml

from uiflow_core.commands import (ApplyConfigurationCommand, AssertCommand,
                                  BackPressCommand, Command, FlowConfig,
                                  InitFlow, InputTextCommand, LaunchAppCommand,
                                  OpenLinkCommand, ScrollCommand, SwipeCommand,
                                  TapOnElementCommand, TapOnPointCommand)
from uiflow_core.config import validate_against
from uiflow_core.exceptions import ConfigError
from uiflow_core.geometry import Point
from uiflow_core.selectors import ElementSelector, SizeSelector


def load_flow(path: str) -> List[Command]:
    """Load and validate a flow file."""
    return _load_flow(os.path.abspath(path), ())


def _load_flow(path: str, chain: Tuple[str, ...]) -> List[Command]:
    if path in chain:
        raise ConfigError(f"initFlow cycle: {' -> '.join(chain + (path,))}")
    if not os.path.exists(path):
        raise ConfigError(f"Flow file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        text = f.read()
    return _parse_flow(text, os.path.dirname(path), chain + (path,))


def parse_flow(text: str, base_dir: Optional[str] = None) -> List[Command]:
    """
    Parse flow YAML text.

    @param text YAML source
    @param base_dir Directory for resolving initFlow file paths
    @return Commands, led by an ApplyConfigurationCommand when a config is present
    """
    return _parse_flow(text, base_dir, ())


def _parse_flow(text: str, base_dir: Optional[str], chain: Tuple[str, ...]) -> List[Command]:
    try:
        docs = [d for d in yaml.safe_load_all(text) if d is not None]
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML: {e}") from e

    if len(docs) == 1 and isinstance(docs[0], list):
        raw_config, raw_commands = None, docs[0]
    elif len(docs) == 2:
        raw_config, raw_commands = docs
    else:
        raise ConfigError("Flow must be a command list, optionally preceded by a config document")

    flow: Dict[str, Any] = {"commands": raw_commands}
    if raw_config is not None:
        flow["config"] = raw_config
    validate_against("flow.schema.json", flow, "Flow")

    config = _parse_config(raw_config, base_dir, chain) if raw_config is not None else None
    app_id = config.app_id if config else None

    commands: List[Command] = []
    if config is not None:
        commands.append(ApplyConfigurationCommand(config))
    for idx, raw in enumerate(raw_commands):
        commands.append(_parse_command(raw, app_id, idx))
    return commands


def _parse_config(raw: Dict[str, Any], base_dir: Optional[str], chain: Tuple[str, ...]) -> FlowConfig:
    app_id = raw.get("appId")
    init_raw = raw.get("initFlow")
    if init_raw is None:
        return FlowConfig(app_id=app_id)

    init_app_id = app_id
    if isinstance(init_raw, str):
        init_path = init_raw
        if base_dir and not os.path.isabs(init_path):
            init_path = os.path.join(base_dir, init_path)
        # The init flow's own config is only used for its appId
        loaded = _load_flow(os.path.abspath(init_path), chain)
        nested = next((c.config for c in loaded if isinstance(c, ApplyConfigurationCommand)), None)
        if nested is not None and nested.app_id:
            init_app_id = init_app_id or nested.app_id
        init_commands = [c for c in loaded if not isinstance(c, ApplyConfigurationCommand)]
    elif isinstance(init_raw, list):
        init_commands = [_parse_command(c, app_id, i) for i, c in enumerate(init_raw)]
    else:
        init_app_id = init_raw.get("appId", app_id)
        init_commands = [_parse_command(c, init_app_id, i) for i, c in enumerate(init_raw["commands"])]

    if not init_app_id:
        raise ConfigError("initFlow requires an appId")
    return FlowConfig(app_id=app_id, init_flow=InitFlow(app_id=init_app_id, commands=init_commands))


def _parse_command(raw: Any, app_id: Optional[str], idx: int) -> Command:
    if isinstance(raw, str):
        keyword, args = raw, None
    else:
        keyword, args = next(iter(raw.items()))

    if keyword in ("tapOn", "longPressOn"):
        return _parse_tap(args, long_press=keyword == "longPressOn")

    if keyword == "tapOnPoint":
        if isinstance(args, str):
            p = Point.parse(args)
            return TapOnPointCommand(x=p.x, y=p.y)
        return TapOnPointCommand(
            x=args["x"],
            y=args["y"],
            retry_if_no_change=args.get("retryTapIfNoChange"),
            long_press=args.get("longPress"),
        )

    if keyword == "back":
        return BackPressCommand()

    if keyword == "scroll":
        return ScrollCommand()

    if keyword == "swipe":
        return SwipeCommand(start_point=Point.parse(args["start"]), end_point=Point.parse(args["end"]))

    if keyword == "assertVisible":
        return AssertCommand(visible=parse_selector(args))

    if keyword == "assertNotVisible":
        return AssertCommand(not_visible=parse_selector(args))

    if keyword == "inputText":
        return InputTextCommand(text=args)

    if keyword == "openLink":
        return OpenLinkCommand(link=args)

    if keyword == "launchApp":
        clear_state = None
        target = app_id
        if isinstance(args, str):
            target = args
        elif isinstance(args, dict):
            target = args.get("appId", app_id)
            clear_state = args.get("clearState")
        if not target:
            raise ConfigError(f"commands[{idx}]: launchApp requires an appId")
        return LaunchAppCommand(app_id=target, clear_state=clear_state)

    raise ConfigError(f"commands[{idx}]: unknown command '{keyword}'")


def _parse_tap(args: Any, long_press: bool) -> TapOnElementCommand:
    if isinstance(args, str):
        return TapOnElementCommand(
            selector=parse_selector(args),
            long_press=True if long_press else None,
        )
    return TapOnElementCommand(
        selector=parse_selector(args),
        retry_if_no_change=args.get("retryTapIfNoChange"),
        wait_until_visible=args.get("waitUntilVisible"),
        long_press=True if long_press else args.get("longPress"),
    )


def parse_selector(raw: Any) -> ElementSelector:
    """Build a selector from its YAML form; a bare string is a text regex."""
    if isinstance(raw, str):
        return ElementSelector(text_regex=raw)

    size = None
    if "width" in raw or "height" in raw:
        size = SizeSelector(
            width=raw.get("width"),
            height=raw.get("height"),
            tolerance=raw.get("tolerance", 0),
        )

    traits = raw.get("traits") or ()
    if isinstance(traits, str):
        traits = [t.strip() for t in traits.split(",") if t.strip()]

    def nested(key: str) -> Optional[ElementSelector]:
        return parse_selector(raw[key]) if key in raw else None

    return ElementSelector(
        text_regex=raw.get("text"),
        id_regex=raw.get("id"),
        size=size,
        below=nested("below"),
        above=nested("above"),
        left_of=nested("leftOf"),
        right_of=nested("rightOf"),
        contains_child=nested("containsChild"),
        traits=tuple(traits),
        index=raw.get("index"),
        optional=bool(raw.get("optional", False)),
    )
