# uiflow_core/config.py
"""
@file config.py
@brief Timeout configuration and run settings for the flow runner.
"""

from __future__ import annotations

import json
import os
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml
from jsonschema import Draft202012Validator

from uiflow_core.exceptions import ConfigError
from uiflow_core.timings import TIMEOUT_FIELDS, build_preset_values, list_presets

SCHEMA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schemas")


def load_schema(name: str) -> Dict[str, Any]:
    """Load a bundled JSON schema by file name."""
    with open(os.path.join(SCHEMA_DIR, name), "r", encoding="utf-8") as f:
        return json.load(f)


def validate_against(schema_name: str, data: Any, what: str) -> None:
    """Validate data against a bundled schema, raising ConfigError on failure."""
    validator = Draft202012Validator(load_schema(schema_name))
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))
    if errors:
        lines = [f"{what} schema validation failed:"]
        for e in errors:
            lines.append(f"- {list(e.path)}: {e.message}")
        raise ConfigError("\n".join(lines))


@dataclass
class TimeoutSettings:
    """Timeout, polling interval and random jitter for one kind of wait (seconds)."""
    timeout: float
    interval: float
    jitter: float = 0.0

    def with_overrides(
        self,
        timeout: Optional[float] = None,
        interval: Optional[float] = None,
        jitter: Optional[float] = None,
    ) -> TimeoutSettings:
        """Create a new settings instance with overrides applied."""
        return TimeoutSettings(
            timeout=float(timeout) if timeout is not None else self.timeout,
            interval=float(interval) if interval is not None else self.interval,
            jitter=float(jitter) if jitter is not None else self.jitter,
        )


class TimeConfig:
    """
    Timeout configuration for element lookups and assertions.

    Precedence: base defaults -> preset -> overrides.
    """

    lookup: TimeoutSettings
    optional_lookup: TimeoutSettings
    not_visible: TimeoutSettings
    not_visible_probe: TimeoutSettings

    def __init__(self, preset: Optional[str] = None):
        self.preset = preset or "default"
        self._apply_values(build_preset_values(self.preset))

    def _apply_values(self, values: Dict[str, Any]) -> None:
        for name in TIMEOUT_FIELDS:
            val = values.get(name)
            if isinstance(val, TimeoutSettings):
                setting = deepcopy(val)
            elif isinstance(val, dict):
                setting = TimeoutSettings(
                    timeout=float(val["timeout"]),
                    interval=float(val["interval"]),
                    jitter=float(val.get("jitter", 0.0)),
                )
            else:
                raise ValueError(f"Invalid timeout setting for {name}: {val}")
            setattr(self, name, setting)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for name in TIMEOUT_FIELDS:
            setting: TimeoutSettings = getattr(self, name)
            data[name] = {
                "timeout": setting.timeout,
                "interval": setting.interval,
                "jitter": setting.jitter,
            }
        return data

    def clone(self) -> TimeConfig:
        """Return a deep clone of this config."""
        clone = TimeConfig(self.preset)
        clone._apply_values(self.to_dict())
        return clone

    def lookup_settings(self, optional: bool) -> TimeoutSettings:
        return self.optional_lookup if optional else self.lookup

    @classmethod
    def build_from(
        cls,
        *,
        preset: str = "default",
        overrides: Optional[Dict[str, Any]] = None,
    ) -> TimeConfig:
        """Build a config from a preset with per-field overrides applied."""
        cfg = cls(preset)
        if overrides:
            _apply_overrides(cfg, overrides)
        return cfg


def _apply_overrides(config: TimeConfig, overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if key not in TIMEOUT_FIELDS:
            raise ValueError(f"Unknown TimeConfig field: {key}")
        base_setting: TimeoutSettings = getattr(config, key)
        if isinstance(value, TimeoutSettings):
            setattr(config, key, deepcopy(value))
        elif isinstance(value, dict):
            setattr(config, key, base_setting.with_overrides(
                timeout=value.get("timeout"),
                interval=value.get("interval"),
                jitter=value.get("jitter"),
            ))
        else:
            raise ValueError(f"Invalid override for {key}: {value}")


def available_presets() -> Dict[str, Dict[str, Any]]:
    return list_presets()


@dataclass(frozen=True)
class EventLogSettings:
    enabled: bool = False
    console: bool = True
    file_path: Optional[str] = None
    format: str = "line"
    level: str = "INFO"


@dataclass(frozen=True)
class RunConfig:
    """
    Settings for a FlowRunner.

    state_dir is where init-flow snapshots are written; None means the
    system temp directory.
    """
    timings: TimeConfig = field(default_factory=TimeConfig)
    state_dir: Optional[str] = None
    events: EventLogSettings = field(default_factory=EventLogSettings)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[str] = None) -> RunConfig:
        validate_against("config.schema.json", data, "Run config")
        try:
            timings = TimeConfig.build_from(
                preset=str(data.get("timing_preset", "default")),
                overrides=data.get("timings") or {},
            )
        except ValueError as e:
            raise ConfigError(str(e)) from e

        state_dir = data.get("state_dir")
        if state_dir and base_dir and not os.path.isabs(state_dir):
            state_dir = os.path.join(base_dir, state_dir)

        ev = data.get("events") or {}
        events = EventLogSettings(
            enabled=bool(ev.get("enabled", False)),
            console=bool(ev.get("console", True)),
            file_path=ev.get("file"),
            format=str(ev.get("format", "line")),
            level=str(ev.get("level", "INFO")),
        )
        return cls(timings=timings, state_dir=state_dir, events=events)

    @classmethod
    def load(cls, path: str) -> RunConfig:
        """Load run settings from a YAML file."""
        path = os.path.abspath(path)
        if not os.path.exists(path):
            raise ConfigError(f"Run config YAML not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Run config YAML must be a mapping at root.")
        return cls.from_dict(data, base_dir=os.path.dirname(path))
