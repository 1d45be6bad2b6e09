# uiflow_core/timings.py
"""
@file timings.py
@brief Time configuration presets and defaults for flow execution.
"""

from __future__ import annotations
from copy import deepcopy
from typing import Any, Dict


TIMEOUT_FIELDS: Dict[str, Dict[str, Any]] = {
    "lookup": {"timeout": 15.0, "interval": 0.2, "jitter": 0.0},
    "optional_lookup": {"timeout": 3.0, "interval": 0.2, "jitter": 0.0},
    "not_visible": {"timeout": 15.0, "interval": 0.2, "jitter": 0.0},
    "not_visible_probe": {"timeout": 2.0, "interval": 0.2, "jitter": 0.0},
}

PRESET_OVERRIDES: Dict[str, Dict[str, Any]] = {
    "fast": {
        "lookup": {"timeout": 7.0, "interval": 0.1},
        "optional_lookup": {"timeout": 1.5, "interval": 0.1},
        "not_visible": {"timeout": 7.0, "interval": 0.1},
        "not_visible_probe": {"timeout": 1.0, "interval": 0.1},
    },
    "slow": {
        "lookup": {"timeout": 30.0, "interval": 0.4},
        "optional_lookup": {"timeout": 6.0, "interval": 0.4},
        "not_visible": {"timeout": 30.0, "interval": 0.4},
        "not_visible_probe": {"timeout": 4.0, "interval": 0.4},
    },
    "ci": {
        "lookup": {"timeout": 30.0, "interval": 0.5, "jitter": 0.1},
        "optional_lookup": {"timeout": 5.0, "interval": 0.5, "jitter": 0.1},
        "not_visible": {"timeout": 20.0, "interval": 0.5, "jitter": 0.1},
        "not_visible_probe": {"timeout": 3.0, "interval": 0.3},
    },
}


def list_presets() -> Dict[str, Dict[str, Any]]:
    return {"default": {}, **PRESET_OVERRIDES}


def build_preset_values(preset: str) -> Dict[str, Any]:
    preset_key = (preset or "default").lower()
    values: Dict[str, Any] = deepcopy(TIMEOUT_FIELDS)

    if preset_key == "default":
        return values

    overrides = PRESET_OVERRIDES.get(preset_key)
    if overrides is None:
        raise ValueError(f"Unknown timing preset: {preset}")

    for key, value in overrides.items():
        base = deepcopy(values[key])
        base.update(value)
        values[key] = base

    return values
