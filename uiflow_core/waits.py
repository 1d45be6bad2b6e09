# uiflow_core/waits.py
"""
@file waits.py
@brief Deadline-based polling used by element lookup and assertions.
"""

from __future__ import annotations

import random
import time
from typing import Callable, Optional, TypeVar

from uiflow_core.eventlogger import EVENT_LOGGER

T = TypeVar("T")


def _now() -> float:
    """Monotonic time source for deterministic timeout calculations."""
    return time.monotonic()


def _sleep(seconds: float) -> None:
    time.sleep(seconds)


def poll_until(
    timeout: float,
    probe: Callable[[], Optional[T]],
    interval: float = 0.2,
    jitter: float = 0.0,
    description: str = "condition",
) -> Optional[T]:
    """
    Call probe until it returns something other than None, or until timeout.

    The probe always runs at least once, even with a zero timeout. Exceptions
    raised by the probe propagate to the caller.

    @param timeout Deadline in seconds, measured from the first call
    @param probe Returns None to keep waiting, anything else to stop
    @param interval Pause between probes in seconds
    @param jitter Upper bound of a random extra pause added to each interval
    @param description What is being waited for, used in event logs
    @return The first non-None probe result, or None if the deadline passed
    """
    start_time = _now()
    deadline = start_time + timeout
    attempt_count = 0

    while True:
        attempt_count += 1
        result = probe()
        if result is not None:
            if EVENT_LOGGER.is_enabled():
                EVENT_LOGGER.log(
                    event="poll_success",
                    status="success",
                    description=description,
                    metadata={
                        "attempts": attempt_count,
                        "elapsed_s": round(_now() - start_time, 3),
                    },
                )
            return result

        time_left = deadline - _now()
        if time_left <= 0:
            break

        pause = interval + (random.uniform(0, jitter) if jitter > 0 else 0.0)
        _sleep(min(pause, time_left))

    if EVENT_LOGGER.is_enabled():
        EVENT_LOGGER.log(
            event="poll_timeout",
            status="timeout",
            description=description,
            metadata={
                "timeout_s": timeout,
                "attempts": attempt_count,
                "elapsed_s": round(_now() - start_time, 3),
            },
        )
    return None
