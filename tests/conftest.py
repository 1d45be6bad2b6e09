"""
Shared fixtures for flow tests.
"""

import pytest

from fakes import FakeClock
from uiflow_core import waits
from uiflow_core.eventlogger import EVENT_LOGGER


@pytest.fixture
def fake_clock(monkeypatch):
    clock = FakeClock()
    monkeypatch.setattr(waits, "_now", clock.time)
    monkeypatch.setattr(waits, "_sleep", clock.sleep)
    return clock


@pytest.fixture(autouse=True)
def _quiet_event_logger():
    yield
    EVENT_LOGGER.disable()
