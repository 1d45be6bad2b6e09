"""
Tests for the structured event log.
"""

import json

import pytest

from fakes import FakeDriver
from uiflow_core.commands import BackPressCommand, InputTextCommand
from uiflow_core.config import EventLogSettings, RunConfig
from uiflow_core.eventlogger import EVENT_LOGGER, EventLogger
from uiflow_core.runner import FlowHooks, FlowRunner


def read_events(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


class TestEventLogger:
    """Tests for EventLogger output."""

    def test_disabled_by_default(self, tmp_path):
        """Should write nothing until enabled."""
        path = tmp_path / "events.jsonl"
        logger = EventLogger()
        logger.configure(console=False, file_path=str(path), format="jsonl")

        logger.log(event="flow_start")

        assert not path.exists()

    def test_jsonl_file_output(self, tmp_path):
        """Should append JSON lines to the file."""
        path = tmp_path / "logs" / "events.jsonl"
        logger = EventLogger()
        logger.configure(console=False, file_path=str(path), format="jsonl", run_id="run-1")
        logger.enable()

        logger.log(event="command_start", command="tapOn", index=0, description="Text matching regex: OK")

        (event,) = read_events(path)
        assert event["event"] == "command_start"
        assert event["command"] == "tapOn"
        assert event["index"] == 0
        assert event["run_id"] == "run-1"

    def test_line_format(self, tmp_path, caplog):
        """Should log pipe-separated lines to the console logger."""
        logger = EventLogger()
        logger.configure(console=True, format="line")
        logger.enable()

        with caplog.at_level("INFO", logger="uiflow.events"):
            logger.log(event="flow_finish", status="passed", duration_ms=12)

        assert "event=flow_finish | status=passed | duration_ms=12" in caplog.text

    def test_sensitive_metadata_is_redacted(self, tmp_path):
        """Should mask sensitive metadata keys."""
        path = tmp_path / "events.jsonl"
        logger = EventLogger()
        logger.configure(console=False, file_path=str(path), format="jsonl")
        logger.enable()

        logger.log(event="custom", metadata={"Password": "hunter2", "user": "bob"})

        (event,) = read_events(path)
        assert event["metadata"] == {"Password": "***", "user": "bob"}

    def test_exception_details(self, tmp_path):
        """Should record exception type, message and cause."""
        path = tmp_path / "events.jsonl"
        logger = EventLogger()
        logger.configure(console=False, file_path=str(path), format="jsonl")
        logger.enable()

        try:
            try:
                raise OSError("adb")
            except OSError as e:
                raise RuntimeError("launch failed") from e
        except RuntimeError as e:
            logger.log(event="command_finish", status="error", exception=e)

        exc = read_events(path)[0]["exception"]
        assert exc["type"] == "RuntimeError"
        assert exc["message"] == "launch failed"
        assert exc["cause_type"] == "OSError"

    def test_invalid_format(self):
        """Should reject unknown formats."""
        with pytest.raises(ValueError):
            EventLogger().configure(format="xml")


class TestRunnerEvents:
    """Tests for events emitted during a flow run."""

    def test_flow_events(self, tmp_path):
        """Should emit flow and command events for a run."""
        path = tmp_path / "events.jsonl"
        config = RunConfig(events=EventLogSettings(
            enabled=True, console=False, file_path=str(path), format="jsonl",
        ))
        driver = FakeDriver()
        driver.errors["input_text"] = RuntimeError("keyboard gone")
        runner = FlowRunner(driver, config=config, hooks=FlowHooks(on_command_failed=lambda i, c, e: None))

        assert runner.run_flow([BackPressCommand(), InputTextCommand(text="x")]) is False

        events = read_events(path)
        assert [(e["event"], e["status"]) for e in events] == [
            ("flow_start", "info"),
            ("command_start", "info"),
            ("command_finish", "ok"),
            ("command_start", "info"),
            ("command_finish", "error"),
            ("flow_finish", "failed"),
        ]
        assert len({e["run_id"] for e in events}) == 1
        assert events[4]["exception"]["message"] == "keyboard gone"
        assert EVENT_LOGGER.is_enabled()
