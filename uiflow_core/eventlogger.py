"""
@file eventlogger.py
@brief Structured event log for flow runs, commands and polling.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

_SENSITIVE_KEYS = {"password", "passwd", "secret", "token"}


class EventLogger:
    """
    Thread-safe event logger with line/jsonl output.

    Disabled by default. Console output goes through the "uiflow.events"
    logging logger; file output is appended line by line.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._lock = threading.Lock()
        self._log = logger or logging.getLogger("uiflow.events")
        self._enabled = False
        self._console = True
        self._file_path: Optional[str] = None
        self._level = "INFO"
        self._run_id = "default"
        self._format = "line"
        self._max_traceback_chars = 4000

    def configure(
        self,
        *,
        console: bool = True,
        file_path: Optional[str] = None,
        level: str = "INFO",
        run_id: Optional[str] = None,
        format: str = "line",
        max_traceback_chars: int = 4000,
    ) -> None:
        """Configure logger settings."""
        fmt = (format or "line").lower()
        if fmt not in {"line", "jsonl"}:
            raise ValueError("EventLogger format must be 'line' or 'jsonl'")

        with self._lock:
            self._console = bool(console)
            self._file_path = file_path
            self._level = level.upper()
            self._format = fmt
            self._max_traceback_chars = max(256, int(max_traceback_chars))
            if run_id:
                self._run_id = run_id

    def enable(self) -> None:
        with self._lock:
            self._enabled = True

    def disable(self) -> None:
        with self._lock:
            self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def set_run_id(self, run_id: str) -> None:
        if run_id:
            with self._lock:
                self._run_id = run_id

    @property
    def run_id(self) -> str:
        return self._run_id

    def log(
        self,
        *,
        event: str,
        status: str = "info",
        command: Optional[str] = None,
        index: Optional[int] = None,
        description: Optional[str] = None,
        duration_ms: Optional[int] = None,
        metadata: Optional[Dict[str, Any]] = None,
        exception: Optional[BaseException] = None,
    ) -> None:
        """Emit a log event."""
        if not self._enabled:
            return

        event_obj: Dict[str, Any] = {
            "timestamp": time.strftime("%H:%M:%S"),
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": self._level,
            "event": event,
            "command": command,
            "index": index,
            "description": description,
            "status": status,
            "duration_ms": duration_ms,
            "metadata": self._redact_metadata(dict(metadata or {})),
            "run_id": self._run_id,
        }
        if exception is not None:
            event_obj["exception"] = self._format_exception(exception)

        line = self._format_output(event_obj)

        if self._console:
            self._log.info(line)
        if self._file_path:
            self._write_file(line)

    def _write_file(self, line: str) -> None:
        try:
            os.makedirs(os.path.dirname(os.path.abspath(self._file_path)) or ".", exist_ok=True)
            with open(self._file_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            self._log.warning("Could not write event log %s: %s", self._file_path, e)

    def _format_output(self, event: Dict[str, Any]) -> str:
        if self._format == "jsonl":
            return json.dumps(event, ensure_ascii=False, separators=(",", ":"), default=str)
        return self._format_line(event)

    def _format_line(self, event: Dict[str, Any]) -> str:
        parts = [event.get("timestamp", ""), event.get("level", "INFO"), f"event={event['event']}"]

        for key in ("command", "index", "description", "status", "duration_ms", "run_id"):
            value = event.get(key)
            if value is not None and value != "":
                parts.append(f"{key}={value}")

        for key, value in (event.get("metadata") or {}).items():
            parts.append(f"{key}={value}")

        exc = event.get("exception")
        if exc:
            parts.append(f"exc_type={exc.get('type')}")
            parts.append(f"exc_message={exc.get('message')}")
            if exc.get("cause_type"):
                parts.append(f"cause_type={exc.get('cause_type')}")

        return " | ".join(parts)

    @staticmethod
    def _redact_metadata(metadata: Dict[str, Any]) -> Dict[str, Any]:
        return {k: ("***" if k.lower() in _SENSITIVE_KEYS else v) for k, v in metadata.items()}

    def _format_exception(self, exception: BaseException) -> Dict[str, Any]:
        tb = "".join(traceback.format_exception(type(exception), exception, exception.__traceback__))
        if len(tb) > self._max_traceback_chars:
            tb = tb[: self._max_traceback_chars] + "...<truncated>"

        cause = exception.__cause__
        return {
            "type": type(exception).__name__,
            "message": str(exception),
            "traceback": tb.strip(),
            "cause_type": type(cause).__name__ if cause is not None else None,
            "cause_message": str(cause) if cause is not None else None,
        }


EVENT_LOGGER = EventLogger()
