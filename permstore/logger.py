"""
Structured JSON-lines logger for permstore.

Store operations emit one JSON object per event so that a host can
reconstruct which paths were read, written or denied.

Usage:
    from permstore.logger import get_logger, configure_logger

    configure_logger(level="DEBUG", log_directory="/tmp/permstore-logs")

    logger = get_logger()
    logger.debug("store", "auto_create", {"key": "a"})
    logger.warn("permission", "denied", {"action": "read", "key": "a"})

    with logger.span("definitions", "load") as span:
        definitions = load_definitions(path)
        span.set_data({"count": len(definitions)})
"""

import json
import threading
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from enum import IntEnum
from pathlib import Path
from typing import Any, Dict, Generator, List, Optional, TextIO

LOG_FILE_NAME = "permstore.jsonl"


class LogLevel(IntEnum):
    """Log level enumeration."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40

    @classmethod
    def from_string(cls, level_str: str) -> "LogLevel":
        """Parse a level name, defaulting to INFO."""
        name = str(level_str).upper()
        if name == "WARNING":
            return cls.WARN
        return cls.__members__.get(name, cls.INFO)


class LogSpan:
    """Times a block and logs `<event>_complete` or `<event>_error`."""

    def __init__(
        self,
        logger: "StructuredLogger",
        level: LogLevel,
        component: str,
        event: str,
        data: Optional[Dict[str, Any]] = None,
    ):
        self.logger = logger
        self.level = level
        self.component = component
        self.event = event
        self.data = data or {}
        self._started = 0.0

    def __enter__(self) -> "LogSpan":
        self._started = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        duration_ms = (time.perf_counter() - self._started) * 1000
        level, suffix = self.level, "complete"
        if exc_type is not None:
            self.data.update({"error": str(exc_val), "error_type": exc_type.__name__})
            level, suffix = LogLevel.ERROR, "error"
        self.logger._log(level, self.component, f"{self.event}_{suffix}", self.data, duration_ms)
        return False

    def set_data(self, data: Dict[str, Any]) -> None:
        """Update span data before completion."""
        self.data.update(data)


class StructuredLogger:
    """Thread-safe structured JSON-lines logger.

    Entries go to ``<log_directory>/permstore.jsonl`` when a log directory is
    configured and to stdout when console output is on. The newest entries
    are always kept in memory for ``recent()``.

    Rotation renames ``permstore.jsonl`` to ``permstore.1.jsonl`` after
    shifting each older ``permstore.N.jsonl`` to ``N+1``; at most
    ``max_files`` rotated files are kept.
    """

    def __init__(self, history_size: int = 200):
        self._lock = threading.RLock()
        self._history_size = history_size
        self._history: List[Dict[str, Any]] = []
        self._file_handle: Optional[TextIO] = None
        self.configure()

    @property
    def level(self) -> LogLevel:
        return self._level

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def log_directory(self) -> Optional[Path]:
        return self._log_directory

    @property
    def log_path(self) -> Optional[Path]:
        if self._log_directory is None:
            return None
        return self._log_directory / LOG_FILE_NAME

    def configure(
        self,
        enabled: bool = True,
        level: str = "INFO",
        log_directory: Optional[str] = None,
        console_output: bool = False,
        max_file_size: int = 10485760,
        max_files: int = 10,
    ) -> None:
        """Apply settings; closes any open log file."""
        with self._lock:
            self._close_file()
            self._enabled = enabled
            self._level = LogLevel.from_string(level)
            self._log_directory = Path(log_directory) if log_directory else None
            self._console_output = console_output
            self._max_file_size = max_file_size
            self._max_files = max_files

    def error(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.ERROR, component, event, data)

    def warn(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.WARN, component, event, data)

    def info(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.INFO, component, event, data)

    def debug(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.DEBUG, component, event, data)

    def trace(self, component: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
        self._log(LogLevel.TRACE, component, event, data)

    @contextmanager
    def span(
        self,
        component: str,
        event: str,
        data: Optional[Dict[str, Any]] = None,
        level: LogLevel = LogLevel.INFO,
    ) -> Generator[LogSpan, None, None]:
        """Time a block of work."""
        with LogSpan(self, level, component, event, data) as span_obj:
            yield span_obj

    def recent(self, component: Optional[str] = None) -> List[Dict[str, Any]]:
        """Most recent entries, oldest first, optionally for one component."""
        with self._lock:
            entries = list(self._history)
        if component is None:
            return entries
        return [e for e in entries if e["component"] == component]

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()

    def close(self) -> None:
        with self._lock:
            self._close_file()

    def _log(
        self,
        level: LogLevel,
        component: str,
        event: str,
        data: Optional[Dict[str, Any]] = None,
        duration_ms: Optional[float] = None,
    ) -> None:
        if not self._enabled or level < self._level:
            return

        entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "level": level.name,
            "component": component,
            "event": event,
        }
        if data:
            entry["data"] = self._sanitize(data)
        if duration_ms is not None:
            entry["duration_ms"] = round(duration_ms, 3)

        line = json.dumps(entry)
        with self._lock:
            self._history.append(entry)
            del self._history[:-self._history_size]
            if self._console_output:
                print(f"[{level.name}] {component}.{event}: {line}")
            if self._log_directory is not None:
                self._write_line(line)

    def _sanitize(self, data: Any) -> Any:
        """Reduce data to JSON types."""
        if isinstance(data, dict):
            return {str(k): self._sanitize(v) for k, v in data.items()}
        if isinstance(data, (list, tuple)):
            return [self._sanitize(v) for v in data]
        if data is None or isinstance(data, (str, int, float, bool)):
            return data
        if isinstance(data, bytes):
            return f"<bytes:{len(data)}>"
        if isinstance(data, Exception):
            return {"type": type(data).__name__, "message": str(data)}
        return f"<{type(data).__name__}>"

    def _write_line(self, line: str) -> None:
        try:
            if self._file_handle is None:
                self._log_directory.mkdir(parents=True, exist_ok=True)
                self._file_handle = open(self.log_path, "a", encoding="utf-8")
            self._file_handle.write(line + "\n")
            self._file_handle.flush()
            if self._file_handle.tell() >= self._max_file_size:
                self._rotate()
        except OSError as e:
            self._close_file()
            if self._console_output:
                print(f"Logger error: {e}")

    def _rotated_path(self, index: int) -> Path:
        return self._log_directory / f"permstore.{index}.jsonl"

    def _rotate(self) -> None:
        self._close_file()
        if self._max_files < 1:
            self.log_path.unlink()
            return
        oldest = self._rotated_path(self._max_files)
        if oldest.exists():
            oldest.unlink()
        for index in range(self._max_files - 1, 0, -1):
            source = self._rotated_path(index)
            if source.exists():
                source.rename(self._rotated_path(index + 1))
        self.log_path.rename(self._rotated_path(1))

    def _close_file(self) -> None:
        if self._file_handle is not None:
            handle, self._file_handle = self._file_handle, None
            try:
                handle.close()
            except OSError:
                pass


_logger_instance: Optional[StructuredLogger] = None
_logger_lock = threading.Lock()


def get_logger() -> StructuredLogger:
    """Get the global logger instance."""
    global _logger_instance
    with _logger_lock:
        if _logger_instance is None:
            _logger_instance = StructuredLogger()
        return _logger_instance


def configure_logger(
    enabled: bool = True,
    level: str = "INFO",
    log_directory: Optional[str] = None,
    console_output: bool = False,
    max_file_size: int = 10485760,
    max_files: int = 10,
) -> None:
    """Configure the global logger."""
    get_logger().configure(
        enabled=enabled,
        level=level,
        log_directory=log_directory,
        console_output=console_output,
        max_file_size=max_file_size,
        max_files=max_files,
    )
