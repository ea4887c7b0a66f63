"""
Tests for permstore/logger.py and permstore/logging_config.py

Tests cover:
- Level filtering and entry structure
- JSONL file output, rotation and spans
- Store operations emitting events
- Configuration from settings, a loaded config and environment
"""

import json

import pytest

from permstore import PermissionDenied, Store
from permstore.config import PermstoreConfig
from permstore.logger import LogLevel, StructuredLogger, get_logger
from permstore.logging_config import (
    configure_from_config,
    configure_from_environment,
    configure_from_settings,
)


class TestLogLevel:
    """Test LogLevel parsing."""

    def test_from_string(self):
        """Should parse names case-insensitively, defaulting to INFO."""
        assert LogLevel.from_string("debug") is LogLevel.DEBUG
        assert LogLevel.from_string("WARNING") is LogLevel.WARN
        assert LogLevel.from_string("bogus") is LogLevel.INFO


class TestStructuredLogger:
    """Test StructuredLogger."""

    def test_level_filtering(self):
        """Should drop entries below the configured level."""
        logger = StructuredLogger()
        logger.configure(level="WARN")
        logger.info("c", "skipped")
        logger.error("c", "kept", {"n": 1})
        entries = logger.recent()
        assert [e["event"] for e in entries] == ["kept"]
        assert entries[0]["level"] == "ERROR"
        assert entries[0]["data"] == {"n": 1}

    def test_disabled(self):
        """Should record nothing when disabled."""
        logger = StructuredLogger()
        logger.configure(enabled=False)
        logger.error("c", "e")
        assert logger.recent() == []

    def test_history_bounded(self):
        """Should keep only the most recent entries."""
        logger = StructuredLogger(history_size=3)
        for i in range(5):
            logger.info("c", f"e{i}")
        assert [e["event"] for e in logger.recent()] == ["e2", "e3", "e4"]

    def test_file_output(self, tmp_path):
        """Should write JSON lines to the log directory."""
        logger = StructuredLogger()
        logger.configure(level="DEBUG", log_directory=str(tmp_path))
        logger.debug("store", "write", {"key": "a"})
        logger.close()

        assert logger.log_path == tmp_path / "permstore.jsonl"
        lines = logger.log_path.read_text(encoding="utf-8").splitlines()
        entry = json.loads(lines[0])
        assert set(entry) == {"ts", "level", "component", "event", "data"}
        assert entry["component"] == "store"
        assert entry["event"] == "write"
        assert entry["data"] == {"key": "a"}

    def test_rotation_keeps_newest_files(self, tmp_path):
        """Should shift rotated files so older generations survive."""
        logger = StructuredLogger()
        logger.configure(log_directory=str(tmp_path), max_file_size=1, max_files=2)
        for i in range(4):
            logger.info("c", f"gen{i}")
        logger.close()

        def events(name):
            text = (tmp_path / name).read_text(encoding="utf-8")
            return [json.loads(line)["event"] for line in text.splitlines()]

        assert events("permstore.1.jsonl") == ["gen3"]
        assert events("permstore.2.jsonl") == ["gen2"]
        assert not (tmp_path / "permstore.3.jsonl").exists()
        assert not (tmp_path / "permstore.jsonl").exists()

    def test_appends_until_size_limit(self, tmp_path):
        """Should keep appending to the current file below the size limit."""
        logger = StructuredLogger()
        logger.configure(log_directory=str(tmp_path))
        logger.info("c", "first")
        logger.info("c", "second")
        logger.close()

        lines = (tmp_path / "permstore.jsonl").read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["event"] for line in lines] == ["first", "second"]
        assert not (tmp_path / "permstore.1.jsonl").exists()

    def test_span_complete(self):
        """Should log a completion event with a duration."""
        logger = StructuredLogger()
        with logger.span("c", "work") as span:
            span.set_data({"items": 2})
        entry = logger.recent()[-1]
        assert entry["event"] == "work_complete"
        assert entry["data"] == {"items": 2}
        assert entry["duration_ms"] >= 0

    def test_span_error(self):
        """Should log an error event and re-raise."""
        logger = StructuredLogger()
        with pytest.raises(KeyError):
            with logger.span("c", "work"):
                raise KeyError("x")
        entry = logger.recent()[-1]
        assert entry["event"] == "work_error"
        assert entry["level"] == "ERROR"
        assert entry["data"]["error_type"] == "KeyError"

    def test_sanitizes_unserializable_data(self):
        """Should replace values JSON cannot encode."""
        logger = StructuredLogger()
        logger.info("c", "e", {"obj": object(), "raw": b"abc", "err": ValueError("bad")})
        data = logger.recent()[-1]["data"]
        assert data["obj"] == "<object>"
        assert data["raw"] == "<bytes:3>"
        assert data["err"] == {"type": "ValueError", "message": "bad"}


class TestStoreLogging:
    """Test events emitted by Store operations."""

    def test_denial_logged(self, reset_logger):
        """Should log a warning before raising PermissionDenied."""
        store = Store(permissions={"k": "none"})
        with pytest.raises(PermissionDenied):
            store.read("k")
        entry = reset_logger.recent("permission")[-1]
        assert entry["level"] == "WARN"
        assert entry["data"] == {"action": "read", "key": "k"}

    def test_auto_create_logged(self, reset_logger):
        """Should log auto-created intermediate stores."""
        Store().write("a:b", 1)
        events = [e["event"] for e in reset_logger.recent("store")]
        assert "auto_create" in events
        assert "write" in events


class TestLoggingConfig:
    """Test logging_config helpers."""

    def test_configure_from_settings(self, tmp_path):
        """Should apply host settings to the global logger."""
        configure_from_settings({
            "log_level": "ERROR",
            "log_directory": str(tmp_path),
            "log_enabled": True,
        })
        logger = get_logger()
        assert logger.level is LogLevel.ERROR
        assert logger.log_directory == tmp_path
        assert logger.enabled is True

    def test_configure_from_config(self, tmp_path):
        """Should apply the log fields of a loaded config."""
        config = PermstoreConfig(log_level="DEBUG", log_directory=str(tmp_path / "logs"))
        configure_from_config(config)

        logger = get_logger()
        assert logger.level is LogLevel.DEBUG
        assert logger.log_directory == tmp_path / "logs"

        logger.debug("config", "applied")
        logger.close()
        lines = (tmp_path / "logs" / "permstore.jsonl").read_text(encoding="utf-8").splitlines()
        assert json.loads(lines[-1])["event"] == "applied"

    def test_configure_from_config_without_directory(self):
        """Should log to memory only when the config names no directory."""
        configure_from_config(PermstoreConfig(log_level="WARN"))
        logger = get_logger()
        assert logger.level is LogLevel.WARN
        assert logger.log_directory is None
        assert logger.log_path is None

    def test_configure_from_environment(self, clean_env, tmp_path):
        """Should read PERMSTORE_LOG_* variables."""
        clean_env.setenv("PERMSTORE_LOG_LEVEL", "DEBUG")
        clean_env.setenv("PERMSTORE_LOG_ENABLED", "false")
        clean_env.setenv("PERMSTORE_LOG_DIR", str(tmp_path))
        configure_from_environment()
        logger = get_logger()
        assert logger.level is LogLevel.DEBUG
        assert logger.enabled is False
        assert logger.log_directory == tmp_path
