import json
import logging
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from unittest.mock import patch

import pytest
import structlog

from shared.logging import _serialize_enums, configure_structlog, setup_logging


@pytest.fixture(autouse=True)
def _cleanup_root_logger():
    """Close and remove root handlers, then restore the test structlog pipeline."""
    yield
    root = logging.getLogger()
    for handler in root.handlers[:]:
        handler.close()
        root.removeHandler(handler)
    configure_structlog()


@pytest.fixture(autouse=True)
def _allow_file_logging():
    """Disable the pytest guard so file handlers are really created."""
    with patch("shared.logging._is_test", return_value=False):
        yield


class TestSetupLogging:
    def test_configures_stdout_handler(self):
        setup_logging()
        root = logging.getLogger()

        assert root.level == logging.INFO
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_file_handler_in_log_dir(self, tmp_path):
        log_dir = tmp_path / "scorecard"
        log_path = setup_logging(log_dir=log_dir)
        root = logging.getLogger()

        assert len(root.handlers) == 2
        file_handler = root.handlers[1]
        assert isinstance(file_handler, logging.FileHandler)
        assert Path(file_handler.baseFilename) == log_path
        assert log_path.parent == log_dir
        assert log_path.suffix == ".log"

    def test_log_file_named_by_timestamp(self, tmp_path):
        fixed_time = datetime(2025, 3, 15, 10, 30, 45, tzinfo=UTC)
        with patch("shared.logging.datetime") as mock_dt:
            mock_dt.now.return_value = fixed_time
            log_path = setup_logging(log_dir=tmp_path)

        assert log_path is not None
        assert log_path.name == "2025-03-15_10-30-45.log"

    def test_log_file_custom_name(self, tmp_path):
        log_path = setup_logging(log_dir=str(tmp_path / "nested" / "dir"), name="club-night")

        assert log_path == tmp_path / "nested" / "dir" / "club-night.log"
        assert log_path.parent.exists()

    def test_no_file_under_pytest_guard(self, tmp_path):
        with patch("shared.logging._is_test", return_value=True):
            assert setup_logging(log_dir=tmp_path) is None
        assert len(logging.getLogger().handlers) == 1

    def test_returns_none_without_log_dir(self):
        assert setup_logging() is None

    def test_writes_to_file(self, tmp_path):
        log_path = setup_logging(log_dir=tmp_path)

        structlog.get_logger("test.writes_to_file").info("round added", round_index=3)

        content = log_path.read_text()
        assert "round added" in content
        assert "round_index" in content

    def test_repeated_calls_replace_handlers(self):
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_explicit_level(self):
        setup_logging(level=logging.DEBUG)

        assert logging.getLogger().level == logging.DEBUG

    def test_level_from_env(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "warning")
        setup_logging()

        assert logging.getLogger().level == logging.WARNING

    def test_invalid_level_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "bogus")
        with pytest.raises(ValueError, match="Invalid LOG_LEVEL"):
            setup_logging()

    def test_json_mode(self, tmp_path, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "json")
        log_path = setup_logging(log_dir=tmp_path)

        structlog.contextvars.bind_contextvars(block_id="block-1")
        structlog.get_logger("test.json").info("game completed", game_type=_GameKind.POOL)
        structlog.contextvars.clear_contextvars()

        parsed = json.loads(log_path.read_text().strip().splitlines()[0])
        assert parsed["event"] == "game completed"
        assert parsed["block_id"] == "block-1"
        assert parsed["game_type"] == "pool"

    def test_invalid_log_format_raises(self, monkeypatch):
        monkeypatch.setenv("LOG_FORMAT", "xml")
        with pytest.raises(ValueError, match="Invalid LOG_FORMAT"):
            setup_logging()


class _GameKind(Enum):
    POOL = "pool"
    DARTS = "darts"


class TestSerializeEnums:
    def test_replaces_enum_with_value(self):
        result = _serialize_enums(None, "", {"game_type": _GameKind.POOL, "msg": "hello"})
        assert result == {"game_type": "pool", "msg": "hello"}

    def test_replaces_enums_inside_dicts(self):
        result = _serialize_enums(None, "", {"limits": {"kind": _GameKind.DARTS, "max": 8}})
        assert result["limits"] == {"kind": "darts", "max": 8}

    def test_replaces_enums_inside_sequences(self):
        result = _serialize_enums(None, "", {"game_types": [_GameKind.POOL, _GameKind.DARTS], "ids": (1, 2)})
        assert result["game_types"] == ["pool", "darts"]
        assert result["ids"] == [1, 2]
