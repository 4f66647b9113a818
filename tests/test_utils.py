"""Tests for utils."""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from utils import (
    bool_gauge,
    env_float,
    env_int,
    env_str,
    format_timestamp,
    join_url,
    parse_timestamp,
    setup_logging,
)


def test_join_url() -> None:
    assert join_url("http://127.0.0.1:4444", "/status") == "http://127.0.0.1:4444/status"
    assert join_url("http://127.0.0.1:4444/", "/status") == "http://127.0.0.1:4444/status"
    assert join_url("http://hub/grid", "se/grid/newsessionqueue/queue") == "http://hub/grid/se/grid/newsessionqueue/queue"
    assert join_url("http://hub", "") == "http://hub"


def test_parse_timestamp() -> None:
    assert parse_timestamp("2024-03-01T10:15:30Z") == datetime(2024, 3, 1, 10, 15, 30, tzinfo=timezone.utc)
    assert parse_timestamp("2024-03-01T10:15:30.5+02:00") == datetime(
        2024, 3, 1, 10, 15, 30, 500000, tzinfo=timezone(timedelta(hours=2))
    )
    assert parse_timestamp("2024-03-01T10:15:30.123456789Z").microsecond == 123456
    with pytest.raises(ValueError):
        parse_timestamp("not a time")


def test_format_timestamp() -> None:
    assert format_timestamp(None) is None
    assert format_timestamp(datetime(2024, 3, 1, tzinfo=timezone.utc)) == "2024-03-01T00:00:00+00:00"


def test_bool_gauge() -> None:
    assert bool_gauge(True) == 1
    assert bool_gauge(False) == 0


def test_env_helpers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GE_TEST_INT", "9100")
    monkeypatch.setenv("GE_TEST_BAD_INT", "ninety")
    monkeypatch.setenv("GE_TEST_FLOAT", "2.5")
    monkeypatch.setenv("GE_TEST_STR", "  http://hub:4444 ")
    assert env_int("GE_TEST_INT") == 9100
    assert env_int("GE_TEST_BAD_INT", 7) == 7
    assert env_int("GE_TEST_MISSING", 3) == 3
    assert env_float("GE_TEST_FLOAT") == 2.5
    assert env_str("GE_TEST_STR") == "http://hub:4444"


def test_setup_logging_with_file(tmp_path: Path) -> None:
    log_file = tmp_path / "logs" / "exporter.log"
    setup_logging("debug", log_file)
    assert logging.getLogger().level == logging.DEBUG
    logging.getLogger("test").info("hello")
    for h in logging.getLogger().handlers:
        h.flush()
    assert "hello" in log_file.read_text(encoding="utf-8")
    setup_logging("INFO")
