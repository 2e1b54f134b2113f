"""Unit tests for observability logging."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from event_ledger.observability.logging import (
    JsonLoggerFactory,
    Logger,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter):
            root.removeHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


# ---------------------------------------------------------------------------
# JsonLoggerFactory
# ---------------------------------------------------------------------------


class TestJsonLoggerFactory:
    def test_renders_json_lines(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(logging.INFO)
        get_logger("ledger.test").info("account.opened", account_id="a-1")
        line = capsys.readouterr().err.strip().splitlines()[-1]
        record = json.loads(line)
        assert record["event"] == "account.opened"
        assert record["account_id"] == "a-1"
        assert record["level"] == "info"
        assert record["logger"] == "ledger.test"
        assert "timestamp" in record

    def test_level_name_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("warning")
        log = get_logger("ledger.test")
        log.info("quiet")
        log.warning("loud")
        err = capsys.readouterr().err
        assert "quiet" not in err
        assert "loud" in err
        assert logging.getLogger().level == logging.WARNING

    def test_console_renderer(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("INFO", json=False)
        get_logger("ledger.test").info("plain.event", n=3)
        err = capsys.readouterr().err
        assert "plain.event" in err
        assert "n=3" in err
        with pytest.raises(json.JSONDecodeError):
            json.loads(err.strip().splitlines()[-1])

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ValueError):
            configure_logging("CHATTY")

    def test_single_root_handler(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1


# ---------------------------------------------------------------------------
# get_logger
# ---------------------------------------------------------------------------


class TestGetLogger:
    def test_initial_values_are_bound(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging()
        get_logger("ledger.test", store="InMemoryEventStore").info("bound")
        record = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert record["store"] == "InMemoryEventStore"

    def test_satisfies_logger_protocol(self) -> None:
        log: Logger = get_logger("ledger.test")
        assert callable(log.info)
        assert callable(log.warning)
