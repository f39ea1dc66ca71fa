"""Tests for logging setup."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest
import structlog

from pricewise.log import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


class TestConfigureLogging:
    def test_console_rendering(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO)
        configure_logging("INFO", json=False)
        structlog.get_logger("pricewise.test").info("hello_console", answer=42)
        assert "hello_console" in caplog.text
        assert "answer=42" in caplog.text

    def test_json_rendering(self, caplog: pytest.LogCaptureFixture) -> None:
        caplog.set_level(logging.INFO)
        configure_logging("INFO", json=True)
        structlog.get_logger("pricewise.test").info("hello_json", source="test")
        assert '"event": "hello_json"' in caplog.text
        assert '"level": "info"' in caplog.text

    def test_level_is_case_insensitive(self) -> None:
        configure_logging("debug", json=True)

    def test_unknown_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("LOUD")
