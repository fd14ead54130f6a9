import logging
from logging.handlers import RotatingFileHandler

import pytest

from expandable_text.utilities import logging as logging_utils


class TestGetLogger:
    """Group logger setup tests so every module logs to the console and a rotating file."""

    def test_configures_stream_and_rotating_file(
        self, monkeypatch: pytest.MonkeyPatch, tmp_path
    ) -> None:
        """Verify a fresh logger gets both handlers and writes under the configured directory."""
        monkeypatch.setenv("EXPANDABLE_TEXT_LOG_DIR", str(tmp_path))
        monkeypatch.setenv("LOG_LEVEL", "debug")

        logger = logging_utils.get_logger("expandable_text.tests.fresh_logger")

        kinds = {type(handler) for handler in logger.handlers}
        assert RotatingFileHandler in kinds
        assert logging.StreamHandler in kinds
        assert logger.level == logging.DEBUG
        assert not logger.propagate
        assert (tmp_path / "expandable_text_tests_fresh_logger.log").exists()

    def test_existing_handlers_are_kept(self, monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
        """Confirm asking twice does not stack duplicate handlers."""
        monkeypatch.setenv("EXPANDABLE_TEXT_LOG_DIR", str(tmp_path))

        first = logging_utils.get_logger("expandable_text.tests.repeat_logger")
        count = len(first.handlers)
        second = logging_utils.get_logger("expandable_text.tests.repeat_logger")

        assert second is first
        assert len(second.handlers) == count
