"""
Unit tests for logging setup.

WHAT: Test handler wiring, app logger naming, third-party noise levels
WHY: Run diagnostics depend on offer detail landing in the log file
HOW: Point LOG_FILE at tmp_path, restore root handlers afterwards
"""

import logging

import pytest
from unittest.mock import patch

from cartai.core.config import settings
from cartai.utils.logger import APP_LOGGER, QUIET_LOGGERS, get_logger, setup_logging


@pytest.fixture
def isolated_logging(tmp_path):
    """Run setup_logging against a temp file and put the previous config back."""
    root = logging.getLogger()
    # pytest's capture handlers come and go per phase; leave those to pytest
    saved_handlers = [h for h in root.handlers if not type(h).__module__.startswith("_pytest")]
    saved_root_level = root.level
    touched = [APP_LOGGER, *QUIET_LOGGERS]
    saved_levels = {name: logging.getLogger(name).level for name in touched}
    log_file = tmp_path / "logs" / "cartai.log"

    with patch.object(settings, "LOG_FILE", str(log_file)), patch.object(settings, "LOG_LEVEL", "debug"):
        setup_logging()
        installed = list(root.handlers)
        yield log_file, installed

    for handler in installed:
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_root_level)
    for name, level in saved_levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.mark.unit
class TestGetLogger:

    def test_package_modules_keep_their_name(self):
        assert get_logger("cartai.agents.orchestrator").name == "cartai.agents.orchestrator"
        assert get_logger(APP_LOGGER).name == APP_LOGGER

    def test_outside_modules_nest_under_app_logger(self):
        assert get_logger("scripts.seed").name == "cartai.scripts.seed"

    def test_prefix_lookalike_is_nested(self):
        assert get_logger("cartaiextra").name == "cartai.cartaiextra"


@pytest.mark.unit
class TestSetupLogging:

    def test_creates_log_directory_and_writes_debug_to_file(self, isolated_logging):
        log_file, installed = isolated_logging
        get_logger("cartai.services.ranking").debug("round 3 offer detail")
        for handler in installed:
            handler.flush()

        assert log_file.parent.is_dir()
        content = log_file.read_text()
        assert "Logging initialized" in content
        assert "round 3 offer detail" in content

    def test_console_at_info_and_file_at_debug(self, isolated_logging):
        _, handlers = isolated_logging
        levels = {type(h): h.level for h in handlers}

        assert len(handlers) == 2
        assert levels[logging.FileHandler] == logging.DEBUG
        assert levels[logging.StreamHandler] == logging.INFO

    def test_app_level_follows_settings(self, isolated_logging):
        assert logging.getLogger(APP_LOGGER).level == logging.DEBUG

    def test_http_client_logs_capped_at_warning(self, isolated_logging):
        for name in ("httpx", "httpcore", "sqlalchemy.engine"):
            assert logging.getLogger(name).level == logging.WARNING
