# =============================================================================
# tests/unit/test_logging.py
# Unit Tests for logging setup and its environment configuration
# =============================================================================

import logging

import pytest


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestLogConfig:

    def test_log_level_from_environment(self, monkeypatch):
        from fabstock_core.config import get_log_level

        monkeypatch.setenv("FABSTOCK_LOG_LEVEL", " debug ")
        assert get_log_level() == logging.DEBUG

        monkeypatch.setenv("FABSTOCK_LOG_LEVEL", "chatty")
        assert get_log_level() == logging.INFO

    def test_log_dir_can_be_disabled(self, monkeypatch, tmp_path):
        from fabstock_core.config import DEFAULT_LOG_DIR, get_log_dir

        monkeypatch.delenv("FABSTOCK_LOG_DIR", raising=False)
        assert get_log_dir() == DEFAULT_LOG_DIR

        monkeypatch.setenv("FABSTOCK_LOG_DIR", str(tmp_path))
        assert get_log_dir() == tmp_path

        monkeypatch.setenv("FABSTOCK_LOG_DIR", "-")
        assert get_log_dir() is None


class TestSetupLogging:

    def test_writes_daily_file(self, tmp_path, restore_root_logger):
        from fabstock_core.logging import get_logger, setup_logging
        from fabstock_core.logging.config import daily_log_file

        setup_logging(level=logging.INFO, log_dir=tmp_path / "logs")
        get_logger("fabstock_core.tests").info("Stock adjusted")
        for handler in restore_root_logger.handlers:
            handler.flush()

        content = daily_log_file(tmp_path / "logs").read_text(encoding="utf-8")
        assert "fabstock_core.tests | INFO | Stock adjusted" in content

    def test_quietens_http_clients(self, tmp_path, restore_root_logger):
        from fabstock_core.logging import setup_logging

        setup_logging(level=logging.DEBUG, log_dir=tmp_path)

        assert restore_root_logger.level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("supabase").level == logging.WARNING


class TestLogContext:

    def test_logs_completion(self, caplog):
        from fabstock_core.logging import LogContext, get_logger

        with caplog.at_level(logging.INFO, logger="fabstock_core"):
            with LogContext(get_logger("fabstock_core.sync"), "Loading inventory"):
                pass

        messages = [r.getMessage() for r in caplog.records]
        assert messages[0] == "Loading inventory..."
        assert messages[-1].startswith("Loading inventory done in ")

    def test_logs_failure_and_propagates(self, caplog):
        from fabstock_core.logging import LogContext, get_logger

        with caplog.at_level(logging.INFO, logger="fabstock_core"):
            with pytest.raises(RuntimeError):
                with LogContext(get_logger("fabstock_core.sync"), "Uploading team"):
                    raise RuntimeError("offline")

        failure = caplog.records[-1]
        assert failure.levelno == logging.ERROR
        assert "Uploading team failed after" in failure.getMessage()
        assert failure.getMessage().endswith("offline")
