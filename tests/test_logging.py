"""Logging coverage to ensure failures are surfaced with useful context."""
import logging

import pytest

from conftest import FakeAssistant
from mdm_console.chat.session import ChatSession
from mdm_console.core.errors import RemoteServiceError
from mdm_console.core.logging import configure_logging


@pytest.fixture
def _restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield root
    root.setLevel(level)
    root.handlers[:] = handlers


def test_configure_logging_reads_level_from_environment(monkeypatch, _restore_root_logger):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    configure_logging()
    assert _restore_root_logger.level == logging.DEBUG
    assert logging.getLogger("urllib3").level == logging.WARNING


def test_repeated_configuration_does_not_stack_handlers(_restore_root_logger):
    configure_logging("INFO")
    handlers = len(_restore_root_logger.handlers)
    configure_logging("WARNING")
    assert len(_restore_root_logger.handlers) == handlers
    assert _restore_root_logger.level == logging.WARNING


def test_failed_submission_is_logged(caplog):
    """Transport failures should be logged as well as shown in the transcript."""

    session = ChatSession(FakeAssistant(RemoteServiceError("server error 503")), greet=False)
    caplog.set_level("WARNING")

    session.submit("find acme")

    assert "Chat submission failed: server error 503" in caplog.text
