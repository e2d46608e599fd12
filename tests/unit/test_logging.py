# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for logging configuration."""

import logging

import pytest
import structlog

from schoollink.core.config.settings import Settings
from schoollink.utils.logging import bind_context, clear_context, setup_logging


@pytest.fixture
def restore_logging():
    """Put the root logger and structlog back as they were."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    clear_context()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_root_handler_uses_structlog_formatter(self, restore_logging) -> None:
        """Test stdlib records are rendered through structlog."""
        setup_logging(Settings(environment="test", debug=False, log_level="WARNING"))

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)
        assert root.level == logging.WARNING
        assert logging.getLogger("schoollink").level == logging.WARNING

    def test_noisy_loggers_quieted(self, restore_logging) -> None:
        """Test third-party loggers are raised to WARNING."""
        setup_logging(Settings(environment="development", debug=True, log_level="DEBUG"))

        assert logging.getLogger("sqlalchemy").level == logging.WARNING
        assert logging.getLogger("uvicorn.access").level == logging.WARNING


class TestLogContext:
    """Tests for context binding."""

    def test_bind_and_clear(self, restore_logging) -> None:
        """Test bound values reach the context and are cleared."""
        bind_context(request_id="req-1")

        assert structlog.contextvars.get_contextvars() == {"request_id": "req-1"}

        clear_context()

        assert structlog.contextvars.get_contextvars() == {}
