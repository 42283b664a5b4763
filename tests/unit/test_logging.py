"""Tests for structlog setup."""

import logging

import pytest
import structlog

from httpcg import get_logger, setup_logging


@pytest.mark.unit
@pytest.mark.usefixtures("restore_logging")
def test_setup_logging_debug_opens_transport_loggers() -> None:
    setup_logging(log_level="DEBUG")

    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("httpcg").level == logging.DEBUG
    assert logging.getLogger("httpx").level == logging.DEBUG
    assert logging.getLogger("httpcore").level == logging.DEBUG


@pytest.mark.unit
@pytest.mark.usefixtures("restore_logging")
def test_setup_logging_info_quiets_transport_loggers() -> None:
    setup_logging(log_level="info")

    assert logging.getLogger("httpcg").level == logging.INFO
    assert logging.getLogger("httpx").level == logging.WARNING
    assert logging.getLogger("h2").level == logging.WARNING


@pytest.mark.unit
@pytest.mark.usefixtures("restore_logging")
def test_setup_logging_json_renderer() -> None:
    setup_logging(json_logs=True)

    handler = logging.getLogger().handlers[0]

    assert isinstance(handler.formatter, structlog.stdlib.ProcessorFormatter)
    assert isinstance(
        handler.formatter.processors[-1], structlog.processors.JSONRenderer
    )


@pytest.mark.unit
def test_build_logs_warning_when_host_cap_exceeds_total() -> None:
    from httpcg import new_builder

    with structlog.testing.capture_logs() as logs:
        new_builder().with_max_idle_connections(5, 50).build().close()

    events = [entry["event"] for entry in logs]
    assert "max_host_idle_exceeds_total" in events
    assert "http_client_built" in events


@pytest.mark.unit
def test_get_logger_binds_name() -> None:
    logger = get_logger("httpcg.tests")

    assert logger is not None
