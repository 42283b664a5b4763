import logging
import sys

import structlog
from structlog.stdlib import BoundLogger


def configure_structlog() -> None:
    """Configure structlog processors shared by every httpcg logger."""
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        # The handler formatter renders the final line for httpcg and stdlib records
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        # setup_logging may run again with another renderer
        cache_logger_on_first_use=False,
    )


def setup_logging(json_logs: bool = False, log_level: str = "INFO") -> BoundLogger:
    """Send httpcg, httpx and httpcore records to one stdout handler.

    Args:
        json_logs: Render JSON lines instead of the console format
        log_level: Level for the root and httpcg loggers

    Returns:
        A logger bound to the configured pipeline
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    # filter_by_level consults the stdlib level, so it must be set before use
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    configure_structlog()

    handler = logging.StreamHandler(sys.stdout)
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
            ],
        )
    )
    root_logger.handlers = [handler]

    httpcg_logger = logging.getLogger("httpcg")
    httpcg_logger.handlers = []
    httpcg_logger.propagate = True
    httpcg_logger.setLevel(level)

    # Transport libraries only speak up when the app runs at DEBUG
    transport_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for noisy_logger_name in ["httpx", "httpcore", "h2", "hpack"]:
        noisy_logger = logging.getLogger(noisy_logger_name)
        noisy_logger.handlers = []
        noisy_logger.propagate = True
        noisy_logger.setLevel(transport_level)

    return structlog.get_logger()  # type: ignore[no-any-return]


def get_logger(name: str | None = None) -> BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)  # type: ignore[no-any-return]
