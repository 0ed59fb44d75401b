"""
Structured logging setup.

The scoring service configures structlog with JSON output on import; call
configure_logging() at application start to apply a LoggingConfig instead.
"""

import logging

import structlog

from pethealth.config import LoggingConfig


def configure_logging(config: LoggingConfig) -> None:
    """Apply level and renderer from config to structlog and the stdlib root logger."""
    renderer: structlog.types.Processor
    if config.format == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    logging.basicConfig(format="%(message)s", level=config.level)
    logging.getLogger().setLevel(config.level)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
