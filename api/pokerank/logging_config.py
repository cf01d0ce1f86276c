import logging

import structlog

from pokerank.config import settings


def configure_logging(level: str | None = None):
    """Configure structlog with JSON rendering and contextvars for request tracing."""
    logging.basicConfig(
        format="%(message)s",
        level=(level or settings.log_level).upper(),
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,  # Must be first: merges per-request context
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
