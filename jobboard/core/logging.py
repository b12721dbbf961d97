"""
Logging setup - stdlib logging as the sink, structlog as the front end.

Call configure_logging() once at startup; modules then use
    logger = structlog.get_logger(__name__)
"""

import logging
import sys

import structlog

from jobboard.core.config import get_settings

_configured = False


def configure_logging() -> None:
    """Configure root logging and structlog. Safe to call more than once."""
    global _configured
    if _configured:
        return

    settings = get_settings()
    level = settings.log_level.upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    logging.basicConfig(level=level, handlers=[handler])

    # Silence third-party noise
    for noisy in ("httpx", "httpcore", "passlib", "multipart"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.debug else logging.WARNING
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _configured = True
