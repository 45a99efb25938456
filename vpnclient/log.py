"""
Logging configuration.

Diagnostics go to stderr through structlog so they never mix with the
command output on stdout. Configure once at CLI startup:

    from vpnclient.log import configure_logging
    configure_logging(level="DEBUG", format="json")
"""

import logging
import sys
from typing import Literal, Optional

import structlog

_configured = False


def configure_logging(
    level: Optional[str] = None,
    format: Optional[Literal["json", "console"]] = None,
    force: bool = False,
) -> None:
    """
    Configure structured logging.

    Subsequent calls are no-ops unless force=True.

    Args:
        level: DEBUG | INFO | WARNING | ERROR (default: WARNING)
        format: json | console (default: console)
        force: Reconfigure even if already configured
    """
    global _configured

    if _configured and not force:
        return

    log_level = (level or "WARNING").upper()
    log_format = (format or "console").lower()

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level, logging.WARNING),
        force=True,
    )
    logging.getLogger("vpnclient").setLevel(getattr(logging, log_level, logging.WARNING))

    _configured = True
