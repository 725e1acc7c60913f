"""structlog setup shared by the library and the command line."""
import logging
import sys

import structlog

from blogforge import config

_CONFIGURED = False


def configure_logging(level: str | None = None, json: bool | None = None) -> None:
    """Route stdlib logging and structlog through one processor chain.

    Safe to call more than once; later calls only change the level.
    """
    global _CONFIGURED
    level_name = (level or config.log_level()).upper()
    numeric = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric)
    logging.getLogger().setLevel(numeric)
    if _CONFIGURED:
        return
    use_json = config.log_json() if json is None else json
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if use_json:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer())
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_blogforge_logger(name: str):
    return structlog.get_logger(name)
