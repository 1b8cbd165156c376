"""structlog setup for the radar service.

Events are snake_case with key/value context. Aggregation binds
``filter_key`` and the report route binds ``token_id`` through
structlog.contextvars, so every line logged while serving a request
carries them.
"""

import logging
from typing import Any

import structlog

from radar.config import LogFormat


#: Context keys whose values never reach the log output.
SECRET_KEYS = frozenset({"api_key", "x-api-key", "authorization"})

#: Third-party loggers that are chatty at INFO.
QUIET_LOGGERS = {
    "httpx": logging.WARNING,  # one line per upstream request
    "httpcore": logging.WARNING,
    "uvicorn.access": logging.WARNING,
}


def redact_secrets(
    logger: Any, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """Mask upstream credentials accidentally passed as log context."""
    for key in SECRET_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def setup_logging(log_level: str = "INFO", log_format: LogFormat = "console") -> None:
    """Route structlog and stdlib logging through one handler.

    Args:
        log_level: Root level name, unknown names fall back to INFO.
        log_format: "console" for local runs, "json" for log shipping.
    """
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            # uvicorn and httpx log through stdlib; give them the same context
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger with the given name."""
    return structlog.get_logger(name)
