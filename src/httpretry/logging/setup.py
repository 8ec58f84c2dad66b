import contextvars
import logging
import sys
import uuid

import structlog
from pythonjsonlogger import jsonlogger
from structlog.stdlib import LoggerFactory

from ..config import get_settings


def setup_logging(
    service_name: str,
    level: str | None = None,
    format_type: str | None = None,  # "json" or "console"
) -> None:
    """
    Set up structured logging for the process using httpretry

    Args:
        service_name: Name of the service for log context
        level: Log level (DEBUG, INFO, WARNING, ERROR), defaults to HTTPRETRY_LOG_LEVEL
        format_type: "json" for production, "console" for development, defaults to HTTPRETRY_LOG_FORMAT
    """
    settings = get_settings()
    level = level or settings.log_level
    format_type = format_type or settings.log_format
    log_level = getattr(logging, level.upper(), logging.INFO)

    # Configure stdlib logging
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )
    # basicConfig is a no-op once the root logger has handlers
    logging.getLogger().setLevel(log_level)

    # Configure processors
    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        add_service_context(service_name),
        add_request_id_context(),
    ]

    if format_type == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    # Configure structlog
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    # JSON formatting for non-structlog loggers
    if format_type == "json":
        root_logger = logging.getLogger()
        handler = logging.StreamHandler(sys.stdout)
        formatter = jsonlogger.JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
        handler.setFormatter(formatter)
        root_logger.handlers = [handler]


def add_service_context(service_name: str):
    """Add service context to all log entries"""

    def processor(logger, method_name, event_dict):
        event_dict["service"] = service_name
        return event_dict

    return processor


def add_request_id_context():
    """Add the current attempt's request ID, if any"""

    def processor(logger, method_name, event_dict):
        request_id = _request_id_var.get()
        if request_id:
            event_dict.setdefault("request_id", request_id)
        return event_dict

    return processor


# Context variable for the per-attempt request ID
_request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)


def new_request_id() -> contextvars.Token:
    """Bind a fresh request ID to the current context.

    Returns the token needed by ``reset_request_id`` to restore the previous value.
    """
    return _request_id_var.set(str(uuid.uuid4()))


def reset_request_id(token: contextvars.Token) -> None:
    """Restore the request ID that was bound before ``new_request_id``"""
    _request_id_var.reset(token)


def get_request_id() -> str | None:
    """Get request ID from context"""
    return _request_id_var.get()


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance"""
    return structlog.get_logger(name)
