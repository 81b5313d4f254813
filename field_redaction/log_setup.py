"""
Logging setup with redaction on every output path.

configure_logging() wires a stdout handler (JSON or text) carrying a
RedactingFilter, and configures structlog so its event dicts go through
RedactingProcessor before rendering. get_channel_logger() hands out the
request/app/security channel loggers.
"""

import json
import logging
import sys
from typing import Optional

import structlog

from .adapters import RedactingFilter, RedactingLoggerAdapter, RedactingProcessor, record_extras
from .config import Settings, get_settings
from .engine import Redactor

CHANNELS = {
    "request": "requests",
    "app": "app",
    "security": "security",
}

_redactor: Optional[Redactor] = None
_service_name = "app"


def _message_and_fields(record: logging.LogRecord) -> tuple[str, dict]:
    """
    Split a record into its message and its structured fields.

    Records from structlog carry the whole event dict as record.msg;
    everything but "event" becomes a field, like extra= on stdlib records.
    """
    extras = record_extras(record)
    if isinstance(record.msg, dict) and hasattr(record, "_logger"):
        fields = dict(record.msg)
        message = str(fields.pop("event", ""))
        fields.update(extras)
        return message, fields
    return record.getMessage(), extras


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    Fixed fields come first (timestamp, level, service, log_type, message),
    followed by whatever was attached with extra= or bound through structlog.
    Extra fields never replace a fixed one. Exceptions go under "stack".
    """

    def __init__(self, service: str = "app"):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        message, fields = _message_and_fields(record)
        payload = {
            "timestamp": f"{self.formatTime(record, '%Y-%m-%d %H:%M:%S')}.{int(record.msecs):03d}",
            "level": record.levelname.upper(),
            "service": fields.pop("service", self.service),
            "log_type": fields.pop("log_type", "app"),
            "message": message,
        }
        for key, value in fields.items():
            payload.setdefault(key, value)
        if record.exc_info:
            payload["stack"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class TextFormatter(logging.Formatter):
    """Console format: timestamp, level, channel, message and the extra fields."""

    def __init__(self):
        super().__init__("%(asctime)s [%(levelname)s] %(message)s")

    def formatMessage(self, record: logging.LogRecord) -> str:
        record.message, _ = _message_and_fields(record)
        return super().formatMessage(record)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        _, fields = _message_and_fields(record)
        log_type = fields.pop("log_type", None)
        fields.pop("service", None)
        if log_type:
            line = line.replace("] ", f"] [{str(log_type).upper()}] ", 1)
        if fields:
            line = f"{line} {json.dumps(fields, default=str)}"
        return line


def configure_logging(settings: Optional[Settings] = None) -> Redactor:
    """
    Configure stdlib logging and structlog for the process.

    Args:
        settings: Startup settings. Defaults to get_settings() (environment).

    Returns:
        The Redactor shared by every handler and channel logger.
    """
    global _redactor, _service_name
    settings = settings or get_settings()
    redactor = Redactor(settings.policy)
    _redactor = redactor
    _service_name = settings.service_name

    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RedactingFilter(redactor))
    if settings.log_format == "json":
        handler.setFormatter(JsonFormatter(settings.service_name))
    else:
        handler.setFormatter(TextFormatter())

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(settings.log_level)

    # structlog hands its event dict to the handler above, which renders it
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            RedactingProcessor(redactor),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    return redactor


def get_channel_logger(channel: str) -> RedactingLoggerAdapter:
    """
    Return the logger for one channel: "request", "app" or "security".

    Records carry service="<service>-<channel>" and log_type=<channel>.
    """
    if channel not in CHANNELS:
        raise ValueError(f"Unknown log channel {channel!r} (expected one of {sorted(CHANNELS)})")
    return RedactingLoggerAdapter(
        logging.getLogger(f"{_service_name}.{channel}"),
        service=f"{_service_name}-{CHANNELS[channel]}",
        log_type=channel,
        redactor=_redactor,
    )
