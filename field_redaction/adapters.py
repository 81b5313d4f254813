"""
Logging adapters - Apply the Redactor at the points where records are emitted.

    - safe_redact: redaction that can never lose the value
    - RedactingFilter: stdlib logging filter for the message, args and extra= fields
    - RedactingLoggerAdapter: channel logger (request/app/security) that
      redacts its metadata before handing it to logging
    - RedactingProcessor: structlog processor for event dicts

Every adapter falls back to the original value if redaction fails, so the
record itself is always emitted.
"""

import logging
from collections.abc import Mapping
from typing import Any, MutableMapping, Optional

from .engine import Redactor, get_default_redactor

logger = logging.getLogger(__name__)

# Attributes every LogRecord carries, plus the ones structlog adds for
# ProcessorFormatter; anything else arrived through extra=.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("x", logging.INFO, "x", 0, "", None, None))
) | {"message", "asctime", "_logger", "_name", "_from_structlog"}


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the attributes that were attached to a record via extra=."""
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


def safe_redact(value: Any, redactor: Optional[Redactor] = None) -> Any:
    """
    Redact a value, passing it through untouched if redaction fails.

    Args:
        value: The payload to redact.
        redactor: Redactor to use. Defaults to get_default_redactor().
    """
    redactor = redactor or get_default_redactor()
    try:
        return redactor.redact(value)
    except Exception as e:
        logger.debug(f"Redaction failed, passing value through: {e!r}")
        return value


class RedactingFilter(logging.Filter):
    """
    Redacts sensitive fields on every record passing through a handler or logger.

    Handles both styles of structured logging:
        log.info("login %(user)s", {"user": "ann", "password": "x"})
        log.info("login", extra={"body": {"password": "x"}})

    Always returns True: the filter rewrites records, it never drops them.
    """

    def __init__(self, redactor: Optional[Redactor] = None, name: str = ""):
        super().__init__(name)
        self._redactor = redactor

    @property
    def redactor(self) -> Redactor:
        return self._redactor or get_default_redactor()

    def filter(self, record: logging.LogRecord) -> bool:
        redactor = self.redactor

        # Mappings or sequences logged as the message itself
        if isinstance(record.msg, (Mapping, list, tuple)):
            record.msg = safe_redact(record.msg, redactor)

        # A single mapping argument is stored as record.args itself
        if isinstance(record.args, Mapping):
            record.args = safe_redact(record.args, redactor)
        elif isinstance(record.args, tuple) and record.args:
            record.args = tuple(safe_redact(arg, redactor) for arg in record.args)

        for key, value in record_extras(record).items():
            if redactor.is_sensitive(key):
                setattr(record, key, redactor.policy.marker)
            else:
                setattr(record, key, safe_redact(value, redactor))
        return True


class RedactingLoggerAdapter(logging.LoggerAdapter):
    """
    Logger for one log channel that redacts metadata before emitting it.

    Example:
        request_log = RedactingLoggerAdapter(
            logging.getLogger("http.request"), service="shop-requests", log_type="request"
        )
        request_log.info("Request started", extra={"query": {"token": "abc"}})
        # record.query == {"token": "[FILTERED]"}, record.service == "shop-requests"
    """

    def __init__(
        self,
        logger: logging.Logger,
        service: str,
        log_type: str,
        redactor: Optional[Redactor] = None,
    ):
        super().__init__(logger, {"service": service, "log_type": log_type})
        self._redactor = redactor

    @property
    def redactor(self) -> Redactor:
        return self._redactor or get_default_redactor()

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        meta = kwargs.get("extra") or {}
        redacted = safe_redact(dict(meta), self.redactor)
        if not isinstance(redacted, dict):
            redacted = dict(meta)
        kwargs["extra"] = {**redacted, **self.extra}
        return msg, kwargs


class RedactingProcessor:
    """
    Structlog processor that redacts the event dict.

    Returns a new event dict; the one structlog passed in is left as it was.
    """

    def __init__(self, redactor: Optional[Redactor] = None):
        self._redactor = redactor

    def __call__(self, _logger: Any, _method_name: str, event_dict: dict) -> dict:
        redacted = safe_redact(event_dict, self._redactor)
        if isinstance(redacted, dict):
            return redacted
        return event_dict
