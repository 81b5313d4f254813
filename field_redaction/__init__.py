"""
Field Redaction - Strip sensitive fields from structured log payloads

This package replaces the values of sensitive mapping keys (passwords,
tokens, API keys, identity fields, ...) before a payload reaches a log sink.
Matching is by key name only: a case-insensitive substring test against a
configured pattern list.

Architecture:
    - Redactor: Core engine that walks dicts/lists and applies a FieldPolicy
    - FieldPolicy: Immutable patterns + markers, built once at startup
    - PolicyProfile: Abstract base class for named pattern bundles
    - profiles/: Built-in profiles (web_backend, credentials)
    - adapters: logging.Filter, LoggerAdapter and structlog processor

Example:
    from field_redaction import Redactor

    redactor = Redactor()
    safe = redactor.redact({"user": {"email": "ann@example.com", "id": 7}})
    # safe: {"user": {"email": "[FILTERED]", "id": 7}}
"""

from .adapters import RedactingFilter, RedactingLoggerAdapter, RedactingProcessor, safe_redact
from .base_policy import FieldPolicy, PolicyError, PolicyProfile
from .config import Settings, get_settings, load_policy, load_settings
from .engine import RedactionReport, Redactor, get_default_redactor, redact
from .log_setup import JsonFormatter, configure_logging, get_channel_logger
from .profiles import DEFAULT_POLICY, DEFAULT_PROFILE

__all__ = [
    "DEFAULT_POLICY",
    "DEFAULT_PROFILE",
    "FieldPolicy",
    "JsonFormatter",
    "PolicyError",
    "PolicyProfile",
    "RedactingFilter",
    "RedactingLoggerAdapter",
    "RedactingProcessor",
    "RedactionReport",
    "Redactor",
    "Settings",
    "configure_logging",
    "get_channel_logger",
    "get_default_redactor",
    "get_settings",
    "load_policy",
    "load_settings",
    "redact",
    "safe_redact",
]
