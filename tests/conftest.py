"""
Pytest configuration and shared fixtures for the field redaction tests.

Redaction is pure, so fixtures only build policies and keep the process-wide
settings and logging configuration from leaking between tests.
"""

import logging
import os
import sys

import pytest
import structlog

# Add parent directory to path for package imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from field_redaction import FieldPolicy, Redactor  # noqa: E402
from field_redaction import config  # noqa: E402

REDACTION_ENV_VARS = [
    "REDACTION_PROFILE",
    "REDACTION_FIELDS",
    "REDACTION_EXTRA_FIELDS",
    "REDACTION_MARKER",
    "REDACTION_MAX_DEPTH",
    "LOG_LEVEL",
    "LOG_FORMAT",
    "SERVICE_NAME",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """
    Remove redaction/logging variables and cached settings.
    This runs automatically before each test.
    """
    for name in REDACTION_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture
def restore_root_logger():
    """Put the root logger's handlers, its level and structlog back after a test reconfigures them."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
    structlog.reset_defaults()


@pytest.fixture
def password_policy():
    """A policy with a single pattern, for exact substring checks."""
    return FieldPolicy(patterns=("password",))


@pytest.fixture
def redactor():
    """A Redactor using the default web_backend policy."""
    return Redactor()
