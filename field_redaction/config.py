"""
Configuration - Build the process-wide FieldPolicy from the environment.

Variables (all optional, read once at startup):
    REDACTION_PROFILE        comma separated profile names (default: web_backend)
    REDACTION_FIELDS         comma separated patterns, replaces the profile patterns
    REDACTION_EXTRA_FIELDS   comma separated patterns appended to the policy
    REDACTION_MARKER         replacement for sensitive values (default: [FILTERED])
    REDACTION_MAX_DEPTH      nesting bound before truncation (default: 32)
    LOG_LEVEL                logging level (default: INFO)
    LOG_FORMAT               json or text (default: json)
    SERVICE_NAME             service label on log records (default: app)

A .env file is loaded first when present; real environment variables win.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv

from .base_policy import (
    DEFAULT_MARKER,
    DEFAULT_MAX_DEPTH,
    MAX_ALLOWED_DEPTH,
    FieldPolicy,
    PolicyError,
    normalize_patterns,
)
from .profiles import DEFAULT_PROFILE, get_profile

logger = logging.getLogger(__name__)

LOG_FORMATS = ("json", "text")


@dataclass(frozen=True)
class Settings:
    """Everything the logging side of an application needs at startup."""
    policy: FieldPolicy
    log_level: str = "INFO"
    log_format: str = "json"
    service_name: str = "app"


def _split(raw: Optional[str]) -> list[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _read_env(env: Optional[Mapping[str, str]], env_file: Optional[str]) -> Mapping[str, str]:
    if env is not None:
        return env
    if env_file is None:
        # search from the working directory, not from this installed module
        env_file = find_dotenv(usecwd=True)
    # override=False keeps real environment variables ahead of the file
    load_dotenv(env_file, override=False)
    return os.environ


def policy_from_env(env: Mapping[str, str]) -> FieldPolicy:
    """Build a FieldPolicy from an already-loaded variable mapping."""
    profile_names = _split(env.get("REDACTION_PROFILE")) or [DEFAULT_PROFILE.name]
    profiles = [get_profile(name) for name in profile_names]

    explicit = _split(env.get("REDACTION_FIELDS"))
    if explicit:
        patterns = explicit
    else:
        patterns = [p for profile in profiles for p in profile.get_patterns()]
    patterns.extend(_split(env.get("REDACTION_EXTRA_FIELDS")))

    marker = env.get("REDACTION_MARKER") or DEFAULT_MARKER

    raw_depth = env.get("REDACTION_MAX_DEPTH")
    try:
        max_depth = int(raw_depth) if raw_depth else DEFAULT_MAX_DEPTH
    except ValueError:
        raise PolicyError(f"REDACTION_MAX_DEPTH must be an integer, got {raw_depth!r}") from None
    if not 1 <= max_depth <= MAX_ALLOWED_DEPTH:
        raise PolicyError(
            f"REDACTION_MAX_DEPTH must be between 1 and {MAX_ALLOWED_DEPTH}, got {raw_depth!r}"
        )

    normalized = normalize_patterns(patterns)
    if not normalized:
        raise PolicyError("REDACTION_FIELDS and REDACTION_PROFILE leave no patterns to match")
    clashing = next((p for p in normalized if p in marker.lower()), None)
    if clashing is not None:
        raise PolicyError(
            f"REDACTION_MARKER {marker!r} contains sensitive pattern {clashing!r}"
        )

    return FieldPolicy(patterns=tuple(patterns), marker=marker, max_depth=max_depth)


def load_policy(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[str] = None,
) -> FieldPolicy:
    """
    Load the FieldPolicy from environment variables.

    Args:
        env: Variables to read. Defaults to os.environ after loading .env.
        env_file: Explicit .env path. Defaults to the nearest .env at or above
            the working directory.

    Raises:
        PolicyError: If a variable holds an invalid value.
    """
    policy = policy_from_env(_read_env(env, env_file))
    logger.info(f"Loaded redaction policy with {len(policy.patterns)} patterns")
    return policy


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    env_file: Optional[str] = None,
) -> Settings:
    """Load the policy plus the logging options. See module docstring."""
    values = _read_env(env, env_file)

    log_level = (values.get("LOG_LEVEL") or "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise PolicyError(f"LOG_LEVEL must be a logging level name, got {log_level!r}")

    log_format = (values.get("LOG_FORMAT") or "json").strip().lower()
    if log_format not in LOG_FORMATS:
        raise PolicyError(f"LOG_FORMAT must be one of {LOG_FORMATS}, got {log_format!r}")

    return Settings(
        policy=policy_from_env(values),
        log_level=log_level,
        log_format=log_format,
        service_name=(values.get("SERVICE_NAME") or "app").strip(),
    )


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the process-wide Settings, loading them on first use.

    The policy is read-only configuration; call reset_settings() only in tests.
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    global _settings
    _settings = None
