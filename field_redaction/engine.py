"""
Redactor - Core engine for removing sensitive fields from structured values.

The engine walks JSON-like payloads (dicts, lists, tuples, scalars) and
replaces the value of every mapping key the FieldPolicy marks as sensitive.
Matching looks at key names only; values are never inspected.

Each call builds a fresh output and never touches its input, so one Redactor
can be shared across threads without locking.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .base_policy import FieldPolicy
from .profiles import DEFAULT_POLICY

logger = logging.getLogger(__name__)


@dataclass
class RedactionReport:
    """What a single redaction pass changed."""
    redacted_keys: int = 0
    truncated_branches: int = 0

    @property
    def was_redacted(self) -> bool:
        return self.redacted_keys > 0 or self.truncated_branches > 0


class _Walk:
    """State for one traversal: the ancestor path and the running report."""

    def __init__(self, policy: FieldPolicy):
        self.policy = policy
        self.report = RedactionReport()
        self._path: set[int] = set()

    def visit(self, value: Any, depth: int) -> Any:
        if isinstance(value, Mapping):
            return self._container(value, depth, self._mapping)
        # str and bytes are sequences in Python but scalars here
        if isinstance(value, (list, tuple)):
            return self._container(value, depth, self._sequence)
        return value

    def _container(self, value, depth, build):
        node = id(value)
        if depth >= self.policy.max_depth or node in self._path:
            self.report.truncated_branches += 1
            return self.policy.truncation_marker
        self._path.add(node)
        try:
            return build(value, depth + 1)
        finally:
            self._path.discard(node)

    def _mapping(self, value: Mapping, depth: int) -> dict:
        out = {}
        for key, item in value.items():
            if self.policy.is_sensitive(key):
                out[key] = self.policy.marker
                self.report.redacted_keys += 1
            else:
                out[key] = self.visit(item, depth)
        return out

    def _sequence(self, value, depth: int):
        items = [self.visit(item, depth) for item in value]
        if isinstance(value, tuple):
            # namedtuples take positional fields
            return type(value)(*items) if hasattr(value, "_fields") else tuple(items)
        return items


def redact(value: Any, policy: FieldPolicy = DEFAULT_POLICY) -> Any:
    """
    Return a copy of value with every sensitive key's value replaced.

    Args:
        value: Any JSON-like value: None, bool, number, str, list, tuple or mapping.
        policy: The FieldPolicy deciding which keys are sensitive.

    Returns:
        A structurally identical value. Sensitive keys map to policy.marker;
        cyclic or over-deep branches become policy.truncation_marker.
        Scalars (including a bare root string or None) come back unchanged.

    Example:
        redact({"user": "ann", "token": {"raw": "abc"}}, policy)
        # {"user": "ann", "token": "[FILTERED]"}
    """
    return _Walk(policy).visit(value, 0)


class Redactor:
    """
    Policy-bound redaction engine.

    Example:
        redactor = Redactor()

        redactor.redact({"email": "ann@example.com", "id": 7})
        # {"email": "[FILTERED]", "id": 7}

        safe, report = redactor.redact_with_report({"items": [{"pwd": "x"}]})
        # safe: {"items": [{"pwd": "[FILTERED]"}]}
        # report.was_redacted: True

    Thread Safety:
        The policy is immutable and every call keeps its own traversal
        state, so a Redactor may be shared freely.
    """

    def __init__(self, policy: Optional[FieldPolicy] = None):
        """
        Initialize the Redactor.

        Args:
            policy: The FieldPolicy to apply. Defaults to the web_backend profile.
        """
        self._policy = policy if policy is not None else DEFAULT_POLICY
        logger.info(
            f"Redactor configured with {len(self._policy.patterns)} patterns "
            f"(marker={self._policy.marker!r}, max_depth={self._policy.max_depth})"
        )

    @property
    def policy(self) -> FieldPolicy:
        return self._policy

    def is_sensitive(self, key) -> bool:
        return self._policy.is_sensitive(key)

    def redact(self, value: Any) -> Any:
        """Redact a single value. See :func:`redact`."""
        return _Walk(self._policy).visit(value, 0)

    def redact_with_report(self, value: Any) -> tuple[Any, RedactionReport]:
        """
        Redact a value and report what changed.

        Returns:
            A tuple of (redacted_value, report):
            - redacted_value: Same as redact(value)
            - report: counts of redacted keys and truncated branches
        """
        walk = _Walk(self._policy)
        result = walk.visit(value, 0)
        return result, walk.report

    def redact_batch(self, values: Iterable[Any]) -> tuple[list[Any], bool]:
        """
        Redact several values independently.

        Returns:
            A tuple of (redacted_values, any_redacted):
            - redacted_values: List of redacted values, in input order
            - any_redacted: True if ANY value had a key redacted or truncated
        """
        results = []
        any_redacted = False

        for value in values:
            redacted, report = self.redact_with_report(value)
            results.append(redacted)
            if report.was_redacted:
                any_redacted = True

        return results, any_redacted


# Singleton instance for convenience
_default_redactor: Optional[Redactor] = None


def get_default_redactor() -> Redactor:
    """
    Get the default Redactor instance.

    This is a convenience function for simple use cases.
    For more control, instantiate Redactor directly.
    """
    global _default_redactor
    if _default_redactor is None:
        _default_redactor = Redactor()
    return _default_redactor
