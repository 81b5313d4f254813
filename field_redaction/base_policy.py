"""
Field Policy - Which mapping keys are sensitive and what replaces them.

A policy is built once at process start and shared read-only by every
Redactor and logging adapter. Patterns come from one or more profiles:
    - web_backend: the full default set, including identifying fields
    - credentials: secrets only (no username/email)

Each profile defines:
    - name: Unique identifier for the profile
    - description: Human-readable description
    - get_patterns(): Returns lower-case key substrings to treat as sensitive
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import Iterable

DEFAULT_MARKER = "[FILTERED]"
DEFAULT_TRUNCATION_MARKER = "[TRUNCATED]"
DEFAULT_MAX_DEPTH = 32
# Each nesting level costs a few interpreter frames.
MAX_ALLOWED_DEPTH = 200


class PolicyError(ValueError):
    """Raised when a policy or its configuration is invalid."""


def normalize_patterns(patterns: Iterable[str]) -> tuple[str, ...]:
    """Strip, lower-case and de-duplicate patterns, keeping first-seen order."""
    seen: dict[str, None] = {}
    for pattern in patterns:
        cleaned = str(pattern).strip().lower()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


@dataclass(frozen=True)
class FieldPolicy:
    """
    Immutable set of sensitive-key patterns plus the markers used on match.

    A key is sensitive if its lower-cased form contains any pattern as a
    substring: "userPassword" matches "password", "passphrase" does not.

    Example:
        policy = FieldPolicy(patterns=("password", "token"))
        policy.is_sensitive("X-Auth-Token")   # True
        policy.is_sensitive("passphrase")     # False
    """
    patterns: tuple[str, ...]
    marker: str = DEFAULT_MARKER
    truncation_marker: str = DEFAULT_TRUNCATION_MARKER
    max_depth: int = DEFAULT_MAX_DEPTH

    def __post_init__(self):
        raw = (self.patterns,) if isinstance(self.patterns, str) else self.patterns
        patterns = normalize_patterns(raw)
        if not patterns:
            raise PolicyError("A field policy needs at least one pattern")
        if (
            isinstance(self.max_depth, bool)
            or not isinstance(self.max_depth, int)
            or not 1 <= self.max_depth <= MAX_ALLOWED_DEPTH
        ):
            raise PolicyError(
                f"max_depth must be an integer between 1 and {MAX_ALLOWED_DEPTH}, "
                f"got {self.max_depth!r}"
            )
        if not isinstance(self.marker, str) or not self.marker:
            raise PolicyError("marker must be a non-empty string")
        object.__setattr__(self, "patterns", patterns)

        # A marker that matches a pattern would not be stable under re-redaction.
        for marker in (self.marker, self.truncation_marker):
            clashing = self._match(marker)
            if clashing is not None:
                raise PolicyError(
                    f"Marker {marker!r} contains sensitive pattern {clashing!r}"
                )

    def _match(self, key) -> str | None:
        lowered = str(key).lower()
        for pattern in self.patterns:
            if pattern in lowered:
                return pattern
        return None

    def is_sensitive(self, key) -> bool:
        """True if the key name contains any configured pattern."""
        return self._match(key) is not None

    def matching_pattern(self, key) -> str | None:
        """Return the first pattern the key matches, or None."""
        return self._match(key)

    def with_patterns(self, *extra: str) -> "FieldPolicy":
        """Return a new policy with extra patterns appended."""
        return replace(self, patterns=self.patterns + tuple(extra))

    def without_patterns(self, *names: str) -> "FieldPolicy":
        """Return a new policy without the given patterns."""
        dropped = set(normalize_patterns(names))
        return replace(self, patterns=tuple(p for p in self.patterns if p not in dropped))

    @classmethod
    def from_profiles(cls, *profiles: "PolicyProfile", **options) -> "FieldPolicy":
        """
        Build a policy from the patterns of several profiles, in order.

        Args:
            *profiles: PolicyProfile instances whose patterns are combined.
            **options: marker, truncation_marker or max_depth overrides.
        """
        patterns: list[str] = []
        for profile in profiles:
            patterns.extend(profile.get_patterns())
        return cls(patterns=tuple(patterns), **options)


class PolicyProfile(ABC):
    """
    Abstract base class for named bundles of sensitive-key patterns.

    Subclass this to add a new set of fields without touching the Redactor.

    Example:
        class PaymentsProfile(PolicyProfile):
            @property
            def name(self) -> str:
                return "payments"

            @property
            def description(self) -> str:
                return "Card and bank account fields"

            def get_patterns(self) -> list[str]:
                return ["iban", "cardnumber", "cvv"]
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this profile (e.g., 'web_backend')."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this profile covers."""
        pass

    @abstractmethod
    def get_patterns(self) -> list[str]:
        """Return the key substrings this profile treats as sensitive."""
        pass

    def to_policy(self, **options) -> FieldPolicy:
        """Build a FieldPolicy from this profile alone."""
        return FieldPolicy.from_profiles(self, **options)

    def __repr__(self) -> str:
        return f"<PolicyProfile: {self.name}>"
