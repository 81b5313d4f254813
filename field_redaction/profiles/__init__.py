"""
Policy Profiles Package

Named bundles of sensitive-key patterns. Combine one or more of them into a
FieldPolicy.

Available profiles:
    - web_backend: Default set (credentials, tokens, identity, payment fields)
    - credentials: Same set without the identifying fields (username, email)

To add a new profile:
    1. Create a new file (e.g., payments.py)
    2. Subclass PolicyProfile
    3. Implement get_patterns() with your key substrings
    4. Register it with register_profile() so REDACTION_PROFILE can name it
"""

from ..base_policy import FieldPolicy, PolicyError, PolicyProfile
from .credentials import CredentialsProfile
from .web_backend import DEFAULT_PROFILE, WebBackendProfile

PROFILES: dict[str, PolicyProfile] = {}


def register_profile(profile: PolicyProfile) -> None:
    """Make a profile available by name. Replaces any profile with the same name."""
    PROFILES[profile.name] = profile


def get_profile(name: str) -> PolicyProfile:
    """Look up a registered profile by name."""
    try:
        return PROFILES[name.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(PROFILES))
        raise PolicyError(f"Unknown redaction profile {name!r} (known: {known})") from None


register_profile(DEFAULT_PROFILE)
register_profile(CredentialsProfile())

DEFAULT_POLICY = FieldPolicy.from_profiles(DEFAULT_PROFILE)

__all__ = [
    "CredentialsProfile",
    "DEFAULT_POLICY",
    "DEFAULT_PROFILE",
    "PROFILES",
    "WebBackendProfile",
    "get_profile",
    "register_profile",
]
