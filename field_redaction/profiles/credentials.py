"""Credentials Profile - secrets only, identifying fields left visible."""

from ..base_policy import PolicyProfile
from .web_backend import WEB_BACKEND_FIELDS

IDENTIFYING_FIELDS = {"username", "email"}


class CredentialsProfile(PolicyProfile):

    @property
    def name(self) -> str:
        return "credentials"

    @property
    def description(self) -> str:
        return "Credentials, tokens, API keys and payment fields (no username/email)"

    def get_patterns(self) -> list[str]:
        return [f for f in WEB_BACKEND_FIELDS if f not in IDENTIFYING_FIELDS]
