"""
Web Backend Profile - Default sensitive field names.

Covers the fields a typical web API sees in query strings, request bodies,
headers and user objects:
    - Credentials (password, pass, pwd, secret)
    - Tokens and auth headers (token, accessToken, refreshToken, authorization, auth)
    - API keys (apikey, api_key)
    - Identifying fields (username, email)
    - Payment and government ids (creditCard, ssn, socialSecurityNumber, pin, cvv, cvc)

Patterns are substrings, so "auth" also catches "oauth_state" and "author".
Use CredentialsProfile when identifying fields should stay visible.
"""

from ..base_policy import PolicyProfile

WEB_BACKEND_FIELDS = [
    "password",
    "pass",
    "pwd",
    "secret",
    "token",
    "accessToken",
    "refreshToken",
    "authorization",
    "auth",
    "apikey",
    "api_key",
    "username",
    "email",
    "creditCard",
    "ssn",
    "socialSecurityNumber",
    "pin",
    "cvv",
    "cvc",
]


class WebBackendProfile(PolicyProfile):
    """Default profile: secrets plus identifying and payment fields."""

    @property
    def name(self) -> str:
        return "web_backend"

    @property
    def description(self) -> str:
        return "Credentials, tokens, API keys, identity and payment fields"

    def get_patterns(self) -> list[str]:
        return list(WEB_BACKEND_FIELDS)


DEFAULT_PROFILE = WebBackendProfile()
