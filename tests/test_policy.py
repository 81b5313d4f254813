"""
Tests for FieldPolicy and the built-in policy profiles.
"""

import dataclasses

import pytest
from field_redaction import DEFAULT_POLICY, FieldPolicy, PolicyError, PolicyProfile
from field_redaction.profiles import (
    PROFILES,
    CredentialsProfile,
    WebBackendProfile,
    get_profile,
    register_profile,
)


class TestFieldPolicy:
    """Test suite for FieldPolicy construction and matching."""

    def test_patterns_normalized(self):
        """Patterns are stripped, lower-cased and de-duplicated in order."""
        policy = FieldPolicy(patterns=(" Token ", "SECRET", "token", "", "  "))
        assert policy.patterns == ("token", "secret")

    def test_single_string_pattern(self):
        """A bare string is one pattern, not a sequence of characters."""
        assert FieldPolicy(patterns="password").patterns == ("password",)

    def test_empty_policy_rejected(self):
        """A policy needs at least one pattern."""
        with pytest.raises(PolicyError):
            FieldPolicy(patterns=())

    @pytest.mark.parametrize("depth", [0, -1, 10_000, "5", True, False])
    def test_invalid_max_depth_rejected(self, depth):
        """max_depth must be a sensible positive integer."""
        with pytest.raises(PolicyError):
            FieldPolicy(patterns=("token",), max_depth=depth)

    def test_marker_matching_pattern_rejected(self):
        """A marker that would itself match keeps redaction from being stable."""
        with pytest.raises(PolicyError, match="Marker"):
            FieldPolicy(patterns=("filter",))

    def test_empty_marker_rejected(self):
        with pytest.raises(PolicyError):
            FieldPolicy(patterns=("token",), marker="")

    def test_policy_error_is_value_error(self):
        """PolicyError can be caught as ValueError."""
        assert issubclass(PolicyError, ValueError)

    def test_is_sensitive(self):
        policy = FieldPolicy(patterns=("password", "token"))

        assert policy.is_sensitive("X-Auth-Token")
        assert policy.is_sensitive("userPASSWORD")
        assert not policy.is_sensitive("passphrase")
        assert policy.matching_pattern("refresh_token") == "token"
        assert policy.matching_pattern("status") is None

    def test_immutable(self):
        """Policies are frozen."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_POLICY.marker = "x"

    def test_with_and_without_patterns(self):
        """Derived policies leave the original untouched."""
        base = FieldPolicy(patterns=("password",))
        wider = base.with_patterns("IBAN")
        narrower = wider.without_patterns("Password")

        assert base.patterns == ("password",)
        assert wider.patterns == ("password", "iban")
        assert narrower.patterns == ("iban",)

    def test_from_profiles_keeps_order(self):
        """Profile patterns are combined in the order given."""
        policy = FieldPolicy.from_profiles(
            CredentialsProfile(), WebBackendProfile(), marker="***"
        )

        assert policy.marker == "***"
        assert policy.patterns[0] == "password"
        assert policy.patterns[-2:] == ("username", "email")


class TestProfiles:
    """Test suite for the built-in profiles and registry."""

    def test_default_policy_patterns(self):
        """The default policy carries the full web_backend list, lower-cased."""
        assert DEFAULT_POLICY.patterns == (
            "password", "pass", "pwd", "secret", "token", "accesstoken",
            "refreshtoken", "authorization", "auth", "apikey", "api_key",
            "username", "email", "creditcard", "ssn", "socialsecuritynumber",
            "pin", "cvv", "cvc",
        )
        assert DEFAULT_POLICY.marker == "[FILTERED]"
        assert DEFAULT_POLICY.truncation_marker == "[TRUNCATED]"

    def test_credentials_profile_keeps_identity_visible(self):
        """The credentials profile does not match username/email."""
        policy = CredentialsProfile().to_policy()

        assert not policy.is_sensitive("username")
        assert not policy.is_sensitive("email")
        assert policy.is_sensitive("password")

    def test_registry(self):
        assert isinstance(get_profile("web_backend"), WebBackendProfile)
        assert isinstance(get_profile(" Credentials "), CredentialsProfile)

    def test_unknown_profile(self):
        with pytest.raises(PolicyError, match="Unknown redaction profile"):
            get_profile("hipaa")

    def test_custom_profile_registration(self):
        """Should be able to add and look up custom profiles."""

        class PaymentsProfile(PolicyProfile):
            @property
            def name(self) -> str:
                return "payments_test"

            @property
            def description(self) -> str:
                return "Test profile"

            def get_patterns(self):
                return ["iban", "cardnumber"]

        register_profile(PaymentsProfile())
        try:
            profile = get_profile("payments_test")
            assert repr(profile) == "<PolicyProfile: payments_test>"
            assert profile.to_policy().is_sensitive("billingIBAN")
        finally:
            PROFILES.pop("payments_test")
