"""
Tests for email domain allow-listing.
"""

import pytest

from otpauth_core.email_domain import (
    EmailDomainValidator,
    compile_domain_glob,
    mask_email,
    normalize_email,
)


class TestEmailDomainValidator:
    """Tests for glob matching of email domains."""

    @pytest.mark.parametrize("email", [
        "a@x.example.gov",
        "first.last@agency.example.gov",
        "a@deep.sub.example.gov",
    ])
    def test_matching_domains_allowed(self, email):
        """Well-formed emails under the pattern should pass."""
        validator = EmailDomainValidator("*.example.gov")

        assert validator.is_allowed(email) is True

    @pytest.mark.parametrize("email", [
        "a@evil.com",
        "a@example.gov.evil.com",
        "a@x.example.gov.sg",
    ])
    def test_other_domains_rejected(self, email):
        """Domains outside the pattern should fail."""
        validator = EmailDomainValidator("*.example.gov")

        assert validator.is_allowed(email) is False

    @pytest.mark.parametrize("email", [
        "",
        "not-an-email",
        "a@",
        "@x.example.gov",
        "a b@x.example.gov",
        "a@@x.example.gov",
    ])
    def test_malformed_rejected(self, email):
        """Malformed addresses should fail even if the tail matches."""
        validator = EmailDomainValidator("*.example.gov")

        assert validator.is_allowed(email) is False

    def test_non_string_rejected(self):
        validator = EmailDomainValidator("*.example.gov")

        assert validator.is_allowed(None) is False

    def test_matching_is_case_sensitive(self):
        """Pattern case is honoured; callers normalise first."""
        validator = EmailDomainValidator("*.example.gov")

        assert validator.is_allowed("a@X.EXAMPLE.GOV") is False
        assert validator.is_allowed(normalize_email("a@X.EXAMPLE.GOV")) is True

    def test_braces_are_literal(self):
        """Brace expansion is disabled."""
        validator = EmailDomainValidator("{a,b}.example.gov")

        assert validator.is_allowed("user@a.example.gov") is False

    def test_question_mark_matches_one_character(self):
        validator = EmailDomainValidator("agency?.example.gov")

        assert validator.is_allowed("u@agency1.example.gov") is True
        assert validator.is_allowed("u@agency12.example.gov") is False

    def test_validator_is_immutable(self):
        validator = EmailDomainValidator("*.example.gov")

        with pytest.raises(AttributeError):
            validator.pattern = "*"
        with pytest.raises(AttributeError):
            validator._regex = None

        assert validator.pattern == "*.example.gov"


class TestHelpers:
    """Tests for glob translation and email helpers."""

    def test_glob_special_characters_escaped(self):
        regex = compile_domain_glob("!(evil).gov")

        assert regex.fullmatch("!(evil).gov")
        assert not regex.fullmatch("good.gov")

    def test_normalize_email(self):
        assert normalize_email("  A@X.Example.GOV ") == "a@x.example.gov"

    def test_mask_email(self):
        masked = mask_email("alice@x.example.gov")

        assert masked == "a***@x.example.gov"
        assert "alice" not in masked

    def test_mask_email_malformed(self):
        assert mask_email("nonsense") == "***"
