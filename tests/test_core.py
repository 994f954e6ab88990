"""
Tests for the shared email and timestamp helpers.
"""

from datetime import datetime, timedelta, timezone

import pytest

from onboarding.core.clock import parse_timestamp
from onboarding.core.validation import is_company_email, is_valid_email, normalize_email


# =============================================================================
# Email addresses
# =============================================================================


class TestEmailValidation:

    @pytest.mark.parametrize("email", ["dev@example.com", "Deniz.Kaya+events@masterfabric.co"])
    def test_accepts_real_addresses(self, email):
        assert is_valid_email(email) is True

    @pytest.mark.parametrize("email", [
        "",
        "not-an-email",
        "user@",
        "user@example..com",
        "user@-example.com",
        "user@example",
        "two@@example.com",
    ])
    def test_rejects_malformed_addresses(self, email):
        assert is_valid_email(email) is False

    def test_domain_is_normalized(self):
        assert normalize_email("dev@MasterFabric.CO") == "dev@masterfabric.co"
        assert normalize_email("user@example..com") is None


class TestCompanyEmail:

    def test_matches_domain_case_insensitively(self):
        assert is_company_email("Dev@MasterFabric.co", "masterfabric.co") is True
        assert is_company_email("dev@masterfabric.co", "MasterFabric.co") is True

    @pytest.mark.parametrize("email", [
        "dev@masterfabric.co.evil.com",
        "dev@evil-masterfabric.co",
        "dev@sub.masterfabric.co",
        "dev@masterfabric..co",
        "masterfabric.co",
    ])
    def test_other_or_malformed_domains(self, email):
        assert is_company_email(email, "masterfabric.co") is False


# =============================================================================
# Timestamps
# =============================================================================


class TestParseTimestamp:

    def test_trimmed_fractional_seconds(self):
        assert parse_timestamp("2026-10-19T14:30:00.12+00:00") == datetime(
            2026, 10, 19, 14, 30, 0, 120000, tzinfo=timezone.utc
        )

    def test_offset_is_kept(self):
        parsed = parse_timestamp("2026-10-19T17:30:00+03:00")
        assert parsed.utcoffset() == timedelta(hours=3)
        assert parsed == datetime(2026, 10, 19, 14, 30, tzinfo=timezone.utc)

    def test_zulu_suffix(self):
        assert parse_timestamp("2026-10-19T14:30:00Z") == datetime(2026, 10, 19, 14, 30, tzinfo=timezone.utc)

    def test_naive_values_are_utc(self):
        assert parse_timestamp("2026-10-19T14:30:00").tzinfo is not None
        assert parse_timestamp(datetime(2026, 10, 19, 14, 30)) == datetime(2026, 10, 19, 14, 30, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [None, ""])
    def test_empty(self, value):
        assert parse_timestamp(value) is None
