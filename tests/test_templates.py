"""
Unit Tests for Message Templates
================================
"""

from datetime import timedelta

import pytest

from twofactor_core.otp import SecurityMethod
from twofactor_core.templates import (
    BrandConfig,
    MessageKind,
    TemplateError,
    format_validity,
    render_message,
)


class TestFormatValidity:
    """Tests for human-readable durations."""

    @pytest.mark.parametrize("window,expected", [
        (timedelta(minutes=10), "10 minutes"),
        (timedelta(minutes=1), "1 minute"),
        (timedelta(hours=1), "1 hour"),
        (timedelta(hours=2), "2 hours"),
        (timedelta(seconds=90), "90 seconds"),
        (timedelta(seconds=1), "1 second"),
    ])
    def test_formats(self, window, expected):
        assert format_validity(window) == expected

    def test_rejects_non_positive(self):
        with pytest.raises(ValueError):
            format_validity(timedelta(0))


class TestOTPChallenge:
    """Tests for the OTP challenge message."""

    def render(self, **overrides):
        fields = {"display_name": "Ann", "code": "482913", "validity": "10 minutes"}
        fields.update(overrides)
        return render_message(MessageKind.OTP_CHALLENGE, fields, year=2026)

    def test_subject(self):
        assert self.render().subject == "Your CampusOne Verification Code"

    def test_html_and_text_carry_same_facts(self):
        message = self.render()

        for body in (message.html, message.text):
            assert "Ann" in body
            assert "482913" in body
            assert "10 minutes" in body
        assert "Valid for 10 minutes" in message.html
        assert "&copy; 2026 CampusOne" in message.html

    def test_timedelta_validity(self):
        message = self.render(validity=timedelta(minutes=5))

        assert "valid for 5 minutes" in message.text

    def test_html_escapes_display_name(self):
        message = self.render(display_name="<script>alert(1)</script>")

        assert "<script>" not in message.html
        assert "&lt;script&gt;" in message.html
        assert "<script>alert(1)</script>" in message.text

    @pytest.mark.parametrize("name", ["", None, "   "])
    def test_blank_display_name_gets_neutral_greeting(self, name):
        message = self.render(display_name=name)

        assert message.text.startswith("Hello,\n")
        assert "<p>Hello,</p>" in message.html
        assert "<strong></strong>" not in message.html

    def test_missing_code(self):
        with pytest.raises(TemplateError):
            render_message(MessageKind.OTP_CHALLENGE, {"display_name": "Ann", "validity": "10 minutes"})

    def test_kind_from_string(self):
        message = render_message(
            "otp_challenge",
            {"display_name": "Ann", "code": "000042", "validity": "10 minutes"},
        )

        assert "000042" in message.text

    def test_custom_brand(self):
        brand = BrandConfig(product_name="Acme", team_signature="Acme Team")
        message = render_message(
            MessageKind.OTP_CHALLENGE,
            {"display_name": "Ann", "code": "482913", "validity": "10 minutes"},
            brand=brand,
        )

        assert message.subject == "Your Acme Verification Code"
        assert "Acme Team" in message.text
        assert "CampusOne" not in message.html


class TestTwoFactorEnabled:
    """Tests for the 2FA-enabled confirmation."""

    def test_email_method(self):
        message = render_message(
            MessageKind.TWO_FACTOR_ENABLED,
            {"display_name": "Ann", "method": "email"},
        )

        assert message.subject == "Two-Factor Authentication Enabled"
        assert "Method: Email OTP" in message.text
        assert "using email otp" in message.text
        assert "<strong>Email OTP</strong>" in message.html
        assert "CampusOne Security Team" in message.text

    def test_authenticator_method(self):
        message = render_message(
            MessageKind.TWO_FACTOR_ENABLED,
            {"display_name": "Ann", "method": SecurityMethod.AUTHENTICATOR_APP},
        )

        assert "Authenticator App" in message.text
        assert "Authenticator App" in message.html

    def test_no_code_in_confirmation(self):
        message = render_message(
            MessageKind.TWO_FACTOR_ENABLED,
            {"display_name": "Ann", "method": "totp"},
        )

        assert "verification code is" not in message.text

    def test_missing_method(self):
        with pytest.raises(TemplateError):
            render_message(MessageKind.TWO_FACTOR_ENABLED, {"display_name": "Ann"})


class TestSecurityMethod:
    """Tests for method parsing."""

    def test_from_value(self):
        assert SecurityMethod.from_value("email") is SecurityMethod.EMAIL
        assert SecurityMethod.from_value(" EMAIL ") is SecurityMethod.EMAIL
        assert SecurityMethod.from_value("totp") is SecurityMethod.AUTHENTICATOR_APP
        assert SecurityMethod.from_value(SecurityMethod.EMAIL) is SecurityMethod.EMAIL

    def test_labels(self):
        assert SecurityMethod.EMAIL.label == "Email OTP"
        assert SecurityMethod.AUTHENTICATOR_APP.label == "Authenticator App"
