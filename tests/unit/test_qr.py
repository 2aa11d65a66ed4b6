"""
Tests for the QR payload guard.
"""

import pytest

from core.exceptions import ErrorKind
from guards.qr import (
    QR_MAX_TEXT_LENGTH,
    check_qr_url,
    looks_like_private_data,
    validate_qr_text,
    validate_qr_width,
)

P2PKH = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
PAYMENT_URI = f"bitcoin:{P2PKH}?amount=0.5"
WIF = "5HueCGU8rMjxEXxiPuD5BDku4MkFqeZyd4dZ1jvhTVqvbTLvyTJ"
HEX_KEY = "0123456789abcdef" * 4


class TestValidateQRText:
    """Test the QR text checks."""

    def test_payment_uri(self):
        result = validate_qr_text(PAYMENT_URI)

        assert result.is_valid
        assert result.warnings == ()
        assert result.sanitized_text == PAYMENT_URI

    def test_not_a_string(self):
        assert validate_qr_text(None).error == "QR code text must be a string"

    @pytest.mark.parametrize("text", ["", "   ", "\n"])
    def test_empty(self, text):
        assert validate_qr_text(text).error == "QR code text cannot be empty"

    def test_capacity(self):
        assert validate_qr_text("a b " * (QR_MAX_TEXT_LENGTH // 4)).is_valid

        result = validate_qr_text("x" * (QR_MAX_TEXT_LENGTH + 1))
        assert result.error == "QR code text exceeds maximum length"
        assert result.error_kind is ErrorKind.LENGTH

    def test_control_characters_warn_and_are_stripped(self):
        result = validate_qr_text("  pay\x07 me  ")

        assert result.is_valid
        assert result.warnings == ("Text contains control characters",)
        assert result.sanitized_text == "pay me"

    @pytest.mark.parametrize("text", ["=HYPERLINK(1)", "@SUM", "+1", "-1"])
    def test_formula_prefix(self, text):
        result = validate_qr_text(text)

        assert result.error == "Invalid QR code text format"
        assert result.error_kind is ErrorKind.INJECTION

    def test_null_bytes(self):
        result = validate_qr_text("abc\x00def")

        assert result.error == "QR code text contains null bytes"
        assert result.error_kind is ErrorKind.INJECTION

    def test_repeating_pattern_uses_qr_threshold(self):
        assert validate_qr_text("ab" * 60).warnings == ()
        assert validate_qr_text("ab" * 60, repeat_min_count=10).warnings == (
            "Text contains long repeating patterns",
        )

    def test_repeating_pattern_scan_length(self):
        text = "x" * 200

        assert validate_qr_text(text).warnings == ("Text contains long repeating patterns",)
        assert validate_qr_text(text, max_scan_length=50).warnings == ()

    @pytest.mark.parametrize("text", [
        WIF,
        HEX_KEY,
        f"{P2PKH} {WIF}",
        "password: hunter2",
        "API key = abc123",
        "my secret: xyz",
    ])
    def test_private_data_warns(self, text):
        result = validate_qr_text(text)

        assert result.is_valid
        assert "Text may contain private information" in result.warnings

    def test_many_unicode_characters_warn(self):
        assert validate_qr_text("café " * 20).warnings == ()

        result = validate_qr_text("é" * 50 + " " + "ü" * 51)
        assert result.warnings == ("Many Unicode characters may slow QR code generation",)

    def test_to_dict(self):
        assert validate_qr_text(" hi ").to_dict() == {"is_valid": True, "sanitized_text": "hi"}
        assert "sanitized_text" not in validate_qr_text("").to_dict()


class TestQRUrls:
    """Test URL payloads."""

    def test_plain_https(self):
        assert check_qr_url("https://example.com/pay?id=1") == (None, [])

    @pytest.mark.parametrize("text", [
        "javascript:alert(1)",
        "JavaScript:alert(1)",
        "data:text/html,<script>",
        "vbscript:msgbox",
        "file:///etc/passwd",
        "ftp://example.com/file",
    ])
    def test_dangerous_schemes(self, text):
        result = validate_qr_text(text)

        assert result.error == "Dangerous protocol detected in QR code URL"
        assert result.error_kind is ErrorKind.INJECTION

    @pytest.mark.parametrize("text", ["http:/nohost", "https://", "httpish text", "http://[::1"])
    def test_malformed(self, text):
        assert validate_qr_text(text).error == "Invalid URL format in QR code"

    @pytest.mark.parametrize("text", [
        "http://localhost:8080/",
        "http://127.0.0.1/",
        "http://10.0.0.5/",
        "http://172.16.0.1/",
        "http://192.168.1.10/admin",
        "http://169.254.169.254/latest",
    ])
    def test_private_hosts_warn(self, text):
        result = validate_qr_text(text)

        assert result.is_valid
        assert result.warnings == ("QR code contains local/private network URL",)

    @pytest.mark.parametrize("text", ["https://bit.ly/abc", "https://www.tinyurl.com/x", "https://t.co/y"])
    def test_shorteners_warn(self, text):
        assert validate_qr_text(text).warnings == ("QR code contains URL shortener",)

    def test_shortener_match_is_by_host(self):
        assert validate_qr_text("https://rabbit.ly/abc").warnings == ()
        assert validate_qr_text("https://microsoft.com/").warnings == ()

    @pytest.mark.parametrize("text", [
        "https://example.com/../etc/passwd",
        "https://example.com/a/%2e%2e/secret",
        "https://example.com/a/%2E%2E%2Fsecret",
    ])
    def test_path_traversal(self, text):
        assert validate_qr_text(text).error == "Path traversal detected in QR code URL"


class TestPrivateData:
    """Test the secret detector on its own."""

    def test_ordinary_text(self):
        assert not looks_like_private_data(PAYMENT_URI)
        assert not looks_like_private_data("Thanks for the coffee")

    def test_short_hex_is_not_a_key(self):
        assert not looks_like_private_data("cafe" * 8)


class TestQRWidth:
    """Test the render width check."""

    @pytest.mark.parametrize("width", [None, 1, 256, 10_000, 512.5])
    def test_valid(self, width):
        assert validate_qr_width(width).is_valid

    @pytest.mark.parametrize("width,error", [
        ("256", "QR code width must be a number"),
        (True, "QR code width must be a number"),
        (float("inf"), "QR code width must be finite"),
        (float("nan"), "QR code width must be finite"),
        (0, "QR code width must be positive"),
        (-5, "QR code width must be positive"),
        (10_001, "QR code width too large"),
    ])
    def test_invalid(self, width, error):
        assert validate_qr_width(width).error == error
