"""
Counterparty Wallet Validation - QR Payload Guard

Checks text before it is rendered into a QR code: the capacity of a version 40 code,
the shared injection guards, URL schemes and hosts, and payloads that look like
secrets. Repetition uses the higher QR threshold since QR payloads are long by nature.
"""

import ipaddress
import logging
import math
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union
from urllib.parse import unquote, urlparse

from core.exceptions import ErrorKind
from core.results import ValidationResult
from .injection import (
    MAX_SCAN_LENGTH,
    QR_REPEAT_MIN_COUNT,
    REPEAT_UNIT_MAX_LENGTH,
    has_control_characters,
    has_formula_prefix,
    has_non_ascii,
    has_null_bytes,
    has_repeating_pattern,
    sanitize_text,
)

logger = logging.getLogger(__name__)

# Byte-mode capacity of a version 40 QR code
QR_MAX_TEXT_LENGTH = 4296
UNICODE_WARNING_COUNT = 100
QR_MAX_WIDTH = 10_000

DANGEROUS_SCHEMES = ("javascript:", "data:", "vbscript:", "file:", "ftp:")
URL_SHORTENERS = ("bit.ly", "tinyurl.com", "t.co", "goo.gl")

PRIVATE_DATA_PATTERNS = [
    re.compile(r"\b[A-Fa-f0-9]{64}\b"),
    re.compile(r"\b[5KL][1-9A-HJ-NP-Za-km-z]{50,51}\b"),
    re.compile(r"password.*[:=]\s*\w+", re.IGNORECASE),
    re.compile(r"api[_\s]*key.*[:=]\s*\w+", re.IGNORECASE),
    re.compile(r"secret.*[:=]\s*\w+", re.IGNORECASE),
]


@dataclass(frozen=True)
class QRTextResult(ValidationResult):
    """Verdict for a QR payload; ``sanitized_text`` has control characters removed."""
    sanitized_text: Optional[str] = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.is_valid:
            data["sanitized_text"] = self.sanitized_text
        return data


def looks_like_private_data(text: str) -> bool:
    """True if text resembles a private key, WIF key or credential assignment."""
    return any(pattern.search(text) for pattern in PRIVATE_DATA_PATTERNS)


def _is_private_host(host: str) -> bool:
    if host == "localhost":
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return address.is_private or address.is_loopback or address.is_link_local


def _is_shortener(host: str) -> bool:
    return any(host == domain or host.endswith("." + domain) for domain in URL_SHORTENERS)


def check_qr_url(text: str) -> Tuple[Optional[str], List[str]]:
    """
    Inspect a URL payload.

    Returns:
        (error, warnings); error is None when the URL is acceptable
    """
    lowered = text.strip().lower()
    if lowered.startswith(DANGEROUS_SCHEMES):
        return "Dangerous protocol detected in QR code URL", []

    try:
        parts = urlparse(lowered)
        host = parts.hostname
    except ValueError:
        return "Invalid URL format in QR code", []
    if parts.scheme not in ("http", "https") or not host:
        return "Invalid URL format in QR code", []

    if ".." in unquote(parts.path):
        return "Path traversal detected in QR code URL", []

    warnings = []
    if _is_private_host(host):
        warnings.append("QR code contains local/private network URL")
    if _is_shortener(host):
        warnings.append("QR code contains URL shortener")
    return None, warnings


def validate_qr_text(
    text: str,
    max_length: int = QR_MAX_TEXT_LENGTH,
    repeat_unit_max_length: int = REPEAT_UNIT_MAX_LENGTH,
    repeat_min_count: int = QR_REPEAT_MIN_COUNT,
    max_scan_length: int = MAX_SCAN_LENGTH
) -> QRTextResult:
    """
    Validate text that is about to be encoded as a QR code.

    Control characters, repeating patterns, likely secrets and heavy Unicode use
    are warnings; dangerous URLs, formula prefixes and null bytes are errors.
    """
    if not isinstance(text, str):
        return QRTextResult.fail("QR code text must be a string")
    if not text.strip():
        return QRTextResult.fail("QR code text cannot be empty")
    if len(text) > max_length:
        return QRTextResult.fail("QR code text exceeds maximum length", ErrorKind.LENGTH)

    warnings: List[str] = []
    if has_control_characters(text):
        warnings.append("Text contains control characters")

    lowered = text.strip().lower()
    if lowered.startswith("http") or lowered.startswith(DANGEROUS_SCHEMES):
        error, url_warnings = check_qr_url(text)
        if error:
            logger.debug("QR text rejected: %s", error)
            return QRTextResult.fail(error, ErrorKind.INJECTION)
        warnings.extend(url_warnings)

    if has_formula_prefix(text):
        return QRTextResult.fail("Invalid QR code text format", ErrorKind.INJECTION)
    if has_null_bytes(text):
        return QRTextResult.fail("QR code text contains null bytes", ErrorKind.INJECTION)

    if has_repeating_pattern(text, repeat_unit_max_length, repeat_min_count, max_scan_length):
        warnings.append("Text contains long repeating patterns")
    if looks_like_private_data(text):
        warnings.append("Text may contain private information")
    if has_non_ascii(text) and sum(not char.isascii() for char in text) > UNICODE_WARNING_COUNT:
        warnings.append("Many Unicode characters may slow QR code generation")

    return QRTextResult(
        is_valid=True,
        warnings=tuple(warnings),
        sanitized_text=sanitize_text(text).strip(),
    )


def validate_qr_width(width: Optional[Union[int, float]] = None) -> ValidationResult:
    """Check an optional QR render width in pixels."""
    if width is None:
        return ValidationResult.ok()
    if isinstance(width, bool) or not isinstance(width, (int, float)):
        return ValidationResult.fail("QR code width must be a number")
    if not math.isfinite(width):
        return ValidationResult.fail("QR code width must be finite", ErrorKind.RANGE)
    if width <= 0:
        return ValidationResult.fail("QR code width must be positive", ErrorKind.RANGE)
    if width > QR_MAX_WIDTH:
        return ValidationResult.fail("QR code width too large", ErrorKind.RANGE)
    return ValidationResult.ok()
