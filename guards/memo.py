"""
Counterparty Wallet Validation - Memo Validation

Counterparty sends may carry a memo, either as UTF-8 text or as raw hex bytes
(optionally ``0x`` prefixed). The byte length, not the character count, is what the
protocol limits.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional

from core.exceptions import ErrorKind
from core.results import ValidationResult
from .injection import first_injection_issue

logger = logging.getLogger(__name__)

DEFAULT_MEMO_MAX_BYTES = 34

_HEX_RE = re.compile(r"^[0-9a-fA-F]+$")


@dataclass(frozen=True)
class MemoResult(ValidationResult):
    """Memo validation outcome."""
    is_hex: Optional[bool] = None
    byte_length: Optional[int] = None


def strip_hex_prefix(value: str) -> str:
    """Remove a single lower-case ``0x`` prefix."""
    return value[2:] if value.startswith("0x") else value


def is_hex_memo(memo: str) -> bool:
    """Check whether memo is non-empty, even-length hex (surrounding whitespace ignored)."""
    if not isinstance(memo, str):
        return False
    body = strip_hex_prefix(memo.strip())
    return bool(body) and len(body) % 2 == 0 and _HEX_RE.fullmatch(body) is not None


def get_memo_byte_length(memo: str, is_hex: bool) -> int:
    """Byte length of memo once encoded for the transaction."""
    if is_hex:
        return len(strip_hex_prefix(memo.strip())) // 2
    return len(memo.encode("utf-8"))


def validate_memo_length(memo: str, is_hex: bool, max_bytes: int = DEFAULT_MEMO_MAX_BYTES) -> bool:
    return get_memo_byte_length(memo, is_hex) <= max_bytes


def text_to_hex(text: str) -> str:
    return text.encode("utf-8").hex()


def hex_to_text(hex_value: str) -> Optional[str]:
    """Decode hex to UTF-8 text; None for invalid hex or bytes that are not UTF-8."""
    body = strip_hex_prefix(hex_value)
    if len(body) % 2 != 0 or (body and not _HEX_RE.fullmatch(body)):
        return None
    try:
        return bytes.fromhex(body).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return None


def validate_memo(
    memo: str,
    max_bytes: int = DEFAULT_MEMO_MAX_BYTES,
    allow_hex: bool = True,
    allow_text: bool = True
) -> MemoResult:
    """
    Validate a send memo.

    Args:
        memo: Memo as entered by the user
        max_bytes: Maximum encoded length in bytes
        allow_hex: Accept hex memos
        allow_text: Accept text memos

    Returns:
        MemoResult with is_hex and byte_length set when valid
    """
    if not isinstance(memo, str):
        return MemoResult.fail("Memo must be a string")

    if memo == "":
        return MemoResult(is_valid=True, is_hex=False, byte_length=0)

    is_hex = is_hex_memo(memo)

    if is_hex and not allow_hex:
        return MemoResult.fail("Hex memos are not allowed")
    if not is_hex and not allow_text:
        return MemoResult.fail("Text memos are not allowed; memo must be hex")

    if not is_hex:
        issue = first_injection_issue(memo, prefixes=None)
        if issue:
            logger.debug("Memo rejected: %s", issue)
            return MemoResult.fail("Memo contains invalid control characters", ErrorKind.INJECTION)

    byte_length = get_memo_byte_length(memo, is_hex)
    if byte_length > max_bytes:
        return MemoResult.fail(
            f"Memo exceeds maximum length of {max_bytes} bytes ({byte_length} bytes)",
            ErrorKind.LENGTH
        )

    return MemoResult(is_valid=True, is_hex=is_hex, byte_length=byte_length)
