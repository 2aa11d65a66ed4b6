"""
Counterparty Wallet Validation - Input Guards

Injection, control-character and repeating-pattern predicates shared by all
validators, plus memo and QR payload validation.
"""

from .injection import (
    FORMULA_PREFIXES,
    NUMERIC_FORMULA_PREFIXES,
    REPEAT_UNIT_MAX_LENGTH,
    REPEAT_MIN_COUNT,
    QR_REPEAT_MIN_COUNT,
    MAX_SCAN_LENGTH,
    has_formula_prefix,
    has_control_characters,
    has_null_bytes,
    has_non_ascii,
    has_repeating_pattern,
    check_for_redos,
    check_transaction_for_redos,
    sanitize_text,
    validate_text_input,
    first_injection_issue,
)
from .memo import (
    DEFAULT_MEMO_MAX_BYTES,
    MemoResult,
    strip_hex_prefix,
    is_hex_memo,
    get_memo_byte_length,
    validate_memo_length,
    validate_memo,
    text_to_hex,
    hex_to_text,
)
from .qr import (
    QR_MAX_TEXT_LENGTH,
    QRTextResult,
    check_qr_url,
    looks_like_private_data,
    validate_qr_text,
    validate_qr_width,
)

__all__ = [
    "FORMULA_PREFIXES",
    "NUMERIC_FORMULA_PREFIXES",
    "REPEAT_UNIT_MAX_LENGTH",
    "REPEAT_MIN_COUNT",
    "QR_REPEAT_MIN_COUNT",
    "MAX_SCAN_LENGTH",
    "has_formula_prefix",
    "has_control_characters",
    "has_null_bytes",
    "has_non_ascii",
    "has_repeating_pattern",
    "check_for_redos",
    "check_transaction_for_redos",
    "sanitize_text",
    "validate_text_input",
    "first_injection_issue",
    "DEFAULT_MEMO_MAX_BYTES",
    "MemoResult",
    "strip_hex_prefix",
    "is_hex_memo",
    "get_memo_byte_length",
    "validate_memo_length",
    "validate_memo",
    "text_to_hex",
    "hex_to_text",
    "QR_MAX_TEXT_LENGTH",
    "QRTextResult",
    "check_qr_url",
    "looks_like_private_data",
    "validate_qr_text",
    "validate_qr_width",
]
