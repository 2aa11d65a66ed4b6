"""
Counterparty Wallet Validation - Injection and Format Guards

Shared predicates reused by the address, script, asset and amount validators and by
the memo and transaction-parameter validators built on top of them:

- formula-injection prefix detection (spreadsheet formulas in CSV exports)
- control-character and null-byte detection
- long repeating pattern detection (ReDoS heuristics)

The repetition thresholds are heuristics. They are exposed as module constants and
keyword arguments so callers can tune them without editing the predicates.
"""

import logging
import re
from functools import lru_cache
from typing import Any, Mapping, Optional

from core.exceptions import ErrorKind
from core.results import ValidationResult

logger = logging.getLogger(__name__)

# Leading characters that spreadsheet applications evaluate as formulas
FORMULA_PREFIXES = "=@+-"

# Same set without '-', for numeric input where a leading minus is meaningful
NUMERIC_FORMULA_PREFIXES = "=@+"

# C0 controls except tab, LF and CR, plus DEL
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")

# Repeating pattern heuristics
REPEAT_UNIT_MAX_LENGTH = 10
REPEAT_MIN_COUNT = 10
QR_REPEAT_MIN_COUNT = 100
MAX_SCAN_LENGTH = 10_000

DEFAULT_MAX_TEXT_LENGTH = 100_000

# Size limits for raw transaction data and its string parameters
MAX_RAW_TX_HEX_LENGTH = 1_000_000
MAX_PARAM_VALUE_LENGTH = 50_000


@lru_cache(maxsize=32)
def _repeat_pattern(unit_max_length: int, min_count: int) -> "re.Pattern[str]":
    return re.compile(r"(.{1,%d}?)\1{%d,}" % (unit_max_length, min_count), re.DOTALL)


def has_formula_prefix(text: str, prefixes: str = FORMULA_PREFIXES) -> bool:
    """Check whether the stripped text starts with a formula-trigger character."""
    if not isinstance(text, str):
        return False
    stripped = text.strip()
    return bool(stripped) and stripped[0] in prefixes


def has_control_characters(text: str) -> bool:
    """Check for control characters other than tab, newline and carriage return."""
    if not isinstance(text, str):
        return False
    return CONTROL_CHAR_PATTERN.search(text) is not None


def has_null_bytes(text: str) -> bool:
    return isinstance(text, str) and "\x00" in text


def has_non_ascii(text: str) -> bool:
    return isinstance(text, str) and not text.isascii()


def has_repeating_pattern(
    text: str,
    unit_max_length: int = REPEAT_UNIT_MAX_LENGTH,
    min_repeats: int = REPEAT_MIN_COUNT,
    max_scan_length: int = MAX_SCAN_LENGTH
) -> bool:
    """
    Detect a short unit repeated back-to-back many times.

    A unit of 1..unit_max_length characters followed by at least min_repeats
    further copies of itself counts as a repeating pattern. Only the first
    max_scan_length characters are scanned so the check stays bounded.

    Args:
        text: Text to inspect
        unit_max_length: Longest repeating unit considered
        min_repeats: Number of additional copies required
        max_scan_length: Prefix length scanned

    Returns:
        True if a long repeating pattern was found
    """
    if not isinstance(text, str) or not text:
        return False
    if unit_max_length < 1 or min_repeats < 1:
        raise ValueError("unit_max_length and min_repeats must be positive")
    sample = text[:max_scan_length]
    if len(sample) < min_repeats + 1:
        return False
    return _repeat_pattern(unit_max_length, min_repeats).search(sample) is not None


def check_for_redos(
    text: str,
    max_length: int = MAX_SCAN_LENGTH,
    min_repeats: int = REPEAT_MIN_COUNT
) -> bool:
    """Return True if text is long or repetitive enough to be treated as hostile."""
    if not isinstance(text, str):
        return False
    if len(text) > max_length:
        return True
    return has_repeating_pattern(text, min_repeats=min_repeats, max_scan_length=max_length)


def check_transaction_for_redos(
    raw_tx_hex: str,
    params: Optional[Mapping[str, Any]] = None,
    repeat_unit_max_length: int = REPEAT_UNIT_MAX_LENGTH,
    repeat_min_count: int = QR_REPEAT_MIN_COUNT,
    max_scan_length: int = MAX_SCAN_LENGTH
) -> bool:
    """
    Return True if a transaction-parsing request is too large or repetitive to process.

    The raw hex is only size-checked since long runs of zeros are normal in it.
    String parameter values are size-checked and scanned for repeating patterns;
    other value types are ignored.
    """
    if isinstance(raw_tx_hex, str) and len(raw_tx_hex) > MAX_RAW_TX_HEX_LENGTH:
        return True

    for key, value in (params or {}).items():
        if not isinstance(value, str):
            continue
        if len(value) > MAX_PARAM_VALUE_LENGTH:
            logger.debug("Transaction parameter %r exceeds size limit", key)
            return True
        if has_repeating_pattern(value, repeat_unit_max_length, repeat_min_count, max_scan_length):
            logger.debug("Transaction parameter %r contains a repeating pattern", key)
            return True
    return False


def sanitize_text(text: str) -> str:
    """Remove control characters, keeping tabs and newlines."""
    return CONTROL_CHAR_PATTERN.sub("", text)


def validate_text_input(
    text: str,
    field_name: str = "Text",
    max_length: int = DEFAULT_MAX_TEXT_LENGTH,
    allow_empty: bool = True,
    repeat_unit_max_length: int = REPEAT_UNIT_MAX_LENGTH,
    repeat_min_count: int = REPEAT_MIN_COUNT,
    max_scan_length: int = MAX_SCAN_LENGTH
) -> ValidationResult:
    """
    Apply the shared injection guards to free-form text.

    Args:
        text: User supplied text
        field_name: Name used in error messages
        max_length: Maximum allowed character count
        allow_empty: Whether an empty string is acceptable
        repeat_unit_max_length: Longest repeating unit that triggers the warning
        repeat_min_count: Copies of the unit needed to trigger the warning
        max_scan_length: Prefix length scanned for repeating patterns

    Returns:
        ValidationResult; a repeating-pattern finding is reported as a warning
    """
    if not isinstance(text, str):
        return ValidationResult.fail(f"{field_name} must be a string")

    if not text.strip() and not allow_empty:
        return ValidationResult.fail(f"{field_name} cannot be empty")

    if has_formula_prefix(text):
        logger.debug("%s rejected: formula prefix", field_name)
        return ValidationResult.fail(f"Invalid {field_name.lower()} format", ErrorKind.INJECTION)

    if has_control_characters(text):
        logger.debug("%s rejected: control characters", field_name)
        return ValidationResult.fail(
            f"{field_name} contains invalid control characters", ErrorKind.INJECTION
        )

    if len(text) > max_length:
        return ValidationResult.fail(f"{field_name} too long", ErrorKind.LENGTH)

    warnings = []
    if has_repeating_pattern(text, repeat_unit_max_length, repeat_min_count, max_scan_length):
        warnings.append(f"{field_name} contains long repeating patterns")

    return ValidationResult.ok(tuple(warnings))


def first_injection_issue(text: str, prefixes: Optional[str] = FORMULA_PREFIXES) -> Optional[str]:
    """Describe the first injection guard that text trips, or None."""
    if prefixes and has_formula_prefix(text, prefixes):
        return "formula prefix"
    if has_null_bytes(text):
        return "null byte"
    if has_control_characters(text):
        return "control character"
    return None
