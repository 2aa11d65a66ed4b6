"""
Counterparty Wallet Validation - Session Input Validation

Checks applied to wallet identifiers, secrets and session timing before anything
is written to secret storage. Every check returns a ValidationResult.
"""

import math
import re
from typing import Any, Collection, Mapping

from core.exceptions import ErrorKind
from core.results import ValidationResult

WALLET_ID_REGEX = re.compile(r"^[a-f0-9]{64}$")
MAX_WALLET_ID_LENGTH = 256
MAX_SECRET_LENGTH = 10_000
MAX_STORED_SECRETS = 20

MIN_TIMEOUT_MS = 60_000
MAX_TIMEOUT_MS = 24 * 60 * 60 * 1000


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_wallet_id(wallet_id: Any) -> ValidationResult:
    """Wallet ids are SHA-256 digests rendered as 64 lower-case hex characters."""
    if wallet_id is None or wallet_id == "":
        return ValidationResult.fail("Wallet ID is required")
    if not isinstance(wallet_id, str):
        return ValidationResult.fail("Wallet ID must be a string")
    if len(wallet_id) > MAX_WALLET_ID_LENGTH:
        return ValidationResult.fail(
            f"Wallet ID exceeds maximum length of {MAX_WALLET_ID_LENGTH}", ErrorKind.LENGTH
        )
    if not WALLET_ID_REGEX.fullmatch(wallet_id):
        return ValidationResult.fail("Invalid wallet ID format. Expected SHA-256 hash")
    return ValidationResult.ok()


def validate_secret(secret: Any) -> ValidationResult:
    if secret is None:
        return ValidationResult.fail("Secret is required")
    if not isinstance(secret, str):
        return ValidationResult.fail("Secret must be a string")
    if len(secret) > MAX_SECRET_LENGTH:
        return ValidationResult.fail(
            f"Secret exceeds maximum length of {MAX_SECRET_LENGTH}", ErrorKind.LENGTH
        )
    return ValidationResult.ok()


def validate_timeout(timeout_ms: Any) -> ValidationResult:
    """Session timeouts are milliseconds within [MIN_TIMEOUT_MS, MAX_TIMEOUT_MS]."""
    if not _is_number(timeout_ms) or (isinstance(timeout_ms, float) and math.isnan(timeout_ms)):
        return ValidationResult.fail("Timeout must be a valid number")
    if timeout_ms < MIN_TIMEOUT_MS:
        return ValidationResult.fail(f"Timeout must be at least {MIN_TIMEOUT_MS}ms", ErrorKind.RANGE)
    if timeout_ms > MAX_TIMEOUT_MS:
        return ValidationResult.fail(f"Timeout cannot exceed {MAX_TIMEOUT_MS}ms", ErrorKind.RANGE)
    return ValidationResult.ok()


def _valid_timestamp(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value) and value > 0


def validate_session_metadata(metadata: Any) -> ValidationResult:
    """
    Validate persisted session metadata.

    Expects ``unlocked_at`` and ``last_active_time`` (positive millisecond timestamps)
    and ``timeout`` (milliseconds). Extra keys are ignored.
    """
    if not isinstance(metadata, Mapping):
        return ValidationResult.fail("Invalid session metadata")
    if not _valid_timestamp(metadata.get("unlocked_at")):
        return ValidationResult.fail("Invalid unlocked_at timestamp")
    if not _valid_timestamp(metadata.get("last_active_time")):
        return ValidationResult.fail("Invalid last_active_time timestamp")
    return validate_timeout(metadata.get("timeout"))


def check_secret_limit(
    current_count: int,
    wallet_id: str,
    existing_ids: Collection[str] = ()
) -> ValidationResult:
    """Allow storing a new secret below the cap; updating an existing one always passes."""
    if wallet_id in existing_ids:
        return ValidationResult.ok()
    if current_count >= MAX_STORED_SECRETS:
        return ValidationResult.fail(
            f"Cannot store more than {MAX_STORED_SECRETS} wallet secrets", ErrorKind.RANGE
        )
    return ValidationResult.ok()
