"""
Counterparty Wallet Validation - Session

Wallet id, secret and timeout checks and the secret-storage rate limiter.
"""

from .rate_limiter import (
    CLEANUP_THRESHOLD,
    MAX_OPERATIONS_PER_WINDOW,
    RATE_LIMIT_WINDOW_MS,
    RateLimitExceeded,
    SlidingWindowRateLimiter,
)
from .validation import (
    MAX_SECRET_LENGTH,
    MAX_STORED_SECRETS,
    MAX_TIMEOUT_MS,
    MAX_WALLET_ID_LENGTH,
    MIN_TIMEOUT_MS,
    WALLET_ID_REGEX,
    check_secret_limit,
    validate_secret,
    validate_session_metadata,
    validate_timeout,
    validate_wallet_id,
)

__all__ = [
    "CLEANUP_THRESHOLD",
    "MAX_OPERATIONS_PER_WINDOW",
    "MAX_SECRET_LENGTH",
    "MAX_STORED_SECRETS",
    "MAX_TIMEOUT_MS",
    "MAX_WALLET_ID_LENGTH",
    "MIN_TIMEOUT_MS",
    "RATE_LIMIT_WINDOW_MS",
    "RateLimitExceeded",
    "SlidingWindowRateLimiter",
    "WALLET_ID_REGEX",
    "check_secret_limit",
    "validate_secret",
    "validate_session_metadata",
    "validate_timeout",
    "validate_wallet_id",
]
