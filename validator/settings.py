"""
Counterparty Wallet Validation - Settings Models

Pydantic models giving a typed, validated view of the merged configuration
dictionary produced by the configuration manager.
"""

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from addresses.models import Network
from amounts.units import MAX_SATOSHIS
from amounts.fees import MAX_FEE_RATE, MIN_FEE_RATE
from guards.injection import (
    DEFAULT_MAX_TEXT_LENGTH,
    MAX_SCAN_LENGTH,
    QR_REPEAT_MIN_COUNT,
    REPEAT_MIN_COUNT,
    REPEAT_UNIT_MAX_LENGTH,
)
from guards.memo import DEFAULT_MEMO_MAX_BYTES
from session.rate_limiter import CLEANUP_THRESHOLD, MAX_OPERATIONS_PER_WINDOW, RATE_LIMIT_WINDOW_MS


class NetworkSettings(BaseModel):
    """Which network destination addresses must belong to (None accepts any)."""

    expected: Optional[Network] = Field(default=None, description="Required address network")
    allow_multisig: bool = Field(default=True, description="Accept bare multisig destinations")

    @field_validator("expected", mode="before")
    @classmethod
    def normalize_network(cls, v):
        if v in ("", "any"):
            return None
        return v.lower() if isinstance(v, str) else v


class AmountSettings(BaseModel):
    unit: Literal["btc", "satoshis"] = "btc"
    allow_zero: bool = False
    allow_dust: bool = True
    max_amount: int = Field(default=MAX_SATOSHIS, ge=0, le=MAX_SATOSHIS)


class FeeSettings(BaseModel):
    """Fee rate bounds in sat/vB."""

    min_rate: float = Field(default=MIN_FEE_RATE, gt=0)
    max_rate: float = Field(default=MAX_FEE_RATE, gt=0)

    @model_validator(mode="after")
    def check_bounds(self):
        if self.min_rate > self.max_rate:
            raise ValueError("fees.min_rate cannot exceed fees.max_rate")
        return self


class MemoSettings(BaseModel):
    max_bytes: int = Field(default=DEFAULT_MEMO_MAX_BYTES, ge=1)
    allow_hex: bool = True
    allow_text: bool = True

    @model_validator(mode="after")
    def check_encodings(self):
        if not (self.allow_hex or self.allow_text):
            raise ValueError("memo must allow hex, text, or both")
        return self


class GuardSettings(BaseModel):
    """Thresholds of the repeating-pattern and size heuristics."""

    repeat_unit_max_length: int = Field(default=REPEAT_UNIT_MAX_LENGTH, ge=1)
    repeat_min_count: int = Field(default=REPEAT_MIN_COUNT, ge=1)
    qr_repeat_min_count: int = Field(default=QR_REPEAT_MIN_COUNT, ge=1)
    max_scan_length: int = Field(default=MAX_SCAN_LENGTH, ge=1)
    max_text_length: int = Field(default=DEFAULT_MAX_TEXT_LENGTH, ge=1)


class RateLimitSettings(BaseModel):
    window_ms: int = Field(default=RATE_LIMIT_WINDOW_MS, gt=0)
    max_operations: int = Field(default=MAX_OPERATIONS_PER_WINDOW, gt=0)
    cleanup_threshold: int = Field(default=CLEANUP_THRESHOLD, gt=0)


class ValidationSettings(BaseModel):
    """All validation settings."""

    network: NetworkSettings = Field(default_factory=NetworkSettings)
    amounts: AmountSettings = Field(default_factory=AmountSettings)
    fees: FeeSettings = Field(default_factory=FeeSettings)
    memo: MemoSettings = Field(default_factory=MemoSettings)
    guards: GuardSettings = Field(default_factory=GuardSettings)
    rate_limit: RateLimitSettings = Field(default_factory=RateLimitSettings)

    @classmethod
    def from_config(cls, config: Optional[Dict[str, Any]]) -> "ValidationSettings":
        """Build settings from a configuration dictionary, ignoring unrelated sections."""
        config = config or {}
        return cls.model_validate({name: config[name] for name in cls.model_fields if name in config})
