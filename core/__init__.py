"""
Counterparty Wallet Validation - Shared Error and Result Types

Leaf module imported by every validator package.
"""

from .exceptions import (
    ErrorKind,
    ValidationError,
    FormatError,
    UnknownVersionError,
    ChecksumError,
    RangeError,
    LengthError,
    InjectionDetected,
    ReservedNameError,
)
from .results import ValidationResult

__all__ = [
    "ErrorKind",
    "ValidationError",
    "FormatError",
    "UnknownVersionError",
    "ChecksumError",
    "RangeError",
    "LengthError",
    "InjectionDetected",
    "ReservedNameError",
    "ValidationResult",
]
