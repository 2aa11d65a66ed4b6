"""
Counterparty Wallet Validation - Error Taxonomy

This module defines the error kinds shared by every validator and the exception
hierarchy raised by the low-level codecs.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Categories of validation failure."""
    FORMAT = "format"
    CHECKSUM = "checksum"
    RANGE = "range"
    LENGTH = "length"
    INJECTION = "injection"
    RESERVED_NAME = "reserved_name"


class ValidationError(ValueError):
    """Base exception for all validation errors."""

    kind = ErrorKind.FORMAT

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class FormatError(ValidationError):
    """Raised when input has the wrong alphabet or shape."""
    kind = ErrorKind.FORMAT


class UnknownVersionError(FormatError):
    """Raised when a Base58Check version byte is not recognized."""

    def __init__(self, version: int):
        self.version = version
        super().__init__(f"Unknown address version byte: 0x{version:02x}")


class ChecksumError(ValidationError):
    """Raised when input is well-formed but its checksum does not match."""
    kind = ErrorKind.CHECKSUM


class RangeError(ValidationError):
    """Raised when a value is outside protocol-defined numeric bounds."""
    kind = ErrorKind.RANGE


class LengthError(ValidationError):
    """Raised when input is too short or too long."""
    kind = ErrorKind.LENGTH


class InjectionDetected(ValidationError):
    """Raised when input carries formula prefixes, control bytes or null bytes."""
    kind = ErrorKind.INJECTION


class ReservedNameError(ValidationError):
    """Raised for reserved asset names (BTC, XCP)."""
    kind = ErrorKind.RESERVED_NAME
