"""
Counterparty Wallet Validation - Result Types

Every validator returns a frozen result object instead of raising for invalid input.
Warnings are additive and never change ``is_valid``.
"""

from dataclasses import dataclass, replace
from typing import Optional, Tuple, TypeVar

from .exceptions import ErrorKind, ValidationError

R = TypeVar("R", bound="ValidationResult")


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a single validation call."""
    is_valid: bool
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    warnings: Tuple[str, ...] = ()

    def __post_init__(self):
        if self.is_valid and self.error is not None:
            raise ValueError("A valid result cannot carry an error")
        if not self.is_valid and not self.error:
            raise ValueError("An invalid result must carry an error message")

    def __bool__(self) -> bool:
        return self.is_valid

    @classmethod
    def ok(cls, warnings: Tuple[str, ...] = ()) -> "ValidationResult":
        return cls(is_valid=True, warnings=tuple(warnings))

    @classmethod
    def fail(cls, error: str, kind: ErrorKind = ErrorKind.FORMAT) -> "ValidationResult":
        return cls(is_valid=False, error=error, error_kind=kind)

    @classmethod
    def from_exception(cls, exc: ValidationError) -> "ValidationResult":
        return cls(is_valid=False, error=exc.message, error_kind=exc.kind)

    def with_warnings(self: R, *warnings: str) -> R:
        """Return a copy with extra warnings appended."""
        return replace(self, warnings=self.warnings + tuple(warnings))

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dictionary."""
        data = {"is_valid": self.is_valid}
        if self.error is not None:
            data["error"] = self.error
            data["error_kind"] = self.error_kind.value if self.error_kind else None
        if self.warnings:
            data["warnings"] = list(self.warnings)
        return data
