"""
Counterparty Wallet Validation - Amount and Quantity Validation

Amounts are BTC values converted to an exact satoshi count; quantities are
Counterparty asset quantities checked against divisibility and supply bounds.
Inputs go through the same lexical gate before any numeric parse:

- non-finite numbers and formula-injection prefixes (``=``, ``@``, ``+``) are rejected
- only ``[0-9.,\\-+eE]`` may appear, and scientific notation is refused
- what remains must be a plain decimal with ``.`` as the only separator
"""

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from core.exceptions import ErrorKind, FormatError, InjectionDetected, ValidationError
from core.results import ValidationResult
from guards.injection import NUMERIC_FORMULA_PREFIXES, has_formula_prefix
from .units import (
    BTC_DECIMALS,
    DUST_LIMIT,
    MAX_SATOSHIS,
    decimal_places,
    exact_context,
    is_dust_amount,
    satoshis_to_btc_string,
    to_base_units,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_SUPPLY = "9223372036854775807"
UNITS = ("btc", "satoshis")
# Widest exact sum validate_balance will compute
MAX_BALANCE_DIGITS = 1000

_LEXICAL_RE = re.compile(r"^[0-9.,\-+eE]*$")
_DECIMAL_RE = re.compile(r"^-?\d*\.?\d*$")
_NON_FINITE = {"nan", "infinity", "-infinity", "+infinity", "inf", "-inf", "+inf"}

NumericInput = Union[str, int, float, Decimal]


@dataclass(frozen=True)
class AmountResult(ValidationResult):
    """Verdict for a BTC amount."""
    satoshis: Optional[int] = None
    normalized: Optional[str] = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.is_valid:
            data["satoshis"] = self.satoshis
            data["normalized"] = self.normalized
        return data


@dataclass(frozen=True)
class QuantityResult(ValidationResult):
    """Verdict for an asset quantity."""
    quantity: Optional[str] = None
    normalized: Optional[str] = None
    base_units: Optional[int] = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.is_valid:
            data["quantity"] = self.quantity
            data["normalized"] = self.normalized
            data["base_units"] = self.base_units
        return data


def _plain(value: Decimal) -> str:
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def parse_decimal_input(value: NumericInput, label: str = "Amount") -> Decimal:
    """
    Run the lexical gate and parse a decimal.

    Raises:
        FormatError: Missing, non-finite or malformed input
        InjectionDetected: Input starting with a formula prefix
    """
    noun = label.lower()
    if value is None or (isinstance(value, str) and not value.strip()):
        raise FormatError(f"{label} is required")
    if isinstance(value, bool):
        raise FormatError(f"Invalid {noun}")

    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise FormatError(f"Invalid {noun}")
        text = f"{Decimal(repr(value)):f}"
    elif isinstance(value, int):
        text = str(value)
    elif isinstance(value, Decimal):
        if not value.is_finite():
            raise FormatError(f"Invalid {noun}")
        text = f"{value:f}"
    elif isinstance(value, str):
        text = value.strip()
    else:
        raise FormatError(f"Invalid {noun}")

    if text.lower() in _NON_FINITE:
        raise FormatError(f"Invalid {noun}")
    if has_formula_prefix(text, NUMERIC_FORMULA_PREFIXES):
        raise InjectionDetected(f"{label} contains invalid characters")
    if not _LEXICAL_RE.fullmatch(text):
        raise FormatError(f"{label} contains invalid characters")
    if "e" in text or "E" in text:
        raise FormatError("Scientific notation is not allowed")
    if not _DECIMAL_RE.fullmatch(text) or text in ("-", ".", "-."):
        raise FormatError(f"Invalid {noun} format")

    try:
        return Decimal(text)
    except InvalidOperation:
        raise FormatError(f"Invalid {noun} format") from None


def validate_amount(
    value: NumericInput,
    unit: str = "btc",
    allow_zero: bool = False,
    allow_dust: bool = True,
    max_amount: int = MAX_SATOSHIS
) -> AmountResult:
    """
    Validate a Bitcoin amount and convert it to satoshis.

    Args:
        value: Amount as a string or number
        unit: ``"btc"`` or ``"satoshis"``
        allow_zero: Accept a zero amount
        allow_dust: Accept positive amounts below the dust limit (with a warning)
        max_amount: Upper bound in satoshis

    Returns:
        AmountResult; ``normalized`` is the BTC value with exactly 8 fractional digits
    """
    if unit not in UNITS:
        return AmountResult.fail(f"Unknown amount unit: {unit}")

    try:
        amount = parse_decimal_input(value, "Amount")
    except ValidationError as e:
        logger.debug("Rejected amount: %s", e.message)
        return AmountResult.from_exception(e)

    if amount < 0:
        return AmountResult.fail("Amount cannot be negative", ErrorKind.RANGE)

    if unit == "btc":
        if decimal_places(amount) > BTC_DECIMALS:
            return AmountResult.fail(
                f"Maximum {BTC_DECIMALS} decimal places allowed (fractional satoshi)",
                ErrorKind.RANGE,
            )
        satoshis = to_base_units(amount)
    else:
        if decimal_places(amount):
            return AmountResult.fail("Satoshi amount must be a whole number", ErrorKind.RANGE)
        satoshis = int(amount)

    warnings = []

    if satoshis == 0 and not allow_zero:
        return AmountResult.fail("Amount must be greater than zero", ErrorKind.RANGE)
    if is_dust_amount(satoshis):
        if not allow_dust:
            return AmountResult.fail(
                f"Amount is below dust limit ({DUST_LIMIT} satoshis)", ErrorKind.RANGE
            )
        warnings.append(f"Amount is below the dust limit ({DUST_LIMIT} satoshis)")
    if satoshis > max_amount:
        return AmountResult.fail(
            f"Amount exceeds maximum ({max_amount} satoshis)", ErrorKind.RANGE
        )

    return AmountResult(
        is_valid=True,
        satoshis=satoshis,
        normalized=satoshis_to_btc_string(satoshis),
        warnings=tuple(warnings),
    )


def validate_quantity(
    value: NumericInput,
    divisible: bool = True,
    max_supply: str = DEFAULT_MAX_SUPPLY,
    min_quantity: str = "0",
    allow_zero: bool = False
) -> QuantityResult:
    """
    Validate a Counterparty asset quantity.

    Divisible assets allow up to 8 decimal places; indivisible assets only whole
    numbers. ``base_units`` is the on-chain integer quantity.
    """
    try:
        quantity = parse_decimal_input(value, "Quantity")
    except ValidationError as e:
        logger.debug("Rejected quantity: %s", e.message)
        return QuantityResult.from_exception(e)

    if quantity < 0:
        return QuantityResult.fail("Quantity cannot be negative", ErrorKind.RANGE)
    if quantity == 0 and not allow_zero:
        return QuantityResult.fail("Quantity must be greater than zero", ErrorKind.RANGE)

    places = decimal_places(quantity)
    if not divisible and places:
        return QuantityResult.fail("Asset is not divisible - whole numbers only", ErrorKind.RANGE)
    if divisible and places > BTC_DECIMALS:
        return QuantityResult.fail(
            f"Maximum {BTC_DECIMALS} decimal places allowed", ErrorKind.RANGE
        )

    if quantity < Decimal(min_quantity):
        return QuantityResult.fail(f"Quantity is below minimum ({min_quantity})", ErrorKind.RANGE)
    if quantity > Decimal(max_supply):
        return QuantityResult.fail(
            f"Quantity exceeds maximum supply ({max_supply})", ErrorKind.RANGE
        )

    if divisible:
        base_units = to_base_units(quantity)
        normalized = satoshis_to_btc_string(base_units)
    else:
        base_units = int(quantity)
        normalized = str(base_units)

    return QuantityResult(
        is_valid=True,
        quantity=_plain(quantity),
        normalized=normalized,
        base_units=base_units,
    )


def _lenient_decimal(value) -> Optional[Decimal]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        result = Decimal(repr(value)) if isinstance(value, float) else Decimal(str(value).strip())
    except InvalidOperation:
        return None
    return None if result.is_nan() else result


def validate_balance(
    amount: NumericInput,
    balance: NumericInput,
    fee: NumericInput = 0
) -> ValidationResult:
    """
    Check that amount plus fee fits within a balance. All values share one unit.
    An infinite balance covers any finite amount. The sum is exact, so inputs whose
    span of digits exceeds MAX_BALANCE_DIGITS are rejected as invalid.
    """
    amount_value = _lenient_decimal(amount)
    balance_value = _lenient_decimal(balance)
    fee_value = _lenient_decimal(fee)

    if amount_value is None or balance_value is None or fee_value is None:
        return ValidationResult.fail("Invalid amount or balance")
    if not amount_value.is_finite() or not fee_value.is_finite():
        return ValidationResult.fail("Invalid amount or balance")
    if balance_value.is_infinite():
        if balance_value > 0:
            return ValidationResult.ok()
        return ValidationResult.fail("Invalid amount or balance")

    context = exact_context(amount_value, fee_value, balance_value)
    if context.prec > MAX_BALANCE_DIGITS:
        return ValidationResult.fail("Invalid amount or balance")
    required = context.add(amount_value, fee_value)
    if required > balance_value:
        shortfall = context.subtract(required, balance_value)
        return ValidationResult.fail(
            f"Insufficient balance: short by {_plain(shortfall)}", ErrorKind.RANGE
        )
    return ValidationResult.ok()
