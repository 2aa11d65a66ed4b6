"""
Counterparty Wallet Validation - Bitcoin Units

Exact BTC / satoshi conversions on Decimal. Floats never take part in arithmetic;
a float input is converted through its shortest repr first.

Arithmetic runs in a context sized to its operands with ``Inexact`` trapped, so an
input of any length is either handled exactly or rejected, never rounded.
"""

from decimal import (
    MAX_EMAX,
    MIN_EMIN,
    Context,
    Decimal,
    Inexact,
    InvalidOperation,
    ROUND_DOWN,
)
import re
from typing import Union

from core.exceptions import FormatError, RangeError

DUST_LIMIT = 546
SATOSHIS_PER_BTC = 100_000_000
MAX_SATOSHIS = 2_100_000_000_000_000
BTC_DECIMALS = 8

SATOSHI = Decimal(1).scaleb(-BTC_DECIMALS)

_NUMBER_RE = re.compile(r"^-?\d*\.?\d+$")

Numeric = Union[str, int, float, Decimal]


def exact_context(*values: Decimal, extra_digits: int = 0) -> Context:
    """
    Context in which adding, subtracting or rescaling ``values`` cannot round.

    ``extra_digits`` widens the precision for results that gain digits, such as a
    quantize to a finer exponent.
    """
    top = max(value.adjusted() for value in values)
    bottom = min(value.as_tuple().exponent for value in values)
    return Context(
        prec=max(top - bottom + 2, 1) + extra_digits,
        Emax=MAX_EMAX,
        Emin=MIN_EMIN,
        traps=[InvalidOperation, Inexact],
    )


def decimal_places(value: Decimal) -> int:
    """Number of significant fractional digits, ignoring trailing zeros."""
    _, digits, exponent = value.as_tuple()
    text = "".join(map(str, digits))
    significant = text.rstrip("0")
    if not significant:
        return 0
    return max(-(exponent + len(text) - len(significant)), 0)


def to_base_units(value: Decimal, decimals: int = BTC_DECIMALS) -> int:
    """
    Exact integer value of ``value * 10**decimals``.

    Raises:
        RangeError: If the value has more than ``decimals`` fractional digits
    """
    if decimal_places(value) > decimals:
        raise RangeError(f"Amount has more than {decimals} decimal places")
    return int(value.scaleb(decimals, context=exact_context(value)))


def is_dust_amount(satoshis: int) -> bool:
    """True for a positive amount below the dust limit."""
    return 0 < satoshis < DUST_LIMIT


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert a number or numeric string to a finite Decimal.

    Raises:
        FormatError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise FormatError("Boolean is not a number")
    try:
        if isinstance(value, float):
            result = Decimal(repr(value))
        elif isinstance(value, (int, Decimal)):
            result = Decimal(value)
        elif isinstance(value, str):
            result = Decimal(value.strip())
        else:
            raise FormatError(f"Unsupported numeric type: {type(value).__name__}")
    except InvalidOperation:
        raise FormatError(f"Invalid number: {value!r}") from None

    if not result.is_finite():
        raise FormatError("Number must be finite")
    return result


def btc_to_satoshis(btc: Numeric) -> int:
    """Convert BTC to satoshis, truncating anything below one satoshi."""
    value = to_decimal(btc)
    context = exact_context(value)
    satoshis = value.scaleb(BTC_DECIMALS, context=context)
    return int(satoshis.to_integral_value(rounding=ROUND_DOWN, context=context))


def satoshis_to_btc_string(satoshis: int) -> str:
    """Render satoshis as a BTC string with exactly 8 fractional digits."""
    if isinstance(satoshis, bool) or not isinstance(satoshis, int):
        raise FormatError("Satoshis must be an integer")
    value = Decimal(satoshis)
    btc = value.scaleb(-BTC_DECIMALS, context=exact_context(value))
    return f"{btc.quantize(SATOSHI, context=exact_context(btc, extra_digits=BTC_DECIMALS)):f}"


def btc_string_to_satoshis(btc: str) -> int:
    """
    Convert a BTC decimal string to satoshis exactly.

    Raises:
        FormatError: If the string is not a plain decimal number
        RangeError: If it represents a fractional satoshi
    """
    if not isinstance(btc, str) or not is_valid_number(btc):
        raise FormatError(f"Invalid BTC amount: {btc!r}")
    return to_base_units(Decimal(btc.strip()))


def is_valid_number(value: str) -> bool:
    """True for a plain decimal string (no exponent, no separators)."""
    if not value or not isinstance(value, str):
        return False
    return _NUMBER_RE.fullmatch(value.strip()) is not None
