"""
Counterparty Wallet Validation - Fee Rates, UTXOs and Transaction Size

Fee rates are in satoshis per virtual byte. Size estimates assume P2PKH inputs and
outputs for legacy transactions and P2WPKH for segwit ones.
"""

import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Mapping, Optional

from core.exceptions import ErrorKind, RangeError, ValidationError
from core.results import ValidationResult
from .units import MAX_SATOSHIS
from .validation import NumericInput, parse_decimal_input

logger = logging.getLogger(__name__)

MIN_FEE_RATE = 1
MAX_FEE_RATE = 1000
HIGH_FEE_RATE = 500

TXID_PATTERN = re.compile(r"^[0-9a-fA-F]{64}$")

# Legacy (P2PKH) sizes in bytes
TRANSACTION_OVERHEAD = 10
LEGACY_INPUT_SIZE = 148
LEGACY_OUTPUT_SIZE = 34

# Segwit (P2WPKH) sizes: non-witness bytes, witness bytes and marker/flag
SEGWIT_INPUT_BASE_SIZE = 41
SEGWIT_INPUT_WITNESS_SIZE = 107
SEGWIT_OUTPUT_SIZE = 31
SEGWIT_MARKER_SIZE = 2
WITNESS_SCALE_FACTOR = 4


@dataclass(frozen=True)
class FeeRateResult(ValidationResult):
    """Verdict for a fee rate."""
    sats_per_byte: Optional[Decimal] = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.sats_per_byte is not None:
            data["sats_per_byte"] = str(self.sats_per_byte)
        return data


@dataclass(frozen=True)
class TransactionSize:
    """Estimated transaction size."""
    size: int
    vsize: int
    weight: int

    def fee(self, sats_per_vbyte: NumericInput) -> int:
        """Fee in satoshis at the given rate, rounded up."""
        return math.ceil(Decimal(self.vsize) * Decimal(str(sats_per_vbyte)))


def validate_fee_rate(
    rate: NumericInput,
    min_rate: NumericInput = MIN_FEE_RATE,
    max_rate: NumericInput = MAX_FEE_RATE,
    warn_high_fee: bool = True
) -> FeeRateResult:
    """
    Validate a fee rate in sat/vB.

    Args:
        rate: Fee rate
        min_rate: Lowest accepted rate
        max_rate: Highest accepted rate
        warn_high_fee: Attach a warning above HIGH_FEE_RATE
    """
    try:
        value = parse_decimal_input(rate, "Fee rate")
    except ValidationError as e:
        logger.debug("Rejected fee rate: %s", e.message)
        return FeeRateResult.from_exception(e)

    if value < 0:
        return FeeRateResult.fail("Fee rate cannot be negative", ErrorKind.RANGE)
    if value == 0:
        return FeeRateResult.fail("Fee rate cannot be zero", ErrorKind.RANGE)
    if value < Decimal(str(min_rate)):
        return FeeRateResult.fail(
            f"Fee rate too low (minimum {min_rate} sat/vB)", ErrorKind.RANGE
        )
    if value > Decimal(str(max_rate)):
        return FeeRateResult.fail(
            f"Fee rate too high (maximum {max_rate} sat/vB)", ErrorKind.RANGE
        )

    warnings = ()
    if warn_high_fee and value > HIGH_FEE_RATE:
        warnings = (f"Unusually high fee rate ({value} sat/vB)",)
    return FeeRateResult(is_valid=True, sats_per_byte=value, warnings=warnings)


def validate_utxo(utxo: Mapping[str, Any]) -> ValidationResult:
    """Validate an unspent output record with ``txid``, ``vout`` and ``value``."""
    if not isinstance(utxo, Mapping):
        return ValidationResult.fail("UTXO must be an object")

    txid = utxo.get("txid")
    if not isinstance(txid, str) or not TXID_PATTERN.fullmatch(txid):
        return ValidationResult.fail("UTXO txid must be 64 hexadecimal characters")

    vout = utxo.get("vout")
    if isinstance(vout, bool) or not isinstance(vout, int) or vout < 0:
        return ValidationResult.fail("UTXO vout must be a non-negative integer", ErrorKind.RANGE)

    value = utxo.get("value")
    if isinstance(value, bool) or not isinstance(value, int):
        return ValidationResult.fail("UTXO value must be an integer number of satoshis")
    if not 0 <= value <= MAX_SATOSHIS:
        return ValidationResult.fail(
            f"UTXO value must be between 0 and {MAX_SATOSHIS} satoshis", ErrorKind.RANGE
        )

    return ValidationResult.ok()


def estimate_transaction_size(inputs: int, outputs: int, segwit: bool = True) -> TransactionSize:
    """
    Estimate size, virtual size and weight of a simple transaction.

    Raises:
        RangeError: If there is not at least one input and one output
    """
    if inputs < 1:
        raise RangeError("Transaction needs at least one input")
    if outputs < 1:
        raise RangeError("Transaction needs at least one output")

    if not segwit:
        size = TRANSACTION_OVERHEAD + inputs * LEGACY_INPUT_SIZE + outputs * LEGACY_OUTPUT_SIZE
        return TransactionSize(size=size, vsize=size, weight=size * WITNESS_SCALE_FACTOR)

    base = TRANSACTION_OVERHEAD + inputs * SEGWIT_INPUT_BASE_SIZE + outputs * SEGWIT_OUTPUT_SIZE
    witness = SEGWIT_MARKER_SIZE + inputs * SEGWIT_INPUT_WITNESS_SIZE
    weight = base * WITNESS_SCALE_FACTOR + witness
    return TransactionSize(
        size=base + witness,
        vsize=math.ceil(weight / WITNESS_SCALE_FACTOR),
        weight=weight,
    )
