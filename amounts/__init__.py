"""
Counterparty Wallet Validation - Amounts

BTC / satoshi conversions, amount and quantity validation, fee and UTXO checks.
"""

from .fees import (
    FeeRateResult,
    MAX_FEE_RATE,
    MIN_FEE_RATE,
    TransactionSize,
    estimate_transaction_size,
    validate_fee_rate,
    validate_utxo,
)
from .units import (
    DUST_LIMIT,
    MAX_SATOSHIS,
    SATOSHIS_PER_BTC,
    btc_string_to_satoshis,
    btc_to_satoshis,
    is_dust_amount,
    is_valid_number,
    satoshis_to_btc_string,
    to_decimal,
)
from .validation import (
    AmountResult,
    QuantityResult,
    parse_decimal_input,
    validate_amount,
    validate_balance,
    validate_quantity,
)

__all__ = [
    "AmountResult",
    "DUST_LIMIT",
    "FeeRateResult",
    "MAX_FEE_RATE",
    "MAX_SATOSHIS",
    "MIN_FEE_RATE",
    "QuantityResult",
    "SATOSHIS_PER_BTC",
    "TransactionSize",
    "btc_string_to_satoshis",
    "btc_to_satoshis",
    "estimate_transaction_size",
    "is_dust_amount",
    "is_valid_number",
    "parse_decimal_input",
    "satoshis_to_btc_string",
    "to_decimal",
    "validate_amount",
    "validate_balance",
    "validate_fee_rate",
    "validate_quantity",
    "validate_utxo",
]
