"""
Counterparty Wallet Validation - Validator Module

Public validation facade and the ValidationEngine that checks whole send requests.
"""

from addresses import AddressFormat, AddressInfo, Network
from amounts import AmountResult, QuantityResult, validate_amount, validate_quantity
from assets import AssetValidationResult, validate_asset_name
from core import ErrorKind, ValidationResult
from scripts import (
    ScriptInfo,
    ScriptType,
    estimate_script_complexity,
    validate_multisig_script,
    validate_script,
)

from .core import (
    SendContext,
    ValidationEngine,
    ValidationReport,
    ValidationRule,
    create_default_validator,
    validate_bitcoin_address,
    validate_send_params,
)
from .settings import ValidationSettings

__all__ = [
    "AddressFormat",
    "AddressInfo",
    "AmountResult",
    "AssetValidationResult",
    "ErrorKind",
    "Network",
    "QuantityResult",
    "ScriptInfo",
    "ScriptType",
    "SendContext",
    "ValidationEngine",
    "ValidationReport",
    "ValidationResult",
    "ValidationRule",
    "ValidationSettings",
    "create_default_validator",
    "estimate_script_complexity",
    "validate_amount",
    "validate_asset_name",
    "validate_bitcoin_address",
    "validate_multisig_script",
    "validate_quantity",
    "validate_script",
    "validate_send_params",
]
