"""
Asset and Quantity Rules

BTC and XCP are reserved as names for new assets but are the most common assets to
send, so both rules treat them as sendable.
"""

from assets.names import RESERVED_ASSETS, AssetValidationResult, validate_asset_name
from amounts.validation import validate_amount, validate_quantity
from core.results import ValidationResult
from validator.core import SendContext, ValidationRule
from validator.settings import ValidationSettings


def _is_btc(asset) -> bool:
    return isinstance(asset, str) and asset.strip().upper() == "BTC"


class AssetRule(ValidationRule):
    """Validates the asset name of a send."""

    def __init__(self):
        super().__init__(
            name="asset",
            field_name="asset",
            description="Asset must be BTC, XCP or a valid named, numeric or subasset name",
        )

    def validate(self, context: SendContext, settings: ValidationSettings) -> ValidationResult:
        asset = context.asset
        if isinstance(asset, str) and asset in RESERVED_ASSETS:
            return AssetValidationResult(is_valid=True)
        is_subasset = isinstance(asset, str) and "." in asset
        return validate_asset_name(asset, is_subasset=is_subasset)


class QuantityRule(ValidationRule):
    """
    Validates the quantity of a send.

    BTC quantities are amounts (dust and satoshi precision apply); anything else is
    an asset quantity checked against divisibility.
    """

    def __init__(self):
        super().__init__(
            name="quantity",
            field_name="quantity",
            description="Quantity must be positive and match the asset's precision",
        )

    def validate(self, context: SendContext, settings: ValidationSettings) -> ValidationResult:
        if _is_btc(context.asset):
            amounts = settings.amounts
            return validate_amount(
                context.quantity,
                unit=amounts.unit,
                allow_zero=amounts.allow_zero,
                allow_dust=amounts.allow_dust,
                max_amount=amounts.max_amount,
            )
        return validate_quantity(context.quantity, divisible=context.divisible)
