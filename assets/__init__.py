"""
Counterparty Wallet Validation - Assets

Named, numeric and subasset name validation and asset id mapping.
"""

from .names import (
    AssetName,
    AssetValidationResult,
    MAX_NUMERIC_ID,
    MIN_NUMERIC_ID,
    NamedAsset,
    NumericAsset,
    RESERVED_ASSETS,
    Subasset,
    asset_id_to_name,
    asset_name_to_id,
    is_named_asset,
    is_numeric_asset,
    parse_parent_asset,
    parse_subasset,
    validate_asset_name,
    validate_parent_asset,
    validate_subasset,
)

__all__ = [
    "AssetName",
    "AssetValidationResult",
    "MAX_NUMERIC_ID",
    "MIN_NUMERIC_ID",
    "NamedAsset",
    "NumericAsset",
    "RESERVED_ASSETS",
    "Subasset",
    "asset_id_to_name",
    "asset_name_to_id",
    "is_named_asset",
    "is_numeric_asset",
    "parse_parent_asset",
    "parse_subasset",
    "validate_asset_name",
    "validate_parent_asset",
    "validate_subasset",
]
