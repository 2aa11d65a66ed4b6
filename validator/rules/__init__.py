"""
Counterparty Wallet Validation - Validator Rules

One rule per field of a send request.
"""

from .destination import DestinationRule
from .asset import AssetRule, QuantityRule
from .memo import MemoRule
from .fee import FeeRateRule

__all__ = [
    "DestinationRule",
    "AssetRule",
    "QuantityRule",
    "MemoRule",
    "FeeRateRule",
]
