"""
Counterparty Wallet Validation - Asset Names

Counterparty asset identifiers come in three shapes:

- named assets: 4 to 12 upper-case letters, not starting with ``A``
- numeric assets: ``A`` followed by an integer in ``(26^12, 2^64 - 1]``
- subassets: ``PARENT.child`` where PARENT is a named or numeric asset

``BTC`` and ``XCP`` are reserved. Asset ids follow Counterparty's base-26 mapping, so
every 12-letter name sorts below the smallest numeric asset.
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from core.exceptions import (
    FormatError,
    LengthError,
    RangeError,
    ReservedNameError,
    ValidationError,
)
from core.results import ValidationResult

logger = logging.getLogger(__name__)

RESERVED_ASSETS = {"BTC": 0, "XCP": 1}

B26_DIGITS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
MIN_NAMED_LENGTH = 4
MAX_NAMED_LENGTH = 12
MIN_NAMED_ID = 26 ** 3

# Arbitrary-precision bounds; the upper bound does not fit a signed 64-bit integer
MIN_NUMERIC_ID = 26 ** 12 + 1
MAX_NUMERIC_ID = 2 ** 64 - 1

MAX_CHILD_LENGTH = 250

NAMED_PATTERN = re.compile(r"^[B-Z][A-Z]{3,11}$")
NUMERIC_PATTERN = re.compile(r"^A[0-9]+$")
CHILD_PATTERN = re.compile(r"^[A-Za-z0-9.\-_@!]+$")


@dataclass(frozen=True)
class NamedAsset:
    letters: str

    @property
    def name(self) -> str:
        return self.letters


@dataclass(frozen=True)
class NumericAsset:
    value: int

    @property
    def name(self) -> str:
        return f"A{self.value}"


@dataclass(frozen=True)
class Subasset:
    parent: Union[NamedAsset, NumericAsset]
    child: str

    @property
    def name(self) -> str:
        return f"{self.parent.name}.{self.child}"


AssetName = Union[NamedAsset, NumericAsset, Subasset]


@dataclass(frozen=True)
class AssetValidationResult(ValidationResult):
    """Verdict for an asset name, carrying the parsed asset when valid."""
    asset: Optional[AssetName] = None

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.asset is not None:
            data["asset"] = self.asset.name
            data["asset_kind"] = type(self.asset).__name__
        return data


def parse_parent_asset(name: str) -> Union[NamedAsset, NumericAsset]:
    """
    Parse a top-level (non-subasset) asset name.

    Raises:
        ReservedNameError: BTC or XCP
        RangeError: Numeric asset out of range or not in canonical form
        LengthError: Named asset shorter than 4 or longer than 12 characters
        FormatError: Any other malformed name
    """
    if not isinstance(name, str) or not name.strip():
        raise FormatError("Asset name is required")
    if name.upper() in RESERVED_ASSETS:
        raise ReservedNameError(f"{name.upper()} is a reserved asset name")

    if NUMERIC_PATTERN.fullmatch(name):
        digits = name[1:]
        if digits[0] == "0":
            raise RangeError("Numeric asset must not have leading zeros")
        value = int(digits)
        if not MIN_NUMERIC_ID <= value <= MAX_NUMERIC_ID:
            raise RangeError(
                f"Numeric asset must be between A{MIN_NUMERIC_ID} and A{MAX_NUMERIC_ID}"
            )
        return NumericAsset(value)

    if len(name) < MIN_NAMED_LENGTH:
        raise LengthError(f"Asset name must be at least {MIN_NAMED_LENGTH} characters")
    if len(name) > MAX_NAMED_LENGTH:
        raise LengthError(f"Asset name must be at most {MAX_NAMED_LENGTH} characters")
    if any("a" <= ch <= "z" for ch in name):
        raise FormatError("Asset name must be uppercase")
    if not all("A" <= ch <= "Z" for ch in name):
        raise FormatError("Asset name may only contain letters A-Z")
    if name[0] == "A":
        raise FormatError("Asset names starting with 'A' must be numeric (A followed by digits)")

    return NamedAsset(name)


def parse_subasset(name: str) -> Subasset:
    """
    Parse a ``PARENT.child`` subasset name. The first dot separates the parent.

    Raises:
        ValidationError: Invalid parent (same kind as the parent error) or child
    """
    if not isinstance(name, str) or not name.strip():
        raise FormatError("Subasset name is required")
    if "." not in name:
        raise FormatError("Subasset must have the form PARENT.child")

    parent_name, child = name.split(".", 1)
    try:
        parent = parse_parent_asset(parent_name)
    except ValidationError as e:
        raise type(e)(f"Invalid parent asset: {e.message}") from e

    if not child:
        raise LengthError("Subasset child name is required")
    if len(child) > MAX_CHILD_LENGTH:
        raise LengthError(f"Subasset child name must be at most {MAX_CHILD_LENGTH} characters")
    if not CHILD_PATTERN.fullmatch(child):
        raise FormatError("Subasset child may only contain letters, digits and . - _ @ !")
    if child.startswith(".") or child.endswith(".") or ".." in child:
        raise FormatError("Subasset child cannot start or end with '.' or contain '..'")

    return Subasset(parent=parent, child=child)


def _verdict(parse, name) -> AssetValidationResult:
    try:
        return AssetValidationResult(is_valid=True, asset=parse(name))
    except ValidationError as e:
        logger.debug("Rejected asset name: %s", e.message)
        return AssetValidationResult.from_exception(e)


def validate_parent_asset(name: str) -> AssetValidationResult:
    return _verdict(parse_parent_asset, name)


def validate_subasset(name: str) -> AssetValidationResult:
    return _verdict(parse_subasset, name)


def validate_asset_name(name: str, is_subasset: bool = False) -> AssetValidationResult:
    """
    Validate an asset name.

    Args:
        name: Asset name to validate
        is_subasset: Validate as ``PARENT.child`` instead of a top-level asset

    Returns:
        AssetValidationResult with the parsed asset when valid
    """
    if is_subasset:
        return validate_subasset(name)
    if isinstance(name, str) and "." in name:
        return AssetValidationResult.fail("Subasset names are not allowed here")
    return validate_parent_asset(name)


def is_numeric_asset(name: str) -> bool:
    """True for a canonical, in-range numeric asset name."""
    if not isinstance(name, str) or not NUMERIC_PATTERN.fullmatch(name):
        return False
    return isinstance(validate_parent_asset(name).asset, NumericAsset)


def is_named_asset(name: str) -> bool:
    return isinstance(name, str) and bool(NAMED_PATTERN.fullmatch(name)) and name not in RESERVED_ASSETS


def asset_name_to_id(name: str) -> int:
    """
    Map an asset name to its Counterparty asset id.

    Raises:
        ValidationError: If the name is not a valid top-level asset
    """
    if name in RESERVED_ASSETS:
        return RESERVED_ASSETS[name]

    asset = parse_parent_asset(name)
    if isinstance(asset, NumericAsset):
        return asset.value

    asset_id = 0
    for ch in asset.letters:
        asset_id = asset_id * 26 + B26_DIGITS.index(ch)
    return asset_id


def asset_id_to_name(asset_id: int) -> str:
    """
    Map a Counterparty asset id back to its name.

    Raises:
        RangeError: If the id does not correspond to any asset
    """
    for name, reserved_id in RESERVED_ASSETS.items():
        if asset_id == reserved_id:
            return name

    if asset_id < MIN_NAMED_ID or asset_id > MAX_NUMERIC_ID:
        raise RangeError(f"Asset id out of range: {asset_id}")
    if asset_id >= MIN_NUMERIC_ID:
        return f"A{asset_id}"
    if asset_id == MIN_NUMERIC_ID - 1:
        raise RangeError(f"Asset id {asset_id} is reserved")

    letters = []
    n = asset_id
    while n > 0:
        n, r = divmod(n, 26)
        letters.append(B26_DIGITS[r])
    return "".join(reversed(letters))
