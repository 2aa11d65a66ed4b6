"""
Counterparty Wallet Validation - Address Types

Closed enumerations of address shapes and networks, and the frozen result objects
produced by the address classifier.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from core.exceptions import ErrorKind
from core.results import ValidationResult


class AddressFormat(str, Enum):
    """Recognized address formats."""
    P2PKH = "P2PKH"
    P2SH = "P2SH"
    P2WPKH = "P2WPKH"
    P2WSH = "P2WSH"
    P2TR = "P2TR"
    WITNESS_UNKNOWN = "Witness_vN"
    MULTISIG = "Multisig"


class Network(str, Enum):
    """Bitcoin networks."""
    MAINNET = "mainnet"
    TESTNET = "testnet"
    REGTEST = "regtest"


@dataclass(frozen=True)
class MultisigAddress:
    """Counterparty bare-multisig compound address (M_addr1_addr2[_addr3]_N)."""
    m: int
    n: int
    member_addresses: Tuple["AddressInfo", ...]

    def __post_init__(self):
        if not 1 <= self.m <= self.n:
            raise ValueError(f"Invalid multisig threshold {self.m}-of-{self.n}")
        if len(self.member_addresses) != self.n:
            raise ValueError("Member count must equal n")


@dataclass(frozen=True)
class AddressInfo(ValidationResult):
    """
    Classification verdict for an address-shaped string.

    address_format and network are present if and only if the address is valid.
    """
    address_format: Optional[AddressFormat] = None
    network: Optional[Network] = None
    witness_version: Optional[int] = None
    multisig: Optional[MultisigAddress] = None

    def __post_init__(self):
        super().__post_init__()
        if self.is_valid != (self.address_format is not None and self.network is not None):
            raise ValueError("address_format and network must be set exactly when valid")

    @classmethod
    def valid(
        cls,
        address_format: AddressFormat,
        network: Network,
        witness_version: Optional[int] = None,
        multisig: Optional[MultisigAddress] = None
    ) -> "AddressInfo":
        return cls(
            is_valid=True,
            address_format=address_format,
            network=network,
            witness_version=witness_version,
            multisig=multisig,
        )

    @classmethod
    def invalid(cls, error: str, kind: ErrorKind = ErrorKind.FORMAT) -> "AddressInfo":
        return cls(is_valid=False, error=error, error_kind=kind)

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.is_valid:
            data["address_format"] = self.address_format.value
            data["network"] = self.network.value
            if self.witness_version is not None:
                data["witness_version"] = self.witness_version
            if self.multisig is not None:
                data["m"] = self.multisig.m
                data["n"] = self.multisig.n
        return data
