"""
Counterparty Wallet Validation - Addresses

Legacy Base58Check, bech32/bech32m segwit and Counterparty multisig address handling.
"""

from .base58check import (
    Base58Address,
    VERSION_BYTES,
    decode_base58_address,
    decode_base58check,
    encode_base58check,
)
from .classifier import (
    AddressClassifier,
    AddressShape,
    classify_address,
    detect_shape,
    is_valid_address,
)
from .models import AddressFormat, AddressInfo, MultisigAddress, Network
from .multisig import MultisigMemberError, parse_multisig_address
from .packing import (
    AddressPackError,
    PACKED_ADDRESS_LENGTH,
    addresses_equal,
    get_witness_version,
    is_segwit_packed,
    pack_address,
    unpack_address,
)
from .segwit import (
    Encoding,
    SegwitAddress,
    bech32_decode,
    bech32_encode,
    decode_segwit_address,
    encode_segwit_address,
)

__all__ = [
    "AddressClassifier",
    "AddressFormat",
    "AddressInfo",
    "AddressPackError",
    "AddressShape",
    "Base58Address",
    "Encoding",
    "MultisigAddress",
    "MultisigMemberError",
    "Network",
    "PACKED_ADDRESS_LENGTH",
    "SegwitAddress",
    "VERSION_BYTES",
    "addresses_equal",
    "bech32_decode",
    "bech32_encode",
    "classify_address",
    "decode_base58_address",
    "decode_base58check",
    "decode_segwit_address",
    "detect_shape",
    "encode_base58check",
    "encode_segwit_address",
    "get_witness_version",
    "is_segwit_packed",
    "is_valid_address",
    "pack_address",
    "parse_multisig_address",
    "unpack_address",
]
