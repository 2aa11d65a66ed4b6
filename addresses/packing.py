"""
Counterparty Wallet Validation - Counterparty Address Packing

Counterparty messages embed destinations as 21-byte packed addresses:

- legacy (P2PKH / P2SH): version byte followed by the 20-byte hash
- segwit: ``0x80 + witness_version`` followed by the first 20 program bytes

Packing a 32-byte witness program (P2WSH, P2TR) is lossy: only the first 20 bytes
are kept, so unpacking does not reproduce the original address.
"""

import logging
from typing import Union

from core.exceptions import FormatError, ValidationError
from .base58check import decode_base58_address, encode_base58check
from .classifier import AddressShape, detect_shape
from .models import Network
from .segwit import NETWORK_HRPS, decode_segwit_address, encode_segwit_address

logger = logging.getLogger(__name__)

PACKED_ADDRESS_LENGTH = 21
SEGWIT_MARKER = 0x80
MAX_SEGWIT_MARKER = SEGWIT_MARKER + 0x0F
HASH_LENGTH = 20

MAINNET_VERSIONS = {0x00, 0x05}
TESTNET_VERSIONS = {0x6F, 0xC4}


class AddressPackError(FormatError):
    """Raised when an address cannot be packed or unpacked."""
    pass


def pack_address(address: str) -> bytes:
    """
    Pack a Bitcoin address into the 21-byte Counterparty format.

    Raises:
        AddressPackError: If the address is invalid or cannot be packed
    """
    if not isinstance(address, str) or not address.strip():
        raise AddressPackError("Address is required")
    address = address.strip()

    shape = detect_shape(address)
    try:
        if shape is AddressShape.SEGWIT:
            decoded = decode_segwit_address(address)
            if len(decoded.program) not in (20, 32):
                raise AddressPackError(
                    f"Unsupported witness program length: {len(decoded.program)}"
                )
            if len(decoded.program) == 32 and decoded.witness_version == 1:
                logger.debug("Packing taproot address truncates the witness program")
            return bytes([SEGWIT_MARKER + decoded.witness_version]) + decoded.program[:HASH_LENGTH]

        if shape is AddressShape.BASE58:
            decoded = decode_base58_address(address)
            return bytes([decoded.version]) + decoded.payload
    except AddressPackError:
        raise
    except ValidationError as e:
        raise AddressPackError(f"Cannot pack address: {e.message}") from e

    raise AddressPackError("Unsupported address format")


def is_segwit_packed(packed: bytes) -> bool:
    return len(packed) >= 1 and SEGWIT_MARKER <= packed[0] <= MAX_SEGWIT_MARKER


def get_witness_version(packed: bytes) -> int:
    """Witness version of a packed segwit address, or -1 for legacy."""
    if not is_segwit_packed(packed):
        return -1
    return packed[0] - SEGWIT_MARKER


def unpack_address(packed: Union[bytes, bytearray], network: Network = Network.MAINNET) -> str:
    """
    Unpack a 21-byte Counterparty address back into an address string.

    Args:
        packed: 21-byte packed address
        network: Network used to pick the bech32 prefix for segwit addresses

    Raises:
        AddressPackError: If the packed data is malformed
    """
    if not packed:
        raise AddressPackError("Empty packed address")
    if len(packed) != PACKED_ADDRESS_LENGTH:
        raise AddressPackError(
            f"Invalid packed address length: {len(packed)} (expected {PACKED_ADDRESS_LENGTH})"
        )

    packed = bytes(packed)
    body = packed[1:]

    try:
        if is_segwit_packed(packed):
            version = get_witness_version(packed)
            if version == 1:
                # Only 20 of the 32 program bytes survive packing
                raise AddressPackError("Packed taproot addresses cannot be reconstructed")
            return encode_segwit_address(NETWORK_HRPS[Network(network)], version, body)
        return encode_base58check(packed[0], body)
    except AddressPackError:
        raise
    except ValidationError as e:
        raise AddressPackError(f"Cannot unpack address: {e.message}") from e


def addresses_equal(first: str, second: str) -> bool:
    """Compare two addresses by their packed form."""
    if first == second:
        return True
    try:
        return pack_address(first) == pack_address(second)
    except AddressPackError:
        return False
