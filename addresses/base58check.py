"""
Counterparty Wallet Validation - Base58Check Codec

Legacy Bitcoin addresses are Base58Check strings decoding to exactly 25 bytes:
1 version byte, a 20-byte hash and a 4-byte checksum equal to the first four bytes
of SHA256(SHA256(version || hash)).
"""

import hashlib
import logging
import re
from dataclasses import dataclass
from typing import Dict, Tuple

import base58

from core.exceptions import ChecksumError, FormatError, LengthError, UnknownVersionError
from .models import AddressFormat, Network

logger = logging.getLogger(__name__)

BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
BASE58_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]+$")

DECODED_LENGTH = 25
PAYLOAD_LENGTH = 20
CHECKSUM_LENGTH = 4

# Anything longer cannot decode to 25 bytes
MAX_ENCODED_LENGTH = 35

VERSION_BYTES: Dict[int, Tuple[AddressFormat, Network]] = {
    0x00: (AddressFormat.P2PKH, Network.MAINNET),
    0x05: (AddressFormat.P2SH, Network.MAINNET),
    0x6F: (AddressFormat.P2PKH, Network.TESTNET),
    0xC4: (AddressFormat.P2SH, Network.TESTNET),
}


@dataclass(frozen=True)
class Base58Address:
    """Decoded legacy address."""
    version: int
    payload: bytes

    @property
    def address_format(self) -> AddressFormat:
        return VERSION_BYTES[self.version][0]

    @property
    def network(self) -> Network:
        return VERSION_BYTES[self.version][1]


def double_sha256_checksum(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()[:CHECKSUM_LENGTH]


def is_base58_string(s: str) -> bool:
    return isinstance(s, str) and BASE58_PATTERN.fullmatch(s) is not None


def decode_base58check(s: str) -> Tuple[int, bytes]:
    """
    Decode and verify a Base58Check address string.

    Args:
        s: Base58 encoded address

    Returns:
        Tuple of (version byte, 20-byte payload)

    Raises:
        FormatError: If s is not base58 or does not decode to 25 bytes
        ChecksumError: If the trailing 4 bytes do not match the checksum
    """
    if not is_base58_string(s):
        raise FormatError("Invalid base58 characters")
    if len(s) > MAX_ENCODED_LENGTH:
        raise FormatError("Base58 address too long")

    raw = base58.b58decode(s)
    if len(raw) != DECODED_LENGTH:
        raise FormatError(
            f"Invalid decoded address length: {len(raw)} bytes (expected {DECODED_LENGTH})"
        )

    body, checksum = raw[:-CHECKSUM_LENGTH], raw[-CHECKSUM_LENGTH:]
    if double_sha256_checksum(body) != checksum:
        raise ChecksumError("Invalid address checksum")

    return body[0], bytes(body[1:])


def decode_base58_address(s: str) -> Base58Address:
    """Decode a legacy address and resolve its version byte to a type and network."""
    version, payload = decode_base58check(s)
    if version not in VERSION_BYTES:
        raise UnknownVersionError(version)
    return Base58Address(version=version, payload=payload)


def encode_base58check(version: int, payload: bytes) -> str:
    """Encode a version byte and 20-byte payload as a Base58Check string."""
    if not 0 <= version <= 0xFF:
        raise FormatError(f"Version byte out of range: {version}")
    if len(payload) != PAYLOAD_LENGTH:
        raise LengthError(f"Payload must be {PAYLOAD_LENGTH} bytes (got {len(payload)})")
    return base58.b58encode_check(bytes([version]) + bytes(payload)).decode("ascii")
