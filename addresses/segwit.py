"""
Counterparty Wallet Validation - Bech32 / Bech32m Segwit Codec

Segwit addresses (BIP173) and their bech32m successor (BIP350) share one string
format and differ only in the checksum constant. The checksum variant is bound to
the witness version: version 0 must use bech32, versions 1 through 16 must use
bech32m. A string whose checksum verifies under the wrong variant for its version
is rejected.

The polymod, HRP expansion and bit regrouping primitives come from the ``bech32``
package; this module layers the segwit rules on top of them.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple

from bech32 import CHARSET, bech32_hrp_expand, bech32_polymod, convertbits

from core.exceptions import ChecksumError, FormatError, LengthError
from .models import AddressFormat, Network

logger = logging.getLogger(__name__)


class Encoding(Enum):
    """Bech32 checksum variants."""
    BECH32 = 1
    BECH32M = 0x2BC830A3


HRP_NETWORKS = {
    "bc": Network.MAINNET,
    "tb": Network.TESTNET,
    "bcrt": Network.REGTEST,
}
NETWORK_HRPS = {network: hrp for hrp, network in HRP_NETWORKS.items()}

MAX_LENGTH = 90
CHECKSUM_CHARS = 6
MAX_WITNESS_VERSION = 16
MIN_PROGRAM_LENGTH = 2
MAX_PROGRAM_LENGTH = 40


@dataclass(frozen=True)
class SegwitAddress:
    """Decoded segwit address."""
    hrp: str
    witness_version: int
    program: bytes
    encoding: Encoding

    @property
    def network(self) -> Network:
        return HRP_NETWORKS[self.hrp]

    @property
    def address_format(self) -> AddressFormat:
        if self.witness_version == 0:
            return AddressFormat.P2WPKH if len(self.program) == 20 else AddressFormat.P2WSH
        if self.witness_version == 1:
            return AddressFormat.P2TR
        return AddressFormat.WITNESS_UNKNOWN


def is_mixed_case(s: str) -> bool:
    return s.lower() != s and s.upper() != s


def bech32_decode(s: str) -> Tuple[str, List[int], Encoding]:
    """
    Split a bech32 string into HRP and 5-bit data and identify its checksum variant.

    Args:
        s: Bech32 or bech32m string

    Returns:
        Tuple of (lower-case hrp, data values without checksum, encoding)

    Raises:
        FormatError: Malformed string (case, length, separator, charset)
        ChecksumError: Checksum verifies under neither constant
    """
    if any(ord(ch) < 33 or ord(ch) > 126 for ch in s):
        raise FormatError("Invalid characters in bech32 string")
    if is_mixed_case(s):
        raise FormatError("Mixed-case bech32 strings are invalid")
    if len(s) > MAX_LENGTH:
        raise FormatError(f"Bech32 string exceeds {MAX_LENGTH} characters")

    s = s.lower()
    pos = s.rfind("1")
    if pos < 1 or pos + CHECKSUM_CHARS + 1 > len(s):
        raise FormatError("Missing bech32 separator or data part")

    hrp = s[:pos]
    try:
        data = [CHARSET.index(ch) for ch in s[pos + 1:]]
    except ValueError:
        raise FormatError("Invalid bech32 data character") from None

    const = bech32_polymod(bech32_hrp_expand(hrp) + data)
    if const == Encoding.BECH32.value:
        encoding = Encoding.BECH32
    elif const == Encoding.BECH32M.value:
        encoding = Encoding.BECH32M
    else:
        raise ChecksumError("Invalid bech32 checksum")

    return hrp, data[:-CHECKSUM_CHARS], encoding


def decode_segwit_address(s: str) -> SegwitAddress:
    """
    Decode and validate a segwit address.

    Raises:
        FormatError: Bad shape, unknown prefix, bad witness version or padding
        ChecksumError: Bad checksum, or checksum variant mismatched to the version
        LengthError: Witness program length not allowed for the version
    """
    hrp, data, encoding = bech32_decode(s)

    if hrp not in HRP_NETWORKS:
        raise FormatError(f"Unknown address prefix: {hrp}")
    if not data:
        raise FormatError("Missing witness version")

    version = data[0]
    if version > MAX_WITNESS_VERSION:
        raise FormatError(f"Invalid witness version: {version}")

    program = convertbits(data[1:], 5, 8, False)
    if program is None:
        raise FormatError("Invalid witness program padding")

    if not MIN_PROGRAM_LENGTH <= len(program) <= MAX_PROGRAM_LENGTH:
        raise LengthError(f"Invalid witness program length: {len(program)}")

    if version == 0:
        if encoding is not Encoding.BECH32:
            raise ChecksumError("Witness version 0 requires a bech32 checksum")
        if len(program) not in (20, 32):
            raise LengthError(
                f"Witness v0 program must be 20 or 32 bytes (got {len(program)})"
            )
    else:
        if encoding is not Encoding.BECH32M:
            raise ChecksumError(f"Witness version {version} requires a bech32m checksum")
        if version == 1 and len(program) != 32:
            raise LengthError(f"Taproot program must be 32 bytes (got {len(program)})")

    return SegwitAddress(hrp=hrp, witness_version=version, program=bytes(program), encoding=encoding)


def bech32_encode(hrp: str, data: List[int], encoding: Encoding) -> str:
    values = bech32_hrp_expand(hrp) + data
    polymod = bech32_polymod(values + [0] * CHECKSUM_CHARS) ^ encoding.value
    checksum = [(polymod >> 5 * (5 - i)) & 31 for i in range(CHECKSUM_CHARS)]
    return hrp + "1" + "".join(CHARSET[d] for d in data + checksum)


def encode_segwit_address(hrp: str, witness_version: int, program: bytes) -> str:
    """
    Encode a witness program as a segwit address, choosing the checksum variant
    from the witness version.
    """
    if hrp not in HRP_NETWORKS:
        raise FormatError(f"Unknown address prefix: {hrp}")
    if not 0 <= witness_version <= MAX_WITNESS_VERSION:
        raise FormatError(f"Invalid witness version: {witness_version}")

    encoding = Encoding.BECH32 if witness_version == 0 else Encoding.BECH32M
    address = bech32_encode(hrp, [witness_version] + convertbits(program, 8, 5), encoding)

    # Round-trip to apply the per-version program length rules
    decode_segwit_address(address)
    return address
