"""
Counterparty Wallet Validation - Address Classifier

Produces a single AddressInfo verdict for any address-shaped string. Dispatch is an
explicit ordered match over the recognized shapes:

1. injection characters (``<>'"`;`` or control characters): always invalid
2. contains ``_``: Counterparty bare multisig string
3. ``(bc|tb|bcrt)1...``: bech32 / bech32m segwit address
4. base58 alphabet: Base58Check legacy address
5. anything else: unrecognized format

An input is handled by exactly one branch; there is no fallback scanning.
"""

import logging
import re
from enum import Enum
from typing import Optional

from core.exceptions import ErrorKind, ValidationError
from guards.injection import has_control_characters
from .base58check import decode_base58_address, is_base58_string
from .models import AddressFormat, AddressInfo, Network
from .multisig import parse_multisig_address
from .segwit import decode_segwit_address

INJECTION_CHARACTERS = frozenset("<>'\"`;")
SEGWIT_PATTERN = re.compile(r"^(bc|tb|bcrt)1[a-z0-9]+$", re.IGNORECASE)

# Three bech32 members plus separators fit well within this
MAX_ADDRESS_LENGTH = 300


class AddressShape(Enum):
    """Shapes an address-shaped string can take."""
    INJECTION = "injection"
    MULTISIG = "multisig"
    SEGWIT = "segwit"
    BASE58 = "base58"
    UNRECOGNIZED = "unrecognized"


def detect_shape(address: str) -> AddressShape:
    """Assign a trimmed address string to exactly one shape."""
    if any(ch in INJECTION_CHARACTERS for ch in address) or has_control_characters(address):
        return AddressShape.INJECTION
    if "_" in address:
        return AddressShape.MULTISIG
    if SEGWIT_PATTERN.fullmatch(address):
        return AddressShape.SEGWIT
    if is_base58_string(address):
        return AddressShape.BASE58
    return AddressShape.UNRECOGNIZED


class AddressClassifier:
    """Classifies legacy, segwit and Counterparty multisig address strings."""

    def __init__(self, max_length: int = MAX_ADDRESS_LENGTH):
        self.logger = logging.getLogger(__name__)
        self.max_length = max_length

    def classify(self, address: str) -> AddressInfo:
        """
        Classify an address string.

        Args:
            address: Candidate address (surrounding whitespace ignored)

        Returns:
            AddressInfo; invalid input yields is_valid=False with an error message
        """
        if not isinstance(address, str) or not address.strip():
            return AddressInfo.invalid("Address is required")

        address = address.strip()
        if len(address) > self.max_length:
            return AddressInfo.invalid("Address is too long", ErrorKind.LENGTH)

        shape = detect_shape(address)
        try:
            if shape is AddressShape.INJECTION:
                info = AddressInfo.invalid("Invalid characters in address")
            elif shape is AddressShape.MULTISIG:
                info = self._classify_multisig(address)
            elif shape is AddressShape.SEGWIT:
                info = self._classify_segwit(address)
            elif shape is AddressShape.BASE58:
                info = self._classify_base58(address)
            else:
                info = AddressInfo.invalid("Unrecognized address format")
        except ValidationError as e:
            info = AddressInfo.invalid(e.message, e.kind)

        if not info.is_valid:
            self.logger.debug("Rejected %s address: %s", shape.value, info.error)
        return info

    def _classify_multisig(self, address: str) -> AddressInfo:
        multisig = parse_multisig_address(address, self.classify)
        network = _first_network(multisig.member_addresses) or Network.MAINNET
        return AddressInfo.valid(AddressFormat.MULTISIG, network, multisig=multisig)

    def _classify_segwit(self, address: str) -> AddressInfo:
        decoded = decode_segwit_address(address)
        return AddressInfo.valid(
            decoded.address_format,
            decoded.network,
            witness_version=decoded.witness_version,
        )

    def _classify_base58(self, address: str) -> AddressInfo:
        decoded = decode_base58_address(address)
        return AddressInfo.valid(decoded.address_format, decoded.network)


def _first_network(members) -> Optional[Network]:
    for member in members:
        if member.network is not None:
            return member.network
    return None


_default_classifier = AddressClassifier()


def classify_address(address: str) -> AddressInfo:
    """Classify an address with the default classifier."""
    return _default_classifier.classify(address)


def is_valid_address(address: str) -> bool:
    return classify_address(address).is_valid
