"""
Tests for the Base58Check address codec.
"""

import pytest

from addresses.base58check import (
    BASE58_ALPHABET,
    Base58Address,
    decode_base58_address,
    decode_base58check,
    encode_base58check,
    is_base58_string,
)
from addresses.models import AddressFormat, Network
from core.exceptions import (
    ChecksumError,
    ErrorKind,
    FormatError,
    LengthError,
    UnknownVersionError,
    ValidationError,
)

GENESIS_ADDRESS = "1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa"
GENESIS_HASH160 = bytes.fromhex("62e907b15cbf27d5425399ebf6f0fb50ebb88f18")


class TestDecodeBase58Check:
    """Test decoding and checksum verification."""

    def test_decode_genesis_address(self):
        """The genesis coinbase address decodes to version 0 and its hash160."""
        version, payload = decode_base58check(GENESIS_ADDRESS)

        assert version == 0x00
        assert payload == GENESIS_HASH160

    @pytest.mark.parametrize("address,fmt,network", [
        ("1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNa", AddressFormat.P2PKH, Network.MAINNET),
        ("3J98t1WpEZ73CNmQviecrnyiWrnqRhWNLy", AddressFormat.P2SH, Network.MAINNET),
        ("mipcBbFg9gMiCh81Kj8tqqdgoZub1ZJRfn", AddressFormat.P2PKH, Network.TESTNET),
        ("2MzQwSSnBHWHqSAqtTVQ6v47XtaisrJa1Vc", AddressFormat.P2SH, Network.TESTNET),
    ])
    def test_version_byte_resolution(self, address, fmt, network):
        """Version bytes map to address type and network."""
        decoded = decode_base58_address(address)

        assert isinstance(decoded, Base58Address)
        assert decoded.address_format is fmt
        assert decoded.network is network
        assert len(decoded.payload) == 20

    def test_bad_checksum(self):
        """Changing the last character breaks the checksum."""
        with pytest.raises(ChecksumError) as exc_info:
            decode_base58check("1A1zP1eP5QGefi2DMPTfTL5SLmv7DivfNb")

        assert exc_info.value.kind is ErrorKind.CHECKSUM

    @pytest.mark.parametrize("position", range(len(GENESIS_ADDRESS)))
    def test_any_single_character_change_rejected(self, position):
        """Replacing any one character with any other base58 character is rejected."""
        original = GENESIS_ADDRESS[position]
        for replacement in BASE58_ALPHABET:
            if replacement == original:
                continue
            mutated = GENESIS_ADDRESS[:position] + replacement + GENESIS_ADDRESS[position + 1:]
            with pytest.raises(ValidationError):
                decode_base58check(mutated)

    def test_invalid_alphabet(self):
        """0, O, I and l are not part of the base58 alphabet."""
        with pytest.raises(FormatError):
            decode_base58check("1A1zP1eP5QGefi2DMPTfTL5SLmv7Divf0a")

    def test_wrong_decoded_length(self):
        """Strings that do not decode to 25 bytes are rejected."""
        with pytest.raises(FormatError):
            decode_base58check("1111")

    def test_too_long(self):
        """Encoded strings longer than a 25-byte value are rejected early."""
        with pytest.raises(FormatError):
            decode_base58check("1" * 36)

    def test_unknown_version(self):
        """A valid checksum with an unknown version byte is still rejected."""
        litecoin_style = encode_base58check(0x30, GENESIS_HASH160)

        with pytest.raises(UnknownVersionError) as exc_info:
            decode_base58_address(litecoin_style)

        assert exc_info.value.version == 0x30
        assert isinstance(exc_info.value, FormatError)


class TestEncodeBase58Check:
    """Test encoding."""

    def test_encode_genesis_address(self):
        """Encoding the genesis hash160 reproduces the address."""
        assert encode_base58check(0x00, GENESIS_HASH160) == GENESIS_ADDRESS

    def test_encode_decode_preserves_payload(self):
        """A testnet P2SH payload survives encoding."""
        payload = bytes(range(20))
        address = encode_base58check(0xC4, payload)

        decoded = decode_base58_address(address)
        assert decoded.version == 0xC4
        assert decoded.payload == payload
        assert address.startswith("2")

    def test_payload_length_checked(self):
        """Only 20-byte payloads can be encoded."""
        with pytest.raises(LengthError):
            encode_base58check(0x00, b"\x00" * 19)

    def test_version_range_checked(self):
        with pytest.raises(FormatError):
            encode_base58check(256, GENESIS_HASH160)


class TestIsBase58String:

    def test_alphabet(self):
        assert is_base58_string(GENESIS_ADDRESS)
        assert not is_base58_string("0OIl")
        assert not is_base58_string("")
        assert not is_base58_string(None)

    def test_trailing_newline_rejected(self):
        """Full-string matching: a trailing newline is not base58."""
        assert not is_base58_string(GENESIS_ADDRESS + "\n")
