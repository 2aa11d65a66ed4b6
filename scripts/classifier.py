"""
Counterparty Wallet Validation - Output Script Classifier

Hex-encoded output scripts are matched against fixed byte templates. Only hex format
and size violations (or a malformed bare multisig header) make a script invalid;
anything that matches no template is classified as UNKNOWN and stays valid.
Disabled opcodes are reported as warnings.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Union

from core.exceptions import ErrorKind, FormatError
from core.results import ValidationResult
from .opcodes import DISABLED_OPCODES, SIGNATURE_OPCODES, ScriptOpcode, small_int_value
from .parser import parse_script

logger = logging.getLogger(__name__)

HEX_PATTERN = re.compile(r"^[0-9a-f]*$")
HEX_PATTERN_ANY_CASE = re.compile(r"^[0-9a-fA-F]*$")

MAX_SCRIPT_HEX_LENGTH = 20000
MIN_MULTISIG_SCRIPT_LENGTH = 37
MAX_MULTISIG_KEYS = 15
STANDARD_MULTISIG_KEYS = 3

# OP_RETURN + push opcode + 80 data bytes
MAX_STANDARD_OP_RETURN_LENGTH = 83

SIGNATURE_OP_COST = 50
PUBLIC_KEY_LENGTHS = (33, 65)

SCRIPT_SIZE_LIMITS = {
    "scriptSig": 1650,
    "scriptPubKey": 10000,
    "witnessScript": 10000,
}

MAX_WITNESS_ITEMS = 100
MAX_WITNESS_ITEM_HEX_LENGTH = 10000


class ScriptType(str, Enum):
    """Output script templates."""
    P2PKH = "P2PKH"
    P2SH = "P2SH"
    P2WPKH = "P2WPKH"
    P2WSH = "P2WSH"
    P2TR = "P2TR"
    OP_RETURN = "OP_RETURN"
    MULTISIG = "MULTISIG"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ScriptInfo(ValidationResult):
    """Classification verdict for an output script."""
    script_type: Optional[ScriptType] = None

    @classmethod
    def classified(cls, script_type: ScriptType, warnings: Iterable[str] = ()) -> "ScriptInfo":
        return cls(is_valid=True, script_type=script_type, warnings=tuple(warnings))

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.script_type is not None:
            data["script_type"] = self.script_type.value
        return data


def clean_script_hex(script_hex: str) -> str:
    """Trim, lower-case and drop an optional 0x prefix."""
    cleaned = script_hex.strip().lower()
    return cleaned[2:] if cleaned.startswith("0x") else cleaned


def identify_script_type(script: bytes) -> ScriptType:
    """Match script bytes against the standard templates."""
    length = len(script)
    op = ScriptOpcode

    if (length == 25 and script[0] == op.OP_DUP and script[1] == op.OP_HASH160
            and script[2] == 20 and script[23] == op.OP_EQUALVERIFY
            and script[24] == op.OP_CHECKSIG):
        return ScriptType.P2PKH
    if length == 23 and script[0] == op.OP_HASH160 and script[1] == 20 and script[22] == op.OP_EQUAL:
        return ScriptType.P2SH
    if length == 22 and script[0] == op.OP_0 and script[1] == 20:
        return ScriptType.P2WPKH
    if length == 34 and script[0] == op.OP_0 and script[1] == 32:
        return ScriptType.P2WSH
    if length == 34 and script[0] == op.OP_1 and script[1] == 32:
        return ScriptType.P2TR
    if length and script[0] == op.OP_RETURN:
        return ScriptType.OP_RETURN
    if length and script[-1] == op.OP_CHECKMULTISIG:
        return ScriptType.MULTISIG
    return ScriptType.UNKNOWN


def find_disabled_opcodes(script: bytes) -> List[str]:
    """
    Names of disabled opcodes found in the script, in order of first occurrence.

    A name is listed once however often its opcode appears, so the result (and the
    warnings built from it) is not a per-occurrence count. Every byte is scanned,
    push data included.
    """
    found: List[str] = []
    for byte in script:
        name = DISABLED_OPCODES.get(byte)
        if name and name not in found:
            found.append(name)
    return found


def validate_multisig_script(script: Union[bytes, bytearray]) -> ScriptInfo:
    """
    Validate a bare multisig script: ``OP_m <pubkey>... OP_n OP_CHECKMULTISIG``.

    Args:
        script: Raw script bytes

    Returns:
        ScriptInfo with script_type MULTISIG when valid
    """
    script = bytes(script)
    if len(script) < MIN_MULTISIG_SCRIPT_LENGTH:
        return ScriptInfo.fail("Multisig script too short", ErrorKind.LENGTH)
    if script[-1] != ScriptOpcode.OP_CHECKMULTISIG:
        return ScriptInfo.fail("Multisig script must end with OP_CHECKMULTISIG")

    m = small_int_value(script[0])
    n = small_int_value(script[-2])

    if not 1 <= m <= MAX_MULTISIG_KEYS:
        return ScriptInfo.fail(
            f"Invalid m value in multisig (must be 1-{MAX_MULTISIG_KEYS})", ErrorKind.RANGE
        )
    if not 1 <= n <= MAX_MULTISIG_KEYS:
        return ScriptInfo.fail(
            f"Invalid n value in multisig (must be 1-{MAX_MULTISIG_KEYS})", ErrorKind.RANGE
        )
    if m > n:
        return ScriptInfo.fail("Invalid multisig: m cannot be greater than n", ErrorKind.RANGE)

    warnings = []
    if n > STANDARD_MULTISIG_KEYS:
        warnings.append(f"Large multisig ({m}-of-{n}) may have higher fees")

    parsed = parse_script(script[1:-2])
    if not parsed.is_well_formed:
        warnings.append("Multisig script contains malformed data pushes")
    else:
        keys = [push for push in parsed.pushes() if len(push) in PUBLIC_KEY_LENGTHS]
        if len(keys) != n:
            warnings.append(f"Multisig declares {n} keys but contains {len(keys)} public keys")

    return ScriptInfo.classified(ScriptType.MULTISIG, warnings)


def _op_return_warnings(script: bytes) -> List[str]:
    warnings = []
    if len(script) > MAX_STANDARD_OP_RETURN_LENGTH:
        warnings.append("OP_RETURN data exceeds standard limit (80 bytes)")
    if len(script) == 1:
        warnings.append("OP_RETURN script contains no data")
    return warnings


def validate_script(script_hex: str) -> ScriptInfo:
    """
    Validate and classify a hex-encoded output script.

    Args:
        script_hex: Script hex, optionally ``0x``-prefixed

    Returns:
        ScriptInfo; template mismatches classify as UNKNOWN and remain valid
    """
    if not isinstance(script_hex, str):
        return ScriptInfo.fail("Script must be a string")

    cleaned = clean_script_hex(script_hex)
    if not cleaned:
        return ScriptInfo.fail("Script cannot be empty")
    if not HEX_PATTERN.fullmatch(cleaned):
        return ScriptInfo.fail("Script must be valid hexadecimal")
    if len(cleaned) % 2:
        return ScriptInfo.fail("Script hex must have even length")
    if len(cleaned) > MAX_SCRIPT_HEX_LENGTH:
        return ScriptInfo.fail("Script exceeds maximum size (10KB)", ErrorKind.LENGTH)

    script = bytes.fromhex(cleaned)
    script_type = identify_script_type(script)
    warnings: List[str] = []

    if script_type is ScriptType.MULTISIG:
        multisig = validate_multisig_script(script)
        if not multisig.is_valid:
            logger.debug("Rejected multisig script: %s", multisig.error)
            return multisig
        warnings.extend(multisig.warnings)
    elif script_type is ScriptType.OP_RETURN:
        warnings.extend(_op_return_warnings(script))

    dangerous = find_disabled_opcodes(script)
    if dangerous:
        warnings.append(f"Script contains potentially dangerous opcodes: {', '.join(dangerous)}")

    return ScriptInfo.classified(script_type, warnings)


def estimate_script_complexity(script_hex: str) -> int:
    """
    Estimate script cost for fee calculation: one point per byte plus a fixed
    cost for every signature-checking opcode byte.

    Raises:
        FormatError: If script_hex is not valid even-length hex
    """
    cleaned = clean_script_hex(script_hex)
    if not HEX_PATTERN.fullmatch(cleaned) or len(cleaned) % 2:
        raise FormatError("Script must be valid hexadecimal")

    script = bytes.fromhex(cleaned)
    signature_ops = sum(1 for byte in script if byte in SIGNATURE_OPCODES)
    return len(script) + SIGNATURE_OP_COST * signature_ops


def validate_script_size(script_hex: str, context: str = "scriptPubKey") -> ValidationResult:
    """Check a script against the size limit of the context it is used in."""
    limit = SCRIPT_SIZE_LIMITS.get(context)
    if limit is None:
        return ValidationResult.fail(f"Unknown script context: {context}")

    cleaned = clean_script_hex(script_hex)
    size_bytes = (len(cleaned) + 1) // 2
    if size_bytes > limit:
        return ValidationResult.fail(
            f"Script size ({size_bytes} bytes) exceeds {context} limit ({limit} bytes)",
            ErrorKind.LENGTH,
        )
    return ValidationResult.ok()


def validate_witness_data(witness: Sequence[str]) -> ValidationResult:
    """Validate a witness stack given as a list of hex items."""
    if not isinstance(witness, (list, tuple)):
        return ValidationResult.fail("Witness must be a list")
    if not witness:
        return ValidationResult.fail("Witness cannot be empty", ErrorKind.LENGTH)
    if len(witness) > MAX_WITNESS_ITEMS:
        return ValidationResult.fail(
            f"Too many witness items (max {MAX_WITNESS_ITEMS})", ErrorKind.LENGTH
        )

    for index, item in enumerate(witness):
        if not isinstance(item, str):
            return ValidationResult.fail(f"Witness item {index} must be a string")
        cleaned = item[2:] if item.startswith("0x") else item
        if not HEX_PATTERN_ANY_CASE.fullmatch(cleaned):
            return ValidationResult.fail(f"Witness item {index} must be valid hex")
        if len(cleaned) > MAX_WITNESS_ITEM_HEX_LENGTH:
            return ValidationResult.fail(
                f"Witness item {index} exceeds maximum size", ErrorKind.LENGTH
            )

    return ValidationResult.ok()
