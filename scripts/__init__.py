"""
Counterparty Wallet Validation - Scripts

Output script parsing, template classification and size checks.
"""

from .classifier import (
    ScriptInfo,
    ScriptType,
    estimate_script_complexity,
    find_disabled_opcodes,
    identify_script_type,
    validate_multisig_script,
    validate_script,
    validate_script_size,
    validate_witness_data,
)
from .opcodes import DISABLED_OPCODES, ScriptOpcode
from .parser import ParsedScript, ScriptElement, parse_script, script_to_asm

__all__ = [
    "DISABLED_OPCODES",
    "ParsedScript",
    "ScriptElement",
    "ScriptInfo",
    "ScriptOpcode",
    "ScriptType",
    "estimate_script_complexity",
    "find_disabled_opcodes",
    "identify_script_type",
    "parse_script",
    "script_to_asm",
    "validate_multisig_script",
    "validate_script",
    "validate_script_size",
    "validate_witness_data",
]
