"""
Counterparty Wallet Validation - Script Opcodes

Opcode constants needed to recognize standard output script templates.
"""

from typing import Dict


class ScriptOpcode:
    """Bitcoin Script opcodes used by the output script templates."""

    # Constants
    OP_0 = 0x00
    OP_FALSE = OP_0
    OP_PUSHDATA1 = 0x4c
    OP_PUSHDATA2 = 0x4d
    OP_PUSHDATA4 = 0x4e
    OP_1NEGATE = 0x4f
    OP_1 = 0x51
    OP_TRUE = OP_1
    OP_16 = 0x60

    # Flow control
    OP_RETURN = 0x6a

    # Stack operations
    OP_DUP = 0x76

    # Bitwise logic
    OP_EQUAL = 0x87
    OP_EQUALVERIFY = 0x88

    # Crypto
    OP_HASH160 = 0xa9
    OP_CHECKSIG = 0xac
    OP_CHECKSIGVERIFY = 0xad
    OP_CHECKMULTISIG = 0xae
    OP_CHECKMULTISIGVERIFY = 0xaf


# Opcodes disabled in consensus; their presence is reported, never rejected
DISABLED_OPCODES: Dict[int, str] = {
    0x7e: "OP_CAT",
    0x7f: "OP_SUBSTR",
    0x80: "OP_LEFT",
    0x81: "OP_RIGHT",
    0x83: "OP_INVERT",
    0x84: "OP_AND",
    0x85: "OP_OR",
    0x86: "OP_XOR",
    0x8d: "OP_2MUL",
    0x8e: "OP_2DIV",
    0x95: "OP_MUL",
    0x96: "OP_DIV",
    0x97: "OP_MOD",
    0x98: "OP_LSHIFT",
    0x99: "OP_RSHIFT",
}

SIGNATURE_OPCODES = frozenset({ScriptOpcode.OP_CHECKSIG, ScriptOpcode.OP_CHECKMULTISIG})

OPCODE_NAMES: Dict[int, str] = {
    ScriptOpcode.OP_0: "OP_0",
    ScriptOpcode.OP_PUSHDATA1: "OP_PUSHDATA1",
    ScriptOpcode.OP_PUSHDATA2: "OP_PUSHDATA2",
    ScriptOpcode.OP_PUSHDATA4: "OP_PUSHDATA4",
    ScriptOpcode.OP_1NEGATE: "OP_1NEGATE",
    ScriptOpcode.OP_RETURN: "OP_RETURN",
    ScriptOpcode.OP_DUP: "OP_DUP",
    ScriptOpcode.OP_EQUAL: "OP_EQUAL",
    ScriptOpcode.OP_EQUALVERIFY: "OP_EQUALVERIFY",
    ScriptOpcode.OP_HASH160: "OP_HASH160",
    ScriptOpcode.OP_CHECKSIG: "OP_CHECKSIG",
    ScriptOpcode.OP_CHECKSIGVERIFY: "OP_CHECKSIGVERIFY",
    ScriptOpcode.OP_CHECKMULTISIG: "OP_CHECKMULTISIG",
    ScriptOpcode.OP_CHECKMULTISIGVERIFY: "OP_CHECKMULTISIGVERIFY",
}
OPCODE_NAMES.update({ScriptOpcode.OP_1 + i: f"OP_{i + 1}" for i in range(16)})
OPCODE_NAMES.update(DISABLED_OPCODES)


def small_int_value(opcode: int) -> int:
    """Value pushed by OP_1..OP_16, or -1 for any other opcode."""
    if ScriptOpcode.OP_1 <= opcode <= ScriptOpcode.OP_16:
        return opcode - (ScriptOpcode.OP_1 - 1)
    return -1
