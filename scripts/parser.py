"""
Counterparty Wallet Validation - Script Parser

Splits raw script bytes into opcodes and data pushes.
"""

import struct
from dataclasses import dataclass
from typing import List, Optional

from .opcodes import OPCODE_NAMES, ScriptOpcode


@dataclass(frozen=True)
class ScriptElement:
    """A single opcode or data push in a script."""
    opcode: int
    opcode_name: str
    data: Optional[bytes] = None

    @property
    def is_push_data(self) -> bool:
        return self.data is not None


@dataclass(frozen=True)
class ParsedScript:
    """Result of parsing raw script bytes."""
    elements: List[ScriptElement]
    errors: List[str]

    @property
    def is_well_formed(self) -> bool:
        return not self.errors

    def pushes(self) -> List[bytes]:
        return [element.data for element in self.elements if element.data is not None]


_PUSHDATA_WIDTHS = {
    ScriptOpcode.OP_PUSHDATA1: (1, "<B"),
    ScriptOpcode.OP_PUSHDATA2: (2, "<H"),
    ScriptOpcode.OP_PUSHDATA4: (4, "<I"),
}


def parse_script(script: bytes) -> ParsedScript:
    """Parse raw script bytes into structured representation."""
    elements: List[ScriptElement] = []
    errors: List[str] = []
    pc = 0

    while pc < len(script):
        opcode = script[pc]
        start = pc
        pc += 1
        name = OPCODE_NAMES.get(opcode, f"OP_UNKNOWN_{opcode:02x}")

        if 1 <= opcode <= 75:
            # Direct data push
            data_len = opcode
            name = f"OP_PUSHBYTES_{opcode}"
        elif opcode in _PUSHDATA_WIDTHS:
            width, fmt = _PUSHDATA_WIDTHS[opcode]
            if pc + width > len(script):
                errors.append(f"Missing length bytes for {name} at position {start}")
                break
            data_len = struct.unpack(fmt, script[pc:pc + width])[0]
            pc += width
        else:
            elements.append(ScriptElement(opcode=opcode, opcode_name=name))
            continue

        if pc + data_len > len(script):
            errors.append(f"Insufficient data for push at position {start}")
            break
        elements.append(ScriptElement(opcode=opcode, opcode_name=name, data=script[pc:pc + data_len]))
        pc += data_len

    return ParsedScript(elements=elements, errors=errors)


def script_to_asm(script: bytes) -> str:
    """Render a script in space-separated assembly form."""
    parsed = parse_script(script)
    parts = [
        element.data.hex() if element.is_push_data else element.opcode_name
        for element in parsed.elements
    ]
    if parsed.errors:
        parts.append("[error]")
    return " ".join(parts)
