"""
Z80 Prefix Resolver
===================

Decodes instructions that begin with one of the four Z80 prefix bytes.

    CB  bit instructions: rotates/shifts, BIT, RES, SET    (fully decoded)
    ED  extended instructions: 16-bit ADC/SBC, block
        transfers, IM, I/R transfers, port I/O via (C)    (documented set)
    DD  IX-indexed instructions                            (not decoded)
    FD  IY-indexed instructions                            (not decoded)

The IX and IY families are a known capability gap. Their prefix byte is
emitted as a one-byte DB placeholder and decoding resumes at the next
byte; no attempt is made to guess the indexed instruction.

An ED prefix followed by an undefined second byte becomes a two-byte DB so
that the decoder stays synchronized with the instruction stream.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
from typing import Optional, Sequence

from .formatters import format_byte
from .instruction import Instruction, Operand
from .opcodes.base import OpcodeSpec, OpcodeTable, op
from .opcodes.z80 import REGISTER_ORDER

logger = logging.getLogger(__name__)


PREFIX_CB = 0xCB
PREFIX_DD = 0xDD
PREFIX_ED = 0xED
PREFIX_FD = 0xFD

UNKNOWN_ED_COMMENT = "Unknown ED-prefixed opcode - NOT SUPPORTED"

# Prefix families emitted as one-byte placeholders
NOT_DECODED_PREFIXES = {
    PREFIX_DD: "IX prefix - extended instruction, not decoded",
    PREFIX_FD: "IY prefix - extended instruction, not decoded",
}

_CB = dict(prefix=PREFIX_CB, supports_8080=False, supports_8085=False)
_ED = dict(prefix=PREFIX_ED, supports_8080=False, supports_8085=False)


# =============================================================================
# CB Table (generated)
# =============================================================================

ROTATE_OPERATIONS = ("RLC", "RRC", "RL", "RR", "SLA", "SRA", "SLL", "SRL")


def _cb_rows() -> list[OpcodeSpec]:
    """
    Build all 256 CB rows.

    Second byte layout: xx yyy zzz, where xx selects the group
    (rotate/shift, BIT, RES, SET), yyy the operation or bit number and
    zzz the register.
    """
    rows = []
    for code in range(256):
        group, y, z = code >> 6, (code >> 3) & 0x07, code & 0x07
        reg = REGISTER_ORDER[z]
        if group == 0:
            mnemonic = ROTATE_OPERATIONS[y]
            comment = "Undocumented" if mnemonic == "SLL" else None
            rows.append(op(code, mnemonic, reg, comment, **_CB))
        else:
            mnemonic = ("BIT", "RES", "SET")[group - 1]
            rows.append(op(code, mnemonic, f"{y}, {reg}", **_CB))
    return rows


# =============================================================================
# ED Table
# =============================================================================

_ED_ROWS = [
    op(0x40, "IN", "B, (C)", is_io=True, **_ED),
    op(0x41, "OUT", "(C), B", is_io=True, **_ED),
    op(0x42, "SBC", "HL, BC", **_ED),
    op(0x43, "LD", "(nn), BC", **_ED),
    op(0x44, "NEG", comment="Negate A", **_ED),
    op(0x45, "RETN", comment="Return from NMI", **_ED),
    op(0x46, "IM", "0", "Interrupt mode 0", **_ED),
    op(0x47, "LD", "I, A", **_ED),

    op(0x48, "IN", "C, (C)", is_io=True, **_ED),
    op(0x49, "OUT", "(C), C", is_io=True, **_ED),
    op(0x4A, "ADC", "HL, BC", **_ED),
    op(0x4B, "LD", "BC, (nn)", **_ED),
    op(0x4D, "RETI", comment="Return from interrupt", **_ED),
    op(0x4F, "LD", "R, A", **_ED),

    op(0x50, "IN", "D, (C)", is_io=True, **_ED),
    op(0x51, "OUT", "(C), D", is_io=True, **_ED),
    op(0x52, "SBC", "HL, DE", **_ED),
    op(0x53, "LD", "(nn), DE", **_ED),
    op(0x56, "IM", "1", "Interrupt mode 1", **_ED),
    op(0x57, "LD", "A, I", **_ED),

    op(0x58, "IN", "E, (C)", is_io=True, **_ED),
    op(0x59, "OUT", "(C), E", is_io=True, **_ED),
    op(0x5A, "ADC", "HL, DE", **_ED),
    op(0x5B, "LD", "DE, (nn)", **_ED),
    op(0x5E, "IM", "2", "Interrupt mode 2", **_ED),
    op(0x5F, "LD", "A, R", **_ED),

    op(0x60, "IN", "H, (C)", is_io=True, **_ED),
    op(0x61, "OUT", "(C), H", is_io=True, **_ED),
    op(0x62, "SBC", "HL, HL", **_ED),
    op(0x63, "LD", "(nn), HL", "Alternate encoding", **_ED),
    op(0x67, "RRD", comment="Rotate right decimal", **_ED),

    op(0x68, "IN", "L, (C)", is_io=True, **_ED),
    op(0x69, "OUT", "(C), L", is_io=True, **_ED),
    op(0x6A, "ADC", "HL, HL", **_ED),
    op(0x6B, "LD", "HL, (nn)", "Alternate encoding", **_ED),
    op(0x6F, "RLD", comment="Rotate left decimal", **_ED),

    op(0x72, "SBC", "HL, SP", **_ED),
    op(0x73, "LD", "(nn), SP", **_ED),

    op(0x78, "IN", "A, (C)", is_io=True, **_ED),
    op(0x79, "OUT", "(C), A", is_io=True, **_ED),
    op(0x7A, "ADC", "HL, SP", **_ED),
    op(0x7B, "LD", "SP, (nn)", **_ED),

    # Block transfer, search and I/O
    op(0xA0, "LDI", comment="Load and increment", **_ED),
    op(0xA1, "CPI", comment="Compare and increment", **_ED),
    op(0xA2, "INI", comment="Input and increment", is_io=True, **_ED),
    op(0xA3, "OUTI", comment="Output and increment", is_io=True, **_ED),
    op(0xA8, "LDD", comment="Load and decrement", **_ED),
    op(0xA9, "CPD", comment="Compare and decrement", **_ED),
    op(0xAA, "IND", comment="Input and decrement", is_io=True, **_ED),
    op(0xAB, "OUTD", comment="Output and decrement", is_io=True, **_ED),
    op(0xB0, "LDIR", comment="Block load, increment", **_ED),
    op(0xB1, "CPIR", comment="Block compare, increment", **_ED),
    op(0xB2, "INIR", comment="Block input, increment", is_io=True, **_ED),
    op(0xB3, "OTIR", comment="Block output, increment", is_io=True, **_ED),
    op(0xB8, "LDDR", comment="Block load, decrement", **_ED),
    op(0xB9, "CPDR", comment="Block compare, decrement", **_ED),
    op(0xBA, "INDR", comment="Block input, decrement", is_io=True, **_ED),
    op(0xBB, "OTDR", comment="Block output, decrement", is_io=True, **_ED),
]


CB_TABLE = OpcodeTable("CB prefix", [_cb_rows()])
ED_TABLE = OpcodeTable("ED prefix", [_ED_ROWS])


# =============================================================================
# Resolver
# =============================================================================

def is_prefix(byte: int) -> bool:
    """True for the four Z80 prefix bytes."""
    return byte in (PREFIX_CB, PREFIX_DD, PREFIX_ED, PREFIX_FD)


def _data_bytes(raw: bytes, comment: str) -> Instruction:
    """Build a DB pseudo-instruction covering raw, flagged unsupported everywhere."""
    return Instruction(
        mnemonic="DB",
        operand_list=tuple(Operand.imm8(b) for b in raw),
        raw_bytes=raw,
        comment=comment,
        supports_z80=False,
        supports_8080=False,
        supports_8085=False,
    )


def resolve_prefixed(buffer: Sequence[int], offset: int) -> Optional[Instruction]:
    """
    Decode a prefixed instruction starting at offset.

    Args:
        buffer: The full input image
        offset: Position of the prefix byte

    Returns:
        The decoded instruction, a DB placeholder for undecoded prefix
        families and unknown ED opcodes, or None when the prefix is the last
        byte of the buffer or the instruction is truncated (the caller
        falls back to a one-byte unknown opcode).
    """
    prefix = buffer[offset]

    if prefix in NOT_DECODED_PREFIXES:
        logger.debug(f"{format_byte(prefix)} prefix at offset {offset}: not decoded")
        return _data_bytes(bytes([prefix]), NOT_DECODED_PREFIXES[prefix])

    if offset + 1 >= len(buffer):
        logger.debug(f"Prefix {format_byte(prefix)} at end of input (offset {offset})")
        return None

    table = CB_TABLE if prefix == PREFIX_CB else ED_TABLE
    spec = table.lookup(buffer[offset + 1])
    if spec is None:
        raw = bytes(buffer[offset:offset + 2])
        logger.debug(f"Unknown ED opcode {format_byte(raw[1])} at offset {offset}")
        return _data_bytes(raw, UNKNOWN_ED_COMMENT)

    return spec.decode(buffer, offset)
