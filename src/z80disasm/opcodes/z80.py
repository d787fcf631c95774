"""
Z80 Unprefixed Opcode Table
===========================

Rows for every single-byte Z80 opcode except the four prefix bytes
(CB, DD, ED, FD), which are handled by the prefix resolver.

Each row carries its Intel legality flags. The Z80 runs the complete 8080
instruction set at the same encodings, so most rows are common; the rows
flagged Z80-only are the relative jumps, DJNZ, EXX and EX AF,AF'.

The regular blocks of the opcode map are generated from the register
encoding order:

    40-7F   LD r, r'        (76 is HALT)
    80-BF   ALU A, r        ADD ADC SUB SBC AND XOR OR CP

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from .base import OpcodeSpec, op


# Register encoding order (bits 2-0 / 5-3 of the opcode)
REGISTER_ORDER = ("B", "C", "D", "E", "H", "L", "(HL)", "A")

# Condition encoding order (bits 5-3)
CONDITION_ORDER = ("NZ", "Z", "NC", "C", "PO", "PE", "P", "M")

CONDITION_COMMENTS = {
    "PO": "Parity odd",
    "PE": "Parity even",
    "P": "Sign positive",
    "M": "Sign negative",
}

# Mnemonic and operand prefix for the ALU block (80-BF) and immediates (C6-FE)
ALU_OPERATIONS = (
    ("ADD", "A, "),
    ("ADC", "A, "),
    ("SUB", ""),
    ("SBC", "A, "),
    ("AND", ""),
    ("XOR", ""),
    ("OR", ""),
    ("CP", ""),
)

# Z80-only rows: illegal (or something else entirely) on the Intel CPUs
Z80_ONLY = dict(supports_8080=False, supports_8085=False)


# =============================================================================
# Row Groups
# =============================================================================

_MISC_ROWS = [
    op(0x00, "NOP"),
    op(0x01, "LD", "BC, nn"),
    op(0x02, "LD", "(BC), A"),
    op(0x03, "INC", "BC"),
    op(0x04, "INC", "B"),
    op(0x05, "DEC", "B"),
    op(0x06, "LD", "B, n"),
    op(0x07, "RLCA"),
    op(0x08, "EX", "AF, AF'", "Exchange with alternate AF", **Z80_ONLY),
    op(0x09, "ADD", "HL, BC"),
    op(0x0A, "LD", "A, (BC)"),
    op(0x0B, "DEC", "BC"),
    op(0x0C, "INC", "C"),
    op(0x0D, "DEC", "C"),
    op(0x0E, "LD", "C, n"),
    op(0x0F, "RRCA"),

    op(0x10, "DJNZ", "rel", "Decrement B, jump if not zero", **Z80_ONLY),
    op(0x11, "LD", "DE, nn"),
    op(0x12, "LD", "(DE), A"),
    op(0x13, "INC", "DE"),
    op(0x14, "INC", "D"),
    op(0x15, "DEC", "D"),
    op(0x16, "LD", "D, n"),
    op(0x17, "RLA"),
    op(0x18, "JR", "rel", "Relative jump", **Z80_ONLY),
    op(0x19, "ADD", "HL, DE"),
    op(0x1A, "LD", "A, (DE)"),
    op(0x1B, "DEC", "DE"),
    op(0x1C, "INC", "E"),
    op(0x1D, "DEC", "E"),
    op(0x1E, "LD", "E, n"),
    op(0x1F, "RRA"),

    op(0x20, "JR", "cc:NZ, rel", "Relative jump if not zero", **Z80_ONLY),
    op(0x21, "LD", "HL, nn"),
    op(0x22, "LD", "(nn), HL"),
    op(0x23, "INC", "HL"),
    op(0x24, "INC", "H"),
    op(0x25, "DEC", "H"),
    op(0x26, "LD", "H, n"),
    op(0x27, "DAA", comment="Decimal adjust A"),
    op(0x28, "JR", "cc:Z, rel", "Relative jump if zero", **Z80_ONLY),
    op(0x29, "ADD", "HL, HL"),
    op(0x2A, "LD", "HL, (nn)"),
    op(0x2B, "DEC", "HL"),
    op(0x2C, "INC", "L"),
    op(0x2D, "DEC", "L"),
    op(0x2E, "LD", "L, n"),
    op(0x2F, "CPL", comment="Complement A"),

    op(0x30, "JR", "cc:NC, rel", "Relative jump if no carry", **Z80_ONLY),
    op(0x31, "LD", "SP, nn"),
    op(0x32, "LD", "(nn), A"),
    op(0x33, "INC", "SP"),
    op(0x34, "INC", "(HL)"),
    op(0x35, "DEC", "(HL)"),
    op(0x36, "LD", "(HL), n"),
    op(0x37, "SCF", comment="Set carry flag"),
    op(0x38, "JR", "cc:C, rel", "Relative jump if carry", **Z80_ONLY),
    op(0x39, "ADD", "HL, SP"),
    op(0x3A, "LD", "A, (nn)"),
    op(0x3B, "DEC", "SP"),
    op(0x3C, "INC", "A"),
    op(0x3D, "DEC", "A"),
    op(0x3E, "LD", "A, n"),
    op(0x3F, "CCF", comment="Complement carry flag"),
]


def _load_rows() -> list[OpcodeSpec]:
    """LD r, r' block (40-7F) with HALT at 76."""
    rows = []
    for dst_index, dst in enumerate(REGISTER_ORDER):
        for src_index, src in enumerate(REGISTER_ORDER):
            opcode = 0x40 | (dst_index << 3) | src_index
            if opcode == 0x76:
                rows.append(op(opcode, "HALT", comment="Halt until interrupt"))
            else:
                rows.append(op(opcode, "LD", f"{dst}, {src}"))
    return rows


def _alu_rows() -> list[OpcodeSpec]:
    """ALU block (80-BF) and the immediate forms (C6, CE, ... FE)."""
    rows = []
    for index, (mnemonic, prefix) in enumerate(ALU_OPERATIONS):
        for src_index, src in enumerate(REGISTER_ORDER):
            rows.append(op(0x80 | (index << 3) | src_index, mnemonic, f"{prefix}{src}"))
        rows.append(op(0xC6 | (index << 3), mnemonic, f"{prefix}n"))
    return rows


def _control_rows() -> list[OpcodeSpec]:
    """Conditional RET/JP/CALL and the RST vectors (C0-FF)."""
    rows = []
    for index, cond in enumerate(CONDITION_ORDER):
        comment = CONDITION_COMMENTS.get(cond)
        base = 0xC0 | (index << 3)
        rows.append(op(base, "RET", f"cc:{cond}", comment))
        rows.append(op(base | 0x02, "JP", f"cc:{cond}, addr", comment))
        rows.append(op(base | 0x04, "CALL", f"cc:{cond}, addr", comment))
        vector = index << 3
        rows.append(op(base | 0x07, "RST", f"{vector:02X}h", restart_vector=vector))
    return rows


_STACK_AND_MISC_ROWS = [
    op(0xC1, "POP", "BC"),
    op(0xC3, "JP", "addr"),
    op(0xC5, "PUSH", "BC"),
    op(0xC9, "RET"),
    op(0xCD, "CALL", "addr"),

    op(0xD1, "POP", "DE"),
    op(0xD3, "OUT", "(n), A", is_io=True),
    op(0xD5, "PUSH", "DE"),
    op(0xD9, "EXX", comment="Exchange BC, DE, HL with alternates", **Z80_ONLY),
    op(0xDB, "IN", "A, (n)", is_io=True),

    op(0xE1, "POP", "HL"),
    op(0xE3, "EX", "(SP), HL"),
    op(0xE5, "PUSH", "HL"),
    op(0xE9, "JP", "(HL)"),
    op(0xEB, "EX", "DE, HL"),

    op(0xF1, "POP", "AF"),
    op(0xF3, "DI", comment="Disable interrupts"),
    op(0xF5, "PUSH", "AF"),
    op(0xF9, "LD", "SP, HL"),
    op(0xFB, "EI", comment="Enable interrupts"),
]


# =============================================================================
# Exported Rows
# =============================================================================

# Every unprefixed Z80 row, ordered by opcode
UNPREFIXED_ROWS: list[OpcodeSpec] = sorted(
    _MISC_ROWS + _load_rows() + _alu_rows() + _control_rows() + _STACK_AND_MISC_ROWS,
    key=lambda spec: spec.opcode,
)

# Prefix bytes; never present in UNPREFIXED_ROWS
PREFIX_BYTES = frozenset({0xCB, 0xDD, 0xED, 0xFD})
