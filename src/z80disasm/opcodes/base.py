"""
Opcode Table Building Blocks
============================

Opcode tables are built from declarative rows. Each row (OpcodeSpec)
describes one encoding: its opcode byte(s), mnemonic, an operand pattern
and per-architecture support flags. Rows are written with the op() helper
using a compact operand notation:

    Pattern     Operand                         Bytes read
    -------     -------                         ----------
    n           8-bit immediate                 1
    nn          16-bit immediate                2
    (nn)        memory reference (target)       2
    addr        jump/call address (target)      2
    rel         relative displacement (target)  1
    (n)         I/O port                        1
    cc:NZ       condition code                  0
    A, BC, ...  register / register pair        0
    (HL), (C)   register indirect               0
    anything    literal text (IM modes, bits)   0

Example:
    op(0xC2, "JP", "cc:NZ, addr")   # C2 lo hi -> JP NZ, hi lo h

Tables (OpcodeTable) are fixed 256-slot lists indexed by opcode byte. An
empty slot holds None, the explicit "not implemented" case, so the driver
can tell an unknown opcode from a decode failure.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Sequence

from ..formatters import ascii_comment
from ..instruction import Instruction, Operand, OperandKind
from ..relative import calculate_relative_target


# =============================================================================
# Operand Patterns
# =============================================================================

REGISTERS = frozenset({"A", "B", "C", "D", "E", "H", "L", "I", "R", "F"})
REGISTER_PAIRS = frozenset({"AF", "AF'", "BC", "DE", "HL", "SP", "IX", "IY"})
INDIRECT_REGISTERS = frozenset({"(HL)", "(BC)", "(DE)", "(SP)", "(C)", "(IX)", "(IY)"})


@dataclass(frozen=True)
class OperandPattern:
    """
    Parsed form of one operand pattern token.

    Attributes:
        kind: Operand kind produced when decoding
        text: Fixed text for named operands
        size: Number of operand bytes consumed from the instruction stream
        relative: True for relative displacements
    """
    kind: OperandKind
    text: str = ""
    size: int = 0
    relative: bool = False


def parse_operand(token: str) -> OperandPattern:
    """Parse a single operand pattern token (see module docstring)."""
    if token == "n":
        return OperandPattern(OperandKind.IMMEDIATE8, size=1)
    if token == "nn":
        return OperandPattern(OperandKind.IMMEDIATE16, size=2)
    if token == "(nn)":
        return OperandPattern(OperandKind.MEMORY, size=2)
    if token == "addr":
        return OperandPattern(OperandKind.ADDRESS, size=2)
    if token == "rel":
        return OperandPattern(OperandKind.ADDRESS, size=1, relative=True)
    if token == "(n)":
        return OperandPattern(OperandKind.PORT, size=1)
    if token.startswith("cc:"):
        return OperandPattern(OperandKind.CONDITION, token[3:])
    if token in REGISTERS:
        return OperandPattern(OperandKind.REGISTER, token)
    if token in REGISTER_PAIRS:
        return OperandPattern(OperandKind.REGISTER_PAIR, token)
    if token in INDIRECT_REGISTERS:
        return OperandPattern(OperandKind.INDIRECT, token)
    return OperandPattern(OperandKind.LITERAL, token)


def parse_operands(text: str) -> tuple[OperandPattern, ...]:
    """Parse a comma-separated operand pattern ("BC, nn")."""
    if not text.strip():
        return ()
    return tuple(parse_operand(token.strip()) for token in text.split(","))


# =============================================================================
# Opcode Rows
# =============================================================================

@dataclass(frozen=True)
class OpcodeSpec:
    """
    Declarative description of one instruction encoding.

    Attributes:
        opcode: Opcode byte (the byte after the prefix for prefixed rows)
        mnemonic: Instruction mnemonic
        operands: Parsed operand patterns
        comment: Fixed explanatory comment
        prefix: Prefix byte (0xCB, 0xED) or None for unprefixed rows
        supports_z80: Legal on the Z80
        supports_8080: Legal on the Intel 8080
        supports_8085: Legal on the Intel 8085
        is_io: Port I/O instruction
        restart_vector: Fixed call target of RST instructions
    """
    opcode: int
    mnemonic: str
    operands: tuple[OperandPattern, ...] = ()
    comment: Optional[str] = None
    prefix: Optional[int] = None
    supports_z80: bool = True
    supports_8080: bool = True
    supports_8085: bool = True
    is_io: bool = False
    restart_vector: Optional[int] = None

    @property
    def opcode_bytes(self) -> bytes:
        if self.prefix is None:
            return bytes([self.opcode])
        return bytes([self.prefix, self.opcode])

    @property
    def size(self) -> int:
        """Total encoded size including prefix and operand bytes."""
        return len(self.opcode_bytes) + sum(p.size for p in self.operands)

    @property
    def is_common(self) -> bool:
        """Legal on both Intel CPUs."""
        return self.supports_8080 and self.supports_8085

    def decode(self, buffer: Sequence[int], offset: int) -> Optional[Instruction]:
        """
        Decode this encoding from buffer at offset.

        Args:
            buffer: The full input image
            offset: Position of the first opcode byte

        Returns:
            The decoded Instruction, or None if the buffer ends before the
            instruction does. Target addresses of relative branches are
            returned relative to the start of the buffer.
        """
        size = self.size
        if offset + size > len(buffer):
            return None

        raw = bytes(buffer[offset:offset + size])
        pos = len(self.opcode_bytes)
        operands = []
        target = self.restart_vector
        relative = False
        ascii_note = None

        for pattern in self.operands:
            if pattern.kind == OperandKind.IMMEDIATE8:
                value = raw[pos]
                operands.append(Operand.imm8(value))
                ascii_note = ascii_comment(value)
            elif pattern.kind == OperandKind.IMMEDIATE16:
                operands.append(Operand.imm16(raw[pos] | (raw[pos + 1] << 8)))
            elif pattern.kind == OperandKind.PORT:
                operands.append(Operand.port(raw[pos]))
            elif pattern.kind in (OperandKind.ADDRESS, OperandKind.MEMORY):
                if pattern.relative:
                    target = calculate_relative_target(offset, raw[pos])
                    relative = True
                else:
                    # Little-endian: low byte first
                    target = raw[pos] | (raw[pos + 1] << 8)
                operands.append(Operand(pattern.kind))
            else:
                operands.append(Operand(pattern.kind, pattern.text))
            pos += pattern.size

        instruction = Instruction(
            mnemonic=self.mnemonic,
            operand_list=tuple(operands),
            raw_bytes=raw,
            comment=self.comment,
            target_address=target,
            target_relative=relative,
            is_io_operation=self.is_io,
            supports_z80=self.supports_z80,
            supports_8080=self.supports_8080,
            supports_8085=self.supports_8085,
        )
        if ascii_note:
            instruction = instruction.with_comment(ascii_note)
        return instruction


def op(
    opcode: int,
    mnemonic: str,
    operands: str = "",
    comment: Optional[str] = None,
    **flags,
) -> OpcodeSpec:
    """
    Create an OpcodeSpec from compact notation.

    Args:
        opcode: Opcode byte
        mnemonic: Instruction mnemonic
        operands: Operand pattern string (see module docstring)
        comment: Fixed comment
        **flags: Remaining OpcodeSpec fields (prefix, supports_8080, ...)
    """
    return OpcodeSpec(
        opcode=opcode,
        mnemonic=mnemonic,
        operands=parse_operands(operands),
        comment=comment,
        **flags,
    )


# =============================================================================
# Opcode Tables
# =============================================================================

class OpcodeTable:
    """
    A 256-slot dispatch table indexed by opcode byte.

    Tables are composed from layers: later layers override earlier ones
    slot by slot. Empty slots hold None.

    Attributes:
        name: Display name ("Z80", "Intel 8080", "ED prefix", ...)
    """

    def __init__(self, name: str, layers: Iterable[Iterable[OpcodeSpec]]):
        self.name = name
        self._slots: list[Optional[OpcodeSpec]] = [None] * 256
        for layer in layers:
            for spec in layer:
                self._slots[spec.opcode] = spec

    def lookup(self, opcode: int) -> Optional[OpcodeSpec]:
        """Return the row for an opcode byte, or None if not implemented."""
        return self._slots[opcode & 0xFF]

    def decode(self, buffer: Sequence[int], offset: int) -> Optional[Instruction]:
        """
        Decode the instruction at offset using the byte at the key position.

        For unprefixed tables the key is buffer[offset]; for prefixed tables
        the key is the byte after the prefix. Returns None when the slot is
        empty or the instruction is truncated.
        """
        spec = self.lookup(buffer[offset])
        if spec is None:
            return None
        return spec.decode(buffer, offset)

    def __contains__(self, opcode: int) -> bool:
        return self._slots[opcode & 0xFF] is not None

    def __iter__(self) -> Iterator[OpcodeSpec]:
        return (spec for spec in self._slots if spec is not None)

    def __len__(self) -> int:
        return sum(1 for spec in self._slots if spec is not None)

    def __repr__(self) -> str:
        return f"OpcodeTable({self.name!r}, {len(self)} opcodes)"
