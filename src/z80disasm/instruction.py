"""
Instruction Model
=================

Data structures describing decoded instructions and disassembly entries.

An Instruction is immutable once produced by a decode step. Later passes
(address post-processing, label substitution, mnemonic translation) never
modify an instruction in place; they build a new one with
dataclasses.replace().

Operands are stored as a tuple of typed fragments (Operand) rather than a
single preformatted string. The fragments of kind ADDRESS and MEMORY are
the places where the instruction's target address appears, so a label can
be substituted exactly there without searching the operand text:

    JP NZ, 1234h   ->  (CONDITION "NZ", ADDRESS)
    LD A, (8000h)  ->  (REGISTER "A", MEMORY)

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import Optional

from .cpu import Architecture
from .formatters import format_address, format_address_list, format_byte, format_word


# =============================================================================
# Operands
# =============================================================================

class OperandKind(Enum):
    """Kinds of operand fragment."""
    REGISTER = auto()       # A, B, I, R
    REGISTER_PAIR = auto()  # BC, HL, AF'
    INDIRECT = auto()       # (HL), (BC), (SP), (C)
    CONDITION = auto()      # NZ, Z, NC, C, PO, PE, P, M
    LITERAL = auto()        # anything rendered verbatim: IM modes, bit numbers
    IMMEDIATE8 = auto()     # 8-bit immediate data
    IMMEDIATE16 = auto()    # 16-bit immediate data
    PORT = auto()           # (n) I/O port
    ADDRESS = auto()        # jump/call target, renders the instruction target
    MEMORY = auto()         # (nn) memory reference, renders the target in parens


@dataclass(frozen=True)
class Operand:
    """
    One operand fragment of an instruction.

    Attributes:
        kind: What the fragment represents
        text: Name for registers, conditions and literals
        value: Numeric value for immediates and ports
    """
    kind: OperandKind
    text: str = ""
    value: Optional[int] = None

    @property
    def is_address(self) -> bool:
        """True for fragments that render the instruction's target address."""
        return self.kind in (OperandKind.ADDRESS, OperandKind.MEMORY)

    def render(self, address_text: str = "") -> str:
        """
        Format the fragment as assembly text.

        Args:
            address_text: Text to use for ADDRESS/MEMORY fragments
                          (a label or a formatted address)
        """
        if self.kind == OperandKind.IMMEDIATE8:
            return format_byte(self.value)
        if self.kind == OperandKind.IMMEDIATE16:
            return format_word(self.value)
        if self.kind == OperandKind.PORT:
            return f"({format_byte(self.value)})"
        if self.kind == OperandKind.ADDRESS:
            return address_text
        if self.kind == OperandKind.MEMORY:
            return f"({address_text})"
        return self.text

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def register(cls, name: str) -> "Operand":
        return cls(OperandKind.REGISTER, name)

    @classmethod
    def pair(cls, name: str) -> "Operand":
        return cls(OperandKind.REGISTER_PAIR, name)

    @classmethod
    def indirect(cls, name: str) -> "Operand":
        return cls(OperandKind.INDIRECT, name)

    @classmethod
    def condition(cls, name: str) -> "Operand":
        return cls(OperandKind.CONDITION, name)

    @classmethod
    def literal(cls, text: str) -> "Operand":
        return cls(OperandKind.LITERAL, text)

    @classmethod
    def imm8(cls, value: int) -> "Operand":
        return cls(OperandKind.IMMEDIATE8, value=value & 0xFF)

    @classmethod
    def imm16(cls, value: int) -> "Operand":
        return cls(OperandKind.IMMEDIATE16, value=value & 0xFFFF)

    @classmethod
    def port(cls, value: int) -> "Operand":
        return cls(OperandKind.PORT, value=value & 0xFF)

    @classmethod
    def address(cls) -> "Operand":
        return cls(OperandKind.ADDRESS)

    @classmethod
    def memory(cls) -> "Operand":
        return cls(OperandKind.MEMORY)


# =============================================================================
# Instruction
# =============================================================================

@dataclass(frozen=True)
class Instruction:
    """
    A single decoded instruction (or data pseudo-instruction).

    Attributes:
        mnemonic: Instruction mnemonic ("LD", "JP", "DB", ...)
        operand_list: Typed operand fragments, rendered by `operands`
        raw_bytes: The exact bytes consumed
        comment: Optional annotation; only ever appended to
        target_address: Control-flow or memory target, when representable
        target_relative: True while target_address is still relative to the
                         start of the input buffer (relative branches)
        target_label: Label substituted for the target, if any
        is_io_operation: True for port I/O instructions
        supports_z80: Legal on the Z80
        supports_8080: Legal on the Intel 8080
        supports_8085: Legal on the Intel 8085
        z80_mnemonic: Z80 mnemonic of a translated instruction; mnemonic
                      holds the Intel one
    """
    mnemonic: str
    operand_list: tuple[Operand, ...] = ()
    raw_bytes: bytes = b""
    comment: Optional[str] = None
    target_address: Optional[int] = None
    target_relative: bool = False
    target_label: Optional[str] = None
    is_io_operation: bool = False
    supports_z80: Optional[bool] = None
    supports_8080: Optional[bool] = None
    supports_8085: Optional[bool] = None
    z80_mnemonic: Optional[str] = None

    @property
    def size(self) -> int:
        """Instruction size in bytes (always the length of raw_bytes)."""
        return len(self.raw_bytes)

    @property
    def address_text(self) -> str:
        """The target as rendered in the operands: its label or 'xxxxh'."""
        if self.target_label is not None:
            return self.target_label
        return format_address(self.target_address or 0)

    @property
    def operands(self) -> str:
        """Formatted operand text, e.g. "NZ, 1234h" or "A, (R_8000)"."""
        address_text = self.address_text
        return ", ".join(op.render(address_text) for op in self.operand_list)

    @property
    def text(self) -> str:
        """Mnemonic and operands as one assembly statement."""
        operands = self.operands
        return f"{self.mnemonic} {operands}" if operands else self.mnemonic

    def supports(self, architecture: Architecture) -> Optional[bool]:
        """Return the legality flag for the given architecture."""
        if architecture == Architecture.INTEL_8080:
            return self.supports_8080
        if architecture == Architecture.INTEL_8085:
            return self.supports_8085
        return self.supports_z80

    def with_comment(self, text: str) -> "Instruction":
        """Return a copy with text appended to the comment."""
        if self.comment:
            return replace(self, comment=f"{self.comment} - {text}")
        return replace(self, comment=text)

    def __str__(self) -> str:
        return self.text


# =============================================================================
# Disassembly Entries
# =============================================================================

@dataclass(frozen=True)
class LabelInfo:
    """
    A label attached to an address that other instructions refer to.

    Attributes:
        label: Generated label text ("J_8000")
        referenced_from: Addresses of the referencing instructions,
                         in order of first discovery
    """
    label: str
    referenced_from: tuple[int, ...] = ()

    @property
    def referenced_from_text(self) -> str:
        """Comma-joined hex list of the referencing addresses."""
        return format_address_list(self.referenced_from)


@dataclass(frozen=True)
class DecodedEntry:
    """
    One line of disassembly output.

    Attributes:
        address: Absolute address of the instruction
        instruction: The decoded instruction
        label_info: Label defined at this address, if any
    """
    address: int
    instruction: Instruction
    label_info: Optional[LabelInfo] = None

    @property
    def label(self) -> Optional[str]:
        return self.label_info.label if self.label_info else None
