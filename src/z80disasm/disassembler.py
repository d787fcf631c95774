"""
Disassembly Driver
==================

Turns a binary image into an ordered list of DecodedEntry records.

The driver walks the input with a single forward cursor. At each position
it decodes one instruction from the opcode table of the target
architecture (or, on the Z80, through the prefix resolver), post-processes
it and advances by the instruction size. Every step consumes at least one
byte, so decoding always terminates and the entries cover every input
byte exactly once.

Bytes that cannot be decoded become one-byte DB pseudo-instructions with
an explanatory comment; content never raises.

After the decode pass:

1. labels are resolved over the complete entry list, and
2. for Intel targets, every entry is translated to Intel syntax.

Usage:
    entries = disassemble(b"\\x18\\xFE", origin=0x8000)
    for entry in entries:
        print(entry.address, entry.instruction.text)

    disasm = Disassembler("8085", origin=0x100)
    print(disasm.disassemble_to_text(data))

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
from typing import Optional, Sequence, Union

from .cpu import Architecture, parse_architecture, validate_origin
from .formatters import format_address, format_byte
from .instruction import DecodedEntry, Instruction, Operand
from .labels import resolve_labels
from .listing import render_listing
from .opcodes import get_opcode_table
from .postprocess import process_instruction
from .prefixes import is_prefix, resolve_prefixed
from .translator import translate_to_intel

logger = logging.getLogger(__name__)


UNKNOWN_OPCODE_COMMENT = "Unknown opcode - NOT SUPPORTED"
INCOMPLETE_INSTRUCTION_COMMENT = "Incomplete instruction - NOT SUPPORTED"


def unknown_byte(value: int, comment: str = UNKNOWN_OPCODE_COMMENT) -> Instruction:
    """One-byte DB pseudo-instruction, unsupported on every architecture."""
    return Instruction(
        mnemonic="DB",
        operand_list=(Operand.imm8(value),),
        raw_bytes=bytes([value]),
        comment=comment,
        supports_z80=False,
        supports_8080=False,
        supports_8085=False,
    )


# =============================================================================
# Disassembler
# =============================================================================

class Disassembler:
    """
    Disassembler for Z80, Intel 8080 and Intel 8085 machine code.

    Attributes:
        architecture: Target architecture
        origin: Address of the first byte of the input
    """

    def __init__(
        self,
        architecture: Union[Architecture, str] = Architecture.Z80,
        origin: int = 0,
    ):
        """
        Initialize the disassembler.

        Args:
            architecture: Architecture member or name ("z80", "8080", "8085")
            origin: Address of the first input byte (0x0000-0xFFFF)

        Raises:
            ArchitectureError: If the architecture name is unknown
            OriginRangeError: If origin does not fit in 16 bits
        """
        self.architecture = parse_architecture(architecture)
        self.origin = validate_origin(origin)
        self._table = get_opcode_table(self.architecture)

    def decode_one(self, buffer: Sequence[int], offset: int) -> Instruction:
        """
        Decode the instruction at offset, before post-processing.

        Always returns an instruction of at least one byte; undecodable
        input yields a DB pseudo-instruction.
        """
        opcode = buffer[offset]

        if self.architecture.is_primary and is_prefix(opcode):
            instruction = resolve_prefixed(buffer, offset)
            if instruction is not None:
                return instruction
            if offset + 1 >= len(buffer):
                return unknown_byte(opcode)
            return unknown_byte(opcode, INCOMPLETE_INSTRUCTION_COMMENT)

        spec = self._table.lookup(opcode)
        if spec is None:
            logger.debug(f"Unknown opcode {format_byte(opcode)} at offset {offset}")
            return unknown_byte(opcode)

        instruction = spec.decode(buffer, offset)
        if instruction is None:
            logger.debug(f"Truncated {spec.mnemonic} at offset {offset}")
            return unknown_byte(opcode, INCOMPLETE_INSTRUCTION_COMMENT)
        return instruction

    def disassemble(self, binary: Sequence[int]) -> list[DecodedEntry]:
        """
        Disassemble a complete binary image.

        Args:
            binary: Machine code bytes

        Returns:
            Decoded entries in address order, labels resolved and, for Intel
            targets, translated to Intel syntax
        """
        buffer = bytes(binary)
        logger.debug(
            f"Disassembling {len(buffer)} bytes for {self.architecture} "
            f"at origin {format_address(self.origin)}"
        )

        entries = []
        offset = 0
        while offset < len(buffer):
            instruction = self.decode_one(buffer, offset)
            address, instruction = process_instruction(
                instruction, offset, self.origin, self.architecture
            )
            entries.append(DecodedEntry(address, instruction))
            offset += instruction.size

        entries = resolve_labels(entries, self.origin, len(buffer))

        if self.architecture.is_alternate:
            entries = [
                DecodedEntry(e.address, translate_to_intel(e.instruction), e.label_info)
                for e in entries
            ]

        logger.debug(f"Decoded {len(entries)} entries")
        return entries

    def disassemble_to_text(self, binary: Sequence[int]) -> str:
        """Disassemble and return a formatted listing."""
        return render_listing(self.disassemble(binary))


def disassemble(
    binary: Sequence[int],
    origin: int = 0,
    architecture: Union[Architecture, str] = Architecture.Z80,
) -> list[DecodedEntry]:
    """
    Disassemble a binary image.

    Args:
        binary: Machine code bytes
        origin: Address of the first byte (0x0000-0xFFFF)
        architecture: Target architecture (member or name)

    Returns:
        Ordered list of DecodedEntry

    Raises:
        OriginRangeError: If origin does not fit in 16 bits
        ArchitectureError: If the architecture name is unknown
    """
    return Disassembler(architecture, origin).disassemble(binary)


def disassemble_one(
    binary: Sequence[int],
    offset: int = 0,
    architecture: Union[Architecture, str] = Architecture.Z80,
    origin: int = 0,
) -> Optional[DecodedEntry]:
    """
    Decode a single instruction at offset, without label resolution.

    Returns None if offset is past the end of binary.
    """
    buffer = bytes(binary)
    if offset >= len(buffer):
        return None
    disasm = Disassembler(architecture, origin)
    address, instruction = process_instruction(
        disasm.decode_one(buffer, offset), offset, disasm.origin, disasm.architecture
    )
    if disasm.architecture.is_alternate:
        instruction = translate_to_intel(instruction)
    return DecodedEntry(address, instruction)
