"""
Address and Compatibility Post-Processing
=========================================

Applied to every instruction right after it is decoded:

1. The entry address becomes origin + offset.
2. Relative branch targets, which are decoded relative to the start of the
   buffer, are shifted by the origin exactly once. Absolute targets
   (JP nn, CALL nn, LD (nn), RST vectors) are already absolute.
3. When decoding for an Intel CPU, instructions that the CPU cannot run
   get a warning appended to their comment.

The Intel tables only hold rows their CPU can run, so the warnings only
fire on instructions decoded from another table: a Z80 row processed for
an Intel target, or an 8085 row processed for the 8080.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import replace

from .cpu import ADDRESS_MASK, Architecture
from .instruction import Instruction

Z80_ONLY_WARNING = "WARNING: Z80 ONLY - NOT SUPPORTED"
INTEL_8085_ONLY_WARNING = "WARNING: 8085 ONLY - NOT SUPPORTED IN 8080"


def absolutize_target(instruction: Instruction, origin: int) -> Instruction:
    """Shift a buffer-relative target by origin; absolute targets are returned as is."""
    if not instruction.target_relative or instruction.target_address is None:
        return instruction
    return replace(
        instruction,
        target_address=(origin + instruction.target_address) & ADDRESS_MASK,
        target_relative=False,
    )


def compatibility_warnings(instruction: Instruction, architecture: Architecture) -> list[str]:
    """
    Return the warnings that apply to an instruction on the target CPU.

    Z80 targets never get warnings. DB pseudo-instructions are flagged
    unsupported everywhere and already say so in their comment.
    """
    if architecture.is_primary or instruction.mnemonic == "DB":
        return []

    warnings = []
    if not instruction.supports(architecture):
        if not instruction.supports_8080 and not instruction.supports_8085:
            warnings.append(Z80_ONLY_WARNING)
        elif architecture == Architecture.INTEL_8080 and instruction.supports_8085:
            warnings.append(INTEL_8085_ONLY_WARNING)
    return warnings


def process_instruction(
    instruction: Instruction,
    offset: int,
    origin: int,
    architecture: Architecture,
) -> tuple[int, Instruction]:
    """
    Post-process a freshly decoded instruction.

    Args:
        instruction: Instruction as returned by the opcode tables
        offset: Position of the instruction in the input buffer
        origin: Address of the first byte of the buffer
        architecture: Target architecture

    Returns:
        Tuple of (absolute address, processed instruction)
    """
    address = (origin + offset) & ADDRESS_MASK
    instruction = absolutize_target(instruction, origin)
    for warning in compatibility_warnings(instruction, architecture):
        instruction = instruction.with_comment(warning)
    return address, instruction
