"""
Relative Branch Targets
=======================

Converts the signed displacement of a relative branch (JR, DJNZ) into a
target address.

Every relative branch in the supported instruction sets is exactly two
bytes long (opcode + displacement), and the displacement is measured from
the address of the following instruction:

    target = (location + 2 + displacement) mod 65536

    18 FE at 0000h  ->  0000h + 2 + (-2) = 0000h  (JR to itself)
    18 10 at 8000h  ->  8000h + 2 + 16   = 8012h
"""

from .cpu import ADDRESS_MASK

# Size of every relative branch encoding (opcode + displacement byte)
RELATIVE_INSTRUCTION_SIZE = 2


def signed_byte(value: int) -> int:
    """Interpret a byte as two's complement (-128..127)."""
    value &= 0xFF
    return value - 0x100 if value >= 0x80 else value


def calculate_relative_target(current_offset: int, displacement: int) -> int:
    """
    Compute the target of a relative branch.

    Args:
        current_offset: Location of the branch opcode
        displacement: Raw displacement byte (0-255)

    Returns:
        Target location, wrapped to 16 bits
    """
    return (current_offset + RELATIVE_INSTRUCTION_SIZE + signed_byte(displacement)) & ADDRESS_MASK
