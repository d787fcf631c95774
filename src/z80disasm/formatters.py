"""
Number Formatting Helpers
=========================

Formatting conventions shared by the opcode tables, the label resolver and
the renderers. Values use the Intel/Zilog assembler convention of
uppercase hexadecimal digits followed by an 'h' suffix.

    format_address(0x1234) -> "1234h"
    format_byte(0x0A)      -> "0Ah"
"""

from typing import Iterable, Optional


def format_hex(value: int, digits: int) -> str:
    """Format value as zero-padded uppercase hex without suffix."""
    return f"{value:0{digits}X}"


def format_byte(value: int) -> str:
    """Format an 8-bit value as 'xxh'."""
    return f"{value & 0xFF:02X}h"


def format_word(value: int) -> str:
    """Format a 16-bit value as 'xxxxh'."""
    return f"{value & 0xFFFF:04X}h"


# Addresses and 16-bit immediates share the same textual form
format_address = format_word


def ascii_comment(value: int) -> Optional[str]:
    """
    Describe a byte as a printable ASCII character, if it is one.

    Returns:
        "'c'" for bytes in 0x20-0x7E, otherwise None
    """
    if 0x20 <= value <= 0x7E:
        return f"'{chr(value)}'"
    return None


def bytes_to_hex_string(data: Iterable[int]) -> str:
    """Format bytes as space-separated two-digit hex ("3E 41")."""
    return " ".join(f"{b:02X}" for b in data)


def format_address_list(addresses: Iterable[int]) -> str:
    """Format addresses as a comma-joined list ("0000h, 0010h")."""
    return ", ".join(format_address(a) for a in addresses)
