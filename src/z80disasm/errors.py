"""
z80disasm Error Hierarchy
=========================

This module defines the exception hierarchy for the z80disasm package.
All exceptions inherit from DisassemblerError, allowing callers to catch
all package errors with a single except clause if desired.

Exception Hierarchy
-------------------
DisassemblerError (base)
├── OriginRangeError - origin outside the 16-bit address space
├── ArchitectureError - unknown target architecture name
└── IntelHexError (Intel-HEX codec)
    ├── IntelHexFormatError - malformed record text or layout
    └── IntelHexChecksumError - record checksum mismatch

Design Philosophy
-----------------
Decoding itself never raises: unknown opcodes, truncated instructions and
cross-architecture problems all degrade to annotated output. Exceptions are
reserved for caller precondition violations (bad origin, bad architecture
name) detected before decoding starts, and for the Intel-HEX codec, which
parses untrusted text.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class DisassemblerError(Exception):
    """
    Base exception for all z80disasm errors.

    All exceptions in the package inherit from this class, allowing callers
    to catch every package-related error with a single except clause:

        try:
            entries = disassemble(data, origin=origin)
        except DisassemblerError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Caller Precondition Errors
# =============================================================================

class OriginRangeError(DisassemblerError):
    """
    Origin address outside the 16-bit address space.

    The origin is the address assigned to the first byte of the input
    buffer. All three supported CPUs have a 16-bit address bus, so the
    origin must lie in 0x0000-0xFFFF.
    """

    def __init__(self, origin: int, message: str = ""):
        self.origin = origin
        if not message:
            message = f"origin {origin} is outside the address space (0x0000-0xFFFF)"
        super().__init__(message)


class ArchitectureError(DisassemblerError):
    """
    Unknown target architecture.

    Raised when an architecture is given by a name that does not match
    any supported CPU. The valid names are included in the message.
    """

    def __init__(self, name: str, valid_names: Optional[list[str]] = None):
        self.name = name
        self.valid_names = valid_names or []

        message = f"unknown architecture '{name}'"
        if self.valid_names:
            message += f" (expected one of: {', '.join(self.valid_names)})"
        super().__init__(message)


# =============================================================================
# Intel-HEX Exceptions
# =============================================================================

class IntelHexError(DisassemblerError):
    """Base exception for Intel-HEX encoding and decoding errors."""
    pass


class IntelHexFormatError(IntelHexError):
    """
    Malformed Intel-HEX input.

    Raised when decoding text that:
    - Has a record not starting with ':'
    - Contains non-hexadecimal characters
    - Declares a length that doesn't match the record
    - Describes non-contiguous data
    - Uses a record type the decoder does not understand
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class IntelHexChecksumError(IntelHexFormatError):
    """
    Record checksum verification failed.

    The checksum byte of every record is the two's complement of the sum of
    all preceding bytes in the record, so the sum of all bytes including the
    checksum must be zero modulo 256.
    """

    def __init__(self, expected: int, actual: int, line_number: Optional[int] = None):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"checksum mismatch: expected {expected:02X}, got {actual:02X}",
            line_number=line_number,
        )
