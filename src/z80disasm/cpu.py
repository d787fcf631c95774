"""
CPU Architecture Definitions
============================

Shared definitions for the three instruction set architectures understood
by the disassembler.

- **Z80** (primary): the Zilog Z80. A superset of the 8080 instruction set
  with relative jumps, an alternate register bank and four opcode prefixes
  (CB, DD, ED, FD).
- **Intel 8080** (alternate): the plainer of the two Intel CPUs.
- **Intel 8085** (alternate): the 8080 plus RIM, SIM and the undocumented
  DSUB, ARHL, RDEL, LDHI, LDSI, RSTV, SHLX, JNK, LHLX and JK.

All three CPUs have a 16-bit address bus; address arithmetic wraps modulo
65536.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from enum import Enum
from typing import Union

from .errors import ArchitectureError, OriginRangeError


# =============================================================================
# Address Space
# =============================================================================

ADDRESS_MIN = 0x0000
ADDRESS_MAX = 0xFFFF
ADDRESS_MASK = 0xFFFF


# =============================================================================
# Architecture Enumeration
# =============================================================================

class Architecture(Enum):
    """
    Target instruction set architectures.

    The enum value is the display name used in listings and warnings.
    """
    Z80 = "Z80"
    INTEL_8080 = "Intel 8080"
    INTEL_8085 = "Intel 8085"

    def __str__(self) -> str:
        return self.value

    @property
    def is_primary(self) -> bool:
        """True for the Z80, the only architecture with opcode prefixes."""
        return self is Architecture.Z80

    @property
    def is_alternate(self) -> bool:
        """True for the Intel CPUs."""
        return self is not Architecture.Z80


# Accepted spellings for each architecture (case-insensitive)
_ARCHITECTURE_ALIASES = {
    "z80": Architecture.Z80,
    "zilog z80": Architecture.Z80,
    "8080": Architecture.INTEL_8080,
    "i8080": Architecture.INTEL_8080,
    "intel 8080": Architecture.INTEL_8080,
    "intel8080": Architecture.INTEL_8080,
    "8085": Architecture.INTEL_8085,
    "i8085": Architecture.INTEL_8085,
    "intel 8085": Architecture.INTEL_8085,
    "intel8085": Architecture.INTEL_8085,
}


def parse_architecture(value: Union[Architecture, str]) -> Architecture:
    """
    Resolve an architecture given as an enum member or a name.

    Args:
        value: Architecture member, or a name such as "z80", "8080",
               "Intel 8085" (case-insensitive)

    Returns:
        The matching Architecture

    Raises:
        ArchitectureError: If the name is not recognized
    """
    if isinstance(value, Architecture):
        return value

    arch = _ARCHITECTURE_ALIASES.get(str(value).strip().lower())
    if arch is None:
        raise ArchitectureError(str(value), valid_names=["z80", "8080", "8085"])
    return arch


def validate_origin(origin: int) -> int:
    """
    Check that an origin address fits the 16-bit address space.

    Raises:
        OriginRangeError: If origin is not an integer in 0x0000-0xFFFF
    """
    if isinstance(origin, bool) or not isinstance(origin, int):
        raise OriginRangeError(origin, f"origin must be an integer address, got {origin!r}")
    if not ADDRESS_MIN <= origin <= ADDRESS_MAX:
        raise OriginRangeError(origin)
    return origin
