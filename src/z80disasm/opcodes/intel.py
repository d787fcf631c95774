"""
Intel 8080 / 8085 Opcode Tables
===============================

The Intel tables are composed from two layers, applied in order:

1. **Common layer** - every Z80 row legal on both Intel CPUs.
2. **Architecture layer** - encodings unique to one CPU, filling the
   slots the common layer leaves empty.

Common rows are written in Z80 syntax and converted to Intel mnemonics by
the translator after label resolution. Architecture rows with no Z80
counterpart are written in Intel syntax directly.

On the 8080 the unused opcode slots are undocumented aliases:

    08 10 18 20 28 30 38    NOP
    CB                      JMP a16
    D9                      RET
    DD ED FD                CALL a16

On the 8085 the same slots hold RIM, SIM and the undocumented 8085
instructions:

    08 DSUB     10 ARHL     18 RDEL     20 RIM      28 LDHI d8
    30 SIM      38 LDSI d8  CB RSTV     D9 SHLX     DD JNK a16
    ED LHLX     FD JK a16

Both tables fill all 256 slots, so Z80-only rows (JR, DJNZ, EXX,
EX AF,AF') never come out of an Intel table.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from .base import OpcodeSpec, op
from .z80 import UNPREFIXED_ROWS


INTEL_8080_ONLY = dict(supports_z80=False, supports_8080=True, supports_8085=False)
INTEL_8085_ONLY = dict(supports_z80=False, supports_8080=False, supports_8085=True)

# RSTV calls this vector when the overflow flag is set
RSTV_VECTOR = 0x0040


# =============================================================================
# Shared Layer
# =============================================================================

COMMON_LAYER: list[OpcodeSpec] = [spec for spec in UNPREFIXED_ROWS if spec.is_common]


# =============================================================================
# Architecture Layers
# =============================================================================

INTEL_8080_LAYER: list[OpcodeSpec] = [
    *(op(code, "NOP", comment="Undocumented NOP", **INTEL_8080_ONLY)
      for code in (0x08, 0x10, 0x18, 0x20, 0x28, 0x30, 0x38)),
    op(0xCB, "JP", "addr", "Undocumented JMP", **INTEL_8080_ONLY),
    op(0xD9, "RET", comment="Undocumented RET", **INTEL_8080_ONLY),
    *(op(code, "CALL", "addr", "Undocumented CALL", **INTEL_8080_ONLY)
      for code in (0xDD, 0xED, 0xFD)),
]

INTEL_8085_LAYER: list[OpcodeSpec] = [
    op(0x08, "DSUB", comment="Undocumented: HL = HL - BC", **INTEL_8085_ONLY),
    op(0x10, "ARHL", comment="Undocumented: arithmetic shift right HL", **INTEL_8085_ONLY),
    op(0x18, "RDEL", comment="Undocumented: rotate DE left through carry", **INTEL_8085_ONLY),
    op(0x20, "RIM", comment="Read interrupt mask", **INTEL_8085_ONLY),
    op(0x28, "LDHI", "n", "Undocumented: DE = HL + n", **INTEL_8085_ONLY),
    op(0x30, "SIM", comment="Set interrupt mask", **INTEL_8085_ONLY),
    op(0x38, "LDSI", "n", "Undocumented: DE = SP + n", **INTEL_8085_ONLY),
    op(0xCB, "RSTV", comment="Undocumented: restart at 0040h on overflow",
       restart_vector=RSTV_VECTOR, **INTEL_8085_ONLY),
    op(0xD9, "SHLX", comment="Undocumented: store HL at (DE)", **INTEL_8085_ONLY),
    op(0xDD, "JNK", "addr", "Undocumented: jump if not K", **INTEL_8085_ONLY),
    op(0xED, "LHLX", comment="Undocumented: load HL from (DE)", **INTEL_8085_ONLY),
    op(0xFD, "JK", "addr", "Undocumented: jump if K", **INTEL_8085_ONLY),
]
