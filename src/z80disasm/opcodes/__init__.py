"""
Opcode Tables
=============

Per-architecture dispatch tables built from declarative rows.

    >>> from z80disasm.opcodes import get_opcode_table
    >>> table = get_opcode_table(Architecture.Z80)
    >>> table.lookup(0x00).mnemonic
    'NOP'

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from functools import lru_cache

from ..cpu import Architecture
from .base import OpcodeSpec, OpcodeTable, OperandPattern, op, parse_operand, parse_operands
from .intel import COMMON_LAYER, INTEL_8080_LAYER, INTEL_8085_LAYER
from .z80 import PREFIX_BYTES, UNPREFIXED_ROWS


@lru_cache(maxsize=None)
def get_opcode_table(architecture: Architecture) -> OpcodeTable:
    """
    Return the unprefixed opcode table for an architecture.

    Tables are built once and shared; they are never mutated after
    construction.
    """
    if architecture == Architecture.Z80:
        return OpcodeTable(str(architecture), [UNPREFIXED_ROWS])
    if architecture == Architecture.INTEL_8080:
        return OpcodeTable(str(architecture), [COMMON_LAYER, INTEL_8080_LAYER])
    return OpcodeTable(str(architecture), [COMMON_LAYER, INTEL_8085_LAYER])


__all__ = [
    "OpcodeSpec",
    "OpcodeTable",
    "OperandPattern",
    "op",
    "parse_operand",
    "parse_operands",
    "get_opcode_table",
    "PREFIX_BYTES",
    "UNPREFIXED_ROWS",
]
