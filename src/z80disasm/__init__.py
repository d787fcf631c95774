"""
z80disasm - Z80 / Intel 8080 / Intel 8085 Disassembler
======================================================

This package decodes machine code for the Zilog Z80 and the Intel 8080 and
8085 into annotated assembly language.

Main Components
---------------
- **disassembler**: the decode driver (disassemble, Disassembler)
- **opcodes**: declarative per-architecture opcode tables
- **prefixes**: Z80 CB/ED prefix decoding (DD/FD are not decoded)
- **labels**: R_/J_/S_/L_ label generation and substitution
- **translator**: Z80 to Intel mnemonic translation
- **listing**: listing, assembly and JSON renderers
- **intelhex**: Intel HEX encoder and decoder

Quick Start
-----------
Disassemble a buffer:
    >>> from z80disasm import disassemble, render_listing
    >>> print(render_listing(disassemble(b"\\x18\\xFE")))
    R_0000:  ; referenced from: 0000h
    0000  18 FE        JR R_0000            ; Relative jump

Target an Intel CPU:
    >>> entries = disassemble(data, origin=0x100, architecture="8085")

Convert a binary to Intel HEX:
    >>> from z80disasm import encode_intel_hex
    >>> text = encode_intel_hex(data, base_address=0x8000)

Or use the command-line tools:
    $ zdisasm program.bin --origin 0x8000
    $ zdisasm program.hex --cpu 8080 --format assembly
    $ zhex program.bin --address 0x8000 -o program.hex

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from z80disasm.cpu import Architecture, parse_architecture
from z80disasm.disassembler import Disassembler, disassemble, disassemble_one
from z80disasm.errors import (
    ArchitectureError,
    DisassemblerError,
    IntelHexChecksumError,
    IntelHexError,
    IntelHexFormatError,
    OriginRangeError,
)
from z80disasm.instruction import DecodedEntry, Instruction, LabelInfo, Operand, OperandKind
from z80disasm.intelhex import decode_intel_hex, encode_intel_hex
from z80disasm.listing import entry_to_dict, render_assembly, render_json, render_listing

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Core
    "Architecture",
    "parse_architecture",
    "Disassembler",
    "disassemble",
    "disassemble_one",
    # Data model
    "DecodedEntry",
    "Instruction",
    "LabelInfo",
    "Operand",
    "OperandKind",
    # Rendering
    "render_listing",
    "render_assembly",
    "render_json",
    "entry_to_dict",
    # Intel HEX
    "encode_intel_hex",
    "decode_intel_hex",
    # Exceptions
    "DisassemblerError",
    "OriginRangeError",
    "ArchitectureError",
    "IntelHexError",
    "IntelHexFormatError",
    "IntelHexChecksumError",
]
