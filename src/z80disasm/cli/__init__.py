"""
z80disasm Command-Line Interface
================================

This package provides the command-line tools:

- **zdisasm**: Z80 / 8080 / 8085 disassembler
- **zhex**: binary to Intel HEX converter

Each tool is a Click-based CLI application sharing the error handling in
cli.errors.
"""

__all__ = ["zdisasm", "zhex"]
