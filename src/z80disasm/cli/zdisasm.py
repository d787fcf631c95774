"""
zdisasm - Z80 / 8080 / 8085 Disassembler Command-Line Interface
===============================================================

This module implements the command-line interface for the disassembler.
Input can be a raw binary or an Intel HEX file.

Usage Examples
--------------
Disassemble a binary:
    $ zdisasm program.bin

With an origin address:
    $ zdisasm program.bin --origin 0x8000

Target the Intel 8085:
    $ zdisasm program.bin --cpu 8085

Assembler source instead of a listing:
    $ zdisasm program.bin --format assembly -o program.asm

Intel HEX input (the load address becomes the default origin):
    $ zdisasm program.hex

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from z80disasm import __version__
from z80disasm.cli.errors import ExitCode, handle_cli_exception
from z80disasm.cpu import parse_architecture, validate_origin
from z80disasm.disassembler import Disassembler
from z80disasm.errors import IntelHexFormatError
from z80disasm.formatters import format_address
from z80disasm.intelhex import decode_intel_hex
from z80disasm.listing import render_assembly, render_json, render_listing

# File extensions treated as Intel HEX without --intel-hex-input
INTEL_HEX_SUFFIXES = {".hex", ".ihx"}


def parse_address(text: str) -> int:
    """
    Parse an address given as 0x1234, $1234, 1234h or decimal.

    Raises:
        click.BadParameter: If the text is not a number in 0x0000-0xFFFF
    """
    value = text.strip()
    try:
        if value.lower().startswith("0x"):
            address = int(value, 16)
        elif value.startswith("$"):
            address = int(value[1:], 16)
        elif value.lower().endswith("h"):
            address = int(value[:-1], 16)
        else:
            address = int(value)
    except ValueError:
        raise click.BadParameter(f"invalid address '{text}'") from None

    if not 0 <= address <= 0xFFFF:
        raise click.BadParameter("address must be 0-65535 (0x0000-0xFFFF)")
    return address


def read_input(input_file: Path, intel_hex: bool) -> tuple[bytes, Optional[int]]:
    """
    Read the input image.

    Returns:
        Tuple of (data, load address); the load address is None for raw
        binaries
    """
    if intel_hex or input_file.suffix.lower() in INTEL_HEX_SUFFIXES:
        try:
            text = input_file.read_text(encoding="ascii")
        except UnicodeDecodeError:
            raise IntelHexFormatError(f"{input_file.name} is not Intel HEX text") from None
        base_address, data = decode_intel_hex(text)
        return data, base_address
    return input_file.read_bytes(), None


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--origin",
    type=str,
    default=None,
    help="Address of the first byte (0x8000, $8000, 8000h or decimal). "
         "Default: 0, or the load address of Intel HEX input",
)
@click.option(
    "-c", "--cpu",
    type=click.Choice(["z80", "8080", "8085"], case_sensitive=False),
    default="z80",
    show_default=True,
    help="Target CPU",
)
@click.option(
    "-f", "--format", "output_format",
    type=click.Choice(["listing", "assembly", "json"], case_sensitive=False),
    default="listing",
    show_default=True,
    help="Output format",
)
@click.option(
    "--intel-hex-input",
    is_flag=True,
    help="Treat the input as Intel HEX regardless of its extension",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="zdisasm")
def main(
    input_file: Path,
    output: Optional[Path],
    origin: Optional[str],
    cpu: str,
    output_format: str,
    intel_hex_input: bool,
    verbose: bool,
) -> None:
    """
    Disassemble Z80, Intel 8080 or Intel 8085 machine code.

    INPUT_FILE is a raw binary, or an Intel HEX file (.hex, .ihx).

    Examples:

        # Disassemble a ROM image at address 0
        zdisasm rom.bin

        # CP/M program for the 8080, assembler output
        zdisasm prog.com --origin 0x100 --cpu 8080 -f assembly
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s")

    try:
        architecture = parse_architecture(cpu)
        data, load_address = read_input(input_file, intel_hex_input)

        if origin is not None:
            base_address = parse_address(origin)
        else:
            base_address = load_address or 0
        validate_origin(base_address)

        if len(data) == 0:
            click.echo(f"Error: {input_file} is empty", err=True)
            sys.exit(ExitCode.BUILD_ERROR)

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            click.echo(f"Origin: {format_address(base_address)}", err=True)
            click.echo(f"CPU: {architecture}", err=True)

        entries = Disassembler(architecture, base_address).disassemble(data)

        if output_format == "json":
            result = render_json(
                entries,
                file=input_file.name,
                size=len(data),
                origin=format_address(base_address),
                architecture=str(architecture),
            ) + "\n"
        else:
            header = [
                f"; Disassembly of {input_file.name}",
                f"; Size: {len(data)} bytes",
                f"; Origin: {format_address(base_address)}",
                f"; CPU: {architecture}",
                "",
            ]
            if output_format == "assembly":
                body = render_assembly(entries, base_address)
            else:
                body = render_listing(entries)
            result = "\n".join(header) + "\n" + body + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Instructions disassembled: {len(entries)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
