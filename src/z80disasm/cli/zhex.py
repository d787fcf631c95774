"""
zhex - Binary to Intel HEX Converter
====================================

Converts a raw binary image to Intel HEX text, 16 data bytes per record.

Usage Examples
--------------
Convert to stdout:
    $ zhex program.bin

Load address and output file:
    $ zhex program.bin --address 0x8000 -o program.hex

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import sys
from pathlib import Path
from typing import Optional

import click

from z80disasm import __version__
from z80disasm.cli.errors import ExitCode, handle_cli_exception
from z80disasm.cli.zdisasm import parse_address
from z80disasm.formatters import format_address
from z80disasm.intelhex import encode_intel_hex


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
    "-a", "--address",
    type=str,
    default="0",
    help="Load address of the first byte (0x8000, $8000, 8000h or decimal). Default: 0",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="zhex")
def main(
    input_file: Path,
    output: Optional[Path],
    address: str,
    verbose: bool,
) -> None:
    """
    Convert a binary file to Intel HEX.

    INPUT_FILE is the raw binary to convert.
    """
    try:
        base_address = parse_address(address)
        data = input_file.read_bytes()

        if len(data) == 0:
            click.echo(f"Error: {input_file} is empty", err=True)
            sys.exit(ExitCode.BUILD_ERROR)

        result = encode_intel_hex(data, base_address) + "\n"

        if output:
            output.write_text(result, encoding="ascii")
            if verbose:
                click.echo(
                    f"Wrote {len(data)} bytes at {format_address(base_address)} to {output}",
                    err=True,
                )
        else:
            click.echo(result, nl=False)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Intel HEX")


if __name__ == "__main__":
    main()
