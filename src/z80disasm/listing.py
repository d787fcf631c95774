"""
Disassembly Renderers
=====================

Formats decoded entries for display and export.

Listing format (address and hex columns):

    R_0000:  ; referenced from: 0000h
    0000  18 FE        JR R_0000            ; Relative jump

Assembly format (source that can be fed back to an assembler):

            ORG 0000h
    R_0000:
            JR R_0000            ; Relative jump

Labels that point into the middle of an instruction have no line of their
own in assembly format; they are defined with EQU after the ORG.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import json
from typing import Any, Iterable, Optional, Sequence

from .formatters import bytes_to_hex_string, format_address, format_byte
from .instruction import DecodedEntry

# Width of the hex byte column: four bytes, the longest instruction
HEX_COLUMN_WIDTH = 11
# Width of the instruction text column when a comment follows
TEXT_COLUMN_WIDTH = 20
INDENT = " " * 8


def _with_comment(text: str, comment: Optional[str]) -> str:
    if comment:
        return f"{text:<{TEXT_COLUMN_WIDTH}} ; {comment}"
    return text


def format_label_header(entry: DecodedEntry) -> Optional[str]:
    """Return "LABEL:  ; referenced from: ..." for a labelled entry."""
    if entry.label_info is None:
        return None
    return f"{entry.label_info.label}:  ; referenced from: {entry.label_info.referenced_from_text}"


def format_listing_line(entry: DecodedEntry) -> str:
    """Format one entry as "AAAA  BB BB  TEXT ; comment" (no label line)."""
    instruction = entry.instruction
    hex_bytes = bytes_to_hex_string(instruction.raw_bytes)
    line = f"{entry.address:04X}  {hex_bytes:<{HEX_COLUMN_WIDTH}}  "
    return line + _with_comment(instruction.text, instruction.comment)


def render_listing(entries: Iterable[DecodedEntry]) -> str:
    """
    Render entries as a traditional listing with address and hex columns.

    Returns:
        Listing text, one line per instruction plus one line per label
    """
    lines = []
    for entry in entries:
        header = format_label_header(entry)
        if header:
            lines.append(header)
        lines.append(format_listing_line(entry))
    return "\n".join(lines)


def _inner_labels(entries: Sequence[DecodedEntry]) -> list[tuple[str, int]]:
    """Labels used in operands whose address is not the start of an entry."""
    starts = {entry.address for entry in entries}
    found: dict[str, int] = {}
    for entry in entries:
        instruction = entry.instruction
        if instruction.target_label is None or instruction.target_address in starts:
            continue
        found.setdefault(instruction.target_label, instruction.target_address)
    return sorted(found.items(), key=lambda item: item[1])


def render_assembly(entries: Sequence[DecodedEntry], origin: int) -> str:
    """
    Render entries as assembler source without address or hex columns.

    Args:
        entries: Decoded entries
        origin: Address of the first byte, emitted as ORG

    Returns:
        Assembly source text
    """
    lines = [f"{INDENT}ORG {format_address(origin)}"]
    for label, address in _inner_labels(entries):
        lines.append(f"{label} EQU {format_address(address)}")
    lines.append("")

    for entry in entries:
        if entry.label:
            lines.append(f"{entry.label}:")
        instruction = entry.instruction
        lines.append(INDENT + _with_comment(instruction.text, instruction.comment))
    return "\n".join(lines)


# =============================================================================
# JSON Export
# =============================================================================

def entry_to_dict(entry: DecodedEntry) -> dict[str, Any]:
    """Convert an entry to a dictionary for JSON serialization."""
    instruction = entry.instruction
    label_info = entry.label_info
    return {
        "address": format_address(entry.address),
        "address_int": entry.address,
        "bytes": [format_byte(b) for b in instruction.raw_bytes],
        "size": instruction.size,
        "mnemonic": instruction.mnemonic,
        "operands": instruction.operands,
        "text": instruction.text,
        "comment": instruction.comment,
        "target_address": instruction.target_address,
        "target_label": instruction.target_label,
        "is_io_operation": instruction.is_io_operation,
        "z80_mnemonic": instruction.z80_mnemonic,
        "supports": {
            "z80": instruction.supports_z80,
            "8080": instruction.supports_8080,
            "8085": instruction.supports_8085,
        },
        "label": label_info.label if label_info else None,
        "referenced_from": (
            [format_address(a) for a in label_info.referenced_from] if label_info else []
        ),
    }


def render_json(entries: Iterable[DecodedEntry], **header: Any) -> str:
    """Render entries as a JSON document; header keys are included verbatim."""
    document = dict(header)
    document["instructions"] = [entry_to_dict(entry) for entry in entries]
    return json.dumps(document, indent=2)
