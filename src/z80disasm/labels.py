"""
Label Resolver
==============

Generates symbolic labels for addresses that instructions refer to, and
substitutes them into the operands of the referencing instructions.

Labels are named after how the address is used:

    R_xxxx   target of a relative jump (JR, DJNZ)
    J_xxxx   target of an absolute jump (JP, JMP, Jcc)
    S_xxxx   target of a call or restart (CALL, Ccc, RST)
    L_xxxx   anything else (data references such as LD A,(nn))

When an address is used in more than one way, the stronger kind wins:
relative jump > jump > call > data. Once an address is marked as a
relative jump target it keeps its R_ label.

Resolution is two passes over the finished entry list:

1. find_label_references() collects every target and who refers to it.
2. apply_labels() substitutes labels for in-range targets and attaches
   the label definitions to the entries at the labelled addresses.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import logging
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Optional, Sequence

from .cpu import ADDRESS_MASK
from .formatters import format_hex
from .instruction import DecodedEntry, LabelInfo

logger = logging.getLogger(__name__)


class ReferenceKind(IntEnum):
    """
    How an address is referenced.

    Values order the kinds by priority; a higher value dominates.
    """
    DATA = 0
    RESTART = 1
    CALL = 2
    JUMP = 3
    RELATIVE_JUMP = 4


LABEL_PREFIXES = {
    ReferenceKind.RELATIVE_JUMP: "R_",
    ReferenceKind.JUMP: "J_",
    ReferenceKind.CALL: "S_",
    ReferenceKind.RESTART: "S_",
    ReferenceKind.DATA: "L_",
}

RELATIVE_JUMP_MNEMONICS = frozenset({"JR", "DJNZ"})

JUMP_MNEMONICS = frozenset({
    "JP", "JMP", "PCHL",
    "JNZ", "JZ", "JNC", "JC", "JPO", "JPE", "JM",
    "JNK", "JK",
})

CALL_MNEMONICS = frozenset({
    "CALL",
    "CNZ", "CZ", "CNC", "CC", "CPO", "CPE", "CP", "CM",
})

RESTART_MNEMONICS = frozenset({"RST", "RSTV"})


def classify_reference(mnemonic: str) -> ReferenceKind:
    """
    Classify the reference an instruction makes to its target.

    Accepts Z80 and Intel mnemonics. Note that Intel CP is "call if
    positive"; the Z80 compare instruction never has a target address, so
    the overlap is harmless.
    """
    mnemonic = mnemonic.upper()
    if mnemonic in RELATIVE_JUMP_MNEMONICS:
        return ReferenceKind.RELATIVE_JUMP
    if mnemonic in JUMP_MNEMONICS:
        return ReferenceKind.JUMP
    if mnemonic in CALL_MNEMONICS:
        return ReferenceKind.CALL
    if mnemonic in RESTART_MNEMONICS:
        return ReferenceKind.RESTART
    return ReferenceKind.DATA


@dataclass
class LabelReference:
    """
    Accumulated references to one address (pass 1 working record).

    Attributes:
        address: The referenced address
        kind: Dominant reference kind so far
        referenced_from: Referencing addresses, first discovery order
    """
    address: int
    kind: ReferenceKind
    referenced_from: list[int] = field(default_factory=list)

    def add(self, source: int, kind: ReferenceKind) -> None:
        """Record one more reference, applying the priority rule."""
        if kind > self.kind:
            self.kind = kind
        if source not in self.referenced_from:
            self.referenced_from.append(source)


# =============================================================================
# Pass 1 - Discovery
# =============================================================================

def find_label_references(entries: Sequence[DecodedEntry]) -> dict[int, LabelReference]:
    """
    Collect every target address and the instructions referring to it.

    Args:
        entries: Decoded entries with absolute target addresses

    Returns:
        Mapping of target address to its LabelReference, in order of first
        discovery
    """
    references: dict[int, LabelReference] = {}
    for entry in entries:
        instruction = entry.instruction
        if instruction.target_address is None:
            continue
        kind = classify_reference(instruction.mnemonic)
        reference = references.get(instruction.target_address)
        if reference is None:
            reference = LabelReference(instruction.target_address, kind)
            references[instruction.target_address] = reference
        reference.add(entry.address, kind)
    return references


def generate_label(address: int, reference: LabelReference) -> str:
    """Return the label text for an address, e.g. "R_0000"."""
    return f"{LABEL_PREFIXES[reference.kind]}{format_hex(address, 4)}"


def create_label_map(references: dict[int, LabelReference]) -> dict[int, LabelInfo]:
    """Build the final label map from pass 1 results."""
    return {
        address: LabelInfo(generate_label(address, ref), tuple(ref.referenced_from))
        for address, ref in references.items()
    }


# =============================================================================
# Pass 2 - Rewrite
# =============================================================================

def in_range(address: int, origin: int, length: int) -> bool:
    """True if address lies in [origin, origin + length - 1], wrapping at 64K."""
    return ((address - origin) & ADDRESS_MASK) < length


def apply_labels(
    entries: Sequence[DecodedEntry],
    label_map: dict[int, LabelInfo],
    origin: int,
    length: int,
) -> list[DecodedEntry]:
    """
    Substitute labels into operands and attach label definitions.

    Only targets inside [origin, origin + length - 1] are replaced. The
    label lands on the operand fragment holding the target address;
    instructions without such a fragment (RST) are left unchanged.

    Args:
        entries: Entries from the decode pass
        label_map: Output of create_label_map()
        origin: Address of the first input byte
        length: Number of input bytes

    Returns:
        New list of entries
    """
    result = []
    for entry in entries:
        instruction = entry.instruction
        target = instruction.target_address
        if target is not None and target in label_map and in_range(target, origin, length):
            instruction = replace(instruction, target_label=label_map[target].label)
        label_info: Optional[LabelInfo] = label_map.get(entry.address)
        result.append(replace(entry, instruction=instruction, label_info=label_info))
    return result


def resolve_labels(entries: Sequence[DecodedEntry], origin: int, length: int) -> list[DecodedEntry]:
    """Run both label passes over a decoded entry list."""
    label_map = create_label_map(find_label_references(entries))
    logger.debug(f"Label resolver: {len(label_map)} labels")
    return apply_labels(entries, label_map, origin, length)
