"""
Unit Tests for the Label Resolver
=================================

Tests for reference classification, the priority rule, label naming and
operand substitution.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import pytest

from z80disasm.instruction import DecodedEntry, Instruction, Operand
from z80disasm.labels import (
    LabelReference,
    ReferenceKind,
    apply_labels,
    classify_reference,
    create_label_map,
    find_label_references,
    generate_label,
    in_range,
)


def branch(address, mnemonic, target, size=3):
    """Build an entry for a branch to target."""
    instr = Instruction(
        mnemonic=mnemonic,
        operand_list=(Operand.address(),),
        raw_bytes=bytes(size),
        target_address=target,
    )
    return DecodedEntry(address, instr)


def nop(address):
    return DecodedEntry(address, Instruction("NOP", raw_bytes=b"\x00"))


# =============================================================================
# Classification
# =============================================================================

class TestClassifyReference:
    """Tests for reference classification by mnemonic."""

    @pytest.mark.parametrize("mnemonic,kind", [
        ("JR", ReferenceKind.RELATIVE_JUMP),
        ("DJNZ", ReferenceKind.RELATIVE_JUMP),
        ("JP", ReferenceKind.JUMP),
        ("JMP", ReferenceKind.JUMP),
        ("JNZ", ReferenceKind.JUMP),
        ("CALL", ReferenceKind.CALL),
        ("CNZ", ReferenceKind.CALL),
        ("RST", ReferenceKind.RESTART),
        ("LD", ReferenceKind.DATA),
        ("LDA", ReferenceKind.DATA),
    ])
    def test_classification(self, mnemonic, kind):
        """Each mnemonic maps to its reference kind."""
        assert classify_reference(mnemonic) == kind

    def test_priority_order(self):
        """Relative jump > jump > call > data."""
        assert ReferenceKind.RELATIVE_JUMP > ReferenceKind.JUMP > ReferenceKind.CALL
        assert ReferenceKind.CALL > ReferenceKind.DATA


# =============================================================================
# Pass 1
# =============================================================================

class TestFindLabelReferences:
    """Tests for reference discovery."""

    def test_relative_dominates_call(self):
        """An address used by CALL and JR gets the relative kind."""
        entries = [branch(0x0000, "CALL", 0x10), branch(0x0003, "JR", 0x10, size=2)]
        refs = find_label_references(entries)
        assert refs[0x10].kind == ReferenceKind.RELATIVE_JUMP
        assert refs[0x10].referenced_from == [0x0000, 0x0003]

    def test_relative_never_downgraded(self):
        """A later JP or CALL does not replace a relative classification."""
        entries = [
            branch(0x0000, "JR", 0x10, size=2),
            branch(0x0002, "JP", 0x10),
            branch(0x0005, "CALL", 0x10),
        ]
        refs = find_label_references(entries)
        assert refs[0x10].kind == ReferenceKind.RELATIVE_JUMP

    def test_jump_dominates_call(self):
        """JP beats CALL regardless of order."""
        entries = [branch(0x0000, "CALL", 0x20), branch(0x0003, "JP", 0x20)]
        assert find_label_references(entries)[0x20].kind == ReferenceKind.JUMP

    def test_duplicate_sources_suppressed(self):
        """A source address is recorded once."""
        ref = LabelReference(0x10, ReferenceKind.CALL)
        ref.add(0x05, ReferenceKind.CALL)
        ref.add(0x05, ReferenceKind.CALL)
        assert ref.referenced_from == [0x05]

    def test_entries_without_target_ignored(self):
        """Only instructions with a target contribute references."""
        assert find_label_references([nop(0), nop(1)]) == {}


# =============================================================================
# Naming
# =============================================================================

class TestGenerateLabel:
    """Tests for label text."""

    @pytest.mark.parametrize("kind,label", [
        (ReferenceKind.RELATIVE_JUMP, "R_00FF"),
        (ReferenceKind.JUMP, "J_00FF"),
        (ReferenceKind.CALL, "S_00FF"),
        (ReferenceKind.RESTART, "S_00FF"),
        (ReferenceKind.DATA, "L_00FF"),
    ])
    def test_prefixes(self, kind, label):
        """Label prefix depends on the dominant kind."""
        assert generate_label(0x00FF, LabelReference(0x00FF, kind)) == label

    def test_create_label_map(self):
        """The map holds one LabelInfo per referenced address."""
        refs = find_label_references([branch(0x0000, "CALL", 0xABCD)])
        label_map = create_label_map(refs)
        assert label_map[0xABCD].label == "S_ABCD"
        assert label_map[0xABCD].referenced_from == (0x0000,)
        assert label_map[0xABCD].referenced_from_text == "0000h"


# =============================================================================
# Pass 2
# =============================================================================

class TestApplyLabels:
    """Tests for label substitution."""

    def test_in_range_target_substituted(self):
        """A target inside the input is replaced by its label."""
        entries = [branch(0x0000, "JP", 0x0003), nop(0x0003)]
        label_map = create_label_map(find_label_references(entries))
        result = apply_labels(entries, label_map, origin=0, length=4)

        assert result[0].instruction.text == "JP J_0003"
        assert result[1].label == "J_0003"
        assert result[1].label_info.referenced_from == (0x0000,)

    def test_out_of_range_target_kept(self):
        """Targets outside the input keep their hex address."""
        entries = [branch(0x0000, "JP", 0x1234)]
        label_map = create_label_map(find_label_references(entries))
        result = apply_labels(entries, label_map, origin=0, length=3)
        assert result[0].instruction.text == "JP 1234h"

    def test_instruction_without_address_fragment(self):
        """RST keeps its literal operand even when its target is labelled."""
        rst = Instruction(
            mnemonic="RST",
            operand_list=(Operand.literal("08h"),),
            raw_bytes=b"\xcf",
            target_address=0x0008,
        )
        entries = [DecodedEntry(0x0000, rst)] + [nop(a) for a in range(1, 9)]
        label_map = create_label_map(find_label_references(entries))
        result = apply_labels(entries, label_map, origin=0, length=9)

        assert result[0].instruction.text == "RST 08h"
        assert result[8].label == "S_0008"

    def test_in_range_wraps(self):
        """The range check wraps at the top of memory."""
        assert in_range(0x0001, origin=0xFFFF, length=4)
        assert in_range(0xFFFF, origin=0xFFFF, length=1)
        assert not in_range(0xFFFE, origin=0xFFFF, length=4)
