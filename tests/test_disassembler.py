"""
Unit Tests for the Disassembly Driver
=====================================

This module tests the complete decode pipeline: table dispatch, prefix
handling, fallbacks for unknown and truncated input, label resolution and
translation for the Intel targets.

Test coverage includes:
- Coverage and contiguity of the entries for arbitrary input
- Determinism
- The NOP, relative branch, unknown opcode and 8085 decoding scenarios
- Label priority and placement
- Caller precondition errors

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import pytest

from z80disasm import (
    Architecture,
    ArchitectureError,
    Disassembler,
    OriginRangeError,
    disassemble,
    disassemble_one,
)
from z80disasm.disassembler import INCOMPLETE_INSTRUCTION_COMMENT, UNKNOWN_OPCODE_COMMENT


ALL_ARCHITECTURES = [Architecture.Z80, Architecture.INTEL_8080, Architecture.INTEL_8085]


def texts(entries):
    return [entry.instruction.text for entry in entries]


# =============================================================================
# Coverage Properties
# =============================================================================

class TestCoverage:
    """Every input byte is decoded exactly once."""

    @pytest.mark.parametrize("architecture", ALL_ARCHITECTURES)
    def test_all_byte_values(self, architecture):
        """Sizes sum to the input length and addresses are contiguous."""
        data = bytes(range(256)) + bytes(range(255, -1, -1))
        entries = disassemble(data, origin=0x1000, architecture=architecture)

        assert sum(e.instruction.size for e in entries) == len(data)
        assert entries[0].address == 0x1000
        for current, following in zip(entries, entries[1:]):
            assert following.address == current.address + current.instruction.size

    @pytest.mark.parametrize("architecture", ALL_ARCHITECTURES)
    def test_prefix_heavy_input(self, architecture):
        """Runs of prefix bytes still cover the input."""
        data = bytes([0xCB, 0xDD, 0xED, 0xFD] * 8 + [0xED])
        entries = disassemble(data, architecture=architecture)
        assert sum(e.instruction.size for e in entries) == len(data)

    def test_raw_bytes_reassemble_input(self):
        """Concatenated raw bytes reproduce the input."""
        data = bytes([0x21, 0x34, 0x12, 0xCB, 0x7E, 0xED, 0xB0, 0xDD, 0x00, 0x01])
        entries = disassemble(data)
        assert b"".join(e.instruction.raw_bytes for e in entries) == data

    def test_empty_input(self):
        """No bytes, no entries."""
        assert disassemble(b"") == []

    def test_determinism(self):
        """Two runs with identical input produce identical output."""
        data = bytes([0x18, 0xFE, 0xCD, 0x00, 0x00, 0xC3, 0x02, 0x00, 0x3A, 0x05, 0x00])
        assert disassemble(data, 0x100) == disassemble(data, 0x100)
        assert disassemble(data, 0x100, "8085") == disassemble(data, 0x100, "8085")


# =============================================================================
# Scenarios
# =============================================================================

class TestScenarios:
    """Behaviour for well-known inputs."""

    def test_nop(self):
        """A single NOP at origin 0."""
        entries = disassemble(b"\x00")

        assert len(entries) == 1
        entry = entries[0]
        assert entry.address == 0x0000
        assert entry.instruction.mnemonic == "NOP"
        assert entry.instruction.size == 1
        assert entry.instruction.target_address is None
        assert entry.label is None

    def test_relative_jump_to_self(self):
        """18 FE jumps to itself and gets an R_ label."""
        entries = disassemble(bytes([0x18, 0xFE]))

        assert len(entries) == 1
        entry = entries[0]
        assert entry.instruction.target_address == 0x0000
        assert entry.label == "R_0000"
        assert entry.label_info.referenced_from == (0x0000,)
        assert entry.instruction.text == "JR R_0000"

    def test_relative_jump_with_origin(self):
        """The origin is applied to relative targets exactly once."""
        entries = disassemble(bytes([0x18, 0xFE]), origin=0x8000)
        assert entries[0].instruction.target_address == 0x8000
        assert entries[0].label == "R_8000"

    def test_djnz(self):
        """DJNZ is a relative branch."""
        entries = disassemble(bytes([0x00, 0x10, 0xFD]), origin=0x0100)
        assert entries[1].instruction.text == "DJNZ R_0100"
        assert entries[0].label == "R_0100"

    def test_relative_target_outside_input(self):
        """Out-of-range relative targets are shown as addresses."""
        entries = disassemble(bytes([0x18, 0x80]))
        assert entries[0].instruction.text == "JR FF82h"

    def test_unknown_opcode(self):
        """A lone FD byte has no meaning on the Z80."""
        entries = disassemble(bytes([0xFD]))

        assert len(entries) == 1
        instr = entries[0].instruction
        assert instr.mnemonic == "DB"
        assert instr.size == 1
        assert instr.text == "DB FDh"
        assert "NOT SUPPORTED" in instr.comment
        assert not (instr.supports_z80 or instr.supports_8080 or instr.supports_8085)

    def test_8085_undocumented_stays_in_step(self):
        """ARHL is one byte, so the following MVI decodes intact."""
        entries = disassemble(bytes([0x10, 0x3E, 0x41]), architecture="8085")

        assert texts(entries) == ["ARHL", "MVI A, 41h"]
        assert [e.address for e in entries] == [0x0000, 0x0001]
        assert "Z80 ONLY" not in entries[0].instruction.comment

    def test_8085_prefix_slots(self):
        """CB, ED and D9 are 8085 instructions, not Z80 prefixes."""
        entries = disassemble(bytes([0xCB, 0xED, 0xD9]), architecture="8085")
        assert [e.instruction.mnemonic for e in entries] == ["RSTV", "LHLX", "SHLX"]

    def test_8085_jk_label(self):
        """JK and JNK targets get J_ labels; RSTV defines S_0040."""
        data = bytes([0xFD, 0x03, 0x00, 0xDD, 0x00, 0x00]) + bytes(58) + bytes([0xCB])
        entries = disassemble(data, architecture="8085")
        by_address = {e.address: e for e in entries}

        assert by_address[0x0000].instruction.text == "JK J_0003"
        assert by_address[0x0003].instruction.text == "JNK J_0000"
        assert by_address[0x0040].label == "S_0040"

    def test_truncated_instruction(self):
        """A trailing partial instruction degrades to single bytes."""
        entries = disassemble(bytes([0x01, 0x34]))

        assert texts(entries) == ["DB 01h", "INC (HL)"]
        assert entries[0].instruction.comment == INCOMPLETE_INSTRUCTION_COMMENT

    def test_prefix_as_last_byte(self):
        """A lone CB prefix is an unknown opcode."""
        entries = disassemble(bytes([0xCB]))
        assert entries[0].instruction.text == "DB CBh"
        assert entries[0].instruction.comment == UNKNOWN_OPCODE_COMMENT

    def test_truncated_ed_instruction(self):
        """ED 43 with one address byte is incomplete."""
        entries = disassemble(bytes([0xED, 0x43, 0x00]))
        assert entries[0].instruction.text == "DB EDh"
        assert entries[0].instruction.comment == INCOMPLETE_INSTRUCTION_COMMENT
        assert sum(e.instruction.size for e in entries) == 3

    def test_index_prefix_placeholder(self):
        """DD is emitted alone and decoding resumes after it."""
        entries = disassemble(bytes([0xDD, 0x21, 0x34, 0x12]))
        assert texts(entries) == ["DB DDh", "LD HL, 1234h"]

    def test_unknown_ed_opcode(self):
        """Unknown ED opcodes consume two bytes."""
        entries = disassemble(bytes([0xED, 0x00, 0x00]))
        assert texts(entries) == ["DB EDh, 00h", "NOP"]

    def test_prefixes_ignored_on_intel(self):
        """Prefix bytes are ordinary opcodes on the 8080."""
        entries = disassemble(bytes([0xED, 0x00, 0x00]), architecture="8080")
        assert entries[0].instruction.text == "CALL S_0000"
        assert entries[0].instruction.comment == "Undocumented CALL"
        assert entries[0].instruction.size == 3


# =============================================================================
# Labels
# =============================================================================

class TestLabels:
    """Label generation through the full pipeline."""

    def setup_method(self):
        """A small program with a call, a jump and a data reference."""
        self.program = bytes([
            0xCD, 0x06, 0x00,   # 0000 CALL 0006h
            0xC3, 0x00, 0x00,   # 0003 JP 0000h
            0x3A, 0x0A, 0x00,   # 0006 LD A, (000Ah)
            0xC9,               # 0009 RET
            0x00,               # 000A data
        ])

    def test_label_kinds(self):
        """Calls get S_, jumps get J_, data references get L_."""
        entries = disassemble(self.program)
        assert texts(entries) == [
            "CALL S_0006",
            "JP J_0000",
            "LD A, (L_000A)",
            "RET",
            "NOP",
        ]

    def test_label_definitions(self):
        """Labels are attached to the entries at their addresses."""
        entries = {e.address: e for e in disassemble(self.program)}
        assert entries[0x0000].label == "J_0000"
        assert entries[0x0000].label_info.referenced_from == (0x0003,)
        assert entries[0x0006].label == "S_0006"
        assert entries[0x000A].label == "L_000A"
        assert entries[0x0003].label is None

    def test_labels_replace_addresses(self):
        """No labelled operand still contains its hex address."""
        for entry in disassemble(self.program):
            instr = entry.instruction
            if instr.target_label:
                assert f"{instr.target_address:04X}h" not in instr.operands
                assert instr.target_label in instr.operands

    def test_relative_beats_call(self):
        """An address used by JR and CALL is named R_."""
        data = bytes([
            0x18, 0x03,         # 0000 JR 0005h
            0xCD, 0x05, 0x00,   # 0002 CALL 0005h
            0xC9,               # 0005 RET
        ])
        entries = disassemble(data)
        assert entries[2].label == "R_0005"
        assert entries[2].label_info.referenced_from == (0x0000, 0x0002)
        assert entries[1].instruction.text == "CALL R_0005"

    def test_restart_target(self):
        """RST defines an S_ label but keeps its vector operand."""
        entries = disassemble(bytes([0xCF]) + bytes(8))
        assert entries[0].instruction.text == "RST 08h"
        assert entries[8].label == "S_0008"

    def test_target_outside_input(self):
        """Targets outside the input are not substituted."""
        entries = disassemble(bytes([0xC3, 0x34, 0x12]))
        assert entries[0].instruction.text == "JP 1234h"
        assert entries[0].label is None


# =============================================================================
# API and Errors
# =============================================================================

class TestDisassemblerAPI:
    """Tests for the Disassembler class and argument validation."""

    def test_architecture_by_name(self):
        """Architectures can be given by name."""
        assert Disassembler("Intel 8085").architecture == Architecture.INTEL_8085
        assert Disassembler("z80").architecture == Architecture.Z80

    def test_unknown_architecture(self):
        """Unknown names are rejected."""
        with pytest.raises(ArchitectureError):
            disassemble(b"\x00", architecture="6502")

    @pytest.mark.parametrize("origin", [-1, 0x10000])
    def test_origin_out_of_range(self, origin):
        """Origins outside 16 bits are rejected before decoding."""
        with pytest.raises(OriginRangeError):
            disassemble(b"\x00", origin=origin)

    @pytest.mark.parametrize("origin", [0.5, "0x100", True, None])
    def test_origin_not_an_integer(self, origin):
        """Non-integer origins are rejected with OriginRangeError."""
        with pytest.raises(OriginRangeError, match="integer"):
            disassemble(b"\x00", origin=origin)

    def test_disassemble_to_text(self):
        """The text listing includes label headers."""
        text = Disassembler().disassemble_to_text(bytes([0x18, 0xFE]))
        assert "R_0000:  ; referenced from: 0000h" in text
        assert "JR R_0000" in text

    def test_disassemble_one(self):
        """A single instruction can be decoded on its own."""
        entry = disassemble_one(bytes([0x00, 0x3E, 0x41]), offset=1, origin=0x100)
        assert entry.address == 0x0101
        assert entry.instruction.text == "LD A, 41h"
        assert entry.instruction.comment == "'A'"

    def test_disassemble_one_past_end(self):
        """Offsets past the input return None."""
        assert disassemble_one(b"\x00", offset=1) is None

    def test_disassemble_one_intel(self):
        """disassemble_one translates for Intel targets."""
        entry = disassemble_one(bytes([0x41]), architecture="8080")
        assert entry.instruction.text == "MOV B, C"
