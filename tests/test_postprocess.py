"""
Unit Tests for Address and Compatibility Post-Processing
========================================================

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from z80disasm.cpu import Architecture
from z80disasm.opcodes import get_opcode_table
from z80disasm.postprocess import (
    INTEL_8085_ONLY_WARNING,
    Z80_ONLY_WARNING,
    compatibility_warnings,
    process_instruction,
)


def decode(architecture, data, offset=0):
    """Decode one instruction with the architecture's table."""
    return get_opcode_table(architecture).decode(bytes(data), offset)


class TestAddressing:
    """Tests for address and target absolutizing."""

    def test_address_is_origin_plus_offset(self):
        """Entry address is origin + offset."""
        instr = decode(Architecture.Z80, [0x00, 0x00], 1)
        address, _ = process_instruction(instr, 1, 0x8000, Architecture.Z80)
        assert address == 0x8001

    def test_address_wraps(self):
        """Addresses wrap modulo 64K."""
        instr = decode(Architecture.Z80, [0x00, 0x00, 0x00], 2)
        address, _ = process_instruction(instr, 2, 0xFFFF, Architecture.Z80)
        assert address == 0x0001

    def test_relative_target_shifted_once(self):
        """JR targets are moved by the origin and marked absolute."""
        instr = decode(Architecture.Z80, [0x18, 0xFE])
        _, processed = process_instruction(instr, 0, 0x8000, Architecture.Z80)
        assert processed.target_address == 0x8000
        assert not processed.target_relative

        # Processing again must not shift a second time
        _, again = process_instruction(processed, 0, 0x8000, Architecture.Z80)
        assert again.target_address == 0x8000

    def test_absolute_target_not_shifted(self):
        """JP nn already holds an absolute address."""
        instr = decode(Architecture.Z80, [0xC3, 0x34, 0x12])
        _, processed = process_instruction(instr, 0, 0x8000, Architecture.Z80)
        assert processed.target_address == 0x1234


class TestCompatibilityWarnings:
    """Tests for the cross-architecture comment policy."""

    def test_no_warnings_on_z80(self):
        """The Z80 target never gets warnings."""
        instr = decode(Architecture.Z80, [0x18, 0x00])
        assert compatibility_warnings(instr, Architecture.Z80) == []

    def test_z80_only_on_8085(self):
        """A Z80 JR processed for the 8085 is flagged Z80 only."""
        instr = decode(Architecture.Z80, [0x18, 0x00])
        _, processed = process_instruction(instr, 0, 0, Architecture.INTEL_8085)
        assert processed.comment == f"Relative jump - {Z80_ONLY_WARNING}"

    def test_8085_only_on_8080(self):
        """RIM processed for the 8080 is flagged 8085 only."""
        instr = decode(Architecture.INTEL_8085, [0x20])
        assert compatibility_warnings(instr, Architecture.INTEL_8080) == [INTEL_8085_ONLY_WARNING]

    def test_undocumented_8085_on_8080(self):
        """DSUB processed for the 8080 is flagged 8085 only."""
        instr = decode(Architecture.INTEL_8085, [0x08])
        _, processed = process_instruction(instr, 0, 0, Architecture.INTEL_8080)
        assert processed.comment == f"Undocumented: HL = HL - BC - {INTEL_8085_ONLY_WARNING}"

    def test_intel_tables_need_no_warnings(self):
        """Rows decoded from an Intel table are legal on that CPU."""
        for architecture in (Architecture.INTEL_8080, Architecture.INTEL_8085):
            table = get_opcode_table(architecture)
            for spec in table:
                instr = table.decode(bytes([spec.opcode, 0, 0]), 0)
                assert compatibility_warnings(instr, architecture) == []

    def test_common_instruction_no_warning(self):
        """Instructions legal on the target are not annotated."""
        instr = decode(Architecture.INTEL_8080, [0x00])
        _, processed = process_instruction(instr, 0, 0, Architecture.INTEL_8080)
        assert processed.comment is None

    def test_comment_is_appended(self):
        """Existing comments are kept in front of the warning."""
        instr = decode(Architecture.Z80, [0xD9])
        _, processed = process_instruction(instr, 0, 0, Architecture.INTEL_8085)
        assert processed.comment.startswith("Exchange BC, DE, HL with alternates")
        assert processed.comment.endswith(Z80_ONLY_WARNING)
