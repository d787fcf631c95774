"""
Unit Tests for Relative Branch Targets
======================================

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import pytest

from z80disasm.relative import calculate_relative_target, signed_byte


class TestSignedByte:
    """Tests for two's complement interpretation."""

    @pytest.mark.parametrize("value,expected", [
        (0x00, 0),
        (0x7F, 127),
        (0x80, -128),
        (0xFE, -2),
        (0xFF, -1),
    ])
    def test_signed_byte(self, value, expected):
        """Bytes of 80h and above are negative."""
        assert signed_byte(value) == expected


class TestRelativeTarget:
    """Tests for calculate_relative_target."""

    def test_jump_to_self(self):
        """18 FE at 0000h jumps to itself."""
        assert calculate_relative_target(0x0000, 0xFE) == 0x0000

    def test_forward(self):
        """Displacement is measured from the next instruction."""
        assert calculate_relative_target(0x8000, 0x10) == 0x8012

    def test_backward_wraps_below_zero(self):
        """Targets below 0000h wrap to the top of memory."""
        assert calculate_relative_target(0x0000, 0x80) == 0xFF82

    def test_forward_wraps_past_top(self):
        """Targets past FFFFh wrap to the bottom of memory."""
        assert calculate_relative_target(0xFFFE, 0x10) == 0x0010
