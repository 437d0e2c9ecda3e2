"""Tests for the hexadecimal literal serializer."""

import math
import re

import pytest

from argbimage.services.hex_service import HexFormat, hexliterals, render_hex


class TestRenderHex:
    def test_red_pixel_golden(self):
        assert hexliterals(bytes([255, 255, 0, 0])) == "[\n  0xFF,  0xFF,  0x00,  0x00\n]"

    def test_group_spacer_inside_row(self):
        expected = "[\n  0x00,  0x01,  0x02,  0x03,   0x04\n]"
        assert hexliterals(bytes(range(5))) == expected

    def test_row_break(self):
        expected = "[\n  0x00,  0x01,\n  0x02\n]"
        assert hexliterals(bytes(range(3)), per_row=2, group_count=4) == expected

    def test_custom_spacer(self):
        expected = "[\n  0x00,  0x01,|  0x02\n]"
        assert hexliterals(bytes(range(3)), group_count=2, group_spacer="|") == expected

    def test_var_name_header(self):
        result = hexliterals(bytes([0xAB]), var_name="pixels")
        assert result == "pixels = [\n  0xAB\n]"

    def test_empty_var_name_is_bare(self):
        assert hexliterals(bytes([1]), var_name="").startswith("[\n")

    def test_empty_buffer(self):
        assert hexliterals(b"") == "[\n\n]"

    def test_uppercase_hex(self):
        assert "0xAB" in hexliterals(bytes([0xAB]))

    @pytest.mark.parametrize("n", [1, 15, 16, 17, 33, 64])
    def test_token_and_newline_counts(self, n):
        result = hexliterals(bytes(n))
        assert len(re.findall(r"0x[0-9A-F]{2}", result)) == n
        # two wrapping newlines plus one per extra row
        assert result.count("\n") == 2 + math.ceil(n / 16) - 1

    def test_deterministic(self):
        data = bytes(range(40))
        assert render_hex(data) == render_hex(data)


class TestHexFormat:
    def test_defaults(self):
        fmt = HexFormat()
        assert (fmt.per_row, fmt.group_count, fmt.group_spacer) == (16, 4, " ")

    def test_zero_per_row_rejected(self):
        with pytest.raises(ValueError):
            HexFormat(per_row=0)

    def test_render_with_format(self):
        fmt = HexFormat(per_row=1, indent="")
        assert render_hex(bytes([1, 2]), fmt=fmt) == "[\n0x01,\n0x02\n]"
