from __future__ import annotations

import pytest

from edidctl.core.bits import bit_field, extend, high_nibble, low_nibble, unpack_vendor


def test_nibbles_split_byte() -> None:
    assert high_nibble(0x62) == 6
    assert low_nibble(0x62) == 2


def test_bit_field_extracts_inclusive_range() -> None:
    value = 0b11_10_01_00
    assert bit_field(value, 7, 6) == 3
    assert bit_field(value, 5, 4) == 2
    assert bit_field(value, 3, 2) == 1
    assert bit_field(value, 1, 0) == 0


def test_bit_field_rejects_inverted_range() -> None:
    with pytest.raises(ValueError):
        bit_field(0xFF, 2, 5)


def test_extend_joins_high_bits() -> None:
    assert extend(0x90, 0x6) == 1680
    assert extend(0x3, 0x2) == 0x203


def test_vendor_letters_from_packed_value() -> None:
    assert unpack_vendor(0x4C2D) == ("S", "A", "M")
    assert unpack_vendor(0x4D10) == ("S", "H", "P")


def test_vendor_field_value_one_is_a() -> None:
    assert unpack_vendor((1 << 10) | (1 << 5) | 1) == ("A", "A", "A")
    assert unpack_vendor((26 << 10) | (26 << 5) | 26) == ("Z", "Z", "Z")
