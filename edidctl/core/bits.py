from __future__ import annotations


def high_nibble(byte_value: int) -> int:
    return (byte_value >> 4) & 0x0F


def low_nibble(byte_value: int) -> int:
    return byte_value & 0x0F


def bit_field(byte_value: int, high_bit: int, low_bit: int) -> int:
    """Return bits ``high_bit``..``low_bit`` (inclusive, 7 = MSB) of a byte."""
    if not 0 <= low_bit <= high_bit <= 7:
        raise ValueError("bit range must satisfy 0 <= low_bit <= high_bit <= 7")
    width = high_bit - low_bit + 1
    return (byte_value >> low_bit) & ((1 << width) - 1)


def extend(low: int, high: int) -> int:
    """Join a low byte with the bits above it."""
    return low | (high << 8)


def unpack_vendor(value: int) -> tuple[str, str, str]:
    """Split a 16-bit value into three 5-bit packed letters (1 = 'A')."""
    base = ord("A") - 1
    return (
        chr(((value >> 10) & 0x1F) + base),
        chr(((value >> 5) & 0x1F) + base),
        chr((value & 0x1F) + base),
    )
