"""Decoder for the 128-byte base display identification block.

The block is walked front to back as a fixed grammar::

    header (20) | display (5) | chromaticity (10) | established timings (3)
    | standard timings (16) | 4 x descriptor slot (18) | extension count (1)
    | checksum (1)

Every function takes a :class:`ByteCursor` positioned at its field and leaves
it positioned after the field. Any short read aborts the whole decode with
:class:`UnexpectedEndError`; no partial record is returned.
"""

from __future__ import annotations

import logging

from edidctl.core.bits import bit_field, extend, high_nibble, low_nibble, unpack_vendor
from edidctl.core.cursor import ByteCursor
from edidctl.core.errors import MagicMismatchError, UnexpectedEndError
from edidctl.core.model import (
    ColorManagement,
    Descriptor,
    DetailedTiming,
    DispatchMode,
    Display,
    Dummy,
    Edid,
    EstablishedTimings,
    Header,
    ProductName,
    RangeLimits,
    SerialNumber,
    SkippedRegion,
    StandardTiming,
    TextDescriptor,
    TimingCodes,
    Unknown,
    UnspecifiedText,
    WhitePoint,
)
from edidctl.core.text_tables import TextTable, cp437_char

LOGGER = logging.getLogger(__name__)

HEADER_MAGIC = bytes((0x00, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0xFF, 0x00))
HEADER_SIZE = 20
DISPLAY_SIZE = 5
CHROMATICITY_SIZE = 10
ESTABLISHED_TIMINGS_SIZE = 3
STANDARD_TIMINGS_SIZE = 16
DESCRIPTOR_SIZE = 18
DESCRIPTOR_COUNT = 4
DESCRIPTOR_TEXT_SIZE = 13
BASE_BLOCK_SIZE = 128

_NEWLINE = 0x0A

# Monitor descriptor sub-tags (slot byte 3).
MONITOR_DESCRIPTOR_TAGS: dict[int, type[Descriptor]] = {
    0xFF: SerialNumber,
    0xFE: UnspecifiedText,
    0xFD: RangeLimits,
    0xFC: ProductName,
    0xFB: WhitePoint,
    0xFA: StandardTiming,
    0xF9: ColorManagement,
    0xF8: TimingCodes,
    0xF7: EstablishedTimings,
    0x10: Dummy,
}

# Trial order of the first-success compatibility dispatcher. Every entry but the
# last succeeds on any 13 available bytes, so SerialNumber always wins.
PRIORITY_ORDER: tuple[type[Descriptor], ...] = (
    SerialNumber,
    UnspecifiedText,
    RangeLimits,
    ProductName,
    WhitePoint,
    StandardTiming,
    ColorManagement,
    TimingCodes,
    EstablishedTimings,
    Dummy,
    Unknown,
)


def decode_header(cursor: ByteCursor) -> Header:
    prefix = cursor.peek(min(len(HEADER_MAGIC), cursor.remaining), step="header")
    if prefix != HEADER_MAGIC[: len(prefix)]:
        raise MagicMismatchError(
            f"header: expected magic {HEADER_MAGIC.hex()} at offset {cursor.offset}, got {prefix.hex()}",
            step="header",
            offset=cursor.offset,
            available=cursor.remaining,
            required=len(HEADER_MAGIC),
        )
    cursor.peek(HEADER_SIZE, step="header")
    cursor.skip(len(HEADER_MAGIC), step="header")
    return Header(
        vendor=unpack_vendor(cursor.be_u16(step="header vendor")),
        product=cursor.le_u16(step="header product"),
        serial=cursor.le_u32(step="header serial"),
        week=cursor.u8(step="header week"),
        year=cursor.u8(step="header year"),
        version=cursor.u8(step="header version"),
        revision=cursor.u8(step="header revision"),
    )


def decode_display(cursor: ByteCursor) -> Display:
    raw = cursor.take(DISPLAY_SIZE, step="display")
    return Display(
        video_input=raw[0],
        width=raw[1],
        height=raw[2],
        gamma=raw[3],
        features=raw[4],
    )


def _skip_region(cursor: ByteCursor, name: str, size: int) -> SkippedRegion:
    offset = cursor.offset
    cursor.skip(size, step=name)
    return SkippedRegion(name=name, offset=offset, length=size)


def skip_chromaticity(cursor: ByteCursor) -> SkippedRegion:
    return _skip_region(cursor, "chromaticity", CHROMATICITY_SIZE)


def skip_established_timings(cursor: ByteCursor) -> SkippedRegion:
    return _skip_region(cursor, "established timings", ESTABLISHED_TIMINGS_SIZE)


def skip_standard_timings(cursor: ByteCursor) -> SkippedRegion:
    return _skip_region(cursor, "standard timings", STANDARD_TIMINGS_SIZE)


def unpack_detailed_timing(block: bytes) -> DetailedTiming:
    """Rebuild a detailed timing from its 18 raw bytes.

    Counts wider than a byte are split into a low byte (or nibble) and high
    bits shared with neighbouring fields:

    ====  =========================================================
    4     horizontal active (7-4) / horizontal blanking (3-0)
    7     vertical active (7-4) / vertical blanking (3-0)
    10    vertical front porch (7-4) / vertical sync width (3-0), low bits
    11    h. front porch (7-6), h. sync (5-4), v. front porch (3-2), v. sync (1-0)
    14    horizontal size (7-4) / vertical size (3-0)
    ====  =========================================================
    """
    if len(block) != DESCRIPTOR_SIZE:
        raise ValueError(f"detailed timing block must be {DESCRIPTOR_SIZE} bytes, got {len(block)}")
    px_hi = block[4]
    lines_hi = block[7]
    vertical_lo = block[10]
    porch_sync_hi = block[11]
    size_hi = block[14]
    return DetailedTiming(
        pixel_clock=int.from_bytes(block[0:2], byteorder="little") * 10,
        horizontal_active_pixels=extend(block[2], high_nibble(px_hi)),
        horizontal_blanking_pixels=extend(block[3], low_nibble(px_hi)),
        vertical_active_lines=extend(block[5], high_nibble(lines_hi)),
        vertical_blanking_lines=extend(block[6], low_nibble(lines_hi)),
        horizontal_front_porch=extend(block[8], bit_field(porch_sync_hi, 7, 6)),
        horizontal_sync_width=extend(block[9], bit_field(porch_sync_hi, 5, 4)),
        vertical_front_porch=extend(high_nibble(vertical_lo), bit_field(porch_sync_hi, 3, 2)),
        vertical_sync_width=extend(low_nibble(vertical_lo), bit_field(porch_sync_hi, 1, 0)),
        horizontal_size=extend(block[12], high_nibble(size_hi)),
        vertical_size=extend(block[13], low_nibble(size_hi)),
        horizontal_border_pixels=block[15],
        vertical_border_pixels=block[16],
        features=block[17],
    )


def decode_detailed_timing(cursor: ByteCursor) -> DetailedTiming:
    return unpack_detailed_timing(cursor.take(DESCRIPTOR_SIZE, step="detailed timing"))


def decode_descriptor_text(
    cursor: ByteCursor,
    text_table: TextTable = cp437_char,
    *,
    step: str = "descriptor text",
) -> str:
    raw = cursor.take(DESCRIPTOR_TEXT_SIZE, step=step)
    return "".join(text_table(b) for b in raw if b != _NEWLINE).strip()


def _decode_monitor_payload(
    cursor: ByteCursor,
    kind: type[Descriptor],
    text_table: TextTable,
    tag: int | None,
) -> Descriptor:
    cursor.skip(1, step=f"{kind.kind} reserved byte")
    if issubclass(kind, TextDescriptor):
        return kind(decode_descriptor_text(cursor, text_table, step=kind.kind))
    payload = cursor.take(DESCRIPTOR_TEXT_SIZE, step=kind.kind)
    if kind is Unknown:
        return Unknown(data=payload, tag=tag)
    return kind(payload)


def _decode_by_priority(cursor: ByteCursor, text_table: TextTable) -> Descriptor:
    """Compatibility dispatch: the first sub-decoder that succeeds wins.

    The sub-tag byte is read by the caller but plays no part in the choice.
    """
    *candidates, fallback = PRIORITY_ORDER
    for kind in candidates:
        attempt = cursor.fork()
        try:
            descriptor = _decode_monitor_payload(attempt, kind, text_table, tag=None)
        except UnexpectedEndError:
            continue
        cursor.seek(attempt.offset)
        return descriptor
    return _decode_monitor_payload(cursor, fallback, text_table, tag=None)


def decode_descriptor(
    cursor: ByteCursor,
    *,
    dispatch: DispatchMode = DispatchMode.TAGGED,
    text_table: TextTable = cp437_char,
) -> Descriptor:
    """Decode one 18-byte descriptor slot.

    A slot whose first two bytes are zero is a monitor descriptor; anything
    else is a detailed timing.
    """
    offset = cursor.offset
    marker = int.from_bytes(cursor.peek(2, step="descriptor"), byteorder="little")
    if marker != 0:
        descriptor: Descriptor = decode_detailed_timing(cursor)
    else:
        cursor.skip(3, step="monitor descriptor header")
        tag = cursor.u8(step="monitor descriptor tag")
        if dispatch is DispatchMode.PRIORITY:
            descriptor = _decode_by_priority(cursor, text_table)
        else:
            kind = MONITOR_DESCRIPTOR_TAGS.get(tag, Unknown)
            descriptor = _decode_monitor_payload(cursor, kind, text_table, tag=tag)
        LOGGER.debug("monitor descriptor tag 0x%02x at offset %d", tag, offset)
    LOGGER.debug("descriptor slot at offset %d decoded as %s", offset, descriptor.kind)
    return descriptor


def decode_edid(
    data: bytes,
    *,
    dispatch: DispatchMode = DispatchMode.TAGGED,
    text_table: TextTable = cp437_char,
) -> tuple[Edid, bytes]:
    """Decode a base block and return it with any bytes that follow it.

    Trailing bytes belong to extension blocks and are returned uninterpreted.
    The extension count and checksum bytes are consumed without validation.
    """
    cursor = ByteCursor(data)
    header = decode_header(cursor)
    display = decode_display(cursor)
    chromaticity = skip_chromaticity(cursor)
    established_timings = skip_established_timings(cursor)
    standard_timings = skip_standard_timings(cursor)
    descriptors = tuple(
        decode_descriptor(cursor, dispatch=dispatch, text_table=text_table)
        for _ in range(DESCRIPTOR_COUNT)
    )
    cursor.skip(1, step="extension count")
    cursor.skip(1, step="checksum")
    edid = Edid(
        header=header,
        display=display,
        chromaticity=chromaticity,
        established_timings=established_timings,
        standard_timings=standard_timings,
        descriptors=descriptors,
    )
    return edid, cursor.rest()
