"""Bounds-checked sequential reader over an immutable byte buffer."""

from __future__ import annotations

from edidctl.core.errors import UnexpectedEndError


class ByteCursor:
    """Reads fixed-width fields front to back, checking length before every read.

    Each read names the decode ``step`` it belongs to so a short buffer can be
    reported precisely. The underlying buffer is never modified.
    """

    def __init__(self, data: bytes, offset: int = 0) -> None:
        self._data = bytes(data)
        self._offset = offset

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return len(self._data) - self._offset

    def fork(self) -> "ByteCursor":
        """Independent cursor over the same buffer at the current offset."""
        return ByteCursor(self._data, self._offset)

    def seek(self, offset: int) -> None:
        if not 0 <= offset <= len(self._data):
            raise ValueError(f"offset {offset} outside buffer of {len(self._data)} bytes")
        self._offset = offset

    def _require(self, size: int, step: str) -> None:
        if self.remaining < size:
            raise UnexpectedEndError(
                f"{step}: need {size} bytes at offset {self._offset}, {self.remaining} available",
                step=step,
                offset=self._offset,
                available=self.remaining,
                required=size,
            )

    def peek(self, size: int, *, step: str) -> bytes:
        self._require(size, step)
        return self._data[self._offset: self._offset + size]

    def take(self, size: int, *, step: str) -> bytes:
        chunk = self.peek(size, step=step)
        self._offset += size
        return chunk

    def skip(self, size: int, *, step: str) -> None:
        self._require(size, step)
        self._offset += size

    def u8(self, *, step: str) -> int:
        return self.take(1, step=step)[0]

    def le_u16(self, *, step: str) -> int:
        return int.from_bytes(self.take(2, step=step), byteorder="little")

    def be_u16(self, *, step: str) -> int:
        return int.from_bytes(self.take(2, step=step), byteorder="big")

    def le_u32(self, *, step: str) -> int:
        return int.from_bytes(self.take(4, step=step), byteorder="little")

    def rest(self) -> bytes:
        return self._data[self._offset:]
