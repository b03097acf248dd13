"""Byte-to-character translation tables used for descriptor text."""

from __future__ import annotations

from typing import Protocol

from edidctl.core.errors import SettingsValidationError


class TextTable(Protocol):
    def __call__(self, value: int) -> str:
        """Return the display character for a single byte value."""


_CP437 = bytes(range(256)).decode("cp437")
_LATIN_1 = bytes(range(256)).decode("latin-1")


def cp437_char(value: int) -> str:
    return _CP437[value]


def latin1_char(value: int) -> str:
    return _LATIN_1[value]


TEXT_TABLES: dict[str, TextTable] = {
    "cp437": cp437_char,
    "latin-1": latin1_char,
}


def get_text_table(name: str) -> TextTable:
    try:
        return TEXT_TABLES[name]
    except KeyError:
        available = ", ".join(sorted(TEXT_TABLES))
        raise SettingsValidationError(f"Unknown text table '{name}'. Available: {available}") from None
