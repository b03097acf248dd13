"""Stable public API for building tooling on top of edidctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from pathlib import Path

from edidctl.core.decoder import BASE_BLOCK_SIZE, decode_edid
from edidctl.core.errors import (
    ConnectorDiscoveryError,
    DecodeError,
    EdidctlError,
    InputFormatError,
    MagicMismatchError,
    SettingsLoadError,
    SettingsValidationError,
    UnexpectedEndError,
    VendorRegistryError,
)
from edidctl.core.model import (
    ColorManagement,
    Connector,
    DecodedBlock,
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
    Settings,
    SkippedRegion,
    StandardTiming,
    TimingCodes,
    Unknown,
    UnspecifiedText,
    WhitePoint,
)
from edidctl.core.service import EdidService
from edidctl.core.text_tables import TextTable, cp437_char, latin1_char

__all__ = [
    "BASE_BLOCK_SIZE",
    "decode_edid",
    "EdidctlError",
    "DecodeError",
    "MagicMismatchError",
    "UnexpectedEndError",
    "InputFormatError",
    "SettingsLoadError",
    "SettingsValidationError",
    "VendorRegistryError",
    "ConnectorDiscoveryError",
    "ColorManagement",
    "Connector",
    "DecodedBlock",
    "Descriptor",
    "DetailedTiming",
    "DispatchMode",
    "Display",
    "Dummy",
    "Edid",
    "EstablishedTimings",
    "Header",
    "ProductName",
    "RangeLimits",
    "SerialNumber",
    "Settings",
    "SkippedRegion",
    "StandardTiming",
    "TimingCodes",
    "Unknown",
    "UnspecifiedText",
    "WhitePoint",
    "TextTable",
    "cp437_char",
    "latin1_char",
    "Client",
]


class Client:
    """Public client for decoding identification blocks.

    A `Client` instance wraps settings and vendor registry loading, file and
    sysfs acquisition, and decoding behind a stable API intended for
    third-party tools. Decoding itself holds no state, so one client may be
    shared across threads.
    """

    def __init__(self, *, settings: Settings | None = None) -> None:
        self._service = EdidService(settings=settings)

    @property
    def settings(self) -> Settings:
        return self._service.settings

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def decode(self, data: bytes, *, dispatch: DispatchMode | None = None) -> DecodedBlock:
        return self._service.decode(data, dispatch=dispatch)

    def decode_file(self, path: Path | str, *, dispatch: DispatchMode | None = None) -> DecodedBlock:
        return self._service.decode_file(Path(path), dispatch=dispatch)

    def list_connectors(self) -> list[Connector]:
        return self._service.list_connectors()

    def decode_connector(self, name: str, *, dispatch: DispatchMode | None = None) -> DecodedBlock:
        return self._service.decode_connector(name, dispatch=dispatch)

    def vendor_name(self, code: str) -> str | None:
        return self._service.vendor_name(code)
