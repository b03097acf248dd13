"""Core data models used across decoder, service, and CLI."""

from __future__ import annotations

import enum
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, ClassVar


class DispatchMode(str, enum.Enum):
    """How a monitor descriptor slot is classified."""

    TAGGED = "tagged"
    PRIORITY = "priority"


@dataclass(frozen=True)
class Header:
    vendor: tuple[str, str, str]
    product: int
    serial: int
    week: int
    year: int  # offset from 1990
    version: int
    revision: int

    @property
    def vendor_code(self) -> str:
        return "".join(self.vendor)

    @property
    def manufacture_year(self) -> int:
        return 1990 + self.year

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["vendor"] = self.vendor_code
        data["manufacture_year"] = self.manufacture_year
        return data


@dataclass(frozen=True)
class Display:
    video_input: int
    width: int  # cm
    height: int  # cm
    gamma: int  # (gamma * 100) - 100
    features: int

    @property
    def gamma_value(self) -> float:
        """Display transfer characteristic, 1.00 to 3.54."""
        return round(self.gamma / 100 + 1.00, 2)

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["gamma_value"] = self.gamma_value
        return data


@dataclass(frozen=True)
class SkippedRegion:
    """A fixed-size region that was consumed but not interpreted."""

    name: str
    offset: int
    length: int


@dataclass(frozen=True)
class Descriptor:
    kind: ClassVar[str] = "descriptor"

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"kind": self.kind}
        for item in fields(self):
            value = getattr(self, item.name)
            data[item.name] = value.hex() if isinstance(value, bytes) else value
        return data


@dataclass(frozen=True)
class DetailedTiming(Descriptor):
    kind: ClassVar[str] = "detailed_timing"

    pixel_clock: int  # kHz
    horizontal_active_pixels: int
    horizontal_blanking_pixels: int
    vertical_active_lines: int
    vertical_blanking_lines: int
    horizontal_front_porch: int
    horizontal_sync_width: int
    vertical_front_porch: int
    vertical_sync_width: int
    horizontal_size: int  # mm
    vertical_size: int  # mm
    # Border pixels on one side of the screen.
    horizontal_border_pixels: int
    vertical_border_pixels: int
    features: int


@dataclass(frozen=True)
class TextDescriptor(Descriptor):
    text: str


@dataclass(frozen=True)
class SerialNumber(TextDescriptor):
    kind: ClassVar[str] = "serial_number"


@dataclass(frozen=True)
class UnspecifiedText(TextDescriptor):
    kind: ClassVar[str] = "unspecified_text"


@dataclass(frozen=True)
class ProductName(TextDescriptor):
    kind: ClassVar[str] = "product_name"


@dataclass(frozen=True)
class PlaceholderDescriptor(Descriptor):
    """A recognised descriptor kind whose payload is not decoded yet."""

    payload: bytes


@dataclass(frozen=True)
class RangeLimits(PlaceholderDescriptor):
    kind: ClassVar[str] = "range_limits"


@dataclass(frozen=True)
class WhitePoint(PlaceholderDescriptor):
    kind: ClassVar[str] = "white_point"


@dataclass(frozen=True)
class StandardTiming(PlaceholderDescriptor):
    kind: ClassVar[str] = "standard_timing"


@dataclass(frozen=True)
class ColorManagement(PlaceholderDescriptor):
    kind: ClassVar[str] = "color_management"


@dataclass(frozen=True)
class TimingCodes(PlaceholderDescriptor):
    kind: ClassVar[str] = "timing_codes"


@dataclass(frozen=True)
class EstablishedTimings(PlaceholderDescriptor):
    kind: ClassVar[str] = "established_timings"


@dataclass(frozen=True)
class Dummy(PlaceholderDescriptor):
    kind: ClassVar[str] = "dummy"


@dataclass(frozen=True)
class Unknown(Descriptor):
    kind: ClassVar[str] = "unknown"

    data: bytes
    tag: int | None = None


@dataclass(frozen=True)
class Edid:
    header: Header
    display: Display
    chromaticity: SkippedRegion
    established_timings: SkippedRegion
    standard_timings: SkippedRegion
    descriptors: tuple[Descriptor, ...]

    @property
    def detailed_timings(self) -> tuple[DetailedTiming, ...]:
        return tuple(d for d in self.descriptors if isinstance(d, DetailedTiming))

    @property
    def product_name(self) -> str | None:
        return _first_text(self.descriptors, ProductName)

    @property
    def serial_text(self) -> str | None:
        return _first_text(self.descriptors, SerialNumber)

    def as_dict(self) -> dict[str, Any]:
        return {
            "header": self.header.as_dict(),
            "display": self.display.as_dict(),
            "skipped": [
                asdict(region)
                for region in (self.chromaticity, self.established_timings, self.standard_timings)
            ],
            "descriptors": [descriptor.as_dict() for descriptor in self.descriptors],
        }


def _first_text(descriptors: tuple[Descriptor, ...], kind: type[TextDescriptor]) -> str | None:
    for descriptor in descriptors:
        if isinstance(descriptor, kind):
            return descriptor.text
    return None


@dataclass(frozen=True)
class Settings:
    dispatch: DispatchMode = DispatchMode.TAGGED
    text_table: str = "cp437"
    sysfs_root: Path = Path("/sys/class/drm")


@dataclass(frozen=True)
class Connector:
    name: str
    path: Path
    status: str
    edid_size: int


@dataclass(frozen=True)
class DecodedBlock:
    source: str
    edid: Edid
    trailing: bytes
