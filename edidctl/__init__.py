"""Decoder for display identification (EDID) base blocks."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("edidctl")
except PackageNotFoundError:
    __version__ = "0.0.0"
