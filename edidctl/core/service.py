"""Service layer used by CLI and the public API."""

from __future__ import annotations

import logging
import re
from pathlib import Path

from edidctl.core.decoder import HEADER_MAGIC, decode_edid
from edidctl.core.errors import ConnectorDiscoveryError, InputFormatError
from edidctl.core.loader import load_settings, load_vendors
from edidctl.core.model import Connector, DecodedBlock, DispatchMode, Edid, Settings
from edidctl.core.text_tables import get_text_table

_HEX_RE = re.compile(r"^[0-9a-f]*$")
_CONNECTOR_RE = re.compile(r"^card\d+-[A-Za-z0-9-]+$")
_TEXT_WHITESPACE = frozenset("\t\n\r\x0b\x0c")
LOGGER = logging.getLogger(__name__)


class EdidService:
    def __init__(self, *, settings: Settings | None = None) -> None:
        self.settings = settings or load_settings()
        loaded = load_vendors()
        self.vendors = loaded.vendors
        self.load_warnings = loaded.warnings
        self.text_table = get_text_table(self.settings.text_table)

    def decode(
        self,
        data: bytes,
        *,
        source: str = "<bytes>",
        dispatch: DispatchMode | None = None,
    ) -> DecodedBlock:
        mode = dispatch or self.settings.dispatch
        LOGGER.debug("decoding %d bytes from %s (dispatch=%s)", len(data), source, mode.value)
        edid, trailing = decode_edid(data, dispatch=mode, text_table=self.text_table)
        return DecodedBlock(source=source, edid=edid, trailing=trailing)

    def decode_file(self, path: Path, *, dispatch: DispatchMode | None = None) -> DecodedBlock:
        return self.decode(read_edid_file(path), source=str(path), dispatch=dispatch)

    def list_connectors(self) -> list[Connector]:
        return _discover_connectors(self.settings.sysfs_root)

    def decode_connector(self, name: str, *, dispatch: DispatchMode | None = None) -> DecodedBlock:
        if not _CONNECTOR_RE.fullmatch(name):
            raise ConnectorDiscoveryError(
                f"Invalid connector name '{name}'. Expected a DRM connector such as 'card0-HDMI-A-1'."
            )
        edid_path = self.settings.sysfs_root / name / "edid"
        if not edid_path.is_file():
            raise ConnectorDiscoveryError(
                f"Unknown connector '{name}'. Use 'edidctl connectors' to list available connectors."
            )
        data = _read_sysfs_bytes(edid_path)
        if not data:
            raise ConnectorDiscoveryError(f"Connector '{name}' reports no EDID. Is a display attached?")
        return self.decode(data, source=name, dispatch=dispatch)

    def vendor_name(self, code: str) -> str | None:
        return self.vendors.get(code.strip().upper())

    def describe(self, edid: Edid) -> str:
        """One-line summary: vendor, product code and name."""
        code = edid.header.vendor_code
        vendor = self.vendor_name(code) or "unknown vendor"
        product = edid.product_name or f"product 0x{edid.header.product:04x}"
        return f"{code} ({vendor}) {product}"


def read_edid_file(path: Path) -> bytes:
    """Return the bytes of a raw binary dump or of a hex text dump."""
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise InputFormatError(f"Could not read {path}: {exc}") from exc

    if raw.startswith(HEADER_MAGIC):
        return raw
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError:
        return raw
    if any(ch < " " and ch not in _TEXT_WHITESPACE for ch in text):
        # Control bytes: a short or corrupt binary dump, not hex text.
        return raw
    return _parse_hex_dump(text, source=path)


def _parse_hex_dump(text: str, *, source: Path) -> bytes:
    tokens = [token.lower().removeprefix("0x") for token in text.split()]
    normalized = "".join(tokens)
    if len(normalized) == 0:
        raise InputFormatError(f"{source} is empty")
    if len(normalized) % 2 != 0:
        raise InputFormatError(f"{source} must have even-length hex")
    if not _HEX_RE.match(normalized):
        raise InputFormatError(f"{source} is neither a binary dump nor hex text")
    return bytes.fromhex(normalized)


def _read_sysfs_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise ConnectorDiscoveryError(f"Could not read {path}: {exc}") from exc


def _discover_connectors(root: Path) -> list[Connector]:
    if not root.is_dir():
        LOGGER.debug("sysfs root %s does not exist", root)
        return []

    connectors: list[Connector] = []
    for entry in sorted(root.iterdir(), key=lambda p: p.name):
        if not _CONNECTOR_RE.match(entry.name):
            continue
        edid_path = entry / "edid"
        if not edid_path.is_file():
            continue
        status_path = entry / "status"
        status = "unknown"
        if status_path.is_file():
            try:
                status = status_path.read_text(encoding="utf-8").strip() or "unknown"
            except OSError as exc:
                raise ConnectorDiscoveryError(f"Could not read {status_path}: {exc}") from exc
        connectors.append(
            Connector(
                name=entry.name,
                path=edid_path,
                status=status,
                edid_size=len(_read_sysfs_bytes(edid_path)),
            )
        )
    return connectors
