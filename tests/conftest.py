from __future__ import annotations

from pathlib import Path

import pytest

HEADER_MAGIC = "00ffffffffffff00"

# 1680x1050 analog panel: vendor SAM, product 596.
SYNCMASTER_PARTS = (
    HEADER_MAGIC,
    "4c2d" "5402" "32325044" "1b" "11" "01" "03",
    "0e2f1e782a",
    "ee91a3544c99260f5054",
    "bfef80",
    "714f8100814081809500950fb3000101",
    "21399030621a274068b03600da281100001c",
    "000000fd00384b1e5111000a202020202020",
    "000000fc0053796e634d61737465720a2020",
    "000000ff00485333503730313130350a2020",
    "00",
)

# 1920x1080 eDP laptop panel: vendor SHP, product 5193.
EDP_PARTS = (
    HEADER_MAGIC,
    "4d10" "4914" "00000000" "20" "19" "01" "04",
    "a51d11780e",
    "de50a3544c99260f5054",
    "000000",
    "01010101010101010101010101010101",
    "1a3680a070381f4030203500 26a510000018",
    "0000001000" "00000000000000000000000000",
    "000000fe00444a435036804c513133334d31",
    "0000000000024103280012 00000b010a2020",
    "00",
)


def build_block(parts: tuple[str, ...]) -> bytes:
    """Join hex parts and append the checksum byte."""
    body = bytes.fromhex("".join(part.replace(" ", "") for part in parts))
    assert len(body) == 127, len(body)
    return body + bytes([(-sum(body)) & 0xFF])


@pytest.fixture
def syncmaster_block() -> bytes:
    return build_block(SYNCMASTER_PARTS)


@pytest.fixture
def edp_block() -> bytes:
    return build_block(EDP_PARTS)


@pytest.fixture(autouse=True)
def isolated_xdg(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return tmp_path
