from __future__ import annotations

from pathlib import Path

import pytest

from edidctl.core.errors import SettingsValidationError, VendorRegistryError
from edidctl.core.loader import load_settings, load_vendors
from edidctl.core.model import DispatchMode, Settings


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_missing_settings_file_gives_defaults() -> None:
    settings = load_settings()
    assert settings == Settings()
    assert settings.dispatch is DispatchMode.TAGGED
    assert settings.text_table == "cp437"


def test_settings_file_is_applied(tmp_path: Path) -> None:
    _write(
        tmp_path / "cfg" / "edidctl" / "settings.yaml",
        """
dispatch: priority
text_table: latin-1
sysfs_root: /tmp/fake-drm
""",
    )

    settings = load_settings()
    assert settings.dispatch is DispatchMode.PRIORITY
    assert settings.text_table == "latin-1"
    assert settings.sysfs_root == Path("/tmp/fake-drm")


def test_empty_settings_file_gives_defaults(tmp_path: Path) -> None:
    _write(tmp_path / "cfg" / "edidctl" / "settings.yaml", "")
    assert load_settings() == Settings()


def test_unknown_dispatch_rejected(tmp_path: Path) -> None:
    _write(tmp_path / "cfg" / "edidctl" / "settings.yaml", "dispatch: guess\n")
    with pytest.raises(SettingsValidationError):
        load_settings()


def test_unknown_settings_key_rejected(tmp_path: Path) -> None:
    _write(tmp_path / "cfg" / "edidctl" / "settings.yaml", "validate_checksum: true\n")
    with pytest.raises(SettingsValidationError):
        load_settings()


def test_duplicate_settings_keys_rejected(tmp_path: Path) -> None:
    _write(
        tmp_path / "cfg" / "edidctl" / "settings.yaml",
        """
dispatch: tagged
dispatch: priority
""",
    )
    with pytest.raises(SettingsValidationError):
        load_settings()


def test_explicit_settings_path(tmp_path: Path) -> None:
    path = tmp_path / "elsewhere.yaml"
    _write(path, "dispatch: priority\n")
    assert load_settings(path).dispatch is DispatchMode.PRIORITY


def test_packaged_vendors_load() -> None:
    loaded = load_vendors()
    assert loaded.vendors["SAM"] == "Samsung Electric Company"
    assert loaded.vendors["SHP"] == "Sharp Corporation"
    assert loaded.warnings == ()


def test_user_vendor_file_adds_and_overrides(tmp_path: Path) -> None:
    _write(
        tmp_path / "data" / "edidctl" / "vendors" / "local.yaml",
        """
vendors:
  xyz: Example Displays
  SAM: Samsung
""",
    )

    loaded = load_vendors()
    assert loaded.vendors["XYZ"] == "Example Displays"
    assert loaded.vendors["SAM"] == "Samsung"
    assert any("overrides" in warning for warning in loaded.warnings)


def test_three_letter_codes_stay_strings(tmp_path: Path) -> None:
    _write(
        tmp_path / "data" / "edidctl" / "vendors" / "words.yaml",
        """
vendors:
  OFF: Office Displays
  YES: Yes Vision
""",
    )

    loaded = load_vendors()
    assert loaded.vendors["OFF"] == "Office Displays"
    assert loaded.vendors["YES"] == "Yes Vision"


def test_invalid_vendor_code_rejected(tmp_path: Path) -> None:
    _write(
        tmp_path / "data" / "edidctl" / "vendors" / "bad.yaml",
        """
vendors:
  SAMS: Too Long
""",
    )
    with pytest.raises(VendorRegistryError):
        load_vendors()


def test_duplicate_vendor_keys_rejected(tmp_path: Path) -> None:
    _write(
        tmp_path / "data" / "edidctl" / "vendors" / "dup.yaml",
        """
vendors:
  ABC: First
  ABC: Second
""",
    )
    with pytest.raises(VendorRegistryError):
        load_vendors()
