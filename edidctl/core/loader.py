"""Settings and vendor registry loading for edidctl."""

from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any

import yaml
from jsonschema import ValidationError, validators

from edidctl.core.errors import SettingsLoadError, SettingsValidationError, VendorRegistryError
from edidctl.core.model import DispatchMode, Settings

_VENDOR_CODE_RE = re.compile(r"^[A-Z]{3}$")
LOGGER = logging.getLogger(__name__)


class DuplicateKeyError(yaml.YAMLError):
    """Raised by the YAML loader when a mapping repeats a key."""


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

# Three-letter codes such as "YES" or "OFF" must stay strings.
for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise DuplicateKeyError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedVendors:
    vendors: dict[str, str]
    warnings: tuple[str, ...]


def _load_schema_validator(name: str) -> Any:
    schema_text = resources.files("edidctl.schemas").joinpath(name).read_text(encoding="utf-8")
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def settings_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "edidctl/settings.yaml"


def _vendor_dir() -> Path:
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_data / "edidctl/vendors"


def _read_yaml(path: Path | Traversable, *, error_cls: type[Exception], invalid_cls: type[Exception]) -> Any:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise error_cls(f"Could not read {path}: {exc}") from exc

    try:
        return yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise invalid_cls(f"Invalid YAML in {path}: {exc}") from exc


def _validate(doc: Any, schema_name: str, source: Path | Traversable, error_cls: type[Exception]) -> None:
    validator = _load_schema_validator(schema_name)
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise error_cls(f"Schema validation failed for {source}{where}: {exc.message}") from exc


def load_settings(path: Path | None = None) -> Settings:
    """Read settings, falling back to defaults when no file exists."""
    source = path or settings_path()
    if not source.exists():
        return Settings()

    doc = _read_yaml(source, error_cls=SettingsLoadError, invalid_cls=SettingsValidationError)
    if doc is None:
        return Settings()
    _validate(doc, "settings.schema.json", source, SettingsValidationError)

    defaults = Settings()
    return Settings(
        dispatch=DispatchMode(doc.get("dispatch", defaults.dispatch.value)),
        text_table=doc.get("text_table", defaults.text_table),
        sysfs_root=Path(doc["sysfs_root"]) if "sysfs_root" in doc else defaults.sysfs_root,
    )


def _build_vendors(doc: Any, source: Path | Traversable) -> dict[str, str]:
    _validate(doc, "vendors.schema.json", source, VendorRegistryError)
    vendors: dict[str, str] = {}
    for code, name in doc["vendors"].items():
        normalized = str(code).strip().upper()
        if not _VENDOR_CODE_RE.match(normalized):
            raise VendorRegistryError(f"Vendor code '{code}' in {source} must be three letters A-Z")
        vendors[normalized] = name.strip()
    return vendors


def _iter_packaged_vendor_paths() -> list[Traversable]:
    vendor_root = resources.files("edidctl.vendors")
    return [item for item in vendor_root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_vendor_paths() -> list[Path]:
    directory = _vendor_dir()
    if not directory.exists() or not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"})


def load_vendors() -> LoadedVendors:
    vendors: dict[str, str] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_vendor_paths(), key=lambda p: p.name):
        doc = _read_yaml(path, error_cls=VendorRegistryError, invalid_cls=VendorRegistryError)
        vendors.update(_build_vendors(doc, path))

    for path in _iter_user_vendor_paths():
        doc = _read_yaml(path, error_cls=VendorRegistryError, invalid_cls=VendorRegistryError)
        for code, name in _build_vendors(doc, path).items():
            if code in vendors and vendors[code] != name:
                warning = f"User vendor entry '{code}' in {path.name} overrides '{vendors[code]}'"
                LOGGER.warning(warning)
                warnings.append(warning)
            vendors[code] = name

    return LoadedVendors(vendors=vendors, warnings=tuple(warnings))
