"""Configuration loader for zettel.toml."""

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

ID_FORMATS = ("folgezettel", "timestamp", "custom")

DEFAULT_CUSTOM_REGEX = "([0-9]+[a-z0-9-]*)"


class ConfigError(ValueError):
    """Raised for malformed configuration files or values."""


@dataclass(frozen=True)
class ZettelSettings:
    """Snapshot of the link aliasing and indentation settings."""
    id_format: str = "folgezettel"
    custom_regex: str = DEFAULT_CUSTOM_REGEX
    enable_indentation: bool = True
    include_folders: list[str] = field(default_factory=list)
    exclude_folders: list[str] = field(default_factory=list)

    def replace(self, **changes: Any) -> "ZettelSettings":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id_format": self.id_format,
            "custom_regex": self.custom_regex,
            "enable_indentation": self.enable_indentation,
            "include_folders": list(self.include_folders),
            "exclude_folders": list(self.exclude_folders),
        }


SETTING_KEYS = tuple(f.name for f in fields(ZettelSettings))


@dataclass
class VaultConfig:
    """Vault-specific configuration."""
    root: Path


@dataclass
class ZettelConfig:
    """Complete folgezettel configuration."""
    vault: VaultConfig
    settings: ZettelSettings


def parse_folder_list(value: Any) -> list[str]:
    """Parse a folder list from a newline-delimited string or a list.

    Blank entries are dropped and surrounding whitespace is stripped, which
    matches how the settings form accepts one folder per line.
    """
    if value is None:
        return []
    if isinstance(value, str):
        items = value.splitlines()
    elif isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        raise ConfigError(f"Expected a folder list, got {type(value).__name__}")
    return [item.strip() for item in items if item.strip()]


def parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "yes", "on", "1"):
            return True
        if lowered in ("false", "no", "off", "0"):
            return False
    raise ConfigError(f"Expected a boolean, got {value!r}")


def merge_settings(base: ZettelSettings, data: dict[str, Any]) -> ZettelSettings:
    """Merge a raw settings mapping over ``base``.

    Unknown keys are ignored so that older or newer settings files load.
    """
    changes: dict[str, Any] = {}

    if "id_format" in data:
        id_format = str(data["id_format"]).strip()
        if id_format not in ID_FORMATS:
            raise ConfigError(
                f"Unknown id_format {id_format!r} (expected one of {', '.join(ID_FORMATS)})"
            )
        changes["id_format"] = id_format

    if "custom_regex" in data:
        # A blank YAML value loads as None
        raw = data["custom_regex"]
        changes["custom_regex"] = "" if raw is None else str(raw)

    if "enable_indentation" in data:
        changes["enable_indentation"] = parse_bool(data["enable_indentation"])

    for key in ("include_folders", "exclude_folders"):
        if key in data:
            changes[key] = parse_folder_list(data[key])

    return base.replace(**changes) if changes else base


def load_config(config_path: Path | None = None, vault_path: Path | None = None) -> ZettelConfig:
    """
    Load configuration from zettel.toml.

    Search order:
    1. config_path (if provided)
    2. cwd/zettel.toml
    3. vault_path/zettel.toml

    Args:
        config_path: Explicit path to config file
        vault_path: Vault root path for fallback search

    Returns:
        ZettelConfig with resolved settings
    """
    toml_data: dict[str, Any] = {}

    search_paths = []
    if config_path:
        search_paths.append(config_path)
    search_paths.append(Path.cwd() / "zettel.toml")
    if vault_path:
        search_paths.append(vault_path / "zettel.toml")

    for path in search_paths:
        if path.exists():
            try:
                with open(path, "rb") as f:
                    toml_data = tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise ConfigError(f"Invalid config file {path}: {e}") from e
            break

    vault_data = toml_data.get("vault", {})
    vault_root = Path(vault_data.get("root", vault_path or Path(".")))

    zettel_data = toml_data.get("zettel", {})
    if not isinstance(zettel_data, dict):
        raise ConfigError("[zettel] must be a table")
    settings = merge_settings(ZettelSettings(), zettel_data)

    return ZettelConfig(
        vault=VaultConfig(root=vault_root),
        settings=settings,
    )
