import io
from pathlib import Path

import yaml

from ..config import ConfigError, ZettelSettings, merge_settings
from ..core.ports import SettingsStore
from ..format.formatter import write_atomic

SETTINGS_FILE = Path(".zettel") / "settings.yaml"


class YamlSettingsStore(SettingsStore):
    """Settings persisted as YAML under <vault>/.zettel/settings.yaml."""

    def __init__(self, vault_root: Path):
        self.path = vault_root / SETTINGS_FILE

    def load(self, defaults: ZettelSettings) -> ZettelSettings:
        if not self.path.exists():
            return defaults
        try:
            data = yaml.safe_load(io.StringIO(self.path.read_text(encoding="utf-8"))) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid settings file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {self.path} must contain a mapping")
        return merge_settings(defaults, data)

    def save(self, settings: ZettelSettings) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        buf = io.StringIO()
        yaml.safe_dump(settings.to_dict(), buf, sort_keys=False, allow_unicode=True)
        write_atomic(self.path, buf.getvalue())
