"""Runtime wiring helper for CLI applications."""

from dataclasses import dataclass
from pathlib import Path

from .adapters.fs_listing import FsListing
from .adapters.yaml_settings import YamlSettingsStore
from .config import ZettelConfig, ZettelSettings, load_config


@dataclass
class Runtime:
    """Container for all wired components."""
    vault_path: Path
    config: ZettelConfig
    store: YamlSettingsStore
    listing: FsListing

    def settings(self) -> ZettelSettings:
        """Effective settings: defaults < zettel.toml < persisted settings.

        Read on every call so an edit to the settings file applies to the
        next event.
        """
        return self.store.load(self.config.settings)


def build_runtime(
    vault_path: Path | None = None,
    config_path: Path | None = None,
) -> Runtime:
    """Build and wire all components for a vault."""
    config = load_config(config_path=config_path, vault_path=vault_path)

    if vault_path is None:
        vault_path = config.vault.root

    return Runtime(
        vault_path=vault_path,
        config=config,
        store=YamlSettingsStore(vault_path),
        listing=FsListing(vault_path),
    )
