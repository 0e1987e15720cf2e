"""Application context management for the CLI."""

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from metasync.cli.common.exits import die
from metasync.core.config import SyncConfig
from metasync.core.errors import SyncConfigError


@dataclass
class AppContext:
    """Application context holding the effective sync configuration."""

    config_path: Path | None
    config: SyncConfig

    def with_overrides(self, **overrides: Any) -> SyncConfig:
        """Return the config with CLI overrides applied (None values are ignored)."""
        updates = {k: v for k, v in overrides.items() if v is not None}
        return replace(self.config, **updates)


def build_app_context(config_path: Path | None) -> AppContext:
    """Build and return the application context with the loaded configuration.

    Args:
        config_path: Optional explicit TOML config path.

    Returns:
        AppContext: Context with the configuration after env > TOML > defaults.
    """
    try:
        config = SyncConfig.load(config_path)
    except SyncConfigError as exc:
        die(str(exc), code=2)
    return AppContext(config_path=config_path, config=config)
