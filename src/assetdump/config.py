"""Configuration management for assetdump."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import CONFIG_FILE, DEFAULT_MANIFEST, DEFAULT_PERIOD, DEFAULT_WRITE_TO
from .errors import ConfigurationError


class AssetsConfig(BaseModel):
    """Where assets are defined and written."""

    manifest: Path = Field(default=Path(DEFAULT_MANIFEST), description="Asset manifest path")
    write_to: Path = Field(default=Path(DEFAULT_WRITE_TO), description="Output root")
    debug: bool = Field(default=True, description="Global debug flag")


class WatchConfig(BaseModel):
    """Configuration for watch mode."""

    period: float = Field(default=DEFAULT_PERIOD, gt=0, description="Polling period in seconds")
    dirs: list[Path] = Field(
        default_factory=list, description="Source directories watched for filesystem events"
    )


class AssetDumpConfig(BaseModel):
    """Root configuration for assetdump."""

    assets: AssetsConfig = Field(default_factory=AssetsConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)

    def resolve_paths(self, base_dir: Path) -> "AssetDumpConfig":
        """Return a copy with relative paths anchored at ``base_dir``."""
        manifest = base_dir / self.assets.manifest
        return self.model_copy(
            update={
                "assets": self.assets.model_copy(
                    update={"manifest": manifest, "write_to": base_dir / self.assets.write_to}
                ),
                "watch": self.watch.model_copy(
                    update={"dirs": [base_dir / d for d in self.watch.dirs] or [manifest.parent]}
                ),
            }
        )


def load_config(config_path: Path) -> AssetDumpConfig:
    """Load config from assetdump.toml.

    Args:
        config_path: Path to the config file

    Returns:
        Loaded configuration with paths resolved against the file's directory,
        or defaults if the file doesn't exist

    Raises:
        ConfigurationError: If the file is not valid TOML or fails validation
    """
    base_dir = config_path.parent
    if not config_path.exists():
        return AssetDumpConfig().resolve_paths(base_dir)
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        config = AssetDumpConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigurationError(f"Invalid config {config_path}: {e}") from e
    return config.resolve_paths(base_dir)


def write_config_template(project_dir: Path) -> Path:
    """Write default assetdump.toml template.

    Args:
        project_dir: Directory to write the config into

    Returns:
        Path to the written config file
    """
    config_path = project_dir / CONFIG_FILE
    template = {
        "assets": {
            "manifest": DEFAULT_MANIFEST,
            "write_to": DEFAULT_WRITE_TO,
            "debug": True,
        },
        "watch": {
            "period": DEFAULT_PERIOD,
            "dirs": [],
        },
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path
