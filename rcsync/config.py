"""Configuration management for rc-sync."""

from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from ruamel.yaml import YAML

DEFAULT_CONFIG_PATH = Path.home() / ".config/rc-sync/config.yaml"


class SyncConfig(BaseModel):
    """Paths and layout settings for one sync run."""
    
    model_config = ConfigDict(validate_assignment=True)
    
    device_root: Path = Field(
        default=Path("/Volumes/BOSS_RC-202/ROLAND/WAVE"),
        description="Directory on the mounted device holding the NNN_K slot folders"
    )
    backup_root: Optional[Path] = Field(default=None, description="Root of the local backup tree")
    
    track_extension: str = Field(default="WAV", description="Extension of track files")
    signature_bytes: int = Field(default=65536, gt=0, description="Bytes hashed when comparing tracks")
    bank_count: int = Field(default=8, ge=1, description="Number of banks on the device")
    slots_per_bank: int = Field(default=8, ge=1, description="Slots grouped into one bank")
    
    log_file_name: str = Field(default="sync_log.txt", description="Sync log inside the backup root")
    exports_dir_name: str = Field(default="exports", description="Export snapshot directory")
    lock_file_name: str = Field(default=".rc-sync.lock", description="Advisory run lock file")
    log_level: str = Field(default="INFO", description="Logging level")
    
    @property
    def banks(self) -> range:
        """Valid bank numbers."""
        return range(1, self.bank_count + 1)
    
    def with_overrides(self, **overrides) -> "SyncConfig":
        """Return a copy with every non-None override applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return SyncConfig(**{**self.model_dump(), **values})


def load_config(config_path: Optional[Path] = None) -> SyncConfig:
    """Load configuration from a YAML file, or return defaults when there is none."""
    
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
    
    if not config_path.exists():
        return SyncConfig()
    
    yaml = YAML(typ="safe")
    with open(config_path, "r") as f:
        data = yaml.load(f) or {}
    return SyncConfig(**data)
