"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from rcsync.config import SyncConfig, load_config


class TestSyncConfig:
    """Test configuration defaults and overrides."""
    
    def test_defaults(self):
        """Test the default device layout."""
        config = SyncConfig()
        
        assert config.device_root == Path("/Volumes/BOSS_RC-202/ROLAND/WAVE")
        assert config.backup_root is None
        assert config.signature_bytes == 65536
        assert list(config.banks) == [1, 2, 3, 4, 5, 6, 7, 8]
    
    def test_overrides_skip_none(self, tmp_path):
        """Test None overrides keep the current value."""
        config = SyncConfig(backup_root=tmp_path).with_overrides(device_root=None, backup_root=None)
        
        assert config.backup_root == tmp_path
    
    def test_overrides_are_validated(self, tmp_path):
        """Test override values go through validation."""
        config = SyncConfig().with_overrides(backup_root=str(tmp_path))
        
        assert config.backup_root == tmp_path
        with pytest.raises(ValidationError):
            SyncConfig().with_overrides(signature_bytes=0)


class TestLoadConfig:
    """Test reading configuration files."""
    
    def test_missing_file_gives_defaults(self, tmp_path):
        """Test defaults are used without a config file."""
        assert load_config(tmp_path / "absent.yaml") == SyncConfig()
    
    def test_yaml_file(self, tmp_path):
        """Test values are read from YAML."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            "device_root: /media/RC-505/ROLAND/WAVE\n"
            "backup_root: /srv/loops\n"
            "signature_bytes: 4096\n"
        )
        
        config = load_config(config_path)
        
        assert config.device_root == Path("/media/RC-505/ROLAND/WAVE")
        assert config.backup_root == Path("/srv/loops")
        assert config.signature_bytes == 4096
    
    def test_empty_yaml_file(self, tmp_path):
        """Test an empty file means defaults."""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("")
        
        assert load_config(config_path) == SyncConfig()
