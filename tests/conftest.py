"""Shared fixtures for rc-sync tests."""

from pathlib import Path
from typing import List, Optional

import pytest

from rcsync.config import SyncConfig
from rcsync.device.slots import bank_of
from rcsync.sync.storage import BackupStorage


class Layout:
    """A fake device and backup directory under a temporary path."""
    
    def __init__(self, root: Path):
        self.root = root
        self.device_root = root / "device"
        self.backup_root = root / "backup"
        self.device_root.mkdir()
        self.config = SyncConfig(device_root=self.device_root, backup_root=self.backup_root)
        self.storage = BackupStorage(self.config)
    
    def device_track(self, slot: str, data: bytes = b"RIFF-device") -> Path:
        path = self.device_root / slot / f"{slot}.WAV"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
    
    def backup_track(self, slot: str, data: bytes = b"RIFF-backup", bank: Optional[int] = None) -> Path:
        if bank is None:
            bank = bank_of(slot)
        path = self.backup_root / f"bank_{bank}" / f"{slot}.WAV"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
    
    def export_track(self, export_name: str, slot: str, data: bytes = b"RIFF-export") -> Path:
        path = self.backup_root / "exports" / export_name / f"{slot}.WAV"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path
    
    def device_files(self) -> List[str]:
        return sorted(p.name for p in self.device_root.glob("*/*.WAV"))
    
    def bank_files(self, bank: int) -> List[str]:
        bank_dir = self.backup_root / f"bank_{bank}"
        return sorted(p.name for p in bank_dir.glob("*.WAV"))


class ScriptedDecisions:
    """Decision source that replays canned answers and records the questions."""
    
    def __init__(self, *answers: str):
        self.answers = list(answers)
        self.questions: List[str] = []
    
    def ask(self, message: str, default: Optional[str] = None) -> str:
        self.questions.append(message)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt: {message}")
        return self.answers.pop(0)


@pytest.fixture
def layout(tmp_path):
    return Layout(tmp_path)
