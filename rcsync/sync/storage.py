"""Backup storage layout management."""

import os
import typing as t
from datetime import datetime
from pathlib import Path

from ..config import SyncConfig
from ..device.slots import bank_of
from ..errors import BackupDirUnwritable, BackupLocked, CopyFailed, MalformedSlotName
from ..util.logging import SUCCESS, get_logger
from ..util.paths import ensure_directory, list_tracks
from ..util.timeutil import generate_snapshot_stamp

logger = get_logger(__name__)


class BackupLock:
    """Advisory lock file that keeps two runs off the same backup root."""
    
    def __init__(self, path: Path) -> None:
        self.path = path
        self._held = False
    
    def acquire(self) -> None:
        """Create the lock file, replacing it once if its owner is gone.
        
        Raises:
            BackupLocked: If a live process holds the lock
        """
        for _ in range(2):
            try:
                fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
            except FileExistsError:
                if not self._is_stale():
                    break
                logger.warning(f"Removing stale lock file: {self.path}")
                self.path.unlink(missing_ok=True)
                continue
            
            with os.fdopen(fd, "w") as f:
                f.write(str(os.getpid()))
            self._held = True
            logger.debug(f"Acquired lock {self.path}")
            return
        
        raise BackupLocked(f"Another rc-sync run is using this backup directory ({self.path})")
    
    def release(self) -> None:
        """Remove the lock file if this instance created it."""
        if self._held:
            self.path.unlink(missing_ok=True)
            self._held = False
            logger.debug(f"Released lock {self.path}")
    
    def _is_stale(self) -> bool:
        try:
            pid = int(self.path.read_text().strip())
        except (OSError, ValueError):
            return True
        
        # os.kill would terminate the process on Windows
        if os.name == "nt" or pid == os.getpid():
            return False
        
        try:
            os.kill(pid, 0)
        except ProcessLookupError:
            return True
        except PermissionError:
            return False
        return False
    
    def __enter__(self) -> "BackupLock":
        self.acquire()
        return self
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


class BackupStorage:
    """Manages the bank/export layout under the backup root."""
    
    def __init__(self, config: SyncConfig) -> None:
        """Initialize backup storage.
        
        Args:
            config: Sync configuration; ``backup_root`` must be set
        """
        if config.backup_root is None:
            raise BackupDirUnwritable("No backup directory configured")
        
        self.config = config
        self.base_path = Path(config.backup_root)
    
    @property
    def exports_dir(self) -> Path:
        return self.base_path / self.config.exports_dir_name
    
    @property
    def log_file(self) -> Path:
        return self.base_path / self.config.log_file_name
    
    @property
    def lock_file(self) -> Path:
        return self.base_path / self.config.lock_file_name
    
    def prepare(self) -> Path:
        """Create the backup root if it does not exist yet.
        
        Returns:
            The backup root
        
        Raises:
            BackupDirUnwritable: If the directory cannot be created
        """
        if self.base_path.is_dir():
            logger.info(f"Backup directory already exists: {self.base_path}")
            return self.base_path
        
        logger.info(f"Creating backup directory: {self.base_path}")
        try:
            ensure_directory(self.base_path)
        except OSError as e:
            raise BackupDirUnwritable(f"Failed to create backup directory {self.base_path}: {e}") from e
        
        logger.log(SUCCESS, "Backup directory created successfully")
        return self.base_path
    
    def lock(self) -> BackupLock:
        """Get the run lock for this backup root."""
        return BackupLock(self.lock_file)
    
    def get_bank_dir(self, bank: int) -> Path:
        """Get the backup directory of a bank."""
        return self.base_path / f"bank_{bank}"
    
    def bank_exists(self, bank: int) -> bool:
        """Check whether a bank has ever been synced."""
        return self.get_bank_dir(bank).is_dir()
    
    def get_backup_track(self, slot: str, bank: int) -> Path:
        """Path of a slot's track in the backup."""
        return self.get_bank_dir(bank) / f"{slot}.{self.config.track_extension}"
    
    def list_bank_tracks(self, bank: int) -> t.List[Path]:
        """List backup tracks of a bank, skipping files that belong elsewhere.
        
        Args:
            bank: Bank number
        
        Returns:
            Sorted list of track paths
        """
        tracks = []
        
        for track in list_tracks(self.get_bank_dir(bank), self.config.track_extension):
            try:
                track_bank = bank_of(track.stem, self.config.slots_per_bank)
            except MalformedSlotName:
                logger.debug(f"Ignoring unexpected file in bank_{bank}: {track.name}")
                continue
            if track_bank == bank:
                tracks.append(track)
        
        return tracks
    
    def get_export_dir(self, name: str) -> Path:
        """Get the directory of a named export snapshot."""
        return self.exports_dir / name
    
    def create_export_snapshot(
        self,
        bank: int,
        name: t.Optional[str] = None,
        timestamp: t.Optional[datetime] = None
    ) -> Path:
        """Create a new, empty export snapshot directory.
        
        Args:
            bank: Bank being exported
            name: Snapshot name (``<date>_bank_<N>`` if None)
            timestamp: Time used for the default name (now if None)
        
        Returns:
            Path to the new snapshot directory
        
        Raises:
            CopyFailed: If the snapshot directory cannot be created
        """
        if name is None:
            name = f"{generate_snapshot_stamp(timestamp)}_bank_{bank}"
        
        # Existing snapshots are never reused
        candidate = self.get_export_dir(name)
        counter = 2
        try:
            ensure_directory(self.exports_dir)
            while True:
                try:
                    candidate.mkdir()
                    return candidate
                except FileExistsError:
                    candidate = self.get_export_dir(f"{name}_{counter}")
                    counter += 1
        except OSError as e:
            raise CopyFailed(f"Failed to create snapshot {candidate}: {e}") from e
    
    def list_bank_entries(self, bank: int) -> t.List[Path]:
        """List everything inside a bank directory, tracks or not.
        
        Raises:
            CopyFailed: If the directory exists but cannot be read
        """
        bank_dir = self.get_bank_dir(bank)
        if not bank_dir.is_dir():
            return []
        
        try:
            return sorted(bank_dir.iterdir())
        except OSError as e:
            raise CopyFailed(f"Failed to read {bank_dir}: {e}") from e
    
    def list_exports(self) -> t.List[Path]:
        """List export snapshot directories, oldest name first."""
        if not self.exports_dir.is_dir():
            return []
        
        return sorted(d for d in self.exports_dir.iterdir() if d.is_dir())
