"""Restore an export snapshot back onto the device."""

import typing as t
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from tqdm import tqdm

from ..config import SyncConfig
from ..device.mount import check_device_connected, device_track_path
from ..device.slots import bank_of
from ..errors import AmbiguousBank, CopyFailed, ExportNotFound, MalformedSlotName
from ..util.logging import SUCCESS, get_logger
from ..util.paths import copy_track, list_tracks
from ..util.timeutil import parse_snapshot_stamp
from .resolver import DecisionSource
from .storage import BackupStorage

logger = get_logger(__name__)


@dataclass
class RestoreResult:
    """Outcome of restoring one snapshot."""
    
    export_name: str
    bank: int
    total: int = 0
    restored: int = 0
    errored: int = 0
    cancelled: bool = False
    failed_files: t.List[str] = field(default_factory=list)


@dataclass
class ExportSummary:
    """Listing entry for an export snapshot."""
    
    name: str
    path: Path
    bank: t.Optional[int]
    tracks: int
    size: int
    created: t.Optional[datetime]


class RestoreEngine:
    """Copies the tracks of an export snapshot back into their device slots."""
    
    def __init__(
        self,
        config: SyncConfig,
        storage: BackupStorage,
        decisions: DecisionSource,
        show_progress: bool = True
    ) -> None:
        self.config = config
        self.storage = storage
        self.decisions = decisions
        self.show_progress = show_progress
    
    def find_tracks(self, export_name: str) -> t.List[Path]:
        """List the tracks of a snapshot.
        
        Raises:
            ExportNotFound: If the snapshot is missing or holds no tracks
        """
        if not export_name or Path(export_name).name != export_name or export_name in (".", ".."):
            raise ExportNotFound(f"Invalid export name: {export_name!r}")
        
        export_dir = self.storage.get_export_dir(export_name)
        if not export_dir.is_dir():
            raise ExportNotFound(f"Export not found: {export_dir}")
        
        tracks = list_tracks(export_dir, self.config.track_extension)
        if not tracks:
            raise ExportNotFound(f"Export contains no track files: {export_dir}")
        
        return tracks
    
    def target_bank(self, tracks: t.List[Path]) -> int:
        """Work out which bank a snapshot belongs to from its first track.
        
        Raises:
            AmbiguousBank: If the track name is not a slot or its bank is unknown
        """
        first = tracks[0].stem
        try:
            bank = bank_of(first, self.config.slots_per_bank)
        except MalformedSlotName as e:
            raise AmbiguousBank(f"Cannot determine bank from {tracks[0].name}") from e
        
        if bank not in self.config.banks:
            raise AmbiguousBank(f"{tracks[0].name} maps to bank {bank}, outside 1..{self.config.bank_count}")
        
        return bank
    
    def restore(self, export_name: str) -> RestoreResult:
        """Restore one export snapshot onto the device.
        
        Args:
            export_name: Directory name under the exports root
            
        Returns:
            RestoreResult with per-file counts
        """
        tracks = self.find_tracks(export_name)
        bank = self.target_bank(tracks)
        check_device_connected(self.config.device_root)
        
        result = RestoreResult(export_name=export_name, bank=bank, total=len(tracks))
        
        if not self.storage.bank_exists(bank) and not self._confirm_unsynced(bank, export_name):
            logger.warning(f"Restore of {export_name} cancelled")
            result.cancelled = True
            return result
        
        logger.info(f"Restoring {len(tracks)} files from {export_name} to bank_{bank}")
        
        with tqdm(total=len(tracks), desc="Restoring tracks", unit="track", disable=not self.show_progress) as pbar:
            for track in tracks:
                pbar.set_postfix_str(track.name)
                destination = device_track_path(self.config.device_root, track.stem, self.config.track_extension)
                
                try:
                    copy_track(track, destination)
                    result.restored += 1
                    logger.debug(f"Restored {track.name}")
                except CopyFailed as e:
                    logger.error(str(e))
                    result.errored += 1
                    result.failed_files.append(track.name)
                
                pbar.update(1)
        
        if result.errored:
            logger.warning(f"Restore completed with errors: {result.restored}/{result.total} files restored")
        else:
            logger.log(SUCCESS, f"Restore completed: {result.restored}/{result.total} files restored")
        
        return result
    
    def list_exports(self) -> t.List[ExportSummary]:
        """Summarize every export snapshot."""
        summaries = []
        
        for export_dir in self.storage.list_exports():
            tracks = list_tracks(export_dir, self.config.track_extension)
            bank = None
            if tracks:
                try:
                    bank = self.target_bank(tracks)
                except AmbiguousBank:
                    pass
            
            summaries.append(ExportSummary(
                name=export_dir.name,
                path=export_dir,
                bank=bank,
                tracks=len(tracks),
                size=sum(track.stat().st_size for track in tracks),
                created=parse_snapshot_stamp(export_dir.name),
            ))
        
        return summaries
    
    def _confirm_unsynced(self, bank: int, export_name: str) -> bool:
        logger.warning(f"bank_{bank} has never been synced to this backup directory")
        answer = self.decisions.ask(f"Restore {export_name} onto bank_{bank} anyway? (y/N)", default="n")
        return answer.strip().lower() in ("y", "yes")
