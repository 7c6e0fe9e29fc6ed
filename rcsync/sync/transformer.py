"""Filesystem side of apply, export and revert."""

import typing as t
from pathlib import Path

from ..config import SyncConfig
from ..device.mount import device_track_path, list_slot_entries
from ..device.slots import bank_of
from ..errors import CopyFailed, MalformedSlotName
from ..util.hashing import files_differ
from ..util.logging import SUCCESS, get_logger
from ..util.paths import copy_track, copy_tree, remove_track, reset_directory
from .report import BankResult, SyncReport
from .resolver import Action
from .scanner import ChangeSet, SlotIndex, slots_in_bank
from .storage import BackupStorage

logger = get_logger(__name__)


class BankTransformer:
    """Carries out the action chosen for a bank and counts what happened.
    
    Every file operation is isolated: a failed copy or delete is logged and
    counted, and the remaining files of the bank are still processed.
    """
    
    def __init__(
        self,
        config: SyncConfig,
        storage: BackupStorage,
        slot_index: SlotIndex,
        report: t.Optional[SyncReport] = None
    ) -> None:
        self.config = config
        self.storage = storage
        self.slot_index = slot_index
        self.report = report if report is not None else SyncReport()
    
    def apply_bank(self, bank: int, change_set: ChangeSet, action: Action) -> BankResult:
        """Transform one bank.
        
        Args:
            bank: Bank number
            change_set: Changes found by the scanner
            action: Action chosen by the resolver
        
        Returns:
            Counts for this bank (also added to the run report)
        """
        result = BankResult(bank=bank, action=action.value)
        
        if action not in (Action.APPLY, Action.EXPORT, Action.REVERT):
            return result
        
        try:
            if action is Action.APPLY:
                self._apply(bank, change_set, result)
            elif action is Action.EXPORT:
                result.snapshot = self.export_bank(bank)
                self._apply(bank, change_set, result)
            else:
                self._revert(bank, result)
        except (CopyFailed, OSError) as e:
            logger.error(f"Stopped processing bank_{bank}: {e}")
            result.errored += 1
        
        self.report.add(result)
        return result
    
    def export_bank(self, bank: int, name: t.Optional[str] = None) -> Path:
        """Snapshot everything in a bank directory, then empty it.
        
        The bank directory is only reset once every entry has been copied.
        
        Args:
            bank: Bank number
            name: Snapshot name (timestamped default if None)
        
        Returns:
            Path to the snapshot directory
        
        Raises:
            CopyFailed: If the snapshot or the reset fails
        """
        entries = self.storage.list_bank_entries(bank)
        snapshot = self.storage.create_export_snapshot(bank, name)
        
        if not entries:
            logger.warning(f"No files to export in bank_{bank}")
        
        for entry in entries:
            if entry.is_dir():
                copy_tree(entry, snapshot / entry.name)
            else:
                copy_track(entry, snapshot / entry.name)
        
        logger.log(SUCCESS, f"Exported {len(entries)} files from bank_{bank} to {snapshot.name}")
        
        reset_directory(self.storage.get_bank_dir(bank))
        return snapshot
    
    def _apply(self, bank: int, change_set: ChangeSet, result: BankResult) -> None:
        bank_dir_name = self.storage.get_bank_dir(bank).name
        extension = self.config.track_extension
        
        for slot in slots_in_bank(self.slot_index, bank):
            device_track = device_track_path(self.config.device_root, slot, extension)
            if not device_track.is_file():
                continue
            
            result.total += 1
            backup_track = self.storage.get_backup_track(slot, bank)
            
            # Checked again here; the device may have changed since the scan
            if not self._differs(device_track, backup_track, result):
                continue
            
            logger.info(f"Copying: {device_track.name} to {bank_dir_name}")
            try:
                copy_track(device_track, backup_track)
                result.copied += 1
            except CopyFailed as e:
                logger.error(str(e))
                result.errored += 1
        
        if not change_set.deleted:
            return
        
        for backup_track in self.storage.list_bank_tracks(bank):
            if device_track_path(self.config.device_root, backup_track.stem, extension).is_file():
                continue
            
            logger.info(f"Deleting: {backup_track.name} from {bank_dir_name}")
            try:
                remove_track(backup_track)
                result.deleted += 1
            except CopyFailed as e:
                logger.error(str(e))
                result.errored += 1
    
    def _revert(self, bank: int, result: BankResult) -> None:
        extension = self.config.track_extension
        backup_tracks = self.storage.list_bank_tracks(bank)
        backup_slots = {track.stem for track in backup_tracks}
        
        for backup_track in backup_tracks:
            result.total += 1
            device_track = device_track_path(self.config.device_root, backup_track.stem, extension)
            
            if not self._differs(backup_track, device_track, result):
                continue
            
            logger.info(f"Restoring: {backup_track.name} to device")
            try:
                copy_track(backup_track, device_track)
                result.copied += 1
            except CopyFailed as e:
                logger.error(str(e))
                result.errored += 1
        
        for slot in self._device_slots(bank):
            if slot in backup_slots:
                continue
            
            device_track = device_track_path(self.config.device_root, slot, extension)
            if not device_track.is_file():
                continue
            
            logger.info(f"Deleting: {device_track.name} from device")
            try:
                remove_track(device_track)
                result.deleted += 1
            except CopyFailed as e:
                logger.error(str(e))
                result.errored += 1
    
    def _differs(self, source: Path, destination: Path, result: BankResult) -> bool:
        """Compare two tracks, counting identical pairs as skipped and read errors as errors."""
        try:
            differs = files_differ(source, destination, self.config.signature_bytes)
        except OSError as e:
            logger.error(f"Failed to compare {source.name}: {e}")
            result.errored += 1
            return False
        
        if not differs:
            result.skipped += 1
        return differs
    
    def _device_slots(self, bank: int) -> t.List[str]:
        """Slots of a bank currently on the device, listed fresh."""
        slots = []
        for entry in list_slot_entries(self.config.device_root):
            try:
                if bank_of(entry, self.config.slots_per_bank) == bank:
                    slots.append(entry)
            except MalformedSlotName:
                continue
        return slots
