"""Per-bank change detection between the device and the backup."""

import typing as t
from dataclasses import dataclass, field
from pathlib import Path

from ..config import SyncConfig
from ..device.mount import device_track_path, list_slot_entries
from ..device.slots import bank_of
from ..errors import MalformedSlotName
from ..util.hashing import files_differ
from ..util.logging import get_logger
from .storage import BackupStorage

logger = get_logger(__name__)

SlotIndex = t.Dict[str, int]


@dataclass
class ChangeSet:
    """Slots of one bank that differ between device and backup.
    
    ``unchanged`` is kept only for display and does not count as a change.
    """
    
    bank: int
    new: t.Set[str] = field(default_factory=set)
    modified: t.Set[str] = field(default_factory=set)
    deleted: t.Set[str] = field(default_factory=set)
    unchanged: t.Set[str] = field(default_factory=set)
    
    @property
    def has_changes(self) -> bool:
        return bool(self.new or self.modified or self.deleted)
    
    @property
    def only_additions(self) -> bool:
        """True when the bank only gained tracks."""
        return bool(self.new) and not self.modified and not self.deleted
    
    def __repr__(self) -> str:
        return (
            f"ChangeSet(bank={self.bank}, new={len(self.new)}, "
            f"modified={len(self.modified)}, deleted={len(self.deleted)})"
        )


@dataclass
class ScanResult:
    """Outcome of scanning every bank."""
    
    slot_index: SlotIndex = field(default_factory=dict)
    changes: t.Dict[int, ChangeSet] = field(default_factory=dict)
    
    @property
    def no_data(self) -> bool:
        """True when the device exposed no slot directories at all."""
        return not self.slot_index
    
    def changed_banks(self) -> t.List[ChangeSet]:
        return [self.changes[bank] for bank in sorted(self.changes) if self.changes[bank].has_changes]


def slots_in_bank(slot_index: SlotIndex, bank: int) -> t.List[str]:
    """Sorted slot names of the index that belong to a bank."""
    return sorted(slot for slot, slot_bank in slot_index.items() if slot_bank == bank)


class ChangeScanner:
    """Compares device slots against the backup, bank by bank."""
    
    def __init__(self, config: SyncConfig, storage: BackupStorage) -> None:
        self.config = config
        self.storage = storage
    
    def build_slot_index(self) -> SlotIndex:
        """List the device once and map every slot directory to its bank.
        
        Returns:
            Mapping of slot name to bank number
        """
        index: SlotIndex = {}
        
        for entry in list_slot_entries(self.config.device_root):
            try:
                bank = bank_of(entry, self.config.slots_per_bank)
            except MalformedSlotName:
                logger.debug(f"Skipping non-slot entry: {entry}")
                continue
            
            if bank not in self.config.banks:
                logger.debug(f"Skipping slot outside known banks: {entry} (bank {bank})")
                continue
            
            index[entry] = bank
        
        logger.debug(f"Found {len(index)} slot directories on the device")
        return index
    
    def scan_bank(self, bank: int, slot_index: SlotIndex) -> ChangeSet:
        """Classify the slots of one bank.
        
        Args:
            bank: Bank number
            slot_index: Slot index from ``build_slot_index``
        
        Returns:
            ChangeSet for the bank
        """
        change_set = ChangeSet(bank=bank)
        extension = self.config.track_extension
        
        for backup_track in self.storage.list_bank_tracks(bank):
            slot = backup_track.stem
            if not device_track_path(self.config.device_root, slot, extension).is_file():
                change_set.deleted.add(slot)
        
        for slot in slots_in_bank(slot_index, bank):
            device_track = device_track_path(self.config.device_root, slot, extension)
            if not device_track.is_file():
                continue
            
            backup_track = self.storage.get_backup_track(slot, bank)
            if not backup_track.is_file():
                change_set.new.add(slot)
            elif self._differs(device_track, backup_track):
                change_set.modified.add(slot)
            else:
                change_set.unchanged.add(slot)
        
        if change_set.has_changes:
            logger.debug(f"bank_{bank}: {change_set!r}")
        
        return change_set
    
    def _differs(self, device_track: Path, backup_track: Path) -> bool:
        # Unreadable pairs are shown as modified so the user still decides on them
        try:
            return files_differ(device_track, backup_track, self.config.signature_bytes)
        except OSError as e:
            logger.error(f"Failed to compare {device_track.name}: {e}")
            return True
    
    def scan(self) -> ScanResult:
        """Scan every bank.
        
        Returns:
            ScanResult; ``no_data`` is set when the device has no slot directories
        """
        slot_index = self.build_slot_index()
        result = ScanResult(slot_index=slot_index)
        
        if result.no_data:
            return result
        
        for bank in self.config.banks:
            result.changes[bank] = self.scan_bank(bank, slot_index)
        
        return result
