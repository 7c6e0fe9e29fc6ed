"""Device module initialization."""

from .mount import check_device_connected, device_track_path, is_device_connected, list_slot_entries
from .slots import SLOT_PATTERN, SLOTS_PER_BANK, Slot, bank_of, parse_slot, slot_name

__all__ = [
    # mount
    "check_device_connected",
    "device_track_path",
    "is_device_connected",
    "list_slot_entries",
    # slots
    "SLOT_PATTERN",
    "SLOTS_PER_BANK",
    "Slot",
    "bank_of",
    "parse_slot",
    "slot_name",
]
