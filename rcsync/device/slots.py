"""Slot names and their mapping onto banks."""

import re
from dataclasses import dataclass

from ..errors import MalformedSlotName

SLOT_PATTERN = re.compile(r"^(\d+)_([12])$")
SLOTS_PER_BANK = 8


@dataclass(frozen=True)
class Slot:
    """One recording location on the device."""
    
    number: int
    alternate: int
    
    @property
    def name(self) -> str:
        """Canonical NNN_K name used on the device and in the backup."""
        return slot_name(self.number, self.alternate)
    
    def bank(self, slots_per_bank: int = SLOTS_PER_BANK) -> int:
        """Bank this slot belongs to."""
        return (self.number - 1) // slots_per_bank + 1


def slot_name(number: int, alternate: int) -> str:
    """Format a slot number and alternate index as ``NNN_K``."""
    return f"{number:03d}_{alternate}"


def parse_slot(name: str) -> Slot:
    """Parse an ``NNN_K`` name. Leading zeros are not significant."""
    match = SLOT_PATTERN.match(name)
    if not match:
        raise MalformedSlotName(f"Not a slot name: {name!r}")
    
    number = int(match.group(1))
    if number < 1:
        raise MalformedSlotName(f"Slot numbers start at 1: {name!r}")
    
    return Slot(number=number, alternate=int(match.group(2)))


def bank_of(name: str, slots_per_bank: int = SLOTS_PER_BANK) -> int:
    """Return the bank number a slot name belongs to."""
    return parse_slot(name).bank(slots_per_bank)
