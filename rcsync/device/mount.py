"""Device mount detection and slot directory access."""

from pathlib import Path
from typing import List

from ..errors import DeviceNotConnected
from ..util.logging import SUCCESS, get_logger

logger = get_logger(__name__)


def is_device_connected(device_root: Path) -> bool:
    """Check whether the device's track directory is currently mounted."""
    return device_root.is_dir()


def check_device_connected(device_root: Path) -> None:
    """Raise DeviceNotConnected unless the device is mounted."""
    if not is_device_connected(device_root):
        raise DeviceNotConnected(f"Device not found at {device_root}")
    
    logger.log(SUCCESS, f"Device detected at {device_root}")


def list_slot_entries(device_root: Path) -> List[str]:
    """List the names of all directories directly under the device root."""
    try:
        return sorted(entry.name for entry in device_root.iterdir() if entry.is_dir())
    except OSError as e:
        logger.warning(f"Could not list {device_root}: {e}")
        return []


def device_track_path(device_root: Path, slot: str, extension: str) -> Path:
    """Path of the track file for a slot on the device."""
    return device_root / slot / f"{slot}.{extension}"
