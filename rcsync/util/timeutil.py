"""Utility functions for time operations."""

from datetime import datetime
from typing import Optional


def generate_snapshot_stamp(now: Optional[datetime] = None) -> str:
    """Generate the date prefix used for export snapshot names."""
    if now is None:
        now = datetime.now()
    return now.strftime("%Y-%m-%d_%H%M%S")


def parse_snapshot_stamp(name: str) -> Optional[datetime]:
    """Parse the date prefix of an export snapshot name, if it has one."""
    try:
        return datetime.strptime(name[:17], "%Y-%m-%d_%H%M%S")
    except ValueError:
        return None
