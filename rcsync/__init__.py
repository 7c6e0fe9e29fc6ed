"""
rc-sync - Bank-aware backup tool for loop-station track storage.

Keeps a local backup tree in step with the WAV tracks on a removable
loop-station device:
- Per-bank change detection (new / modified / deleted tracks)
- Interactive apply, revert and export-then-apply decisions
- Timestamped export snapshots and restore back onto the device
"""

__version__ = "0.1.0"
__author__ = "rc-sync Contributors"
