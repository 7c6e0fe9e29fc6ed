"""Utility module initialization."""

from .hashing import SIGNATURE_BYTES, calculate_prefix_hash, files_differ
from .logging import SUCCESS, add_file_handler, create_console, get_logger, setup_logging
from .paths import (
    copy_track,
    copy_tree,
    ensure_directory,
    format_size,
    list_tracks,
    remove_track,
    reset_directory,
)
from .timeutil import generate_snapshot_stamp, parse_snapshot_stamp

__all__ = [
    # hashing
    "SIGNATURE_BYTES",
    "calculate_prefix_hash",
    "files_differ",
    # logging
    "SUCCESS",
    "add_file_handler",
    "create_console",
    "get_logger",
    "setup_logging",
    # paths
    "copy_track",
    "copy_tree",
    "ensure_directory",
    "format_size",
    "list_tracks",
    "remove_track",
    "reset_directory",
    # timeutil
    "generate_snapshot_stamp",
    "parse_snapshot_stamp",
]
