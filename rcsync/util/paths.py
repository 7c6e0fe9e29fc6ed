"""Utility functions for path operations."""

import shutil
from pathlib import Path
from typing import List

from tenacity import (
    retry,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import CopyFailed
from ..util.logging import get_logger

logger = get_logger(__name__)


def ensure_directory(path: Path) -> Path:
    """Ensure directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def reset_directory(path: Path) -> Path:
    """Delete a directory tree and recreate it empty.
    
    Raises:
        CopyFailed: If the tree cannot be removed or recreated
    """
    try:
        if path.exists():
            shutil.rmtree(path)
        return ensure_directory(path)
    except OSError as e:
        raise CopyFailed(f"Failed to reset {path}: {e}") from e


def copy_tree(source: Path, destination: Path) -> Path:
    """Copy a directory tree, merging into the destination if it exists."""
    try:
        logger.debug(f"Copying tree {source} -> {destination}")
        shutil.copytree(source, destination, dirs_exist_ok=True)
    except OSError as e:
        raise CopyFailed(f"Failed to copy {source} -> {destination}: {e}") from e
    
    return destination


# Removable media throw the odd transient I/O error; a missing source is final.
@retry(
    retry=retry_if_exception_type(OSError) & retry_if_not_exception_type(FileNotFoundError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
    reraise=True,
)
def _copy_with_retry(source: Path, destination: Path) -> None:
    shutil.copy2(source, destination)


def copy_track(source: Path, destination: Path) -> Path:
    """Copy one track file, creating the destination directory if needed."""
    try:
        ensure_directory(destination.parent)
        logger.debug(f"Copying {source} -> {destination}")
        _copy_with_retry(source, destination)
    except OSError as e:
        raise CopyFailed(f"Failed to copy {source} -> {destination}: {e}") from e
    
    return destination


def remove_track(path: Path) -> None:
    """Remove one track file."""
    try:
        path.unlink()
    except OSError as e:
        raise CopyFailed(f"Failed to delete {path}: {e}") from e


def list_tracks(directory: Path, extension: str) -> List[Path]:
    """List track files with the given extension directly inside a directory."""
    if not directory.is_dir():
        return []
    
    suffix = f".{extension}".upper()
    return sorted(
        p for p in directory.iterdir()
        if p.is_file() and p.suffix.upper() == suffix
    )


def format_size(size_bytes: int) -> str:
    """Format file size in human readable format."""
    if size_bytes == 0:
        return "0 B"
    
    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while size_bytes >= 1024.0 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1
    
    return f"{size_bytes:.1f} {size_names[i]}"
