"""Track identity comparison.

Two tracks are considered identical when they have the same size and the
same SHA-256 signature over their first ``SIGNATURE_BYTES`` bytes. Audio
edits almost always touch the header, so reading the whole file is not
worth it. Edits confined to the tail of an equally sized file go unnoticed.
"""

import hashlib
from pathlib import Path
from typing import Optional

from ..util.logging import get_logger

logger = get_logger(__name__)

SIGNATURE_BYTES = 65536


def calculate_prefix_hash(
    file_path: Path,
    limit: int = SIGNATURE_BYTES,
    algorithm: str = "sha256",
    chunk_size: int = 8192
) -> str:
    """Calculate the hash of at most ``limit`` leading bytes of a file."""
    hasher = hashlib.new(algorithm)
    remaining = limit
    
    with open(file_path, "rb") as f:
        while remaining > 0:
            chunk = f.read(min(chunk_size, remaining))
            if not chunk:
                break
            hasher.update(chunk)
            remaining -= len(chunk)
    
    return hasher.hexdigest()


def files_differ(
    file_a: Optional[Path],
    file_b: Optional[Path],
    limit: int = SIGNATURE_BYTES
) -> bool:
    """Return True unless both files exist with equal size and prefix signature."""
    if file_a is None or file_b is None:
        return True
    if not file_a.is_file() or not file_b.is_file():
        return True
    
    if file_a.stat().st_size != file_b.stat().st_size:
        return True
    
    return calculate_prefix_hash(file_a, limit) != calculate_prefix_hash(file_b, limit)
