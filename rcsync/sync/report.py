"""Run-level counters."""

import logging
import typing as t
from dataclasses import dataclass, field
from pathlib import Path

from ..util.logging import SUCCESS


@dataclass
class BankResult:
    """File counts for one transformed bank."""
    
    bank: int
    action: str
    total: int = 0
    copied: int = 0
    skipped: int = 0
    deleted: int = 0
    errored: int = 0
    snapshot: t.Optional[Path] = None


@dataclass
class SyncReport:
    """Totals for a whole sync run."""
    
    total: int = 0
    copied: int = 0
    skipped: int = 0
    deleted: int = 0
    errored: int = 0
    no_data: bool = False
    banks: t.List[BankResult] = field(default_factory=list)
    
    def add(self, result: BankResult) -> None:
        """Roll one bank's counts into the totals."""
        self.banks.append(result)
        self.total += result.total
        self.copied += result.copied
        self.skipped += result.skipped
        self.deleted += result.deleted
        self.errored += result.errored
    
    @property
    def has_errors(self) -> bool:
        return self.errored > 0
    
    def log_summary(self, logger: logging.Logger) -> None:
        """Log the end-of-run summary."""
        logger.log(SUCCESS, "Synchronization complete!")
        logger.info(f"Total files: {self.total}")
        logger.info(f"Files copied: {self.copied}")
        logger.info(f"Files skipped (not modified): {self.skipped}")
        if self.deleted:
            logger.info(f"Files deleted: {self.deleted}")
        
        if self.has_errors:
            logger.warning(f"Files with errors: {self.errored}")
