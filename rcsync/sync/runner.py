"""Bank-by-bank sync run."""

from ..config import SyncConfig
from ..util.logging import get_logger
from .report import BankResult, SyncReport
from .resolver import Action, ActionResolver
from .scanner import ChangeScanner
from .storage import BackupStorage
from .transformer import BankTransformer

logger = get_logger(__name__)


def sync_banks(config: SyncConfig, storage: BackupStorage, resolver: ActionResolver) -> SyncReport:
    """Scan, decide and transform each bank in turn.
    
    The device is listed once up front; every bank is then finished before
    the next one is looked at. A bank that cannot be scanned is counted as
    an error and the run moves on.
    
    Args:
        config: Sync configuration
        storage: Backup storage layout
        resolver: Decides the action for each changed bank
    
    Returns:
        SyncReport; ``no_data`` is set when the device has no slot directories
    """
    report = SyncReport()
    logger.info("Starting synchronization of track files...")
    
    scanner = ChangeScanner(config, storage)
    slot_index = scanner.build_slot_index()
    
    if not slot_index:
        logger.warning(f"No track directories found in {config.device_root}")
        report.no_data = True
        return report
    
    transformer = BankTransformer(config, storage, slot_index, report)
    
    for bank in config.banks:
        try:
            change_set = scanner.scan_bank(bank, slot_index)
        except OSError as e:
            logger.error(f"Failed to scan bank_{bank}: {e}")
            report.add(BankResult(bank=bank, action=Action.NONE.value, errored=1))
            continue
        
        action = resolver.resolve(bank, change_set)
        transformer.apply_bank(bank, change_set, action)
    
    return report
