"""Sync module initialization."""

from .report import BankResult, SyncReport
from .resolver import Action, ActionResolver, ConsoleDecisionSource, DecisionSource, parse_action
from .restore import ExportSummary, RestoreEngine, RestoreResult
from .runner import sync_banks
from .scanner import ChangeScanner, ChangeSet, ScanResult, slots_in_bank
from .storage import BackupLock, BackupStorage
from .transformer import BankTransformer

__all__ = [
    # scanner
    "ChangeScanner",
    "ChangeSet",
    "ScanResult",
    "slots_in_bank",
    # resolver
    "Action",
    "ActionResolver",
    "ConsoleDecisionSource",
    "DecisionSource",
    "parse_action",
    # transformer
    "BankTransformer",
    "BankResult",
    "SyncReport",
    # restore
    "ExportSummary",
    "RestoreEngine",
    "RestoreResult",
    # storage
    "BackupLock",
    "BackupStorage",
    # runner
    "sync_banks",
]
