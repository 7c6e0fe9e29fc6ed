"""Command Line Interface for rc-sync."""

import sys
from pathlib import Path
from typing import Optional

import click
from rich.table import Table

from .config import SyncConfig, load_config
from .device import check_device_connected
from .errors import RCSyncError
from .sync import (
    ActionResolver,
    BackupStorage,
    BankTransformer,
    ChangeScanner,
    ConsoleDecisionSource,
    RestoreEngine,
    sync_banks,
)
from .util import SUCCESS, add_file_handler, create_console, format_size, get_logger, setup_logging

console = create_console()
logger = get_logger("rcsync.cli")

BANNER = "========================================"


def setup_cli_logging(level: str, verbose: bool = False):
    """Setup logging for CLI."""
    return setup_logging(level="DEBUG" if verbose else level, console=console)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--dir", "-d", "backup_dir", type=click.Path(file_okay=False, path_type=Path),
              envvar="RC_BACKUP_DIR", help="Backup directory (overrides RC_BACKUP_DIR)")
@click.option("--source", "-s", type=click.Path(file_okay=False, path_type=Path),
              envvar="RC_SOURCE_DIR", help="Track directory on the device")
@click.option("--restore", "-r", "restore_name", metavar="EXPORT_NAME", help="Restore an export snapshot to the device")
@click.option("--list-exports", is_flag=True, help="List export snapshots and exit")
@click.option("--status", is_flag=True, help="Show per-bank changes without touching any files")
@click.option("--export-bank", type=click.IntRange(min=1), help="Export one bank's backup without syncing")
@click.option("--name", "export_name", help="Snapshot name for --export-bank")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Configuration file path")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
def cli(backup_dir: Optional[Path], source: Optional[Path], restore_name: Optional[str],
        list_exports: bool, status: bool, export_bank: Optional[int], export_name: Optional[str],
        config_path: Optional[Path], verbose: bool):
    """Synchronize loop-station tracks with a bank-organized backup directory."""
    config = load_config(config_path).with_overrides(device_root=source, backup_root=backup_dir)
    root_logger = setup_cli_logging(config.log_level, verbose)

    if config.backup_root is None:
        logger.error("Please select a backup destination with --dir (or set RC_BACKUP_DIR)")
        click.echo(click.get_current_context().get_usage())
        sys.exit(1)

    if export_bank is not None and export_bank not in config.banks:
        logger.error(f"Bank must be between 1 and {config.bank_count}")
        sys.exit(1)

    storage = BackupStorage(config)
    log_file_attached = storage.base_path.is_dir()
    if log_file_attached:
        add_file_handler(root_logger, storage.log_file)

    logger.info(BANNER)
    logger.info("RC Sync Tool - Starting")
    logger.info(BANNER)

    try:
        if list_exports:
            _show_exports(config, storage)
            return

        # Restore checks the export before the device
        if not restore_name:
            check_device_connected(config.device_root)

        if status:
            _show_status(config, storage)
            return

        storage.prepare()
        if not log_file_attached:
            add_file_handler(root_logger, storage.log_file)

        with storage.lock():
            if restore_name:
                _run_restore(config, storage, restore_name)
            elif export_bank is not None:
                _run_export(config, storage, export_bank, export_name)
            else:
                _run_sync(config, storage)

    except RCSyncError as e:
        logger.error(str(e))
        sys.exit(1)

    logger.info(BANNER)
    logger.info("RC Sync Tool - Completed")
    logger.info(BANNER)


def _run_sync(config: SyncConfig, storage: BackupStorage):
    """Run the interactive bank-by-bank sync."""
    resolver = ActionResolver(ConsoleDecisionSource(console), console, config.track_extension)
    report = sync_banks(config, storage, resolver)

    if report.no_data:
        logger.warning("Synchronization process encountered errors")
        sys.exit(1)

    report.log_summary(logger)


def _run_restore(config: SyncConfig, storage: BackupStorage, export_name: str):
    """Restore one export snapshot."""
    engine = RestoreEngine(config, storage, ConsoleDecisionSource(console))
    result = engine.restore(export_name)

    if result.cancelled:
        return

    console.print(f"Files restored: {result.restored}/{result.total}")
    if result.errored:
        console.print(f"[yellow]Failed files: {result.errored}[/yellow]")
        for name in result.failed_files[:5]:
            console.print(f"  {name}")


def _run_export(config: SyncConfig, storage: BackupStorage, bank: int, name: Optional[str]):
    """Snapshot one bank's backup without syncing it."""
    if not storage.list_bank_entries(bank):
        logger.warning(f"Nothing to export: bank_{bank} has no backup files")
        return

    transformer = BankTransformer(config, storage, slot_index={})
    snapshot = transformer.export_bank(bank, name)
    logger.log(SUCCESS, f"Snapshot created: {snapshot}")
    logger.warning(f"bank_{bank} backup is now empty; the next sync will repopulate it from the device")


def _show_exports(config: SyncConfig, storage: BackupStorage):
    """Display export snapshots."""
    engine = RestoreEngine(config, storage, ConsoleDecisionSource(console))
    exports = engine.list_exports()

    if not exports:
        console.print("[yellow]No exports found[/yellow]")
        return

    table = Table(title="Export Snapshots")
    table.add_column("Name", style="cyan")
    table.add_column("Bank", style="white")
    table.add_column("Created", style="white")
    table.add_column("Tracks", style="white")
    table.add_column("Size", style="white")

    for export in exports:
        table.add_row(
            export.name,
            str(export.bank) if export.bank is not None else "?",
            export.created.strftime("%Y-%m-%d %H:%M:%S") if export.created else "",
            str(export.tracks),
            format_size(export.size),
        )

    console.print(table)


def _show_status(config: SyncConfig, storage: BackupStorage):
    """Display the per-bank change summary."""
    scan = ChangeScanner(config, storage).scan()

    if scan.no_data:
        logger.warning(f"No track directories found in {config.device_root}")
        sys.exit(1)

    table = Table(title="Bank Status")
    table.add_column("Bank", style="cyan")
    table.add_column("New", style="green")
    table.add_column("Modified", style="yellow")
    table.add_column("Deleted", style="red")
    table.add_column("Unchanged", style="white")
    table.add_column("On sync", style="white")

    for bank in config.banks:
        change_set = scan.changes[bank]
        if not change_set.has_changes:
            outcome = "-"
        elif change_set.only_additions:
            outcome = "auto-apply"
        else:
            outcome = "review"

        table.add_row(
            f"bank_{bank}",
            str(len(change_set.new)),
            str(len(change_set.modified)),
            str(len(change_set.deleted)),
            str(len(change_set.unchanged)),
            outcome,
        )

    console.print(table)


def main():
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
