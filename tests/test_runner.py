"""Tests for a full bank-by-bank sync run."""

import io
from unittest.mock import patch

from rich.console import Console

from rcsync.sync.resolver import ActionResolver
from rcsync.sync.runner import sync_banks

from conftest import ScriptedDecisions


def run(layout, *answers):
    decisions = ScriptedDecisions(*answers)
    resolver = ActionResolver(decisions, Console(file=io.StringIO()))
    return sync_banks(layout.config, layout.storage, resolver), decisions


class TestSyncBanks:
    """Test scanning, deciding and transforming every bank."""
    
    def test_no_data(self, layout):
        """Test an empty device is reported, not raised."""
        report, _ = run(layout)
        
        assert report.no_data is True
        assert report.total == 0
    
    def test_first_sync_needs_no_prompts(self, layout):
        """Test a fresh backup only sees additions."""
        layout.device_track("001_1", b"a")
        layout.device_track("002_2", b"b")
        layout.device_track("033_1", b"c")
        
        report, decisions = run(layout)
        
        assert decisions.questions == []
        assert report.copied == 3
        assert layout.bank_files(1) == ["001_1.WAV", "002_2.WAV"]
        assert layout.bank_files(5) == ["033_1.WAV"]
    
    def test_each_bank_gets_its_own_decision(self, layout):
        """Test skipped and applied banks in the same run."""
        layout.device_track("001_1", b"edited")
        layout.backup_track("001_1", b"original")
        layout.device_track("009_1", b"edited")
        layout.backup_track("009_1", b"original")
        
        report, decisions = run(layout, "s", "a")
        
        assert len(decisions.questions) == 2
        assert (layout.backup_root / "bank_1" / "001_1.WAV").read_bytes() == b"original"
        assert (layout.backup_root / "bank_2" / "009_1.WAV").read_bytes() == b"edited"
        assert report.copied == 1
        assert [r.bank for r in report.banks] == [2]
    
    def test_failed_bank_does_not_stop_later_banks(self, layout):
        """Test a bank whose export cannot finish is counted and bank 2 still syncs."""
        layout.device_track("001_1", b"edited")
        layout.backup_track("001_1", b"original")
        layout.device_track("009_1", b"new")
        
        with patch("rcsync.util.paths.shutil.rmtree", side_effect=PermissionError("busy")):
            report, decisions = run(layout, "e")
        
        assert len(decisions.questions) == 1
        assert report.errored == 1
        assert (layout.backup_root / "bank_1" / "001_1.WAV").read_bytes() == b"original"
        assert layout.bank_files(2) == ["009_1.WAV"]
        assert [r.bank for r in report.banks] == [1, 2]
    
    def test_unscannable_bank_does_not_stop_later_banks(self, layout):
        """Test a bank directory that cannot be listed is skipped with an error."""
        layout.device_track("001_1", b"a")
        layout.device_track("009_1", b"b")
        list_bank_tracks = layout.storage.list_bank_tracks
        
        def broken_bank_one(bank):
            if bank == 1:
                raise PermissionError("no access")
            return list_bank_tracks(bank)
        
        with patch.object(layout.storage, "list_bank_tracks", side_effect=broken_bank_one):
            report, _ = run(layout)
        
        assert report.errored == 1
        assert layout.bank_files(1) == []
        assert layout.bank_files(2) == ["009_1.WAV"]
    
    def test_second_run_is_quiet(self, layout):
        """Test nothing is copied when the device has not changed."""
        layout.device_track("001_1", b"a")
        run(layout)
        
        report, decisions = run(layout)
        
        assert decisions.questions == []
        assert report.copied == 0
        assert report.banks == []
