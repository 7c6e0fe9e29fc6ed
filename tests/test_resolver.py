"""Tests for the per-bank action resolver."""

import io

import pytest
from rich.console import Console

from rcsync.errors import InvalidPromptInput
from rcsync.sync.resolver import Action, ActionResolver, parse_action
from rcsync.sync.scanner import ChangeSet

from conftest import ScriptedDecisions


def make_resolver(*answers):
    decisions = ScriptedDecisions(*answers)
    output = io.StringIO()
    console = Console(file=output, width=120)
    return ActionResolver(decisions, console), decisions, output


def mixed_changes():
    return ChangeSet(
        bank=1,
        new={"002_1"},
        modified={"004_2"},
        deleted={"003_1"},
        unchanged={"001_1"},
    )


class TestParseAction:
    """Test prompt answer parsing."""
    
    @pytest.mark.parametrize("answer,expected", [
        ("", Action.EXPORT),
        ("  ", Action.EXPORT),
        ("e", Action.EXPORT),
        ("A", Action.APPLY),
        ("apply", Action.APPLY),
        ("r", Action.REVERT),
        ("Skip", Action.SKIP),
    ])
    def test_valid_answers(self, answer, expected):
        """Test accepted answers."""
        assert parse_action(answer) is expected
    
    def test_invalid_answer(self):
        """Test unknown answers are rejected."""
        with pytest.raises(InvalidPromptInput):
            parse_action("x")


class TestActionResolver:
    """Test action selection for a bank."""
    
    def test_no_changes_returns_none_silently(self):
        """Test an unchanged bank needs no prompt and prints nothing."""
        resolver, decisions, output = make_resolver()
        
        action = resolver.resolve(1, ChangeSet(bank=1, unchanged={"001_1"}))
        
        assert action is Action.NONE
        assert decisions.questions == []
        assert output.getvalue() == ""
    
    def test_pure_additions_apply_without_prompt(self):
        """Test a bank with only new tracks is applied automatically."""
        resolver, decisions, _ = make_resolver()
        
        action = resolver.resolve(2, ChangeSet(bank=2, new={"009_1", "010_2"}))
        
        assert action is Action.APPLY
        assert decisions.questions == []
    
    def test_empty_answer_exports(self):
        """Test pressing enter picks export-then-apply."""
        resolver, decisions, _ = make_resolver("")
        
        assert resolver.resolve(1, mixed_changes()) is Action.EXPORT
        assert len(decisions.questions) == 1
    
    def test_invalid_answer_reprompts(self):
        """Test an invalid answer asks again."""
        resolver, decisions, _ = make_resolver("maybe", "a")
        
        assert resolver.resolve(1, mixed_changes()) is Action.APPLY
        assert len(decisions.questions) == 2
    
    def test_skip(self, caplog):
        """Test skipping logs a warning."""
        resolver, _, _ = make_resolver("s")
        
        with caplog.at_level("WARNING", logger="rcsync"):
            assert resolver.resolve(1, mixed_changes()) is Action.SKIP
        
        assert "Skipping changes for bank_1" in caplog.text
    
    def test_revert_needs_yes(self):
        """Test revert only goes ahead after typing yes."""
        resolver, decisions, _ = make_resolver("r", "yes")
        
        assert resolver.resolve(1, mixed_changes()) is Action.REVERT
        assert len(decisions.questions) == 2
    
    def test_declined_revert_returns_to_prompt(self):
        """Test declining the revert confirmation asks for the bank again."""
        resolver, decisions, _ = make_resolver("r", "y", "s")
        
        assert resolver.resolve(1, mixed_changes()) is Action.SKIP
        assert len(decisions.questions) == 3
        assert "Choose" in decisions.questions[2]
    
    def test_diff_lines(self):
        """Test the rendered diff lists every slot once."""
        resolver, _, output = make_resolver("s")
        
        resolver.resolve(1, mixed_changes())
        text = output.getvalue()
        
        assert "Changes detected in bank_1:" in text
        assert "delete: 003_1.WAV" in text
        assert "copy: 002_1.WAV" in text
        assert "replace: 004_2.WAV" in text
        assert "keep: 001_1.WAV" in text
        assert text.index("delete:") < text.index("keep: 001_1") < text.index("copy: 002_1") < text.index("replace: 004_2")
