"""Decide what to do with each changed bank."""

import typing as t
from enum import Enum

from rich.console import Console
from rich.prompt import Prompt
from rich.text import Text

from ..errors import InvalidPromptInput
from ..util.logging import get_logger
from .scanner import ChangeSet

logger = get_logger(__name__)


class Action(str, Enum):
    """What to do with a bank."""
    
    APPLY = "apply"
    EXPORT = "export"
    REVERT = "revert"
    SKIP = "skip"
    NONE = "none"


ANSWERS = {
    "": Action.EXPORT,
    "e": Action.EXPORT,
    "export": Action.EXPORT,
    "a": Action.APPLY,
    "apply": Action.APPLY,
    "r": Action.REVERT,
    "revert": Action.REVERT,
    "s": Action.SKIP,
    "skip": Action.SKIP,
}

ACTION_PROMPT = "Choose: (e)xport then apply, (a)pply, (r)evert device, (s)kip. Empty answer exports"


class DecisionSource(t.Protocol):
    """Where answers to interactive questions come from."""
    
    def ask(self, message: str, default: t.Optional[str] = None) -> str:
        ...


class ConsoleDecisionSource:
    """Ask the user on the terminal."""
    
    def __init__(self, console: Console) -> None:
        self.console = console
    
    def ask(self, message: str, default: t.Optional[str] = None) -> str:
        if default is None:
            return Prompt.ask(message, console=self.console)
        return Prompt.ask(message, console=self.console, default=default, show_default=False)


def parse_action(answer: str) -> Action:
    """Turn a prompt answer into an action. An empty answer means export."""
    key = answer.strip().lower()
    if key not in ANSWERS:
        raise InvalidPromptInput(f"Invalid choice {answer!r}, expected one of e/a/r/s")
    return ANSWERS[key]


class ActionResolver:
    """Maps a bank's changes to an action, asking only when it has to."""
    
    def __init__(
        self,
        decisions: DecisionSource,
        console: Console,
        extension: str = "WAV"
    ) -> None:
        self.decisions = decisions
        self.console = console
        self.extension = extension
    
    def resolve(self, bank: int, change_set: ChangeSet) -> Action:
        """Pick the action for one bank.
        
        Args:
            bank: Bank number
            change_set: Changes found for the bank
            
        Returns:
            NONE without changes, APPLY for pure additions, otherwise the user's choice
        """
        if not change_set.has_changes:
            return Action.NONE
        
        if change_set.only_additions:
            logger.info(f"Processing new files for bank_{bank}")
            return Action.APPLY
        
        self.render_diff(bank, change_set)
        
        while True:
            answer = self.decisions.ask(ACTION_PROMPT, default="")
            try:
                action = parse_action(answer)
            except InvalidPromptInput as e:
                logger.warning(str(e))
                continue
            
            if action is Action.SKIP:
                logger.warning(f"Skipping changes for bank_{bank}")
                return action
            
            if action is Action.REVERT and not self._confirm_revert(bank):
                logger.info(f"Revert of bank_{bank} cancelled")
                continue
            
            return action
    
    def render_diff(self, bank: int, change_set: ChangeSet) -> None:
        """Print one line per slot of the bank describing what Apply would do."""
        self.console.print()
        self.console.print(f"Changes detected in bank_{bank}:")
        
        for slot in sorted(change_set.deleted):
            self.console.print(Text(f"delete: {self._file_name(slot)}", style="red"))
        
        for slot in sorted(change_set.new | change_set.modified | change_set.unchanged):
            if slot in change_set.new:
                self.console.print(Text(f"copy: {self._file_name(slot)}", style="green"))
            elif slot in change_set.modified:
                self.console.print(Text(f"replace: {self._file_name(slot)}", style="yellow"))
            else:
                self.console.print(Text(f"keep: {self._file_name(slot)}"))
        
        self.console.print()
    
    def _confirm_revert(self, bank: int) -> bool:
        answer = self.decisions.ask(
            f"Revert overwrites the tracks of bank_{bank} on the device. Type 'yes' to continue",
            default="",
        )
        return answer.strip().lower() == "yes"
    
    def _file_name(self, slot: str) -> str:
        return f"{slot}.{self.extension}"
