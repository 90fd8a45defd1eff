"""Parser and dispatcher for the ``:`` command line of the interactive view.

Grammar (buffer split on whitespace, first token picks the command)::

    :/ words...   filter by name (also :f/, or a buffer seeded with /)
    :t words...   tag every selected repo with each word
    :a words...   alias the single selected repo, words joined with "-"

Anything else is ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from exceptions import CacheError
from navigation import MessageLevel, NavigationState

logger = logging.getLogger(__name__)

FILTER_COMMANDS = {":/", ":f/"}
TAG_COMMAND = ":t"
ALIAS_COMMAND = ":a"
WORD_SEPARATOR = "-"


@dataclass(frozen=True)
class CommandResult:
    text: str
    level: MessageLevel = MessageLevel.INFO


def split_command(buffer: str) -> tuple[str, list[str]]:
    """Return (command token, argument words) for an edit buffer."""
    if buffer.startswith("/"):
        # Search shorthand: "/foo" behaves like ":/ foo"
        return ":/", buffer[1:].split()
    words = buffer.split()
    if not words:
        return "", []
    return words[0], words[1:]


class CommandInterpreter:
    def __init__(self, state: NavigationState, autosave: bool = True) -> None:
        self.state = state
        self.autosave = autosave

    def submit(self) -> None:
        """Run the edit buffer and leave edit mode with its feedback."""
        result = self.execute(self.state.prompt.text)
        if result is None:
            self.state.prompt.clear()
        else:
            self.state.prompt.show(result.text, result.level)

    def execute(self, buffer: str) -> CommandResult | None:
        command, args = split_command(buffer)
        if command in FILTER_COMMANDS:
            return self.filter_command(args)
        if command == TAG_COMMAND:
            return self.tag_command(args)
        if command == ALIAS_COMMAND:
            return self.alias_command(args)
        logger.debug("Ignoring unknown command %r", buffer)
        return None

    def filter_command(self, args: list[str]) -> CommandResult | None:
        self.state.apply_filter(WORD_SEPARATOR.join(args))
        return None

    def tag_command(self, args: list[str]) -> CommandResult | None:
        selected = self.state.selected_repos()
        if not selected or not args:
            return None
        logger.info("Adding tags %s to %d repos", args, len(selected))
        changed = sum(1 for repo in selected if self.state.index.add_tags(repo, args))
        failure = self._persist()
        if failure:
            return failure
        return CommandResult(f"Tagged {changed} repos")

    def alias_command(self, args: list[str]) -> CommandResult | None:
        selected = self.state.selected_repos()
        if len(selected) != 1:
            return CommandResult(
                f"Alias needs exactly one selected repo ({len(selected)} selected)",
                MessageLevel.WARNING,
            )
        if not args:
            return CommandResult("Alias needs a name", MessageLevel.WARNING)
        alias = WORD_SEPARATOR.join(args)
        self.state.index.add_alias(selected[0], alias)
        logger.info("Aliased %s as %s", selected[0].path, alias)
        return self._persist()

    def _persist(self) -> CommandResult | None:
        if not self.autosave:
            return None
        try:
            self.state.index.save()
        except CacheError as exc:
            logger.error("Autosave failed: %s", exc)
            return CommandResult(f"Save failed: {exc}", MessageLevel.ERROR)
        return None
