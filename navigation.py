"""Cursor, selection, expansion and filter state over a RepoIndex."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from index import RepoIndex
from models import Repo

logger = logging.getLogger(__name__)


class MessageLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class Prompt:
    """Bottom line of the view: an edit buffer or the last message."""

    editing: bool = False
    text: str = ""
    level: MessageLevel = MessageLevel.INFO

    def begin(self, prompt_char: str) -> None:
        self.editing = True
        self.text = prompt_char
        self.level = MessageLevel.INFO

    def push(self, char: str) -> None:
        self.text += char

    def pop(self) -> None:
        # The seeding prompt character stays
        if len(self.text) > 1:
            self.text = self.text[:-1]

    def show(self, text: str, level: MessageLevel) -> None:
        self.editing = False
        self.text = text
        self.level = level

    def clear(self) -> None:
        self.show("", MessageLevel.INFO)


class NavigationState:
    """Index sets over the records of a RepoIndex.

    ``focus`` indexes the unfiltered record list and always points at a visible
    record, or is None when nothing is visible. ``selected`` and ``expanded``
    survive filtering but are only rendered for visible records.
    """

    def __init__(self, index: RepoIndex) -> None:
        self.index = index
        self.focus: int | None = 0 if len(index) else None
        self.selected: list[int] = []
        self.expanded: set[int] = set()
        self.hidden: set[int] = set()
        self.range_mode = False
        self.prompt = Prompt()
        self.scroll = 0

    @property
    def repos(self) -> list[Repo]:
        return self.index.repos

    @property
    def editing(self) -> bool:
        return self.prompt.editing

    def visible_indices(self) -> list[int]:
        return [i for i in range(len(self.repos)) if i not in self.hidden]

    def focused_repo(self) -> Repo | None:
        if self.focus is None:
            return None
        return self.repos[self.focus]

    def selected_repos(self) -> list[Repo]:
        return [self.repos[i] for i in self.selected]

    def _move(self, step: int) -> None:
        if self.focus is None:
            return
        if self.range_mode:
            self.select(self.focus)
        visible = self.visible_indices()
        pos = visible.index(self.focus)
        pos = max(0, min(len(visible) - 1, pos + step))
        self.focus = visible[pos]

    def next(self) -> None:
        self._move(1)

    def previous(self) -> None:
        self._move(-1)

    def select(self, idx: int) -> None:
        if idx not in self.selected:
            self.selected.append(idx)

    def select_current(self) -> None:
        if self.focus is not None:
            logger.debug("Selecting %d", self.focus)
            self.select(self.focus)

    def start_select_range(self) -> None:
        if self.range_mode:
            logger.debug("Exiting select range")
            self.range_mode = False
            return
        logger.debug("Starting select range")
        self.range_mode = True
        self.select_current()

    def reset_selected(self) -> None:
        self.range_mode = False
        self.selected = []

    def toggle_expanded(self) -> None:
        if self.focus is None:
            return
        if self.focus in self.expanded:
            self.expanded.discard(self.focus)
        else:
            self.expanded.add(self.focus)

    def apply_filter(self, query: str) -> int:
        """Hide records whose name lacks ``query``; replaces any previous filter.

        Returns the number of visible records.
        """
        self.hidden = {i for i, repo in enumerate(self.repos) if not repo.matches(query)}
        self._restore_focus()
        visible = len(self.repos) - len(self.hidden)
        logger.info("Filtering on %r, matched %d repos", query, visible)
        return visible

    def _restore_focus(self) -> None:
        visible = self.visible_indices()
        if not visible:
            self.focus = None
            return
        if self.focus is not None and self.focus not in self.hidden:
            return
        anchor = self.focus or 0
        after = [i for i in visible if i >= anchor]
        self.focus = after[0] if after else visible[-1]
