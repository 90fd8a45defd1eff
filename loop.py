"""Render/read/dispatch loop of the interactive view."""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from commands import CommandInterpreter
from config import TICK_MS
from navigation import NavigationState
from render import Screen
from shell import write_cd_script
from terminal import TerminalController

logger = logging.getLogger(__name__)

EDIT_KEYS = {":", "/"}
QUIT_KEYS = {"q"}
DOWN_KEYS = {"DOWN", "j"}
UP_KEYS = {"UP", "k"}
EXPAND_KEYS = {"LEFT", "RIGHT", "h", "l"}
SELECT_KEY = "v"
RANGE_KEY = "V"


class Action(Enum):
    CONTINUE = "continue"
    EXIT = "exit"
    CONFIRM = "confirm"


def handle_editing_key(key: str, state: NavigationState, interpreter: CommandInterpreter) -> Action:
    if key == "ENTER":
        interpreter.submit()
    elif key == "BACKSPACE":
        state.prompt.pop()
    elif key == "ESC":
        state.prompt.clear()
    elif len(key) == 1 and key.isprintable():
        state.prompt.push(key)
    return Action.CONTINUE


def handle_normal_key(key: str, state: NavigationState) -> Action:
    if key in QUIT_KEYS:
        return Action.EXIT
    if key == "ENTER":
        return Action.CONFIRM
    if key in DOWN_KEYS:
        state.next()
    elif key in UP_KEYS:
        state.previous()
    elif key == SELECT_KEY:
        state.select_current()
    elif key == RANGE_KEY:
        state.start_select_range()
    elif key in EXPAND_KEYS:
        state.toggle_expanded()
    elif key in EDIT_KEYS:
        state.prompt.begin(key)
    elif key == "ESC":
        state.reset_selected()
    return Action.CONTINUE


def handle_key(key: str, state: NavigationState, interpreter: CommandInterpreter) -> Action:
    """Apply one key to the state machine and report what the loop should do."""
    if key == "CTRL_C":
        return Action.EXIT
    if state.editing:
        return handle_editing_key(key, state, interpreter)
    return handle_normal_key(key, state)


def confirm_selection(state: NavigationState, shell_file: Path) -> None:
    repo = state.focused_repo()
    if repo is None:
        logger.error("Cannot write shell script: nothing focused")
        return
    write_cd_script(shell_file, repo.path)


def run_main_loop(
    *,
    state: NavigationState,
    interpreter: CommandInterpreter,
    terminal: TerminalController,
    shell_file: Path,
    tick_ms: int = TICK_MS,
) -> None:
    """Run until quit or confirm; the terminal is restored on every exit path."""
    screen = Screen(terminal)
    name_width = state.index.longest_name_width()

    with terminal.raw_mode():
        while True:
            screen.draw(state, name_width)
            key = terminal.read_key(timeout_ms=tick_ms)
            if not key:
                continue
            action = handle_key(key, state, interpreter)
            if action is Action.CONFIRM:
                confirm_selection(state, shell_file)
                break
            if action is Action.EXIT:
                break
