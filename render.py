"""Frame building for the interactive repository view."""

from __future__ import annotations

import io

from rich.console import Console
from rich.text import Text

from models import Repo, StatusKind
from navigation import MessageLevel, NavigationState

COLLAPSED_FOCUSED = "▶ "
COLLAPSED_UNFOCUSED = "▷ "
EXPANDED_FOCUSED = "▼ "
EXPANDED_UNFOCUSED = "▽ "

NAME_PADDING = 3
DETAIL_INDENT = "    "

STATUS_COLORS = {
    StatusKind.CLEAN: "green",
    StatusKind.DIRTY: "yellow",
    StatusKind.DIVERGED: "red",
    StatusKind.DETACHED: "red",
}

PROMPT_STYLES = {
    MessageLevel.INFO: "",
    MessageLevel.WARNING: "yellow",
    MessageLevel.ERROR: "red",
}

FOCUSED_STYLE = "bold black on bright_blue"
SELECTED_STYLE = "white on grey39"
TITLE_STYLE = "bold"


def _marker(focused: bool, expanded: bool) -> str:
    if expanded:
        return EXPANDED_FOCUSED if focused else EXPANDED_UNFOCUSED
    return COLLAPSED_FOCUSED if focused else COLLAPSED_UNFOCUSED


def repo_lines(
    repo: Repo,
    *,
    name_width: int,
    focused: bool = False,
    selected: bool = False,
    expanded: bool = False,
) -> list[Text]:
    """Render one record as a collapsed row, plus detail lines when expanded."""
    row_style = FOCUSED_STYLE if focused else SELECTED_STYLE if selected else ""
    status = repo.display_status

    row = Text(style=row_style)
    row.append(_marker(focused, expanded))
    row.append(repo.name.ljust(name_width + NAME_PADDING))
    row.append(status.label.ljust(16), style=STATUS_COLORS.get(status.kind, ""))
    row.append(" | ")
    row.append(", ".join(repo.tags))
    if repo.alias:
        row.append(f"  ({repo.alias})", style="italic")
    if not expanded:
        return [row]

    details = [
        f"Branch: {repo.branch}",
        f"Remotes: {', '.join(repo.remotes) or '-'}",
        f"Alias: {repo.alias or '-'}",
        f"Status: {status.label}",
    ]
    return [row] + [Text(DETAIL_INDENT + line, style=row_style) for line in details]


def _scroll_to_focus(state: NavigationState, focus_top: int, focus_height: int, rows: int) -> int:
    if focus_top < state.scroll:
        state.scroll = focus_top
    elif focus_top + focus_height > state.scroll + rows:
        state.scroll = focus_top + focus_height - rows
    state.scroll = max(0, state.scroll)
    return state.scroll


def prompt_line(state: NavigationState) -> Text:
    prompt = state.prompt
    if prompt.editing:
        return Text(prompt.text + "█")
    return Text(prompt.text, style=PROMPT_STYLES[prompt.level])


def build_frame(state: NavigationState, name_width: int, height: int) -> list[Text]:
    """Return exactly ``height`` lines: title, repository list, prompt line."""
    visible = state.visible_indices()
    lines: list[Text] = []
    focus_top, focus_height = 0, 1
    for idx in visible:
        block = repo_lines(
            state.repos[idx],
            name_width=name_width,
            focused=idx == state.focus,
            selected=idx in state.selected,
            expanded=idx in state.expanded,
        )
        if idx == state.focus:
            focus_top, focus_height = len(lines), len(block)
        lines.extend(block)

    rows = max(0, height - 2)
    start = _scroll_to_focus(state, focus_top, focus_height, rows)
    body = lines[start : start + rows]
    body.extend(Text() for _ in range(rows - len(body)))

    title = Text(f"Repositories ({len(visible)}/{len(state.repos)})", style=TITLE_STYLE)
    if state.range_mode:
        title.append("  -- RANGE --")
    return [title, *body, prompt_line(state)][:height]


class Screen:
    """Draws frames of styled lines onto a terminal."""

    def __init__(self, terminal) -> None:
        self.terminal = terminal
        self._buffer = io.StringIO()
        self._console = Console(file=self._buffer, force_terminal=True, color_system="256")

    def to_ansi(self, line: Text, width: int) -> str:
        line = line.copy()
        line.truncate(width, overflow="crop")
        self._buffer.seek(0)
        self._buffer.truncate()
        self._console.print(line, end="", soft_wrap=True)
        return self._buffer.getvalue()

    def draw(self, state: NavigationState, name_width: int) -> None:
        width, height = self.terminal.size()
        frame = build_frame(state, name_width, height)
        payload = "\r\n".join(self.to_ansi(line, width) + "\x1b[K" for line in frame)
        self.terminal.write("\x1b[H" + payload + "\x1b[J")
