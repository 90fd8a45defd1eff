"""Terminal control and key decoding for the interactive view.

Owns the raw-mode and alternate-screen lifecycle, and translates raw stdin
bytes into key tokens such as ``"UP"``, ``"ENTER"`` or a literal character.
"""

from __future__ import annotations

import contextlib
import os
import select
import shutil
import termios
import tty

from exceptions import TerminalError

ESC_SEQUENCE_TIMEOUT_MS = 25

ENTER_TUI = b"\x1b[?1049h\x1b[?25l"
LEAVE_TUI = b"\x1b[?25h\x1b[?1049l"

_CONTROL_KEYS = {
    b"\x03": "CTRL_C",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\t": "TAB",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

_ARROW_KEYS = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
}


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        try:
            self._saved_tty_state = termios.tcgetattr(stdin_fd)
        except termios.error as exc:
            raise TerminalError("Interactive mode requires a TTY.") from exc
        self._pending: list[bytes] = []

    def enable_tui_mode(self) -> None:
        try:
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        except termios.error as exc:
            raise TerminalError(f"Unable to enter raw mode: {exc}") from exc
        # Enter alternate screen and hide cursor.
        os.write(self.stdout_fd, ENTER_TUI)

    def disable_tui_mode(self) -> None:
        # Show cursor and restore the main screen buffer.
        os.write(self.stdout_fd, LEAVE_TUI)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @contextlib.contextmanager
    def raw_mode(self):
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()

    def size(self) -> tuple[int, int]:
        """Return (columns, lines)."""
        term = shutil.get_terminal_size((80, 24))
        return term.columns, term.lines

    def write(self, payload: str) -> None:
        os.write(self.stdout_fd, payload.encode("utf-8"))

    def _read_byte(self) -> bytes:
        ch = os.read(self.stdin_fd, 1)
        if not ch:
            raise TerminalError("stdin closed")
        return ch

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        ready, _, _ = select.select([self.stdin_fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        return self._read_byte()

    def _read_char(self, first: bytes) -> str:
        # Collect UTF-8 continuation bytes for multi-byte characters
        needed = 0
        if first[0] >= 0xF0:
            needed = 3
        elif first[0] >= 0xE0:
            needed = 2
        elif first[0] >= 0xC0:
            needed = 1
        data = first
        for _ in range(needed):
            nxt = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if nxt is None:
                break
            data += nxt
        return data.decode("utf-8", errors="replace")

    def read_key(self, timeout_ms: int | None = None) -> str:
        """Return the next key token, or "" when ``timeout_ms`` elapses first.

        Raises ``TerminalError`` once stdin reaches end-of-file.
        """
        if self._pending:
            ch = self._pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.stdin_fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return ""
            ch = self._read_byte()

        if ch in _CONTROL_KEYS:
            return _CONTROL_KEYS[ch]
        if ch != b"\x1b":
            return self._read_char(ch)

        # Escape / arrow key sequences.
        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq not in {b"[", b"O"}:
            self._pending.append(seq)
            return "ESC"
        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        return _ARROW_KEYS.get(seq, "ESC")
