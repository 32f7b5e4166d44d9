"""
Curses terminal renderer.

Draws two rows of piano keys and flashes each played note in its player's
color for the keyboard's mark duration.
"""

import curses
import logging
import threading
import time

from game.keyboard import LOWER_ROW, UPPER_ROW, pitch_for_key
from game.models import Color, KeyboardState, Note

logger = logging.getLogger(__name__)

CELL_WIDTH = 4
TITLE = "piano-session  [arrows: octave/volume, esc: quit]"

COLOR_PAIRS = {
    Color.BLUE: (1, curses.COLOR_BLUE, curses.COLOR_BLACK),
    Color.RED: (2, curses.COLOR_RED, curses.COLOR_BLACK),
    Color.GREEN: (3, curses.COLOR_GREEN, curses.COLOR_BLACK),
    Color.YELLOW: (4, curses.COLOR_YELLOW, curses.COLOR_BLACK),
    Color.CYAN: (5, curses.COLOR_CYAN, curses.COLOR_BLACK),
    Color.MAGENTA: (6, curses.COLOR_MAGENTA, curses.COLOR_BLACK),
    Color.BLACK: (7, curses.COLOR_BLACK, curses.COLOR_WHITE),
}

SPECIAL_KEYS = {
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    27: "esc",
}


def normalize_key(code: int) -> str | None:
    """Map a curses key code to the keyboard's key names."""
    if code in SPECIAL_KEYS:
        return SPECIAL_KEYS[code]
    if 32 <= code < 127:
        return chr(code).lower()
    return None


class TerminalRenderer:
    """Owns the curses screen. All screen access goes through one lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._marks: dict[str, tuple[Color, float]] = {}  # pitch -> (color, expires)
        self._state: KeyboardState | None = None
        self._last_note: Note | None = None

        self._screen = curses.initscr()
        curses.noecho()
        curses.cbreak()
        self._screen.keypad(True)
        self._screen.nodelay(True)
        curses.start_color()
        for pair, fg, bg in COLOR_PAIRS.values():
            curses.init_pair(pair, fg, bg)
        try:
            curses.curs_set(0)
        except curses.error:
            logger.debug("Terminal cannot hide the cursor")

    def draw_keyboard(self, state: KeyboardState) -> None:
        with self._lock:
            self._state = state
            self._redraw()

    def play_note(self, note: Note, state: KeyboardState) -> None:
        mark_seconds = state.mark_duration / 1000
        with self._lock:
            self._state = state
            self._last_note = note
            self._marks[note.pitch] = (note.color, time.monotonic() + mark_seconds)
            self._redraw()
        timer = threading.Timer(mark_seconds, self._expire_marks)
        timer.daemon = True
        timer.start()

    def poll_key(self) -> str | None:
        with self._lock:
            code = self._screen.getch()
        if code == -1:
            return None
        return normalize_key(code)

    def close(self) -> None:
        with self._lock:
            self._screen.keypad(False)
            curses.nocbreak()
            curses.echo()
            curses.endwin()

    def _expire_marks(self) -> None:
        now = time.monotonic()
        with self._lock:
            self._marks = {p: m for p, m in self._marks.items() if m[1] > now}
            self._redraw()

    def _put(self, y: int, x: int, text: str, attr: int = 0) -> None:
        try:
            self._screen.addstr(y, x, text, attr)
        except curses.error:
            # clipped by the terminal edge
            return

    def _draw_row(self, y: int, row: str, sequence: int) -> None:
        for i, key in enumerate(row):
            pitch = pitch_for_key(key, sequence)
            attr = curses.A_DIM
            mark = self._marks.get(pitch)
            if mark is not None:
                attr = curses.color_pair(COLOR_PAIRS[mark[0]][0]) | curses.A_REVERSE
            self._put(y, i * CELL_WIDTH, f"{pitch:<{CELL_WIDTH - 1}}", attr)
            self._put(y + 1, i * CELL_WIDTH, f" {key} ", curses.A_BOLD)

    def _redraw(self) -> None:
        if self._state is None:
            return
        state = self._state
        self._screen.erase()
        self._put(0, 0, TITLE, curses.A_BOLD)
        self._draw_row(2, UPPER_ROW, state.sequence)
        self._draw_row(5, LOWER_ROW, state.sequence)

        own = curses.color_pair(COLOR_PAIRS[state.color][0])
        self._put(8, 0, "you: ")
        self._put(8, 5, state.color.value, own | curses.A_BOLD)
        self._put(8, 16, f"octave: {state.sequence}  volume: {state.volume:.1f}")
        if self._last_note is not None:
            note = self._last_note
            self._put(9, 0, f"last: {note.pitch}", curses.color_pair(COLOR_PAIRS[note.color][0]))
        self._screen.refresh()
