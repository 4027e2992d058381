"""The game's entry point and a curses-based terminal to play it in."""

from __future__ import annotations

import argparse
import curses
import time
from pathlib import Path
from typing import Any, Sequence

from pataro.console import Color, Console, Key, KeyCode, Mouse
from pataro.engine import Engine

WIDTH = 80
HEIGHT = 45
TITLE = "Pataro"
CLOSE_KEY = 17  # Ctrl-Q

_KEYS = {
    curses.KEY_UP: KeyCode.UP,
    curses.KEY_DOWN: KeyCode.DOWN,
    curses.KEY_LEFT: KeyCode.LEFT,
    curses.KEY_RIGHT: KeyCode.RIGHT,
    curses.KEY_F3: KeyCode.F3,
    27: KeyCode.ESCAPE,
}

_PALETTE = [
    (curses.COLOR_BLACK, (0, 0, 0)),
    (curses.COLOR_RED, (205, 0, 0)),
    (curses.COLOR_GREEN, (0, 205, 0)),
    (curses.COLOR_YELLOW, (205, 205, 0)),
    (curses.COLOR_BLUE, (0, 0, 238)),
    (curses.COLOR_MAGENTA, (205, 0, 205)),
    (curses.COLOR_CYAN, (0, 205, 205)),
    (curses.COLOR_WHITE, (229, 229, 229)),
]


def _nearest_color(color: Color) -> int:
    def distance(entry: tuple[int, tuple[int, int, int]]) -> int:
        r, g, b = entry[1]
        return (color.r - r) ** 2 + (color.g - g) ** 2 + (color.b - b) ** 2

    return min(_PALETTE, key=distance)[0]


class CursesTerminal:
    """Plays the game in a text terminal through curses."""

    def __init__(self, stdscr: Any, fps: int = 30) -> None:
        self.stdscr = stdscr
        self.fps = fps
        self.closed = False
        self._mouse = Mouse()
        self._colors = False
        self._pairs: dict[tuple[int, int], int] = {}
        self._frame_length = 1.0 / fps if fps else 0.0
        self._last_flush = time.monotonic()
        self._setup()

    def _setup(self) -> None:
        self.stdscr.keypad(True)
        for call in (
            lambda: curses.curs_set(0),
            lambda: curses.mousemask(
                curses.ALL_MOUSE_EVENTS | curses.REPORT_MOUSE_POSITION
            ),
            lambda: curses.set_escdelay(25),
        ):
            try:
                call()
            except curses.error:
                pass
        try:
            if curses.has_colors():
                curses.start_color()
                self._colors = True
        except curses.error:
            self._colors = False

    def _still_mouse(self) -> Mouse:
        return Mouse(self._mouse.cx, self._mouse.cy)

    def _translate(self, ch: int) -> tuple[Key, Mouse]:
        if ch == CLOSE_KEY:
            self.closed = True
            return Key(), self._still_mouse()
        if ch == curses.KEY_MOUSE:
            try:
                _, x, y, _, bstate = curses.getmouse()
            except curses.error:
                return Key(), self._still_mouse()
            left = curses.BUTTON1_PRESSED | curses.BUTTON1_CLICKED
            right = curses.BUTTON3_PRESSED | curses.BUTTON3_CLICKED
            self._mouse = Mouse(x, y, bool(bstate & left), bool(bstate & right))
            return Key(), self._mouse
        if ch in _KEYS:
            return Key(_KEYS[ch]), self._still_mouse()
        if 32 <= ch < 127:
            return Key(KeyCode.CHAR, chr(ch)), self._still_mouse()
        return Key(), self._still_mouse()

    def poll_event(self) -> tuple[Key, Mouse]:
        """Return the pending key and mouse state without waiting."""
        self.stdscr.nodelay(True)
        return self._translate(self.stdscr.getch())

    def wait_key(self) -> Key:
        """Block until a key is pressed and return it."""
        self.stdscr.nodelay(False)
        while not self.closed:
            key, _ = self._translate(self.stdscr.getch())
            if key.vk is not KeyCode.NONE:
                return key
        return Key()

    def _attr(self, fg: Color, bg: Color) -> int:
        if not self._colors:
            return 0
        pair_key = (_nearest_color(fg), _nearest_color(bg))
        number = self._pairs.get(pair_key)
        if number is None:
            number = pair_key[0] * 8 + pair_key[1] + 1
            try:
                curses.init_pair(number, *pair_key)
            except (curses.error, ValueError):
                return 0
            self._pairs[pair_key] = number
        return curses.color_pair(number)

    def flush(self, console: Console) -> None:
        """Draw ``console`` on the screen, keeping at most ``fps`` frames a second."""
        rows, cols = self.stdscr.getmaxyx()
        for y in range(min(console.height, rows)):
            usable = cols - 1 if y == rows - 1 else cols
            for x in range(min(console.width, usable)):
                attr = self._attr(console.fg_at(x, y), console.bg_at(x, y))
                try:
                    self.stdscr.addstr(y, x, console.char_at(x, y), attr)
                except curses.error:
                    pass
        self.stdscr.refresh()

        if self.fps:
            remaining = 1.0 / self.fps - (time.monotonic() - self._last_flush)
            if remaining > 0:
                time.sleep(remaining)
        now = time.monotonic()
        self._frame_length = now - self._last_flush
        self._last_flush = now

    def is_closed(self) -> bool:
        return self.closed

    def last_frame_length(self) -> float:
        return self._frame_length


def run(terminal: Any, log_path: str | Path = "game-log.csv") -> Engine:
    """Play on ``terminal`` until it closes, then write the event log."""
    engine = Engine(WIDTH, HEIGHT, TITLE, show_debug=True, terminal=terminal)
    while engine.is_running():
        engine.update()
        engine.render()
        terminal.flush(engine.root)
    engine.export_log(log_path)
    return engine


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="pataro", description="A dungeon crawler.")
    parser.add_argument(
        "--log", default="game-log.csv", help="where to write the game statistics"
    )
    args = parser.parse_args(argv)
    curses.wrapper(lambda stdscr: run(CursesTerminal(stdscr), args.log))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())