"""An in-memory character console, colours, input events and a scripted terminal."""

from __future__ import annotations

import enum
from collections import deque
from dataclasses import dataclass
from typing import Iterable, Union


@dataclass(frozen=True)
class Color:
    """An RGB colour with components in 0..255."""

    r: int
    g: int
    b: int

    def __mul__(self, factor: float) -> "Color":
        def scale(value: int) -> int:
            return max(0, min(int(value * factor), 255))

        return Color(scale(self.r), scale(self.g), scale(self.b))

    __rmul__ = __mul__


BLACK = Color(0, 0, 0)
WHITE = Color(255, 255, 255)
RED = Color(255, 0, 0)
DARK_RED = Color(191, 0, 0)
DARKER_RED = Color(128, 0, 0)
LIGHT_GREY = Color(191, 191, 191)
LIGHT_BLUE = Color(63, 63, 255)
DARK_BLUE = Color(0, 0, 191)
ORANGE = Color(255, 127, 0)
DARK_ORANGE = Color(191, 95, 0)
LIGHT_GREEN = Color(63, 255, 63)
DESATURATED_GREEN = Color(63, 127, 63)
DARKER_GREEN = Color(0, 128, 0)
VIOLET = Color(127, 0, 255)
LIGHT_YELLOW = Color(255, 255, 63)
CYAN = Color(0, 255, 255)


class KeyCode(enum.Enum):
    """Virtual key codes the game reacts to."""

    NONE = "none"
    CHAR = "char"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ESCAPE = "escape"
    F3 = "f3"


@dataclass(frozen=True)
class Key:
    """A key press; ``c`` holds the character when ``vk`` is ``KeyCode.CHAR``."""

    vk: KeyCode = KeyCode.NONE
    c: str = ""


@dataclass(frozen=True)
class Mouse:
    """Mouse position in console cells and button presses of this frame."""

    cx: int = 0
    cy: int = 0
    lbutton_pressed: bool = False
    rbutton_pressed: bool = False


_FRAME_CHARS = {
    "tl": "┌",
    "tr": "┐",
    "bl": "└",
    "br": "┘",
    "h": "─",
    "v": "│",
}


class Console:
    """A grid of cells, each holding a character, a foreground and a background colour."""

    def __init__(self, width: int, height: int) -> None:
        if width < 0 or height < 0:
            raise ValueError("console dimensions must not be negative")
        self.width = width
        self.height = height
        self.clear()

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def clear(self) -> None:
        """Blank every cell: space, white foreground, black background."""
        self._chars = [[" "] * self.width for _ in range(self.height)]
        self._fg = [[WHITE] * self.width for _ in range(self.height)]
        self._bg = [[BLACK] * self.width for _ in range(self.height)]

    def put_char(self, x: int, y: int, ch: str) -> None:
        """Set the character of a cell; cells outside the console are ignored."""
        if self._in_bounds(x, y):
            self._chars[y][x] = ch

    def char_at(self, x: int, y: int) -> str:
        """Return the character of a cell, a space outside the console."""
        return self._chars[y][x] if self._in_bounds(x, y) else " "

    def set_fg(self, x: int, y: int, color: Color) -> None:
        if self._in_bounds(x, y):
            self._fg[y][x] = color

    def fg_at(self, x: int, y: int) -> Color:
        return self._fg[y][x] if self._in_bounds(x, y) else WHITE

    def set_bg(self, x: int, y: int, color: Color) -> None:
        if self._in_bounds(x, y):
            self._bg[y][x] = color

    def bg_at(self, x: int, y: int) -> Color:
        return self._bg[y][x] if self._in_bounds(x, y) else BLACK

    def fill_bg(self, x: int, y: int, width: int, height: int, color: Color) -> None:
        """Set the background of a rectangle of cells."""
        for cy in range(y, y + height):
            for cx in range(x, x + width):
                self.set_bg(cx, cy, color)

    def print_text(
        self,
        x: int,
        y: int,
        text: str,
        color: Color = WHITE,
        align: str = "left",
    ) -> None:
        """Print text with its anchor at (x, y); ``align`` is left, center or right."""
        if align not in ("left", "center", "right"):
            raise ValueError(f"unknown alignment: {align!r}")
        for line_no, line in enumerate(text.split("\n")):
            if align == "left":
                start = x
            elif align == "center":
                start = x - len(line) // 2
            else:
                start = x - len(line) + 1
            for offset, ch in enumerate(line):
                self.put_char(start + offset, y + line_no, ch)
                self.set_fg(start + offset, y + line_no, color)

    def draw_frame(
        self,
        x: int,
        y: int,
        width: int,
        height: int,
        title: str = "",
        color: Color = WHITE,
    ) -> None:
        """Draw a bordered box with a cleared interior and an optional centred title."""
        right, bottom = x + width - 1, y + height - 1
        for cy in range(y, y + height):
            for cx in range(x, x + width):
                top_or_bottom = cy in (y, bottom)
                left_or_right = cx in (x, right)
                if top_or_bottom and left_or_right:
                    key = ("t" if cy == y else "b") + ("l" if cx == x else "r")
                    ch = _FRAME_CHARS[key]
                elif top_or_bottom:
                    ch = _FRAME_CHARS["h"]
                elif left_or_right:
                    ch = _FRAME_CHARS["v"]
                else:
                    ch = " "
                self.put_char(cx, cy, ch)
                self.set_fg(cx, cy, color)
        if title:
            label = f" {title} "
            self.print_text(x + (width - len(label)) // 2, y, label, color)

    def blit(self, dest: "Console", x: int, y: int) -> None:
        """Copy every cell of this console onto ``dest`` with its top-left at (x, y)."""
        for cy in range(self.height):
            for cx in range(self.width):
                dest.put_char(x + cx, y + cy, self._chars[cy][cx])
                dest.set_fg(x + cx, y + cy, self._fg[cy][cx])
                dest.set_bg(x + cx, y + cy, self._bg[cy][cx])


Event = Union[Key, Mouse, "tuple[Key, Mouse]"]


class Terminal:
    """A headless terminal fed with scripted events; it keeps the last flushed screen."""

    def __init__(
        self,
        events: Iterable[Event] = (),
        frame_length: float = 1 / 30,
        close_when_done: bool = True,
    ) -> None:
        self.events: deque = deque(events)
        self.frame_length = frame_length
        self.close_when_done = close_when_done
        self.closed = False
        self.screen: Console | None = None
        self.frames = 0
        self._mouse = Mouse()

    def _next_event(self) -> tuple[Key, Mouse] | None:
        if not self.events:
            return None
        item = self.events.popleft()
        if isinstance(item, Key):
            key, mouse = item, Mouse(self._mouse.cx, self._mouse.cy)
        elif isinstance(item, Mouse):
            key, mouse = Key(), item
        elif isinstance(item, tuple) and len(item) == 2:
            key, mouse = item
        else:
            raise TypeError(f"unsupported event: {item!r}")
        self._mouse = mouse
        return key, mouse

    def poll_event(self) -> tuple[Key, Mouse]:
        """Return the next key and mouse state, or no key if nothing is pending."""
        event = self._next_event()
        if event is None:
            self._mouse = Mouse(self._mouse.cx, self._mouse.cy)
            return Key(), self._mouse
        return event

    def wait_key(self) -> Key:
        """Return the next key press, skipping pure mouse events."""
        while (event := self._next_event()) is not None:
            if event[0].vk is not KeyCode.NONE:
                return event[0]
        return Key()

    def flush(self, console: Console) -> None:
        """Take a snapshot of ``console`` as the displayed screen."""
        snapshot = Console(console.width, console.height)
        console.blit(snapshot, 0, 0)
        self.screen = snapshot
        self.frames += 1

    def is_closed(self) -> bool:
        return self.closed or (self.close_when_done and not self.events)

    def last_frame_length(self) -> float:
        return self.frame_length