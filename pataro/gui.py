"""The bottom panel: health bar, message log and the names under the mouse."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from pataro.console import DARKER_RED, LIGHT_GREY, RED, WHITE, Color, Console

BAR_WIDTH = 20

Proxy = Callable[[], "tuple[float, float]"]
"""Returns the current and the maximum value shown by the health bar."""


def _format(value: Any) -> str:
    if isinstance(value, float):
        return format(value, "g")
    return str(value)


@dataclass(frozen=True)
class Message:
    """One line of the message log."""

    text: str
    color: Color


class Gui:
    """The panel drawn under the map."""

    def __init__(self, width: int, height: int, proxy: Proxy) -> None:
        self.width = width
        self.height = height
        self.proxy = proxy
        self.messages: list[Message] = []
        self._con = Console(width, height)

    def message(self, color: Color, *args: Any) -> None:
        """Log the concatenation of ``args``, one message per line of text."""
        out = "".join(_format(arg) for arg in args)
        *head, last = out.split("\n")
        # A line followed by a newline loses its final character.
        for line in head:
            self.messages.append(Message(line[:-1], color))
        self.messages.append(Message(last, color))

        while self.messages and len(self.messages) >= self.height - 1:
            del self.messages[0]

    def render(self, engine: Any, dest: Console, x: int, y: int) -> None:
        """Draw the panel and copy it onto ``dest`` at (x, y)."""
        con = self._con
        con.clear()

        value, max_value = self.proxy()
        self._render_bar(1, 1, BAR_WIDTH, "HP", value, max_value, RED, DARKER_RED)

        coeff = 0.4
        for row, msg in enumerate(self.messages, start=1):
            con.print_text(BAR_WIDTH + 2, row, msg.text, msg.color * coeff)
            if coeff < 1.0:
                coeff += 0.2

        self._render_mouse_look(engine)
        con.blit(dest, x, y)

    def _render_bar(
        self,
        x: int,
        y: int,
        width: int,
        name: str,
        value: float,
        max_value: float,
        fg: Color,
        bg: Color,
    ) -> None:
        con = self._con
        con.fill_bg(x, y, width, 1, bg)

        ratio = value / max_value if max_value else 0.0
        bar_width = int(ratio * width)
        if bar_width > 0:
            con.fill_bg(x, y, bar_width, 1, fg)

        con.print_text(
            x + width // 2, y, f"{name} : {value:g}/{max_value:g}", WHITE, "center"
        )

    def _render_mouse_look(self, engine: Any) -> None:
        mouse = engine.mouse
        player = engine.player
        x = mouse.cx + (player.x - engine.width // 2)
        y = mouse.cy + (player.y - engine.height // 2)

        if not engine.map.is_in_fov(x, y):
            return

        names = [
            entity.name
            for entity in engine.map.current_level.entities
            if entity.x == x and entity.y == y
        ]
        self._con.print_text(1, 0, ", ".join(names), LIGHT_GREY)