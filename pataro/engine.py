"""The game engine: owns the player, the map and the panel, and runs each frame."""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any

from pataro.ai import PlayerAI
from pataro.components import Attacker, Container, PlayerDestructible
from pataro.console import (
    RED,
    WHITE,
    Color,
    Console,
    Key,
    KeyCode,
    Mouse,
    Terminal,
)
from pataro.entity import Entity
from pataro.gui import Gui
from pataro.level import LEVEL_H, LEVEL_W
from pataro.map import Map
from pataro.utils import (
    GATHER_ANON_STATS,
    PLAYER_FOV,
    date_to_string,
    get_manhattan_distance,
)

GUI_HEIGHT = 7
STATS_WIDTH = 50
STATS_HEIGHT = 28
STATS_FRAME_COLOR = Color(50, 180, 200)
WELCOME = "Welcome stranger!\nPrepare to perish in the Tombs of the Ancient Kings."


class GameState(enum.Enum):
    """Where the game stands during the current frame."""

    STARTUP = "startup"
    IDLE = "idle"
    NEW_TURN = "new_turn"
    VICTORY = "victory"
    DEFEAT = "defeat"


class Engine:
    """Runs the game on a terminal: input, turns and drawing."""

    def __init__(
        self,
        width: int,
        height: int,
        title: str = "Pataro",
        show_debug: bool = False,
        terminal: Terminal | Any = None,
        rng: Any = None,
        screenshot_dir: str | Path = ".",
    ) -> None:
        self.width = width
        self.height = height
        self.title = title
        self.show_debug = show_debug
        self.terminal = terminal if terminal is not None else Terminal()
        self.rng = rng
        self.screenshot_dir = Path(screenshot_dir)
        self.root = Console(width, height)
        self.lastkey = Key()
        self.mouse = Mouse()
        self.state = GameState.STARTUP
        self.stats: dict[str, int] = {}
        self.scroll_pos = 0
        self.reset()

    def reset(self) -> None:
        """Start a new game: fresh player, map and panel. Event counters are kept."""
        self.state = GameState.STARTUP

        player = Entity(0, 0, "@", "Player", WHITE)
        player.ai = PlayerAI()
        player.attacker = Attacker(5.0)
        player.destructible = PlayerDestructible(30.0, 2.0, "your cadaver")
        player.container = Container(26)  # one slot per letter of the alphabet
        self.player = player

        self.map = Map(LEVEL_W, LEVEL_H, 1, rng=self.rng)
        self.map.current_level.enter(player)

        def player_hp() -> tuple[float, float]:
            destructible = self.player.destructible
            return destructible.hp, destructible.max_hp

        self.gui = Gui(self.width, GUI_HEIGHT, player_hp)
        self.gui.message(RED, WELCOME)

    def change_state(self, state: GameState) -> None:
        self.state = state

    def update(self) -> None:
        """Read input, let the player act and, on a new turn, every other entity."""
        if self.state is GameState.STARTUP:
            self.map.compute_fov(self.player.x, self.player.y, PLAYER_FOV)
        elif self.state is not GameState.DEFEAT:
            self.state = GameState.IDLE

        self.lastkey, self.mouse = self.terminal.poll_event()

        if self.state is not GameState.DEFEAT:
            action = self.player.update(self)
            if action is not None:
                action.perform(self)

        vk = self.lastkey.vk
        defeated = self.state is GameState.DEFEAT
        if vk is KeyCode.F3:
            self.save_screenshot()
        elif vk in (KeyCode.UP, KeyCode.LEFT):
            if defeated:
                self.scroll_pos = 0 if self.scroll_pos <= 0 else self.scroll_pos - 1
        elif vk in (KeyCode.DOWN, KeyCode.RIGHT):
            if defeated:
                if self.scroll_pos + 1 >= len(self.stats):
                    self.scroll_pos = len(self.stats) - 1
                else:
                    self.scroll_pos += 1
        elif vk is KeyCode.ESCAPE:
            if defeated:
                self.reset()

        if self.state is GameState.NEW_TURN:
            self.map.update(self)

    def save_screenshot(self) -> Path:
        """Write the characters of the screen to a dated text file and return its path."""
        path = self.screenshot_dir / f"screenshot_{date_to_string()}.txt"
        lines = (
            "".join(self.root.char_at(x, y) for x in range(self.root.width)).rstrip()
            for y in range(self.root.height)
        )
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    def render(self) -> None:
        """Draw the map, the panel and, after a defeat, the game statistics."""
        root = self.root
        root.clear()

        self.map.render(self)
        self.gui.render(self, root, 0, self.height - self.gui.height)

        if self.show_debug:
            frame = self.terminal.last_frame_length()
            fps = 1.0 / frame if frame else float("inf")
            root.print_text(0, 0, f"{fps:.2f}", WHITE)

        if self.state is GameState.DEFEAT:
            panel = Console(STATS_WIDTH, STATS_HEIGHT)
            panel.draw_frame(
                0, 0, STATS_WIDTH, STATS_HEIGHT, "Game statistics", STATS_FRAME_COLOR
            )
            for row, name in enumerate(sorted(self.stats), start=1):
                if row - self.scroll_pos > 0:
                    panel.print_text(
                        2, row - self.scroll_pos, f"{name}: {self.stats[name]}", WHITE
                    )
            panel.blit(
                root,
                self.width // 2 - STATS_WIDTH // 2,
                self.height // 2 - STATS_HEIGHT // 2,
            )
            root.print_text(self.width - 23, 0, "Press ESCAPE to restart", WHITE)

    def is_running(self) -> bool:
        return not self.terminal.is_closed()

    def log(self, name: str) -> None:
        """Count one occurrence of the event ``name``."""
        self.stats[name] = self.stats.get(name, 0) + 1

    def export_log(self, path: str | Path = "game-log.csv") -> None:
        """Write the event counters as CSV, sorted by event name."""
        if not GATHER_ANON_STATS:
            return
        with open(path, "w", encoding="utf-8", newline="") as out:
            out.write("field,occurences\n")
            for name in sorted(self.stats):
                out.write(f"{name},{self.stats[name]}\n")

    def pick_a_tile(self, max_range: float = 0.0) -> tuple[int, int] | None:
        """Let the player click a visible tile within ``max_range`` (0: any); None if cancelled."""
        xp, yp = self.player.x, self.player.y
        dx = xp - self.width // 2
        dy = yp - self.height // 2

        def reachable(tx: int, ty: int) -> bool:
            distance = get_manhattan_distance(tx, ty, xp, yp)
            return self.map.is_in_fov(tx, ty) and (max_range == 0.0 or distance <= max_range)

        while self.is_running():
            self.render()
            self.lastkey, self.mouse = self.terminal.poll_event()

            level = self.map.current_level
            for cx in range(level.width):
                for cy in range(level.height):
                    if reachable(cx, cy):
                        color = self.root.bg_at(cx - dx, cy - dy) * 1.2
                        self.root.set_bg(cx - dx, cy - dy, color)

            tx, ty = self.mouse.cx + dx, self.mouse.cy + dy
            if reachable(tx, ty):
                self.root.set_bg(self.mouse.cx, self.mouse.cy, WHITE)
                if self.mouse.lbutton_pressed:
                    return tx, ty

            if self.mouse.rbutton_pressed:
                return None

            self.terminal.flush(self.root)

        return None