"""Artificial intelligences for monsters and the player."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Any

from pataro.action import Action
from pataro.actions import DropAction, MoveAction, PickUpAction, UseAction
from pataro.components import AI, TRACKING_TURNS
from pataro.console import Color, Console, KeyCode, WHITE

if TYPE_CHECKING:
    from pataro.entity import Entity

INVENTORY_WIDTH = 50
INVENTORY_HEIGHT = 28
INVENTORY_FRAME_COLOR = Color(200, 180, 50)

_ARROWS = {
    KeyCode.UP: (0, -1),
    KeyCode.DOWN: (0, 1),
    KeyCode.LEFT: (-1, 0),
    KeyCode.RIGHT: (1, 0),
}


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _game_state():
    # Imported on use: the engine module itself depends on this one.
    from pataro.engine import GameState

    return GameState


class MonsterAI(AI):
    """Chases the player while seen, and for a few turns after losing sight."""

    def __init__(self, move_count: int = 0) -> None:
        self.move_count = move_count

    def update(self, owner: "Entity", engine: Any) -> "Action | None":
        destructible = owner.destructible
        if destructible is not None and destructible.is_dead:
            return None

        if engine.map.is_in_fov(owner.x, owner.y):
            self.move_count = TRACKING_TURNS
        else:
            self.move_count -= 1

        if self.move_count > 0:
            return self.move_or_attack(owner, engine.player.x, engine.player.y, engine)
        return None

    def move_or_attack(self, owner: "Entity", x: int, y: int, engine: Any) -> Action:
        """Step toward (x, y), sliding along walls; adjacent targets get attacked."""
        dx, dy = x - owner.x, y - owner.y
        step_dx = 1 if dx > 0 else -1
        step_dy = 1 if dy > 0 else -1
        game_map = engine.map

        distance = math.sqrt(dx * dx + dy * dy)
        if distance >= 2.0:
            dx = _round_half_away(dx / distance)
            dy = _round_half_away(dy / distance)
            if game_map.can_walk(owner.x + dx, owner.y + dy):
                return MoveAction(owner, dx, dy)
            if game_map.can_walk(owner.x + step_dx, owner.y):
                return MoveAction(owner, step_dx, 0)
            if game_map.can_walk(owner.x, owner.y + step_dy):
                return MoveAction(owner, 0, step_dy)
        return MoveAction(owner, dx, dy)

    def clone(self) -> "MonsterAI":
        return MonsterAI(self.move_count)


class PlayerAI(AI):
    """Turns the last key press into the player's action."""

    def update(self, owner: "Entity", engine: Any) -> "Action | None":
        game_state = _game_state()
        destructible = owner.destructible
        if destructible is not None and destructible.is_dead:
            engine.change_state(game_state.DEFEAT)
            return None

        key = engine.lastkey
        dx, dy = _ARROWS.get(key.vk, (0, 0))
        action = None
        if key.vk is KeyCode.CHAR:
            action = self.handle_action_key(owner, engine, key.c)

        if dx or dy:
            engine.change_state(game_state.NEW_TURN)
            engine.log("turn")
            return MoveAction(owner, dx, dy)
        if action is not None:
            engine.change_state(game_state.NEW_TURN)
            engine.log("turn")
            return action
        return None

    def handle_action_key(self, owner: "Entity", engine: Any, ascii: str) -> "Action | None":
        """Map a character key to an action: g picks up, i uses, d drops."""
        if ascii == "g":
            return PickUpAction(owner, owner.x, owner.y)
        if ascii == "i":
            item = self.choose_from_inventory(owner, engine)
            if item is not None:
                return UseAction(owner, item)
        elif ascii == "d":
            item = self.choose_from_inventory(owner, engine)
            if item is not None:
                return DropAction(owner, item)
        return None

    def choose_from_inventory(self, owner: "Entity", engine: Any) -> "Entity | None":
        """Show the inventory and return the item whose letter is pressed, if any."""
        panel = Console(INVENTORY_WIDTH, INVENTORY_HEIGHT)
        panel.draw_frame(
            0, 0, INVENTORY_WIDTH, INVENTORY_HEIGHT, "inventory", INVENTORY_FRAME_COLOR
        )
        container = owner.container
        for row, item in enumerate(container, start=1):
            panel.print_text(2, row, f"({chr(ord('a') + row - 1)}) {item.name}", WHITE)

        panel.blit(
            engine.root,
            engine.width // 2 - INVENTORY_WIDTH // 2,
            engine.height // 2 - INVENTORY_HEIGHT // 2,
        )
        engine.terminal.flush(engine.root)

        key = engine.terminal.wait_key()
        if key.vk is KeyCode.CHAR and len(key.c) == 1:
            index = ord(key.c) - ord("a")
            if 0 <= index < len(container):
                return container[index]
        return None

    def clone(self) -> "PlayerAI":
        return PlayerAI()