"""Single-use item behaviours, with optional tile selection."""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable

from pataro.components import Use
from pataro.console import CYAN

if TYPE_CHECKING:
    from pataro.action import Action
    from pataro.entity import Entity


class OneTimeUse(Use):
    """Builds ``action(source, owner, *args)`` when used."""

    def __init__(self, action: Callable[..., "Action"], *args: Any) -> None:
        super().__init__()
        self.action = action
        self.args = args

    def use(self, source: "Entity", owner: "Entity", engine: Any) -> "Action":
        return self.action(source, owner, *self.args)

    def clone(self) -> "OneTimeUse":
        return OneTimeUse(self.action, *self.args)


class PickMethod(enum.Enum):
    """How a tile is chosen."""

    SIMPLE = "simple"
    LIVING_ENTITY = "living_entity"


@dataclass
class PickTile:
    """Asks the player to pick a tile within ``range`` and remembers the choice."""

    method: PickMethod
    range: float
    x: int = 0
    y: int = 0
    entity: "Entity | None" = None

    def pick(self, engine: Any) -> bool:
        """Run the selection; return False if it was cancelled or invalid."""
        if self.method is PickMethod.SIMPLE:
            return self._simple(engine)
        if self.method is PickMethod.LIVING_ENTITY:
            return self._live_entity(engine)
        return False

    def _simple(self, engine: Any) -> bool:
        tile = engine.pick_a_tile(self.range)
        if tile is None:
            return False
        self.x, self.y = tile
        return True

    def _live_entity(self, engine: Any) -> bool:
        if not self._simple(engine):
            return False
        self.entity = engine.map.get_entity(self.x, self.y)
        if self.entity is None:
            return False
        destructible = self.entity.destructible
        return destructible is not None and not destructible.is_dead


class OneTimeSelectUse(Use):
    """Asks for a target first, then builds ``action(source, owner, picker, *args)``."""

    def __init__(
        self,
        left_click_text: str,
        picker: PickTile,
        action: Callable[..., "Action"],
        *args: Any,
    ) -> None:
        super().__init__()
        self.text = left_click_text
        self.picker = picker
        self.action = action
        self.args = args

    def use(self, source: "Entity", owner: "Entity", engine: Any) -> "Action | None":
        engine.gui.message(CYAN, "Left-click ", self.text, ",\nor right-click to cancel.")
        if not self.picker.pick(engine):
            return None
        return self.action(source, owner, self.picker, *self.args)

    def clone(self) -> "OneTimeSelectUse":
        return OneTimeSelectUse(self.text, replace(self.picker), self.action, *self.args)