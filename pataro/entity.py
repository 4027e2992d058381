"""Entities: the player, monsters, items and corpses, built from components."""

from __future__ import annotations

import itertools
from copy import copy as _shallow_copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pataro.console import Color, Console

if TYPE_CHECKING:
    from pataro.action import Action
    from pataro.animation import Animation

_ids = itertools.count()


def _clone(component: Any) -> Any:
    return component.clone() if component is not None else None


@dataclass(eq=False)
class Entity:
    """Anything that lives on the map; behaviour comes from optional components."""

    x: int
    y: int
    ch: str
    name: str
    color: Color
    blocking: bool = True
    energy: float = 0.0
    speed: float = 1.0
    id: int = field(default_factory=lambda: next(_ids))
    attacker: Any = None
    destructible: Any = None
    ai: Any = None
    container: Any = None
    use: Any = None
    animation: "Animation | None" = field(default=None, repr=False)

    def copy(self) -> "Entity":
        """Return a copy with the same id and cloned components; energy and speed are reset."""
        return Entity(
            self.x,
            self.y,
            self.ch,
            self.name,
            self.color,
            blocking=self.blocking,
            id=self.id,
            attacker=_clone(self.attacker),
            destructible=_clone(self.destructible),
            ai=_clone(self.ai),
            container=_clone(self.container),
            use=_clone(self.use),
        )

    def morph_into(self, ch: str, color: Color) -> None:
        """Change how the entity looks."""
        self.ch = ch
        self.color = color

    def render(self, console: Console, dt: float = 0.0, dx: int = 0, dy: int = 0) -> None:
        """Advance any running animation by ``dt`` and draw the entity offset by (dx, dy)."""
        if self.animation is not None:
            self.animation.update(dt)
            if self.animation.is_finished():
                self.animation = None
        console.put_char(self.x - dx, self.y - dy, self.ch)
        console.set_fg(self.x - dx, self.y - dy, self.color)

    def update(self, engine: Any) -> "Action | None":
        """Ask the AI component, if any, for the action to perform."""
        if self.ai is not None:
            return self.ai.update(self, engine)
        return None

    def gain_energy(self) -> None:
        self.energy += self.speed

    def has_enough_energy(self) -> bool:
        return self.energy >= 1.0

    def set_animation(self, animation: "Animation") -> None:
        """Run a copy of ``animation`` on the next renders."""
        self.animation = _shallow_copy(animation)

    def put_at(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def move(self, dx: int, dy: int) -> None:
        self.x += dx
        self.y += dy