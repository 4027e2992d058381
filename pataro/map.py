"""The dungeon: a stack of levels, one of which is current."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pataro.level import Level

if TYPE_CHECKING:
    from pataro.entity import Entity


class Map:
    """Holds the levels of the dungeon and forwards queries to the current one."""

    def __init__(self, width: int, height: int, depth: int, rng: Any = None) -> None:
        if depth < 1:
            raise ValueError("a map needs at least one level")
        self.levels = [Level(width, height, rng=rng) for _ in range(depth)]
        self.current = 0
        self.current_level.generate()

    @property
    def current_level(self) -> Level:
        return self.levels[self.current]

    def is_wall(self, x: int, y: int) -> bool:
        return self.current_level.is_wall(x, y)

    def can_walk(self, x: int, y: int) -> bool:
        return self.current_level.can_walk(x, y)

    def get_entity(self, x: int, y: int) -> "Entity | None":
        return self.current_level.get_entity(x, y)

    def get_closest_monster(self, source: "Entity", range_: float) -> "Entity | None":
        return self.current_level.get_closest_monster(source, range_)

    def compute_fov(self, x: int, y: int, fov_radius: int) -> None:
        self.current_level.compute_fov(x, y, fov_radius)

    def is_in_fov(self, x: int, y: int) -> bool:
        return self.current_level.is_in_fov(x, y)

    def render(self, engine: Any) -> None:
        self.current_level.render(engine)

    def update(self, engine: Any) -> None:
        self.current_level.update(engine)