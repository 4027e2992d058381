"""A single dungeon floor: tiles, field of view, BSP room generation and its entities."""

from __future__ import annotations

import random
from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterator

from pataro.console import Color
from pataro.entity_factory import EntityFactory
from pataro.utils import get_manhattan_distance

if TYPE_CHECKING:
    from pataro.entity import Entity

ROOM_MAX_W = 12
ROOM_MAX_H = 12
ROOM_MIN_W = 6
ROOM_MIN_H = 6
LEVEL_W = 80
LEVEL_H = 50
MAX_ROOM_MONSTERS = 3
MAX_ROOM_ITEMS = 2

DARK_WALL = Color(0, 0, 100)
DARK_GROUND = Color(50, 50, 150)
LIGHT_WALL = Color(130, 110, 50)
LIGHT_GROUND = Color(200, 180, 50)

_default_rng = random.Random()


def _rand_int(rng: Any, low: int, high: int) -> int:
    """Inclusive random integer; the bounds may be given in either order."""
    if low > high:
        low, high = high, low
    return rng.randint(low, high)


def _line(x0: int, y0: int, x1: int, y1: int) -> Iterator[tuple[int, int]]:
    """Yield the cells of a Bresenham line from (x0, y0) to (x1, y1), both included."""
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy
    while True:
        yield x0, y0
        if x0 == x1 and y0 == y1:
            return
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x0 += sx
        if e2 <= dx:
            err += dx
            y0 += sy


@dataclass(frozen=True)
class Room:
    """A rectangular room dug in a level."""

    x: int
    y: int
    width: int
    height: int


@dataclass
class Tile:
    """Per-tile state remembered by the player."""

    explored: bool = False


class FovMap:
    """Walkability and transparency of each cell, with ray-cast field of view."""

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self._transparent = [[False] * width for _ in range(height)]
        self._walkable = [[False] * width for _ in range(height)]
        self._fov = [[False] * width for _ in range(height)]

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def set_properties(self, x: int, y: int, transparent: bool, walkable: bool) -> None:
        """Set a cell's properties; cells outside the map are ignored."""
        if self._in_bounds(x, y):
            self._transparent[y][x] = transparent
            self._walkable[y][x] = walkable

    def is_walkable(self, x: int, y: int) -> bool:
        return self._in_bounds(x, y) and self._walkable[y][x]

    def is_transparent(self, x: int, y: int) -> bool:
        return self._in_bounds(x, y) and self._transparent[y][x]

    def is_in_fov(self, x: int, y: int) -> bool:
        return self._in_bounds(x, y) and self._fov[y][x]

    def compute_fov(self, x: int, y: int, radius: int = 0) -> None:
        """Compute what is visible from (x, y); a radius of 0 means unlimited. Walls are lit."""
        self._fov = [[False] * self.width for _ in range(self.height)]
        if not self._in_bounds(x, y):
            return
        self._fov[y][x] = True

        if radius > 0:
            xmin, xmax = max(0, x - radius), min(self.width - 1, x + radius)
            ymin, ymax = max(0, y - radius), min(self.height - 1, y + radius)
        else:
            xmin, xmax, ymin, ymax = 0, self.width - 1, 0, self.height - 1
        r2 = radius * radius

        for tx, ty in self._border(xmin, ymin, xmax, ymax):
            self._cast(x, y, tx, ty, r2)

    @staticmethod
    def _border(xmin: int, ymin: int, xmax: int, ymax: int) -> Iterator[tuple[int, int]]:
        for bx in range(xmin, xmax + 1):
            yield bx, ymin
            yield bx, ymax
        for by in range(ymin, ymax + 1):
            yield xmin, by
            yield xmax, by

    def _cast(self, ox: int, oy: int, tx: int, ty: int, r2: int) -> None:
        ray = _line(ox, oy, tx, ty)
        next(ray)
        for px, py in ray:
            if r2 and (px - ox) ** 2 + (py - oy) ** 2 > r2:
                break
            self._fov[py][px] = True
            if not self._transparent[py][px]:
                break


@dataclass(eq=False)
class BspNode:
    """A node of a binary space partition of a rectangle."""

    x: int
    y: int
    w: int
    h: int
    level: int = 0
    left: "BspNode | None" = field(default=None, repr=False)
    right: "BspNode | None" = field(default=None, repr=False)

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def _split_once(self, horizontal: bool, position: int) -> None:
        if horizontal:
            self.left = BspNode(self.x, self.y, self.w, position - self.y, self.level + 1)
            self.right = BspNode(
                self.x, position, self.w, self.y + self.h - position, self.level + 1
            )
        else:
            self.left = BspNode(self.x, self.y, position - self.x, self.h, self.level + 1)
            self.right = BspNode(
                position, self.y, self.x + self.w - position, self.h, self.level + 1
            )

    def split_recursive(
        self,
        rng: Any,
        nb: int,
        min_w: int,
        min_h: int,
        max_h_ratio: float,
        max_v_ratio: float,
    ) -> None:
        """Split ``nb`` levels deep, keeping every part at least ``min_w`` x ``min_h``."""
        if nb == 0 or (self.w < 2 * min_w and self.h < 2 * min_h):
            return
        if rng is None:
            rng = _default_rng

        if self.h < 2 * min_h or self.w > self.h * max_h_ratio:
            horizontal = False
        elif self.w < 2 * min_w or self.h > self.w * max_v_ratio:
            horizontal = True
        else:
            horizontal = _rand_int(rng, 0, 1) == 0

        if horizontal:
            position = _rand_int(rng, self.y + min_h, self.y + self.h - min_h)
        else:
            position = _rand_int(rng, self.x + min_w, self.x + self.w - min_w)

        self._split_once(horizontal, position)
        for child in (self.left, self.right):
            child.split_recursive(rng, nb - 1, min_w, min_h, max_h_ratio, max_v_ratio)

    def inverted_level_order(self) -> Iterator["BspNode"]:
        """Yield the nodes deepest level first, the root last."""
        order: list[BspNode] = []
        pending = deque([self])
        while pending:
            node = pending.popleft()
            order.append(node)
            pending.extend(child for child in (node.left, node.right) if child is not None)
        yield from reversed(order)


class BSPListener:
    """Digs one room in every BSP leaf and joins consecutive rooms with corridors."""

    def __init__(self, level: "Level") -> None:
        self.level = level
        self.room_nb = 0
        self.last_x = 0
        self.last_y = 0

    def visit_node(self, node: BspNode) -> bool:
        """Handle one node; always returns True to keep traversing."""
        if node.is_leaf():
            rng = self.level.rng
            w = _rand_int(rng, ROOM_MIN_W, node.w - 2)
            h = _rand_int(rng, ROOM_MIN_H, node.h - 2)
            x = _rand_int(rng, node.x + 1, node.x + node.w - w - 1)
            y = _rand_int(rng, node.y + 1, node.y + node.h - h - 1)

            self.level.create_room(x, y, x + w - 1, y + h - 1)

            if self.room_nb != 0:
                self.level.dig(self.last_x, self.last_y, x + w // 2, self.last_y)
                self.level.dig(x + w // 2, self.last_y, x + w // 2, y + h // 2)

            self.last_x = x + w // 2
            self.last_y = y + h // 2
            self.room_nb += 1
        return True


class Level:
    """One floor of the dungeon and the entities on it."""

    def __init__(
        self,
        width: int,
        height: int,
        rng: Any = None,
        factory: EntityFactory | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else _default_rng
        self.factory = factory if factory is not None else EntityFactory(self.rng)
        self.tiles = [[Tile() for _ in range(width)] for _ in range(height)]
        self.fov_map = FovMap(width, height)
        self.rooms: list[Room] = []
        self.entities: list["Entity"] = []

    def _in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_wall(self, x: int, y: int) -> bool:
        return not self.fov_map.is_walkable(x, y)

    def can_walk(self, x: int, y: int) -> bool:
        """True when the tile is floor and no blocking entity stands on it."""
        if self.is_wall(x, y):
            return False
        return not any(
            entity.x == x and entity.y == y and entity.blocking for entity in self.entities
        )

    def get_entity(self, x: int, y: int) -> "Entity | None":
        """Return the entity at (x, y), preferring living ones over corpses."""
        possibility = None
        for entity in self.entities:
            if entity.x != x or entity.y != y:
                continue
            if possibility is None:
                possibility = entity
            else:
                current = entity.destructible
                previous = possibility.destructible
                if current is not None and previous is not None and previous.is_dead:
                    possibility = entity
                elif previous is None and current is not None:
                    possibility = entity

            chosen = possibility.destructible
            if chosen is not None and not chosen.is_dead:
                break
        return possibility

    def get_closest_monster(self, source: "Entity", range_: float) -> "Entity | None":
        """Return the nearest living entity other than ``source`` within ``range_`` (0: any)."""
        closest = None
        best_distance = 1e6
        for entity in self.entities:
            destructible = entity.destructible
            if entity is source or destructible is None or destructible.is_dead:
                continue
            distance = get_manhattan_distance(source.x, source.y, entity.x, entity.y)
            if distance < best_distance and (distance <= range_ or range_ == 0.0):
                best_distance = distance
                closest = entity
        return closest

    def is_in_fov(self, x: int, y: int) -> bool:
        """True when the tile is visible; a visible tile becomes explored."""
        if not self._in_bounds(x, y):
            return False
        if self.fov_map.is_in_fov(x, y):
            self.tiles[y][x].explored = True
            return True
        return False

    def is_explored(self, x: int, y: int) -> bool:
        if self._in_bounds(x, y):
            return self.tiles[y][x].explored
        return False

    def compute_fov(self, x: int, y: int, fov_radius: int) -> None:
        self.fov_map.compute_fov(x, y, fov_radius)

    def render(self, engine: Any) -> None:
        """Draw the tiles and the visible entities, corpses beneath the living."""
        root = engine.root
        player = engine.player
        dx = player.x - engine.width // 2
        dy = player.y - engine.height // 2

        for y in range(self.height):
            for x in range(self.width):
                if self.is_in_fov(x, y):
                    root.set_bg(x - dx, y - dy, LIGHT_WALL if self.is_wall(x, y) else LIGHT_GROUND)
                elif self.is_explored(x, y):
                    root.set_bg(x - dx, y - dy, DARK_WALL if self.is_wall(x, y) else DARK_GROUND)

        dt = engine.terminal.last_frame_length()
        for render_dead in (True, False):
            for entity in self.entities:
                if not self.fov_map.is_in_fov(entity.x, entity.y):
                    continue
                destructible = entity.destructible
                if destructible is None or destructible.is_dead == render_dead:
                    entity.render(root, dt, dx, dy)

    def update(self, engine: Any) -> None:
        """Give energy to every non-player entity and let the ready ones act."""
        for entity in list(self.entities):
            if entity is engine.player:
                continue
            entity.gain_energy()
            if entity.has_enough_energy():
                action = entity.update(engine)
                if action is not None:
                    action.perform(engine)

    def enter(self, player: "Entity") -> None:
        """Add the player to the level, in the middle of the first room."""
        if not self.rooms:
            raise ValueError("the level has no room to enter")
        first = self.rooms[0]
        self.entities.append(player)
        player.put_at(first.x + first.width // 2, first.y + first.height // 2)

    def add(self, entity: "Entity") -> None:
        """Put a copy of ``entity`` at the front of the level's entities."""
        self.entities.insert(0, entity.copy())

    def remove(self, entity: "Entity") -> None:
        """Remove ``entity`` itself from the level."""
        for index, candidate in enumerate(self.entities):
            if candidate is entity:
                del self.entities[index]
                return
        raise ValueError(f"entity {entity.id} is not on this level")

    def generate(self) -> None:
        """Carve rooms and corridors with a BSP tree and populate the rooms."""
        self.fov_map = FovMap(self.width, self.height)
        bsp = BspNode(0, 0, self.width, self.height)
        bsp.split_recursive(self.rng, 8, ROOM_MAX_W, ROOM_MAX_H, 1.5, 1.5)
        listener = BSPListener(self)
        for node in bsp.inverted_level_order():
            if not listener.visit_node(node):
                break

    def dig(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Make every tile of the rectangle between the two corners floor."""
        x1, x2 = sorted((x1, x2))
        y1, y2 = sorted((y1, y2))
        for x in range(x1, x2 + 1):
            for y in range(y1, y2 + 1):
                self.fov_map.set_properties(x, y, True, True)

    def create_room(self, x1: int, y1: int, x2: int, y2: int) -> None:
        """Dig a room, register it and place random monsters and items in it."""
        self.dig(x1, y1, x2, y2)
        self.rooms.append(Room(min(x1, x2), min(y1, y2), abs(x2 - x1), abs(y2 - y1)))

        nb_monsters = _rand_int(self.rng, 0, MAX_ROOM_MONSTERS)
        nb_items = _rand_int(self.rng, 0, MAX_ROOM_ITEMS)

        while nb_monsters + nb_items > 0:
            x = _rand_int(self.rng, x1, x2)
            y = _rand_int(self.rng, y1, y2)

            if self.can_walk(x, y):
                if nb_monsters > 0:
                    self.entities.append(self.factory.get_random_monster(x, y))
                elif nb_items > 0:
                    self.entities.append(self.factory.get_random_item(x, y))

            if nb_monsters > 0:
                nb_monsters -= 1
            elif nb_items > 0:
                nb_items -= 1