import random
from collections import deque
from types import SimpleNamespace

import pytest

from pataro.action import Action, ActionResult
from pataro.components import AI, Destructible
from pataro.console import Console, Terminal, WHITE
from pataro.entity import Entity
from pataro.level import (
    DARK_GROUND,
    LIGHT_GROUND,
    MAX_ROOM_ITEMS,
    MAX_ROOM_MONSTERS,
    ROOM_MAX_H,
    ROOM_MAX_W,
    BSPListener,
    BspNode,
    FovMap,
    Level,
    Room,
)


def open_level(width=10, height=10, seed=0):
    level = Level(width, height, rng=random.Random(seed))
    level.dig(1, 1, width - 2, height - 2)
    return level


def creature(x, y, name="orc", dead=False):
    entity = Entity(x, y, "o", name, WHITE)
    entity.destructible = Destructible(10.0, 0.0, "corpse")
    if dead:
        entity.destructible.hp = 0.0
    return entity


def reachable(level, start):
    seen = {start}
    pending = deque([start])
    while pending:
        x, y = pending.popleft()
        for nx, ny in ((x + 1, y), (x - 1, y), (x, y + 1), (x, y - 1)):
            if (nx, ny) not in seen and not level.is_wall(nx, ny):
                seen.add((nx, ny))
                pending.append((nx, ny))
    return seen


def make_engine(player, width=80, height=45):
    return SimpleNamespace(
        root=Console(width, height),
        width=width,
        height=height,
        player=player,
        terminal=Terminal(),
    )


def test_new_level_is_solid_rock():
    level = Level(8, 8, rng=random.Random(1))
    assert level.is_wall(3, 3)
    assert not level.can_walk(3, 3)
    assert not level.is_explored(3, 3)


def test_dig_accepts_corners_in_any_order():
    level = Level(10, 10, rng=random.Random(1))
    level.dig(5, 4, 2, 1)
    assert all(not level.is_wall(x, y) for x in range(2, 6) for y in range(1, 5))
    assert level.is_wall(6, 1)
    assert level.is_wall(2, 5)


def test_out_of_bounds_queries():
    level = open_level()
    assert level.is_wall(-1, 0)
    assert level.is_wall(10, 10)
    assert not level.is_in_fov(-1, 3)
    assert not level.is_explored(100, 3)


def test_can_walk_depends_on_blocking():
    level = open_level()
    blocker = creature(3, 3)
    item = Entity(4, 4, "!", "potion", WHITE, blocking=False)
    level.entities.extend([blocker, item])
    assert not level.can_walk(3, 3)
    assert level.can_walk(4, 4)


def test_get_entity_prefers_living_after_corpse():
    level = open_level()
    corpse = creature(2, 2, dead=True)
    alive = creature(2, 2)
    level.entities.extend([corpse, alive])
    assert level.get_entity(2, 2) is alive


def test_get_entity_stops_at_first_living():
    level = open_level()
    alive = creature(2, 2)
    corpse = creature(2, 2, dead=True)
    level.entities.extend([alive, corpse])
    assert level.get_entity(2, 2) is alive


def test_get_entity_two_corpses_keeps_last():
    level = open_level()
    first = creature(2, 2, dead=True)
    second = creature(2, 2, dead=True)
    level.entities.extend([first, second])
    assert level.get_entity(2, 2) is second


def test_get_entity_prefers_destructible():
    level = open_level()
    item = Entity(2, 2, "!", "potion", WHITE, blocking=False)
    corpse = creature(2, 2, dead=True)
    level.entities.extend([item, corpse])
    assert level.get_entity(2, 2) is corpse
    assert level.get_entity(5, 5) is None


def test_get_closest_monster():
    level = open_level(12, 12)
    source = creature(1, 1, name="player")
    near = creature(2, 2)
    far = creature(4, 4)
    dead = creature(1, 2, dead=True)
    level.entities.extend([source, far, near, dead])
    assert level.get_closest_monster(source, 0.0) is near
    assert level.get_closest_monster(source, 2.0) is near
    assert level.get_closest_monster(source, 1.0) is None


def test_fov_marks_explored_and_forgets_visibility():
    level = open_level()
    level.compute_fov(5, 5, 0)
    assert level.is_in_fov(5, 5)
    assert level.is_explored(5, 5)
    level.compute_fov(-1, -1, 0)
    assert not level.is_in_fov(5, 5)
    assert level.is_explored(5, 5)


def test_fov_map_walls_block_sight_but_are_lit():
    fov = FovMap(10, 3)
    for x in range(10):
        fov.set_properties(x, 1, x != 5, x != 5)
    fov.compute_fov(1, 1, 0)
    assert fov.is_in_fov(4, 1)
    assert fov.is_in_fov(5, 1)
    assert not fov.is_in_fov(6, 1)
    assert not fov.is_walkable(5, 1)
    assert fov.is_walkable(4, 1)


def test_fov_map_radius_limit():
    fov = FovMap(20, 3)
    for x in range(20):
        fov.set_properties(x, 1, True, True)
    fov.compute_fov(1, 1, 3)
    assert fov.is_in_fov(4, 1)
    assert not fov.is_in_fov(5, 1)


def test_add_inserts_copy_at_front():
    level = open_level()
    level.entities.append(creature(1, 1))
    item = Entity(3, 3, "!", "potion", WHITE, blocking=False)
    level.add(item)
    assert level.entities[0] is not item
    assert level.entities[0].id == item.id
    assert level.entities[0].name == "potion"
    assert len(level.entities) == 2


def test_remove_by_identity():
    level = open_level()
    first = creature(1, 1)
    second = creature(1, 1)
    level.entities.extend([first, second])
    level.remove(second)
    assert level.entities == [first]
    with pytest.raises(ValueError):
        level.remove(second)


def test_enter_requires_room():
    level = open_level()
    with pytest.raises(ValueError):
        level.enter(creature(0, 0))


def test_enter_places_player_in_first_room():
    level = Level(30, 30, rng=random.Random(4))
    level.create_room(2, 3, 12, 13)
    player = creature(0, 0, name="player")
    level.enter(player)
    room = level.rooms[0]
    assert (player.x, player.y) == (room.x + room.width // 2, room.y + room.height // 2)
    assert level.entities[-1] is player
    assert not level.is_wall(player.x, player.y)


def test_create_room_corner_order_gives_same_room():
    a = Level(20, 20, rng=random.Random(5))
    b = Level(20, 20, rng=random.Random(5))
    a.create_room(2, 3, 8, 7)
    b.create_room(8, 7, 2, 3)
    assert a.rooms == b.rooms
    assert a.rooms[0].x == 2
    assert a.rooms[0].y == 3


@pytest.mark.parametrize("seed", range(6))
def test_create_room_population_stays_inside(seed):
    level = Level(20, 20, rng=random.Random(seed))
    level.create_room(2, 2, 9, 9)
    assert len(level.entities) <= MAX_ROOM_MONSTERS + MAX_ROOM_ITEMS
    assert all(2 <= e.x <= 9 and 2 <= e.y <= 9 for e in level.entities)
    monsters = [e for e in level.entities if e.destructible is not None]
    assert len(monsters) <= MAX_ROOM_MONSTERS


def test_bsp_leaves_partition_area():
    root = BspNode(0, 0, 80, 50)
    root.split_recursive(random.Random(2), 8, ROOM_MAX_W, ROOM_MAX_H, 1.5, 1.5)
    nodes = list(root.inverted_level_order())
    leaves = [node for node in nodes if node.is_leaf()]
    assert len(leaves) > 1
    assert sum(leaf.w * leaf.h for leaf in leaves) == 80 * 50
    assert all(leaf.w >= ROOM_MAX_W and leaf.h >= ROOM_MAX_H for leaf in leaves)


def test_inverted_level_order_ends_with_root():
    root = BspNode(0, 0, 60, 60)
    root.split_recursive(random.Random(3), 3, 12, 12, 1.5, 1.5)
    nodes = list(root.inverted_level_order())
    assert nodes[-1] is root
    levels = [node.level for node in nodes]
    assert levels == sorted(levels, reverse=True)


def test_small_node_is_not_split():
    root = BspNode(0, 0, 20, 20)
    root.split_recursive(random.Random(3), 8, 12, 12, 1.5, 1.5)
    assert root.is_leaf()
    assert list(root.inverted_level_order()) == [root]


def test_listener_ignores_inner_nodes():
    level = Level(30, 30, rng=random.Random(1))
    node = BspNode(0, 0, 30, 30)
    node.left = BspNode(0, 0, 15, 30, 1)
    node.right = BspNode(15, 0, 15, 30, 1)
    listener = BSPListener(level)
    assert listener.visit_node(node) is True
    assert level.rooms == []


def test_listener_connects_rooms():
    level = Level(40, 20, rng=random.Random(7))
    listener = BSPListener(level)
    first = BspNode(0, 0, 20, 20)
    second = BspNode(20, 0, 20, 20)
    assert listener.visit_node(first)
    assert listener.visit_node(second)
    assert len(level.rooms) == 2
    room_a, room_b = level.rooms
    assert room_a.x >= 1 and room_a.x + room_a.width < 19
    assert room_b.x >= 21 and room_b.x + room_b.width < 39
    assert (room_b.x, room_b.y) in reachable(level, (room_a.x, room_a.y))


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_generate_makes_connected_populated_level(seed):
    level = Level(80, 50, rng=random.Random(seed))
    level.generate()
    assert level.rooms
    start = (level.rooms[0].x, level.rooms[0].y)
    connected = reachable(level, start)
    for room in level.rooms:
        assert (room.x, room.y) in connected
        assert 0 < room.x and room.x + room.width < 79
    assert all(not level.is_wall(e.x, e.y) for e in level.entities)


def test_generate_is_deterministic_for_a_seed():
    a = Level(80, 50, rng=random.Random(11))
    b = Level(80, 50, rng=random.Random(11))
    a.generate()
    b.generate()
    assert a.rooms == b.rooms
    assert [(e.x, e.y, e.name) for e in a.entities] == [(e.x, e.y, e.name) for e in b.entities]


class _Recorded(Action):
    def __init__(self, log, name):
        self.log = log
        self.name = name

    def perform(self, engine):
        self.log.append(self.name)
        return ActionResult.SUCCESS


class _ScriptedAI(AI):
    def __init__(self, log, name):
        self.log = log
        self.name = name

    def update(self, owner, engine):
        return _Recorded(self.log, self.name)

    def clone(self):
        return _ScriptedAI(self.log, self.name)


def test_update_runs_non_player_entities():
    level = open_level()
    performed = []
    player = creature(1, 1, name="player")
    player.ai = _ScriptedAI(performed, "player")
    monster = creature(3, 3)
    monster.ai = _ScriptedAI(performed, "monster")
    level.entities.extend([player, monster])
    level.update(SimpleNamespace(player=player))
    assert performed == ["monster"]
    assert monster.energy == 1.0
    assert player.energy == 0.0


def test_render_draws_visible_tiles_and_living_on_top():
    level = open_level()
    player = Entity(5, 5, "@", "player", WHITE)
    player.destructible = Destructible(10.0, 0.0, "corpse")
    corpse = creature(3, 3, dead=True)
    corpse.ch = "%"
    alive = creature(3, 3)
    level.entities.extend([alive, corpse, player])
    level.compute_fov(5, 5, 0)
    engine = make_engine(player)
    level.render(engine)
    dx = player.x - engine.width // 2
    dy = player.y - engine.height // 2
    assert engine.root.char_at(5 - dx, 5 - dy) == "@"
    assert engine.root.char_at(3 - dx, 3 - dy) == "o"
    assert engine.root.bg_at(5 - dx, 5 - dy) == LIGHT_GROUND


def test_render_explored_tiles_are_dark():
    level = open_level()
    player = Entity(5, 5, "@", "player", WHITE)
    level.entities.append(player)
    level.compute_fov(5, 5, 0)
    assert level.is_in_fov(5, 5)
    level.compute_fov(-1, -1, 0)
    engine = make_engine(player)
    level.render(engine)
    dx = player.x - engine.width // 2
    dy = player.y - engine.height // 2
    assert engine.root.bg_at(5 - dx, 5 - dy) == DARK_GROUND
    assert engine.root.char_at(5 - dx, 5 - dy) == " "


def test_room_is_frozen():
    room = Room(1, 2, 3, 4)
    with pytest.raises(AttributeError):
        room.x = 5
    assert (room.x, room.y, room.width, room.height) == (1, 2, 3, 4)