import pytest

from pataro.components import (
    AI,
    Attacker,
    Container,
    Destructible,
    MonsterDestructible,
    PlayerDestructible,
    Use,
)
from pataro.console import DARK_RED, LIGHT_GREY, RED, WHITE
from pataro.entity import Entity


class FakeGui:
    def __init__(self):
        self.messages = []

    def message(self, color, *args):
        self.messages.append((color, args))


class FakeLevel:
    def __init__(self):
        self.added = []

    def add(self, entity):
        self.added.append(entity)


class FakeMap:
    def __init__(self):
        self.current_level = FakeLevel()


class FakeEngine:
    def __init__(self):
        self.gui = FakeGui()
        self.map = FakeMap()


class Marker:
    pass


class StubUse(Use):
    def __init__(self, result):
        super().__init__()
        self.result = result

    def use(self, source, owner, engine):
        return self.result

    def clone(self):
        return StubUse(self.result)


def make_entity(name="orc", x=1, y=2):
    return Entity(x, y, "o", name, WHITE)


def test_ai_is_abstract():
    with pytest.raises(TypeError):
        AI()


def test_attacker_clone_independent():
    attacker = Attacker(5.0)
    other = attacker.clone()
    other.power = 1.0
    assert attacker.power == 5.0


def test_destructible_starts_full():
    d = Destructible(30.0, 2.0, "corpse")
    assert d.hp == d.max_hp
    assert not d.is_dead


def test_take_damage_reduced_by_defense():
    d = Destructible(30.0, 2.0, "corpse")
    taken = d.take_damage(make_entity(), 10.0, FakeEngine())
    assert taken == 10.0 - d.defense
    assert d.hp == d.max_hp - taken


def test_take_damage_below_defense_does_nothing():
    d = Destructible(30.0, 5.0, "corpse")
    assert d.take_damage(make_entity(), 3.0, FakeEngine()) == 0.0
    assert d.hp == d.max_hp


def test_death_turns_owner_into_corpse():
    owner = make_entity()
    d = Destructible(5.0, 0.0, "dead orc")
    d.take_damage(owner, 10.0, FakeEngine())
    assert d.is_dead
    assert owner.ch == "%"
    assert owner.color == DARK_RED
    assert owner.name == "dead orc"
    assert owner.blocking is False


def test_heal_clamps_to_max():
    d = Destructible(10.0, 0.0, "corpse")
    d.take_damage(make_entity(), 4.0, FakeEngine())
    before = d.hp
    healed = d.heal(100.0)
    assert d.hp == d.max_hp
    assert healed == d.max_hp - before


def test_heal_partial_returns_amount():
    d = Destructible(10.0, 0.0, "corpse")
    d.take_damage(make_entity(), 6.0, FakeEngine())
    before = d.hp
    assert d.heal(2.0) == 2.0
    assert d.hp == before + 2.0


def test_destructible_clone_keeps_type_and_is_independent():
    d = MonsterDestructible(10.0, 1.0, "dead orc")
    other = d.clone()
    other.hp = 0.0
    assert isinstance(other, MonsterDestructible)
    assert d.hp == d.max_hp


def test_monster_death_message():
    engine = FakeEngine()
    owner = make_entity("orc")
    MonsterDestructible(1.0, 0.0, "dead orc").take_damage(owner, 5.0, engine)
    assert engine.gui.messages == [(LIGHT_GREY, ("orc", " is dead"))]
    assert owner.name == "dead orc"


def test_player_death_message():
    engine = FakeEngine()
    owner = make_entity("Player")
    PlayerDestructible(1.0, 0.0, "your cadaver").take_damage(owner, 5.0, engine)
    assert engine.gui.messages == [(RED, ("Player", " is dead"))]
    assert owner.name == "your cadaver"


def test_container_respects_capacity():
    c = Container(2)
    assert c.add(make_entity())
    assert c.add(make_entity())
    assert not c.add(make_entity())
    assert len(c) == c.capacity


def test_container_unlimited_when_zero():
    c = Container(0)
    results = [c.add(make_entity()) for _ in range(40)]
    assert all(results)
    assert len(c) == 40


def test_container_stores_copy():
    c = Container(5)
    item = make_entity("potion")
    c.add(item)
    assert c[0] is not item
    assert c[0].id == item.id
    assert [e.name for e in c] == ["potion"]


def test_container_remove_by_id():
    c = Container(5)
    a, b = make_entity("a"), make_entity("b")
    c.add(a)
    c.add(b)
    c.remove(a)
    assert [e.id for e in c] == [b.id]


def test_container_remove_missing_raises():
    c = Container(5)
    with pytest.raises(ValueError):
        c.remove(make_entity())


def test_container_clone_independent():
    c = Container(3)
    c.add(make_entity())
    other = c.clone()
    other.add(make_entity())
    assert len(c) == 1
    assert other.capacity == c.capacity
    assert other[0] is not c[0] and other[0].id == c[0].id


def test_use_perform_returns_action():
    marker = Marker()
    assert StubUse(marker).perform(make_entity(), make_entity(), FakeEngine()) is marker


def test_use_perform_destroyed_returns_none():
    use = StubUse(Marker())
    use.destroyed = True
    assert use.perform(make_entity(), make_entity(), FakeEngine()) is None


def test_use_drop_places_item_at_owner():
    engine = FakeEngine()
    owner = make_entity("Player", 7, 9)
    owner.container = Container(5)
    owner.container.add(make_entity("potion", 0, 0))
    item = owner.container[0]
    item.use = StubUse(None)
    item.use.drop(item, owner, engine)
    assert (item.x, item.y) == (owner.x, owner.y)
    assert engine.map.current_level.added == [item]
    assert len(owner.container) == 0


def test_use_drop_destroyed_does_nothing():
    engine = FakeEngine()
    owner = make_entity("Player")
    owner.container = Container(5)
    owner.container.add(make_entity("potion"))
    use = StubUse(None)
    use.destroyed = True
    use.drop(owner.container[0], owner, engine)
    assert len(owner.container) == 1
    assert engine.map.current_level.added == []


def test_use_drop_without_container_does_nothing():
    engine = FakeEngine()
    StubUse(None).drop(make_entity(), make_entity(), engine)
    assert engine.map.current_level.added == []


def test_remove_from_container():
    owner = make_entity()
    owner.container = Container(5)
    item = make_entity("scroll")
    owner.container.add(item)
    StubUse(None).remove_from_container(owner, item)
    assert len(owner.container) == 0