"""Magic effects: confusion, fireballs, lightning bolts and the confused-monster AI."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pataro.action import Action, ActionResult
from pataro.actions import MoveAction
from pataro.animation import burning, lightning_bolt
from pataro.components import AI
from pataro.console import LIGHT_BLUE, LIGHT_GREEN, LIGHT_GREY, ORANGE
from pataro.utils import get_manhattan_distance

if TYPE_CHECKING:
    from pataro.entity import Entity
    from pataro.use_items import PickTile

_default_rng = random.Random()


class ConfusedMonsterAI(AI):
    """Stumbles around at random for a number of turns, then restores the previous AI."""

    def __init__(self, nb_turns: int, old_ai: AI | None = None, rng: Any = None) -> None:
        self.nb_turns = nb_turns
        self.old_ai = old_ai
        self.rng = rng if rng is not None else _default_rng

    def update(self, owner: "Entity", engine: Any) -> "Action | None":
        destructible = owner.destructible
        if destructible is not None and destructible.is_dead:
            return None

        dx = self.rng.randint(-1, 1)
        dy = self.rng.randint(-1, 1)
        if (dx or dy) and engine.map.can_walk(owner.x + dx, owner.y + dy):
            return MoveAction(owner, dx, dy)

        self.nb_turns -= 1
        if self.nb_turns <= 0:
            owner.ai = self.old_ai
        return None

    def clone(self) -> "ConfusedMonsterAI":
        old = self.old_ai.clone() if self.old_ai is not None else None
        return ConfusedMonsterAI(self.nb_turns, old, self.rng)


@dataclass(eq=False)
class ConfuseAction(Action):
    """Confuse the entity chosen by ``picker`` for ``nb_turns`` turns, consuming ``source``."""

    source: "Entity"
    owner: "Entity"
    picker: "PickTile"
    nb_turns: int
    target: "Entity" = field(init=False)

    def __post_init__(self) -> None:
        if self.picker.entity is None:
            raise ValueError("the picker holds no target entity")
        self.target = self.picker.entity

    def perform(self, engine: Any) -> ActionResult:
        engine.gui.message(
            LIGHT_GREEN,
            "The eyes of the ", self.target.name,
            " look vacant\nas they starts to stumble around!",
        )
        if self.owner is engine.player:
            engine.log("confuse " + self.target.name)

        self.target.ai = ConfusedMonsterAI(self.nb_turns, self.target.ai)
        self.source.use.remove_from_container(self.owner, self.source)
        return ActionResult.SUCCESS


@dataclass(eq=False)
class FireballAction(Action):
    """Burn every living entity within the picker's range of the chosen tile."""

    source: "Entity"
    owner: "Entity"
    picker: "PickTile"
    damage: float
    tx: int = field(init=False)
    ty: int = field(init=False)
    range: float = field(init=False)

    def __post_init__(self) -> None:
        self.tx = self.picker.x
        self.ty = self.picker.y
        self.range = self.picker.range

    def perform(self, engine: Any) -> ActionResult:
        engine.gui.message(
            ORANGE, "The fireball explodes, burning everything within ", self.range, " tiles!"
        )
        by_player = self.owner is engine.player
        if by_player:
            engine.log("fireball")

        for entity in list(engine.map.current_level.entities):
            destructible = entity.destructible
            if destructible is None or destructible.is_dead:
                continue
            distance = get_manhattan_distance(entity.x, entity.y, self.tx, self.ty)
            if distance >= self.range:
                continue

            engine.gui.message(
                ORANGE, "The ", entity.name, " gets burned for ", self.damage, " hit points."
            )
            if by_player:
                lethal = destructible.hp - self.damage <= 0.0
                engine.log(("fireball kill " if lethal else "fireball hit ") + entity.name)

            destructible.take_damage(entity, self.damage, engine)
            entity.set_animation(burning(entity))

        self.source.use.remove_from_container(self.owner, self.source)
        return ActionResult.SUCCESS


@dataclass(eq=False)
class LightningBoltAction(Action):
    """Strike the closest living monster within ``range`` for ``damage`` hit points."""

    source: "Entity"
    owner: "Entity"
    range: float
    damage: float

    def perform(self, engine: Any) -> ActionResult:
        by_player = self.owner is engine.player
        if by_player:
            engine.log("lightning bolt")

        closest = engine.map.get_closest_monster(self.owner, self.range)
        if closest is None:
            engine.gui.message(LIGHT_GREY, "No enemy is close enough to strike.")
            if by_player:
                engine.log("lightning bolt fail")
            return ActionResult.FAIL

        engine.gui.message(
            LIGHT_BLUE,
            "A lightning bolt strikes the ", closest.name,
            " with a loud thunder!\nThe damage is ", self.damage, " hit points.",
        )
        if by_player:
            lethal = closest.destructible.hp - self.damage <= 0.0
            engine.log(("lightning bolt kill " if lethal else "lightning bolt hit ") + closest.name)

        closest.destructible.take_damage(closest, self.damage, engine)
        self.source.use.remove_from_container(self.owner, self.source)
        closest.set_animation(lightning_bolt(closest))
        return ActionResult.SUCCESS