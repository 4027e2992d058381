"""Actions an entity can take during a turn: attack, move, pick up, use, drop, heal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pataro.action import Action, ActionResult
from pataro.console import LIGHT_GREEN, LIGHT_GREY, RED
from pataro.utils import PLAYER_FOV

if TYPE_CHECKING:
    from pataro.entity import Entity


@dataclass(eq=False)
class AttackAction(Action):
    """``source`` attacks ``target``."""

    source: "Entity"
    target: "Entity"

    def perform(self, engine: Any) -> ActionResult:
        attacker = self.source.attacker
        if attacker is None:
            return ActionResult.FAIL

        player = engine.player
        by_player = self.source is player
        if by_player:
            engine.log("attack")

        destructible = self.target.destructible
        if destructible is not None:
            text_color = RED if by_player else LIGHT_GREY
            damage = attacker.power - destructible.defense
            if damage > 0.0:
                engine.gui.message(
                    text_color,
                    self.source.name, " attacks ", self.target.name,
                    " for ", damage, " hit points.",
                )
            else:
                engine.gui.message(
                    LIGHT_GREY,
                    self.source.name, " attacks ", self.target.name,
                    " but it has no effect!",
                )

            lethal = destructible.hp - damage <= 0.0
            if by_player:
                engine.log(("kill " if lethal else "hit ") + self.target.name)
            elif self.target is player:
                engine.log(self.source.name + (" kill player" if lethal else " hit player"))

            destructible.take_damage(self.target, attacker.power, engine)
            return ActionResult.SUCCESS

        if by_player:
            engine.log("vain attack")
        engine.gui.message(
            LIGHT_GREY, self.source.name, " attacks ", self.target.name, " in vain"
        )
        return ActionResult.FAIL


@dataclass(eq=False)
class DropAction(Action):
    """``owner`` drops ``item`` from its inventory to the ground."""

    owner: "Entity"
    item: "Entity"

    def perform(self, engine: Any) -> ActionResult:
        if self.owner is engine.player:
            engine.log("drop " + self.item.name)
        self.item.use.drop(self.item, self.owner, engine)
        engine.gui.message(LIGHT_GREY, self.owner.name, " drops a ", self.item.name, ".")
        return ActionResult.SUCCESS


@dataclass(eq=False)
class HealAction(Action):
    """Heal ``owner`` by ``quantity``, consuming ``source`` if anything was healed."""

    source: "Entity"
    owner: "Entity"
    quantity: float

    def perform(self, engine: Any) -> ActionResult:
        destructible = self.owner.destructible
        if destructible is None:
            return ActionResult.FAIL

        healed = destructible.heal(self.quantity)
        engine.gui.message(LIGHT_GREEN, self.owner.name, " healed ", healed, "HP")
        if self.owner is engine.player:
            engine.log("heal")
        if healed > 0.0:
            self.source.use.remove_from_container(self.owner, self.source)
        return ActionResult.SUCCESS


@dataclass(eq=False)
class MoveAction(Action):
    """Move ``source`` by (dx, dy), attacking whatever living foe stands there."""

    source: "Entity"
    dx: int
    dy: int

    def perform(self, engine: Any) -> ActionResult:
        player = engine.player
        game_map = engine.map
        tx, ty = self.source.x + self.dx, self.source.y + self.dy

        other = game_map.get_entity(tx, ty)
        if (
            other is not None
            and (self.source is player or other is player)
            and other.destructible is not None
            and not other.destructible.is_dead
        ):
            return AttackAction(self.source, other).perform(engine)

        if game_map.is_wall(tx, ty):
            return ActionResult.FAIL

        if self.source is player:
            game_map.compute_fov(tx, ty, PLAYER_FOV)
            engine.log("move")
            here = game_map.get_entity(tx, ty)
            if here is not None:
                destructible = here.destructible
                if (destructible is not None and destructible.is_dead) or here.use is not None:
                    engine.gui.message(LIGHT_GREY, "There is a ", here.name, " here")

        self.source.move(self.dx, self.dy)
        return ActionResult.SUCCESS


@dataclass(eq=False)
class PickUpAction(Action):
    """``source`` tries to put a usable object lying at (x, y) in its container."""

    source: "Entity"
    x: int
    y: int

    def perform(self, engine: Any) -> ActionResult:
        by_player = self.source is engine.player
        if by_player:
            engine.log("pick up")

        level = engine.map.current_level
        for candidate in list(level.entities):
            if candidate.use is None or (candidate.x, candidate.y) != (self.x, self.y):
                continue

            if self.source.container.add(candidate):
                if by_player:
                    engine.log("pick up " + candidate.name)
                    engine.gui.message(LIGHT_GREY, "You pick up the ", candidate.name)
                else:
                    engine.gui.message(
                        LIGHT_GREY, self.source.name, " picks up the ", candidate.name
                    )
                level.remove(candidate)
                return ActionResult.SUCCESS

            if by_player:
                engine.log("pick up with full inventory")
                engine.gui.message(RED, "Your inventory is full.")
            else:
                engine.gui.message(RED, self.source.name, " inventory's is full.")
            return ActionResult.FAIL

        if by_player:
            engine.log("pick up impossible")
            engine.gui.message(LIGHT_GREY, "There's nothing here that you can pick up")
        return ActionResult.FAIL


@dataclass(eq=False)
class UseAction(Action):
    """``owner`` uses ``item`` and performs the action it produces."""

    owner: "Entity"
    item: "Entity"

    def perform(self, engine: Any) -> ActionResult:
        action = self.item.use.perform(self.item, self.owner, engine)
        if action is None:
            return ActionResult.FAIL
        if self.owner is engine.player:
            engine.log("use " + self.item.name)
        return action.perform(engine)