"""Components that give entities their abilities: AI, attack, health, inventory, use."""

from __future__ import annotations

import abc
from copy import copy
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Iterator

from pataro.console import DARK_RED, LIGHT_GREY, RED

if TYPE_CHECKING:
    from pataro.action import Action
    from pataro.entity import Entity

TRACKING_TURNS = 3
"""Turns a monster keeps chasing the player after losing sight of them."""

CORPSE_CHAR = "%"


class AI(abc.ABC):
    """Decides, each turn, what its owner does."""

    @abc.abstractmethod
    def update(self, owner: "Entity", engine: Any) -> "Action | None":
        """Return the action the owner should perform, or None."""

    @abc.abstractmethod
    def clone(self) -> "AI":
        """Return an independent copy of this AI."""


@dataclass
class Attacker:
    """Lets an entity deal damage."""

    power: float

    def clone(self) -> "Attacker":
        return replace(self)


@dataclass
class Destructible:
    """Hit points and defense; handles damage, healing and death."""

    max_hp: float
    defense: float
    corpse_name: str
    hp: float = field(init=False)

    def __post_init__(self) -> None:
        self.hp = self.max_hp

    @property
    def is_dead(self) -> bool:
        return self.hp <= 0.0

    def take_damage(self, owner: "Entity", damage: float, engine: Any) -> float:
        """Apply ``damage`` reduced by defense; return the hit points actually taken."""
        damage -= self.defense
        if damage <= 0.0:
            return 0.0
        self.hp -= damage
        if self.is_dead:
            self.die(owner, engine)
        return damage

    def die(self, owner: "Entity", engine: Any) -> None:
        """Turn the owner into a corpse that can be walked over."""
        owner.morph_into(CORPSE_CHAR, DARK_RED)
        owner.name = self.corpse_name
        owner.blocking = False

    def heal(self, amount: float) -> float:
        """Restore up to ``amount`` hit points; return how many were restored."""
        self.hp += amount
        if self.hp > self.max_hp:
            amount -= self.hp - self.max_hp
            self.hp = self.max_hp
        return amount

    def clone(self) -> "Destructible":
        return copy(self)


class MonsterDestructible(Destructible):
    """A destructible that announces a monster's death."""

    def die(self, owner: "Entity", engine: Any) -> None:
        engine.gui.message(LIGHT_GREY, owner.name, " is dead")
        super().die(owner, engine)


class PlayerDestructible(Destructible):
    """A destructible that announces the player's death."""

    def die(self, owner: "Entity", engine: Any) -> None:
        engine.gui.message(RED, owner.name, " is dead")
        super().die(owner, engine)


class Container:
    """An inventory holding copies of entities; a capacity of 0 means unlimited."""

    def __init__(self, capacity: int = 0) -> None:
        self.capacity = capacity
        self.inventory: list["Entity"] = []

    def add(self, entity: "Entity") -> bool:
        """Store a copy of ``entity``; return False when the container is full."""
        if self.capacity > 0 and len(self.inventory) >= self.capacity:
            return False
        self.inventory.append(entity.copy())
        return True

    def remove(self, entity: "Entity") -> None:
        """Remove the stored entity sharing ``entity``'s id."""
        kept = [item for item in self.inventory if item.id != entity.id]
        if len(kept) == len(self.inventory):
            raise ValueError(f"entity {entity.id} is not in the container")
        self.inventory = kept

    def __getitem__(self, index: int) -> "Entity":
        return self.inventory[index]

    def __len__(self) -> int:
        return len(self.inventory)

    def __iter__(self) -> Iterator["Entity"]:
        return iter(self.inventory)

    def clone(self) -> "Container":
        other = Container(self.capacity)
        other.inventory = [item.copy() for item in self.inventory]
        return other


class Use(abc.ABC):
    """Something that can be used, producing an action, or dropped."""

    def __init__(self) -> None:
        self.destroyed = False

    def perform(self, source: "Entity", owner: "Entity", engine: Any) -> "Action | None":
        """Return the action of using ``source``, or None if it was destroyed."""
        if self.destroyed:
            return None
        return self.use(source, owner, engine)

    @abc.abstractmethod
    def use(self, source: "Entity", owner: "Entity", engine: Any) -> "Action | None":
        """Build the action that using ``source`` triggers."""

    def drop(self, source: "Entity", owner: "Entity", engine: Any) -> None:
        """Put ``source`` on the ground at the owner's position."""
        if self.destroyed:
            return
        container = owner.container
        if container is None:
            return
        source.put_at(owner.x, owner.y)
        engine.map.current_level.add(source)
        container.remove(source)

    def remove_from_container(self, owner: "Entity", source: "Entity") -> None:
        owner.container.remove(source)

    @abc.abstractmethod
    def clone(self) -> "Use":
        """Return an independent copy of this component."""