"""Random creation of monsters and items."""

from __future__ import annotations

import math
import random
from typing import Any

from pataro.actions import HealAction
from pataro.ai import MonsterAI
from pataro.components import Attacker, MonsterDestructible
from pataro.console import (
    DARK_ORANGE,
    DARKER_GREEN,
    DESATURATED_GREEN,
    LIGHT_GREEN,
    LIGHT_YELLOW,
    VIOLET,
)
from pataro.entity import Entity
from pataro.spells import ConfuseAction, FireballAction, LightningBoltAction
from pataro.use_items import OneTimeSelectUse, OneTimeUse, PickMethod, PickTile

_default_rng = random.Random()


class EntityFactory:
    """Builds random monsters and items; ``rng`` needs an inclusive ``randint``."""

    def __init__(self, rng: Any = None) -> None:
        self.rng = rng if rng is not None else _default_rng

    def get_random_monster(self, x: int, y: int, difficulty: float = 1.0) -> Entity:
        """Return an orc (80%) or a troll, scaled by the square root of ``difficulty``."""
        biased = math.sqrt(difficulty)
        roll = self.rng.randint(0, 100)

        if roll < 80:
            entity = Entity(x, y, "o", "orc", DESATURATED_GREEN)
            entity.attacker = Attacker(3.0 * biased)
            entity.destructible = MonsterDestructible(
                10.0 * biased, 0.5 * (biased - 1.0), "dead orc"
            )
        else:
            entity = Entity(x, y, "T", "troll", DARKER_GREEN)
            entity.attacker = Attacker(4.0 * biased)
            entity.destructible = MonsterDestructible(
                16.0 * biased, 1.0 * biased, "troll carcass"
            )

        entity.ai = MonsterAI()
        return entity

    def get_random_item(self, x: int, y: int) -> Entity:
        """Return a health potion (70%) or one of three scrolls."""
        roll = self.rng.randint(0, 100)

        if roll < 70:
            entity = Entity(x, y, "!", "Health potion", VIOLET, blocking=False)
            entity.use = OneTimeUse(HealAction, 4.0)
        elif roll < 80:
            entity = Entity(x, y, "#", "Scroll of lightning bolt", DARK_ORANGE, blocking=False)
            entity.use = OneTimeUse(LightningBoltAction, 5.0, 20.0)
        elif roll < 90:
            entity = Entity(x, y, "#", "Scroll of fireball", LIGHT_YELLOW, blocking=False)
            entity.use = OneTimeSelectUse(
                "a target tile for the fireball",
                PickTile(PickMethod.SIMPLE, 2.0),
                FireballAction,
                12.0,
            )
        else:
            entity = Entity(x, y, "#", "Scroll of confusion", LIGHT_GREEN, blocking=False)
            entity.use = OneTimeSelectUse(
                "an ennemy to confuse",
                PickTile(PickMethod.LIVING_ENTITY, 5.0),
                ConfuseAction,
                3,
            )
        return entity