"""Base class for the actions that entities perform during a turn."""

from __future__ import annotations

import enum
from typing import Any


class ActionResult(enum.Enum):
    """Outcome of performing an action."""

    SUCCESS = "success"
    FAIL = "fail"


class Action:
    """Something to do for one turn; subclasses override ``perform``."""

    def perform(self, engine: Any) -> ActionResult:
        """Carry out the action; the base action does nothing and succeeds."""
        return ActionResult.SUCCESS