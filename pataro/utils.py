"""Small helpers and game-wide constants."""

from __future__ import annotations

from datetime import datetime

PLAYER_FOV = 10
"""Radius, in tiles, of the player's field of view."""

GATHER_ANON_STATS = True
"""When true, the engine writes its event counters to a CSV file on exit."""

DATE_FORMAT = "%d-%m-%Y_%H-%M-%S"


def date_to_string() -> str:
    """Return the current local date and time as ``dd-mm-YYYY_HH-MM-SS``."""
    return datetime.now().strftime(DATE_FORMAT)


def get_manhattan_distance(x1: int, y1: int, x2: int, y2: int) -> int:
    """Return the Manhattan distance between two tiles."""
    return abs(x2 - x1) + abs(y2 - y1)