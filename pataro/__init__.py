"""A small terminal roguelike with a randomly generated dungeon, monsters, items and spells."""

__version__ = "0.1.0"