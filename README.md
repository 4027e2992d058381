# pataro

pataro is a small roguelike that you play in a text terminal. You explore a
dungeon level made of rooms and corridors. The level is generated at random
with a binary space partition. Along the way you fight orcs and trolls, and you
pick up potions and magic scrolls and use them.

## Installing

```
pip install .
```

The game uses only the standard library. The screen is drawn with `curses`,
so you need a Python that ships the `curses` module, as the usual Linux and
macOS builds do.

## Playing

```
pataro
pataro --log stats.csv
```

`--log` sets the file that the game statistics are written to when the game
ends. The default is `game-log.csv` in the current directory.

Controls:

- Arrow keys: move. Walking into a living monster attacks it.
- `g`: pick up the usable item you stand on.
- `i`: open the inventory. Press an item's letter to use it.
- `d`: open the inventory. Press an item's letter to drop it.
- Mouse: point at a visible tile to see the names of the entities on it. When
  a scroll asks for a target, left-click a highlighted tile to choose it, or
  right-click to cancel.
- `F3`: write the characters on the screen to `screenshot_<date>.txt` in the
  current directory.
- `Ctrl-Q`: quit.
- After a defeat, the arrow keys scroll the game statistics and `ESCAPE`
  starts a new game.

The frame rate is shown in the top-left corner. Colours are mapped to the
nearest of the terminal's eight basic colours.

Items you can find:

- **Health potion**: restores up to 4 hit points. It is only used up if it
  healed something.
- **Scroll of lightning bolt**: strikes the closest living creature within 5
  tiles (Manhattan distance) for 20 damage.
- **Scroll of fireball**: asks for a tile and burns every living creature less
  than 2 tiles from it, for 12 damage each.
- **Scroll of confusion**: asks for a tile within 5 tiles that holds a living
  creature. That creature then stumbles around at random for 3 turns.

The damage each blow deals is reduced by the target's defense.

When the game ends, the number of times each kind of event happened (turns,
moves, attacks, kills, items picked up and used, ...) is written as CSV, with
one `field,occurences` row per event, sorted by name.

## Using it as a library

The parts of the game can be used on their own:

- `pataro.engine.Engine` runs a game against a terminal object. That object
  must offer `poll_event()`, `wait_key()`, `flush(console)`, `is_closed()` and
  `last_frame_length()`.
- `pataro.console.Terminal` is a headless terminal that plays back a list of
  scripted `Key` and `Mouse` events. It keeps the last flushed screen in
  `screen`.
- `pataro.app.CursesTerminal` is the `curses` terminal that the `pataro`
  command uses.
- `pataro.app.run(terminal, log_path)` plays until the terminal closes, writes
  the statistics to `log_path` and returns the engine.

```python
from pataro.app import run
from pataro.console import Key, KeyCode, Terminal

terminal = Terminal([Key(KeyCode.RIGHT), Key(KeyCode.CHAR, "g")])
engine = run(terminal, "game-log.csv")
print(engine.stats)
```

`Engine`, `Map` and `Level` also take an optional `rng` (any object with an
inclusive `randint`), so a seeded `random.Random` gives you the same dungeon
every time.

## What it does not do

- The dungeon has a single level. There are no stairs to other floors.
- Games cannot be saved or loaded.
- There is no victory condition. The game runs until you quit.

## Tests

```
pip install .[test]
pytest
```