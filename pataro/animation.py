"""Timed sequences of changes applied to an entity's appearance."""

from __future__ import annotations

from copy import copy
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from pataro.console import DARK_BLUE, DARK_ORANGE, LIGHT_BLUE, ORANGE

if TYPE_CHECKING:
    from pataro.entity import Entity

Operation = Callable[["Entity"], None]


@dataclass
class Frame:
    """One step of an animation, run after (or, for loops, during) ``duration`` seconds."""

    duration: float
    operation: Operation
    is_loop: bool = False
    elapsed: float = field(default=0.0, init=False)

    def run(self, dt: float, source: "Entity") -> bool:
        """Advance by ``dt``; return True once the frame is done."""
        self.elapsed += dt
        done = self.elapsed >= self.duration
        if self.is_loop or done:
            self.operation(source)
        return done


class Animation:
    """A sequence of frames applied to one entity, built fluently."""

    def __init__(self, source: "Entity") -> None:
        self.source = source
        self._sequence: list[Frame] = []
        self._current = 0
        self._prev_ch = source.ch
        self._prev_color = source.color

    def __copy__(self) -> "Animation":
        other = Animation(self.source)
        other._sequence = [copy(frame) for frame in self._sequence]
        other._current = self._current
        other._prev_ch = self._prev_ch
        other._prev_color = self._prev_color
        return other

    def after(self, duration: float, operation: Operation) -> "Animation":
        """Run ``operation`` once, after ``duration`` seconds."""
        self._sequence.append(Frame(duration, operation))
        return self

    def repeat(self, count: int) -> "Animation":
        """Append the frames registered so far ``count`` times, each pass doubling them."""
        for _ in range(count):
            self._sequence.extend([copy(frame) for frame in self._sequence])
        return self

    def loop_for(self, duration: float, operation: Operation) -> "Animation":
        """Run ``operation`` at every tick for ``duration`` seconds."""
        self._sequence.append(Frame(duration, operation, is_loop=True))
        return self

    def revert(self) -> "Animation":
        """Restore the character and colour the entity had when the animation was made."""
        ch, color = self._prev_ch, self._prev_color
        self._sequence.append(Frame(0.0, lambda source: source.morph_into(ch, color)))
        return self

    def update(self, dt: float) -> None:
        """Advance the current frame by ``dt`` seconds."""
        if self.is_finished():
            return
        if self._sequence[self._current].run(dt, self.source):
            self._current += 1

    def is_finished(self) -> bool:
        return self._current >= len(self._sequence)


def lightning_bolt(target: "Entity") -> Animation:
    """Flash the target blue twice, then restore it."""
    return (
        Animation(target)
        .after(0.2, lambda source: source.morph_into("7", LIGHT_BLUE))
        .after(0.2, lambda source: source.morph_into("7", DARK_BLUE))
        .repeat(1)
        .revert()
    )


def burning(target: "Entity") -> Animation:
    """Flicker the target as flames twice, then restore it."""
    return (
        Animation(target)
        .after(0.2, lambda source: source.morph_into("w", ORANGE))
        .after(0.2, lambda source: source.morph_into("W", DARK_ORANGE))
        .repeat(1)
        .revert()
    )