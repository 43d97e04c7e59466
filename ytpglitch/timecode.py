"""Timecode: positions and durations on the timeline."""

from __future__ import annotations

from dataclasses import dataclass
from fractions import Fraction

from ytpglitch.errors import NegativeResult

# 100 ns units, same resolution as the editor's native timecode
TICKS_PER_MS = 10_000


@dataclass(frozen=True, order=True)
class Timecode:
    """A non-negative tick count.

    Every position and length in the engine is a Timecode. Mixing raw
    milliseconds and ticks is what silently corrupts edits, so compositors
    convert once at the boundary and do all arithmetic here.
    """
    ticks: int = 0

    def __post_init__(self):
        if not isinstance(self.ticks, int):
            object.__setattr__(self, "ticks", int(self.ticks))
        if self.ticks < 0:
            raise NegativeResult(f"Timecode cannot be negative: {self.ticks} ticks")

    @classmethod
    def from_milliseconds(cls, ms: float) -> Timecode:
        """Convert milliseconds to ticks, truncating any fractional tick.

        The decimal value is converted exactly, so 1.13 ms is 11300 ticks
        rather than whatever the binary float product rounds down to.
        """
        if ms < 0:
            raise NegativeResult(f"Timecode cannot be negative: {ms} ms")
        return cls(int(Fraction(str(ms)) * TICKS_PER_MS))

    def to_milliseconds(self) -> float:
        return self.ticks / TICKS_PER_MS

    def add(self, other: Timecode) -> Timecode:
        return Timecode(self.ticks + other.ticks)

    def subtract(self, other: Timecode, clamp: bool = False) -> Timecode:
        """Subtract other from self.

        Raises NegativeResult when the result would be below zero, unless
        clamp is set, in which case the result is zero.
        """
        ticks = self.ticks - other.ticks
        if ticks < 0:
            if clamp:
                return ZERO
            raise NegativeResult(f"{self} - {other} is negative")
        return Timecode(ticks)

    def scale(self, factor: float) -> Timecode:
        """Multiply by factor, truncating to whole ticks."""
        if factor < 0:
            raise NegativeResult(f"Cannot scale {self} by negative factor {factor}")
        return Timecode(int(self.ticks * factor))

    def __add__(self, other: Timecode) -> Timecode:
        if not isinstance(other, Timecode):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other: Timecode) -> Timecode:
        if not isinstance(other, Timecode):
            return NotImplemented
        return self.subtract(other)

    def __mul__(self, factor: float) -> Timecode:
        if isinstance(factor, Timecode):
            return NotImplemented
        return self.scale(factor)

    __rmul__ = __mul__

    def __floordiv__(self, other: Timecode) -> int:
        """How many whole `other` lengths fit in self."""
        if not isinstance(other, Timecode):
            return NotImplemented
        if other.ticks == 0:
            raise ZeroDivisionError("Timecode division by zero length")
        return self.ticks // other.ticks

    def __str__(self) -> str:
        total_ms = self.ticks // TICKS_PER_MS
        hours, rem = divmod(total_ms, 3_600_000)
        minutes, rem = divmod(rem, 60_000)
        seconds, ms = divmod(rem, 1000)
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}.{ms:03d}"


ZERO = Timecode(0)


def ms(value: float) -> Timecode:
    """Shorthand for Timecode.from_milliseconds."""
    return Timecode.from_milliseconds(value)
