"""Babel intervals, expressed in centiseconds."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

_CENTISECOND = timedelta(milliseconds=10)
_U16_MASK = 0xFFFF


@dataclass(frozen=True, order=True)
class Interval:
    """A duration in centiseconds (0.01 s), as carried on the wire.

    Converting from a timedelta truncates to whole centiseconds.
    """

    centiseconds: int

    def __post_init__(self) -> None:
        if not 0 <= self.centiseconds <= _U16_MASK:
            raise ValueError(
                f"interval must fit in 16 bits, got {self.centiseconds}"
            )

    @classmethod
    def from_timedelta(cls, value: timedelta) -> Interval:
        """Create an interval from a duration, dropping sub-centisecond precision."""
        if value < timedelta(0):
            raise ValueError("interval can not be negative")
        # The wire value is 16 bits wide; larger durations wrap around.
        return cls((value // _CENTISECOND) & _U16_MASK)

    def to_timedelta(self) -> timedelta:
        """Return the interval as a duration."""
        return self.centiseconds * _CENTISECOND

    def __int__(self) -> int:
        return self.centiseconds