from __future__ import annotations

"""
Timebase: progress of a one-shot span or a repeating cycle at a given `now`.

A Timebase is a pure view over (now, mode, period, trigger). Progress runs
from 0 to 1 starting at the trigger tick; derived events (`at`, `sync`,
`seq`, `fountain`) resolve to ticks at or before `now` and can be used as
triggers for further timebases.

Fractional offsets are converted to ticks with `int(period * target)`,
i.e. truncation toward zero.
"""

import math
import os
import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, TypeVar

from .event import Event

T = TypeVar("T")


class InvalidPeriodError(ValueError):
    """Raised when a timebase is built with a period that is not > 0."""


class TimebaseMode(Enum):
    ONE_SHOT = "oneshot"
    REPEAT = "repeat"

    @classmethod
    def parse(cls, value: str) -> "TimebaseMode":
        key = str(value).strip().lower().replace("_", "").replace("-", "")
        for mode in cls:
            if mode.value == key:
                return mode
        raise ValueError(f"unknown timebase mode '{value}'")


@dataclass(frozen=True)
class Timebase:
    now: int
    mode: TimebaseMode
    period: int
    trigger: Event

    def __post_init__(self) -> None:
        if not isinstance(self.trigger, Event):
            raise TypeError(f"trigger must be an Event, got {type(self.trigger).__name__}")
        if self.period <= 0:
            raise InvalidPeriodError(f"period must be > 0, got {self.period}")

    def _epoch(self) -> Optional[int]:
        # Trigger tick if it has happened by `now`
        when = self.trigger.when
        if when is None or when > self.now:
            return None
        return when

    @property
    def active(self) -> bool:
        return self._epoch() is not None

    def get(self) -> float:
        """Progress in [0, 1]; 0 while the trigger has not happened."""
        epoch = self._epoch()
        if epoch is None:
            return 0.0
        t = self.now - epoch
        if self.mode is TimebaseMode.ONE_SHOT:
            if t < 0:
                return 0.0
            if t >= self.period:
                return 1.0
            return t / self.period
        return (t % self.period) / self.period

    def at(self, target: float) -> Event:
        """Most recent tick (<= now) at which progress equals `target`.

        One-shot spans only ever reach each target once, so a target still
        ahead of `now` gives Event.never(). Repeating cycles look back into
        the previous cycle when the target has not been reached yet in the
        current one.
        """
        epoch = self._epoch()
        if epoch is None:
            return Event.never()
        offset = int(self.period * target)
        if self.mode is TimebaseMode.ONE_SHOT:
            when = epoch + offset
            if when > self.now:
                return Event.never()
            return Event(when)

        t = self.now - epoch
        time_in_cycle = t % self.period
        cycle_start = t - time_in_cycle
        if time_in_cycle >= offset:
            return Event(epoch + cycle_start + offset)
        # previous cycle
        return Event(epoch + cycle_start - self.period + offset)

    def sync(self) -> Event:
        return self.at(0.0)

    def shift(self, delta: int) -> "Timebase":
        return replace(self, trigger=self.trigger.shifted(delta))

    def between(self, lo: float, hi: float) -> bool:
        v = self.get()
        return lo <= v < hi

    def square(self) -> float:
        return 1.0 if self.between(0.5, 1.0) else 0.0

    def top_half(self) -> bool:
        return self.between(0.5, 1.0)

    def scale(self, lo: float, hi: float) -> float:
        return lo + self.get() * (hi - lo)

    def circle(self) -> float:
        return self.scale(0.0, 2.0 * math.pi)

    def sin(self) -> float:
        return math.sin(self.circle()) * 0.5 + 0.5

    def wave(self, table: Sequence[T]) -> T:
        """Pick an entry from `table` by current progress (clamped to the last)."""
        n = len(table)
        if n == 0:
            raise ValueError("wave table must not be empty")
        idx = int(self.scale(0.0, float(n)))
        return table[max(0, min(idx, n - 1))]

    def seq(self, n: int) -> List[Event]:
        """`n` evenly spaced sub-events: entry i is at(i / n)."""
        if n < 0:
            raise ValueError(f"seq length must be >= 0, got {n}")
        return [self.at(i / n) for i in range(n)]

    def fountain(self, n: int, seed: int, excite: int) -> List[Event]:
        """Seeded scatter of sub-events into `n` bins.

        Draws n * excite uniform samples from a fresh random.Random(seed);
        sample i lands in bin i // excite. Each bin holds the latest of its
        samples that has already fired, or Event.never().
        """
        if n < 0 or excite < 0:
            raise ValueError(f"fountain needs n >= 0 and excite >= 0, got n={n} excite={excite}")
        rng = random.Random(seed)
        bins = [Event.never()] * n
        for i in range(n * excite):
            r = rng.random()
            ev = self.at(r)
            if ev.happened:
                bins[i // excite] = bins[i // excite] | ev

        if os.environ.get("TIMEBASE_DEBUG"):
            lit = sum(1 for ev in bins if ev.happened)
            print(f"[timebase-debug] fountain now={self.now} seed={seed} excite={excite} lit={lit}/{n}")
        return bins
