from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Event:
    """A point in time that may not have occurred yet.

    `when` is the tick of the occurrence, or None for "never".
    """

    when: Optional[int] = None

    @classmethod
    def zero(cls) -> "Event":
        return cls(0)

    @classmethod
    def never(cls) -> "Event":
        return cls(None)

    @classmethod
    def occurred(cls, tick: int) -> "Event":
        return cls(int(tick))

    @property
    def happened(self) -> bool:
        return self.when is not None

    def shifted(self, delta: int) -> "Event":
        if self.when is None:
            return self
        return Event(self.when + int(delta))

    def __or__(self, other: "Event") -> "Event":
        if not isinstance(other, Event):
            return NotImplemented
        if self.when is None:
            return other
        if other.when is None:
            return self
        return Event(max(self.when, other.when))

    def __repr__(self) -> str:
        if self.when is None:
            return "Event.never()"
        return f"Event.occurred({self.when})"


def merge(*events: Event) -> Event:
    """OR together any number of events: the latest occurrence wins."""
    out = Event.never()
    for ev in events:
        out = out | ev
    return out
