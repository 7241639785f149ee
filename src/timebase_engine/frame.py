from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from .event import Event
from .timebase import Timebase, TimebaseMode


@dataclass
class Input:
    """Caller-owned register holding one manually stamped event.

    Starts out as Event.never() so timebases triggered from it stay inert
    until the first Frame.trigger().
    """

    ev: Event = field(default_factory=Event.never)

    @property
    def event(self) -> Event:
        return self.ev

    def reset(self) -> None:
        self.ev = Event.never()


TriggerLike = Union[Event, Input]


def as_event(trigger: TriggerLike) -> Event:
    if isinstance(trigger, Input):
        return trigger.event
    return trigger


@dataclass(frozen=True)
class Frame:
    """Factory bound to a single evaluation instant `now`."""

    now: int

    def timebase(self, mode: TimebaseMode, period: int, trigger: TriggerLike) -> Timebase:
        return Timebase(now=self.now, mode=mode, period=period, trigger=as_event(trigger))

    def one_shot(self, period: int, trigger: TriggerLike) -> Timebase:
        return self.timebase(TimebaseMode.ONE_SHOT, period, trigger)

    def repeat(self, period: int, trigger: TriggerLike) -> Timebase:
        return self.timebase(TimebaseMode.REPEAT, period, trigger)

    def trigger(self, inp: Input) -> None:
        """Stamp `inp` with this frame's `now` (last write wins)."""
        inp.ev = Event(self.now)
