"""
Deterministic temporal-event model: events, timebases and per-tick frames.

Contains the pure timebase core, a demo patch built on it, and a replay
session that renders fired events to CSV and MIDI.
"""

from .event import Event, merge
from .frame import Frame, Input
from .timebase import InvalidPeriodError, Timebase, TimebaseMode

__all__ = [
    "Event",
    "Frame",
    "Input",
    "InvalidPeriodError",
    "Timebase",
    "TimebaseMode",
    "merge",
]
