from __future__ import annotations

"""
Tick helpers: replaying "now" values and converting millisecond timestamps
to MIDI ticks.

Timebase ticks are plain Python ints (milliseconds in the bundled patch) and
never roll over. `wrap_i32` is available for hosts that feed truncated
32-bit wall-clock values.
"""

from typing import Iterator


def replay_ticks(start: int, end: int, step: int = 1) -> Iterator[int]:
    """Yield start, start+step, ... up to and including `end`."""
    if step <= 0:
        raise ValueError(f"step must be > 0, got {step}")
    t = int(start)
    while t <= end:
        yield t
        t += step


def wrap_i32(tick: int) -> int:
    """Wrap an integer into the signed 32-bit range."""
    return ((int(tick) + 0x80000000) & 0xFFFFFFFF) - 0x80000000


def ticks_per_second(ppq: int, bpm: float) -> float:
    """MIDI ticks per second: PPQ * BPM / 60."""
    return (ppq * bpm) / 60.0


def ticks_per_ms(ppq: int, bpm: float) -> float:
    return ticks_per_second(ppq, bpm) / 1000.0


def ms_to_ticks(ms: float, ppq: int, bpm: float) -> int:
    """Convert milliseconds to integer MIDI ticks (rounded)."""
    return int(round(ms * ticks_per_ms(ppq, bpm)))
