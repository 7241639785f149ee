from __future__ import annotations

"""
Demo patch: a small tree of timebases evaluated once per frame.

- tone: sine at `tone_period`, repeating unless `tone_mode` says otherwise
- ramp: one-shot 100 -> 0 fade started by the button
- fountain: seeded scatter of `fountain_bins` sub-events across the
  button's `ramp_period` span, each re-triggering a short `pew` ramp
- stagger: lanes anchored at the span start, each shifted by another
  `stagger_step` ticks
- wave: step sequence over the span
"""

from dataclasses import dataclass, field
from typing import List

from .event import Event
from .frame import Frame, Input
from .timebase import TimebaseMode


@dataclass
class PatchConfig:
    tone_period: int = 200
    tone_mode: TimebaseMode = TimebaseMode.REPEAT
    ramp_period: int = 2000
    fountain_bins: int = 10
    fountain_seed: int = 0
    fountain_excite: int = 8
    pew_period: int = 200
    stagger_lanes: int = 10
    stagger_period: int = 400
    stagger_step: int = 100
    wave_table: List[float] = field(default_factory=lambda: [10.0, 20.0, 30.0, 80.0])


@dataclass
class PatchValues:
    now: int
    tone: float
    ramp: float
    level: float
    progress: float
    wave: float
    fountain_events: List[Event]
    fountain_lanes: List[float]
    stagger_lanes: List[float]

    @property
    def lit_bins(self) -> int:
        return sum(1 for ev in self.fountain_events if ev.happened)


def evaluate_patch(frame: Frame, button: Input, cfg: PatchConfig | None = None) -> PatchValues:
    cfg = cfg or PatchConfig()

    tone = frame.timebase(cfg.tone_mode, cfg.tone_period, Event.zero()).sin()
    ramp = frame.one_shot(cfg.ramp_period, button).scale(100.0, 0.0)

    span = frame.one_shot(cfg.ramp_period, button)
    events = span.fountain(cfg.fountain_bins, cfg.fountain_seed, cfg.fountain_excite)
    fountain_lanes = [frame.one_shot(cfg.pew_period, ev).scale(0.0, 100.0) for ev in events]

    stagger_lanes: List[float] = []
    lane = frame.one_shot(cfg.stagger_period, span.sync())
    for i in range(cfg.stagger_lanes):
        stagger_lanes.append(lane.shift(i * cfg.stagger_step).sin() * 100.0)

    return PatchValues(
        now=frame.now,
        tone=tone,
        ramp=ramp,
        level=tone * ramp,
        progress=span.scale(0.0, 100.0),
        wave=span.wave(cfg.wave_table),
        fountain_events=events,
        fountain_lanes=fountain_lanes,
        stagger_lanes=stagger_lanes,
    )
