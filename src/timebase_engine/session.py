from __future__ import annotations

import csv
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .frame import Frame, Input
from .midi_writer import MidiEvent
from .patch import PatchConfig, PatchValues, evaluate_patch
from .ticks import ms_to_ticks, replay_ticks

LOG_FIELDS = ["now", "level", "progress", "wave", "lit_bins"]


@dataclass
class SessionResult:
    frames: List[PatchValues] = field(default_factory=list)
    # (bin index, tick) in firing order, each pair recorded once
    fired: List[Tuple[int, int]] = field(default_factory=list)
    presses: List[int] = field(default_factory=list)


def run_session(
    cfg: Optional[PatchConfig] = None,
    presses: Sequence[int] = (),
    start: int = 0,
    end: int = 4000,
    step: int = 10,
    log_path: Optional[str] = None,
) -> SessionResult:
    """Replay ticks start..end through the patch.

    Each press time stamps the button on the first replayed tick at or after
    it. Every frame is rebuilt from scratch; only the button carries over.
    """
    cfg = cfg or PatchConfig()
    debug_enabled = bool(os.environ.get("TIMEBASE_DEBUG"))

    button = Input()
    pending = sorted(int(p) for p in presses)
    res = SessionResult()
    seen = set()
    log_rows: List[Dict[str, float]] = []

    for now in replay_ticks(start, end, step):
        frame = Frame(now)
        pressed = False
        while pending and pending[0] <= now:
            pending.pop(0)
            pressed = True
        if pressed:
            frame.trigger(button)
            res.presses.append(now)
            if debug_enabled:
                print(f"[timebase-debug] press now={now}")

        values = evaluate_patch(frame, button, cfg)
        res.frames.append(values)

        for idx, ev in enumerate(values.fountain_events):
            if ev.when is not None and (idx, ev.when) not in seen:
                seen.add((idx, ev.when))
                res.fired.append((idx, ev.when))

        log_rows.append({
            "now": now,
            "level": round(values.level, 4),
            "progress": round(values.progress, 4),
            "wave": values.wave,
            "lit_bins": values.lit_bins,
        })

    if debug_enabled:
        print(f"[timebase-debug] session frames={len(res.frames)} fired={len(res.fired)}")

    if log_path:
        directory = os.path.dirname(log_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(log_path, "w", newline="") as f:
            writer = csv.DictWriter(f, fieldnames=LOG_FIELDS)
            writer.writeheader()
            writer.writerows(log_rows)

    return res


def fired_to_midi_events(
    fired: Sequence[Tuple[int, int]],
    ppq: int,
    bpm: float,
    base_note: int = 60,
    velocity: int = 100,
    dur_ms: float = 50.0,
    origin: int = 0,
    channel: int = 0,
) -> List[MidiEvent]:
    """Map fired fountain events to notes: bin -> base_note + bin, tick (ms) -> MIDI tick."""
    dur_tick = max(1, ms_to_ticks(dur_ms, ppq, bpm))
    out: List[MidiEvent] = []
    for idx, when in fired:
        start = ms_to_ticks(when - origin, ppq, bpm)
        if start < 0:
            continue
        note = max(0, min(127, base_note + idx))
        out.append(MidiEvent(note=note, vel=velocity, start_abs_tick=start, dur_tick=dur_tick, channel=channel))
    return out
