from __future__ import annotations

from dataclasses import dataclass
from typing import List

from mido import Message, MetaMessage, MidiFile, MidiTrack, bpm2tempo


@dataclass
class MidiEvent:
    note: int
    vel: int
    start_abs_tick: int
    dur_tick: int
    channel: int = 0  # zero-indexed


def write_midi(events: List[MidiEvent], ppq: int, bpm: float, out_path: str) -> None:
    """
    Write a single-track MIDI file from absolutely timed events.
    Steps:
      - set tempo meta
      - sort by (tick, note_off before note_on)
      - delta-encode times
    """
    mid = MidiFile(type=1)
    mid.ticks_per_beat = int(ppq)

    track = MidiTrack()
    mid.tracks.append(track)
    track.append(MetaMessage("set_tempo", tempo=bpm2tempo(bpm), time=0))

    msgs = []
    for ev in events:
        start = max(0, ev.start_abs_tick)
        end = start + max(1, ev.dur_tick)
        msgs.append((start, 1, Message("note_on", note=ev.note, velocity=ev.vel, channel=ev.channel, time=0)))
        msgs.append((end, 0, Message("note_off", note=ev.note, velocity=0, channel=ev.channel, time=0)))

    msgs.sort(key=lambda t: (t[0], t[1]))

    last_t = 0
    for abs_t, _prio, msg in msgs:
        msg.time = max(0, abs_t - last_t)
        track.append(msg)
        last_t = abs_t

    mid.save(out_path)
