from __future__ import annotations

import argparse
import os
from typing import List

from .config import load_session_config
from .midi_writer import write_midi
from .session import fired_to_midi_events, run_session


def main(argv: List[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Replay the timebase demo patch and render fountain events to MIDI")
    parser.add_argument("--config", required=True, help="Path to JSON config (patch, start/end/step, presses, bpm, ppq, out)")
    parser.add_argument("--out", default=None, help="Override the MIDI output path from the config")
    parser.add_argument("--log", default=None, help="Optional CSV log path (overrides config log_path)")
    args = parser.parse_args(argv)

    try:
        cfg = load_session_config(args.config)
    except ValueError as e:
        raise SystemExit(f"Invalid config {args.config}: {e}")

    out_path = args.out or cfg.out
    log_path = args.log or cfg.log_path

    res = run_session(
        cfg.patch,
        presses=cfg.presses,
        start=cfg.start,
        end=cfg.end,
        step=cfg.step,
        log_path=log_path,
    )

    os.makedirs(os.path.dirname(out_path) or ".", exist_ok=True)
    events = fired_to_midi_events(res.fired, ppq=cfg.ppq, bpm=cfg.bpm, base_note=cfg.base_note, origin=cfg.start, channel=cfg.channel)
    write_midi(events, ppq=cfg.ppq, bpm=cfg.bpm, out_path=out_path)

    print(
        f"Wrote {out_path} (frames={len(res.frames)}, presses={len(res.presses)}, "
        f"fired={len(res.fired)}, bpm={cfg.bpm}, ppq={cfg.ppq})"
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
