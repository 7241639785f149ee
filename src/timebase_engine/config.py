from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .patch import PatchConfig
from .timebase import InvalidPeriodError, TimebaseMode


@dataclass
class SessionConfig:
    patch: PatchConfig = field(default_factory=PatchConfig)
    start: int = 0
    end: int = 4000
    step: int = 10
    presses: List[int] = field(default_factory=list)
    bpm: float = 120.0
    ppq: int = 480
    base_note: int = 60
    channel: int = 0
    out: str = "out/fountain.mid"
    log_path: Optional[str] = None


def _patch_from_dict(d: Optional[Dict[str, Any]]) -> PatchConfig:
    if not d:
        return PatchConfig()
    base = PatchConfig()
    cfg = PatchConfig(
        tone_period=int(d.get("tone_period", base.tone_period)),
        tone_mode=TimebaseMode.parse(d["tone_mode"]) if "tone_mode" in d else base.tone_mode,
        ramp_period=int(d.get("ramp_period", base.ramp_period)),
        fountain_bins=int(d.get("fountain_bins", base.fountain_bins)),
        fountain_seed=int(d.get("fountain_seed", base.fountain_seed)),
        fountain_excite=int(d.get("fountain_excite", base.fountain_excite)),
        pew_period=int(d.get("pew_period", base.pew_period)),
        stagger_lanes=int(d.get("stagger_lanes", base.stagger_lanes)),
        stagger_period=int(d.get("stagger_period", base.stagger_period)),
        stagger_step=int(d.get("stagger_step", base.stagger_step)),
        wave_table=[float(v) for v in d.get("wave_table", base.wave_table)],
    )
    for name in ("tone_period", "ramp_period", "pew_period", "stagger_period"):
        value = getattr(cfg, name)
        if value <= 0:
            raise InvalidPeriodError(f"patch.{name} must be > 0, got {value}")
    for name in ("fountain_bins", "fountain_excite", "stagger_lanes"):
        value = getattr(cfg, name)
        if value < 0:
            raise ValueError(f"patch.{name} must be >= 0, got {value}")
    if not cfg.wave_table:
        raise ValueError("patch.wave_table must not be empty")
    return cfg


def session_config_from_dict(raw: Dict[str, Any]) -> SessionConfig:
    cfg = SessionConfig(
        patch=_patch_from_dict(raw.get("patch")),
        start=int(raw.get("start", 0)),
        end=int(raw.get("end", 4000)),
        step=int(raw.get("step", 10)),
        presses=[int(p) for p in raw.get("presses", [])],
        bpm=float(raw.get("bpm", 120.0)),
        ppq=int(raw.get("ppq", 480)),
        base_note=int(raw.get("base_note", 60)),
        channel=int(raw.get("channel", 0)),
        out=str(raw.get("out", "out/fountain.mid")),
        log_path=raw.get("log_path"),
    )
    if cfg.step <= 0:
        raise ValueError(f"step must be > 0, got {cfg.step}")
    if cfg.end < cfg.start:
        raise ValueError(f"end ({cfg.end}) must not be before start ({cfg.start})")
    if not 0 <= cfg.channel <= 15:
        raise ValueError(f"channel must be in 0..15, got {cfg.channel}")
    return cfg


def load_session_config(path: str) -> SessionConfig:
    with open(path, "r") as f:
        raw = json.load(f)
    return session_config_from_dict(raw)
