from __future__ import annotations

import json
from pathlib import Path

import mido
import pytest

from timebase_engine.cli import main
from timebase_engine.config import load_session_config, session_config_from_dict
from timebase_engine.session import run_session
from timebase_engine.timebase import InvalidPeriodError, TimebaseMode


def test_config_defaults():
    cfg = session_config_from_dict({})
    assert cfg.patch.tone_period == 200
    assert cfg.patch.wave_table == [10.0, 20.0, 30.0, 80.0]
    assert cfg.presses == []
    assert cfg.log_path is None


def test_config_reads_patch_overrides(tmp_path: Path):
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"patch": {"fountain_bins": 4, "fountain_seed": 9}, "presses": [100], "end": 800}))
    cfg = load_session_config(str(path))
    assert cfg.patch.fountain_bins == 4
    assert cfg.patch.fountain_seed == 9
    assert cfg.patch.ramp_period == 2000
    assert cfg.presses == [100]
    assert cfg.end == 800


def test_config_rejects_bad_values():
    with pytest.raises(InvalidPeriodError):
        session_config_from_dict({"patch": {"ramp_period": 0}})
    with pytest.raises(ValueError):
        session_config_from_dict({"step": 0})
    with pytest.raises(ValueError):
        session_config_from_dict({"start": 10, "end": 5})
    with pytest.raises(ValueError):
        session_config_from_dict({"channel": 16})


@pytest.mark.parametrize("key", ["fountain_bins", "fountain_excite", "stagger_lanes"])
def test_config_rejects_negative_counts(key):
    with pytest.raises(ValueError):
        session_config_from_dict({"patch": {key: -1}})
    assert getattr(session_config_from_dict({"patch": {key: 0}}).patch, key) == 0


def test_config_reads_tone_mode_and_channel():
    cfg = session_config_from_dict({"patch": {"tone_mode": "one_shot"}, "channel": 3})
    assert cfg.patch.tone_mode is TimebaseMode.ONE_SHOT
    assert cfg.channel == 3
    assert session_config_from_dict({"patch": {}}).patch.tone_mode is TimebaseMode.REPEAT
    with pytest.raises(ValueError):
        session_config_from_dict({"patch": {"tone_mode": "loop"}})


def test_cli_renders_midi_and_log(tmp_path: Path, capsys):
    cfg_path = tmp_path / "session.json"
    cfg_path.write_text(json.dumps({"presses": [500], "end": 3000, "step": 10, "bpm": 120, "ppq": 480}))
    out = tmp_path / "out" / "fountain.mid"
    log = tmp_path / "log.csv"

    rc = main(["--config", str(cfg_path), "--out", str(out), "--log", str(log)])
    assert rc == 0
    assert out.exists()
    assert log.exists()
    assert "Wrote" in capsys.readouterr().out

    expected = run_session(presses=[500], end=3000, step=10)
    mid = mido.MidiFile(str(out))
    assert mid.ticks_per_beat == 480
    on_msgs = [m for tr in mid.tracks for m in tr if m.type == "note_on" and m.velocity > 0]
    assert len(on_msgs) == len(expected.fired)
    assert {m.note for m in on_msgs} <= set(range(60, 70))
    assert {m.channel for m in on_msgs} == {0}


@pytest.mark.parametrize(
    "patch",
    [
        {"tone_period": -5},
        {"fountain_bins": -1},
        {"fountain_excite": -1},
        {"stagger_lanes": -1},
    ],
)
def test_cli_reports_invalid_config(tmp_path: Path, patch):
    cfg_path = tmp_path / "bad.json"
    cfg_path.write_text(json.dumps({"patch": patch}))
    with pytest.raises(SystemExit):
        main(["--config", str(cfg_path)])


def test_cli_writes_configured_channel(tmp_path: Path):
    cfg_path = tmp_path / "session.json"
    cfg_path.write_text(json.dumps({"presses": [0], "end": 2000, "step": 20, "channel": 5}))
    out = tmp_path / "ch5.mid"

    assert main(["--config", str(cfg_path), "--out", str(out)]) == 0
    mid = mido.MidiFile(str(out))
    notes = [m for tr in mid.tracks for m in tr if m.type in ("note_on", "note_off")]
    assert notes
    assert {m.channel for m in notes} == {5}
