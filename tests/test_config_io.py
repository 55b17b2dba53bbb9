from __future__ import annotations

import json

import pytest

from harmonic_lab.ingest.config_io import (
    ConfigError,
    export_config,
    import_config,
    load_config_file,
    parse_config,
    save_config_file,
)
from harmonic_lab.signal.types import Mode
from harmonic_lab.state.engine_state import apply_preset, default_state, set_k_max, set_mode, update_harmonic
from harmonic_lab.state.presets import Preset


def _edited_state():
    s = apply_preset(default_state(), Preset.RECTIFIER6)
    s = update_harmonic(s, 5, phase=-0.3333333333333333)
    s = update_harmonic(s, 2, amplitude=12.5, phase=2.9, enabled=False)
    return set_mode(s, Mode.SINGLE)


def test_export_layout() -> None:
    doc = json.loads(export_config(default_state()))
    assert list(doc.keys()) == ["f0", "kMax", "harmonics", "mode"]
    assert doc["mode"] == "three_phase"
    assert doc["kMax"] == 25
    assert list(doc["harmonics"][0].keys()) == ["k", "amp", "phase", "enabled"]
    assert doc["harmonics"][0] == {"k": 1, "amp": 100.0, "phase": 0.0, "enabled": True}


def test_round_trip_is_identity() -> None:
    s = _edited_state()
    back = import_config(default_state(), export_config(s))
    assert back.harmonics == s.harmonics
    assert back.f0 == s.f0
    assert back.k_max == s.k_max
    assert back.mode is Mode.SINGLE


def test_round_trip_preserves_non_contiguous_order() -> None:
    text = json.dumps(
        {
            "f0": 60,
            "kMax": 3,
            "harmonics": [
                {"k": 7, "amp": 1.5, "phase": 0.1, "enabled": True},
                {"k": 1, "amp": 100, "phase": 0, "enabled": True},
                {"k": 3, "amp": 0, "phase": -3.0, "enabled": False},
            ],
            "mode": "three_phase",
        }
    )
    s = import_config(default_state(), text)
    assert [h.order for h in s.harmonics] == [7, 1, 3]
    assert json.loads(export_config(s))["harmonics"] == json.loads(text)["harmonics"]


@pytest.mark.parametrize(
    "text",
    [
        "not json at all",
        "{",
        "[]",
        json.dumps({"f0": 50, "kMax": 2, "harmonics": [], "mode": "quad"}),
        json.dumps({"f0": 50, "kMax": 2, "mode": "single"}),
        json.dumps({"f0": 50, "kMax": 2, "harmonics": [{"k": 1, "amp": -1, "phase": 0, "enabled": True}], "mode": "single"}),
        json.dumps({"f0": 50, "kMax": 2, "harmonics": [{"k": 0, "amp": 1, "phase": 0, "enabled": True}], "mode": "single"}),
        json.dumps({"f0": 50, "kMax": 2, "harmonics": [{"k": 1, "amp": 1, "phase": 0, "enabled": "yes"}], "mode": "single"}),
        json.dumps({"f0": 50, "kMax": 2, "harmonics": [{"k": 1, "amp": 1, "phase": 0}], "mode": "single"}),
        json.dumps(
            {
                "f0": 50,
                "kMax": 2,
                "harmonics": [
                    {"k": 1, "amp": 1, "phase": 0, "enabled": True},
                    {"k": 1, "amp": 2, "phase": 0, "enabled": True},
                ],
                "mode": "single",
            }
        ),
        json.dumps({"f0": 0, "kMax": 2, "harmonics": [], "mode": "single"}),
        json.dumps({"f0": "50", "kMax": 2, "harmonics": [], "mode": "single"}),
        json.dumps({"f0": 50, "kMax": "2", "harmonics": [], "mode": "single"}),
        json.dumps({"f0": 50, "kMax": 2, "harmonics": [{"k": "1", "amp": 100, "phase": 0, "enabled": True}], "mode": "single"}),
        json.dumps({"f0": 50, "kMax": 2, "harmonics": [{"k": 1, "amp": "100", "phase": "0", "enabled": True}], "mode": "single"}),
        '{"f0": 50, "kMax": 2, "harmonics": [{"k": 1, "amp": 100, "phase": NaN, "enabled": true}], "mode": "single"}',
        '{"f0": Infinity, "kMax": 2, "harmonics": [], "mode": "single"}',
    ],
)
def test_malformed_import_leaves_state_untouched(text) -> None:
    s = _edited_state()
    assert import_config(s, text) is s
    with pytest.raises(ConfigError):
        parse_config(text)


def test_import_keeps_ui_fields() -> None:
    s = set_k_max(default_state(), 10)
    text = export_config(apply_preset(default_state(), Preset.TRIPLEN))
    back = import_config(s, text)
    assert back.sequence_filter == s.sequence_filter
    assert back.fundamental_phases == s.fundamental_phases
    assert back.k_max == 25


def test_save_and_load_file(tmp_path) -> None:
    s = _edited_state()
    p = save_config_file(s, tmp_path / "cfg" / "state.json")
    assert p.exists()
    loaded = load_config_file(p)
    assert loaded.harmonics == s.harmonics


def test_load_missing_file_raises(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config_file(tmp_path / "nope.json")


def test_load_non_utf8_file_keeps_state(tmp_path) -> None:
    p = tmp_path / "bad.json"
    p.write_bytes(b'{"f0": 50, \xff\xfe }')
    s = _edited_state()
    assert load_config_file(p, s) is s


def test_integers_accepted_for_float_fields() -> None:
    text = '{"f0": 60, "kMax": 1, "harmonics": [{"k": 1, "amp": 100, "phase": 0, "enabled": true}], "mode": "single"}'
    cfg = parse_config(text)
    assert cfg.f0 == 60.0
    assert cfg.harmonics[0].amp == 100.0
    assert cfg.mode is Mode.SINGLE
