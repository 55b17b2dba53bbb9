"""Immutable state updates and presets."""

from __future__ import annotations

import math

import pytest

from harmonic_lab.signal.types import FundamentalPhaseOffsets, Mode, PhasorSelection, SequenceFilter, normalize_phase
from harmonic_lab.state.engine_state import (
    apply_preset,
    clear_fundamental_phases,
    default_harmonics,
    default_state,
    set_f0,
    set_fundamental_phase,
    set_k_max,
    set_mode,
    set_phasor_rank,
    set_phasor_selection,
    set_sequence_filter,
    toggle_harmonic,
    update_harmonic,
)
from harmonic_lab.state.presets import Preset


def test_default_state() -> None:
    s = default_state()
    assert s.f0 == 50.0
    assert s.k_max == 25
    assert s.mode is Mode.THREE_PHASE
    assert [h.order for h in s.harmonics] == list(range(1, 26))
    assert s.harmonics[0].amplitude == 100.0
    assert s.harmonics[0].enabled
    assert not any(h.enabled for h in s.harmonics[1:])
    assert s.fundamental_phases == FundamentalPhaseOffsets(-120.0, 120.0)


def test_update_returns_new_state_and_leaves_old_one() -> None:
    s0 = default_state()
    s1 = update_harmonic(s0, 3, amplitude=40.0, phase=0.25, enabled=True)

    assert s1 is not s0
    assert s0.harmonic(3).amplitude == 0.0
    assert not s0.harmonic(3).enabled
    h3 = s1.harmonic(3)
    assert (h3.amplitude, h3.phase, h3.enabled) == (40.0, 0.25, True)
    assert [h.order for h in s1.harmonics] == [h.order for h in s0.harmonics]


def test_partial_update_keeps_other_fields() -> None:
    s = update_harmonic(default_state(), 1, phase=-1.0)
    assert s.harmonic(1).amplitude == 100.0
    assert s.harmonic(1).enabled


def test_update_unknown_order_is_a_no_op() -> None:
    s0 = default_state()
    assert update_harmonic(s0, 99, amplitude=5.0) is s0
    assert toggle_harmonic(s0, 0) is s0


def test_amplitude_is_clamped_non_negative() -> None:
    s = update_harmonic(default_state(), 2, amplitude=-5.0)
    assert s.harmonic(2).amplitude == 0.0
    s = update_harmonic(s, 2, amplitude=1e6)
    assert s.harmonic(2).amplitude == 200.0


def test_toggle() -> None:
    s = toggle_harmonic(default_state(), 1)
    assert not s.harmonic(1).enabled
    assert s.harmonic(1).amplitude == 100.0
    assert toggle_harmonic(s, 1).harmonic(1).enabled


def test_set_k_max_carries_values_by_position() -> None:
    s = update_harmonic(default_state(), 5, amplitude=20.0, enabled=True)
    shrunk = set_k_max(s, 3)
    assert [h.order for h in shrunk.harmonics] == [1, 2, 3]
    assert shrunk.k_max == 3

    grown = set_k_max(shrunk, 7)
    assert [h.order for h in grown.harmonics] == list(range(1, 8))
    # k=5 was dropped by the shrink; it comes back as a default line
    assert grown.harmonic(5).amplitude == 0.0
    assert not grown.harmonic(5).enabled
    assert grown.harmonic(1).amplitude == 100.0

    kept = set_k_max(s, 10)
    assert kept.harmonic(5).amplitude == 20.0
    assert kept.harmonic(5).enabled


def test_set_k_max_is_clamped_and_rank_follows() -> None:
    s = set_phasor_rank(default_state(), 20)
    s = set_k_max(s, 0)
    assert s.k_max == 1
    assert s.phasor_rank == 1
    assert set_k_max(s, 500).k_max == 49


def test_scalar_setters() -> None:
    s = default_state()
    assert set_f0(s, 60.0).f0 == 60.0
    assert set_f0(s, 0.0).f0 == 1.0
    assert set_mode(s, "single").mode is Mode.SINGLE
    assert set_sequence_filter(s, SequenceFilter.TRIPLEN).sequence_filter is SequenceFilter.TRIPLEN
    assert set_phasor_selection(s, "resultant").phasor_selection is PhasorSelection.RESULTANT
    assert set_phasor_rank(s, 0).phasor_rank == 1
    with pytest.raises(ValueError):
        set_mode(s, "two_phase")


def test_fundamental_phase_edits() -> None:
    s = set_fundamental_phase(default_state(), "b", -100.0)
    assert s.fundamental_phases == FundamentalPhaseOffsets(-100.0, 120.0)
    s = set_fundamental_phase(s, "c", 400.0)
    assert s.fundamental_phases.phase_c == 180.0
    assert clear_fundamental_phases(s).fundamental_phases is None
    with pytest.raises(ValueError):
        set_fundamental_phase(s, "a", 0.0)


# -----------------------------------------------------------------------
# Presets
# -----------------------------------------------------------------------


def test_preset_pure() -> None:
    s = update_harmonic(default_state(), 5, amplitude=30.0, phase=1.0, enabled=True)
    s = apply_preset(s, Preset.PURE)
    assert [h.order for h in s.harmonics if h.enabled] == [1]
    assert s.harmonic(5).amplitude == 0.0
    assert s.harmonic(5).phase == 0.0


def test_preset_square() -> None:
    s = apply_preset(default_state(), Preset.SQUARE)
    enabled = [h for h in s.harmonics if h.enabled]
    assert [h.order for h in enabled] == list(range(1, 26, 2))
    for h in enabled:
        assert h.amplitude == pytest.approx(100.0 / h.order)
    assert s.harmonic(2).amplitude == 0.0


def test_preset_rectifier6_skips_missing_orders() -> None:
    s = apply_preset(set_k_max(default_state(), 10), Preset.RECTIFIER6)
    assert [h.order for h in s.harmonics if h.enabled] == [1, 5, 7]
    assert s.harmonic(7).amplitude == pytest.approx(100.0 / 7.0)


def test_preset_triplen_and_custom() -> None:
    s = apply_preset(default_state(), Preset.TRIPLEN)
    assert {h.order: h.amplitude for h in s.harmonics if h.enabled} == {1: 100.0, 3: 60.0, 9: 20.0}

    c = apply_preset(s, Preset.CUSTOM)
    assert not any(h.enabled for h in c.harmonics)
    assert len(c.harmonics) == 25


def test_default_harmonics_helper() -> None:
    hs = default_harmonics(4)
    assert len(hs) == 4
    assert hs[3].order == 4


@pytest.mark.parametrize(
    "raw, wrapped",
    [(0.0, 0.0), (math.pi, math.pi), (-math.pi, math.pi), (2.5 * math.pi, 0.5 * math.pi), (-1.75 * math.pi, 0.25 * math.pi)],
)
def test_normalize_phase(raw, wrapped) -> None:
    assert normalize_phase(raw) == pytest.approx(wrapped)
