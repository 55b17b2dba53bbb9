"""
Caller-owned engine state.

EngineState is immutable: every edit goes through a function below that
returns a new state. User edits are clamped to the Settings ranges here,
since the signal functions do not validate f0 or the harmonic count.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal, Optional

from harmonic_lab.config import settings
from harmonic_lab.signal.types import (
    FundamentalPhaseOffsets,
    Harmonic,
    Mode,
    PhasorSelection,
    SequenceFilter,
)
from harmonic_lab.state.presets import Preset, apply_preset as _apply_preset_to_set


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


def default_harmonics(k_max: int) -> tuple[Harmonic, ...]:
    """Orders 1..k_max, only the fundamental enabled."""
    return tuple(
        Harmonic(
            order=k,
            amplitude=settings.fundamental_amplitude if k == 1 else 0.0,
            phase=0.0,
            enabled=k == 1,
        )
        for k in range(1, int(k_max) + 1)
    )


def _default_fundamental_phases() -> FundamentalPhaseOffsets:
    b, c = settings.default_fundamental_phases
    return FundamentalPhaseOffsets(phase_b=b, phase_c=c)


@dataclass(frozen=True)
class EngineState:
    f0: float = settings.default_f0
    k_max: int = settings.default_k_max
    harmonics: tuple[Harmonic, ...] = field(default_factory=lambda: default_harmonics(settings.default_k_max))
    mode: Mode = settings.default_mode
    sequence_filter: SequenceFilter = SequenceFilter.ALL
    phasor_selection: PhasorSelection = PhasorSelection.FUNDAMENTAL
    phasor_rank: int = 1
    fundamental_phases: Optional[FundamentalPhaseOffsets] = field(default_factory=_default_fundamental_phases)

    def harmonic(self, k: int) -> Optional[Harmonic]:
        for h in self.harmonics:
            if h.order == k:
                return h
        return None

    @property
    def enabled_harmonics(self) -> tuple[Harmonic, ...]:
        return tuple(h for h in self.harmonics if h.enabled)


def default_state() -> EngineState:
    return EngineState()


def set_f0(state: EngineState, f0: float) -> EngineState:
    lo, hi = settings.f0_range
    return replace(state, f0=_clamp(float(f0), lo, hi))


def set_k_max(state: EngineState, k_max: int) -> EngineState:
    """
    Rebuild the set as 1..k_max. Amplitude, phase and enabled flag are
    carried over by position from the current set.
    """
    lo, hi = settings.k_max_range
    k_max = int(_clamp(int(k_max), lo, hi))

    fresh = list(default_harmonics(k_max))
    for idx, old in enumerate(state.harmonics[:k_max]):
        fresh[idx] = replace(fresh[idx], amplitude=old.amplitude, phase=old.phase, enabled=old.enabled)

    return replace(
        state,
        k_max=k_max,
        harmonics=tuple(fresh),
        phasor_rank=min(state.phasor_rank, k_max),
    )


def update_harmonic(
    state: EngineState,
    k: int,
    *,
    amplitude: Optional[float] = None,
    phase: Optional[float] = None,
    enabled: Optional[bool] = None,
) -> EngineState:
    """Patch one order. Unknown k leaves the state as it is."""
    if state.harmonic(k) is None:
        return state

    lo, hi = settings.amplitude_range
    out: list[Harmonic] = []
    for h in state.harmonics:
        if h.order == k:
            changes: dict = {}
            if amplitude is not None:
                changes["amplitude"] = _clamp(float(amplitude), lo, hi)
            if phase is not None:
                changes["phase"] = float(phase)
            if enabled is not None:
                changes["enabled"] = bool(enabled)
            h = replace(h, **changes)
        out.append(h)
    return replace(state, harmonics=tuple(out))


def toggle_harmonic(state: EngineState, k: int) -> EngineState:
    h = state.harmonic(k)
    if h is None:
        return state
    return update_harmonic(state, k, enabled=not h.enabled)


def set_mode(state: EngineState, mode: Mode) -> EngineState:
    return replace(state, mode=Mode(mode))


def set_sequence_filter(state: EngineState, sequence_filter: SequenceFilter) -> EngineState:
    return replace(state, sequence_filter=SequenceFilter(sequence_filter))


def set_phasor_selection(state: EngineState, selection: PhasorSelection) -> EngineState:
    return replace(state, phasor_selection=PhasorSelection(selection))


def set_phasor_rank(state: EngineState, rank: int) -> EngineState:
    return replace(state, phasor_rank=int(_clamp(int(rank), 1, state.k_max)))


def set_fundamental_phase(state: EngineState, branch: Literal["b", "c"], degrees: float) -> EngineState:
    lo, hi = settings.fundamental_phase_range
    degrees = _clamp(float(degrees), lo, hi)
    current = state.fundamental_phases or _default_fundamental_phases()

    if branch == "b":
        phases = replace(current, phase_b=degrees)
    elif branch == "c":
        phases = replace(current, phase_c=degrees)
    else:
        raise ValueError(f"Unknown branch: {branch!r} (expected 'b' or 'c')")
    return replace(state, fundamental_phases=phases)


def clear_fundamental_phases(state: EngineState) -> EngineState:
    """Fall back to the plain -/+120 deg rotation for k=1."""
    return replace(state, fundamental_phases=None)


def apply_preset(state: EngineState, preset: Preset) -> EngineState:
    return replace(state, harmonics=_apply_preset_to_set(state.harmonics, preset))
