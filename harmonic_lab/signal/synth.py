"""
Time-domain synthesis of a harmonic set.

i_a(t) = sum_k A_k * sin(k*w0*(t + t_off) + phi_k)

Phases b and c follow the usual three-phase rotation scaled by order:
- triplen orders (3, 6, 9...) are in phase on a, b and c (3 x 120 deg = 360 deg)
- k=1 may use explicit b/c angles to model an unbalanced source
- every other order is shifted by -/+ k*120 deg on b/c
"""

from __future__ import annotations

from typing import Iterable, Optional

import numpy as np

from harmonic_lab.config import settings
from harmonic_lab.signal.types import FundamentalPhaseOffsets, Harmonic, Mode, SignalData

TWO_PI = 2.0 * np.pi
PHASE_STEP = TWO_PI / 3.0


def branch_shifts(
    k: int,
    fundamental_phases: Optional[FundamentalPhaseOffsets] = None,
) -> tuple[float, float]:
    """
    Angle (radians) added to the phase-a angle to get phase b and phase c
    for order k. Shared by the synthesizer and the phasor engine.
    """
    if k % 3 == 0:
        return 0.0, 0.0
    if k == 1 and fundamental_phases is not None:
        return float(np.deg2rad(fundamental_phases.phase_b)), float(np.deg2rad(fundamental_phases.phase_c))
    return -PHASE_STEP * k, PHASE_STEP * k


def sample_times(f0: float, periods: int | None = None, samples_per_period: int | None = None) -> np.ndarray:
    periods = settings.periods if periods is None else int(periods)
    samples_per_period = settings.samples_per_period if samples_per_period is None else int(samples_per_period)
    n = periods * samples_per_period
    return (np.arange(n, dtype=float) / samples_per_period) * (1.0 / float(f0))


def _frozen(x: np.ndarray) -> np.ndarray:
    x.setflags(write=False)
    return x


def synthesize(
    harmonics: Iterable[Harmonic],
    f0: float,
    mode: Mode,
    time_offset: float = 0.0,
    fundamental_phases: Optional[FundamentalPhaseOffsets] = None,
) -> SignalData:
    """
    Build t, ia, ib, ic, in over 3 fundamental periods (500 samples each).

    f0 must be > 0; it is not re-checked here.
    Single-phase mode returns empty ib/ic/in arrays.
    """
    mode = Mode(mode)
    three_phase = mode is Mode.THREE_PHASE

    t = sample_times(f0)
    w0 = TWO_PI * float(f0)
    tt = t + float(time_offset)

    ia = np.zeros_like(t)
    ib = np.zeros_like(t) if three_phase else np.empty(0)
    ic = np.zeros_like(t) if three_phase else np.empty(0)

    for h in harmonics:
        if not h.enabled:
            continue

        theta = h.order * w0 * tt + h.phase
        ia += h.amplitude * np.sin(theta)

        if three_phase:
            shift_b, shift_c = branch_shifts(h.order, fundamental_phases)
            ib += h.amplitude * np.sin(theta + shift_b)
            ic += h.amplitude * np.sin(theta + shift_c)

    i_n = ia + ib + ic if three_phase else np.empty(0)

    return SignalData(t=_frozen(t), ia=_frozen(ia), ib=_frozen(ib), ic=_frozen(ic), in_=_frozen(i_n))
