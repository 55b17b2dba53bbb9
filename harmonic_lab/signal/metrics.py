from __future__ import annotations

from typing import Iterable

import numpy as np

from harmonic_lab.signal.types import (
    ZERO_METRICS,
    Harmonic,
    Metrics,
    Mode,
    PhaseMetrics,
    SignalData,
)


def rms(signal: np.ndarray) -> float:
    """Root mean square over the whole window."""
    x = np.asarray(signal, dtype=float)
    if x.size == 0:
        return 0.0
    return float(np.sqrt(np.mean(x * x)))


def peak(signal: np.ndarray) -> float:
    x = np.asarray(signal, dtype=float)
    if x.size == 0:
        return 0.0
    return float(np.max(np.abs(x)))


def fundamental_amplitude(harmonics: Iterable[Harmonic]) -> float:
    """Amplitude of the enabled k=1 line, 0 if missing or disabled."""
    for h in harmonics:
        if h.order == 1 and h.enabled:
            return float(h.amplitude)
    return 0.0


def thd_percent(harmonics: Iterable[Harmonic]) -> float:
    """
    THD = sqrt(sum(k>1 A_k^2)) / A_1 * 100
    Taken from the amplitudes directly: the synthesized lines are ideal
    sinusoids, orthogonal over the integer-period window.
    """
    harmonics = list(harmonics)
    i1 = fundamental_amplitude(harmonics)
    if i1 <= 0.0:
        return 0.0
    s = 0.0
    for h in harmonics:
        if h.enabled and h.order > 1:
            s += float(h.amplitude) ** 2
    return float(np.sqrt(s) / i1 * 100.0)


def neutral_thd_percent(harmonics: Iterable[Harmonic]) -> float:
    """
    Neutral THD = sqrt(sum(triplen (3*A_k)^2)) / A_1 * 100
    Triplen lines add in phase on the neutral, hence the factor 3.
    Still referenced to the phase fundamental, not to the neutral RMS.
    """
    harmonics = list(harmonics)
    i1 = fundamental_amplitude(harmonics)
    if i1 <= 0.0:
        return 0.0
    s = 0.0
    for h in harmonics:
        if h.enabled and h.order % 3 == 0:
            s += (3.0 * float(h.amplitude)) ** 2
    return float(np.sqrt(s) / i1 * 100.0)


def crest_factor(signal: np.ndarray) -> float:
    """
    Crest factor = peak / RMS
    """
    r = rms(signal)
    if r <= 1e-12:
        return 0.0
    return peak(signal) / r


def compute_metrics(harmonics: Iterable[Harmonic], signal: SignalData, mode: Mode) -> Metrics:
    harmonics = list(harmonics)
    thd = thd_percent(harmonics)

    ia = PhaseMetrics(thd=thd, rms=rms(signal.ia), peak=peak(signal.ia))

    if Mode(mode) is not Mode.THREE_PHASE:
        # b/c keep the phase-a THD (rotation does not change the ratios); no neutral
        empty = PhaseMetrics(thd=thd, rms=0.0, peak=0.0)
        return Metrics(ia=ia, ib=empty, ic=empty, in_=ZERO_METRICS)

    return Metrics(
        ia=ia,
        ib=PhaseMetrics(thd=thd, rms=rms(signal.ib), peak=peak(signal.ib)),
        ic=PhaseMetrics(thd=thd, rms=rms(signal.ic), peak=peak(signal.ic)),
        in_=PhaseMetrics(thd=neutral_thd_percent(harmonics), rms=rms(signal.in_), peak=peak(signal.in_)),
    )
