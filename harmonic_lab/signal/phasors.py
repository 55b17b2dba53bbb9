"""
Steady-state phasors at a fixed instant.

Each harmonic contributes A*exp(j*theta), theta = k*w0*t_off + phi, to the
phase-a accumulator. Phases b/c apply the same shift rules as the
synthesizer; the neutral is the complex sum of a, b and c.
"""

from __future__ import annotations

from typing import Callable, Iterable, Optional

import numpy as np

from harmonic_lab.signal.sequence import symmetrical_sequence
from harmonic_lab.signal.synth import TWO_PI, branch_shifts
from harmonic_lab.signal.types import (
    FundamentalPhaseOffsets,
    Harmonic,
    Phasor,
    PhasorData,
    PhasorSelection,
    SequencePhasors,
    SymmetricalSequence,
)


def selection_filter(selection: PhasorSelection, selected_rank: int = 1) -> Callable[[int], bool]:
    """Predicate on the order k for a phasor selection."""
    selection = PhasorSelection(selection)
    if selection is PhasorSelection.FUNDAMENTAL:
        return lambda k: k == 1
    if selection is PhasorSelection.RANK:
        return lambda k: k == int(selected_rank)
    if selection is PhasorSelection.SEQUENCE_DIRECT:
        return lambda k: k % 3 == 1
    if selection is PhasorSelection.SEQUENCE_INVERSE:
        return lambda k: k % 3 == 2
    if selection is PhasorSelection.SEQUENCE_HOMOPOLAR:
        return lambda k: k % 3 == 0
    return lambda k: True


def _phase_a_angle(h: Harmonic, w0: float, time_offset: float) -> float:
    return h.order * w0 * float(time_offset) + h.phase


def compute_phasors(
    harmonics: Iterable[Harmonic],
    selection: PhasorSelection,
    selected_rank: int,
    time_offset: float,
    f0: float,
    fundamental_phases: Optional[FundamentalPhaseOffsets] = None,
) -> PhasorData:
    harmonics = list(harmonics)
    selection = PhasorSelection(selection)
    include = selection_filter(selection, selected_rank)
    w0 = TWO_PI * float(f0)

    za = 0j
    zb = 0j
    zc = 0j

    for h in harmonics:
        if not h.enabled or not include(h.order):
            continue
        theta = _phase_a_angle(h, w0, time_offset)
        shift_b, shift_c = branch_shifts(h.order, fundamental_phases)
        za += h.amplitude * np.exp(1j * theta)
        zb += h.amplitude * np.exp(1j * (theta + shift_b))
        zc += h.amplitude * np.exp(1j * (theta + shift_c))

    zn = za + zb + zc

    sequences = None
    if selection is PhasorSelection.RESULTANT:
        sequences = compute_sequences(harmonics, time_offset, f0, fundamental_phases)

    return PhasorData(
        ia=Phasor.from_complex(complex(za)),
        ib=Phasor.from_complex(complex(zb)),
        ic=Phasor.from_complex(complex(zc)),
        in_=Phasor.from_complex(complex(zn)),
        sequences=sequences,
    )


def compute_sequences(
    harmonics: Iterable[Harmonic],
    time_offset: float,
    f0: float,
    fundamental_phases: Optional[FundamentalPhaseOffsets] = None,
) -> SequencePhasors:
    """
    Direct (3n+1), inverse (3n+2) and homopolar (3n) phasors.

    Uses the phase-a angle only; per-phase shifts do not apply here, so
    fundamental_phases is accepted for signature parity and ignored.
    """
    w0 = TWO_PI * float(f0)
    acc = {s: 0j for s in SymmetricalSequence}

    for h in harmonics:
        if not h.enabled:
            continue
        theta = _phase_a_angle(h, w0, time_offset)
        acc[symmetrical_sequence(h.order)] += h.amplitude * np.exp(1j * theta)

    return SequencePhasors(
        direct=Phasor.from_complex(complex(acc[SymmetricalSequence.DIRECT])),
        inverse=Phasor.from_complex(complex(acc[SymmetricalSequence.INVERSE])),
        homopolar=Phasor.from_complex(complex(acc[SymmetricalSequence.HOMOPOLAR])),
    )
