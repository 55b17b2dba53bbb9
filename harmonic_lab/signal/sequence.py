from __future__ import annotations

from typing import Iterable

from harmonic_lab.signal.types import Harmonic, SequenceFilter, SequenceType, SymmetricalSequence


def symmetrical_sequence(k: int) -> SymmetricalSequence:
    """
    Symmetrical-component class of order k:
      3n+1 -> direct, 3n+2 -> inverse, 3n -> homopolar
    """
    r = int(k) % 3
    if r == 0:
        return SymmetricalSequence.HOMOPOLAR
    if r == 1:
        return SymmetricalSequence.DIRECT
    return SymmetricalSequence.INVERSE


def sequence_type(k: int) -> SequenceType:
    """
    Spectrum label of order k. Triplen wins over the mod-6 split,
    even orders that are not triplen fall through to NONE.
    """
    k = int(k)
    if k % 3 == 0:
        return SequenceType.TRIPLEN
    if k % 6 == 1:
        return SequenceType.POSITIVE
    if k % 6 == 5:
        return SequenceType.NEGATIVE
    return SequenceType.NONE


def should_show_harmonic(k: int, spectrum_filter: SequenceFilter) -> bool:
    spectrum_filter = SequenceFilter(spectrum_filter)
    if spectrum_filter is SequenceFilter.ALL:
        return True
    return sequence_type(k).value == spectrum_filter.value


def filter_spectrum(harmonics: Iterable[Harmonic], spectrum_filter: SequenceFilter) -> list[Harmonic]:
    return [h for h in harmonics if h.enabled and should_show_harmonic(h.order, spectrum_filter)]
