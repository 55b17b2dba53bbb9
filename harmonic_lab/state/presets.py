from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Sequence

from harmonic_lab.config import settings
from harmonic_lab.signal.types import Harmonic


class Preset(str, Enum):
    PURE = "pure"
    SQUARE = "square"
    RECTIFIER6 = "rectifier6"
    TRIPLEN = "triplen"
    CUSTOM = "custom"


# Characteristic currents of a 6-pulse bridge: 6n +/- 1, amplitude ~ 1/k
RECTIFIER6_ORDERS = (1, 5, 7, 11, 13, 17, 19, 23)

# Single-phase SMPS-like load: strong 3rd, some 9th
TRIPLEN_AMPLITUDES = {1: 100.0, 3: 60.0, 9: 20.0}


def _preset_amplitudes(preset: Preset, orders: Sequence[int]) -> dict[int, float]:
    base = settings.fundamental_amplitude
    if preset is Preset.PURE:
        return {1: base}
    if preset is Preset.SQUARE:
        return {k: base / k for k in orders if k % 2 == 1}
    if preset is Preset.RECTIFIER6:
        return {k: base / k for k in RECTIFIER6_ORDERS}
    if preset is Preset.TRIPLEN:
        return dict(TRIPLEN_AMPLITUDES)
    return {}


def apply_preset(harmonics: Sequence[Harmonic], preset: Preset) -> tuple[Harmonic, ...]:
    """
    Clear the set (disabled, amp 0, phase 0) then enable the preset's lines.
    Orders the preset names but the set lacks are skipped; order of the set
    is kept.
    """
    preset = Preset(preset)
    amps = _preset_amplitudes(preset, [h.order for h in harmonics])

    out: list[Harmonic] = []
    for h in harmonics:
        if h.order in amps:
            out.append(replace(h, amplitude=float(amps[h.order]), phase=0.0, enabled=True))
        else:
            out.append(replace(h, amplitude=0.0, phase=0.0, enabled=False))
    return tuple(out)
