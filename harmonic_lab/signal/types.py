from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np


class Mode(str, Enum):
    SINGLE = "single"
    THREE_PHASE = "three_phase"


class PhasorSelection(str, Enum):
    FUNDAMENTAL = "fundamental"
    RANK = "rank"
    RESULTANT = "resultant"
    SEQUENCE_DIRECT = "sequence_direct"
    SEQUENCE_INVERSE = "sequence_inverse"
    SEQUENCE_HOMOPOLAR = "sequence_homopolar"


class SymmetricalSequence(str, Enum):
    """Mod-3 classification used for phasor selection and decomposition."""

    DIRECT = "direct"
    INVERSE = "inverse"
    HOMOPOLAR = "homopolar"


class SequenceType(str, Enum):
    """Mod-6 classification used for spectrum display."""

    TRIPLEN = "triplen"
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NONE = "none"


class SequenceFilter(str, Enum):
    ALL = "all"
    TRIPLEN = "triplen"
    POSITIVE = "positive"
    NEGATIVE = "negative"


@dataclass(frozen=True)
class Harmonic:
    """
    One spectral line of the composite waveform.
    order: k (multiple of f0), amplitude: peak value, phase: radians.
    """
    order: int
    amplitude: float
    phase: float = 0.0
    enabled: bool = True


@dataclass(frozen=True)
class FundamentalPhaseOffsets:
    """Degrees added to the k=1 angle on phases b and c (unbalanced source)."""
    phase_b: float = -120.0
    phase_c: float = 120.0


@dataclass(frozen=True)
class SignalData:
    t: np.ndarray
    ia: np.ndarray
    ib: np.ndarray
    ic: np.ndarray
    in_: np.ndarray

    def __len__(self) -> int:
        return int(self.t.size)


@dataclass(frozen=True)
class Phasor:
    magnitude: float
    angle: float

    @classmethod
    def from_complex(cls, z: complex) -> "Phasor":
        return cls(magnitude=float(math.hypot(z.real, z.imag)), angle=float(math.atan2(z.imag, z.real)))

    @property
    def angle_deg(self) -> float:
        return math.degrees(normalize_phase(self.angle))


@dataclass(frozen=True)
class SequencePhasors:
    direct: Phasor
    inverse: Phasor
    homopolar: Phasor


@dataclass(frozen=True)
class PhasorData:
    ia: Phasor
    ib: Phasor
    ic: Phasor
    in_: Phasor
    sequences: Optional[SequencePhasors] = None


@dataclass(frozen=True)
class PhaseMetrics:
    thd: float
    rms: float
    peak: float


ZERO_METRICS = PhaseMetrics(thd=0.0, rms=0.0, peak=0.0)


@dataclass(frozen=True)
class Metrics:
    ia: PhaseMetrics
    ib: PhaseMetrics
    ic: PhaseMetrics
    in_: PhaseMetrics

    def by_phase(self) -> dict[str, PhaseMetrics]:
        return {"A": self.ia, "B": self.ib, "C": self.ic, "N": self.in_}


def normalize_phase(phase: float) -> float:
    """Wrap an angle (radians) into (-pi, pi] for display."""
    wrapped = math.remainder(float(phase), 2.0 * math.pi)
    if wrapped <= -math.pi:
        wrapped += 2.0 * math.pi
    return wrapped
