from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import pytest

from harmonic_lab.signal.types import Harmonic


@pytest.fixture
def fundamental() -> Harmonic:
    return Harmonic(order=1, amplitude=100.0, phase=0.0, enabled=True)


@pytest.fixture
def fundamental_and_third() -> list[Harmonic]:
    return [
        Harmonic(order=1, amplitude=100.0, phase=0.0, enabled=True),
        Harmonic(order=2, amplitude=0.0, phase=0.0, enabled=False),
        Harmonic(order=3, amplitude=60.0, phase=0.0, enabled=True),
    ]
