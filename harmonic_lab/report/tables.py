from __future__ import annotations

import numpy as np
import pandas as pd

from harmonic_lab.signal.metrics import crest_factor
from harmonic_lab.signal.types import Metrics, PhasorData, SignalData


def signal_frame(signal: SignalData) -> pd.DataFrame:
    """
    Columns: t, ia [, ib, ic, in]. Single-phase data only carries t and ia.
    """
    cols: dict[str, np.ndarray] = {"t": np.asarray(signal.t), "ia": np.asarray(signal.ia)}
    if len(signal.ib):
        cols["ib"] = np.asarray(signal.ib)
        cols["ic"] = np.asarray(signal.ic)
        cols["in"] = np.asarray(signal.in_)
    return pd.DataFrame(cols)


def metrics_frame(metrics: Metrics, signal: SignalData | None = None) -> pd.DataFrame:
    """One row per phase: thd_percent, rms, peak (+ crest when the signal is given)."""
    rows = []
    waves = {}
    if signal is not None:
        waves = {"A": signal.ia, "B": signal.ib, "C": signal.ic, "N": signal.in_}

    for phase, m in metrics.by_phase().items():
        row = {"phase": phase, "thd_percent": m.thd, "rms": m.rms, "peak": m.peak}
        if signal is not None:
            row["crest"] = crest_factor(waves[phase])
        rows.append(row)
    return pd.DataFrame(rows)


def phasor_frame(phasors: PhasorData) -> pd.DataFrame:
    rows = [
        {"name": name, "magnitude": p.magnitude, "angle_deg": p.angle_deg}
        for name, p in (("A", phasors.ia), ("B", phasors.ib), ("C", phasors.ic), ("N", phasors.in_))
    ]
    if phasors.sequences is not None:
        s = phasors.sequences
        for name, p in (("direct", s.direct), ("inverse", s.inverse), ("homopolar", s.homopolar)):
            rows.append({"name": name, "magnitude": p.magnitude, "angle_deg": p.angle_deg})
    return pd.DataFrame(rows)
