from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
import matplotlib.pyplot as plt

from harmonic_lab.signal.sequence import filter_spectrum, sequence_type
from harmonic_lab.signal.types import Harmonic, PhasorData, SequenceFilter, SequenceType, SignalData

PHASE_COLORS = {"A": "#ef4444", "B": "#3b82f6", "C": "#22c55e", "N": "#f97316"}

SEQUENCE_COLORS = {
    SequenceType.TRIPLEN: "#f59e0b",
    SequenceType.POSITIVE: "#3b82f6",
    SequenceType.NEGATIVE: "#22c55e",
    SequenceType.NONE: "#6b7280",
}


def _save(fig, out_path: str) -> None:
    plt.tight_layout()
    fig.savefig(out_path, bbox_inches="tight")
    plt.close(fig)


def plot_waveform(signal: SignalData, out_path: str, title: str):
    """
    Phase currents (and neutral when present) over the synthesis window.
    X-axis in milliseconds.
    """
    out_path = str(out_path)
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)

    fig = plt.figure(figsize=(6.6, 2.6), dpi=160)
    ax = fig.add_subplot(111)

    x = np.asarray(signal.t) * 1000.0
    series = {"A": signal.ia, "B": signal.ib, "C": signal.ic, "N": signal.in_}
    for name, y in series.items():
        if len(y) == 0:
            continue
        style = "--" if name == "N" else "-"
        ax.plot(x, y, style, linewidth=1.4, color=PHASE_COLORS[name], label=f"i{name.lower()}")

    ax.set_title(title, fontsize=11, pad=10)
    ax.set_xlabel("Time (ms)", fontsize=9)
    ax.set_ylabel("Current (A)", fontsize=9)
    ax.tick_params(axis="both", labelsize=8)
    ax.grid(True, alpha=0.25)
    ax.legend(fontsize=7, loc="upper right")

    _save(fig, out_path)


def plot_harmonic_spectrum(
    harmonics: Sequence[Harmonic],
    out_path: str,
    title: str,
    sequence_filter: SequenceFilter = SequenceFilter.ALL,
):
    """
    Bar chart of enabled lines, coloured by spectrum class.
    """
    out_path = str(out_path)
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)

    shown = filter_spectrum(harmonics, sequence_filter)

    fig = plt.figure(figsize=(6.6, 2.6), dpi=160)
    ax = fig.add_subplot(111)

    if not shown:
        ax.set_title(title, fontsize=11)
        ax.text(0.5, 0.5, "No harmonics for this filter", ha="center", va="center", fontsize=10)
        ax.set_axis_off()
        _save(fig, out_path)
        return

    ax.bar(
        [str(h.order) for h in shown],
        [h.amplitude for h in shown],
        color=[SEQUENCE_COLORS[sequence_type(h.order)] for h in shown],
    )
    ax.set_title(title, fontsize=11, pad=10)
    ax.set_xlabel("Harmonic order", fontsize=9)
    ax.set_ylabel("Amplitude (A)", fontsize=9)
    ax.tick_params(axis="both", labelsize=8)
    ax.grid(True, axis="y", alpha=0.25)

    _save(fig, out_path)


def plot_phasor_diagram(phasors: PhasorData, out_path: str, title: str):
    out_path = str(out_path)
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)

    fig = plt.figure(figsize=(3.6, 3.6), dpi=160)
    ax = fig.add_subplot(111)

    arrows = {"A": phasors.ia, "B": phasors.ib, "C": phasors.ic, "N": phasors.in_}
    reach = max([p.magnitude for p in arrows.values()] + [1e-9])

    for name, p in arrows.items():
        x = p.magnitude * np.cos(p.angle)
        y = p.magnitude * np.sin(p.angle)
        ax.annotate(
            "",
            xy=(x, y),
            xytext=(0.0, 0.0),
            arrowprops=dict(arrowstyle="->", color=PHASE_COLORS[name], linewidth=1.6),
        )
        ax.text(x * 1.08, y * 1.08, f"I{name.lower()}", fontsize=8, color=PHASE_COLORS[name])

    lim = reach * 1.25
    ax.set_xlim(-lim, lim)
    ax.set_ylim(-lim, lim)
    ax.set_aspect("equal")
    ax.axhline(0.0, color="#9ca3af", linewidth=0.6)
    ax.axvline(0.0, color="#9ca3af", linewidth=0.6)
    ax.set_title(title, fontsize=10, pad=8)
    ax.tick_params(axis="both", labelsize=7)
    ax.grid(True, alpha=0.25)

    _save(fig, out_path)
