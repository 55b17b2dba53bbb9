from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from harmonic_lab.ingest.config_io import load_config_file, save_config_file, export_config
from harmonic_lab.report.plots import plot_harmonic_spectrum, plot_phasor_diagram, plot_waveform
from harmonic_lab.report.tables import metrics_frame, phasor_frame, signal_frame
from harmonic_lab.signal.metrics import compute_metrics, crest_factor
from harmonic_lab.signal.phasors import compute_phasors
from harmonic_lab.signal.synth import synthesize
from harmonic_lab.signal.sequence import filter_spectrum
from harmonic_lab.signal.types import Metrics, Mode, PhasorData, PhasorSelection, SequenceFilter, SignalData
from harmonic_lab.state.engine_state import (
    EngineState,
    apply_preset,
    default_state,
    set_f0,
    set_k_max,
    set_mode,
    set_phasor_rank,
    set_phasor_selection,
    set_sequence_filter,
)
from harmonic_lab.state.presets import Preset
from harmonic_lab.utils.logging import info, set_quiet, warn

app = typer.Typer(add_completion=False)


@dataclass(frozen=True)
class Frame:
    signal: SignalData
    metrics: Metrics
    phasors: Optional[PhasorData]


def run_frame(state: EngineState, time_offset: float = 0.0) -> Frame:
    """
    One tick of the engine: waveform, metrics and (three-phase only) phasors
    at the given time offset. The host advances time_offset between calls.
    """
    signal = synthesize(state.harmonics, state.f0, state.mode, time_offset, state.fundamental_phases)
    metrics = compute_metrics(state.harmonics, signal, state.mode)

    phasors = None
    if state.mode is Mode.THREE_PHASE:
        phasors = compute_phasors(
            state.harmonics,
            state.phasor_selection,
            state.phasor_rank,
            time_offset,
            state.f0,
            state.fundamental_phases,
        )
    return Frame(signal=signal, metrics=metrics, phasors=phasors)


def _build_state(
    config: Optional[str],
    preset: Optional[Preset],
    mode: Optional[Mode],
    f0: Optional[float],
    k_max: Optional[int],
) -> EngineState:
    state = default_state()
    if config:
        state = load_config_file(config, state)
    if k_max is not None:
        state = set_k_max(state, k_max)
    if preset is not None:
        state = apply_preset(state, preset)
    if mode is not None:
        state = set_mode(state, mode)
    if f0 is not None:
        state = set_f0(state, f0)
    return state


def summary_lines(frame: Frame) -> list[str]:
    waves = {"A": frame.signal.ia, "B": frame.signal.ib, "C": frame.signal.ic, "N": frame.signal.in_}
    lines: list[str] = []
    for phase, m in frame.metrics.by_phase().items():
        if len(waves[phase]) == 0:
            continue
        lines.append(
            f"Phase {phase}: THD {m.thd:.1f}% | RMS {m.rms:.2f} A | "
            f"Peak {m.peak:.2f} A | Crest {crest_factor(waves[phase]):.2f}"
        )

    if frame.phasors is not None:
        p = frame.phasors
        for name, ph in (("A", p.ia), ("B", p.ib), ("C", p.ic), ("N", p.in_)):
            lines.append(f"Phasor I{name.lower()}: {ph.magnitude:.2f} A ∠ {ph.angle_deg:.1f}°")
        if p.sequences is not None:
            s = p.sequences
            lines.append(
                f"Sequences: direct {s.direct.magnitude:.2f} | "
                f"inverse {s.inverse.magnitude:.2f} | homopolar {s.homopolar.magnitude:.2f}"
            )
    return lines


# -------------------------
# Typer CLI
# -------------------------
@app.command()
def run(
    config: Optional[str] = typer.Option(None, help="Config JSON (f0, kMax, harmonics, mode)"),
    preset: Optional[Preset] = typer.Option(None, help="Load a harmonic preset"),
    mode: Optional[Mode] = typer.Option(None, help="single|three_phase"),
    f0: Optional[float] = typer.Option(None, help="Fundamental frequency (Hz)"),
    k_max: Optional[int] = typer.Option(None, help="Number of harmonic orders"),
    time_offset: float = typer.Option(0.0, help="Time offset (s)"),
    phasor_mode: PhasorSelection = typer.Option(PhasorSelection.FUNDAMENTAL, help="Phasor selection"),
    rank: int = typer.Option(1, help="Order used by --phasor-mode rank"),
    sequence_filter: SequenceFilter = typer.Option(SequenceFilter.ALL, help="Spectrum filter: all|triplen|positive|negative"),
    out_dir: str = typer.Option("data/outputs", help="Output folder for plots / CSV"),
    plots: bool = typer.Option(False, "--plots/--no-plots", help="Write waveform, spectrum and phasor PNGs"),
    csv: bool = typer.Option(False, "--csv/--no-csv", help="Write waveform and metrics CSV"),
    quiet: bool = typer.Option(False, help="Only warnings and errors"),
):
    set_quiet(quiet)

    state = _build_state(config, preset, mode, f0, k_max)
    state = set_phasor_selection(state, phasor_mode)
    state = set_phasor_rank(state, rank)
    state = set_sequence_filter(state, sequence_filter)

    frame = run_frame(state, time_offset)

    info(f"f0={state.f0:g} Hz | kMax={state.k_max} | mode={state.mode.value} | t={time_offset:g} s")
    for line in summary_lines(frame):
        typer.echo(line)

    shown = filter_spectrum(state.harmonics, state.sequence_filter)
    orders = ", ".join(str(h.order) for h in shown) or "-"
    typer.echo(f"Spectrum ({state.sequence_filter.value}): {orders}")

    if not state.enabled_harmonics:
        warn("No enabled harmonics; signal is zero.")

    if not (plots or csv):
        return

    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)

    if csv:
        signal_frame(frame.signal).to_csv(out / "waveform.csv", index=False)
        metrics_frame(frame.metrics, frame.signal).to_csv(out / "metrics.csv", index=False)
        if frame.phasors is not None:
            phasor_frame(frame.phasors).to_csv(out / "phasors.csv", index=False)
        info(f"CSV written to {out}")

    if plots:
        plot_waveform(frame.signal, str(out / "waveform.png"), title="Waveform")
        plot_harmonic_spectrum(
            state.harmonics, str(out / "spectrum.png"), title="Harmonic Spectrum",
            sequence_filter=state.sequence_filter,
        )
        if frame.phasors is not None:
            plot_phasor_diagram(frame.phasors, str(out / "phasors.png"), title=f"Phasors ({state.phasor_selection.value})")
        info(f"Plots written to {out}")


@app.command()
def export(
    out: str = typer.Argument(..., help="Output JSON path, or '-' for stdout"),
    preset: Optional[Preset] = typer.Option(None, help="Harmonic preset"),
    mode: Optional[Mode] = typer.Option(None, help="single|three_phase"),
    f0: Optional[float] = typer.Option(None, help="Fundamental frequency (Hz)"),
    k_max: Optional[int] = typer.Option(None, help="Number of harmonic orders"),
):
    state = _build_state(None, preset, mode, f0, k_max)
    if out == "-":
        typer.echo(export_config(state))
        return
    save_config_file(state, out)


@app.command()
def animate(
    frames: int = typer.Option(10, help="Number of ticks"),
    dt: float = typer.Option(0.001, help="Time offset step per tick (s)"),
    config: Optional[str] = typer.Option(None, help="Config JSON"),
    preset: Optional[Preset] = typer.Option(None, help="Harmonic preset"),
    phasor_mode: PhasorSelection = typer.Option(PhasorSelection.RESULTANT, help="Phasor selection"),
):
    """Advance the time offset tick by tick and print phase-a readings."""
    state = _build_state(config, preset, Mode.THREE_PHASE, None, None)
    state = set_phasor_selection(state, phasor_mode)

    for i in range(max(0, frames)):
        t_off = i * dt
        frame = run_frame(state, t_off)
        p = frame.phasors.ia
        typer.echo(
            f"{i:>4} t={t_off:.4f}s  ia[0]={frame.signal.ia[0]:8.2f}  "
            f"|Ia|={p.magnitude:7.2f}  ∠{p.angle_deg:7.1f}°"
        )


if __name__ == "__main__":
    app()
