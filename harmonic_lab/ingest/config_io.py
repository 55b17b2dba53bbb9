"""
JSON configuration exchange.

Shape (keys and order are part of the format):
  {"f0": 50, "kMax": 25,
   "harmonics": [{"k": 1, "amp": 100, "phase": 0, "enabled": true}, ...],
   "mode": "three_phase"}

Import is all-or-nothing: a document that does not parse or does not match
the shape leaves the caller's state untouched.
"""

from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from harmonic_lab.signal.types import Harmonic, Mode
from harmonic_lab.state.engine_state import EngineState
from harmonic_lab.utils.logging import info, warn


class ConfigError(ValueError):
    """Raised when a configuration document is unparsable or malformed."""


class HarmonicEntry(BaseModel):
    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    k: int = Field(ge=1)
    amp: float = Field(ge=0.0)
    phase: float
    enabled: bool


class ConfigFile(BaseModel):
    model_config = ConfigDict(strict=True, allow_inf_nan=False)

    f0: float = Field(gt=0.0)
    kMax: int = Field(ge=1)
    harmonics: list[HarmonicEntry]
    mode: Mode

    @field_validator("harmonics")
    @classmethod
    def _unique_orders(cls, v: list[HarmonicEntry]) -> list[HarmonicEntry]:
        seen: set[int] = set()
        for entry in v:
            if entry.k in seen:
                raise ValueError(f"duplicate harmonic order k={entry.k}")
            seen.add(entry.k)
        return v

    def to_harmonics(self) -> tuple[Harmonic, ...]:
        return tuple(Harmonic(order=e.k, amplitude=e.amp, phase=e.phase, enabled=e.enabled) for e in self.harmonics)


def config_dict(state: EngineState) -> dict[str, Any]:
    return {
        "f0": state.f0,
        "kMax": state.k_max,
        "harmonics": [
            {"k": h.order, "amp": h.amplitude, "phase": h.phase, "enabled": h.enabled}
            for h in state.harmonics
        ],
        "mode": state.mode.value,
    }


def export_config(state: EngineState) -> str:
    return json.dumps(config_dict(state), indent=2)


def parse_config(text: str | bytes) -> ConfigFile:
    try:
        return ConfigFile.model_validate_json(text)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e.error_count()} error(s)\n{e}") from e


def import_config(state: EngineState, text: str | bytes) -> EngineState:
    """
    Returns a new state carrying f0, kMax, harmonics and mode from the
    document. On any error the input state is returned unchanged.
    """
    try:
        cfg = parse_config(text)
    except ConfigError as e:
        warn(f"Config import rejected; keeping current state. {e}")
        return state

    return replace(
        state,
        f0=cfg.f0,
        k_max=cfg.kMax,
        harmonics=cfg.to_harmonics(),
        mode=cfg.mode,
        phasor_rank=min(state.phasor_rank, cfg.kMax),
    )


def load_config_file(path: str | Path, state: EngineState | None = None) -> EngineState:
    """Read a config JSON from disk. Missing files raise, bad content does not."""
    p = Path(path)
    base = state if state is not None else EngineState()
    raw = p.read_bytes()
    info(f"Loading config: {p}")
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        warn(f"Config import rejected; keeping current state. {p} is not UTF-8 ({e.reason})")
        return base
    return import_config(base, text)


def save_config_file(state: EngineState, path: str | Path) -> Path:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(export_config(state) + "\n", encoding="utf-8")
    info(f"Wrote config: {p}")
    return p
