from pydantic import BaseModel

from harmonic_lab.signal.types import Mode


class Settings(BaseModel):
    default_f0: float = 50.0
    default_k_max: int = 25
    default_mode: Mode = Mode.THREE_PHASE

    # Amplitude given to k=1 in a fresh harmonic set
    fundamental_amplitude: float = 100.0

    # Synthesis window: always a whole number of fundamental periods
    periods: int = 3
    samples_per_period: int = 500

    # Ranges the state layer clamps user edits to (engine does not re-check)
    f0_range: tuple[float, float] = (1.0, 1000.0)
    k_max_range: tuple[int, int] = (1, 49)
    amplitude_range: tuple[float, float] = (0.0, 200.0)
    fundamental_phase_range: tuple[float, float] = (-180.0, 180.0)

    # Phase b / phase c of the fundamental, degrees
    default_fundamental_phases: tuple[float, float] = (-120.0, 120.0)

settings = Settings()
