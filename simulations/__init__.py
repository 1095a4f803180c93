"""
FTJ Compact Model - Simulations Package
=======================================

Runners for the characterization phases:
- Phase 1: I-V hysteresis sweep
- Phase 2: Write/read pulse switching
- Phase 3: Parameter sweeps (barrier thickness, write amplitude)
"""

from .run_iv_sweep import run_iv_characterization
from .run_pulse_switching import run_pulse_characterization
from .run_sweeps import (
    run_all_sweeps,
    run_thickness_sweep,
    run_amplitude_sweep,
)

__all__ = [
    "run_iv_characterization",
    "run_pulse_characterization",
    "run_all_sweeps",
    "run_thickness_sweep",
    "run_amplitude_sweep",
]
