"""
FTJ Compact Model
=================
Configuration classes for junction and simulation parameters.

All junction quantities are SI except barrier heights and creep energies,
which are given in eV (numerically equal to volts).
"""

from dataclasses import dataclass, asdict, fields
from typing import Dict, Optional, List
from enum import Enum
import json
import math


class ConfigurationError(ValueError):
    """Fatal parameter error; the device cannot be built from this set."""


class ResistanceState(Enum):
    """Polarization-defined resistance states of the junction."""
    HIGH = "high"
    LOW = "low"


class SweepDirection(Enum):
    """Voltage sweep direction."""
    FORWARD = "forward"
    REVERSE = "reverse"
    DOUBLE = "double"  # 0 -> +V -> -V -> 0 (hysteresis)


# Parameter range annotations: name -> (lower, upper, lower_inclusive)
_OPEN_POSITIVE = (0.0, float("inf"), False)

PARAMETER_RANGES: Dict[str, tuple] = {
    "phi1_high": _OPEN_POSITIVE,
    "phi2_high": _OPEN_POSITIVE,
    "phi1_low": _OPEN_POSITIVE,
    "phi2_low": _OPEN_POSITIVE,
    "mass_high": _OPEN_POSITIVE,
    "mass_low": _OPEN_POSITIVE,
    "tau0_nucleation": _OPEN_POSITIVE,
    "tau0_propagation": _OPEN_POSITIVE,
    "u_nucleation": _OPEN_POSITIVE,
    "u_propagation": _OPEN_POSITIVE,
    "critical_field": _OPEN_POSITIVE,
    "radius": _OPEN_POSITIVE,
    "thickness": _OPEN_POSITIVE,
    "time_step": _OPEN_POSITIVE,
    "initial_fraction": (0.0, 1.0, True),
    "temperature": _OPEN_POSITIVE,
}


@dataclass(frozen=True)
class JunctionParameters:
    """
    Physical parameters of one ferroelectric tunnel junction.

    Barrier heights are given for both polarization states at the near
    (phi1) and far (phi2) electrode interfaces. Defaults describe a
    BaTiO3-like barrier of 5 unit cells.
    """
    # Barrier heights (eV)
    phi1_high: float = 0.9     # HRS, near interface
    phi2_high: float = 0.5     # HRS, far interface
    phi1_low: float = 0.5      # LRS, near interface
    phi2_low: float = 0.3      # LRS, far interface

    # Effective mass coefficients (x m0)
    mass_high: float = 1.0
    mass_low: float = 0.6

    # Switching kinetics
    tau0_nucleation: float = 1e-10    # Nucleation attempt time (s)
    tau0_propagation: float = 1e-10   # Propagation attempt time (s)
    u_nucleation: float = 0.30        # Nucleation creep barrier (eV)
    u_propagation: float = 0.25       # Propagation creep barrier (eV)
    critical_field: float = 5e8       # Creep reference field E0 (V/m)

    # Geometry
    radius: float = 25e-9             # Junction radius (m)
    thickness: float = 2.0e-9         # Barrier thickness (m), 5 unit cells

    # Simulation
    time_step: float = 1e-9           # Max step hint to the host (s)
    initial_fraction: float = 0.9999  # Initial low-resistance fraction
    temperature: float = 300.0        # Kelvin

    def __post_init__(self):
        for name, (lower, upper, inclusive) in PARAMETER_RANGES.items():
            value = getattr(self, name)
            below = value < lower if inclusive else value <= lower
            if below or value > upper or math.isnan(value):
                bracket = "[" if inclusive else "("
                raise ConfigurationError(
                    f"Parameter '{name}'={value} outside {bracket}{lower}, {upper}]"
                )

    def barrier_heights(self, state: ResistanceState) -> tuple:
        """(phi1, phi2) for the given resistance state, in eV."""
        if state is ResistanceState.HIGH:
            return self.phi1_high, self.phi2_high
        return self.phi1_low, self.phi2_low

    def mass_coefficient(self, state: ResistanceState) -> float:
        if state is ResistanceState.HIGH:
            return self.mass_high
        return self.mass_low

    def replace(self, **changes) -> 'JunctionParameters':
        """Return a copy with the given fields changed (validated again)."""
        values = self.to_dict()
        values.update(changes)
        return JunctionParameters.from_dict(values)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> 'JunctionParameters':
        """Build from a dictionary; unknown keys are a configuration error."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown junction parameters: {sorted(unknown)}")
        return cls(**data)

    def save(self, filepath: str):
        """Save parameters to JSON file."""
        with open(filepath, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, filepath: str) -> 'JunctionParameters':
        """Load parameters from a JSON file written by save()."""
        with open(filepath, 'r') as f:
            return cls.from_dict(json.load(f))


@dataclass
class SimulationConfig:
    """
    Stimulus and sampling settings for characterization runs.

    Pulse settings drive the write/read switching experiment, sweep settings
    drive the quasi-static I-V hysteresis loop.
    """
    # Read / write pulses
    V_read: float = 0.1               # Read voltage (V)
    V_write: float = 1.5              # Write amplitude (V)
    pulse_width: float = 1e-6         # Write pulse width (s)
    n_pulses: int = 4                 # Alternating write pulses
    samples_per_pulse: int = 200

    # I-V sweep
    V_max: float = 1.5                # Sweep amplitude (V)
    n_per_segment: int = 100
    sweep_period: float = 1e-3        # Duration of one full sweep (s)
    sweep_direction: SweepDirection = SweepDirection.DOUBLE

    # Parallel execution settings (for parameter sweeps)
    enable_parallel: bool = True
    n_workers: Optional[int] = None   # None = auto-detect

    @property
    def sample_interval(self) -> float:
        """Time between samples inside one write pulse (s)."""
        return self.pulse_width / self.samples_per_pulse

    @property
    def write_sequence(self) -> List[float]:
        """Write pulse amplitudes, alternating polarity starting positive."""
        return [self.V_write if i % 2 == 0 else -self.V_write
                for i in range(self.n_pulses)]


def get_fast_simulation_config() -> SimulationConfig:
    """Coarse sampling for quick checks."""
    return SimulationConfig(
        n_pulses=2,
        samples_per_pulse=50,
        n_per_segment=25,
        enable_parallel=True,
        n_workers=None,
    )


def get_accurate_config() -> SimulationConfig:
    """Fine sampling for final curves."""
    return SimulationConfig(
        n_pulses=6,
        samples_per_pulse=1000,
        n_per_segment=400,
        enable_parallel=True,
        n_workers=None,
    )


# =============================================================================
# PRESETS
# =============================================================================

UNIT_CELL_THICKNESS = 0.4e-9  # m, one perovskite unit cell


def get_baseline_params() -> JunctionParameters:
    """Baseline 5 unit-cell junction."""
    return JunctionParameters()


def get_thickness_params(unit_cells: int) -> JunctionParameters:
    """Baseline junction with the barrier set to the given unit-cell count."""
    return JunctionParameters(thickness=unit_cells * UNIT_CELL_THICKNESS)


def get_params(name: str) -> JunctionParameters:
    """
    Get a named parameter preset.

    Presets:
    - baseline: 5 unit cells (2.0 nm)
    - thin: 3 unit cells (1.2 nm), fast switching and high current
    - thick: 6 unit cells (2.4 nm), large electroresistance
    """
    presets = {
        "baseline": get_baseline_params,
        "thin": lambda: get_thickness_params(3),
        "thick": lambda: get_thickness_params(6),
    }
    if name not in presets:
        raise ConfigurationError(f"Unknown preset: {name}. Available: {list(presets.keys())}")
    return presets[name]()


def load_params_with_overrides(filepath: Optional[str] = None,
                               base: Optional[JunctionParameters] = None) -> JunctionParameters:
    """
    Apply the 'junction' section of a JSON parameter file on top of a base set.

    Missing files are not an error; the base set is returned unchanged.
    """
    params = base or get_baseline_params()
    if filepath is None:
        return params

    try:
        with open(filepath, 'r') as f:
            data = json.load(f)
    except FileNotFoundError:
        return params

    overrides = data.get("junction", {})
    if not overrides:
        return params
    return params.replace(**overrides)
