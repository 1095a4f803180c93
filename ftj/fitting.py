"""
FTJ Compact Model
=================
Fowler-Nordheim fitting-factor database and barrier-thickness resolution.

The fitting factors are empirical and exist only for barriers of 3 to 6
unit cells. The exponent factors (f2) are always used; the prefactors (f1)
are the raw fitted values, which devices replace by the values that make
the FN branch meet direct tunneling at each threshold (see
DerivedCoefficients.from_parameters).
"""

from dataclasses import dataclass
from typing import Dict, List

from .config import ConfigurationError, ResistanceState, UNIT_CELL_THICKNESS


SUPPORTED_UNIT_CELLS = (3, 4, 5, 6)

# Allowed deviation of thickness / unit cell from an integer
_UNIT_CELL_TOLERANCE = 1e-6


@dataclass(frozen=True)
class FowlerNordheimFactors:
    """
    Fitting quadruple for one resistance state.

    f1 scales the FN prefactor, f2 scales the WKB exponent; *_pos applies
    to forward bias, *_neg to reverse bias.
    """
    f1_pos: float
    f2_pos: float
    f1_neg: float
    f2_neg: float

    def pair(self, positive: bool) -> tuple:
        """(f1, f2) for the requested bias polarity."""
        if positive:
            return self.f1_pos, self.f2_pos
        return self.f1_neg, self.f2_neg


# =============================================================================
# FITTING TABLE: unit cells -> state -> factors
# =============================================================================

FN_FITTING_DB: Dict[int, Dict[ResistanceState, FowlerNordheimFactors]] = {
    3: {
        ResistanceState.HIGH: FowlerNordheimFactors(0.82, 0.46, 0.74, 0.52),
        ResistanceState.LOW: FowlerNordheimFactors(1.12, 0.41, 0.95, 0.47),
    },
    4: {
        ResistanceState.HIGH: FowlerNordheimFactors(1.05, 0.48, 0.88, 0.55),
        ResistanceState.LOW: FowlerNordheimFactors(1.31, 0.43, 1.08, 0.49),
    },
    5: {
        ResistanceState.HIGH: FowlerNordheimFactors(1.30, 0.50, 1.02, 0.58),
        ResistanceState.LOW: FowlerNordheimFactors(1.54, 0.45, 1.21, 0.51),
    },
    6: {
        ResistanceState.HIGH: FowlerNordheimFactors(1.62, 0.53, 1.19, 0.61),
        ResistanceState.LOW: FowlerNordheimFactors(1.83, 0.47, 1.37, 0.54),
    },
}


# =============================================================================
# RESOLUTION
# =============================================================================

def resolve_unit_cells(thickness: float) -> int:
    """
    Discretize a barrier thickness into a supported unit-cell count.

    Args:
        thickness: Barrier thickness (m)

    Returns:
        Unit-cell count in SUPPORTED_UNIT_CELLS

    Raises:
        ConfigurationError: thickness is not a whole number of 0.4 nm cells
            or has no calibrated fitting table
    """
    ratio = thickness / UNIT_CELL_THICKNESS
    n_cells = int(round(ratio))

    if abs(ratio - n_cells) > _UNIT_CELL_TOLERANCE:
        raise ConfigurationError(
            f"Barrier thickness {thickness:.4g} m is not a whole number of "
            f"{UNIT_CELL_THICKNESS:.1e} m unit cells ({ratio:.4f})"
        )
    if n_cells not in SUPPORTED_UNIT_CELLS:
        raise ConfigurationError(
            f"Unsupported barrier of {n_cells} unit cells. "
            f"Available: {list(SUPPORTED_UNIT_CELLS)}"
        )
    return n_cells


def get_fitting_factors(unit_cells: int, state: ResistanceState) -> FowlerNordheimFactors:
    """Get the FN fitting quadruple for a unit-cell count and state."""
    if unit_cells not in FN_FITTING_DB:
        raise ConfigurationError(
            f"No fitting table for {unit_cells} unit cells. "
            f"Available: {list(FN_FITTING_DB.keys())}"
        )
    return FN_FITTING_DB[unit_cells][state]


def list_supported_thicknesses() -> List[float]:
    """Supported barrier thicknesses in meters."""
    return [n * UNIT_CELL_THICKNESS for n in SUPPORTED_UNIT_CELLS]
