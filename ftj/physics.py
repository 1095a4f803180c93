"""
FTJ Compact Model
=================
Tunneling physics: derived coefficients, direct tunneling (Gruverman),
Fowler-Nordheim tunneling and regime selection.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Optional, Tuple

import numpy as np
import pandas as pd

from .config import JunctionParameters, ResistanceState
from .fitting import FowlerNordheimFactors, resolve_unit_cells, get_fitting_factors

logger = logging.getLogger(__name__)


# =============================================================================
# PHYSICAL CONSTANTS
# =============================================================================

Q_E = 1.602176634e-19     # Elementary charge (C)
K_B = 1.380649e-23        # Boltzmann constant (J/K)
HBAR = 1.054571817e-34    # Reduced Planck constant (J*s)
M0 = 9.1093837015e-31     # Free electron mass (kg)

# Crossover guard: voltages this close to phi2 - phi1 are nudged
CROSSOVER_TOLERANCE = 1e-6   # V
CROSSOVER_NUDGE = 1e-4       # V

# Largest exponent passed to exp/sinh; keeps results finite
MAX_EXPONENT = 700.0


class TunnelingRegime(Enum):
    """Conduction regime of one resistance state."""
    DIRECT = "direct"
    FN_FORWARD = "fn_forward"
    FN_REVERSE = "fn_reverse"


# =============================================================================
# COEFFICIENT BUILDER
# =============================================================================

@dataclass(frozen=True)
class StateCoefficients:
    """State-dependent coefficients for one resistance state."""
    phi1: float                  # Near-interface barrier (eV)
    phi2: float                  # Far-interface barrier (eV)
    mass: float                  # Effective mass (kg)
    gruverman_prefactor: float   # -4 m e^3 / (9 pi^2 hbar^3)
    fn: FowlerNordheimFactors

    @property
    def threshold_pos(self) -> float:
        """Forward FN onset (V)."""
        return self.phi2

    @property
    def threshold_neg(self) -> float:
        """Reverse FN onset (V)."""
        return -self.phi1

    @property
    def crossover(self) -> float:
        """Voltage where both barriers are equal and the DT formula is 0/0."""
        return self.phi2 - self.phi1


@dataclass(frozen=True)
class DerivedCoefficients:
    """
    State-independent coefficients derived once from JunctionParameters.

    Holds the geometry, the per-state tunneling coefficients and the creep
    voltages of the switching kinetics (t_B U e E0 / (kB T), in volts).
    """
    area: float
    thickness: float
    unit_cells: int
    high: StateCoefficients
    low: StateCoefficients

    tau0_nucleation: float
    tau0_propagation: float
    nucleation_creep: float
    propagation_creep: float

    @classmethod
    def from_parameters(cls, params: JunctionParameters,
                        fitting: Optional[Dict[ResistanceState, FowlerNordheimFactors]] = None,
                        continuous: bool = True) -> 'DerivedCoefficients':
        """
        Build coefficients from a parameter set.

        Tabulated FN exponent factors (f2) are always used. With
        ``continuous`` the prefactors (f1) are solved so each state's FN
        branch meets direct tunneling at both thresholds; otherwise the
        tabulated f1 values are used as they are.

        Args:
            params: Junction parameters
            fitting: Optional per-state override of the FN factors, used
                verbatim for the states it names
            continuous: Solve f1 for value continuity at the thresholds

        Raises:
            ConfigurationError: unsupported barrier thickness
        """
        unit_cells = resolve_unit_cells(params.thickness)
        area = np.pi * params.radius**2

        states = {}
        for state in ResistanceState:
            phi1, phi2 = params.barrier_heights(state)
            mass = params.mass_coefficient(state) * M0
            overridden = fitting is not None and state in fitting
            coeff = StateCoefficients(
                phi1=phi1,
                phi2=phi2,
                mass=mass,
                gruverman_prefactor=-4 * mass * Q_E**3 / (9 * np.pi**2 * HBAR**3),
                fn=fitting[state] if overridden else get_fitting_factors(unit_cells, state),
            )
            if continuous and not overridden:
                coeff = replace(coeff, fn=continuous_fn_factors(coeff, area, params.thickness))
                logger.debug("%s-state FN prefactors for continuity: %.4g (+), %.4g (-)",
                             state.value, coeff.fn.f1_pos, coeff.fn.f1_neg)
            states[state] = coeff

        thermal = K_B * params.temperature
        return cls(
            area=area,
            thickness=params.thickness,
            unit_cells=unit_cells,
            high=states[ResistanceState.HIGH],
            low=states[ResistanceState.LOW],
            tau0_nucleation=params.tau0_nucleation,
            tau0_propagation=params.tau0_propagation,
            nucleation_creep=params.thickness * params.u_nucleation * Q_E * params.critical_field / thermal,
            propagation_creep=params.thickness * params.u_propagation * Q_E * params.critical_field / thermal,
        )

    def state(self, state: ResistanceState) -> StateCoefficients:
        return self.high if state is ResistanceState.HIGH else self.low


# =============================================================================
# CURRENT FORMULAS
# =============================================================================

def _wkb_coefficient(mass: float, thickness: float) -> float:
    """4 t_B sqrt(2 m e) / (3 hbar)."""
    return 4 * thickness * np.sqrt(2 * mass * Q_E) / (3 * HBAR)


def direct_tunneling_current(vb: float, coeff: StateCoefficients,
                             area: float, thickness: float) -> float:
    """
    Direct tunneling through a trapezoidal barrier (Gruverman et al. 2009).

    Valid for threshold_neg < vb < threshold_pos and vb away from the
    crossover voltage.

    Args:
        vb: Terminal voltage (V)
        coeff: Coefficients of the resistance state
        area: Junction area (m^2)
        thickness: Barrier thickness (m)

    Returns:
        Current (A)
    """
    phi_near = coeff.phi1 + vb / 2
    phi_far = coeff.phi2 - vb / 2
    alpha = _wkb_coefficient(coeff.mass, thickness) / (coeff.phi1 + vb - coeff.phi2)
    d_sqrt = np.sqrt(phi_far) - np.sqrt(phi_near)

    exponent = np.clip(alpha * (phi_far**1.5 - phi_near**1.5), -MAX_EXPONENT, MAX_EXPONENT)
    sinh_arg = np.clip(0.75 * alpha * vb * d_sqrt, -MAX_EXPONENT, MAX_EXPONENT)

    current = (area * coeff.gruverman_prefactor * np.exp(exponent) * np.sinh(sinh_arg)
               / (alpha**2 * d_sqrt**2))
    return float(current)


def fowler_nordheim_current(vb: float, coeff: StateCoefficients,
                            area: float, thickness: float) -> float:
    """
    Fowler-Nordheim tunneling through a triangular barrier.

    Forward bias injects over phi1 with the positive fitting pair; reverse
    bias mirrors the formula over phi2 with the negative pair.

    Returns:
        Current (A), signed like vb
    """
    positive = vb > 0
    f1, f2 = coeff.fn.pair(positive)
    phi = coeff.phi1 if positive else coeff.phi2

    prefactor = (f1 * area * Q_E**2 * M0 * vb**2
                 / (16 * np.pi**2 * HBAR * coeff.mass * phi * thickness**2))
    exponent = -f2 * _wkb_coefficient(coeff.mass, thickness) * phi**1.5 / abs(vb)
    current = prefactor * np.exp(max(exponent, -MAX_EXPONENT))

    return float(current) if positive else -float(current)


def select_regime(vb: float, coeff: StateCoefficients) -> TunnelingRegime:
    """Pick the conduction regime of a state at voltage vb."""
    if vb >= coeff.threshold_pos:
        return TunnelingRegime.FN_FORWARD
    if vb <= coeff.threshold_neg:
        return TunnelingRegime.FN_REVERSE
    return TunnelingRegime.DIRECT


# =============================================================================
# TUNNELING CURRENT MODEL
# =============================================================================

class TunnelingCurrentModel:
    """
    Currents of the pure high- and low-resistance states.

    Stateless apart from the frozen coefficients; every call is a pure
    function of the present terminal voltage.
    """

    def __init__(self, coefficients: DerivedCoefficients):
        self.coefficients = coefficients

    def guard_voltage(self, vb: float) -> float:
        """Nudge vb off either state's crossover singularity."""
        for coeff in (self.coefficients.high, self.coefficients.low):
            if abs(vb - coeff.crossover) < CROSSOVER_TOLERANCE:
                logger.debug("Voltage %.9g at crossover %.6g, nudged by %g V",
                             vb, coeff.crossover, CROSSOVER_NUDGE)
                return vb + CROSSOVER_NUDGE
        return vb

    def state_current(self, vb: float, state: ResistanceState) -> float:
        """Current of one pure state at an already guarded voltage."""
        coeff = self.coefficients.state(state)
        area = self.coefficients.area
        thickness = self.coefficients.thickness

        regime = select_regime(vb, coeff)
        if regime is TunnelingRegime.DIRECT:
            return direct_tunneling_current(vb, coeff, area, thickness)
        return fowler_nordheim_current(vb, coeff, area, thickness)

    def currents(self, vb: float) -> Tuple[float, float]:
        """
        Hypothetical currents of the two pure states.

        Args:
            vb: Terminal voltage (V)

        Returns:
            (high_current, low_current) in A
        """
        vb = self.guard_voltage(vb)
        return (self.state_current(vb, ResistanceState.HIGH),
                self.state_current(vb, ResistanceState.LOW))

    def iv_curve(self, voltages: np.ndarray) -> pd.DataFrame:
        """
        Static I-V of both pure states.

        Returns:
            DataFrame with V, I_high, I_low, regime_high, regime_low columns
        """
        rows = []
        for vb in np.asarray(voltages, dtype=float):
            guarded = self.guard_voltage(float(vb))
            i_high, i_low = self.currents(float(vb))
            rows.append({
                "V": float(vb),
                "I_high": i_high,
                "I_low": i_low,
                "regime_high": select_regime(guarded, self.coefficients.high).value,
                "regime_low": select_regime(guarded, self.coefficients.low).value,
            })
        return pd.DataFrame(rows)


# =============================================================================
# CALIBRATION
# =============================================================================

def continuous_fn_factors(coeff: StateCoefficients, area: float,
                          thickness: float) -> FowlerNordheimFactors:
    """
    Solve the FN prefactors of one state for value continuity.

    Keeps the exponent factors (f2) of ``coeff.fn`` and picks f1 per
    polarity so the FN current equals the direct-tunneling current at
    threshold_pos and threshold_neg.
    """
    unit = replace(coeff, fn=FowlerNordheimFactors(1.0, coeff.fn.f2_pos,
                                                   1.0, coeff.fn.f2_neg))
    f1 = {}
    for threshold in (coeff.threshold_pos, coeff.threshold_neg):
        dt = direct_tunneling_current(threshold, coeff, area, thickness)
        fn = fowler_nordheim_current(threshold, unit, area, thickness)
        f1[threshold > 0] = dt / fn

    return FowlerNordheimFactors(
        f1_pos=f1[True],
        f2_pos=coeff.fn.f2_pos,
        f1_neg=f1[False],
        f2_neg=coeff.fn.f2_neg,
    )


def calibrate_fn_factors(params: JunctionParameters
                         ) -> Dict[ResistanceState, FowlerNordheimFactors]:
    """
    FN factors of both states re-fitted for value continuity.

    Starts from the raw table so the result depends only on the tabulated
    f2 values and the barrier parameters.

    Returns:
        Per-state fitting factors, usable as the ``fitting`` override of
        DerivedCoefficients.from_parameters
    """
    base = DerivedCoefficients.from_parameters(params, continuous=False)
    return {state: continuous_fn_factors(base.state(state), base.area, base.thickness)
            for state in ResistanceState}
