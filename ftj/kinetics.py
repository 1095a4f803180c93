"""
FTJ Compact Model
=================
Polarization switching kinetics: domain nucleation followed by domain-wall
propagation.

Positive bias grows the high-resistance domain, negative bias grows the
low-resistance domain. A fully switched state must nucleate before the
opposite domain can propagate. Nucleation accumulates progress against a
creep time (Merz-type law); propagation follows the KAI/Avrami curve
f(t) = 1 - exp(-(t / tau)^2), restarted at the equivalent time of the
present fraction so successive steps compose into one continuous curve.

Both fractions are kept inside [FRACTION_FLOOR, 1 - FRACTION_FLOOR], which
keeps ln(1 / (1 - f)) finite.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

import numpy as np

from .physics import DerivedCoefficients, MAX_EXPONENT

logger = logging.getLogger(__name__)


FRACTION_FLOOR = 1e-4


class SwitchDirection(Enum):
    """Direction of a polarization switch, named by the growing state."""
    TOWARD_HIGH = "toward_high"
    TOWARD_LOW = "toward_low"

    @property
    def opposite(self) -> 'SwitchDirection':
        if self is SwitchDirection.TOWARD_HIGH:
            return SwitchDirection.TOWARD_LOW
        return SwitchDirection.TOWARD_HIGH

    @classmethod
    def from_voltage(cls, vb: float) -> Optional['SwitchDirection']:
        """Direction driven by a bias; None at exactly zero bias."""
        if vb > 0:
            return cls.TOWARD_HIGH
        if vb < 0:
            return cls.TOWARD_LOW
        return None


class KineticPhase(Enum):
    """Tag of the transition taken by the last state advance."""
    STABLE = "stable"
    NUCLEATING_TOWARD_HIGH = "nucleating_toward_high"
    NUCLEATING_TOWARD_LOW = "nucleating_toward_low"
    PROPAGATING_TOWARD_HIGH = "propagating_toward_high"
    PROPAGATING_TOWARD_LOW = "propagating_toward_low"

    @classmethod
    def nucleating(cls, direction: SwitchDirection) -> 'KineticPhase':
        if direction is SwitchDirection.TOWARD_HIGH:
            return cls.NUCLEATING_TOWARD_HIGH
        return cls.NUCLEATING_TOWARD_LOW

    @classmethod
    def propagating(cls, direction: SwitchDirection) -> 'KineticPhase':
        if direction is SwitchDirection.TOWARD_HIGH:
            return cls.PROPAGATING_TOWARD_HIGH
        return cls.PROPAGATING_TOWARD_LOW


@dataclass(frozen=True)
class DomainState:
    """
    Polarization state of one device.

    nucleation_required names the direction whose domain has vanished
    (its fraction sits at the floor) and must nucleate before growing.
    It is the only field transitions dispatch on. It outlives zero-bias
    steps, so a fully switched device that rests at STABLE still
    nucleates when driven back.

    phase only tags the transition taken by the last advance; it is
    reported to callers and never read by advance.
    """
    high_fraction: float
    low_fraction: float
    nucleation_required: Optional[SwitchDirection] = None
    progress_toward_high: float = 0.0
    progress_toward_low: float = 0.0
    last_time: float = 0.0
    phase: KineticPhase = KineticPhase.STABLE

    @classmethod
    def initial(cls, low_fraction: float, time: float = 0.0) -> 'DomainState':
        """
        Create the starting state from the initial low-resistance fraction.

        The fraction is clamped to the floors; a clamped-to-floor domain
        starts with its nucleation pending.
        """
        low = min(max(low_fraction, FRACTION_FLOOR), 1.0 - FRACTION_FLOOR)
        high = 1.0 - low

        required = None
        if low <= FRACTION_FLOOR:
            required = SwitchDirection.TOWARD_LOW
        elif high <= FRACTION_FLOOR + 1e-15:
            required = SwitchDirection.TOWARD_HIGH
            high, low = FRACTION_FLOOR, 1.0 - FRACTION_FLOOR

        return cls(high_fraction=high, low_fraction=low,
                   nucleation_required=required, last_time=time)

    def fraction(self, direction: SwitchDirection) -> float:
        """Fraction of the domain that grows in the given direction."""
        if direction is SwitchDirection.TOWARD_HIGH:
            return self.high_fraction
        return self.low_fraction

    def progress(self, direction: SwitchDirection) -> float:
        if direction is SwitchDirection.TOWARD_HIGH:
            return self.progress_toward_high
        return self.progress_toward_low


# =============================================================================
# RATE LAWS
# =============================================================================

@dataclass(frozen=True)
class SwitchingRates:
    """Voltage-dependent creep times of nucleation and propagation."""
    tau0_nucleation: float
    tau0_propagation: float
    nucleation_creep: float    # V
    propagation_creep: float   # V

    @classmethod
    def from_coefficients(cls, coeffs: DerivedCoefficients) -> 'SwitchingRates':
        return cls(
            tau0_nucleation=coeffs.tau0_nucleation,
            tau0_propagation=coeffs.tau0_propagation,
            nucleation_creep=coeffs.nucleation_creep,
            propagation_creep=coeffs.propagation_creep,
        )

    @staticmethod
    def _creep_time(tau0: float, creep: float, vb: float) -> float:
        # tau0 * exp(creep / |V|); inf once the exponent leaves float range
        exponent = creep / abs(vb)
        if exponent > MAX_EXPONENT:
            return float("inf")
        return tau0 * float(np.exp(exponent))

    def nucleation_time(self, vb: float) -> float:
        """tau_n = tau0n exp(t_B U_n e E0 / (kB T |Vb|)) in seconds."""
        return self._creep_time(self.tau0_nucleation, self.nucleation_creep, vb)

    def propagation_time(self, vb: float) -> float:
        """tau_p = tau0p exp(t_B U_p e E0 / (kB T |Vb|)) in seconds."""
        return self._creep_time(self.tau0_propagation, self.propagation_creep, vb)


def kai_fraction(fraction: float, dt: float, tau: float) -> float:
    """
    Advance a growing fraction along the KAI curve by dt.

    The restart time t_rel = tau sqrt(ln(1 / (1 - f))) places the present
    fraction on the curve, so the result equals the closed form evaluated
    at the accumulated switching time.
    """
    if np.isinf(tau):
        return fraction
    t_rel = tau * np.sqrt(np.log(1.0 / (1.0 - fraction)))
    return float(1.0 - np.exp(-((t_rel + dt) / tau) ** 2))


# =============================================================================
# TRANSITIONS
# =============================================================================

def _with_fractions(state: DomainState, direction: SwitchDirection,
                    growing: float, receding: float, **changes) -> DomainState:
    if direction is SwitchDirection.TOWARD_HIGH:
        return replace(state, high_fraction=growing, low_fraction=receding, **changes)
    return replace(state, high_fraction=receding, low_fraction=growing, **changes)


def _nucleate(state: DomainState, direction: SwitchDirection, vb: float,
              t_now: float, dt: float, rates: SwitchingRates) -> DomainState:
    progress = state.progress(direction) + dt / rates.nucleation_time(vb)
    phase = KineticPhase.nucleating(direction)

    if progress >= 1.0:
        logger.debug("Nucleation %s complete at t=%.6g s", direction.value, t_now)
        return _with_fractions(
            state, direction, FRACTION_FLOOR, 1.0 - FRACTION_FLOOR,
            nucleation_required=None,
            progress_toward_high=0.0,
            progress_toward_low=0.0,
            last_time=t_now,
            phase=phase,
        )

    if direction is SwitchDirection.TOWARD_HIGH:
        progresses = dict(progress_toward_high=progress, progress_toward_low=0.0)
    else:
        progresses = dict(progress_toward_high=0.0, progress_toward_low=progress)
    return replace(state, last_time=t_now, phase=phase, **progresses)


def _propagate(state: DomainState, direction: SwitchDirection, vb: float,
               t_now: float, dt: float, rates: SwitchingRates) -> DomainState:
    grown = kai_fraction(state.fraction(direction), dt, rates.propagation_time(vb))
    receding = max(1.0 - grown, FRACTION_FLOOR)
    growing = 1.0 - receding

    required = state.nucleation_required
    if receding <= FRACTION_FLOOR:
        if required is not direction.opposite:
            logger.debug("Fully switched %s at t=%.6g s", direction.value, t_now)
        required = direction.opposite

    return _with_fractions(
        state, direction, growing, receding,
        nucleation_required=required,
        progress_toward_high=0.0,
        progress_toward_low=0.0,
        last_time=t_now,
        phase=KineticPhase.propagating(direction),
    )


def advance(state: DomainState, vb: float, t_now: float,
            rates: SwitchingRates) -> DomainState:
    """
    Advance the domain state to t_now under bias vb.

    Pure transition: the input state is never modified.

    Args:
        state: State at state.last_time
        vb: Terminal voltage held since state.last_time (V)
        t_now: Absolute simulation time (s)
        rates: Creep time laws

    Returns:
        New state; the input state itself when no time has elapsed
    """
    dt = t_now - state.last_time
    if dt <= 0:
        return state

    direction = SwitchDirection.from_voltage(vb)
    if direction is None:
        return replace(state, progress_toward_high=0.0, progress_toward_low=0.0,
                       last_time=t_now, phase=KineticPhase.STABLE)

    if state.nucleation_required is direction:
        return _nucleate(state, direction, vb, t_now, dt, rates)
    return _propagate(state, direction, vb, t_now, dt, rates)
