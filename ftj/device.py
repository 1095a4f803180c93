"""
FTJ Compact Model
=================
Device instance: the evaluation entry point a host solver calls at every
time point.

Each call blends the pure-state currents with the present domain fractions:

    Id = I_high * highFraction + I_low * lowFraction

and exposes lowFraction as the order parameter.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .config import JunctionParameters, ResistanceState
from .physics import DerivedCoefficients, TunnelingCurrentModel
from .kinetics import DomainState, KineticPhase, SwitchingRates, advance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ElectricalState:
    """Electrical quantities of one evaluation."""
    voltage: float          # Guarded terminal voltage (V)
    high_current: float     # Pure high-resistance current (A)
    low_current: float      # Pure low-resistance current (A)
    current: float          # Blended device current (A)


@dataclass(frozen=True)
class EvaluationResult:
    """What the host receives from one evaluate() call."""
    current: float           # A
    order_parameter: float   # lowFraction
    max_step: float          # Requested maximum time step (s)


class FTJDevice:
    """
    Ferroelectric tunnel junction compact model.

    The domain state is kept at two levels. The committed state belongs to
    the last accepted time point; the trial state is recomputed from it on
    every call. Moving to a later time accepts the previous trial, so:

    - repeated calls at one time point (solver iterations) are idempotent
    - a rolled-back time point (rejected step) is re-integrated from the
      committed state, never from the rejected trial
    - calls at or before the committed time reuse the committed state

    Example usage:
        device = FTJDevice(get_baseline_params())
        result = device.evaluate(1.5, 1e-9)
        print(result.current, result.order_parameter)
    """

    def __init__(self, params: JunctionParameters, coefficients: Optional[DerivedCoefficients] = None):
        """
        Build the device.

        Args:
            params: Junction parameters
            coefficients: Pre-built coefficients (e.g. with calibrated FN
                factors); derived from params when omitted

        Raises:
            ConfigurationError: unsupported barrier thickness
        """
        self.params = params
        self.coefficients = coefficients or DerivedCoefficients.from_parameters(params)
        self.current_model = TunnelingCurrentModel(self.coefficients)
        self.rates = SwitchingRates.from_coefficients(self.coefficients)

        self._committed = DomainState.initial(params.initial_fraction)
        self._trial = self._committed
        self._electrical: Optional[ElectricalState] = None

        logger.info("FTJ device built: %d unit cells, area %.3e m^2, initial fraction %.4g",
                    self.coefficients.unit_cells, self.coefficients.area,
                    self._committed.low_fraction)

    # -------------------------------------------------------------------------
    # Observables
    # -------------------------------------------------------------------------

    @property
    def order_parameter(self) -> float:
        """Low-resistance volume fraction after the latest evaluation."""
        return self._trial.low_fraction

    @property
    def domain_state(self) -> DomainState:
        """Domain state after the latest evaluation."""
        return self._trial

    @property
    def committed_state(self) -> DomainState:
        """Domain state at the last accepted time point."""
        return self._committed

    @property
    def electrical_state(self) -> Optional[ElectricalState]:
        """Electrical state of the latest evaluation; None before the first."""
        return self._electrical

    @property
    def phase(self) -> KineticPhase:
        return self._trial.phase

    @property
    def max_step(self) -> float:
        """Maximum time step requested from the host (s)."""
        return self.params.time_step

    # -------------------------------------------------------------------------
    # Evaluation
    # -------------------------------------------------------------------------

    def commit(self):
        """Accept the trial state as the new committed state."""
        self._committed = self._trial

    def reset(self):
        """Return to the initial polarization at t = 0."""
        self._committed = DomainState.initial(self.params.initial_fraction)
        self._trial = self._committed
        self._electrical = None

    def _advance_domains(self, vb: float, time: float) -> DomainState:
        if time > self._trial.last_time and self._trial is not self._committed:
            self.commit()
        elif time < self._trial.last_time:
            logger.debug("Time rolled back from %.6g to %.6g s, trial discarded",
                         self._trial.last_time, time)

        if time <= self._committed.last_time:
            return self._committed
        return advance(self._committed, vb, time, self.rates)

    def evaluate(self, terminal_voltage: float, absolute_time: float) -> EvaluationResult:
        """
        Evaluate the device at one host time point.

        Args:
            terminal_voltage: Voltage across the junction (V)
            absolute_time: Absolute simulation time (s)

        Returns:
            EvaluationResult with current, order parameter and step hint
        """
        self._trial = self._advance_domains(terminal_voltage, absolute_time)

        vb = self.current_model.guard_voltage(terminal_voltage)
        high_current = self.current_model.state_current(vb, ResistanceState.HIGH)
        low_current = self.current_model.state_current(vb, ResistanceState.LOW)
        current = (high_current * self._trial.high_fraction
                   + low_current * self._trial.low_fraction)

        self._electrical = ElectricalState(
            voltage=vb,
            high_current=high_current,
            low_current=low_current,
            current=current,
        )
        return EvaluationResult(
            current=current,
            order_parameter=self._trial.low_fraction,
            max_step=self.max_step,
        )
