"""
FTJ Compact Model
=================
Stimulus waveforms and transient runs.

Drives a device through a sampled voltage waveform the way a host
simulator would for committed time points, and collects the results in a
DataFrame. Also provides the standard characterization experiments:
quasi-static I-V hysteresis and write/read pulse switching.
"""

from typing import List, Optional, Tuple

import numpy as np
import pandas as pd

from .config import JunctionParameters, SimulationConfig
from .device import FTJDevice
from .physics import DerivedCoefficients, TunnelingCurrentModel


# =============================================================================
# WAVEFORMS
# =============================================================================

def generate_voltage_sweep(V_max: float = 1.5, n_per_segment: int = 100) -> Tuple[np.ndarray, np.ndarray]:
    """
    Generate a hysteresis voltage sweep: 0 -> +V -> -V -> 0

    Args:
        V_max: Maximum voltage (V)
        n_per_segment: Points per quarter segment

    Returns:
        (voltages, directions) where directions is "forward" on rising and
        "reverse" on falling segments
    """
    voltages = np.concatenate([
        np.linspace(0, V_max, n_per_segment),
        np.linspace(V_max, -V_max, n_per_segment * 2)[1:],
        np.linspace(-V_max, 0, n_per_segment)[1:],
    ])
    directions = np.array(
        ["forward"] * n_per_segment
        + ["reverse"] * (n_per_segment * 2 - 1)
        + ["forward"] * (n_per_segment - 1)
    )
    return voltages, directions


def generate_step(V_step: float, duration: float, n_points: int = 500,
                  t_start: float = 0.0) -> Tuple[np.ndarray, np.ndarray]:
    """
    Constant bias applied from t_start for the given duration.

    The bias acts on the interval ending at each sample, so the first
    sample (at t_start itself) integrates nothing.

    Returns:
        (times, voltages)
    """
    times = t_start + np.linspace(0, duration, n_points)
    return times, np.full(n_points, float(V_step))


def generate_pulse_train(amplitudes: List[float], pulse_width: float,
                         samples_per_pulse: int = 200,
                         V_read: Optional[float] = None) -> pd.DataFrame:
    """
    Build a write pulse train, optionally with a read sample after each pulse.

    Args:
        amplitudes: Write amplitude of each pulse (V)
        pulse_width: Duration of each write pulse (s)
        samples_per_pulse: Time samples per write pulse
        V_read: Read voltage sampled once after every pulse (None = no reads)

    Returns:
        DataFrame with time, V, pulse and stage columns
    """
    dt = pulse_width / samples_per_pulse
    rows = [{"time": 0.0, "V": 0.0, "pulse": -1, "stage": "idle"}]
    t = 0.0

    for idx, amplitude in enumerate(amplitudes):
        for _ in range(samples_per_pulse):
            t += dt
            rows.append({"time": t, "V": amplitude, "pulse": idx, "stage": "write"})
        if V_read is not None:
            t += dt
            rows.append({"time": t, "V": V_read, "pulse": idx, "stage": "read"})

    return pd.DataFrame(rows)


# =============================================================================
# TRANSIENT RUNS
# =============================================================================

def run_transient(device: FTJDevice, times: np.ndarray, voltages: np.ndarray) -> pd.DataFrame:
    """
    Evaluate a device at every (time, voltage) sample in order.

    Args:
        device: Device to drive (its state carries over between calls)
        times: Absolute times (s), non-decreasing
        voltages: Terminal voltage at each time (V)

    Returns:
        DataFrame with time, V, I, I_high, I_low, order_parameter, phase
    """
    times = np.asarray(times, dtype=float)
    voltages = np.asarray(voltages, dtype=float)
    if times.shape != voltages.shape:
        raise ValueError(f"times {times.shape} and voltages {voltages.shape} differ in shape")
    if times.size == 0:
        raise ValueError("Empty waveform")

    rows = []
    for t, vb in zip(times, voltages):
        result = device.evaluate(float(vb), float(t))
        electrical = device.electrical_state
        rows.append({
            "time": float(t),
            "V": float(vb),
            "I": result.current,
            "I_high": electrical.high_current,
            "I_low": electrical.low_current,
            "order_parameter": result.order_parameter,
            "phase": device.phase.value,
        })

    return pd.DataFrame(rows)


def run_iv_sweep(params: JunctionParameters,
                 sim_config: Optional[SimulationConfig] = None) -> pd.DataFrame:
    """
    Quasi-static I-V hysteresis loop of a fresh device.

    Returns:
        Transient DataFrame plus a direction column
    """
    sim_config = sim_config or SimulationConfig()
    voltages, directions = generate_voltage_sweep(sim_config.V_max, sim_config.n_per_segment)
    times = np.linspace(0, sim_config.sweep_period, len(voltages))

    df = run_transient(FTJDevice(params), times, voltages)
    df["direction"] = directions
    return df


def run_pulse_switching(params: JunctionParameters,
                        sim_config: Optional[SimulationConfig] = None) -> pd.DataFrame:
    """
    Alternating write pulses, each followed by a read at V_read.

    Returns:
        Transient DataFrame plus pulse and stage columns
    """
    sim_config = sim_config or SimulationConfig()
    train = generate_pulse_train(
        sim_config.write_sequence,
        sim_config.pulse_width,
        sim_config.samples_per_pulse,
        V_read=sim_config.V_read,
    )

    df = run_transient(FTJDevice(params), train["time"].values, train["V"].values)
    df["pulse"] = train["pulse"].values
    df["stage"] = train["stage"].values
    return df


def static_iv(params: JunctionParameters, voltages: np.ndarray) -> pd.DataFrame:
    """Pure-state I-V curves; no switching involved."""
    model = TunnelingCurrentModel(DerivedCoefficients.from_parameters(params))
    return model.iv_curve(voltages)
