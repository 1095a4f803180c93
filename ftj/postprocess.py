"""
FTJ Compact Model
=================
Post-processing and metric extraction utilities.
"""

import numpy as np
import pandas as pd
from typing import Dict, Tuple, Optional
from dataclasses import dataclass


@dataclass
class FTJMetrics:
    """Container for extracted FTJ performance metrics."""
    # Read currents
    I_on: float            # Low-resistance state read current (A)
    I_off: float           # High-resistance state read current (A)

    # Tunneling electroresistance
    TER_ratio: float       # I_on / I_off
    TER_percent: float     # (I_on - I_off) / I_off * 100

    # Coercive voltages from the I-V loop
    Vc_positive: Optional[float] = None
    Vc_negative: Optional[float] = None

    # Switching times from the pulse experiment
    t_switch_high: Optional[float] = None
    t_switch_low: Optional[float] = None

    def to_dict(self) -> Dict:
        """Convert to dictionary."""
        return {
            "I_on_A": self.I_on,
            "I_off_A": self.I_off,
            "TER_ratio": self.TER_ratio,
            "TER_percent": self.TER_percent,
            "Vc_positive_V": self.Vc_positive,
            "Vc_negative_V": self.Vc_negative,
            "t_switch_high_s": self.t_switch_high,
            "t_switch_low_s": self.t_switch_low,
        }


def extract_ter(I_on: float, I_off: float) -> Tuple[float, float]:
    """
    Tunneling electroresistance from the two read currents.

    Returns:
        (ratio, percent); inf when I_off is zero
    """
    I_on, I_off = abs(I_on), abs(I_off)
    if I_off == 0:
        return np.inf, np.inf
    return I_on / I_off, (I_on - I_off) / I_off * 100


def extract_read_currents(df: pd.DataFrame) -> Tuple[float, float]:
    """
    Read currents after the last positive and last negative write pulse.

    Positive writes leave the junction in the high-resistance state,
    negative writes in the low-resistance state.

    Args:
        df: Pulse switching DataFrame with pulse, stage, V, I columns

    Returns:
        (I_on, I_off) in A; NaN when a polarity was never written
    """
    reads = df[df["stage"] == "read"]
    writes = df[df["stage"] == "write"].groupby("pulse")["V"].first()

    I_on, I_off = np.nan, np.nan
    for _, row in reads.iterrows():
        amplitude = writes.get(row["pulse"], 0.0)
        if amplitude > 0:
            I_off = abs(row["I"])
        elif amplitude < 0:
            I_on = abs(row["I"])
    return I_on, I_off


def _crossings(x: np.ndarray, y: np.ndarray, level: float) -> Tuple[list, list]:
    """Interpolated x where y crosses level, split into falling and rising."""
    falling, rising = [], []
    shifted = y - level
    for i in range(len(y) - 1):
        a, b = shifted[i], shifted[i + 1]
        if a == b or a * b > 0:
            continue
        if a == 0 and i > 0:
            continue
        x_cross = x[i] + (x[i + 1] - x[i]) * a / (a - b)
        (falling if b < a else rising).append(float(x_cross))
    return falling, rising


def extract_coercive_voltages(df: pd.DataFrame, level: float = 0.5,
                              V_col: str = "V",
                              op_col: str = "order_parameter") -> Tuple[float, float]:
    """
    Coercive voltages from an I-V hysteresis run.

    Vc+ is where the order parameter falls through `level` (switching to
    the high-resistance state), Vc- where it rises through it.

    Returns:
        (Vc_positive, Vc_negative); NaN when no crossing occurred
    """
    falling, rising = _crossings(df[V_col].values, df[op_col].values, level)
    Vc_pos = float(np.mean(falling)) if falling else np.nan
    Vc_neg = float(np.mean(rising)) if rising else np.nan
    return Vc_pos, Vc_neg


def extract_switching_time(df: pd.DataFrame, pulse: int, level: float = 0.5,
                           op_col: str = "order_parameter") -> float:
    """
    Time from the start of a write pulse until the order parameter crosses level.

    Args:
        df: Pulse switching DataFrame
        pulse: Pulse index
        level: Order parameter crossing level

    Returns:
        Switching time (s); NaN when the pulse did not switch the device
    """
    writes = df[(df["stage"] == "write") & (df["pulse"] == pulse)]
    if len(writes) == 0:
        return np.nan

    start = df.index.get_loc(writes.index[0])
    t_start = df["time"].iloc[start - 1] if start > 0 else writes["time"].iloc[0]

    falling, rising = _crossings(writes["time"].values, writes[op_col].values, level)
    crossings = falling + rising
    if not crossings:
        return np.nan
    return min(crossings) - t_start


def extract_metrics(pulse_df: pd.DataFrame,
                    iv_df: Optional[pd.DataFrame] = None) -> FTJMetrics:
    """
    Extract all FTJ metrics.

    Args:
        pulse_df: Pulse switching results
        iv_df: Optional I-V hysteresis results for coercive voltages

    Returns:
        FTJMetrics object with all extracted values
    """
    I_on, I_off = extract_read_currents(pulse_df)
    ratio, percent = extract_ter(I_on, I_off)

    Vc_pos, Vc_neg = (None, None)
    if iv_df is not None:
        Vc_pos, Vc_neg = extract_coercive_voltages(iv_df)

    writes = pulse_df[pulse_df["stage"] == "write"].groupby("pulse")["V"].first()
    t_high = t_low = None
    for pulse, amplitude in writes.items():
        t_switch = extract_switching_time(pulse_df, pulse)
        if np.isnan(t_switch):
            continue
        if amplitude > 0 and t_high is None:
            t_high = t_switch
        elif amplitude < 0 and t_low is None:
            t_low = t_switch

    return FTJMetrics(
        I_on=I_on,
        I_off=I_off,
        TER_ratio=ratio,
        TER_percent=percent,
        Vc_positive=Vc_pos,
        Vc_negative=Vc_neg,
        t_switch_high=t_high,
        t_switch_low=t_low,
    )


def _fmt(value: Optional[float], spec: str, unit: str) -> str:
    if value is None or np.isnan(value):
        return "n/a"
    return f"{value:{spec}} {unit}"


def generate_summary_report(df: pd.DataFrame, metrics: FTJMetrics) -> str:
    """
    Generate text summary of simulation results.

    Args:
        df: Simulation results DataFrame
        metrics: Extracted metrics

    Returns:
        Formatted summary string
    """
    report = f"""
================================================================================
                    FTJ COMPACT MODEL SIMULATION SUMMARY
================================================================================

READ CURRENTS:
  I_on  (LRS):          {_fmt(metrics.I_on, '.3e', 'A')}
  I_off (HRS):          {_fmt(metrics.I_off, '.3e', 'A')}

ELECTRORESISTANCE:
  TER ratio:            {_fmt(metrics.TER_ratio, '.3e', '')}
  TER:                  {_fmt(metrics.TER_percent, '.3e', '%')}

COERCIVE VOLTAGES:
  Vc+:                  {_fmt(metrics.Vc_positive, '+.3f', 'V')}
  Vc-:                  {_fmt(metrics.Vc_negative, '+.3f', 'V')}

SWITCHING TIMES:
  to HRS:               {_fmt(metrics.t_switch_high, '.3e', 's')}
  to LRS:               {_fmt(metrics.t_switch_low, '.3e', 's')}

DATA POINTS:
  Total samples:        {len(df)}
  Voltage range:        {df['V'].min():.2f} V to {df['V'].max():.2f} V

================================================================================
"""
    return report
