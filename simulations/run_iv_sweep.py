"""
FTJ Compact Model - I-V Hysteresis
==================================
Quasi-static 0 -> +V -> -V -> 0 sweep of a fresh junction, plus the
static I-V of both pure resistance states.
"""

import numpy as np
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional

from ftj.config import (
    JunctionParameters,
    SimulationConfig,
    load_params_with_overrides,
)
from ftj.transient import run_iv_sweep, static_iv
from ftj.postprocess import extract_coercive_voltages
from ftj.visualization import plot_iv, plot_state_iv, plot_order_parameter, save_all_formats


CONFIG_PATH = Path(__file__).parent.parent / "config" / "device_params.json"


def run_iv_characterization(params: Optional[JunctionParameters] = None,
                            sim_config: Optional[SimulationConfig] = None,
                            output_dir: str = "."):
    """
    Run the I-V hysteresis characterization.

    Outputs:
    - data/raw/iv_sweep.csv and data/raw/state_iv.csv
    - plots/iv/ I-V loop, order parameter loop, pure-state I-V

    Args:
        params: Junction parameters (default: baseline with JSON overrides)
        sim_config: Sweep settings

    Returns:
        DataFrame with the sweep results
    """
    print("\n[I-V Hysteresis Sweep]")
    print("=" * 50)

    params = params or load_params_with_overrides(str(CONFIG_PATH))
    sim_config = sim_config or SimulationConfig()

    print(f"  Barrier: {params.thickness * 1e9:.1f} nm, radius {params.radius * 1e9:.0f} nm")
    print(f"  Sweep: 0 -> +{sim_config.V_max} V -> -{sim_config.V_max} V -> 0, "
          f"{sim_config.n_per_segment} pts/segment, period {sim_config.sweep_period:.1e} s")

    print("\n  Running sweep...")
    results = run_iv_sweep(params, sim_config)

    Vc_pos, Vc_neg = extract_coercive_voltages(results)
    print(f"    Vc+: {Vc_pos:+.3f} V")
    print(f"    Vc-: {Vc_neg:+.3f} V")

    voltages = np.linspace(-sim_config.V_max, sim_config.V_max, 4 * sim_config.n_per_segment + 1)
    state_iv = static_iv(params, voltages)

    raw_dir = Path(output_dir) / "data" / "raw"
    plot_dir = Path(output_dir) / "plots" / "iv"
    raw_dir.mkdir(parents=True, exist_ok=True)
    plot_dir.mkdir(parents=True, exist_ok=True)

    results.to_csv(raw_dir / "iv_sweep.csv", index=False)
    state_iv.to_csv(raw_dir / "state_iv.csv", index=False)
    print(f"  Raw data saved: {raw_dir}")

    for name, fig in (("iv_loop", plot_iv(results)),
                      ("order_parameter_loop", plot_order_parameter(results)),
                      ("state_iv", plot_state_iv(state_iv))):
        save_all_formats(fig, str(plot_dir / name))
        plt.close(fig)

    return results


if __name__ == "__main__":
    run_iv_characterization()
