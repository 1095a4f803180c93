"""
FTJ Compact Model - Pulse Switching
===================================
Alternating write pulses with a read after each one; reports read
currents, electroresistance and switching times.
"""

import matplotlib.pyplot as plt
from pathlib import Path
from typing import Optional

from ftj.config import (
    JunctionParameters,
    SimulationConfig,
    load_params_with_overrides,
)
from ftj.transient import run_pulse_switching
from ftj.postprocess import extract_metrics, generate_summary_report
from ftj.visualization import plot_switching_transient, save_all_formats


CONFIG_PATH = Path(__file__).parent.parent / "config" / "device_params.json"


def run_pulse_characterization(params: Optional[JunctionParameters] = None,
                               sim_config: Optional[SimulationConfig] = None,
                               output_dir: str = "."):
    """
    Run the write/read pulse experiment.

    Returns:
        (results DataFrame, FTJMetrics)
    """
    print("\n[Pulse Switching]")
    print("=" * 50)

    params = params or load_params_with_overrides(str(CONFIG_PATH))
    sim_config = sim_config or SimulationConfig()

    print(f"  Write: ±{sim_config.V_write} V, {sim_config.pulse_width:.1e} s, "
          f"{sim_config.n_pulses} pulses")
    print(f"  Read:  {sim_config.V_read} V")

    print("\n  Running pulse train...")
    results = run_pulse_switching(params, sim_config)

    metrics = extract_metrics(results)
    print(generate_summary_report(results, metrics))

    raw_dir = Path(output_dir) / "data" / "raw"
    plot_dir = Path(output_dir) / "plots" / "pulse"
    raw_dir.mkdir(parents=True, exist_ok=True)
    plot_dir.mkdir(parents=True, exist_ok=True)

    results.to_csv(raw_dir / "pulse_switching.csv", index=False)
    print(f"  Raw data saved: {raw_dir / 'pulse_switching.csv'}")

    fig = plot_switching_transient(results)
    save_all_formats(fig, str(plot_dir / "pulse_switching"))
    plt.close(fig)

    return results, metrics


if __name__ == "__main__":
    run_pulse_characterization()
