"""
FTJ Compact Model - Parameter Sweeps
====================================
Barrier-thickness and write-amplitude sweeps, run in parallel worker
processes when enabled.
"""

import numpy as np
from dataclasses import replace
import pandas as pd
import matplotlib.pyplot as plt
from pathlib import Path
from typing import Dict, Any, List, Optional

from ftj.config import SimulationConfig, get_thickness_params, get_baseline_params, get_fast_simulation_config
from ftj.fitting import SUPPORTED_UNIT_CELLS
from ftj.transient import run_pulse_switching
from ftj.postprocess import extract_metrics
from ftj.parallel import ParallelSweepRunner, ParallelConfig, run_sweep_sequential
from ftj.visualization import plot_ter_vs_parameter, save_all_formats


# =============================================================================
# SINGLE-POINT SIMULATION FUNCTIONS (for parallel execution)
# =============================================================================

def _simulate_single_thickness(unit_cells: int, sim_config: SimulationConfig) -> Dict[str, Any]:
    """Pulse experiment on a junction of the given unit-cell count."""
    params = get_thickness_params(unit_cells)
    metrics = extract_metrics(run_pulse_switching(params, sim_config))
    return {
        "unit_cells": unit_cells,
        "thickness_nm": params.thickness * 1e9,
        **metrics.to_dict(),
        "success": True,
    }


def _simulate_single_amplitude(V_write: float, sim_config: SimulationConfig) -> Dict[str, Any]:
    """Pulse experiment on the baseline junction at one write amplitude."""
    config = replace(sim_config, V_write=V_write)
    metrics = extract_metrics(run_pulse_switching(get_baseline_params(), config))
    return {
        "V_write": V_write,
        **metrics.to_dict(),
        "success": True,
    }


def _run(sweep_func, values: List[Any], sim_config: SimulationConfig,
         parallel: bool, n_workers: Optional[int]) -> pd.DataFrame:
    if parallel:
        runner = ParallelSweepRunner(ParallelConfig(n_workers=n_workers))
        results = runner.run_sweep(sweep_func, values, sim_config=sim_config)
    else:
        results = run_sweep_sequential(sweep_func, values, sim_config=sim_config)

    for r in results:
        if not r.get("success", True):
            print(f"  ERROR: Param={r['param_value']} failed: {r['error']}")
    return pd.DataFrame([r for r in results if r.get("success", True)])


# =============================================================================
# SWEEPS
# =============================================================================

def run_thickness_sweep(sim_config: Optional[SimulationConfig] = None,
                        parallel: bool = True,
                        n_workers: Optional[int] = None) -> pd.DataFrame:
    """TER and switching times for every supported barrier thickness."""
    print("\n[Barrier Thickness Sweep]")
    sim_config = sim_config or get_fast_simulation_config()
    df = _run(_simulate_single_thickness, list(SUPPORTED_UNIT_CELLS), sim_config,
              parallel, n_workers)
    if len(df):
        print(df[["unit_cells", "TER_ratio", "t_switch_high_s", "t_switch_low_s"]].to_string(index=False))
    return df


def run_amplitude_sweep(amplitudes: Optional[List[float]] = None,
                        sim_config: Optional[SimulationConfig] = None,
                        parallel: bool = True,
                        n_workers: Optional[int] = None) -> pd.DataFrame:
    """Switching times of the baseline junction against write amplitude."""
    print("\n[Write Amplitude Sweep]")
    if amplitudes is None:
        amplitudes = list(np.round(np.arange(1.0, 2.01, 0.25), 2))
    sim_config = sim_config or get_fast_simulation_config()
    df = _run(_simulate_single_amplitude, amplitudes, sim_config, parallel, n_workers)
    if len(df):
        print(df[["V_write", "t_switch_high_s", "t_switch_low_s"]].to_string(index=False))
    return df


def run_all_sweeps(sim_config: Optional[SimulationConfig] = None,
                   parallel: bool = True, n_workers: Optional[int] = None,
                   output_dir: str = ".") -> Dict[str, pd.DataFrame]:
    """Run every sweep and save CSVs plus the TER-vs-thickness plot."""
    results = {
        "thickness": run_thickness_sweep(sim_config, parallel=parallel, n_workers=n_workers),
        "amplitude": run_amplitude_sweep(sim_config=sim_config, parallel=parallel,
                                         n_workers=n_workers),
    }

    processed_dir = Path(output_dir) / "data" / "processed"
    plot_dir = Path(output_dir) / "plots" / "sweeps"
    processed_dir.mkdir(parents=True, exist_ok=True)
    plot_dir.mkdir(parents=True, exist_ok=True)

    for name, df in results.items():
        df.to_csv(processed_dir / f"sweep_{name}.csv", index=False)

    thickness = results["thickness"]
    if len(thickness):
        fig = plot_ter_vs_parameter(thickness["unit_cells"].tolist(),
                                    thickness["TER_ratio"].tolist())
        save_all_formats(fig, str(plot_dir / "ter_vs_thickness"))
        plt.close(fig)

    return results


if __name__ == "__main__":
    run_all_sweeps()
