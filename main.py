#!/usr/bin/env python3
"""
FTJ Compact Model
=================
Main Characterization Driver

Phases:
- iv:     quasi-static I-V hysteresis loop
- pulse:  alternating write pulses with reads
- sweeps: barrier thickness and write amplitude sweeps
"""

import sys
import time
import shutil
import logging
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional

# Setup path
PROJECT_ROOT = Path(__file__).parent
sys.path.insert(0, str(PROJECT_ROOT))

from ftj.config import (
    SimulationConfig,
    get_fast_simulation_config,
    get_accurate_config,
)


PHASE_OUTPUTS = {
    'iv': [PROJECT_ROOT / "plots" / "iv", PROJECT_ROOT / "data" / "raw" / "iv_sweep.csv",
           PROJECT_ROOT / "data" / "raw" / "state_iv.csv"],
    'pulse': [PROJECT_ROOT / "plots" / "pulse", PROJECT_ROOT / "data" / "raw" / "pulse_switching.csv"],
    'sweeps': [PROJECT_ROOT / "plots" / "sweeps", PROJECT_ROOT / "data" / "processed"],
}

SPEED_MODES = {
    'fast': get_fast_simulation_config,
    'default': SimulationConfig,
    'accurate': get_accurate_config,
}


def clean_phase_outputs(phase: str):
    """Remove the outputs of one phase; other phases are left alone."""
    print(f"\n[Cleaning {phase.upper()} phase outputs only...]")
    removed_count = 0
    for path in PHASE_OUTPUTS.get(phase, []):
        if path.is_dir():
            shutil.rmtree(path)
            print(f"  Removed dir: {path.name}")
            removed_count += 1
        elif path.is_file():
            path.unlink()
            print(f"  Removed: {path.name}")
            removed_count += 1

    if removed_count == 0:
        print(f"  No {phase.upper()} files found to clean.")


def ensure_directories():
    """Create all required directories."""
    for d in (PROJECT_ROOT / "data" / "raw",
              PROJECT_ROOT / "data" / "processed",
              PROJECT_ROOT / "plots",
              PROJECT_ROOT / "logs"):
        d.mkdir(parents=True, exist_ok=True)


def print_banner():
    """Print startup banner."""
    banner = """
╔══════════════════════════════════════════════════════════════════╗
║                                                                  ║
║     FERROELECTRIC TUNNEL JUNCTION COMPACT MODEL  v1.0            ║
║     ═══════════════════════════════════════════                  ║
║                                                                  ║
║     Transport: direct + Fowler-Nordheim tunneling                ║
║     Kinetics:  Merz nucleation + KAI domain-wall propagation     ║
║                                                                  ║
╚══════════════════════════════════════════════════════════════════╝
"""
    print(banner)


def run_phase(phase_num: int, name: str, runner_func, skip: bool = False) -> Any:
    """Run a simulation phase with timing."""
    print(f"\n{'='*60}")
    print(f"  PHASE {phase_num}: {name.upper()}")
    print(f"{'='*60}")

    if skip:
        print("  [SKIPPED]")
        return None

    start = time.time()
    try:
        result = runner_func()
        elapsed = time.time() - start
        print(f"\n  Phase {phase_num} completed in {elapsed:.1f} seconds")
        return result
    except Exception as e:
        print(f"\n  [ERROR] Phase {phase_num} failed: {e}")
        import traceback
        traceback.print_exc()
        return None


def main(phases: Optional[Dict[str, bool]] = None, clean: bool = True,
         sim_config: Optional[SimulationConfig] = None):
    """
    Main driver function.

    Args:
        phases: Dictionary of phases to run. Default runs all.
                Keys: 'iv', 'pulse', 'sweeps'
        clean: If True, removes previous outputs of the phases being run
        sim_config: Stimulus settings shared by the phases
    """
    print_banner()

    start_time = time.time()
    print(f"Started: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    ensure_directories()
    logging.basicConfig(
        filename=str(PROJECT_ROOT / "logs" / "simulation.log"),
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if phases is None:
        phases = {'iv': True, 'pulse': True, 'sweeps': True}
    sim_config = sim_config or SimulationConfig()

    if clean:
        for phase_name, should_run in phases.items():
            if should_run:
                clean_phase_outputs(phase_name)

    from simulations.run_iv_sweep import run_iv_characterization
    from simulations.run_pulse_switching import run_pulse_characterization
    from simulations.run_sweeps import run_all_sweeps

    output_dir = str(PROJECT_ROOT)
    results = {}

    if phases.get('iv', False):
        results['iv'] = run_phase(
            1, "I-V Hysteresis",
            lambda: run_iv_characterization(sim_config=sim_config, output_dir=output_dir))

    if phases.get('pulse', False):
        results['pulse'] = run_phase(
            2, "Pulse Switching",
            lambda: run_pulse_characterization(sim_config=sim_config, output_dir=output_dir))

    if phases.get('sweeps', False):
        results['sweeps'] = run_phase(
            3, "Parameter Sweeps",
            lambda: run_all_sweeps(sim_config=sim_config,
                                   parallel=sim_config.enable_parallel,
                                   n_workers=sim_config.n_workers,
                                   output_dir=output_dir))

    total_time = time.time() - start_time

    print("\n" + "="*60)
    print("  ALL SIMULATIONS COMPLETE")
    print("="*60)
    print(f"\n  Total execution time: {total_time:.1f} seconds")

    print(f"\n  Phases executed:")
    for phase, result in results.items():
        status = "✓ SUCCESS" if result is not None else "✗ FAILED/SKIPPED"
        print(f"    - {phase}: {status}")

    print(f"\n  Output directories:")
    print(f"    - Data:   {PROJECT_ROOT / 'data'}")
    print(f"    - Plots:  {PROJECT_ROOT / 'plots'}")
    print()

    return results


if __name__ == "__main__":
    speed_mode = 'default'
    clean_mode = True
    run_mode = 'all'

    for arg in sys.argv[1:]:
        arg_lower = arg.lower()
        if arg_lower in SPEED_MODES:
            speed_mode = arg_lower
        elif arg_lower in PHASE_OUTPUTS or arg_lower == 'all':
            run_mode = arg_lower
        elif arg_lower == 'noclean':
            clean_mode = False
        elif arg_lower == 'help':
            print("""
FTJ Compact Model
=================

Usage: python main.py [speed] [phase] [options]

Speed Modes:
  fast       - Coarse sampling for quick checks
  default    - Standard sampling (DEFAULT)
  accurate   - Fine sampling for final curves

Phase Selection:
  iv         - I-V hysteresis only
  pulse      - Pulse switching only
  sweeps     - Parameter sweeps only
  all        - All phases (DEFAULT)

Options:
  noclean    - Keep previous outputs
  help       - Show this help
""")
            sys.exit(0)
        else:
            print(f"  Unknown argument: {arg}. Try 'python main.py help'.")
            sys.exit(2)

    print(f"\n  Speed Mode: {speed_mode.upper()}")
    print(f"  Run Mode: {run_mode}")
    print(f"  Clean: {clean_mode}")

    phases = None if run_mode == 'all' else {run_mode: True}
    main(phases=phases, clean=clean_mode, sim_config=SPEED_MODES[speed_mode]())
