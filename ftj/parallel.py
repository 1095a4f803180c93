"""
FTJ Compact Model - Parallel Execution Framework
================================================
Runs parameter sweeps in worker processes.

Every sweep point builds its own device, so points share no state and can
run in any order; results come back in parameter order.
"""

import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from typing import Callable, List, Dict, Any, Optional
from dataclasses import dataclass
import multiprocessing as mp


@dataclass
class ParallelConfig:
    """Configuration for parallel execution."""
    n_workers: Optional[int] = None  # None = auto-detect
    show_progress: bool = True
    timeout_per_task: Optional[float] = None  # seconds, None = no timeout

    def __post_init__(self):
        if self.n_workers is None:
            self.n_workers = get_optimal_worker_count()
        else:
            self.n_workers = max(1, self.n_workers)


class ParallelSweepRunner:
    """
    Execute parameter sweeps in parallel using multiprocessing.

    Example usage:
        runner = ParallelSweepRunner(ParallelConfig(n_workers=4))
        results = runner.run_sweep(
            sweep_func=simulate_thickness,
            parameter_list=[3, 4, 5, 6],
            sim_config=sim_config,
        )
    """

    def __init__(self, config: Optional[ParallelConfig] = None):
        self.config = config or ParallelConfig()
        if self.config.show_progress:
            print(f"[ParallelSweepRunner] Configured with {self.config.n_workers} workers")

    def run_sweep(
        self,
        sweep_func: Callable,
        parameter_list: List[Any],
        **sweep_kwargs
    ) -> List[Dict[str, Any]]:
        """
        Run a parameter sweep in parallel.

        Args:
            sweep_func: Module-level function called for each parameter value.
                        Signature: func(param_value, **kwargs) -> Dict
            parameter_list: List of parameter values to sweep over
            **sweep_kwargs: Additional keyword arguments passed to sweep_func

        Returns:
            Result dictionaries in the order of parameter_list; failed points
            are reported as {"param_value", "error", "success": False}
        """
        n_params = len(parameter_list)

        if self.config.show_progress:
            print(f"  Running {n_params} simulations in parallel "
                  f"({self.config.n_workers} workers)...")

        start_time = time.time()
        results: List[Optional[Dict[str, Any]]] = [None] * n_params

        with ProcessPoolExecutor(max_workers=self.config.n_workers) as executor:
            future_to_idx = {
                executor.submit(_run_single_simulation, sweep_func, value, sweep_kwargs): idx
                for idx, value in enumerate(parameter_list)
            }

            n_completed = 0
            for future in as_completed(future_to_idx.keys()):
                idx = future_to_idx[future]
                param_value = parameter_list[idx]

                try:
                    results[idx] = future.result(timeout=self.config.timeout_per_task)
                except Exception as e:
                    # Worker-side failures (broken pool, unpicklable result)
                    print(f"    ERROR: Param={param_value} failed: {e}")
                    results[idx] = {
                        "error": str(e),
                        "param_value": param_value,
                        "success": False
                    }
                n_completed += 1

                if self.config.show_progress:
                    elapsed = time.time() - start_time
                    print(f"    [{n_completed}/{n_params}] "
                          f"Param={param_value} completed "
                          f"(elapsed: {elapsed:.1f}s)")

        n_failed = sum(1 for r in results if not r.get("success", True))
        if self.config.show_progress:
            print(f"  Parallel sweep completed in {time.time() - start_time:.1f}s")
            print(f"    Success: {n_params - n_failed}/{n_params}, Failed: {n_failed}/{n_params}")

        return results


def run_sweep_sequential(sweep_func: Callable, parameter_list: List[Any],
                         **sweep_kwargs) -> List[Dict[str, Any]]:
    """Same contract as ParallelSweepRunner.run_sweep, in this process."""
    return [_run_single_simulation(sweep_func, value, sweep_kwargs)
            for value in parameter_list]


def _run_single_simulation(
    sweep_func: Callable,
    param_value: Any,
    sweep_kwargs: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Run one sweep point; errors become a result record instead of raising.
    """
    try:
        return sweep_func(param_value, **sweep_kwargs)
    except Exception as e:
        return {
            "error": str(e),
            "param_value": param_value,
            "success": False
        }


def get_optimal_worker_count() -> int:
    """
    Get recommended number of workers based on system resources.

    Returns:
        Optimal number of workers (typically n_cpus - 1)
    """
    n_cpus = mp.cpu_count()
    if n_cpus <= 2:
        return n_cpus
    return n_cpus - 1
