#!/usr/bin/env python3
"""
FTJ Compact Model
=================
Unit Tests for the Device, Transient Runs and Post-processing

Run with: pytest tests/test_device.py -v
"""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import matplotlib
matplotlib.use("Agg")

import pytest
import numpy as np
import pandas as pd


def _square(value, **kwargs):
    if value < 0:
        raise ValueError("negative")
    return {"value": value, "square": value ** 2, "success": True}


class TestDevice:
    """Tests for the device evaluation entry point."""

    @pytest.fixture
    def device(self):
        from ftj import FTJDevice, get_baseline_params
        return FTJDevice(get_baseline_params())

    def test_unsupported_thickness_raises(self):
        from ftj import FTJDevice, JunctionParameters, ConfigurationError
        with pytest.raises(ConfigurationError):
            FTJDevice(JunctionParameters(thickness=2.8e-9))

    def test_initial_state(self, device):
        from ftj import FRACTION_FLOOR
        assert device.order_parameter == pytest.approx(1.0 - FRACTION_FLOOR)
        assert device.electrical_state is None
        assert device.max_step == device.params.time_step

    def test_current_is_blend_of_states(self, device):
        result = device.evaluate(0.1, 1e-9)
        electrical = device.electrical_state
        state = device.domain_state

        expected = (electrical.high_current * state.high_fraction
                    + electrical.low_current * state.low_fraction)
        assert result.current == pytest.approx(expected)
        assert result.order_parameter == state.low_fraction

    def test_repeated_evaluation_is_idempotent(self, device):
        first = device.evaluate(1.5, 1e-7)
        second = device.evaluate(1.5, 1e-7)

        assert first == second
        assert device.committed_state.last_time == 0.0

    def test_rolled_back_time_recomputes_from_committed(self, device):
        from ftj import FTJDevice, get_baseline_params
        device.evaluate(1.5, 4e-7)
        rolled_back = device.evaluate(1.5, 3e-7)

        fresh = FTJDevice(get_baseline_params()).evaluate(1.5, 3e-7)
        assert rolled_back == fresh

    def test_later_time_commits_trial(self, device):
        device.evaluate(1.5, 1e-8)
        device.evaluate(1.5, 2e-8)

        assert device.committed_state.last_time == 1e-8
        assert device.domain_state.last_time == 2e-8

    def test_time_before_committed_reuses_committed(self, device):
        device.evaluate(1.5, 1e-8)
        device.evaluate(1.5, 2e-8)
        result = device.evaluate(-1.5, 5e-9)

        assert result.order_parameter == device.committed_state.low_fraction

    def test_zero_bias_keeps_state(self):
        from ftj import FTJDevice, get_thickness_params
        device = FTJDevice(get_thickness_params(4))
        initial = device.order_parameter

        for t in np.linspace(0, 1e-3, 50):
            result = device.evaluate(0.0, float(t))
            assert result.order_parameter == initial
            assert result.current == 0.0

    def test_zero_bias_stable_at_equal_barriers(self):
        from ftj import FTJDevice, get_baseline_params
        params = get_baseline_params().replace(phi1_high=0.5, phi2_high=0.5)
        device = FTJDevice(params)
        initial = device.order_parameter

        for t in np.linspace(0, 1e-3, 20):
            result = device.evaluate(0.0, float(t))
            assert result.order_parameter == initial
            assert np.isfinite(result.current)

    def test_positive_bias_switches_monotonically(self, device):
        from ftj import FRACTION_FLOOR
        ops = [device.evaluate(1.5, float(t)).order_parameter
               for t in np.linspace(0, 2e-6, 401)]

        assert np.all(np.diff(ops) <= 1e-15)
        assert ops[-1] == pytest.approx(FRACTION_FLOOR)

    def test_growth_after_nucleation_restarts_from_floor(self, device):
        from ftj import FRACTION_FLOOR
        tau_p = device.rates.propagation_time(1.5)
        t_rel0 = tau_p * np.sqrt(np.log(1.0 / (1.0 - FRACTION_FLOOR)))
        times = [k * 5e-9 for k in range(1, 401)]

        t_complete = None
        for t in times:
            result = device.evaluate(1.5, t)
            if t_complete is None:
                if device.domain_state.nucleation_required is None:
                    t_complete = t
                    assert result.order_parameter == pytest.approx(1.0 - FRACTION_FLOOR)
                continue
            if result.order_parameter <= 10 * FRACTION_FLOOR:
                break
            expected = np.exp(-((t_rel0 + t - t_complete) / tau_p) ** 2)
            assert result.order_parameter == pytest.approx(expected, rel=1e-6)

        assert t_complete is not None
        assert t_complete >= device.rates.nucleation_time(1.5)

    def test_reversal_returns_to_low_state(self, device):
        from ftj import FRACTION_FLOOR
        for t in np.linspace(0, 2e-6, 401):
            device.evaluate(1.5, float(t))

        ops = [device.evaluate(-1.5, float(t)).order_parameter
               for t in np.linspace(2e-6 + 5e-9, 4e-6, 400)]

        assert np.all(np.diff(ops) >= -1e-15)
        assert ops[0] == pytest.approx(FRACTION_FLOOR)
        assert ops[-1] == pytest.approx(1.0 - FRACTION_FLOOR)

    def test_fractions_stay_bounded(self, device):
        from ftj import FRACTION_FLOOR
        times = np.linspace(0, 4e-6, 801)
        voltages = np.where(times < 2e-6, 1.5, -1.2)

        for t, vb in zip(times, voltages):
            device.evaluate(float(vb), float(t))
            state = device.domain_state
            assert FRACTION_FLOOR <= state.low_fraction <= 1.0 - FRACTION_FLOOR + 1e-15
            assert state.high_fraction + state.low_fraction == pytest.approx(1.0)

    def test_nucleation_delays_switching(self, device):
        from ftj import KineticPhase
        tau_n = device.rates.nucleation_time(1.5)
        result = device.evaluate(1.5, 0.5 * tau_n)

        assert device.phase is KineticPhase.NUCLEATING_TOWARD_HIGH
        assert result.order_parameter == device.committed_state.low_fraction

    def test_reset(self, device):
        initial = device.order_parameter
        device.evaluate(1.5, 1e-6)
        device.evaluate(1.5, 2e-6)
        device.reset()

        assert device.order_parameter == initial
        assert device.committed_state.last_time == 0.0


class TestTransient:
    """Tests for waveforms and transient runs."""

    def test_voltage_sweep_shape(self):
        from ftj import generate_voltage_sweep
        voltages, directions = generate_voltage_sweep(1.0, 10)

        assert len(voltages) == 38
        assert len(directions) == len(voltages)
        assert voltages[0] == 0.0
        assert voltages[-1] == 0.0
        assert voltages.max() == pytest.approx(1.0)
        assert voltages.min() == pytest.approx(-1.0)

    def test_step(self):
        from ftj import generate_step
        times, voltages = generate_step(1.5, 1e-6, n_points=11, t_start=1e-6)

        assert times[0] == 1e-6
        assert times[-1] == pytest.approx(2e-6)
        assert np.all(voltages == 1.5)

    def test_pulse_train(self):
        from ftj import generate_pulse_train
        train = generate_pulse_train([1.5, -1.5], 1e-6, samples_per_pulse=10, V_read=0.1)

        assert len(train) == 23
        assert (train["stage"] == "read").sum() == 2
        assert (train["stage"] == "write").sum() == 20
        assert np.all(np.diff(train["time"].values) > 0)
        assert train["V"].iloc[0] == 0.0

    def test_run_transient_shape_mismatch(self):
        from ftj import FTJDevice, get_baseline_params, run_transient
        with pytest.raises(ValueError):
            run_transient(FTJDevice(get_baseline_params()), np.zeros(3), np.zeros(4))

    def test_run_transient_empty(self):
        from ftj import FTJDevice, get_baseline_params, run_transient
        with pytest.raises(ValueError):
            run_transient(FTJDevice(get_baseline_params()), np.array([]), np.array([]))

    def test_pulse_switching(self):
        from ftj import run_pulse_switching, get_baseline_params, get_fast_simulation_config
        df = run_pulse_switching(get_baseline_params(), get_fast_simulation_config())

        reads = df[df["stage"] == "read"]
        assert len(reads) == 2
        assert reads["order_parameter"].iloc[0] < 0.01
        assert reads["order_parameter"].iloc[1] > 0.99
        for col in ("time", "V", "I", "I_high", "I_low", "order_parameter", "phase"):
            assert col in df.columns

    def test_iv_sweep_shows_hysteresis(self):
        from ftj import (run_iv_sweep, get_baseline_params, get_fast_simulation_config,
                         extract_coercive_voltages)
        df = run_iv_sweep(get_baseline_params(), get_fast_simulation_config())
        Vc_pos, Vc_neg = extract_coercive_voltages(df)

        assert "direction" in df.columns
        assert 0.5 < Vc_pos < 1.5
        assert -1.5 < Vc_neg < -0.5

    def test_static_iv(self):
        from ftj import static_iv, get_baseline_params
        df = static_iv(get_baseline_params(), np.linspace(-1, 1, 21))

        assert len(df) == 21
        assert set(df["regime_low"]) == {"direct", "fn_forward", "fn_reverse"}
        assert df.loc[df["V"].abs() < 0.25, "regime_high"].eq("direct").all()


class TestPostprocess:
    """Tests for post-processing module."""

    def test_extract_ter(self):
        from ftj import extract_ter
        ratio, percent = extract_ter(1e-6, 1e-8)

        assert ratio == pytest.approx(100.0)
        assert percent == pytest.approx(9900.0)
        assert extract_ter(1e-6, 0.0)[0] == np.inf

    def test_extract_coercive_voltages(self):
        from ftj import extract_coercive_voltages
        df = pd.DataFrame({
            "V": [0.0, 0.5, 1.0, 0.0, -0.5, -1.0, 0.0],
            "order_parameter": [1.0, 1.0, 0.0, 0.0, 0.0, 1.0, 1.0],
        })
        Vc_pos, Vc_neg = extract_coercive_voltages(df)

        assert Vc_pos == pytest.approx(0.75)
        assert Vc_neg == pytest.approx(-0.75)

    def test_extract_metrics(self):
        from ftj import (run_pulse_switching, get_baseline_params,
                         get_fast_simulation_config, extract_metrics)
        config = get_fast_simulation_config()
        df = run_pulse_switching(get_baseline_params(), config)
        metrics = extract_metrics(df)

        assert metrics.TER_ratio > 10
        assert metrics.I_on > metrics.I_off
        assert 0 < metrics.t_switch_high < config.pulse_width
        assert 0 < metrics.t_switch_low < config.pulse_width
        assert metrics.Vc_positive is None

    def test_metrics_to_dict(self):
        from ftj import FTJMetrics
        metrics = FTJMetrics(I_on=1e-7, I_off=1e-10, TER_ratio=1000.0, TER_percent=99900.0)
        d = metrics.to_dict()

        assert d["TER_ratio"] == 1000.0
        assert d["t_switch_high_s"] is None

    def test_summary_report(self):
        from ftj import FTJMetrics, generate_summary_report
        df = pd.DataFrame({"V": [-1.5, 0.1, 1.5]})
        metrics = FTJMetrics(I_on=1e-7, I_off=1e-10, TER_ratio=1000.0, TER_percent=99900.0)
        report = generate_summary_report(df, metrics)

        assert "TER ratio" in report
        assert "n/a" in report


class TestParallel:
    """Tests for the sweep runner."""

    def test_sequential_sweep_keeps_order(self):
        from ftj.parallel import run_sweep_sequential
        results = run_sweep_sequential(_square, [3, 1, 2])
        assert [r["square"] for r in results] == [9, 1, 4]

    def test_failed_point_reported(self):
        from ftj.parallel import run_sweep_sequential
        results = run_sweep_sequential(_square, [2, -1])

        assert results[0]["success"] is True
        assert results[1]["success"] is False
        assert results[1]["param_value"] == -1

    def test_worker_count_at_least_one(self):
        from ftj.parallel import ParallelConfig
        assert ParallelConfig(n_workers=0, show_progress=False).n_workers == 1

    def test_worker_failure_recorded_in_order(self, monkeypatch):
        from concurrent.futures import ThreadPoolExecutor
        import ftj.parallel as parallel
        from ftj.parallel import ParallelSweepRunner, ParallelConfig

        original = parallel._run_single_simulation

        def crashing(sweep_func, param_value, sweep_kwargs):
            if param_value == 2:
                raise RuntimeError("worker died")
            return original(sweep_func, param_value, sweep_kwargs)

        monkeypatch.setattr(parallel, "ProcessPoolExecutor", ThreadPoolExecutor)
        monkeypatch.setattr(parallel, "_run_single_simulation", crashing)

        runner = ParallelSweepRunner(ParallelConfig(n_workers=2, show_progress=False))
        results = runner.run_sweep(_square, [3, 2, 1])

        assert results[0]["square"] == 9
        assert results[2]["square"] == 1
        assert results[1]["success"] is False
        assert results[1]["param_value"] == 2
        assert "worker died" in results[1]["error"]


class TestSweeps:
    """Tests for the sweep driver."""

    def test_all_sweeps_use_given_config(self, monkeypatch, tmp_path):
        from dataclasses import replace
        import simulations.run_sweeps as run_sweeps
        from ftj.config import get_fast_simulation_config

        seen = []
        original = run_sweeps.run_pulse_switching

        def recording(params, sim_config):
            seen.append(sim_config)
            return original(params, sim_config)

        monkeypatch.setattr(run_sweeps, "run_pulse_switching", recording)
        config = replace(get_fast_simulation_config(), samples_per_pulse=20)

        results = run_sweeps.run_all_sweeps(sim_config=config, parallel=False,
                                            output_dir=str(tmp_path))

        assert seen
        assert all(c.samples_per_pulse == 20 for c in seen)
        assert len(results["thickness"]) == 4
        assert (tmp_path / "data" / "processed" / "sweep_thickness.csv").exists()
        assert (tmp_path / "data" / "processed" / "sweep_amplitude.csv").exists()


class TestVisualization:
    """Tests for visualization module."""

    def test_setup_style(self):
        from ftj import setup_thesis_style
        setup_thesis_style()

    def test_plot_iv(self):
        from ftj import plot_iv
        import matplotlib.pyplot as plt

        df = pd.DataFrame({
            "V": np.linspace(-1.5, 1.5, 20),
            "I": np.exp(np.linspace(-20, -10, 20)),
            "direction": ["forward"] * 10 + ["reverse"] * 10,
        })
        fig = plot_iv(df, label="Test")

        assert fig is not None
        plt.close(fig)

    def test_plot_switching_transient(self, tmp_path):
        from ftj import plot_switching_transient, save_all_formats
        import matplotlib.pyplot as plt

        df = pd.DataFrame({
            "time": np.linspace(0, 1e-6, 10),
            "V": [1.5] * 9 + [0.1],
            "order_parameter": np.linspace(1, 0, 10),
            "stage": ["write"] * 9 + ["read"],
        })
        fig = plot_switching_transient(df)
        save_all_formats(fig, str(tmp_path / "transient"))
        plt.close(fig)

        assert (tmp_path / "transient.png").exists()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
