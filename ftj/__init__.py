"""
FTJ Compact Model
=================

Behavioral model of a two-terminal ferroelectric tunnel junction: direct
and Fowler-Nordheim tunneling currents of the two polarization states,
blended by a domain fraction that evolves through nucleation and
domain-wall propagation.

Version: 1.0.0
"""

# Configuration
from .config import (
    ConfigurationError,
    JunctionParameters,
    SimulationConfig,
    ResistanceState,
    SweepDirection,
    UNIT_CELL_THICKNESS,
    get_baseline_params,
    get_thickness_params,
    get_params,
    load_params_with_overrides,
    get_fast_simulation_config,
    get_accurate_config,
)

# Fitting table
from .fitting import (
    FN_FITTING_DB,
    SUPPORTED_UNIT_CELLS,
    FowlerNordheimFactors,
    resolve_unit_cells,
    get_fitting_factors,
    list_supported_thicknesses,
)

# Tunneling physics
from .physics import (
    DerivedCoefficients,
    StateCoefficients,
    TunnelingCurrentModel,
    TunnelingRegime,
    direct_tunneling_current,
    fowler_nordheim_current,
    select_regime,
    calibrate_fn_factors,
    continuous_fn_factors,
    Q_E,
    K_B,
    HBAR,
    M0,
)

# Switching kinetics
from .kinetics import (
    FRACTION_FLOOR,
    DomainState,
    KineticPhase,
    SwitchDirection,
    SwitchingRates,
    advance,
    kai_fraction,
)

# Device
from .device import (
    FTJDevice,
    EvaluationResult,
    ElectricalState,
)

# Transient runs
from .transient import (
    generate_voltage_sweep,
    generate_step,
    generate_pulse_train,
    run_transient,
    run_iv_sweep,
    run_pulse_switching,
    static_iv,
)

# Post-processing
from .postprocess import (
    FTJMetrics,
    extract_metrics,
    extract_ter,
    extract_read_currents,
    extract_coercive_voltages,
    extract_switching_time,
    generate_summary_report,
)

# Visualization
from .visualization import (
    setup_thesis_style,
    plot_iv,
    plot_state_iv,
    plot_order_parameter,
    plot_switching_transient,
    plot_ter_vs_parameter,
    save_all_formats,
)


__version__ = "1.0.0"

__all__ = [
    # Config
    "ConfigurationError",
    "JunctionParameters",
    "SimulationConfig",
    "ResistanceState",
    "SweepDirection",
    "UNIT_CELL_THICKNESS",
    "get_baseline_params",
    "get_thickness_params",
    "get_params",
    "load_params_with_overrides",
    "get_fast_simulation_config",
    "get_accurate_config",

    # Fitting
    "FN_FITTING_DB",
    "SUPPORTED_UNIT_CELLS",
    "FowlerNordheimFactors",
    "resolve_unit_cells",
    "get_fitting_factors",
    "list_supported_thicknesses",

    # Physics
    "DerivedCoefficients",
    "StateCoefficients",
    "TunnelingCurrentModel",
    "TunnelingRegime",
    "direct_tunneling_current",
    "fowler_nordheim_current",
    "select_regime",
    "calibrate_fn_factors",
    "continuous_fn_factors",
    "Q_E",
    "K_B",
    "HBAR",
    "M0",

    # Kinetics
    "FRACTION_FLOOR",
    "DomainState",
    "KineticPhase",
    "SwitchDirection",
    "SwitchingRates",
    "advance",
    "kai_fraction",

    # Device
    "FTJDevice",
    "EvaluationResult",
    "ElectricalState",

    # Transient
    "generate_voltage_sweep",
    "generate_step",
    "generate_pulse_train",
    "run_transient",
    "run_iv_sweep",
    "run_pulse_switching",
    "static_iv",

    # Postprocess
    "FTJMetrics",
    "extract_metrics",
    "extract_ter",
    "extract_read_currents",
    "extract_coercive_voltages",
    "extract_switching_time",
    "generate_summary_report",

    # Visualization
    "setup_thesis_style",
    "plot_iv",
    "plot_state_iv",
    "plot_order_parameter",
    "plot_switching_transient",
    "plot_ter_vs_parameter",
    "save_all_formats",
]
