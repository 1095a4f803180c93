"""
FTJ Compact Model
=================
Visualization and plotting utilities.
"""

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from typing import List, Optional
from pathlib import Path


# =============================================================================
# PLOT STYLE CONFIGURATION
# =============================================================================

def setup_thesis_style():
    """Configure matplotlib for publication-quality figures."""
    plt.style.use('seaborn-v0_8-paper')
    plt.rcParams.update({
        'font.size': 12,
        'font.family': 'serif',
        'axes.labelsize': 14,
        'axes.titlesize': 16,
        'legend.fontsize': 11,
        'xtick.labelsize': 12,
        'ytick.labelsize': 12,
        'lines.linewidth': 2,
        'lines.markersize': 8,
        'figure.figsize': (8, 6),
        'figure.dpi': 150,
        'savefig.dpi': 300,
        'savefig.bbox': 'tight',
    })


# =============================================================================
# I-V PLOTS
# =============================================================================

def plot_iv(df: pd.DataFrame,
            label: str = "FTJ",
            title: str = "I-V Hysteresis",
            save_path: Optional[str] = None,
            show_hysteresis: bool = True) -> plt.Figure:
    """
    Plot |I|-V on a log scale, split into sweep directions when available.

    Args:
        df: DataFrame with V and I columns (and optionally direction)
        label: Legend label
        title: Plot title
        save_path: Path to save figure (if provided)
        show_hysteresis: Whether to show forward/reverse separately

    Returns:
        matplotlib Figure object
    """
    setup_thesis_style()
    fig, ax = plt.subplots()

    if show_hysteresis and "direction" in df.columns:
        fwd = df[df["direction"] == "forward"]
        rev = df[df["direction"] == "reverse"]

        ax.semilogy(fwd["V"], np.abs(fwd["I"]), 'b.',
                    label=f"{label} (forward)", markersize=4)
        ax.semilogy(rev["V"], np.abs(rev["I"]), 'r.',
                    label=f"{label} (reverse)", markersize=4)
    else:
        ax.semilogy(df["V"], np.abs(df["I"]), 'b-', label=label, linewidth=2)

    ax.set_xlabel("Voltage $V_b$ (V)")
    ax.set_ylabel("Current $|I|$ (A)")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, which='both', alpha=0.3)

    if save_path:
        fig.savefig(save_path)
    return fig


def plot_state_iv(df: pd.DataFrame,
                  title: str = "Pure-State I-V",
                  save_path: Optional[str] = None) -> plt.Figure:
    """
    Plot the static I-V of both resistance states with regime onsets marked.

    Args:
        df: DataFrame from TunnelingCurrentModel.iv_curve

    Returns:
        matplotlib Figure
    """
    setup_thesis_style()
    fig, ax = plt.subplots()

    ax.semilogy(df["V"], np.abs(df["I_low"]), 'g-', label="LRS")
    ax.semilogy(df["V"], np.abs(df["I_high"]), 'm-', label="HRS")

    for col, color in (("regime_high", 'm'), ("regime_low", 'g')):
        changes = df[col].ne(df[col].shift()) & (df.index > 0)
        for v in df.loc[changes, "V"]:
            ax.axvline(x=v, color=color, linestyle=':', alpha=0.6)

    ax.set_xlabel("Voltage $V_b$ (V)")
    ax.set_ylabel("Current $|I|$ (A)")
    ax.set_title(title)
    ax.legend()
    ax.grid(True, which='both', alpha=0.3)

    if save_path:
        fig.savefig(save_path)
    return fig


# =============================================================================
# SWITCHING PLOTS
# =============================================================================

def plot_order_parameter(df: pd.DataFrame,
                         title: str = "Order Parameter Hysteresis",
                         save_path: Optional[str] = None) -> plt.Figure:
    """
    Plot the low-resistance fraction against voltage.

    Returns:
        matplotlib Figure
    """
    setup_thesis_style()
    fig, ax = plt.subplots()

    ax.plot(df["V"], df["order_parameter"], 'b-', linewidth=2)
    ax.axhline(y=0.5, color='k', linestyle=':', linewidth=0.8)
    ax.axvline(x=0, color='k', linestyle='-', linewidth=0.8)

    ax.set_xlabel("Voltage $V_b$ (V)")
    ax.set_ylabel("LRS fraction $s$")
    ax.set_ylim(-0.05, 1.05)
    ax.set_title(title)
    ax.grid(True, alpha=0.3)

    if save_path:
        fig.savefig(save_path)
    return fig


def plot_switching_transient(df: pd.DataFrame,
                             title: str = "Pulse Switching",
                             save_path: Optional[str] = None) -> plt.Figure:
    """
    Two-panel transient: applied voltage on top, order parameter below.

    Returns:
        matplotlib Figure
    """
    setup_thesis_style()
    fig, (ax_v, ax_s) = plt.subplots(2, 1, sharex=True, figsize=(9, 7))

    t_us = df["time"].values * 1e6
    ax_v.plot(t_us, df["V"], 'k-', linewidth=1.5)
    ax_v.set_ylabel("$V_b$ (V)")
    ax_v.grid(True, alpha=0.3)
    ax_v.set_title(title)

    ax_s.plot(t_us, df["order_parameter"], 'b-', linewidth=2)
    if "stage" in df.columns:
        reads = df[df["stage"] == "read"]
        ax_s.plot(reads["time"].values * 1e6, reads["order_parameter"], 'ro',
                  label="read")
        ax_s.legend()
    ax_s.set_xlabel("Time (µs)")
    ax_s.set_ylabel("LRS fraction $s$")
    ax_s.set_ylim(-0.05, 1.05)
    ax_s.grid(True, alpha=0.3)

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path)
    return fig


def plot_ter_vs_parameter(values: List[float], ter: List[float],
                          xlabel: str = "Barrier thickness (unit cells)",
                          title: str = "Electroresistance",
                          save_path: Optional[str] = None) -> plt.Figure:
    """
    Plot TER ratio against a swept parameter.

    Returns:
        matplotlib Figure
    """
    setup_thesis_style()
    fig, ax = plt.subplots()

    ax.semilogy(values, ter, 'bo-', markersize=8, linewidth=2)
    ax.set_xlabel(xlabel)
    ax.set_ylabel("TER ratio $I_{on}/I_{off}$")
    ax.set_title(title)
    ax.grid(True, which='both', alpha=0.3)

    if save_path:
        fig.savefig(save_path)
    return fig


def save_all_formats(fig: plt.Figure, base_path: str):
    """Save figure in multiple formats (PNG, PDF, SVG)."""
    base = Path(base_path).with_suffix('')
    fig.savefig(f"{base}.png", dpi=300, bbox_inches='tight')
    fig.savefig(f"{base}.pdf", bbox_inches='tight')
    fig.savefig(f"{base}.svg", bbox_inches='tight')
    print(f"Saved: {base}.png, .pdf, .svg")
