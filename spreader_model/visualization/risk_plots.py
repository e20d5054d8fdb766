"""
Risk profile figure: one horizontal bar per person, highest risk on top,
coloured by risk band with the two thresholds drawn as guides.
"""
from pathlib import Path
from typing import List, Union

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from ..analysis.classifier import ReportLine, RiskBand
from ..config import CLASSIFIER_CONFIG, ClassifierConfig
from ..errors import OutputFileError
from .palette import LEGEND_LABELS, PALETTE, get_band_color


def plot_risk_profile(lines: List[ReportLine], output_path: Union[str, Path],
                      config: ClassifierConfig = CLASSIFIER_CONFIG) -> Path:
    """
    Save the risk profile for already-classified report lines.

    Non-finite probabilities are drawn at the right edge of the axis and
    marked with their value.
    """
    output_path = Path(output_path)
    labels = [f"{line.name} ({line.id})" for line in lines]
    values = np.array([line.probability for line in lines], dtype=float)
    finite = np.isfinite(values)
    upper = max(1.0, float(values[finite].max()) if finite.any() else 1.0) * 1.05
    drawn = np.where(finite, values, upper)

    height = max(2.5, 0.35 * len(lines) + 1.2)
    fig, ax = plt.subplots(figsize=(8, height))

    # Quarantine zone between the two thresholds
    ax.axvspan(config.QUARANTINE_THRESHOLD, config.HOSPITALIZATION_THRESHOLD,
               color=PALETTE["fill"], alpha=0.25, linewidth=0, zorder=0)

    positions = np.arange(len(lines))[::-1]
    colors = [get_band_color(line.band.value) for line in lines]
    ax.barh(positions, drawn, color=colors, edgecolor=PALETTE["baseline"], linewidth=0.4)

    for pos, value, is_finite in zip(positions, values, finite):
        if not is_finite:
            ax.text(upper, pos, f" {value}", va="center", fontsize=8, color=PALETTE["baseline"])

    for threshold in (config.QUARANTINE_THRESHOLD, config.HOSPITALIZATION_THRESHOLD):
        ax.axvline(threshold, color=PALETTE["baseline"], linestyle="--", linewidth=0.8, alpha=0.6)

    handles = [
        plt.Rectangle((0, 0), 1, 1, color=get_band_color(band.value))
        for band in RiskBand
    ]
    ax.legend(handles, [LEGEND_LABELS[band.value] for band in RiskBand],
              frameon=False, loc="lower right", fontsize=8)

    ax.set_yticks(positions)
    ax.set_yticklabels(labels, fontsize=8)
    ax.set_xlim(0, upper)
    ax.set_xlabel("Infection probability")
    ax.set_title("Infection Risk by Person")
    ax.grid(True, axis="x", alpha=0.2, linewidth=0.6)
    fig.tight_layout()

    try:
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
    except OSError as e:
        raise OutputFileError(f"Cannot write figure to {output_path}: {e}") from e
    finally:
        plt.close(fig)
    return output_path
