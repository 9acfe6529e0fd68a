"""
Visualization Utilities

Functions for plotting skew search diagnostics.
"""

from pathlib import Path
from typing import TYPE_CHECKING

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

if TYPE_CHECKING:
    from src.skew.types import AngleScoreSeries


def plot_score_series(
    series: "AngleScoreSeries",
    title: str,
    save_path: Path,
    connect: bool = True,
) -> Path:
    """
    Plot scores versus shear angle and save the figure.

    Args:
        series: Evaluated angle/score samples.
        title: Figure title.
        save_path: PNG file to write.
        connect: Draw lines between samples. Use False for refinement
            series, whose angles are not ordered.

    Returns:
        Path of the written figure.
    """
    save_path = Path(save_path)
    save_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(1, 1, figsize=(8, 5))
    if connect:
        ax.plot(series.angles, series.scores, "b-", linewidth=1)
    ax.plot(series.angles, series.scores, "ro", markersize=4)

    ax.set_title(title)
    ax.set_xlabel("angle (deg)")
    ax.set_ylabel("score")
    ax.grid(True, alpha=0.3)

    fig.savefig(save_path, bbox_inches="tight", dpi=150)
    plt.close(fig)
    return save_path
