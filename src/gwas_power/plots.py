"""Plotting utilities."""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap

from .power import PowerGrid


def _power_cmap(steps: int = 9) -> LinearSegmentedColormap:
    base = plt.get_cmap("YlOrRd")
    cmap = LinearSegmentedColormap.from_list("power", base(np.linspace(0.0, 1.0, steps)))
    return cmap.with_extremes(bad=(0.0, 0.0, 0.0, 0.0))


def _tick_labels(values: np.ndarray) -> list:
    return [f"{v:g}" for v in values]


def power_heatmap(
    grid: PowerGrid,
    xlabel: str,
    ylabel: str,
    *,
    dpi: int = 150,
    output: Path | None = None,
) -> plt.Figure:
    """Draw ``grid`` with its rows along x and its columns along y.

    Undefined cells are left blank.  The colour scale spans the defined
    values only.
    """
    n_rows, n_cols = grid.shape
    long = grid.to_long()
    # row-major records, so labels may repeat without breaking the layout
    data = np.ma.masked_invalid(long["power"].to_numpy().reshape(n_rows, n_cols)).T
    if data.count():
        vmin = float(data.min())
        vmax = float(data.max())
    else:
        vmin, vmax = 0.0, 1.0

    fig, ax = plt.subplots(
        figsize=(max(4.0, 0.6 * n_rows + 2.0), max(3.5, 0.45 * n_cols + 1.5)),
        dpi=dpi,
    )
    im = ax.imshow(
        data,
        origin="lower",
        aspect="auto",
        cmap=_power_cmap(),
        vmin=vmin,
        vmax=vmax,
        interpolation="nearest",
    )
    ax.set_xticks(range(n_rows))
    ax.set_yticks(range(n_cols))
    ax.set_xticklabels(_tick_labels(grid.rows))
    ax.set_yticklabels(_tick_labels(grid.columns))
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    for side in ("top", "right"):
        ax.spines[side].set_visible(False)
    cbar = fig.colorbar(im, ax=ax)
    cbar.set_label("Power")

    fig.tight_layout()
    if output:
        path = Path(output).expanduser().resolve()
        path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(path, bbox_inches="tight")
    return fig
