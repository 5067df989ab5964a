from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.cm import ScalarMappable
from matplotlib.colors import Normalize


def _as_array(values: Optional[Sequence[float]]) -> np.ndarray:
    if values is None:
        return np.asarray([], dtype=float)
    return np.asarray(values, dtype=float).ravel()


def lowessPlot(
    x: Sequence[float],
    y: Sequence[float],
    fitted_x: Sequence[float],
    fitted_y: Sequence[float],
    output_path: Path | str,
    robustness_weights: Optional[Sequence[float]] = None,
    title: Optional[str] = None,
) -> Path:
    """Scatter the raw samples and draw the fitted curve on top.

    When ``robustness_weights`` is given the samples are shaded by weight so
    points the robust passes ignored stand out.
    """

    x_arr = _as_array(x)
    y_arr = _as_array(y)
    fx = _as_array(fitted_x)
    fy = _as_array(fitted_y)
    if x_arr.shape != y_arr.shape or fx.shape != fy.shape:
        raise ValueError("x/y and fitted_x/fitted_y must be pairs of equal length.")

    fig, ax = plt.subplots(figsize=(10, 5))

    if robustness_weights is not None:
        rw = _as_array(robustness_weights)
        if rw.shape != x_arr.shape:
            raise ValueError("robustness_weights must have the same length as x.")
        norm = Normalize(vmin=0.0, vmax=1.0)
        cmap = plt.get_cmap("viridis")
        ax.scatter(x_arr, y_arr, c=rw, cmap=cmap, norm=norm, s=12, alpha=0.8, label="samples")
        fig.colorbar(ScalarMappable(norm=norm, cmap=cmap), ax=ax, label="robustness weight")
    else:
        ax.scatter(x_arr, y_arr, color="grey", s=12, alpha=0.6, label="samples")

    order = np.argsort(fx, kind="stable")
    ax.plot(fx[order], fy[order], color="red", linewidth=1.5, label="LOWESS")

    ax.set_xlabel("x")
    ax.set_ylabel("y")
    if title:
        ax.set_title(title)
    ax.legend(loc="best")

    output_path = Path(output_path)
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)
    return output_path


__all__ = ["lowessPlot"]
