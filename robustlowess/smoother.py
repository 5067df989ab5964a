from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .load_data import Point, sort_arrays, sort_points, validate_parameters
from .lowess_smooth import LowessResult, lowessFit


DEFAULT_FRACTION = 2.0 / 3.0
DEFAULT_ITERATIONS = 3


@dataclass
class SmoothedArrays:
    """Sorted coordinates plus the smoother output and the sort permutation."""
    x: np.ndarray
    y: np.ndarray
    order: np.ndarray
    result: LowessResult

    def in_input_order(self, values: np.ndarray) -> np.ndarray:
        """Scatter a sorted-order array back to the caller's input order."""
        out = np.empty_like(values)
        out[self.order] = values
        return out


def smooth_arrays(
    x: Sequence[float],
    y: Sequence[float],
    fraction: float = DEFAULT_FRACTION,
    iterations: int = DEFAULT_ITERATIONS,
    delta: float = 0.0,
    debug: bool = False,
) -> SmoothedArrays:
    """Validate, sort and smooth parallel coordinate sequences."""
    validate_parameters(fraction, iterations, delta)
    order, xs, ys = sort_arrays(x, y)
    result = lowessFit(xs, ys, fraction, iterations, delta, debug=debug)
    return SmoothedArrays(x=xs, y=ys, order=order, result=result)


def smooth(
    points: Sequence,
    fraction: float = DEFAULT_FRACTION,
    iterations: int = DEFAULT_ITERATIONS,
    delta: float = 0.0,
    return_sorted: bool = True,
    debug: bool = False,
) -> List[Point]:
    """
    Robust LOWESS smoothing of a scatter of points.

    Args:
        points: ``Point`` objects, ``(x, y)`` pairs, or anything exposing
            ``.x`` and ``.y``.
        fraction: share of the points used in each local fit, in (0, 1].
        iterations: robustness passes after the initial fit. 0 disables
            outlier down-weighting.
        delta: x-distance within which points are linearly interpolated
            rather than refitted. 0 fits every point.
        return_sorted: if True, results are in ascending-x order (ties by y).
            If False, result ``k`` corresponds to input point ``k``.

    Returns:
        One ``Point`` per input point carrying the input x and fitted y.

    Raises:
        ValueError: on empty input, non-finite coordinates or out-of-range
            parameters.
        TypeError: on non-integer ``iterations`` or unrecognised points.
    """
    validate_parameters(fraction, iterations, delta)
    order, x, y = sort_points(points)
    result = lowessFit(x, y, fraction, iterations, delta, debug=debug)

    smoothed = [Point(float(px), float(py)) for px, py in zip(x, result.fitted)]
    if return_sorted:
        return smoothed

    return [smoothed[k] for k in np.argsort(order)]


__all__ = [
    "DEFAULT_FRACTION",
    "DEFAULT_ITERATIONS",
    "SmoothedArrays",
    "smooth",
    "smooth_arrays",
]
