from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class LowessResult:
    """Per-sample output of one smoothing run, in ascending-x order."""
    fitted: np.ndarray
    residuals: np.ndarray
    robustness_weights: np.ndarray
    window_size: int
    passes: int


def window_size(n: int, fraction: float) -> int:
    """Number of points in each local window, at least two and at most n."""
    return max(2, min(n, int(np.floor(fraction * n + 1e-7))))


def lowest(
    x: np.ndarray,
    y: np.ndarray,
    xs: float,
    nleft: int,
    nright: int,
    weights: Optional[np.ndarray] = None,
    robustness: Optional[np.ndarray] = None,
) -> Optional[float]:
    """
    Local weighted linear fit evaluated at ``xs``.

    ``x`` must be sorted ascending. The window covers ``nleft..nright``
    inclusive (0-based) but the scan continues to the right past ``nright``
    so points tied with the window edge are picked up. Tricube weights are
    multiplied by ``robustness`` when given.

    Returns None when every candidate weight is zero. When ``weights`` is
    given, the final weights of the scanned points are written into it.
    """
    n = x.shape[0]
    x_range = x[n - 1] - x[0]
    h = max(xs - x[nleft], x[nright] - xs)
    h9 = 0.999 * h
    h1 = 0.001 * h

    dist = np.abs(x[nleft:] - xs)
    # first zero weight to the right of xs ends the scan
    beyond = np.flatnonzero((dist > h9) & (x[nleft:] > xs))
    nrt = nleft + (int(beyond[0]) if beyond.size else dist.shape[0]) - 1

    sl = slice(nleft, nrt + 1)
    dist = dist[: nrt + 1 - nleft]

    w = np.zeros_like(dist)
    inside = dist <= h9
    taper = inside & (dist > h1)
    w[taper] = (1.0 - (dist[taper] / h) ** 3) ** 3
    w[inside & ~taper] = 1.0
    if robustness is not None:
        w *= robustness[sl]

    total = w.sum()
    if total <= 0:
        if weights is not None:
            weights[sl] = w
        return None

    w /= total
    if h > 0:
        xw = x[sl]
        center = np.dot(w, xw)
        spread = np.dot(w, (xw - center) ** 2)
        if spread > (0.001 * x_range) ** 2:
            # points are spread out enough to fit a slope
            w *= 1.0 + (xs - center) / spread * (xw - center)

    if weights is not None:
        weights[sl] = w

    return float(np.dot(w, y[sl]))


def residual_scale(residuals: np.ndarray) -> float:
    """Six times the median absolute residual."""
    ordered = np.sort(np.abs(residuals))
    n = ordered.shape[0]
    m1 = n // 2
    m2 = n - m1 - 1
    return float(3.0 * (ordered[m1] + ordered[m2]))


def robustness_weights(residuals: np.ndarray, scale: Optional[float] = None) -> np.ndarray:
    """
    Bisquare weights from residual magnitudes.

    Residuals at or below ``0.111 * scale`` get weight 1, those above
    ``0.999 * scale`` get weight 0, everything in between tapers as
    ``(1 - (r / scale)^2)^2``.
    """
    if scale is None:
        scale = residual_scale(residuals)
    abs_res = np.abs(residuals)
    c9 = 0.999 * scale
    c1 = 0.111 * scale

    rw = np.zeros_like(abs_res, dtype=float)
    rw[abs_res <= c1] = 1.0
    mid = (abs_res > c1) & (abs_res <= c9)
    rw[mid] = (1.0 - (abs_res[mid] / scale) ** 2) ** 2
    return rw


def _slide_window(x: np.ndarray, i: int, nleft: int, nright: int):
    """Move the window right while that brings its far edge closer to x[i]."""
    n = x.shape[0]
    while nright < n - 1:
        d1 = x[i] - x[nleft]
        d2 = x[nright + 1] - x[i]
        if d1 <= d2:
            break
        nleft += 1
        nright += 1
    return nleft, nright


def _smoothing_pass(
    x: np.ndarray,
    y: np.ndarray,
    ns: int,
    delta: float,
    fitted: np.ndarray,
    weights: np.ndarray,
    robustness: Optional[np.ndarray],
) -> int:
    """One left-to-right sweep filling ``fitted``. Returns the number of kernel fits."""
    n = x.shape[0]
    nleft, nright = 0, ns - 1
    last = -1
    i = 0
    evaluated = 0

    while True:
        nleft, nright = _slide_window(x, i, nleft, nright)

        value = lowest(x, y, x[i], nleft, nright, weights, robustness)
        fitted[i] = y[i] if value is None else value
        evaluated += 1

        if last < i - 1:
            # skipped points are interpolated between the two fits
            denom = x[i] - x[last]
            alpha = (x[last + 1:i] - x[last]) / denom
            fitted[last + 1:i] = alpha * fitted[i] + (1.0 - alpha) * fitted[last]

        last = i
        cut = x[last] + delta
        i = last + 1
        while i < n:
            if x[i] > cut:
                break
            if x[i] == x[last]:
                fitted[i] = fitted[last]
                last = i
            i += 1

        # back up one so the next fit closes the interpolation gap
        i = max(last + 1, i - 1)
        if last >= n - 1:
            return evaluated


def lowessFit(
    x: np.ndarray,
    y: np.ndarray,
    fraction: float,
    iterations: int,
    delta: float,
    debug: bool = False,
) -> LowessResult:
    """
    Robust LOWESS over samples already sorted by x (ties by y).

    Runs ``iterations + 1`` passes. Every pass after the first down-weights
    points by the bisquare of the previous pass's residuals. Points within
    ``delta`` of the last fitted x are linearly interpolated instead of
    refitted.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = x.shape[0]

    fitted = np.empty(n, float)
    robustness = np.ones(n, float)

    if n < 2:
        fitted[:] = y
        return LowessResult(
            fitted=fitted,
            residuals=np.zeros(n, float),
            robustness_weights=robustness,
            window_size=n,
            passes=0,
        )

    ns = window_size(n, fraction)
    weights = np.zeros(n, float)
    residuals = np.zeros(n, float)

    if debug:
        print(f"[DEBUG] n={n}, window size={ns}, iterations={iterations}, delta={delta}.")

    passes = 0
    for step in range(iterations + 1):
        evaluated = _smoothing_pass(
            x, y, ns, delta, fitted, weights,
            robustness if step > 0 else None,
        )
        passes += 1
        residuals = y - fitted

        if debug:
            print(f"[DEBUG] Pass {passes}: {evaluated} fits, {n - evaluated} copied or interpolated.")

        if step == iterations:
            break

        scale = residual_scale(residuals)
        robustness = robustness_weights(residuals, scale)
        if debug:
            print(
                f"[DEBUG] Pass {passes}: residual scale {scale:.6g}, "
                f"{int(np.count_nonzero(robustness == 0))} points down-weighted to zero."
            )

    return LowessResult(
        fitted=fitted,
        residuals=residuals,
        robustness_weights=robustness,
        window_size=ns,
        passes=passes,
    )


__all__ = [
    "LowessResult",
    "lowessFit",
    "lowest",
    "residual_scale",
    "robustness_weights",
    "window_size",
]
