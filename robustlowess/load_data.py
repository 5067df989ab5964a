from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Integral
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

import numpy as np


@dataclass(frozen=True)
class Point:
    x: float
    y: float


def _coerce_point(point, idx: int) -> Tuple[float, float]:
    """Pull ``(x, y)`` out of a Point, anything with ``.x``/``.y``, or a pair."""
    try:
        if hasattr(point, "x") and hasattr(point, "y"):
            return float(point.x), float(point.y)
        px, py = point
        return float(px), float(py)
    except (TypeError, ValueError):
        raise TypeError(
            f"Point {idx} must be an (x, y) pair of numbers or expose .x and .y, got {point!r}"
        ) from None


def validate_points(x: np.ndarray, y: np.ndarray) -> None:
    """
    Reject samples the smoother cannot handle.

    Raises:
        ValueError: if the sample is empty, the coordinate arrays differ in
            length, or any coordinate is NaN or infinite.
    """
    if x.shape != y.shape:
        raise ValueError(
            f"x and y must have the same length, got {x.shape[0]} and {y.shape[0]}."
        )
    if x.size == 0:
        raise ValueError("At least one point is required for smoothing.")

    for label, values in (("x", x), ("y", y)):
        bad = np.flatnonzero(~np.isfinite(values))
        if bad.size:
            raise ValueError(
                f"Non-finite {label} value at index {int(bad[0])}: {values[bad[0]]!r}"
            )


def validate_parameters(fraction: float, iterations: int, delta: float) -> None:
    """Check smoothing parameters before any work is done."""
    if not math.isfinite(fraction) or not (0.0 < fraction <= 1.0):
        raise ValueError(f"fraction must be in (0, 1], got {fraction!r}.")
    if isinstance(iterations, bool) or not isinstance(iterations, Integral):
        raise TypeError(f"iterations must be an integer, got {iterations!r}.")
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0, got {iterations}.")
    if not math.isfinite(delta) or delta < 0:
        raise ValueError(f"delta must be a finite value >= 0, got {delta!r}.")


def sort_points(points: Sequence) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Order points by x ascending, ties broken by y ascending.

    Returns:
        (order, x, y) where ``order[k]`` is the input index of the k-th
        sorted point and ``x``/``y`` are the sorted coordinate arrays.
    """
    pairs = [_coerce_point(p, i) for i, p in enumerate(points)]
    if pairs:
        raw_x, raw_y = (np.asarray(col, dtype=float) for col in zip(*pairs))
    else:
        raw_x = raw_y = np.asarray([], dtype=float)

    return sort_arrays(raw_x, raw_y)


def sort_arrays(x, y) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Same ordering as :func:`sort_points` for parallel coordinate sequences."""
    x = np.asarray(x, dtype=float).ravel()
    y = np.asarray(y, dtype=float).ravel()
    validate_points(x, y)

    # lexsort is stable and sorts on the last key first
    order = np.lexsort((y, x))
    return order, x[order], y[order]


class DataHandler:
    """Reader and writer for delimited point files."""
    def __init__(
        self,
        points_path: Path | str,
        x_col: int = 0,
        y_col: int = 1,
        delimiter: str = "\t",
        debug: bool = False,
    ) -> None:
        self.points_path = Path(points_path)
        self.x_col = x_col
        self.y_col = y_col
        self.delimiter = delimiter
        self.debug = debug

        if x_col < 0 or y_col < 0:
            raise ValueError(f"Column indices must be >= 0, got x_col={x_col}, y_col={y_col}.")

        if debug:
            print(f"[DEBUG] Points path: {self.points_path}...")

    def load_data(self) -> List[Point]:
        """
        Read one point per line. Blank lines and ``#`` comments are skipped.

        Raises:
            FileNotFoundError: if the points file does not exist.
            TypeError: if a line has fewer columns than requested.
            ValueError: if a value is not a finite number.
        """
        if not self.points_path.exists():
            raise FileNotFoundError(f"File not found: {self.points_path}")

        min_cols = max(self.x_col, self.y_col) + 1
        points: List[Point] = []

        with self.points_path.open("r", encoding="utf-8") as fh:
            for line_no, line in enumerate(fh, start=1):
                if not line.strip() or line.lstrip().startswith("#"):
                    continue
                cols = line.rstrip("\n").split(self.delimiter)
                if len(cols) < min_cols:
                    raise TypeError(
                        f"Insufficient columns at line {line_no} in {self.points_path}. "
                        f"Expected ≥{min_cols}."
                    )

                try:
                    px = float(cols[self.x_col])
                    py = float(cols[self.y_col])
                except ValueError:
                    raise ValueError(
                        f"Non-numeric value at line {line_no} in {self.points_path!s}: "
                        f"{cols[self.x_col]!r}, {cols[self.y_col]!r}"
                    ) from None

                if not (math.isfinite(px) and math.isfinite(py)):
                    raise ValueError(
                        f"Non-finite value at line {line_no} in {self.points_path!s}: ({px}, {py})"
                    )
                points.append(Point(px, py))

        if self.debug:
            print(f"[DEBUG] Read {len(points)} points from {self.points_path}.")

        return points

    @staticmethod
    def write_points(output_path: Path | str, points: Iterable[Point]) -> None:
        """Write ``x<TAB>y`` lines."""
        output_path = Path(output_path)
        with output_path.open("w", encoding="utf-8") as handle:
            handle.writelines(f"{p.x}\t{p.y}\n" for p in points)


__all__ = [
    "DataHandler",
    "Point",
    "sort_arrays",
    "sort_points",
    "validate_parameters",
    "validate_points",
]
