from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Iterable, Tuple

import numpy as np
import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from robustlowess.load_data import DataHandler

OUTLIER_POINTS: Tuple[Tuple[float, float], ...] = (
    (1, 2), (2, 4), (3, 6), (4, 8), (5, 100), (6, 12), (7, 14),
)


@pytest.fixture(scope="session")
def outlier_points():
    return list(OUTLIER_POINTS)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20240611)


@pytest.fixture
def write_points_file(tmp_path: Path) -> Callable[..., Path]:
    """Write rows of values to a delimited file under ``tmp_path``."""
    def _write(rows: Iterable[Iterable], name: str = "points.tsv", delimiter: str = "\t") -> Path:
        path = tmp_path / name
        with path.open("w", encoding="utf-8") as handle:
            for row in rows:
                if isinstance(row, str):
                    handle.write(row + "\n")
                else:
                    handle.write(delimiter.join(str(v) for v in row) + "\n")
        return path

    return _write


@pytest.fixture
def data_handler_factory() -> Callable[..., DataHandler]:
    def _factory(points_path, **kwargs) -> DataHandler:
        return DataHandler(points_path=points_path, **kwargs)

    return _factory
