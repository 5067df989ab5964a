from pathlib import Path

import numpy as np
import pytest

from robustlowess.load_data import DataHandler, Point, sort_points


class TestSortPoints:
    def test_sorted_by_x_then_y(self):
        order, x, y = sort_points([(2.0, 1.0), (1.0, 3.0), (1.0, -1.0), (0.5, 9.0)])

        assert x.tolist() == [0.5, 1.0, 1.0, 2.0]
        assert y.tolist() == [9.0, -1.0, 3.0, 1.0]
        assert order.tolist() == [3, 2, 1, 0]

    def test_mixed_point_types(self):
        order, x, y = sort_points([Point(1.0, 1.0), (0.0, 2.0), np.array([2.0, 0.0])])
        assert x.tolist() == [0.0, 1.0, 2.0]
        assert y.tolist() == [2.0, 1.0, 0.0]


class TestDataHandler:
    def test_fake_file(self, tmp_path: Path, data_handler_factory):
        """Test handling of nonexistent file"""
        handler = data_handler_factory(tmp_path / "nonexistent.tsv")
        with pytest.raises(FileNotFoundError):
            handler.load_data()

    def test_empty_file(self, write_points_file, data_handler_factory):
        handler = data_handler_factory(write_points_file([]))
        assert handler.load_data() == []

    def test_reads_points(self, write_points_file, data_handler_factory):
        path = write_points_file(
            [
                "# x\ty",
                (1, 2.5),
                "",
                (0.5, -1),
                (3, 1e3),
            ]
        )
        points = data_handler_factory(path).load_data()

        assert points == [Point(1.0, 2.5), Point(0.5, -1.0), Point(3.0, 1000.0)]

    def test_selected_columns_and_delimiter(self, write_points_file, data_handler_factory):
        path = write_points_file(
            [("a", 10, "x", 1), ("b", 20, "y", 4)],
            name="points.csv",
            delimiter=",",
        )
        points = data_handler_factory(path, x_col=3, y_col=1, delimiter=",").load_data()

        assert points == [Point(1.0, 10.0), Point(4.0, 20.0)]

    def test_too_few_columns(self, write_points_file, data_handler_factory):
        path = write_points_file([(1, 2), (3,)])
        with pytest.raises(TypeError, match="line 2"):
            data_handler_factory(path).load_data()

    def test_non_numeric(self, write_points_file, data_handler_factory):
        path = write_points_file([(1, 2), (3, "abc")])
        with pytest.raises(ValueError, match="Non-numeric value at line 2"):
            data_handler_factory(path).load_data()

    def test_non_finite(self, write_points_file, data_handler_factory):
        path = write_points_file([(1, "nan")])
        with pytest.raises(ValueError, match="Non-finite value at line 1"):
            data_handler_factory(path).load_data()

    def test_negative_column(self, tmp_path: Path):
        with pytest.raises(ValueError, match="Column indices"):
            DataHandler(tmp_path / "points.tsv", x_col=-1)

    def test_write_points(self, tmp_path: Path, data_handler_factory):
        out = tmp_path / "out.tsv"
        DataHandler.write_points(out, [Point(0.0, 1.5), Point(2.0, -3.25)])

        assert out.read_text(encoding="utf-8") == "0.0\t1.5\n2.0\t-3.25\n"
        assert data_handler_factory(out).load_data() == [Point(0.0, 1.5), Point(2.0, -3.25)]

    def test_debug_output(self, write_points_file, data_handler_factory, capsys):
        path = write_points_file([(1, 2)])
        data_handler_factory(path, debug=True).load_data()
        assert "[DEBUG] Read 1 points" in capsys.readouterr().out
