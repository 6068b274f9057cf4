"""
Тесты точки: координаты только для чтения, проверка индексов.
"""

import numpy as np
import pytest

from pkmeans.core.errors import IndexOutOfRange
from pkmeans.core.point import UNASSIGNED, Point


class TestPoint:

    def test_initial_state(self):
        point = Point(3, [1.0, 2.5], "alpha")

        assert point.id == 3
        assert point.dimensionality == 2
        assert point.cluster_id == UNASSIGNED
        assert point.label == "alpha"
        np.testing.assert_array_equal(point.coordinates, [1.0, 2.5])

    def test_get_value(self):
        point = Point(0, [4.0, 5.0, 6.0])
        assert point.get_value(0) == 4.0
        assert point.get_value(2) == 6.0

    @pytest.mark.parametrize("index", [3, 10, -1])
    def test_get_value_out_of_range(self, index):
        point = Point(0, [4.0, 5.0, 6.0])
        with pytest.raises(IndexOutOfRange):
            point.get_value(index)

    def test_index_error_is_builtin_index_error(self):
        with pytest.raises(IndexError):
            Point(0, [1.0]).get_value(1)

    def test_coordinates_are_read_only(self):
        source = [1.0, 2.0]
        point = Point(0, source)

        with pytest.raises(ValueError):
            point.coordinates[0] = 42.0

        # Исходный список не разделяет память с точкой
        source[0] = 100.0
        assert point.get_value(0) == 1.0

    def test_empty_label_becomes_none(self):
        assert Point(0, [1.0], "").label is None
        assert Point(0, [1.0]).label is None

    def test_copy_is_unassigned(self):
        point = Point(5, [1.0, 2.0], "p")
        point.cluster_id = 2

        clone = point.copy()

        assert clone.id == 5
        assert clone.label == "p"
        assert clone.cluster_id == UNASSIGNED
        np.testing.assert_array_equal(clone.coordinates, point.coordinates)
