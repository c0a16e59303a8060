"""
Тесты значения Point.
"""

import pickle

import numpy as np
import pytest

from dkmeans.core.point import Point
from dkmeans.errors import DimensionMismatchError


class TestPoint:
    """Арифметика, расстояние и неизменяемость точки."""

    def test_dimensions(self):
        p = Point([1.0, 2.0, 3.0])
        assert p.dimensions == 3
        assert len(p) == 3
        assert list(p) == [1.0, 2.0, 3.0]

    def test_add(self):
        assert Point([1, 2]) + Point([3, 4]) == Point([4, 6])

    def test_divide(self):
        assert Point([3, 6]) / 3 == Point([1, 2])

    def test_distance_square(self):
        assert Point([0, 0]).distance_square(Point([3, 4])) == pytest.approx(25.0)

    def test_dimension_mismatch(self):
        """Сложение и расстояние требуют одинаковой размерности."""
        with pytest.raises(DimensionMismatchError):
            Point([1, 2]) + Point([1, 2, 3])
        with pytest.raises(DimensionMismatchError):
            Point([1, 2]).distance_square(Point([1]))

    def test_immutable(self):
        """Координаты нельзя изменить, исходный массив не разделяется."""
        source = np.array([1.0, 2.0])
        p = Point(source)
        source[0] = 100.0
        assert p[0] == 1.0
        with pytest.raises(ValueError):
            p.coords[0] = 5.0

    def test_empty_point_rejected(self):
        with pytest.raises(ValueError):
            Point([])

    def test_equality_and_hash(self):
        assert Point([1, 2]) == Point([1.0, 2.0])
        assert Point([1, 2]) != Point([2, 1])
        assert len({Point([1, 2]), Point([1.0, 2.0])}) == 1

    def test_pickle(self):
        """Точки передаются между процессами."""
        p = Point([0.5, -1.5])
        restored = pickle.loads(pickle.dumps(p))
        assert restored == p
        assert not restored.coords.flags.writeable
