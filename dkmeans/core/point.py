"""
Точка D-мерного пространства.

Неизменяемая обёртка над одномерным массивом float64. Размерность
определяется при создании; все точки и центроиды одного запуска обязаны
иметь одинаковую размерность.
"""

from __future__ import annotations

from typing import Any, Iterable, Iterator

import numpy as np

from dkmeans.errors import DimensionMismatchError


class Point:
    """Неизменяемый вектор вещественных чисел."""

    __slots__ = ("_coords",)

    def __init__(self, coords: Iterable[float] | np.ndarray) -> None:
        arr = np.array(coords, dtype=np.float64)
        if arr.ndim != 1:
            raise ValueError(f"Point expects a 1-D sequence, got shape {arr.shape}")
        if arr.size == 0:
            raise ValueError("Point must have at least one coordinate")
        arr.setflags(write=False)
        self._coords = arr

    @property
    def coords(self) -> np.ndarray:
        """Координаты (только для чтения)."""
        return self._coords

    @property
    def dimensions(self) -> int:
        return int(self._coords.shape[0])

    def _check_same_dimensions(self, other: Point) -> None:
        if other.dimensions != self.dimensions:
            raise DimensionMismatchError(self.dimensions, other.dimensions)

    def __add__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        self._check_same_dimensions(other)
        return Point(self._coords + other._coords)

    def __truediv__(self, scalar: float) -> Point:
        return Point(self._coords / float(scalar))

    def distance_square(self, other: Point) -> float:
        """Квадрат евклидова расстояния до другой точки той же размерности."""
        self._check_same_dimensions(other)
        diff = self._coords - other._coords
        return float(np.dot(diff, diff))

    def __len__(self) -> int:
        return self.dimensions

    def __iter__(self) -> Iterator[float]:
        return iter(self._coords.tolist())

    def __getitem__(self, i: int) -> float:
        return float(self._coords[i])

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return bool(np.array_equal(self._coords, other._coords))

    def __hash__(self) -> int:
        return hash(tuple(self._coords.tolist()))

    def __repr__(self) -> str:
        return f"Point({self._coords.tolist()})"

    # pickle: __slots__ без __dict__
    def __getstate__(self) -> list:
        return self._coords.tolist()

    def __setstate__(self, state: list) -> None:
        arr = np.array(state, dtype=np.float64)
        arr.setflags(write=False)
        self._coords = arr
