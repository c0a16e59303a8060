# core/classifier.py
from __future__ import annotations

from typing import List, Sequence

import numpy as np

from dkmeans.core.accumulator import CentroidAccumulated, ClosestCentroid
from dkmeans.core.point import Point
from dkmeans.errors import DimensionMismatchError, EmptyCentroidsError


class Classifier:
    """
    Назначение точек ближайшему центроиду из фиксированного набора.

    Центроиды просматриваются по порядку индексов, лучший индекс меняется
    только при строго меньшем расстоянии: при равенстве побеждает меньший
    индекс. Экземпляр неизменяем и передаётся в партиции как broadcast-значение.
    """

    def __init__(self, centroids: Sequence[Point]) -> None:
        self._centroids: tuple[Point, ...] = tuple(centroids)
        if not self._centroids:
            raise EmptyCentroidsError()

        D = self._centroids[0].dimensions
        for c in self._centroids[1:]:
            if c.dimensions != D:
                raise DimensionMismatchError(D, c.dimensions)
        self._dimensions = D

        matrix = np.vstack([c.coords for c in self._centroids])
        matrix.setflags(write=False)
        self._matrix = matrix

    @property
    def centroids(self) -> tuple[Point, ...]:
        return self._centroids

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def __len__(self) -> int:
        return len(self._centroids)

    def _nearest(self, point: Point) -> tuple[int, float]:
        if point.dimensions != self._dimensions:
            raise DimensionMismatchError(self._dimensions, point.dimensions)

        min_dist = point.distance_square(self._centroids[0])
        closest_id = 0
        for i in range(1, len(self._centroids)):
            dist = point.distance_square(self._centroids[i])
            if dist < min_dist:
                min_dist = dist
                closest_id = i
        return closest_id, min_dist

    def classify(self, point: Point) -> int:
        """Индекс ближайшего центроида."""
        return self._nearest(point)[0]

    def compute_cost(self, point: Point) -> float:
        """Квадрат расстояния до ближайшего центроида."""
        return self._nearest(point)[1]

    def assign(self, point: Point) -> ClosestCentroid:
        """Запись назначения для шага агрегации: {cluster_id, {point, 1}}."""
        return ClosestCentroid(self.classify(point), CentroidAccumulated.of(point))

    # --- Векторные варианты для блока точек (N, D) ---

    def _block_distances(self, X: np.ndarray) -> np.ndarray:
        X = np.asarray(X, dtype=np.float64)
        if X.ndim != 2:
            raise ValueError(f"Expected a (N, D) block, got shape {X.shape}")
        if X.shape[1] != self._dimensions:
            raise DimensionMismatchError(self._dimensions, X.shape[1])
        # (N, K, D) → (N, K)
        diff = X[:, None, :] - self._matrix[None, :, :]
        return np.sum(diff * diff, axis=2)

    def classify_block(self, X: np.ndarray) -> np.ndarray:
        # argmin возвращает первый минимальный индекс: то же правило при равенстве
        return np.argmin(self._block_distances(X), axis=1)

    def cost_block(self, X: np.ndarray) -> np.ndarray:
        return np.min(self._block_distances(X), axis=1)

    # --- Задачи над партицией точек (для Dataset.map_partitions) ---

    def _stack(self, points: Sequence[Point]) -> np.ndarray:
        for p in points:
            if p.dimensions != self._dimensions:
                raise DimensionMismatchError(self._dimensions, p.dimensions)
        return np.vstack([p.coords for p in points])

    def assign_partition(self, points: Sequence[Point]) -> List[ClosestCentroid]:
        """Шаг назначения для целой партиции: одно векторное вычисление расстояний."""
        if not points:
            return []
        labels = self.classify_block(self._stack(points))
        return [
            ClosestCentroid(int(k), CentroidAccumulated.of(p))
            for k, p in zip(labels, points)
        ]

    def classify_partition(self, points: Sequence[Point]) -> List[int]:
        if not points:
            return []
        return [int(k) for k in self.classify_block(self._stack(points))]

    def cost_partition(self, points: Sequence[Point]) -> List[float]:
        if not points:
            return []
        return [float(c) for c in self.cost_block(self._stack(points))]


def classify(point: Point, centroids: Sequence[Point]) -> int:
    return Classifier(centroids).classify(point)


def compute_cost(point: Point, centroids: Sequence[Point]) -> float:
    return Classifier(centroids).compute_cost(point)
