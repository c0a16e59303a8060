"""
Аккумуляторы для распределённой агрегации центроидов.

CentroidAccumulated (сумма точек + их количество) образует коммутативный
моноид по покомпонентному сложению, поэтому партиции можно сливать в любом
порядке, в том числе с предварительной локальной комбинацией.
"""

from __future__ import annotations

from dataclasses import dataclass

from dkmeans.core.point import Point


@dataclass(frozen=True)
class CentroidAccumulated:
    """Ненормированная сумма ``count`` точек."""

    point_sum: Point
    count: int

    def __post_init__(self) -> None:
        if self.count < 1:
            raise ValueError("count must be >= 1")

    @classmethod
    def of(cls, point: Point) -> CentroidAccumulated:
        return cls(point, 1)

    def combine(self, other: CentroidAccumulated) -> CentroidAccumulated:
        return CentroidAccumulated(
            self.point_sum + other.point_sum, self.count + other.count
        )

    def centroid(self) -> Point:
        """Среднее накопленных точек: point_sum / count."""
        return self.point_sum / self.count


@dataclass(frozen=True)
class ClosestCentroid:
    """Назначение точки кластеру; существует только внутри одной итерации."""

    cluster_id: int
    center: CentroidAccumulated

    def combine(self, other: ClosestCentroid) -> ClosestCentroid:
        if other.cluster_id != self.cluster_id:
            raise ValueError(
                f"Cannot combine records of clusters {self.cluster_id} "
                f"and {other.cluster_id}"
            )
        return ClosestCentroid(self.cluster_id, self.center.combine(other.center))


# --- Функции для reduce_by_key (должны быть picklable) ---


def cluster_key(record: ClosestCentroid) -> int:
    return record.cluster_id


def combine_closest(a: ClosestCentroid, b: ClosestCentroid) -> ClosestCentroid:
    return a.combine(b)


def to_centroid(record: ClosestCentroid) -> tuple[int, Point]:
    """(cluster_id, новый центроид) из слитого аккумулятора."""
    return record.cluster_id, record.center.centroid()
