from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Tuple, Union

from dkmeans.core.classifier import Classifier
from dkmeans.core.point import Point
from dkmeans.errors import DimensionMismatchError, EmptyCentroidsError

if TYPE_CHECKING:
    from dkmeans.dataflow.dataset import Dataset

Points = Union["Dataset[Point]", Iterable[Point]]


def _classify_pairs(
    classifier: Classifier, points: List[Point]
) -> List[Tuple[Point, int]]:
    return list(zip(points, classifier.classify_partition(points)))


def _as_dataset(points: Points) -> "Dataset[Point]":
    """Произвольную коллекцию точек оборачиваем в однопартиционный датасет."""
    from dkmeans.dataflow.context import Context
    from dkmeans.dataflow.dataset import Dataset

    if isinstance(points, Dataset):
        return points
    return Context().parallelize(points, num_partitions=1)


@dataclass(frozen=True)
class KMeansModel:
    """
    Результат алгоритма Ллойда: центроиды в порядке cluster_id и метаданные.

    num_clusters хранит запрошенное число кластеров, даже если часть из них
    исчезла по ходу итераций (тогда len(centroids) < num_clusters).
    Модель неизменяема, все методы классификации без побочных эффектов.
    """

    dimensions: int
    num_clusters: int
    iterations: int
    centroids: Tuple[Point, ...]
    _classifier: Classifier | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "centroids", tuple(self.centroids))
        for c in self.centroids:
            if c.dimensions != self.dimensions:
                raise DimensionMismatchError(self.dimensions, c.dimensions)
        if self.centroids:
            object.__setattr__(self, "_classifier", Classifier(self.centroids))

    @property
    def classifier(self) -> Classifier:
        if self._classifier is None:
            raise EmptyCentroidsError()
        return self._classifier

    # --- Классификация ---

    def classify(self, point: Point) -> int:
        """Ближайший кластер для точки."""
        return self.classifier.classify(point)

    def classify_all(self, points: Points) -> "Dataset[int]":
        """Датасет идентификаторов кластеров для всех точек."""
        return _as_dataset(points).map_partitions(self.classifier.classify_partition)

    def classify_pairs(self, points: Points) -> "Dataset[Tuple[Point, int]]":
        """Датасет пар (точка, cluster_id)."""
        task = partial(_classify_pairs, self.classifier)
        return _as_dataset(points).map_partitions(task)

    def compute_cost(self, point: Point) -> float:
        """Квадрат расстояния точки до ближайшего центроида."""
        return self.classifier.compute_cost(point)

    def compute_total_cost(self, points: Points) -> float:
        """Инерция: сумма квадратов расстояний до ближайших центроидов."""
        return _as_dataset(points).map_partitions(self.classifier.cost_partition).sum()

    # --- Сериализация ---

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dimensions": self.dimensions,
            "num_clusters": self.num_clusters,
            "iterations": self.iterations,
            "centroids": [list(c) for c in self.centroids],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> KMeansModel:
        return cls(
            dimensions=int(data["dimensions"]),
            num_clusters=int(data["num_clusters"]),
            iterations=int(data["iterations"]),
            centroids=tuple(Point(c) for c in data["centroids"]),
        )
