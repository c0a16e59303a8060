from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional, Sequence

import numpy as np

from dkmeans.config import EmptyClusterPolicy, KMeansConfig
from dkmeans.core.accumulator import cluster_key, combine_closest, to_centroid
from dkmeans.core.classifier import Classifier
from dkmeans.core.model import KMeansModel
from dkmeans.core.point import Point
from dkmeans.errors import DimensionMismatchError
from dkmeans.metrics.timers import Timer
from dkmeans.utils.logging import format_run_prefix

if TYPE_CHECKING:
    from dkmeans.dataflow.dataset import Dataset


class KMeansLloyd:
    """
    Алгоритм Ллойда поверх распределённого датасета.

    Одна итерация:
    - broadcast: текущие центроиды собираются целиком (all_gather) и
      замораживаются в Classifier, который передаётся в каждую партицию;
    - assign: каждая партиция исходных точек классифицируется одним
      векторным вычислением и превращается в записи ClosestCentroid;
    - aggregate: reduce_by_key по cluster_id с ассоциативным слиянием;
    - recompute: новый центроид = point_sum / count.

    Выполняется ровно n_iters итераций, без проверки сходимости.
    Кластеры без точек по умолчанию исчезают (EmptyClusterPolicy.DROP),
    выжившие перенумеровываются по возрастанию прежнего cluster_id.

    Собирает тайминги по аналогии с бенчмарками:
    - t_assign_total: broadcast + назначение точек;
    - t_update_total: агрегация и пересчёт центроидов;
    - t_iter_total: сумма двух предыдущих.
    """

    def __init__(
        self,
        n_clusters: int,
        n_iters: int = 10,
        empty_cluster: EmptyClusterPolicy = EmptyClusterPolicy.DROP,
        seed: Optional[int] = None,
        track_cost: bool = False,
        logger: Any | None = None,
    ) -> None:
        if n_clusters <= 0:
            raise ValueError("n_clusters must be positive")
        if n_iters < 0:
            raise ValueError("n_iters must be non-negative")

        self.K = n_clusters
        self.n_iters = n_iters
        self.empty_cluster = EmptyClusterPolicy(empty_cluster)
        self.seed = seed
        self.track_cost = track_cost
        self.logger = logger

        self.t_assign_total: float = 0.0
        self.t_update_total: float = 0.0
        self.t_iter_total: float = 0.0
        self.n_iters_actual: int = 0

        # Инерция относительно центроидов, использованных на каждой итерации
        self.cost_history: List[float] = []
        # Сколько кластеров исчезло (или было пересеяно) на каждой итерации
        self.vanished_history: List[int] = []

    @classmethod
    def from_config(cls, config: KMeansConfig, logger: Any | None = None) -> KMeansLloyd:
        return cls(
            n_clusters=config.n_clusters,
            n_iters=config.n_iters,
            empty_cluster=config.empty_cluster,
            seed=config.seed,
            track_cost=config.track_cost,
            logger=logger,
        )

    def _log(self, msg: str) -> None:
        if self.logger:
            self.logger.info(msg)

    def _initialize(
        self,
        points: Dataset[Point],
        dimensions: int,
        initial_centroids: Optional[Sequence[Point]],
        rng: np.random.Generator,
    ) -> Dataset[Point]:
        if initial_centroids is None:
            # глобальная выборка без возвращения, не зависящая от партиций
            centroids = points.sample(self.K, seed=int(rng.integers(2**63))).cache()
        else:
            initial = [
                c if isinstance(c, Point) else Point(c) for c in initial_centroids
            ]
            if len(initial) != self.K:
                raise ValueError(
                    f"Expected {self.K} initial centroids, got {len(initial)}"
                )
            centroids = points.context.parallelize(initial)

        for c in centroids.all_gather():
            if c.dimensions != dimensions:
                raise DimensionMismatchError(dimensions, c.dimensions)
        return centroids

    def _reseed(
        self, points: Dataset[Point], missing: int, rng: np.random.Generator
    ) -> List[Point]:
        return points.sample(missing, seed=int(rng.integers(2**63))).all_gather()

    def fit(
        self,
        points: Dataset[Point],
        dimensions: int,
        initial_centroids: Optional[Sequence[Point]] = None,
    ) -> KMeansModel:
        """
        Кластеризует points и возвращает неизменяемую KMeansModel.

        initial_centroids заменяет случайную начальную выборку (ровно
        n_clusters точек размерности dimensions).
        """
        if dimensions <= 0:
            raise ValueError("dimensions must be positive")

        self.t_assign_total = 0.0
        self.t_update_total = 0.0
        self.t_iter_total = 0.0
        self.n_iters_actual = 0
        self.cost_history = []
        self.vanished_history = []

        rng = np.random.default_rng(self.seed)

        # точки читаются из материализованного хранилища на каждой итерации
        points = points.cache()
        prefix = format_run_prefix(points.size(), dimensions, self.K)

        centroids = self._initialize(points, dimensions, initial_centroids, rng)
        self._log(
            f"{prefix} Initialized {self.K} centroids over "
            f"{points.num_partitions} partitions"
        )

        # таймеры переиспользуются: total накапливается по итерациям
        t_assign = Timer()
        t_update = Timer()

        for i in range(self.n_iters):
            with t_assign:
                # broadcast: полный, окончательный набор предыдущей итерации
                classifier = Classifier(centroids.all_gather())
                closest = points.map_partitions(classifier.assign_partition).cache()

            with t_update:
                merged = (
                    closest.reduce_by_key(cluster_key, combine_closest)
                    .map(to_centroid)
                    .all_gather()
                )
                merged.sort(key=lambda item: item[0])
                new_centroids = [centroid for _, centroid in merged]

            vanished = len(classifier) - len(new_centroids)
            self.vanished_history.append(vanished)
            if vanished > 0:
                if self.empty_cluster is EmptyClusterPolicy.RESEED:
                    new_centroids.extend(self._reseed(points, vanished, rng))
                    self._log(
                        f"{prefix} Iteration {i + 1}: reseeded {vanished} empty clusters"
                    )
                elif self.logger:
                    self.logger.warning(
                        f"{prefix} Iteration {i + 1}: {vanished} clusters received "
                        f"no points and were dropped "
                        f"({len(new_centroids)} of {self.K} remain)"
                    )

            if self.track_cost:
                inertia = points.map_partitions(classifier.cost_partition).sum()
                self.cost_history.append(inertia)

            t_assign_elapsed = t_assign.elapsed
            t_update_elapsed = t_update.elapsed
            self.t_assign_total = t_assign.total
            self.t_update_total = t_update.total
            self.t_iter_total = t_assign.total + t_update.total
            self.n_iters_actual = i + 1

            if i == 0 or (i + 1) % 10 == 0 or i + 1 == self.n_iters:
                self._log(
                    f"{prefix}  Iteration {i + 1}/{self.n_iters} "
                    f"(T_assign={t_assign_elapsed:.6f}s, "
                    f"T_update={t_update_elapsed:.6f}s, "
                    f"clusters={len(new_centroids)})"
                )

            centroids = points.context.parallelize(new_centroids)

        return KMeansModel(
            dimensions=dimensions,
            num_clusters=self.K,
            iterations=self.n_iters,
            centroids=tuple(centroids.all_gather()),
        )


def k_means(
    points: Dataset[Point],
    dimensions: int,
    num_clusters: int,
    iterations: int,
    **kwargs: Any,
) -> KMeansModel:
    """Функциональная обёртка над KMeansLloyd(...).fit(...)."""
    initial_centroids = kwargs.pop("initial_centroids", None)
    return KMeansLloyd(num_clusters, iterations, **kwargs).fit(
        points, dimensions, initial_centroids=initial_centroids
    )
