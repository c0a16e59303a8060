from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EmptyClusterPolicy(str, Enum):
    """
    Что делать с кластером, которому на итерации не досталось ни одной точки.

    - DROP: кластер исчезает из набора центроидов на следующих итерациях;
    - RESEED: вместо исчезнувших кластеров выбираются новые случайные точки.
    """

    DROP = "drop"
    RESEED = "reseed"


@dataclass(frozen=True)
class EngineConfig:
    """Параметры локального dataflow-движка."""

    num_partitions: int = 4
    n_processes: int = 1
    chunk_size: Optional[int] = None

    def __post_init__(self) -> None:
        if self.num_partitions <= 0:
            raise ValueError("num_partitions must be positive")
        if self.n_processes <= 0:
            raise ValueError("n_processes must be positive")
        if self.chunk_size is not None and self.chunk_size <= 0:
            raise ValueError("chunk_size must be positive")


@dataclass(frozen=True)
class KMeansConfig:
    """Параметры алгоритма Ллойда."""

    n_clusters: int
    n_iters: int = 10
    empty_cluster: EmptyClusterPolicy = EmptyClusterPolicy.DROP
    seed: Optional[int] = None
    track_cost: bool = False

    def __post_init__(self) -> None:
        if self.n_clusters <= 0:
            raise ValueError("n_clusters must be positive")
        if self.n_iters < 0:
            raise ValueError("n_iters must be non-negative")
