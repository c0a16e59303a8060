from __future__ import annotations

import logging
from multiprocessing import Pool, cpu_count
from typing import Any, Callable, Iterable, List, Optional, Sequence, TypeVar

import numpy as np

from dkmeans.config import EngineConfig
from dkmeans.core.point import Point
from dkmeans.dataflow.dataset import Dataset

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


class Context:
    """
    Локальный dataflow-движок: разбиение на партиции и исполнение задач.

    При n_processes > 1 функции над партициями выполняются в пуле процессов
    (должны быть picklable), иначе последовательно в текущем процессе.
    Пул создаётся лениво и живёт до close().
    """

    def __init__(self, config: EngineConfig = EngineConfig()) -> None:
        self.config = config
        self._pool: Optional[Pool] = None

    @property
    def num_partitions(self) -> int:
        return self.config.num_partitions

    # --- Пул ---

    def _ensure_pool(self) -> Optional[Pool]:
        if self.config.n_processes <= 1:
            return None
        if self._pool is None:
            n_procs = max(1, min(int(self.config.n_processes), cpu_count()))
            logger.debug(f"Starting worker pool with {n_procs} processes")
            self._pool = Pool(processes=n_procs)
        return self._pool

    def close(self) -> None:
        """Закрыть пул процессов."""
        if self._pool is not None:
            self._pool.close()
            self._pool.join()
        self._pool = None

    def __enter__(self) -> Context:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def run(self, fn: Callable[[List[T]], R], partitions: Sequence[List[T]]) -> List[R]:
        """Применяет fn к каждой партиции независимо."""
        pool = self._ensure_pool()
        if pool is None or len(partitions) <= 1:
            return [fn(part) for part in partitions]
        return pool.map(fn, partitions)

    # --- Создание датасетов ---

    def _make_chunks(self, N: int, num_partitions: int) -> List[np.ndarray]:
        """Разбиение индексов на чанки."""
        if self.config.chunk_size is None:
            chunks = np.array_split(np.arange(N), num_partitions)
        else:
            cs = int(self.config.chunk_size)
            chunks = [np.arange(i, min(i + cs, N)) for i in range(0, N, cs)]
        return [idx for idx in chunks if idx.size > 0]

    def split(self, items: Sequence[T], num_partitions: Optional[int] = None) -> List[List[T]]:
        n = self.num_partitions if num_partitions is None else int(num_partitions)
        if n <= 0:
            raise ValueError("num_partitions must be positive")
        return [
            [items[i] for i in idx] for idx in self._make_chunks(len(items), n)
        ]

    def parallelize(
        self, items: Iterable[T], num_partitions: Optional[int] = None
    ) -> Dataset[T]:
        """Распределяет локальную коллекцию по партициям."""
        partitions = self.split(list(items), num_partitions)
        return Dataset.from_partitions(self, partitions)

    def from_array(
        self, X: np.ndarray, num_partitions: Optional[int] = None
    ) -> Dataset[Point]:
        """Датасет точек из массива (N, D)."""
        X = np.asarray(X, dtype=np.float64)
        if X.ndim != 2:
            raise ValueError(f"Expected a (N, D) array, got shape {X.shape}")
        return self.parallelize([Point(row) for row in X], num_partitions)
