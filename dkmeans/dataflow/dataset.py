"""
Ленивый распределённый датасет.

Трансформации (map, map_partitions, reduce_by_key, sample) только
запоминают происхождение; действия (all_gather, sum, size) вычисляют его.
cache() материализует партиции один раз, последующие чтения их переиспользуют.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import (
    TYPE_CHECKING,
    Callable,
    Dict,
    Generic,
    Hashable,
    Iterable,
    List,
    Optional,
    Tuple,
    TypeVar,
)

import numpy as np

from dkmeans.errors import InsufficientDataError

if TYPE_CHECKING:
    from dkmeans.dataflow.context import Context

T = TypeVar("T")
R = TypeVar("R")
K = TypeVar("K", bound=Hashable)

logger = logging.getLogger(__name__)


# --- Задачи над партициями (уровень модуля, чтобы работал pickle) ---


def _map_partition(fn: Callable[[T], R], part: List[T]) -> List[R]:
    return [fn(x) for x in part]


def _apply_partition(fn: Callable[[List[T]], Iterable[R]], part: List[T]) -> List[R]:
    return list(fn(part))


def _combine_partition(
    key_fn: Callable[[T], K], combine_fn: Callable[[T, T], T], part: List[T]
) -> List[Tuple[K, T]]:
    """Локальная предварительная комбинация до обмена между партициями."""
    acc: Dict[K, T] = {}
    for x in part:
        key = key_fn(x)
        if key in acc:
            acc[key] = combine_fn(acc[key], x)
        else:
            acc[key] = x
    return list(acc.items())


def _merge_bucket(
    combine_fn: Callable[[T, T], T], bucket: List[Tuple[K, T]]
) -> List[T]:
    acc: Dict[K, T] = {}
    for key, value in bucket:
        if key in acc:
            acc[key] = combine_fn(acc[key], value)
        else:
            acc[key] = value
    return list(acc.values())


def _sum_partition(part: List[float]) -> float:
    return float(np.sum(np.asarray(part, dtype=np.float64))) if part else 0.0


class Dataset(Generic[T]):
    """Коллекция элементов, разбитая на партиции."""

    def __init__(
        self,
        context: "Context",
        compute: Callable[[], List[List[T]]],
        name: str = "dataset",
    ) -> None:
        self._context = context
        self._compute = compute
        self._cached: Optional[List[List[T]]] = None
        self.name = name

    @classmethod
    def from_partitions(cls, context: "Context", partitions: List[List[T]]) -> Dataset[T]:
        ds = cls(context, lambda: partitions, name="parallelize")
        ds._cached = partitions
        return ds

    @property
    def context(self) -> "Context":
        return self._context

    def partitions(self) -> List[List[T]]:
        if self._cached is not None:
            return self._cached
        return self._compute()

    @property
    def num_partitions(self) -> int:
        return len(self.partitions())

    @property
    def is_cached(self) -> bool:
        return self._cached is not None

    # ---------- Трансформации ----------

    def cache(self) -> Dataset[T]:
        """Материализует датасет; повторные чтения не пересчитывают происхождение."""
        if self._cached is None:
            self._cached = self._compute()
            logger.debug(
                f"Cached '{self.name}': {sum(len(p) for p in self._cached)} elements "
                f"in {len(self._cached)} partitions"
            )
        return self

    def map(self, fn: Callable[[T], R]) -> Dataset[R]:
        task = partial(_map_partition, fn)
        return Dataset(
            self._context,
            lambda: self._context.run(task, self.partitions()),
            name="map",
        )

    def map_partitions(self, fn: Callable[[List[T]], Iterable[R]]) -> Dataset[R]:
        task = partial(_apply_partition, fn)
        return Dataset(
            self._context,
            lambda: self._context.run(task, self.partitions()),
            name="map_partitions",
        )

    def reduce_by_key(
        self, key_fn: Callable[[T], K], combine_fn: Callable[[T, T], T]
    ) -> Dataset[T]:
        """
        Группирует элементы по ключу и сливает их combine_fn.

        combine_fn обязана быть ассоциативной и коммутативной: она применяется
        сначала внутри партиций, затем после обмена, в произвольном порядке.
        На каждый ключ остаётся ровно один элемент; порядок не определён.
        """

        def compute() -> List[List[T]]:
            local = self._context.run(
                partial(_combine_partition, key_fn, combine_fn), self.partitions()
            )
            # обмен: ключ → корзина
            n = self._context.num_partitions
            buckets: List[List[Tuple[K, T]]] = [[] for _ in range(n)]
            for pairs in local:
                for key, value in pairs:
                    buckets[hash(key) % n].append((key, value))
            merged = self._context.run(partial(_merge_bucket, combine_fn), buckets)
            return [part for part in merged if part]

        return Dataset(self._context, compute, name="reduce_by_key")

    def sample(self, k: int, seed: Optional[int] = None) -> Dataset[T]:
        """
        Ровно k элементов, выбранных равномерно без возвращения из всего датасета.

        Выбор не зависит от разбиения на партиции. Без seed он фиксируется при
        создании трансформации, так что повторное вычисление даёт ту же выборку.
        """
        if k < 0:
            raise ValueError("sample size must be non-negative")
        if seed is None:
            seed = int(np.random.SeedSequence().generate_state(1)[0])

        def compute() -> List[List[T]]:
            parts = self.partitions()
            sizes = np.array([len(p) for p in parts], dtype=np.int64)
            total = int(sizes.sum())
            if k > total:
                raise InsufficientDataError(k, total)

            rng = np.random.default_rng(seed)
            picked = np.sort(rng.choice(total, size=k, replace=False))

            offsets = np.concatenate([[0], np.cumsum(sizes)])
            owners = np.searchsorted(offsets, picked, side="right") - 1
            items = [parts[p][g - offsets[p]] for g, p in zip(picked, owners)]
            return self._context.split(items) if items else []

        return Dataset(self._context, compute, name="sample")

    # ---------- Действия ----------

    def all_gather(self) -> List[T]:
        """Все элементы в порядке партиций."""
        return [x for part in self.partitions() for x in part]

    def sum(self) -> float:
        partials = self._context.run(_sum_partition, self.partitions())
        return float(sum(partials))

    def size(self) -> int:
        return sum(len(p) for p in self.partitions())

    def __repr__(self) -> str:
        state = "cached" if self.is_cached else "lazy"
        return f"Dataset(name={self.name!r}, {state})"
