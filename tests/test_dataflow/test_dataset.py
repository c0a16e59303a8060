"""
Тесты локального dataflow-движка: партиции, ленивость, cache, sample, reduce_by_key.
"""

from collections import Counter

import numpy as np
import pytest

from dkmeans.config import EngineConfig
from dkmeans.core.point import Point
from dkmeans.dataflow.context import Context
from dkmeans.errors import InsufficientDataError


def _square(x):
    return x * x


def _parity(x):
    return x % 2


def _add(a, b):
    return a + b


def _pair_key(pair):
    return pair[0]


def _pair_sum(a, b):
    return a[0], a[1] + b[1]


class _CountingFn:
    """Считает вызовы; только для последовательного контекста."""

    def __init__(self):
        self.calls = 0

    def __call__(self, x):
        self.calls += 1
        return x


class TestContext:
    """Тесты разбиения на партиции."""

    def test_parallelize_partitions(self, ctx):
        ds = ctx.parallelize(range(10))
        assert ds.num_partitions == 3
        assert ds.size() == 10
        assert ds.all_gather() == list(range(10))

    def test_empty_partitions_dropped(self, ctx):
        ds = ctx.parallelize([1, 2])
        assert ds.num_partitions == 2
        assert ctx.parallelize([]).num_partitions == 0

    def test_chunk_size(self):
        with Context(EngineConfig(chunk_size=4)) as context:
            ds = context.parallelize(range(10))
            assert [len(p) for p in ds.partitions()] == [4, 4, 2]

    def test_from_array(self, ctx):
        X = np.arange(12, dtype=np.float64).reshape(6, 2)
        ds = ctx.from_array(X)
        assert ds.all_gather()[1] == Point([2.0, 3.0])
        with pytest.raises(ValueError):
            ctx.from_array(np.zeros(5))

    @pytest.mark.parametrize(
        "kwargs", [{"num_partitions": 0}, {"n_processes": 0}, {"chunk_size": 0}]
    )
    def test_invalid_config(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)


class TestTransformations:
    """Тесты map, cache и действий."""

    def test_map_and_sum(self, ctx):
        ds = ctx.parallelize(range(5)).map(_square)
        assert ds.all_gather() == [0, 1, 4, 9, 16]
        assert ds.sum() == pytest.approx(30.0)

    def test_sum_empty(self, ctx):
        assert ctx.parallelize([]).sum() == 0.0

    def test_map_partitions(self, ctx):
        ds = ctx.parallelize(range(9)).map_partitions(lambda part: [sum(part)])
        assert ds.all_gather() == [3, 12, 21]

    def test_all_gather_is_the_only_collect_action(self, ctx):
        """Сборка датасета на драйвер выполняется только через all_gather."""
        ds = ctx.parallelize(range(4))
        assert not hasattr(ds, "collect")
        assert ds.all_gather() == [0, 1, 2, 3]

    def test_lazy_until_action(self, ctx):
        fn = _CountingFn()
        ds = ctx.parallelize(range(6)).map(fn)
        assert fn.calls == 0
        ds.all_gather()
        ds.all_gather()
        assert fn.calls == 12

    def test_cache_computes_once(self, ctx):
        fn = _CountingFn()
        ds = ctx.parallelize(range(6)).map(fn).cache()
        assert ds.is_cached
        ds.all_gather()
        ds.sum()
        ds.map(_square).all_gather()
        assert fn.calls == 6


class TestReduceByKey:
    """Группировка и слияние по ключу."""

    @pytest.mark.parametrize("n", [1, 2, 3, 7])
    def test_one_element_per_key(self, n):
        with Context(EngineConfig(num_partitions=n)) as context:
            pairs = [(i % 4, i) for i in range(20)]
            result = context.parallelize(pairs).reduce_by_key(_pair_key, _pair_sum)
            merged = dict(result.all_gather())

        expected = {k: sum(i for i in range(20) if i % 4 == k) for k in range(4)}
        assert merged == expected

    def test_scalar_values(self, ctx):
        result = ctx.parallelize([1, 3, 5, 2, 4]).reduce_by_key(_parity, _add)
        assert sorted(result.all_gather()) == [6, 9]

    def test_multiprocessing(self):
        with Context(EngineConfig(num_partitions=4, n_processes=2)) as context:
            squares = context.parallelize(range(100)).map(_square)
            result = sorted(squares.reduce_by_key(_parity, _add).all_gather())
            total = squares.sum()

        assert result == [sum(x * x for x in range(0, 100, 2)), sum(x * x for x in range(1, 100, 2))]
        assert total == pytest.approx(sum(x * x for x in range(100)))


class TestSample:
    """Глобальная выборка без возвращения."""

    def test_exact_size_without_replacement(self, ctx):
        sample = ctx.parallelize(range(50)).sample(10, seed=1).all_gather()
        assert len(sample) == 10
        assert len(set(sample)) == 10
        assert set(sample) <= set(range(50))

    def test_independent_of_partitioning(self):
        samples = []
        for n in (1, 3, 8):
            with Context(EngineConfig(num_partitions=n)) as context:
                samples.append(sorted(context.parallelize(range(40)).sample(5, seed=9).all_gather()))
        assert samples[0] == samples[1] == samples[2]

    def test_stable_on_recompute(self, ctx):
        """Без seed повторное вычисление даёт ту же выборку."""
        sample = ctx.parallelize(range(1000)).sample(5)
        assert sample.all_gather() == sample.all_gather()

    def test_whole_dataset(self, ctx):
        assert sorted(ctx.parallelize(range(7)).sample(7, seed=0).all_gather()) == list(range(7))

    def test_insufficient_data(self, ctx):
        with pytest.raises(InsufficientDataError):
            ctx.parallelize(range(3)).sample(4).all_gather()

    def test_negative_size(self, ctx):
        with pytest.raises(ValueError):
            ctx.parallelize(range(3)).sample(-1)

    def test_roughly_uniform(self, ctx):
        """Каждый элемент выбирается примерно одинаково часто."""
        counts = Counter()
        ds = ctx.parallelize(range(10))
        for seed in range(2000):
            counts.update(ds.sample(3, seed=seed).all_gather())
        # ожидание 600 на элемент
        assert all(450 < counts[i] < 750 for i in range(10))
