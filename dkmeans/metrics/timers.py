"""
Таймер для замеров шагов алгоритма на основе time.perf_counter().
"""
from __future__ import annotations
import time
from typing import Any


class Timer:
    """
    Переиспользуемый контекстный менеджер для замера шага итерации.

    elapsed хранит длительность последнего замера, total и count
    накапливаются по всем входам в контекст: один таймер на шаг
    (assign/update) даёт сразу и время итерации, и суммарное время fit.

    Пример использования:
        t_assign = Timer()
        for _ in range(n_iters):
            with t_assign:
                ...
        t_assign.total, t_assign.mean
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0
        self.total: float = 0.0
        self.count: int = 0

    @property
    def mean(self) -> float:
        """Среднее время одного замера (0.0, если замеров не было)."""
        return self.total / self.count if self.count else 0.0

    def reset(self) -> None:
        self.elapsed = 0.0
        self.total = 0.0
        self.count = 0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start
        self.total += self.elapsed
        self.count += 1
