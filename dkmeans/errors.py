"""
Исключения кластеризации.

Все ошибки фатальны для текущей операции и пробрасываются вызывающему коду
без повторных попыток.
"""

from __future__ import annotations


class KMeansError(Exception):
    """Базовое исключение пакета dkmeans."""


class DimensionMismatchError(KMeansError, ValueError):
    """Размерность точки не совпадает с размерностью центроидов."""

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(f"Dimension mismatch: expected D={expected}, got D={actual}")
        self.expected = expected
        self.actual = actual


class InsufficientDataError(KMeansError, ValueError):
    """Точек меньше, чем требуется выбрать."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            f"Cannot sample {requested} elements from a dataset of {available}"
        )
        self.requested = requested
        self.available = available


class EmptyCentroidsError(KMeansError, ValueError):
    """Классификация против пустого набора центроидов."""

    def __init__(self) -> None:
        super().__init__("Centroid set is empty, nothing to classify against")
