"""
Чтение и запись точек в текстовом формате.

Формат: одна точка на строку, координаты через пробельные символы.
Пустые строки и строки, начинающиеся с ``#``, пропускаются.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import numpy as np

from dkmeans.errors import DimensionMismatchError

logger = logging.getLogger(__name__)


def read_points(path: str | Path) -> np.ndarray:
    """
    Загружает точки из текстового файла.

    Args:
        path: Путь к файлу

    Returns:
        Массив (N, D) типа float64

    Raises:
        DimensionMismatchError: Если строки имеют разное число координат
        ValueError: Если в файле нет ни одной точки
    """
    path = Path(path)
    rows: list[np.ndarray] = []

    logger.info(f"Loading points from {path}")
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            # Пропускаем комментарии и пустые строки
            if not line or line.startswith("#"):
                continue

            values = np.array(line.split(), dtype=np.float64)
            if rows and values.shape[0] != rows[0].shape[0]:
                raise DimensionMismatchError(rows[0].shape[0], values.shape[0])
            rows.append(values)

    if not rows:
        raise ValueError(f"No points found in {path}")

    X = np.vstack(rows)
    logger.info(f"Points loaded: X.shape={X.shape}")
    return X


def write_points(path: str | Path, X: np.ndarray | Iterable[Iterable[float]]) -> None:
    """Сохраняет точки в формате, который читает read_points."""
    X = np.asarray(X, dtype=np.float64)
    if X.ndim != 2:
        raise ValueError(f"Expected a (N, D) array, got shape {X.shape}")
    with open(path, "w", encoding="utf-8") as f:
        for row in X:
            f.write(" ".join(repr(float(v)) for v in row))
            f.write("\n")
