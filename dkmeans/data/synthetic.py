"""
Синтетические датасеты для проверки и демонстрации кластеризации.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from sklearn.datasets import make_blobs


@dataclass
class SyntheticDataset:
    """Контейнер для сгенерированных данных."""

    data: np.ndarray
    labels: np.ndarray
    centers: np.ndarray


def make_dataset(
    n: int,
    dimensions: int,
    k: int,
    cluster_std: float = 1.0,
    center_box: tuple[float, float] = (-10.0, 10.0),
    seed: int = 42,
) -> SyntheticDataset:
    """
    Генерация гауссовых кластеров с помощью make_blobs.

    Args:
        n: Количество точек
        dimensions: Размерность пространства
        k: Количество кластеров
        cluster_std: Стандартное отклонение кластеров
        center_box: Диапазон расположения центров кластеров
        seed: Seed для воспроизводимости

    Returns:
        SyntheticDataset с данными (n x D), метками (n,) и центрами (k x D)
    """
    data, labels, centers = make_blobs(
        n_samples=n,
        n_features=dimensions,
        centers=k,
        cluster_std=cluster_std,
        center_box=center_box,
        random_state=seed,
        return_centers=True,
    )
    return SyntheticDataset(
        data=np.asarray(data, dtype=np.float64),
        labels=np.asarray(labels, dtype=np.int32),
        centers=np.asarray(centers, dtype=np.float64),
    )
