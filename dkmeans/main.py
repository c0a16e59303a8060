# main.py
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dkmeans.config import EmptyClusterPolicy, EngineConfig, KMeansConfig
from dkmeans.core.lloyd import KMeansLloyd
from dkmeans.data.io import read_points
from dkmeans.data.synthetic import make_dataset
from dkmeans.dataflow.context import Context
from dkmeans.metrics.metrics import throughput
from dkmeans.metrics.timers import Timer
from dkmeans.utils.logging import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="K-means (алгоритм Ллойда) поверх партиционированного датасета."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        type=Path,
        help="Текстовый файл с точками: одна точка на строку, координаты через пробел.",
    )
    source.add_argument(
        "--generate",
        type=int,
        metavar="N",
        help="Сгенерировать N точек с помощью make_blobs вместо чтения файла.",
    )
    parser.add_argument("-k", "--clusters", type=int, required=True, help="Число кластеров.")
    parser.add_argument(
        "-d",
        "--dimensions",
        type=int,
        default=2,
        help="Размерность генерируемых точек (только с --generate).",
    )
    parser.add_argument("--iterations", type=int, default=10, help="Число итераций.")
    parser.add_argument("--partitions", type=int, default=4, help="Число партиций.")
    parser.add_argument(
        "--processes",
        type=int,
        default=1,
        help="Число процессов; 1 — последовательное выполнение.",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed начальной выборки.")
    parser.add_argument(
        "--empty-cluster",
        choices=[p.value for p in EmptyClusterPolicy],
        default=EmptyClusterPolicy.DROP.value,
        help="Поведение для кластеров без точек: drop — исчезают, reseed — пересеваются.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Куда сохранить модель в JSON.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Подробный лог (DEBUG), включая материализацию датасетов.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.INFO
    logger = setup_logger(level, stream=sys.stderr)

    if args.input is not None:
        X = read_points(args.input)
    else:
        seed = 42 if args.seed is None else args.seed
        X = make_dataset(args.generate, args.dimensions, args.clusters, seed=seed).data
    N, D = X.shape

    engine = EngineConfig(num_partitions=args.partitions, n_processes=args.processes)
    config = KMeansConfig(
        n_clusters=args.clusters,
        n_iters=args.iterations,
        empty_cluster=EmptyClusterPolicy(args.empty_cluster),
        seed=args.seed,
    )

    with Context(engine) as ctx:
        points = ctx.from_array(X).cache()
        algo = KMeansLloyd.from_config(config, logger=logger)
        with Timer() as t_fit:
            model = algo.fit(points, dimensions=D)
        cost = model.compute_total_cost(points)

    logger.info(
        f"Finished {model.iterations} iterations in {t_fit.elapsed:.6f}s "
        f"(T_assign_total={algo.t_assign_total:.6f}s, "
        f"T_update_total={algo.t_update_total:.6f}s)"
    )
    if t_fit.elapsed > 0:
        logger.info(
            f"Throughput: "
            f"{throughput(N, config.n_clusters, D, config.n_iters, t_fit.elapsed):.3e} ops/s"
        )
    logger.info(
        f"Centroids: {len(model.centroids)} of {model.num_clusters}, cost={cost:.6f}"
    )

    if args.output is not None:
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump({**model.to_dict(), "cost": cost}, f, ensure_ascii=False, indent=2)
        logger.info(f"Model saved to {args.output}")
    else:
        for cluster_id, centroid in enumerate(model.centroids):
            print(cluster_id, " ".join(f"{v:.6f}" for v in centroid))
    print(f"cost {cost:.6f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
