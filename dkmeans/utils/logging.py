import logging
from typing import IO, Optional


def setup_logger(
    level: int = logging.INFO, stream: Optional[IO[str]] = None
) -> logging.Logger:
    """
    Настраивает логгер пакета ``dkmeans``.

    Дочерние логгеры (``dkmeans.dataflow.*``, ``dkmeans.data.*``) пишут через
    тот же обработчик. Повторный вызов меняет уровень и, если передан
    ``stream``, направляет вывод в новый поток вместо прежнего.

    :param level: минимальный уровень логирования
    :param stream: поток вывода, по умолчанию stderr
    :return: настроенный экземпляр :class:`logging.Logger`
    """
    logger = logging.getLogger("dkmeans")
    logger.setLevel(level)

    handler = next(
        (h for h in logger.handlers if isinstance(h, logging.StreamHandler)), None
    )
    if handler is None:
        handler = logging.StreamHandler(stream)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        logger.addHandler(handler)
    elif stream is not None:
        handler.setStream(stream)

    logger.propagate = False
    return logger


def format_run_prefix(n_points: int, dimensions: int, n_clusters: int) -> str:
    """Текстовый префикс для логов одного запуска кластеризации."""
    return f"[N={n_points} D={dimensions} K={n_clusters}]"
