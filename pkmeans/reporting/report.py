"""
Отчёт по итогам кластеризации.

Формирует текст для консоли (состав кластеров, центроиды, тайминги) и
дописывает блок таймингов в журнал. Ошибка открытия журнала не
прерывает запуск: она логируется и возвращается вызывающему коду.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List

import numpy as np

from pkmeans.core.base import ClusteringResult
from pkmeans.core.errors import ResourceUnavailable
from pkmeans.core.point import Point
from pkmeans.metrics.timers import to_microseconds

DEFAULT_LOG_PATH = Path("output.txt")


def _format_values(values: Iterable[float]) -> str:
    return " ".join(f"{float(v):g}" for v in values)


def format_timing_summary(result: ClusteringResult) -> str:
    """Блок таймингов (микросекунды): общий, фаза 1 (init), фаза 2 (итерации)."""
    lines = [
        f"Break in iteration {result.n_iterations}",
        f"TOTAL EXECUTION TIME = {to_microseconds(result.t_total)}",
        f"TIME PHASE 1 = {to_microseconds(result.t_init)}",
        f"TIME PHASE 2 = {to_microseconds(result.t_iterations)}",
    ]
    return "\n".join(lines) + "\n"


def format_report(result: ClusteringResult, points: Iterable[Point]) -> str:
    """
    Полный отчёт: для каждого кластера его точки и центроид, затем тайминги.

    Номера кластеров и точек выводятся с единицы.
    """
    by_id: Dict[int, Point] = {p.id: p for p in points}
    lines: List[str] = []

    for cluster in result.clusters:
        lines.append(f"Cluster {cluster.id + 1}")
        for point_id in cluster.member_ids:
            point = by_id[point_id]
            line = f"Point {point.id + 1}: {_format_values(point.coordinates)}"
            if point.label:
                line += f" - {point.label}"
            lines.append(line)
        lines.append(f"Cluster values: {_format_values(np.asarray(cluster.centroid))}")
        lines.append("")

    return "\n".join(lines) + "\n" + format_timing_summary(result)


def append_timing_log(
    result: ClusteringResult,
    path: str | Path = DEFAULT_LOG_PATH,
    logger: logging.Logger | None = None,
) -> ResourceUnavailable | None:
    """
    Дописывает блок таймингов в журнал.

    Returns:
        None при успехе, иначе ResourceUnavailable с описанием причины
        (запуск при этом не прерывается)
    """
    logger = logger or logging.getLogger("pkmeans")
    path = Path(path)
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(format_timing_summary(result))
    except OSError as e:
        diagnostic = ResourceUnavailable(f"Unable to open timing log {path}: {e}")
        logger.error(str(diagnostic))
        return diagnostic

    logger.debug(f"Timing summary appended to {path}")
    return None
