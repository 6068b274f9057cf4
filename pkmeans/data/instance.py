"""
Загрузка экземпляра задачи K-means из текстового потока.

Формат (токены через пробельные символы):
    N D K max_iterations has_names
    затем N точек: D вещественных чисел и, если has_names == 1, имя точки.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, TextIO

import numpy as np

from pkmeans.core.errors import InstanceFormatError
from pkmeans.core.point import Point

logger = logging.getLogger("pkmeans")


@dataclass
class ProblemInstance:
    """Параметры задачи и исходные точки (id точки = её номер во входе)."""

    dimensionality: int
    k: int
    max_iterations: int
    has_names: bool = False
    points: List[Point] = field(default_factory=list)

    @property
    def n_points(self) -> int:
        return len(self.points)

    def fresh_points(self) -> List[Point]:
        """Неназначенные копии точек для независимого прогона."""
        return [p.copy() for p in self.points]


def _next_token(tokens: Iterator[str], what: str) -> str:
    try:
        return next(tokens)
    except StopIteration:
        raise InstanceFormatError(f"unexpected end of input while reading {what}") from None


def _read_int(tokens: Iterator[str], what: str) -> int:
    token = _next_token(tokens, what)
    try:
        return int(token)
    except ValueError:
        raise InstanceFormatError(f"{what} must be an integer, got {token!r}") from None


def _read_float(tokens: Iterator[str], what: str) -> float:
    token = _next_token(tokens, what)
    try:
        value = float(token)
    except ValueError:
        raise InstanceFormatError(f"{what} must be a number, got {token!r}") from None
    if not np.isfinite(value):
        raise InstanceFormatError(f"{what} must be finite, got {token!r}")
    return value


def parse_instance(text: str) -> ProblemInstance:
    """
    Разбирает экземпляр задачи из строки.

    Raises:
        InstanceFormatError: Если заголовок некорректен или токенов не хватает
    """
    tokens = iter(text.split())

    n_points = _read_int(tokens, "point count")
    dimensionality = _read_int(tokens, "dimensionality")
    k = _read_int(tokens, "K")
    max_iterations = _read_int(tokens, "max iterations")
    has_names_flag = _read_int(tokens, "name flag")

    if has_names_flag not in (0, 1):
        raise InstanceFormatError(f"name flag must be 0 or 1, got {has_names_flag}")

    instance = ProblemInstance(
        dimensionality=dimensionality,
        k=k,
        max_iterations=max_iterations,
        has_names=bool(has_names_flag),
    )
    _validate_header(n_points, instance)

    for i in range(n_points):
        values = [
            _read_float(tokens, f"coordinate {j} of point {i}")
            for j in range(dimensionality)
        ]
        name = _next_token(tokens, f"name of point {i}") if instance.has_names else None
        instance.points.append(Point(i, values, name))

    leftover = sum(1 for _ in tokens)
    if leftover:
        logger.warning(f"Ignoring {leftover} trailing tokens after {n_points} points")

    return instance


def load_instance(source: str | Path | TextIO) -> ProblemInstance:
    """Читает экземпляр задачи из пути к файлу или открытого текстового потока."""
    try:
        if hasattr(source, "read"):
            logger.info("Loading instance from stream")
            text = source.read()  # type: ignore[union-attr]
        else:
            path = Path(source)  # type: ignore[arg-type]
            logger.info(f"Loading instance from {path}")
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
    except UnicodeDecodeError as e:
        raise InstanceFormatError(f"instance is not valid UTF-8 text: {e}") from e

    instance = parse_instance(text)
    logger.info(
        f"Instance loaded: N={instance.n_points}, D={instance.dimensionality}, "
        f"K={instance.k}, max_iterations={instance.max_iterations}"
    )
    return instance


def _validate_header(n_points: int, instance: ProblemInstance) -> None:
    if n_points < 1:
        raise InstanceFormatError(f"point count must be positive, got {n_points}")
    if instance.dimensionality < 1:
        raise InstanceFormatError(
            f"dimensionality must be positive, got {instance.dimensionality}"
        )
    if instance.k < 1:
        raise InstanceFormatError(f"K must be positive, got {instance.k}")
    if instance.max_iterations < 1:
        raise InstanceFormatError(
            f"max iterations must be positive, got {instance.max_iterations}"
        )
