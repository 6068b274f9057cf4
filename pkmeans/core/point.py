from __future__ import annotations

from typing import Sequence

import numpy as np

from pkmeans.core.errors import IndexOutOfRange

# Метка точки, ещё не назначенной ни одному кластеру
UNASSIGNED = -1


class Point:
    """
    Точка задачи: неизменяемый вектор координат и изменяемая метка кластера.

    Координаты копируются в массив float64 только для чтения, поэтому
    размерность фиксируется при создании. ``cluster_id`` меняет только
    фаза назначения движка. Пустое имя хранится как None: в отчёте
    имя печатается, только если оно непустое.
    """

    __slots__ = ("_id", "_coordinates", "cluster_id", "_label")

    def __init__(
        self,
        point_id: int,
        coordinates: Sequence[float] | np.ndarray,
        label: str | None = None,
    ) -> None:
        coords = np.array(coordinates, dtype=np.float64).reshape(-1)
        coords.flags.writeable = False

        self._id = int(point_id)
        self._coordinates = coords
        self.cluster_id: int = UNASSIGNED
        self._label = label or None

    @property
    def id(self) -> int:
        return self._id

    @property
    def coordinates(self) -> np.ndarray:
        return self._coordinates

    @property
    def dimensionality(self) -> int:
        return int(self._coordinates.shape[0])

    @property
    def label(self) -> str | None:
        return self._label

    def get_value(self, index: int) -> float:
        """Координата по индексу; IndexOutOfRange вне [0, dimensionality)."""
        if index < 0 or index >= self.dimensionality:
            raise IndexOutOfRange(index, self.dimensionality)
        return float(self._coordinates[index])

    def copy(self) -> Point:
        """Свежая неназначенная копия (для повторных прогонов)."""
        return Point(self._id, self._coordinates, self._label)

    def __repr__(self) -> str:
        return (
            f"Point(id={self._id}, cluster_id={self.cluster_id}, "
            f"coordinates={self._coordinates.tolist()})"
        )
