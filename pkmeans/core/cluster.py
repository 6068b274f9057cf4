from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np

from pkmeans.core.errors import IndexOutOfRange
from pkmeans.core.point import Point


@dataclass(frozen=True)
class ClusterSnapshot:
    """Снимок кластера только для чтения (для отчёта)."""

    id: int
    centroid: np.ndarray
    member_ids: Tuple[int, ...]

    @property
    def size(self) -> int:
        return len(self.member_ids)


class Cluster:
    """
    Кластер: центроид и текущий состав.

    Состав хранится как список id точек (сами точки лежат в коллекции
    движка) и меняется под собственной блокировкой кластера: в фазе
    назначения add/remove вызывают сразу несколько воркеров.
    Центроид не блокируется: его пишет только фаза пересчёта,
    после барьера, и каждый кластер обрабатывает ровно один воркер.
    """

    def __init__(self, cluster_id: int, seed_point: Point) -> None:
        self.id = int(cluster_id)
        self._centroid = np.array(seed_point.coordinates, dtype=np.float64)
        self._members: List[int] = [seed_point.id]
        self._lock = threading.Lock()

    @property
    def dimensionality(self) -> int:
        return int(self._centroid.shape[0])

    # --- Состав (под блокировкой) ---

    def add_member(self, point: Point) -> None:
        with self._lock:
            self._members.append(point.id)

    def remove_member(self, point_id: int) -> bool:
        """Удаляет первое вхождение point_id; False, если точки нет."""
        with self._lock:
            for i, member_id in enumerate(self._members):
                if member_id == point_id:
                    del self._members[i]
                    return True
            return False

    def member_ids(self) -> Tuple[int, ...]:
        with self._lock:
            return tuple(self._members)

    def size(self) -> int:
        with self._lock:
            return len(self._members)

    # --- Центроид (без блокировки) ---

    @property
    def centroid(self) -> np.ndarray:
        return self._centroid

    def get_centroid_component(self, index: int) -> float:
        self._check_index(index)
        return float(self._centroid[index])

    def set_centroid_component(self, index: int, value: float) -> None:
        self._check_index(index)
        self._centroid[index] = value

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= self.dimensionality:
            raise IndexOutOfRange(index, self.dimensionality)

    def snapshot(self) -> ClusterSnapshot:
        return ClusterSnapshot(
            id=self.id,
            centroid=self._centroid.copy(),
            member_ids=self.member_ids(),
        )

    def __repr__(self) -> str:
        return f"Cluster(id={self.id}, size={len(self._members)})"
