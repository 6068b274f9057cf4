from __future__ import annotations

from typing import List, Tuple

import numpy as np

from .base import KMeansEngine


class KMeansCPUSerial(KMeansEngine):
    """Однопоточная реализация (baseline): одно разбиение, обычные циклы."""

    def _search_partials(
        self, centroids: np.ndarray, coordinates: np.ndarray
    ) -> List[Tuple[float, int]]:
        return [self._partial_minimum(centroids, coordinates, 0, self.K)]

    def _assign_all(self) -> bool:
        changed = False
        for point in self.points:
            if self._move_point(point, self.find_nearest_cluster(point)):
                changed = True
        return changed

    def recompute_phase(self) -> None:
        for cluster in self.clusters:
            self._recompute_cluster(cluster)
