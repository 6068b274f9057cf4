from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence, Set, Tuple

import numpy as np

from pkmeans.core.cluster import Cluster, ClusterSnapshot
from pkmeans.core.errors import PreconditionViolation
from pkmeans.core.point import UNASSIGNED, Point
from pkmeans.metrics.metrics import throughput
from pkmeans.metrics.timers import Timer


class EngineState(str, Enum):
    UNINITIALIZED = "uninitialized"
    CENTERS_SELECTED = "centers_selected"
    ASSIGNING = "assigning"
    RECOMPUTING = "recomputing"
    CONVERGED = "converged"
    ITERATION_CAP_REACHED = "iteration_cap_reached"


@dataclass(frozen=True)
class ClusteringResult:
    """Итог одного запуска: счётчик итераций, тайминги и снимки кластеров."""

    n_iterations: int
    changed_on_last_pass: bool
    t_init: float
    t_iterations: float
    t_assign_total: float
    t_recompute_total: float
    clusters: Tuple[ClusterSnapshot, ...]
    labels: np.ndarray

    @property
    def converged(self) -> bool:
        return not self.changed_on_last_pass

    @property
    def t_total(self) -> float:
        return self.t_init + self.t_iterations


def select_initial_indices(
    n_points: int, k: int, rng: np.random.Generator
) -> List[int]:
    """
    K различных индексов точек, выборка без возвращения.

    Выборка с отклонением: тянем индекс, повторяем, если он уже выбран.
    """
    if k > n_points:
        raise PreconditionViolation(
            f"K={k} exceeds the number of points N={n_points}"
        )

    chosen: List[int] = []
    seen: Set[int] = set()
    while len(chosen) < k:
        index = int(rng.integers(0, n_points))
        if index not in seen:
            seen.add(index)
            chosen.append(index)
    return chosen


def make_rng(rng: np.random.Generator | int | None) -> np.random.Generator:
    """Явный генератор вместо глобального состояния np.random."""
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


class KMeansEngine(ABC):
    """
    Базовый класс движков K-means с членством точек в кластерах.

    Отвечает за инициализацию центров, цикл итераций и сбор таймингов:
    - t_init: выбор начальных центров (фаза 1);
    - t_assign_total / t_recompute_total: суммы по фазам назначения и
      пересчёта центроидов;
    - t_iterations: весь итерационный цикл (фаза 2).

    Между фазами действует жёсткий барьер: назначение читает центроиды,
    которые не меняются до конца фазы, пересчёт читает состав кластеров,
    который не меняется до конца пересчёта.
    """

    def __init__(
        self,
        n_clusters: int,
        max_iterations: int = 100,
        logger: Any | None = None,
    ) -> None:
        if n_clusters < 1:
            raise PreconditionViolation(f"K must be positive, got {n_clusters}")
        if max_iterations < 1:
            raise PreconditionViolation(
                f"max_iterations must be positive, got {max_iterations}"
            )

        self.K = int(n_clusters)
        self.max_iterations = int(max_iterations)
        self.logger = logger

        self.state = EngineState.UNINITIALIZED
        self.dimensionality: int = 0
        self.points: List[Point] = []
        self.clusters: List[Cluster] = []

        # Матрица координат (N, D) и отображение id точки -> строка
        self._X: np.ndarray | None = None
        self._row_by_id: Dict[int, int] = {}
        # Центроиды, зафиксированные на время фазы назначения (K, D)
        self._centroid_matrix: np.ndarray | None = None

        self.t_init: float = 0.0
        self.t_iterations: float = 0.0
        self.t_assign_total: float = 0.0
        self.t_recompute_total: float = 0.0
        self.n_iters_actual: int = 0
        self.changed_on_last_pass: bool = True

    # --- Подготовка и инициализация ---

    def _prepare(self, points: Sequence[Point]) -> None:
        points = list(points)
        if not points:
            raise PreconditionViolation("point collection is empty")

        dimensionality = points[0].dimensionality
        if dimensionality < 1:
            raise PreconditionViolation("points must have at least one coordinate")

        row_by_id: Dict[int, int] = {}
        for row, point in enumerate(points):
            if point.dimensionality != dimensionality:
                raise PreconditionViolation(
                    f"point {point.id} has {point.dimensionality} coordinates, "
                    f"expected {dimensionality}"
                )
            if point.id in row_by_id:
                raise PreconditionViolation(f"duplicate point id {point.id}")
            row_by_id[point.id] = row

        X = np.vstack([p.coordinates for p in points])
        if not np.isfinite(X).all():
            raise PreconditionViolation("point coordinates must be finite")

        self.points = points
        self.dimensionality = dimensionality
        self._row_by_id = row_by_id
        self._X = X

        self.t_init = 0.0
        self.t_iterations = 0.0
        self.t_assign_total = 0.0
        self.t_recompute_total = 0.0
        self.n_iters_actual = 0
        self.changed_on_last_pass = True

    def initialize(self, rng: np.random.Generator) -> None:
        """Выбирает K начальных центров; каждая выбранная точка — первый член кластера."""
        for point in self.points:
            point.cluster_id = UNASSIGNED

        indices = select_initial_indices(len(self.points), self.K, rng)

        self.clusters = []
        for cluster_id, index in enumerate(indices):
            point = self.points[index]
            point.cluster_id = cluster_id
            self.clusters.append(Cluster(cluster_id, point))

        self.state = EngineState.CENTERS_SELECTED

    # --- Основной цикл ---

    def run(
        self,
        points: Sequence[Point],
        rng: np.random.Generator | int | None = None,
    ) -> ClusteringResult:
        """
        Полный запуск: инициализация центров и цикл {назначение, пересчёт}.

        Цикл останавливается, когда:
        - ни одна точка не сменила кластер в фазе назначения, ИЛИ
        - счётчик итераций достиг max_iterations.

        Raises:
            PreconditionViolation: K больше числа точек или данные некорректны
        """
        self._prepare(points)

        with Timer() as t_init:
            self.initialize(make_rng(rng))
        self.t_init = t_init.elapsed

        with Timer() as t_loop:
            self._iterate()
        self.t_iterations = t_loop.elapsed

        if self.logger:
            ops = (
                throughput(
                    len(self.points),
                    self.K,
                    self.dimensionality,
                    self.n_iters_actual,
                    self.t_iterations,
                )
                if self.t_iterations > 0
                else 0.0
            )
            self.logger.info(
                f"  Run finished: state={self.state.value}, "
                f"iterations={self.n_iters_actual}, "
                f"T_init={self.t_init:.6f}s, T_iterations={self.t_iterations:.6f}s, "
                f"throughput={ops:.3e} ops/s"
            )

        return self.result()

    def _iterate(self) -> None:
        iteration = 1
        while True:
            self.state = EngineState.ASSIGNING
            with Timer() as t_assign:
                changed = self.assignment_phase()

            self.state = EngineState.RECOMPUTING
            with Timer() as t_recompute:
                self.recompute_phase()

            self.t_assign_total += t_assign.elapsed
            self.t_recompute_total += t_recompute.elapsed
            self.n_iters_actual = iteration
            self.changed_on_last_pass = changed

            stop = not changed or iteration >= self.max_iterations

            if self.logger and (iteration == 1 or iteration % 10 == 0 or stop):
                status = " (converged)" if not changed else ""
                self.logger.info(
                    f"  Iteration {iteration}/{self.max_iterations}{status} "
                    f"(T_assign={t_assign.elapsed:.6f}s, "
                    f"T_recompute={t_recompute.elapsed:.6f}s)"
                )

            if stop:
                break
            iteration += 1

        if self.changed_on_last_pass:
            self.state = EngineState.ITERATION_CAP_REACHED
            if self.logger:
                self.logger.info(
                    f"  Iteration cap reached after {iteration} iterations"
                )
        else:
            self.state = EngineState.CONVERGED
            if self.logger:
                self.logger.info(f"  Convergence reached after {iteration} iterations")

    # --- Общие шаги для реализаций ---

    def assignment_phase(self) -> bool:
        """
        Шаг назначения точек; True, если хотя бы одна точка сменила кластер.

        Центроиды фиксируются в матрицу (K, D) на всё время фазы.
        """
        self._centroid_matrix = self._stack_centroids()
        try:
            return self._assign_all()
        finally:
            self._centroid_matrix = None

    def find_nearest_cluster(self, point: Point) -> int:
        """id ближайшего центроида по квадрату евклидова расстояния."""
        centroids = self._centroid_matrix
        if centroids is None:
            centroids = self._stack_centroids()
        return self._reduce_minimum(self._search_partials(centroids, point.coordinates))

    def _stack_centroids(self) -> np.ndarray:
        return np.vstack([c.centroid for c in self.clusters])

    @staticmethod
    def _partial_minimum(
        centroids: np.ndarray, coordinates: np.ndarray, start: int, stop: int
    ) -> Tuple[float, int]:
        """
        Частичный минимум (distance², cluster_id) по кластерам [start, stop).

        argmin возвращает первое вхождение, т.е. наименьший id при равенстве.
        """
        if stop <= start:
            return float("inf"), -1
        diff = centroids[start:stop] - coordinates
        distances = np.sum(diff * diff, axis=1)
        j = int(np.argmin(distances))
        return float(distances[j]), start + j

    @staticmethod
    def _reduce_minimum(partials: Iterable[Tuple[float, int]]) -> int:
        """Последовательная редукция частичных минимумов строгим «<» в фиксированном порядке."""
        min_dist = float("inf")
        nearest = 0
        for dist, cluster_id in partials:
            if dist < min_dist:
                min_dist = dist
                nearest = cluster_id
        return nearest

    def _move_point(self, point: Point, nearest: int) -> bool:
        """Переносит точку в кластер nearest; True, если метка изменилась."""
        old = point.cluster_id
        if old == nearest:
            return False
        if old != UNASSIGNED:
            self.clusters[old].remove_member(point.id)
        self.clusters[nearest].add_member(point)
        point.cluster_id = nearest
        return True

    def _recompute_cluster(self, cluster: Cluster) -> None:
        """Центроид = среднее по членам; пустой кластер сохраняет прежний центроид."""
        member_ids = cluster.member_ids()
        if not member_ids:
            return
        assert self._X is not None
        # Строки в порядке id: результат не зависит от порядка вставки воркерами
        rows = sorted(self._row_by_id[i] for i in member_ids)
        mean = self._X[rows].mean(axis=0)
        for j in range(self.dimensionality):
            cluster.set_centroid_component(j, mean[j])

    def close(self) -> None:
        """Освободить ресурсы реализации (пулы и т.п.)."""

    def __enter__(self) -> KMeansEngine:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def result(self) -> ClusteringResult:
        return ClusteringResult(
            n_iterations=self.n_iters_actual,
            changed_on_last_pass=self.changed_on_last_pass,
            t_init=self.t_init,
            t_iterations=self.t_iterations,
            t_assign_total=self.t_assign_total,
            t_recompute_total=self.t_recompute_total,
            clusters=tuple(self._sorted_snapshot(c) for c in self.clusters),
            labels=np.array([p.cluster_id for p in self.points], dtype=np.int64),
        )

    @staticmethod
    def _sorted_snapshot(cluster: Cluster) -> ClusterSnapshot:
        snap = cluster.snapshot()
        return ClusterSnapshot(
            id=snap.id,
            centroid=snap.centroid,
            member_ids=tuple(sorted(snap.member_ids)),
        )

    # --- Шаги, зависящие от реализации ---

    @abstractmethod
    def _search_partials(
        self, centroids: np.ndarray, coordinates: np.ndarray
    ) -> List[Tuple[float, int]]:
        """Частичные минимумы по разбиению K кластеров, в порядке разбиения."""
        raise NotImplementedError

    @abstractmethod
    def _assign_all(self) -> bool:
        """Назначение всех точек при зафиксированных центроидах."""
        raise NotImplementedError

    @abstractmethod
    def recompute_phase(self) -> None:
        """Шаг пересчёта центроидов по текущему составу кластеров."""
        raise NotImplementedError
