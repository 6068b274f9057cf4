from __future__ import annotations

from dataclasses import dataclass
from multiprocessing import cpu_count
from multiprocessing.pool import ThreadPool
from typing import Any, List, Optional, Tuple

import numpy as np

from pkmeans.core.base import ClusteringResult, KMeansEngine
from pkmeans.core.errors import PreconditionViolation


@dataclass(frozen=True)
class ThreadingConfig:
    """Параметры многопоточного KMeans."""

    n_threads: int = 4
    # Потоки поиска ближайшего центра (параллельно по K кластерам)
    search_threads: int = 2
    chunk_size: Optional[int] = None


def _partial_minimum_worker(
    args: Tuple[np.ndarray, np.ndarray, int, int]
) -> Tuple[float, int]:
    """Частичный минимум для одного разбиения кластеров."""
    centroids, coordinates, start, stop = args
    return KMeansEngine._partial_minimum(centroids, coordinates, start, stop)


class KMeansCPUThreaded(KMeansEngine):
    """
    K-Means на пулах потоков (fork-join), пулы создаются один раз на run.

    - Поиск ближайшего центра: K кластеров делятся на разбиения, каждый
      воркер считает свой частичный минимум, затем последовательная
      редукция по разбиениям в фиксированном порядке.
    - Назначение: чанки точек; каждый чанк возвращает свой флаг
      «что-то изменилось», флаги сливаются через any().
    - Пересчёт: по одному кластеру на задачу.

    Состав кластеров меняется из разных потоков под блокировкой
    каждого кластера, поэтому используются потоки, а не процессы.
    """

    def __init__(
        self,
        n_clusters: int,
        max_iterations: int = 100,
        threads: ThreadingConfig = ThreadingConfig(),
        logger: Any | None = None,
    ) -> None:
        super().__init__(
            n_clusters=n_clusters, max_iterations=max_iterations, logger=logger
        )
        if threads.n_threads < 1 or threads.search_threads < 1:
            raise PreconditionViolation("thread counts must be positive")
        self.threads = threads

        self._pool: Optional[ThreadPool] = None
        self._search_pool: Optional[ThreadPool] = None
        self._chunks: Optional[List[np.ndarray]] = None
        self._partitions: Optional[List[Tuple[int, int]]] = None
        # Вне run фазы сами закрывают созданные ими пулы
        self._in_run = False

    # --- Пулы и разбиение ---

    def _make_chunks(self, N: int, n_threads: int) -> List[np.ndarray]:
        """Разбиение индексов точек на чанки."""
        if self.threads.chunk_size is None:
            chunks = np.array_split(np.arange(N), n_threads)
        else:
            cs = int(self.threads.chunk_size)
            if cs <= 0:
                raise PreconditionViolation("chunk_size must be positive")
            chunks = [np.arange(i, min(i + cs, N)) for i in range(0, N, cs)]
        return [idx for idx in chunks if idx.size > 0]

    def _make_partitions(self) -> List[Tuple[int, int]]:
        """Разбиение id кластеров на непрерывные диапазоны [start, stop)."""
        n_parts = max(1, min(self.threads.search_threads, self.K))
        bounds = np.linspace(0, self.K, n_parts + 1).astype(int)
        return [
            (int(start), int(stop))
            for start, stop in zip(bounds[:-1], bounds[1:])
            if stop > start
        ]

    def _ensure_pools(self) -> None:
        """Ленивая инициализация пулов, чанков и разбиений."""
        if self._pool is not None and self._chunks is not None:
            return

        n_threads = max(1, min(int(self.threads.n_threads), cpu_count()))
        self._chunks = self._make_chunks(len(self.points), n_threads)
        self._partitions = self._make_partitions()
        self._pool = ThreadPool(processes=n_threads)

        if len(self._partitions) > 1:
            self._search_pool = ThreadPool(processes=len(self._partitions))

    def close(self) -> None:
        """Закрыть пулы (после run или после фазы, вызванной вне run)."""
        for pool in (self._pool, self._search_pool):
            if pool is not None:
                pool.close()
                pool.join()
        self._pool = None
        self._search_pool = None
        self._chunks = None
        self._partitions = None

    # ---------- Nearest-center search (parallel over clusters) ----------

    def _search_partials(
        self, centroids: np.ndarray, coordinates: np.ndarray
    ) -> List[Tuple[float, int]]:
        partitions = self._partitions or self._make_partitions()
        args = [(centroids, coordinates, start, stop) for start, stop in partitions]

        if self._search_pool is None:
            return [_partial_minimum_worker(a) for a in args]
        # map сохраняет порядок разбиений: редукция детерминирована
        return self._search_pool.map(_partial_minimum_worker, args)

    # ---------- Assignment (parallel over point chunks) ----------

    def _assign_chunk(self, idx: np.ndarray) -> bool:
        changed = False
        for i in idx:
            point = self.points[i]
            if self._move_point(point, self.find_nearest_cluster(point)):
                changed = True
        return changed

    def _assign_all(self) -> bool:
        self._ensure_pools()
        assert self._pool is not None and self._chunks is not None

        try:
            flags = self._pool.map(self._assign_chunk, self._chunks)
        finally:
            if not self._in_run:
                self.close()
        return any(flags)

    # ---------- Recompute (parallel over clusters) ----------

    def recompute_phase(self) -> None:
        self._ensure_pools()
        assert self._pool is not None

        try:
            self._pool.map(self._recompute_cluster, self.clusters)
        finally:
            if not self._in_run:
                self.close()

    def run(
        self,
        points: Any,
        rng: np.random.Generator | int | None = None,
    ) -> ClusteringResult:
        """run с переиспользованием пулов и гарантированным закрытием."""
        self.close()
        self._in_run = True
        try:
            return super().run(points, rng)
        finally:
            self._in_run = False
            self.close()
