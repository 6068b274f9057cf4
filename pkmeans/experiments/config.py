from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional

from pkmeans.core.base import KMeansEngine
from pkmeans.core.cpu_serial import KMeansCPUSerial
from pkmeans.core.cpu_threading import KMeansCPUThreaded, ThreadingConfig

# Seed по умолчанию: запуски воспроизводимы без явного --seed
DEFAULT_SEED = 79
DEFAULT_LOG_FILE = "output.txt"


class EngineKind(str, Enum):
    SERIAL = "serial"
    THREADED = "threaded"


@dataclass(frozen=True)
class RunConfig:
    """Параметры запуска (всё, что не приходит из входного потока)."""

    engine: EngineKind = EngineKind.THREADED
    n_threads: int = 4
    search_threads: int = 2
    chunk_size: Optional[int] = None
    seed: Optional[int] = DEFAULT_SEED
    log_path: str = DEFAULT_LOG_FILE
    repeats: int = 1
    warmup: int = 0

    @property
    def threading(self) -> ThreadingConfig:
        return ThreadingConfig(
            n_threads=self.n_threads,
            search_threads=self.search_threads,
            chunk_size=self.chunk_size,
        )

    def as_serial(self) -> RunConfig:
        return replace(self, engine=EngineKind.SERIAL)

    def make_engine(
        self, k: int, max_iterations: int, logger: Any | None = None
    ) -> KMeansEngine:
        if self.engine == EngineKind.SERIAL:
            return KMeansCPUSerial(
                n_clusters=k, max_iterations=max_iterations, logger=logger
            )
        return KMeansCPUThreaded(
            n_clusters=k,
            max_iterations=max_iterations,
            threads=self.threading,
            logger=logger,
        )
