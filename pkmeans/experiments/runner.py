import logging
import time
from typing import Any, Dict, List, Tuple

import numpy as np

from pkmeans.core.base import ClusteringResult, KMeansEngine
from pkmeans.core.point import Point
from pkmeans.data.instance import ProblemInstance
from pkmeans.experiments.config import RunConfig
from pkmeans.metrics.metrics import efficiency, speedup, throughput
from pkmeans.metrics.timers import Timer
from pkmeans.utils.logging import format_instance_prefix


class _PrefixedLogger:
    """Обёртка над логгером, добавляющая префикс к каждому сообщению."""

    def __init__(self, base_logger: logging.Logger | None, prefix: str) -> None:
        self._base = base_logger
        self._prefix = prefix

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._base:
            self._base.info(f"{self._prefix} {msg}", *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        if self._base:
            self._base.warning(f"{self._prefix} {msg}", *args, **kwargs)


class BenchmarkRunner:
    """
    Запускает серию прогонов KMeans на одном экземпляре задачи.

    Каждый прогон получает свежие копии точек и генератор с тем же seed,
    поэтому все повторы кластеризуют одинаково и различаются только временем.
    """

    def __init__(
        self,
        instance: ProblemInstance,
        config: RunConfig,
        logger: logging.Logger | None = None,
    ) -> None:
        self.instance = instance
        self.config = config
        self.logger = logger

        self._prefix = format_instance_prefix(
            instance.n_points, instance.dimensionality, instance.k
        )

    def _create_engine(self) -> KMeansEngine:
        logger = _PrefixedLogger(self.logger, self._prefix)
        return self.config.make_engine(
            self.instance.k, self.instance.max_iterations, logger=logger
        )

    def run_once(self) -> Tuple[ClusteringResult, List[Point], float]:
        """Один прогон: (результат, точки этого прогона, полное время)."""
        points = self.instance.fresh_points()
        engine = self._create_engine()
        with Timer() as t_run:
            result = engine.run(points, rng=self.config.seed)
        return result, points, t_run.elapsed

    def run(self) -> Dict[str, Any]:
        """
        Разогревочные и измеряемые прогоны, агрегированная статистика времени.

        :return: словарь со средними таймингами и записями по каждому прогону
        """
        repeats = max(1, self.config.repeats)
        warmup = max(0, self.config.warmup)
        N = self.instance.n_points
        K = self.instance.k
        D = self.instance.dimensionality

        if self.logger and warmup:
            self.logger.info(f"{self._prefix} Warmup x{warmup}")

        warmup_start = time.perf_counter()
        for _ in range(warmup):
            self.run_once()
        warmup_elapsed = time.perf_counter() - warmup_start

        runs: List[Dict[str, float]] = []
        last_result: ClusteringResult | None = None

        for run_idx in range(1, repeats + 1):
            if self.logger:
                self.logger.info(f"{self._prefix} Run {run_idx}/{repeats}")

            result, _, t_run = self.run_once()
            last_result = result

            runs.append(
                {
                    "run_idx": run_idx,
                    "T_run": t_run,
                    "T_init": result.t_init,
                    "T_iterations": result.t_iterations,
                    "T_assign_total": result.t_assign_total,
                    "T_recompute_total": result.t_recompute_total,
                    "n_iterations": result.n_iterations,
                    "throughput_ops": (
                        throughput(N, K, D, result.n_iterations, t_run)
                        if t_run > 0.0
                        else 0.0
                    ),
                }
            )

        assert last_result is not None
        times = [r["T_run"] for r in runs]

        stats: Dict[str, Any] = {
            "engine": self.config.engine.value,
            "T_run_avg": float(np.mean(times)),
            "T_run_std": float(np.std(times)),
            "T_run_min": float(np.min(times)),
            "T_init_avg": float(np.mean([r["T_init"] for r in runs])),
            "T_iterations_avg": float(np.mean([r["T_iterations"] for r in runs])),
            "T_assign_total_avg": float(np.mean([r["T_assign_total"] for r in runs])),
            "T_recompute_total_avg": float(
                np.mean([r["T_recompute_total"] for r in runs])
            ),
            "throughput_ops_avg": float(np.mean([r["throughput_ops"] for r in runs])),
            "n_iterations": last_result.n_iterations,
            "converged": last_result.converged,
            "runs": runs,
            "repeats_done": len(runs),
            "warmup_seconds": warmup_elapsed,
        }

        if self.logger:
            self.logger.info(
                f"{self._prefix} Timing ({stats['engine']}): "
                f"T_run_avg={stats['T_run_avg']:.6f}s, "
                f"T_run_std={stats['T_run_std']:.6f}s, "
                f"T_run_min={stats['T_run_min']:.6f}s, "
                f"T_assign_total_avg={stats['T_assign_total_avg']:.6f}s, "
                f"T_recompute_total_avg={stats['T_recompute_total_avg']:.6f}s"
            )

        return stats


def compare_to_baseline(
    baseline: Dict[str, Any], stats: Dict[str, Any], p: int
) -> Dict[str, float]:
    """Ускорение и эффективность прогона относительно однопоточного baseline."""
    s = speedup(baseline["T_run_avg"], stats["T_run_avg"])
    return {"speedup": s, "efficiency": efficiency(s, p)}
