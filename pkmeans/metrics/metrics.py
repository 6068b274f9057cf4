"""
Метрики производительности запусков K-means.

Ускорение и эффективность многопоточного движка относительно
однопоточного, пропускная способность одного запуска.
"""

from __future__ import annotations


def speedup(t_serial: float, t_parallel: float) -> float:
    """
    Ускорение многопоточного запуска: t_serial / t_parallel.

    Raises:
        ZeroDivisionError: Если t_parallel равно нулю
    """
    if t_parallel == 0:
        raise ZeroDivisionError("Parallel time cannot be zero")
    return t_serial / t_parallel


def efficiency(speedup: float, p: int) -> float:
    """
    Параллельная эффективность speedup / p (1.0 — линейное ускорение).

    Raises:
        ZeroDivisionError: Если p равно нулю
    """
    if p == 0:
        raise ZeroDivisionError("Number of threads cannot be zero")
    return speedup / p


def throughput(
    n_points: int, k: int, dimensionality: int, n_iterations: int, total_time: float
) -> float:
    """
    Пропускная способность: покомпонентные сравнения точка-центроид в секунду.

    За одну итерацию фаза назначения делает N × K × D операций, поэтому
    throughput = (N × K × D × n_iterations) / total_time.

    Raises:
        ZeroDivisionError: Если total_time равно нулю
    """
    if total_time == 0:
        raise ZeroDivisionError("Total time cannot be zero")
    return (n_points * k * dimensionality * n_iterations) / total_time
