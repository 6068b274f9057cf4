"""
Таймеры фаз кластеризации.

Контекстный менеджер Timer меряет время участка кода через
time.perf_counter(); отчёт печатает тайминги в микросекундах.
"""
from __future__ import annotations
import time
from typing import Any


class Timer:
    """
    Контекстный менеджер для измерения времени фазы.

    Пример использования:
        with Timer() as t:
            engine.assignment_phase()
        t.elapsed, t.microseconds
    """

    def __init__(self) -> None:
        self.start: float = 0.0
        self.end: float = 0.0
        self.elapsed: float = 0.0

    def __enter__(self) -> Timer:
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.end = time.perf_counter()
        self.elapsed = self.end - self.start

    @property
    def microseconds(self) -> int:
        return to_microseconds(self.elapsed)


def to_microseconds(seconds: float) -> int:
    """Секунды -> целые микросекунды (формат журнала таймингов)."""
    return int(round(seconds * 1_000_000))
