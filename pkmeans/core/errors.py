"""
Типизированные ошибки движка кластеризации.

Алгоритмические ошибки (PreconditionViolation, IndexOutOfRange) прерывают
запуск и пробрасываются вызывающему коду. ResourceUnavailable относится
только ко вторичному журналу таймингов и обрабатывается локально.
"""

from __future__ import annotations


class KMeansError(Exception):
    """Базовый класс всех ошибок пакета."""


class PreconditionViolation(KMeansError, ValueError):
    """Нарушено предусловие запуска (например, K больше числа точек)."""


class IndexOutOfRange(KMeansError, IndexError):
    """Обращение к координате или центроиду за пределами размерности."""

    def __init__(self, index: int, dimensionality: int) -> None:
        super().__init__(
            f"index {index} is out of range for dimensionality {dimensionality}"
        )
        self.index = index
        self.dimensionality = dimensionality


class ResourceUnavailable(KMeansError, OSError):
    """Файл журнала таймингов недоступен (не фатально для запуска)."""


class InstanceFormatError(KMeansError, ValueError):
    """Входной поток задачи повреждён или неполон."""
