"""
Проверка согласованности экземпляра задачи.

Нужна для экземпляров, собранных вручную (не через parse_instance):
размеры точек должны совпадать с заголовком, а id — быть уникальными.
"""

from __future__ import annotations

from pkmeans.core.errors import InstanceFormatError
from pkmeans.data.instance import ProblemInstance


def validate_instance(instance: ProblemInstance) -> None:
    """
    Проверяет соответствие точек параметрам экземпляра.

    Raises:
        InstanceFormatError: Если данные не соответствуют заголовку
    """
    if not instance.points:
        raise InstanceFormatError("instance has no points")
    if instance.k < 1 or instance.max_iterations < 1:
        raise InstanceFormatError(
            f"K and max iterations must be positive, got "
            f"K={instance.k}, max_iterations={instance.max_iterations}"
        )

    seen: set[int] = set()
    for point in instance.points:
        if point.dimensionality != instance.dimensionality:
            raise InstanceFormatError(
                f"Expected {instance.dimensionality} coordinates for point "
                f"{point.id}, got {point.dimensionality}"
            )
        if point.id in seen:
            raise InstanceFormatError(f"Duplicate point id {point.id}")
        seen.add(point.id)
        if instance.has_names and point.label is None:
            raise InstanceFormatError(f"Point {point.id} has no name")
