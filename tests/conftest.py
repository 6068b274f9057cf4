"""
Общие фикстуры для всех тестов.
"""

from typing import Callable, List, Optional, Sequence

import numpy as np
import pytest

from pkmeans.core.point import Point


def _make_points(
    X: np.ndarray | Sequence[Sequence[float]], names: Optional[Sequence[str]] = None
) -> List[Point]:
    X = np.asarray(X, dtype=np.float64)
    if X.ndim == 1:
        X = X[:, None]
    return [
        Point(i, row, names[i] if names is not None else None)
        for i, row in enumerate(X)
    ]


@pytest.fixture
def make_points() -> Callable[..., List[Point]]:
    """Фабрика точек: строки матрицы -> Point с id = номер строки."""
    return _make_points


@pytest.fixture
def line_points():
    """Четыре точки на прямой: {1, 2} и {9, 10}."""
    return _make_points([1.0, 2.0, 9.0, 10.0])


@pytest.fixture
def small_points():
    """Небольшой датасет (2D, 2 явно разделённых кластера)."""
    rng = np.random.default_rng(42)
    cluster1 = rng.standard_normal((30, 2)) + [0, 0]
    cluster2 = rng.standard_normal((30, 2)) + [8, 8]
    return _make_points(np.vstack([cluster1, cluster2]))


@pytest.fixture
def medium_points():
    """Средний датасет (10D, 3 кластера)."""
    rng = np.random.default_rng(7)
    cluster1 = rng.standard_normal((50, 10)) + [0] * 10
    cluster2 = rng.standard_normal((50, 10)) + [6] * 10
    cluster3 = rng.standard_normal((50, 10)) + [-6] * 10
    return _make_points(np.vstack([cluster1, cluster2, cluster3]))


def assert_partition(engine) -> None:
    """Каждая точка ровно в одном кластере, и её cluster_id совпадает с ним."""
    owners = {}
    for cluster in engine.clusters:
        for point_id in cluster.member_ids():
            assert point_id not in owners, f"point {point_id} is in two clusters"
            owners[point_id] = cluster.id

    assert set(owners) == {p.id for p in engine.points}
    for point in engine.points:
        assert owners[point.id] == point.cluster_id


def assert_centroids_are_means(engine) -> None:
    """Центроид непустого кластера равен среднему его членов."""
    by_id = {p.id: p for p in engine.points}
    for cluster in engine.clusters:
        member_ids = cluster.member_ids()
        if not member_ids:
            continue
        expected = np.mean([by_id[i].coordinates for i in member_ids], axis=0)
        np.testing.assert_allclose(cluster.centroid, expected, rtol=1e-10, atol=1e-12)


@pytest.fixture
def check_partition():
    return assert_partition


@pytest.fixture
def check_centroids():
    return assert_centroids_are_means
