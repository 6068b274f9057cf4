"""
Тесты метрик производительности запусков.
"""

import pytest
from pkmeans.metrics.metrics import speedup, efficiency, throughput


class TestSpeedup:

    def test_speedup_basic(self):
        assert speedup(10.0, 5.0) == 2.0
        assert speedup(40.0, 10.0) == 4.0

    def test_speedup_sublinear(self):
        assert speedup(10.0, 6.0) == pytest.approx(10.0 / 6.0, rel=1e-10)

    def test_slowdown_is_below_one(self):
        # На GIL-bound фазах потоки могут работать медленнее baseline
        assert speedup(1.0, 2.0) == 0.5

    def test_speedup_zero_parallel_time(self):
        with pytest.raises(ZeroDivisionError):
            speedup(10.0, 0.0)


class TestEfficiency:

    def test_efficiency_basic(self):
        assert efficiency(2.0, 4) == 0.5
        assert efficiency(8.0, 8) == 1.0

    def test_efficiency_zero_threads(self):
        with pytest.raises(ZeroDivisionError):
            efficiency(2.0, 0)


class TestThroughput:

    def test_throughput_basic(self):
        # 1000 точек, 2 кластера, 2D, 10 итераций за 2 секунды
        assert throughput(1000, 2, 2, 10, 2.0) == 20000.0

    @pytest.mark.parametrize(
        "n_points, k, dimensionality, n_iterations, total_time",
        [
            (4, 2, 1, 3, 0.5),
            (500, 4, 10, 20, 5.0),
            (1_000_000, 10, 50, 100, 10.0),
        ],
    )
    def test_throughput_formula(self, n_points, k, dimensionality, n_iterations, total_time):
        expected = (n_points * k * dimensionality * n_iterations) / total_time
        result = throughput(n_points, k, dimensionality, n_iterations, total_time)
        assert result == pytest.approx(expected, rel=1e-12)

    def test_throughput_zero_time(self):
        with pytest.raises(ZeroDivisionError):
            throughput(1000, 2, 2, 10, 0.0)
