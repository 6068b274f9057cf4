"""
Тесты согласованности между однопоточной и многопоточной реализациями.

При одинаковых данных и seed обе реализации должны давать одинаковые
метки и центроиды: порядок воркеров не влияет на результат.
"""

import numpy as np
import pytest

from pkmeans.core.cpu_serial import KMeansCPUSerial
from pkmeans.core.cpu_threading import KMeansCPUThreaded, ThreadingConfig


THREAD_CONFIGS = [
    ThreadingConfig(n_threads=1, search_threads=1),
    ThreadingConfig(n_threads=2, search_threads=2),
    ThreadingConfig(n_threads=4, search_threads=3, chunk_size=7),
    ThreadingConfig(n_threads=8, search_threads=8),
]


class TestImplementationConsistency:

    @pytest.mark.parametrize("threads", THREAD_CONFIGS)
    @pytest.mark.parametrize("seed", [0, 79])
    def test_serial_vs_threaded(self, medium_points, threads, seed):
        serial = KMeansCPUSerial(n_clusters=5, max_iterations=50)
        result_serial = serial.run([p.copy() for p in medium_points], rng=seed)

        threaded = KMeansCPUThreaded(n_clusters=5, max_iterations=50, threads=threads)
        result_threaded = threaded.run([p.copy() for p in medium_points], rng=seed)

        assert result_serial.n_iterations == result_threaded.n_iterations
        np.testing.assert_array_equal(result_serial.labels, result_threaded.labels)

        for a, b in zip(result_serial.clusters, result_threaded.clusters):
            assert a.id == b.id
            assert a.member_ids == b.member_ids
            np.testing.assert_allclose(
                a.centroid,
                b.centroid,
                rtol=1e-12,
                atol=1e-12,
                err_msg="Однопоточная и многопоточная реализации дают разные центроиды",
            )

    def test_separated_blobs_recovered(self, small_points):
        result = KMeansCPUThreaded(n_clusters=2, max_iterations=50).run(
            small_points, rng=79
        )

        groups = sorted(snap.member_ids for snap in result.clusters)
        assert groups == [tuple(range(30)), tuple(range(30, 60))]
