"""
Тесты отчёта по кластерам и журнала таймингов.
"""

import logging

import numpy as np
import pytest

from pkmeans.core.base import ClusteringResult
from pkmeans.core.cluster import ClusterSnapshot
from pkmeans.core.cpu_serial import KMeansCPUSerial
from pkmeans.core.errors import ResourceUnavailable
from pkmeans.core.point import Point
from pkmeans.reporting.report import (
    append_timing_log,
    format_report,
    format_timing_summary,
)


@pytest.fixture
def points():
    return [
        Point(0, [1.0, 1.0], "a"),
        Point(1, [2.0, 2.0]),
        Point(2, [9.0, 9.25], "c"),
    ]


@pytest.fixture
def result():
    return ClusteringResult(
        n_iterations=3,
        changed_on_last_pass=False,
        t_init=0.001,
        t_iterations=0.002,
        t_assign_total=0.0015,
        t_recompute_total=0.0005,
        clusters=(
            ClusterSnapshot(0, np.array([1.5, 1.5]), (0, 1)),
            ClusterSnapshot(1, np.array([9.0, 9.25]), (2,)),
        ),
        labels=np.array([0, 0, 1]),
    )


class TestFormatReport:

    def test_timing_summary(self, result):
        assert format_timing_summary(result) == (
            "Break in iteration 3\n"
            "TOTAL EXECUTION TIME = 3000\n"
            "TIME PHASE 1 = 1000\n"
            "TIME PHASE 2 = 2000\n"
        )

    def test_clusters_and_points(self, result, points):
        report = format_report(result, points)

        assert report.startswith(
            "Cluster 1\n"
            "Point 1: 1 1 - a\n"
            "Point 2: 2 2\n"
            "Cluster values: 1.5 1.5\n"
            "\n"
            "Cluster 2\n"
            "Point 3: 9 9.25 - c\n"
            "Cluster values: 9 9.25\n"
        )
        assert report.endswith(format_timing_summary(result))

    def test_empty_cluster_is_listed(self, points):
        result = ClusteringResult(
            n_iterations=1,
            changed_on_last_pass=False,
            t_init=0.0,
            t_iterations=0.0,
            t_assign_total=0.0,
            t_recompute_total=0.0,
            clusters=(
                ClusterSnapshot(0, np.array([1.0, 1.0]), (0, 1, 2)),
                ClusterSnapshot(1, np.array([4.0, 4.0]), ()),
            ),
            labels=np.array([0, 0, 0]),
        )
        report = format_report(result, points)
        assert "Cluster 2\nCluster values: 4 4\n" in report

    def test_report_from_engine_run(self, make_points):
        points = make_points([1.0, 2.0, 9.0, 10.0], names=["w", "x", "y", "z"])
        result = KMeansCPUSerial(n_clusters=2, max_iterations=10).run(points, rng=0)

        report = format_report(result, points)

        assert report.count("Cluster values:") == 2
        for name in "wxyz":
            assert f" - {name}\n" in report
        assert f"Break in iteration {result.n_iterations}\n" in report


class TestAppendTimingLog:

    def test_appends(self, tmp_path, result):
        path = tmp_path / "output.txt"

        assert append_timing_log(result, path) is None
        assert append_timing_log(result, path) is None

        content = path.read_text(encoding="utf-8")
        assert content == format_timing_summary(result) * 2

    def test_unavailable_file_is_not_fatal(self, tmp_path, result, caplog):
        logger = logging.getLogger("report_test")
        bad_path = tmp_path / "missing-dir" / "output.txt"

        with caplog.at_level(logging.ERROR, logger="report_test"):
            diagnostic = append_timing_log(result, bad_path, logger=logger)

        assert isinstance(diagnostic, ResourceUnavailable)
        assert isinstance(diagnostic, OSError)
        assert "Unable to open timing log" in str(diagnostic)
        assert any("Unable to open timing log" in r.message for r in caplog.records)
        assert not bad_path.exists()
