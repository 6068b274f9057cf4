from .errors import (
    InstanceFormatError,
    IndexOutOfRange,
    KMeansError,
    PreconditionViolation,
    ResourceUnavailable,
)
from .point import UNASSIGNED, Point
from .cluster import Cluster, ClusterSnapshot
from .base import ClusteringResult, EngineState, KMeansEngine, select_initial_indices
from .cpu_serial import KMeansCPUSerial
from .cpu_threading import KMeansCPUThreaded, ThreadingConfig

__all__ = [
    "KMeansError",
    "PreconditionViolation",
    "IndexOutOfRange",
    "ResourceUnavailable",
    "InstanceFormatError",
    "UNASSIGNED",
    "Point",
    "Cluster",
    "ClusterSnapshot",
    "ClusteringResult",
    "EngineState",
    "KMeansEngine",
    "select_initial_indices",
    "KMeansCPUSerial",
    "KMeansCPUThreaded",
    "ThreadingConfig",
]
