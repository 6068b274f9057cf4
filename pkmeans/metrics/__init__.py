from .timers import Timer, to_microseconds
from .metrics import speedup, efficiency, throughput

__all__ = [
    "Timer",
    "to_microseconds",
    "speedup",
    "efficiency",
    "throughput",
]
