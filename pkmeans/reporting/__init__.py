from .report import (
    DEFAULT_LOG_PATH,
    append_timing_log,
    format_report,
    format_timing_summary,
)

__all__ = [
    "DEFAULT_LOG_PATH",
    "append_timing_log",
    "format_report",
    "format_timing_summary",
]
