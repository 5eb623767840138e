"""
Hot path profiling for the tokenizer and parser.

Setting JZONC_PROFILE in the environment (outside ``python -O``) times
every tokenize run and every array/object parse. Otherwise ProfileContext
is an empty context manager and nothing is recorded.
"""

import os
import time
from dataclasses import dataclass
from typing import Any

PROFILE_HOT_PATHS = __debug__ and "JZONC_PROFILE" in os.environ


@dataclass
class HotPathStats:
    """Accumulated timings for one parsing phase."""

    phase: str
    call_count: int = 0
    failure_count: int = 0
    total_time_ns: int = 0
    chars_processed: int = 0

    def record_call(
        self, duration_ns: int, chars: int = 0, failed: bool = False
    ) -> None:
        """Adds one timed run of the phase."""
        self.call_count += 1
        self.total_time_ns += duration_ns
        self.chars_processed += chars
        if failed:
            self.failure_count += 1

    @property
    def mean_time_ns(self) -> float:
        if not self.call_count:
            return 0.0
        return self.total_time_ns / self.call_count


if PROFILE_HOT_PATHS:
    _phase_stats: dict[str, HotPathStats] = {}

    class ProfileContext:
        """Times the enclosed block and files it under ``phase``."""

        def __init__(self, phase: str, chars: int = 0):
            self.phase = phase
            self.chars = chars
            self.started_ns = 0

        def __enter__(self) -> "ProfileContext":
            self.started_ns = time.perf_counter_ns()
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            elapsed = time.perf_counter_ns() - self.started_ns
            stats = _phase_stats.get(self.phase)
            if stats is None:
                stats = _phase_stats[self.phase] = HotPathStats(self.phase)
            stats.record_call(elapsed, self.chars, failed=exc_type is not None)

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        """Returns a snapshot of the statistics per phase."""
        return dict(_phase_stats)

    def clear_hot_path_stats() -> None:
        """Drops all recorded statistics."""
        _phase_stats.clear()

else:

    class ProfileContext:  # type: ignore[no-redef]
        def __init__(self, phase: str, chars: int = 0) -> None:
            pass

        def __enter__(self) -> "ProfileContext":
            return self

        def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
            pass

    def get_hot_path_stats() -> dict[str, HotPathStats]:
        return {}

    def clear_hot_path_stats() -> None:
        pass
