"""
Memory usage benchmarks for JSONC parsing.

Measures peak memory during a parse, and checks that a failed parse keeps
nothing alive once it returns.
"""

import json
import tracemalloc
from typing import Any

import orjson
import pytest
import ujson  # type: ignore[import-untyped]

import jzonc
from benchmarks.data_generators import DATA_TYPES
from benchmarks.data_generators import generate_test_data


def measure_memory_usage(func: Any, *args: Any) -> tuple[Any, int]:
    """
    Measures peak memory usage during function execution.

    Returns:
        Tuple of (function_result, peak_memory_bytes)
    """
    tracemalloc.start()
    try:
        result = func(*args)
        _, peak = tracemalloc.get_traced_memory()
        return result, peak
    finally:
        tracemalloc.stop()


class TestMemoryUsage:
    """Memory usage benchmarks for parsing."""

    @pytest.mark.parametrize("data_type", DATA_TYPES)
    def test_jzonc_memory(self, data_type: str) -> None:
        """Measures memory usage for jzonc on JSONC input."""
        test_data = generate_test_data(data_type, dialect="jsonc")
        result, peak_memory = measure_memory_usage(jzonc.parse, test_data)

        print(f"\njzonc {data_type}: {peak_memory:,} bytes")
        assert isinstance(result, jzonc.Ok)
        jzonc.free(result.value)

    def test_failed_parse_retains_nothing(self) -> None:
        """A syntax error late in a large document leaves no residue."""
        test_data = generate_test_data("task_list") + " trailing garbage"

        tracemalloc.start()
        try:
            baseline, _ = tracemalloc.get_traced_memory()
            result = jzonc.parse(test_data)
            assert isinstance(result, jzonc.SyntaxFailure)
            del result
            current, _ = tracemalloc.get_traced_memory()
        finally:
            tracemalloc.stop()

        # Only small interpreter caches may remain.
        assert current - baseline < len(test_data)

    def test_memory_comparison_summary(self) -> None:
        """Generates a memory usage comparison on strict JSON input."""
        results = {}

        for data_type in DATA_TYPES:
            test_data = generate_test_data(data_type)

            _, stdlib_memory = measure_memory_usage(json.loads, test_data)
            _, orjson_memory = measure_memory_usage(
                orjson.loads, test_data.encode("utf-8")
            )
            _, ujson_memory = measure_memory_usage(ujson.loads, test_data)
            _, jzonc_memory = measure_memory_usage(jzonc.loads, test_data)

            results[data_type] = {
                "stdlib_json": stdlib_memory,
                "orjson": orjson_memory,
                "ujson": ujson_memory,
                "jzonc": jzonc_memory,
            }

        print("\n" + "=" * 72)
        print("MEMORY USAGE COMPARISON (bytes)")
        print("=" * 72)
        for data_type, measurements in results.items():
            row = " ".join(
                f"{name}={peak:,}" for name, peak in measurements.items()
            )
            print(f"{data_type:<18} {row}")

        assert len(results) == len(DATA_TYPES)
