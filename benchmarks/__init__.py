"""
Benchmark suite for jzonc parsing performance.

Compares jzonc against standard JSON libraries including:
- Python standard library json
- orjson (C-optimized)
- ujson (ultra-fast JSON)

Measures parsing speed and memory usage across different data shapes.
"""
