"""Page benchmarks and the registry that resolves them by id."""

from benchrunner.benchmarks.base import Benchmark, CPUBenchmark, MemBenchmark
from benchrunner.benchmarks.catalog import slow_down_factor
from benchrunner.benchmarks.registry import BenchmarkRegistry

__all__ = [
    "Benchmark",
    "BenchmarkRegistry",
    "CPUBenchmark",
    "MemBenchmark",
    "slow_down_factor",
]
