"""Tests for the benchmark registry and catalog."""

import pytest

from benchrunner.benchmarks.catalog import slow_down_factor
from benchrunner.benchmarks.registry import BenchmarkRegistry
from benchrunner.errors import (
    BenchmarkLookupError,
    BenchmarkNotFoundError,
    BenchmarkNotUniqueError,
)
from benchrunner.models.constants import BenchmarkType
from fakes import FakeCPUBenchmark


def test_default_catalog_lookup():
    """Test resolving ids from the built-in catalog."""
    registry = BenchmarkRegistry()

    assert registry.find("01_run1k").type == BenchmarkType.CPU
    assert registry.find("22_run-memory").type == BenchmarkType.MEMORY
    assert "09_clear1k_x8" in registry


def test_default_catalog_ids_are_unique():
    """Test that every catalog id resolves to exactly one benchmark."""
    registry = BenchmarkRegistry()
    for benchmark in registry.get_all_benchmarks():
        assert registry.find(benchmark.id) is benchmark


def test_lookup_not_found():
    """Test that an unknown id raises a lookup error."""
    registry = BenchmarkRegistry()

    with pytest.raises(BenchmarkNotFoundError) as exc_info:
        registry.find("01_run")
    assert exc_info.value.matches == 0
    assert isinstance(exc_info.value, BenchmarkLookupError)


def test_lookup_not_unique(calls):
    """Test that a duplicated id is reported on lookup."""
    registry = BenchmarkRegistry([FakeCPUBenchmark(calls), FakeCPUBenchmark(calls)])

    assert len(registry) == 2
    with pytest.raises(BenchmarkNotUniqueError) as exc_info:
        registry.find("01_run1k")
    assert exc_info.value.matches == 2
    assert "not unique" in str(exc_info.value)


def test_list_benchmarks_sorted():
    """Test the catalog summary."""
    summaries = BenchmarkRegistry().list_benchmarks()
    ids = [s["id"] for s in summaries]

    assert ids == sorted(ids)
    assert {s["type"] for s in summaries} == {"cpu", "memory"}


def test_slow_down_factor():
    """Test slowdown lookup by id and throttling flag."""
    assert slow_down_factor("04_select1k", allow_throttling=True) == 4
    assert slow_down_factor("04_select1k", allow_throttling=False) is None
    assert slow_down_factor("01_run1k", allow_throttling=True) is None
