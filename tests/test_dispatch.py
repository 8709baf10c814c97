"""Tests for dispatching a benchmark id to the right executor."""

import asyncio

import pytest

from benchrunner.benchmarks.registry import BenchmarkRegistry
from benchrunner.errors import BenchmarkNotFoundError, BenchmarkNotUniqueError
from benchrunner.executor import BenchmarkExecutor
from benchrunner.models.job_models import CPUBenchmarkResult
from fakes import (
    MB,
    FakeAnalyzer,
    FakeCPUBenchmark,
    FakeSession,
    make_launcher,
    make_sleep,
)


def _executor(config, registry, session, calls):
    launcher = make_launcher(session)
    executor = BenchmarkExecutor(
        config,
        registry=registry,
        analyzer=FakeAnalyzer(),
        launcher=launcher,
        sleep=make_sleep(calls),
    )
    return executor, launcher


def test_dispatch_cpu_benchmark(config, registry, calls, framework, options):
    """Test the end-to-end CPU scenario with two iterations."""
    session = FakeSession(calls)
    executor, _ = _executor(config, registry, session, calls)

    result = asyncio.run(executor.execute(framework, "01_run1k", options))

    assert result.error is None
    assert len(result.result) == 2
    assert all(isinstance(m, CPUBenchmarkResult) for m in result.result)
    assert all(m.total >= 0 for m in result.result)


def test_dispatch_memory_benchmark(config, registry, calls, framework, options):
    """Test the end-to-end memory scenario with one iteration."""
    session = FakeSession(calls, memory_bytes=2 * MB)
    executor, _ = _executor(config, registry, session, calls)

    result = asyncio.run(
        executor.execute(
            framework, "22_run-memory", options.model_copy(update={"batch_size": 1})
        )
    )

    assert result.error is None
    assert result.result == [2.0]
    assert "trace_start" not in calls


def test_dispatch_unknown_id_fails_before_launch(config, registry, calls, framework, options):
    """Test that an unknown id never opens a browser."""
    executor, launcher = _executor(config, registry, FakeSession(calls), calls)

    with pytest.raises(BenchmarkNotFoundError):
        asyncio.run(executor.execute(framework, "99_unknown", options))
    assert launcher.launches == 0


def test_dispatch_duplicate_id_fails_before_launch(config, calls, framework, options):
    """Test that an id matching two benchmarks never opens a browser."""
    registry = BenchmarkRegistry([FakeCPUBenchmark(calls), FakeCPUBenchmark(calls)])
    executor, launcher = _executor(config, registry, FakeSession(calls), calls)

    with pytest.raises(BenchmarkNotUniqueError):
        asyncio.run(executor.execute(framework, "01_run1k", options))
    assert launcher.launches == 0
