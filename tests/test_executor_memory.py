"""Tests for the memory job executor."""

import asyncio

from benchrunner.executor import BenchmarkExecutor
from fakes import MB, FakeMemBenchmark, FakeSession, make_launcher, make_sleep


def _run(config, calls, session, benchmark, framework, options):
    executor = BenchmarkExecutor(
        config, launcher=make_launcher(session), sleep=make_sleep(calls)
    )
    return asyncio.run(executor.run_mem_benchmark(framework, benchmark, options))


def test_memory_job_single_sample(config, calls, framework, options):
    """Test a one-iteration memory job."""
    session = FakeSession(calls, memory_bytes=3 * MB)
    result = _run(
        config, calls, session, FakeMemBenchmark(calls), framework,
        options.model_copy(update={"batch_size": 1}),
    )

    assert result.error is None
    assert result.result == [3.0]
    assert calls == [
        "new_page",
        "goto:http://localhost:8080/vanillajs/index.html",
        "init",
        "run",
        "gc",
        "settle:40",
        "memory",
        "page_close",
        "browser_close",
    ]


def test_memory_job_reuses_one_page(config, calls, framework, options):
    """Test that every iteration navigates the same page."""
    session = FakeSession(calls, memory_bytes=1.5 * MB)
    result = _run(config, calls, session, FakeMemBenchmark(calls), framework, options)

    assert result.result == [1.5, 1.5]
    assert session.pages_opened == 1
    assert session.pages[0].goto_attempts == 2
    assert session.pages_closed == 1
    assert session.closed


def test_negative_memory_sample_aborts(config, calls, framework, options):
    """Test that a negative sample is fatal and never recorded."""
    session = FakeSession(calls, memory_bytes=-MB)
    result = _run(config, calls, session, FakeMemBenchmark(calls), framework, options)

    assert result.error == "memory result -1.0 < 0"
    assert result.result is None
    assert calls.count("memory") == 1
    assert session.closed


def test_memory_job_error_still_closes(config, calls, framework, options):
    """Test that a failing run step reports the error and closes the browser."""
    session = FakeSession(calls, memory_bytes=MB, close_error=RuntimeError("gone"))
    result = _run(
        config, calls, session,
        FakeMemBenchmark(calls, run_error=RuntimeError("row missing")),
        framework, options,
    )

    assert result.error == "row missing"
    assert result.result is None
    assert session.pages_closed == 1
    assert session.closed
