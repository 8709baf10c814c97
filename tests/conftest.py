"""Shared fixtures for the benchrunner test suite."""

from io import StringIO

import pytest

from benchrunner.benchmarks.registry import BenchmarkRegistry
from benchrunner.models.job_models import BenchmarkOptions, FrameworkData, RunConfig
from benchrunner.utils.logger import Logger
from fakes import FakeCPUBenchmark, FakeMemBenchmark


@pytest.fixture(autouse=True)
def log_output():
    """Configure logging into a buffer for every test."""
    output = StringIO()
    Logger.configure(level="DEBUG", output=output, timestamps=False)
    return output


@pytest.fixture
def calls() -> list[str]:
    return []


@pytest.fixture
def framework() -> FrameworkData:
    return FrameworkData(
        name="vanillajs", uri="vanillajs", start_logic_event_name="run"
    )


@pytest.fixture
def options(tmp_path) -> BenchmarkOptions:
    return BenchmarkOptions(
        host="localhost", port=8080, batch_size=2, traces_directory=tmp_path / "traces"
    )


@pytest.fixture
def config() -> RunConfig:
    return RunConfig(log_progress=True, max_measurement_retries=3)


@pytest.fixture
def registry(calls) -> BenchmarkRegistry:
    return BenchmarkRegistry([FakeCPUBenchmark(calls), FakeMemBenchmark(calls)])
