"""Pydantic models and constants shared by the runner."""

from benchrunner.models.constants import BenchmarkType
from benchrunner.models.job_models import (
    BenchmarkInfo,
    BenchmarkOptions,
    CPUBenchmarkResult,
    CPUDurationResult,
    FrameworkData,
    JobMessage,
    JobResult,
    RunConfig,
)

__all__ = [
    "BenchmarkInfo",
    "BenchmarkOptions",
    "BenchmarkType",
    "CPUBenchmarkResult",
    "CPUDurationResult",
    "FrameworkData",
    "JobMessage",
    "JobResult",
    "RunConfig",
]
