"""Trace files and the boundary to the trace analyzer.

Parsing traces is not done here. A trace analyzer is any object with the
three coroutine methods of ``TraceAnalyzer``; it is named in the run
configuration as ``"package.module:attribute"`` and loaded at job start.
"""

import importlib
import shutil
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from benchrunner.errors import TraceAnalyzerLoadError
from benchrunner.models.job_models import (
    BenchmarkInfo,
    BenchmarkOptions,
    CPUBenchmarkResult,
    CPUDurationResult,
    FrameworkData,
    RunConfig,
)
from benchrunner.utils.logger import Logger


@runtime_checkable
class TraceAnalyzer(Protocol):
    """Derives durations from a trace file written by the runner."""

    async def compute_results_cpu(
        self, trace_path: Path, start_logic_event_name: str | None
    ) -> CPUDurationResult | dict[str, Any]:
        """Total duration of the measured action.

        Raises ClickEventCountError when the trace does not hold exactly one
        click event.
        """
        ...

    async def compute_results_js(
        self, cpu_result: CPUDurationResult, config: RunConfig, trace_path: Path
    ) -> float:
        """Script time within the measured action."""
        ...

    async def compute_results_paint(
        self, cpu_result: CPUDurationResult, config: RunConfig, trace_path: Path
    ) -> float:
        """Paint time within the measured action."""
        ...


def file_name_trace(
    framework: FrameworkData,
    benchmark: BenchmarkInfo,
    index: int,
    options: BenchmarkOptions,
) -> Path:
    """Path of the trace for one iteration of a job."""
    return options.traces_directory / f"{framework.name}_{benchmark.id}_{index}.json"


def error_trace_path(trace_path: Path, attempt: int) -> Path:
    """Sibling path a failed trace is copied to for inspection."""
    return trace_path.with_name(f"error-{trace_path.stem}_{attempt}{trace_path.suffix}")


def preserve_error_trace(trace_path: Path, attempt: int) -> Path:
    """Copy a trace that hit a recognized fault next to the original.

    Returns:
        Path of the copy.
    """
    destination = error_trace_path(trace_path, attempt)
    shutil.copyfile(trace_path, destination)
    return destination


def load_trace_analyzer(path: str) -> TraceAnalyzer:
    """Import a trace analyzer from ``"module:attribute"``.

    A class or zero-argument factory is called; anything else is used as is.

    Raises:
        TraceAnalyzerLoadError: If the path is malformed, the import fails,
            or the result does not look like a TraceAnalyzer.
    """
    module_name, sep, attribute = path.partition(":")
    if not sep or not module_name or not attribute:
        raise TraceAnalyzerLoadError(path, "expected 'module:attribute'")

    try:
        module = importlib.import_module(module_name)
        target = getattr(module, attribute)
    except (ImportError, AttributeError) as e:
        raise TraceAnalyzerLoadError(path, str(e)) from e

    analyzer = target
    if isinstance(target, type) or not isinstance(target, TraceAnalyzer):
        if not callable(target):
            raise TraceAnalyzerLoadError(path, "not a trace analyzer")
        try:
            analyzer = target()
        except TypeError as e:
            raise TraceAnalyzerLoadError(path, str(e)) from e

    if not isinstance(analyzer, TraceAnalyzer):
        raise TraceAnalyzerLoadError(path, "not a trace analyzer")

    Logger.get("timeline").debug(f"using trace analyzer {path}")
    return analyzer


async def derive_cpu_metrics(
    analyzer: TraceAnalyzer,
    trace_path: Path,
    framework: FrameworkData,
    config: RunConfig,
) -> CPUBenchmarkResult:
    """Turn one iteration's trace into total, script and paint durations."""
    raw = await analyzer.compute_results_cpu(
        trace_path, framework.start_logic_event_name
    )
    if isinstance(raw, CPUDurationResult):
        cpu_result = raw
    else:
        cpu_result = CPUDurationResult.model_validate(raw)
    script = await analyzer.compute_results_js(cpu_result, config, trace_path)
    paint = await analyzer.compute_results_paint(cpu_result, config, trace_path)
    Logger.get("timeline").debug(f"**** resultScript = {script}")
    return CPUBenchmarkResult(total=cpu_result.duration, script=script, paint=paint)
