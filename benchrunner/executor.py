"""Job execution: CPU and memory executors and the dispatcher over them.

Usage:
    from benchrunner.executor import BenchmarkExecutor

    executor = BenchmarkExecutor(config)
    result = await executor.execute(framework, "01_run1k", options)

Every job owns one browser session from launch to close. Failures inside a
job come back as ``JobResult.error``; only configuration faults (unknown or
duplicated benchmark id, missing trace analyzer) raise, and they raise
before a browser is launched.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from benchrunner.benchmarks.base import Benchmark
from benchrunner.benchmarks.catalog import slow_down_factor
from benchrunner.benchmarks.registry import BenchmarkRegistry
from benchrunner.browser import BrowserSession, benchmark_url, start_browser
from benchrunner.errors import (
    NegativeMeasurementError,
    RetryLimitExceededError,
    TraceAnalyzerLoadError,
    convert_error,
    is_click_event_fault,
)
from benchrunner.instrumentation import Instrumentation, Sleep
from benchrunner.models.constants import (
    CLICK_EVENT_FAULT_MESSAGE,
    MEMORY_SETTLE_MS,
    BenchmarkType,
)
from benchrunner.models.job_models import (
    BenchmarkOptions,
    CPUBenchmarkResult,
    FrameworkData,
    JobResult,
    RunConfig,
)
from benchrunner.navigation import navigate
from benchrunner.timeline import (
    TraceAnalyzer,
    derive_cpu_metrics,
    file_name_trace,
    load_trace_analyzer,
    preserve_error_trace,
)
from benchrunner.utils.logger import Logger

if TYPE_CHECKING:
    from playwright.async_api import Page

Launcher = Callable[[BenchmarkOptions], Awaitable[BrowserSession]]


class BenchmarkExecutor:
    """Runs one benchmark job against one framework.

    Args:
        config: Run configuration for this job.
        registry: Benchmark lookup; defaults to the built-in catalog.
        analyzer: Trace analyzer for CPU jobs. When None, the one named by
            ``config.trace_analyzer`` is loaded on first CPU job.
        launcher: Coroutine starting a browser session.
        sleep: Coroutine used for settle delays.

    Example:
        >>> executor = BenchmarkExecutor(RunConfig(trace_analyzer="mytraces:Analyzer"))
        >>> result = asyncio.run(executor.execute(framework, "01_run1k", options))
        >>> result.result
        [CPUBenchmarkResult(total=41.2, script=12.0, paint=3.1)]
    """

    def __init__(
        self,
        config: RunConfig,
        registry: BenchmarkRegistry | None = None,
        analyzer: TraceAnalyzer | None = None,
        launcher: Launcher = start_browser,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._registry = registry or BenchmarkRegistry()
        self._analyzer = analyzer
        self._launcher = launcher
        self._sleep = sleep
        self._log = Logger.get("executor")

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    async def execute(
        self,
        framework: FrameworkData,
        benchmark_id: str,
        options: BenchmarkOptions,
    ) -> JobResult[Any]:
        """Resolve ``benchmark_id`` and run it with the matching executor.

        Raises:
            BenchmarkLookupError: If the id matches zero or several benchmarks.
            TraceAnalyzerLoadError: If a CPU job has no usable trace analyzer.
        """
        benchmark = self._registry.find(benchmark_id)

        result: JobResult[Any]
        if benchmark.type == BenchmarkType.CPU:
            result = await self.run_cpu_benchmark(framework, benchmark, options)
        elif benchmark.type == BenchmarkType.MEMORY:
            result = await self.run_mem_benchmark(framework, benchmark, options)
        else:
            raise ValueError(f"Unsupported benchmark type: {benchmark.type}")

        if self._config.log_debug:
            self._log.debug(f"benchmark finished: {result.model_dump()}")
        return result

    def _require_analyzer(self) -> TraceAnalyzer:
        if self._analyzer is None:
            if not self._config.trace_analyzer:
                raise TraceAnalyzerLoadError("", "no trace analyzer configured")
            self._analyzer = load_trace_analyzer(self._config.trace_analyzer)
        return self._analyzer

    # -------------------------------------------------------------------------
    # CPU jobs
    # -------------------------------------------------------------------------

    async def run_cpu_benchmark(
        self,
        framework: FrameworkData,
        benchmark: Benchmark,
        options: BenchmarkOptions,
    ) -> JobResult[CPUBenchmarkResult]:
        """Trace ``options.batch_size`` runs of a CPU benchmark, one page each."""
        analyzer = self._require_analyzer()
        log = Logger.get("executor.cpu")
        warnings: list[str] = []
        results: list[CPUBenchmarkResult] = []

        log.info(f"benchmarking {framework.name} {benchmark.id}")
        session: BrowserSession | None = None
        try:
            options.traces_directory.mkdir(parents=True, exist_ok=True)
            session = await self._launcher(options)
            instrumentation = Instrumentation(session, sleep=self._sleep)

            index = 0
            attempts = 0
            while index < options.batch_size:
                measurement = await self._run_cpu_iteration(
                    session,
                    instrumentation,
                    analyzer,
                    framework,
                    benchmark,
                    options,
                    index,
                )
                if measurement is None:
                    attempts += 1
                    trace_path = file_name_trace(
                        framework, benchmark.info, index, options
                    )
                    saved = preserve_error_trace(trace_path, attempts)
                    log.warning(
                        f"*** Repeating run because of '{CLICK_EVENT_FAULT_MESSAGE}' "
                        f"error {trace_path} saved in {saved}"
                    )
                    warnings.append(
                        f"iteration {index} repeated ('{CLICK_EVENT_FAULT_MESSAGE}'), "
                        f"trace saved in {saved}"
                    )
                    if attempts > self._config.max_measurement_retries:
                        raise RetryLimitExceededError(index, attempts)
                    continue

                results.append(measurement)
                index += 1
                attempts = 0

            return JobResult[CPUBenchmarkResult](warnings=warnings, result=results)
        except Exception as e:
            log.error(f"ERROR {e!r}")
            return JobResult[CPUBenchmarkResult](
                error=convert_error(e), warnings=warnings
            )
        finally:
            await self._close_browser(session)

    async def _run_cpu_iteration(
        self,
        session: BrowserSession,
        instrumentation: Instrumentation,
        analyzer: TraceAnalyzer,
        framework: FrameworkData,
        benchmark: Benchmark,
        options: BenchmarkOptions,
        index: int,
    ) -> CPUBenchmarkResult | None:
        """Trace one iteration on a fresh page.

        Returns:
            The measurement, or None when the click-event fault means the
            iteration has to be repeated.
        """
        log = Logger.get("executor.cpu")
        trace_path = file_name_trace(framework, benchmark.info, index, options)

        page = await session.new_page()
        try:
            self._watch_console(page)
            await navigate(page, benchmark_url(framework, options))

            await self._init_benchmark(page, benchmark, framework)
            await instrumentation.measure(
                page,
                trace_path,
                lambda: self._run_benchmark(page, benchmark, framework),
                slow_down_factor(benchmark.id, options.allow_throttling),
            )

            try:
                measurement = await derive_cpu_metrics(
                    analyzer, trace_path, framework, self._config
                )
            except Exception as e:
                if is_click_event_fault(e):
                    return None
                log.error(f"*** Unhandled error: {e!r}")
                raise

            log.info(
                f"duration for {framework.name} and {benchmark.id}: "
                f"{measurement.model_dump()}"
            )
            if measurement.total < 0:
                raise NegativeMeasurementError("duration", measurement.total)
            return measurement
        finally:
            await self._close_page(session, page)

    # -------------------------------------------------------------------------
    # Memory jobs
    # -------------------------------------------------------------------------

    async def run_mem_benchmark(
        self,
        framework: FrameworkData,
        benchmark: Benchmark,
        options: BenchmarkOptions,
    ) -> JobResult[float]:
        """Sample page memory after ``options.batch_size`` runs on one page."""
        log = Logger.get("executor.memory")
        warnings: list[str] = []
        results: list[float] = []

        log.info(f"benchmarking {framework.name} {benchmark.id}")
        session: BrowserSession | None = None
        page: "Page | None" = None
        try:
            session = await self._launcher(options)
            instrumentation = Instrumentation(session, sleep=self._sleep)
            page = await session.new_page()
            self._watch_console(page)

            for _ in range(options.batch_size):
                await navigate(page, benchmark_url(framework, options))
                await self._init_benchmark(page, benchmark, framework)
                await self._run_benchmark(page, benchmark, framework)

                await instrumentation.force_gc(page)
                await instrumentation.settle(MEMORY_SETTLE_MS)
                value = await instrumentation.sample_memory_mb(page)
                log.info(
                    f"memory result for {framework.name} and {benchmark.id}: {value}"
                )
                if value < 0:
                    raise NegativeMeasurementError("memory result", value)
                results.append(value)

            return JobResult[float](warnings=warnings, result=results)
        except Exception as e:
            log.error(f"ERROR {e!r}")
            return JobResult[float](error=convert_error(e), warnings=warnings)
        finally:
            if session is not None and page is not None:
                await self._close_page(session, page)
            await self._close_browser(session)

    # -------------------------------------------------------------------------
    # Shared steps
    # -------------------------------------------------------------------------

    async def _init_benchmark(
        self, page: "Page", benchmark: Benchmark, framework: FrameworkData
    ) -> None:
        await benchmark.init(page, framework)
        if self._config.log_progress:
            self._log.info(
                f"after initialized {benchmark.id} {benchmark.type} {framework.name}"
            )

    async def _run_benchmark(
        self, page: "Page", benchmark: Benchmark, framework: FrameworkData
    ) -> None:
        await benchmark.run(page, framework)
        if self._config.log_progress:
            self._log.info(
                f"after run {benchmark.id} {benchmark.type} {framework.name}"
            )

    def _watch_console(self, page: "Page") -> None:
        if not self._config.log_details:
            return
        browser_log = Logger.get("browser")
        page.on("console", lambda msg: browser_log.debug(f"BROWSER: {msg.text}"))

    async def _close_page(self, session: BrowserSession, page: "Page") -> None:
        try:
            await session.close_page(page)
        except Exception as e:
            self._log.error(f"ERROR closing page: {e!r}")

    async def _close_browser(self, session: BrowserSession | None) -> None:
        if session is None:
            return
        try:
            self._log.info("*** browser close")
            await session.close()
            self._log.info("*** browser closed")
        except Exception as e:
            self._log.error(f"ERROR cleaning up driver: {e!r}")
