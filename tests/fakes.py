"""In-memory stand-ins for the browser, pages and trace analyzer."""

from pathlib import Path
from typing import Any

from benchrunner.benchmarks.base import CPUBenchmark, MemBenchmark
from benchrunner.models.constants import (
    BYTES_PER_MEGABYTE,
    FORCE_GC_SCRIPT,
    MEASURE_MEMORY_SCRIPT,
    BenchmarkType,
)
from benchrunner.models.job_models import (
    BenchmarkInfo,
    BenchmarkOptions,
    CPUDurationResult,
)

MB = BYTES_PER_MEGABYTE


class FakePage:
    """Page double recording every call into a shared log."""

    def __init__(
        self, calls: list[str], goto_failures: int = 0, memory_bytes: float = 0
    ):
        self.calls = calls
        self.goto_failures = goto_failures
        self.memory_bytes = memory_bytes
        self.goto_attempts = 0
        self.closed = False
        self.listeners: dict[str, Any] = {}

    async def goto(self, url: str, wait_until: str | None = None) -> None:
        self.goto_attempts += 1
        self.calls.append(f"goto:{url}")
        if self.goto_failures > 0:
            self.goto_failures -= 1
            raise TimeoutError("navigation timed out")

    async def evaluate(self, script: str) -> Any:
        if script == FORCE_GC_SCRIPT:
            self.calls.append("gc")
            return None
        if script == MEASURE_MEMORY_SCRIPT:
            self.calls.append("memory")
            return {"bytes": self.memory_bytes}
        raise AssertionError(f"unexpected script {script}")

    def on(self, event: str, callback: Any) -> None:
        self.listeners[event] = callback

    async def close(self) -> None:
        self.calls.append("page_close")
        self.closed = True


class FakeSession:
    """BrowserSession double counting page opens and closes."""

    def __init__(
        self,
        calls: list[str] | None = None,
        goto_failures: int = 0,
        memory_bytes: float = 0,
        close_error: Exception | None = None,
    ):
        self.calls = calls if calls is not None else []
        self.goto_failures = goto_failures
        self.memory_bytes = memory_bytes
        self.close_error = close_error
        self.pages: list[FakePage] = []
        self.closed = False
        self.throttle_rates: list[float] = []
        self.trace_categories: list[str] = []

    @property
    def pages_opened(self) -> int:
        return len(self.pages)

    @property
    def pages_closed(self) -> int:
        return sum(1 for p in self.pages if p.closed)

    async def new_page(self) -> FakePage:
        page = FakePage(self.calls, self.goto_failures, self.memory_bytes)
        # Only the first page sees the scripted navigation failures
        self.goto_failures = 0
        self.pages.append(page)
        self.calls.append("new_page")
        return page

    async def close_page(self, page: FakePage) -> None:
        await page.close()

    async def start_tracing(self, page: FakePage, path: Path, categories) -> None:
        self.calls.append("trace_start")
        self.trace_categories = list(categories)
        Path(path).write_text('{"traceEvents": []}')

    async def stop_tracing(self) -> None:
        self.calls.append("trace_stop")

    async def set_cpu_throttling(self, page: FakePage, rate: float) -> None:
        self.calls.append(f"throttle:{rate:g}")
        self.throttle_rates.append(rate)

    async def close(self) -> None:
        self.calls.append("browser_close")
        self.closed = True
        if self.close_error is not None:
            raise self.close_error


class FakeAnalyzer:
    """Trace analyzer double replaying scripted totals or faults."""

    def __init__(
        self,
        outcomes: list[Any] | None = None,
        script: float = 5.0,
        paint: float = 2.0,
    ):
        self.outcomes = list(outcomes or [])
        self.script = script
        self.paint = paint
        self.paths: list[Path] = []

    async def compute_results_cpu(self, trace_path: Path, start_logic_event_name):
        self.paths.append(trace_path)
        outcome = self.outcomes.pop(0) if self.outcomes else 10.0
        if isinstance(outcome, Exception):
            raise outcome
        return CPUDurationResult(duration=outcome)

    async def compute_results_js(self, cpu_result, config, trace_path) -> float:
        return self.script

    async def compute_results_paint(self, cpu_result, config, trace_path) -> float:
        return self.paint


class FakeCPUBenchmark(CPUBenchmark):
    info = BenchmarkInfo(id="01_run1k", type=BenchmarkType.CPU)

    def __init__(self, calls: list[str], run_error: Exception | None = None):
        self.calls = calls
        self.run_error = run_error

    async def init(self, page, framework) -> None:
        self.calls.append("init")

    async def run(self, page, framework) -> None:
        self.calls.append("run")
        if self.run_error is not None:
            raise self.run_error


class FakeMemBenchmark(MemBenchmark):
    info = BenchmarkInfo(id="22_run-memory", type=BenchmarkType.MEMORY)

    def __init__(self, calls: list[str], run_error: Exception | None = None):
        self.calls = calls
        self.run_error = run_error

    async def init(self, page, framework) -> None:
        self.calls.append("init")

    async def run(self, page, framework) -> None:
        self.calls.append("run")
        if self.run_error is not None:
            raise self.run_error


def make_launcher(session: FakeSession):
    """Launcher returning ``session`` and counting launches."""

    async def launcher(options: BenchmarkOptions) -> FakeSession:
        launcher.launches += 1
        return session

    launcher.launches = 0
    return launcher


def make_sleep(calls: list[str]):
    """Sleep double recording settle delays in milliseconds."""

    async def sleep(seconds: float) -> None:
        calls.append(f"settle:{round(seconds * 1000)}")

    return sleep
