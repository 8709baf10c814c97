"""Static catalog of table benchmarks.

Every framework under test renders the same page: a toolbar of buttons
(``#run``, ``#runlots``, ``#add``, ``#update``, ``#clear``, ``#swaprows``)
and a table whose rows carry an id cell, a label link and a remove icon.
The benchmarks below drive that page.
"""

from typing import TYPE_CHECKING

from benchrunner.benchmarks.base import Benchmark, CPUBenchmark, MemBenchmark
from benchrunner.models.constants import BenchmarkType
from benchrunner.models.job_models import BenchmarkInfo, FrameworkData

if TYPE_CHECKING:
    from playwright.async_api import Page

# CPU slowdown applied while tracing when throttling is allowed
SLOW_DOWN_FACTORS: dict[str, float] = {
    "03_update10th1k_x16": 4,
    "04_select1k": 4,
    "05_swap1k": 4,
    "06_remove-one-1k": 2,
    "08_create1k-after1k_x2": 2,
    "09_clear1k_x8": 4,
}


def slow_down_factor(benchmark_id: str, allow_throttling: bool) -> float | None:
    """Get the CPU slowdown for a benchmark.

    Returns:
        The multiplicative slowdown, or None when throttling is not allowed
        or the benchmark runs unthrottled.
    """
    if not allow_throttling:
        return None
    factor = SLOW_DOWN_FACTORS.get(benchmark_id)
    if factor is None or factor == 1:
        return None
    return factor


# -----------------------------------------------------------------------------
# Page helpers
# -----------------------------------------------------------------------------


def _row(index: int) -> str:
    return f"tbody>tr:nth-of-type({index})"


def _cell(index: int, column: int) -> str:
    return f"{_row(index)}>td:nth-of-type({column})"


async def _click(page: "Page", selector: str) -> None:
    await page.wait_for_selector(selector)
    await page.click(selector)


async def _wait_for_text(page: "Page", selector: str, text: str) -> None:
    await page.wait_for_function(
        "([sel, txt]) => { const el = document.querySelector(sel);"
        " return !!el && el.textContent.includes(txt); }",
        arg=[selector, text],
    )


async def _wait_for_class(page: "Page", selector: str, class_name: str) -> None:
    await page.wait_for_function(
        "([sel, cls]) => { const el = document.querySelector(sel);"
        " return !!el && el.classList.contains(cls); }",
        arg=[selector, class_name],
    )


async def _wait_for_gone(page: "Page", selector: str) -> None:
    await page.wait_for_selector(selector, state="detached")


async def _create_rows(page: "Page", rows: int = 1000) -> None:
    await _click(page, "#run")
    await page.wait_for_selector(_cell(rows, 2) + ">a")


# -----------------------------------------------------------------------------
# CPU benchmarks
# -----------------------------------------------------------------------------


class Run1k(CPUBenchmark):
    info = BenchmarkInfo(
        id="01_run1k",
        type=BenchmarkType.CPU,
        label="create rows",
        description="creating 1,000 rows",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await page.wait_for_selector("#run")

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _create_rows(page)


class Replace1k(CPUBenchmark):
    info = BenchmarkInfo(
        id="02_replace1k",
        type=BenchmarkType.CPU,
        label="replace all rows",
        description="updating all 1,000 rows",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await _create_rows(page)

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _click(page, "#run")
        await _wait_for_text(page, _cell(1, 1), "1001")


class Update10th1k(CPUBenchmark):
    info = BenchmarkInfo(
        id="03_update10th1k_x16",
        type=BenchmarkType.CPU,
        label="partial update",
        description="updating every 10th row for 1,000 rows",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await _create_rows(page)

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _click(page, "#update")
        await _wait_for_text(page, _cell(991, 2) + ">a", " !!!")


class Select1k(CPUBenchmark):
    info = BenchmarkInfo(
        id="04_select1k",
        type=BenchmarkType.CPU,
        label="select row",
        description="highlighting a selected row",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await _create_rows(page)

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _click(page, _cell(2, 2) + ">a")
        await _wait_for_class(page, _row(2), "danger")


class Swap1k(CPUBenchmark):
    info = BenchmarkInfo(
        id="05_swap1k",
        type=BenchmarkType.CPU,
        label="swap rows",
        description="swap 2 rows for table with 1,000 rows",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await _create_rows(page)

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _click(page, "#swaprows")
        await _wait_for_text(page, _cell(999, 1), "2")


class RemoveOne1k(CPUBenchmark):
    info = BenchmarkInfo(
        id="06_remove-one-1k",
        type=BenchmarkType.CPU,
        label="remove row",
        description="removing one row",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await _create_rows(page)

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _click(page, _cell(4, 3) + ">a>span:nth-of-type(1)")
        await _wait_for_text(page, _cell(4, 1), "5")


class CreateMany(CPUBenchmark):
    info = BenchmarkInfo(
        id="07_create10k",
        type=BenchmarkType.CPU,
        label="create many rows",
        description="creating 10,000 rows",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await page.wait_for_selector("#runlots")

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _click(page, "#runlots")
        await page.wait_for_selector(_cell(10000, 2) + ">a")


class Append1k(CPUBenchmark):
    info = BenchmarkInfo(
        id="08_create1k-after1k_x2",
        type=BenchmarkType.CPU,
        label="append rows to large table",
        description="appending 1,000 to a table of 1,000 rows",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await _create_rows(page)

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _click(page, "#add")
        await page.wait_for_selector(_cell(2000, 2) + ">a")


class Clear1k(CPUBenchmark):
    info = BenchmarkInfo(
        id="09_clear1k_x8",
        type=BenchmarkType.CPU,
        label="clear rows",
        description="clearing a table with 1,000 rows",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await _create_rows(page)

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _click(page, "#clear")
        await _wait_for_gone(page, _row(1000))


# -----------------------------------------------------------------------------
# Memory benchmarks
# -----------------------------------------------------------------------------


class ReadyMemory(MemBenchmark):
    info = BenchmarkInfo(
        id="21_ready-memory",
        type=BenchmarkType.MEMORY,
        label="ready memory",
        description="Memory usage after page load.",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await page.wait_for_selector("#add")

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        pass


class RunMemory(MemBenchmark):
    info = BenchmarkInfo(
        id="22_run-memory",
        type=BenchmarkType.MEMORY,
        label="run memory",
        description="Memory usage after adding 1,000 rows.",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await page.wait_for_selector("#add")

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        await _create_rows(page)


class RunClearMemory(MemBenchmark):
    info = BenchmarkInfo(
        id="25_run-clear-memory",
        type=BenchmarkType.MEMORY,
        label="creating/clearing 1k rows (5 cycles)",
        description="Memory usage after creating and clearing 1000 rows 5 times.",
    )

    async def init(self, page: "Page", framework: FrameworkData) -> None:
        await page.wait_for_selector("#add")

    async def run(self, page: "Page", framework: FrameworkData) -> None:
        for _ in range(5):
            await _create_rows(page)
            await _click(page, "#clear")
            await _wait_for_gone(page, _row(1000))


def default_benchmarks() -> list[Benchmark]:
    """Instantiate every benchmark in the catalog."""
    return [
        Run1k(),
        Replace1k(),
        Update10th1k(),
        Select1k(),
        Swap1k(),
        RemoveOne1k(),
        CreateMany(),
        Append1k(),
        Clear1k(),
        ReadyMemory(),
        RunMemory(),
        RunClearMemory(),
    ]
