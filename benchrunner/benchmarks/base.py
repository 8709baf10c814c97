"""Base classes for page benchmarks.

A page benchmark has two steps that run inside a page served by the
framework under test:

1. ``init()`` - bring the page into the benchmark's starting state
2. ``run()`` - perform the action that gets measured

The runner owns everything around those steps (navigation, tracing,
throttling, garbage collection, memory sampling). Benchmarks only drive the
page.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from benchrunner.models.constants import BenchmarkType
from benchrunner.models.job_models import BenchmarkInfo, FrameworkData

if TYPE_CHECKING:
    from playwright.async_api import Page


class Benchmark(ABC):
    """Abstract base class for all page benchmarks.

    Child classes set ``info`` and implement ``init`` and ``run``. The
    benchmark type comes from the info record, so dispatch never needs an
    isinstance check.

    Example:
        >>> class Run1k(CPUBenchmark):
        ...     info = BenchmarkInfo(id="01_run1k", type=BenchmarkType.CPU)
        ...
        ...     async def init(self, page, framework):
        ...         await page.wait_for_selector("#run")
        ...
        ...     async def run(self, page, framework):
        ...         await page.click("#run")
    """

    info: ClassVar[BenchmarkInfo]

    @property
    def id(self) -> str:
        """Catalog id of this benchmark."""
        return self.info.id

    @property
    def type(self) -> BenchmarkType:
        """Benchmark type used for dispatch."""
        return self.info.type

    @abstractmethod
    async def init(self, page: "Page", framework: FrameworkData) -> None:
        """Bring a freshly loaded page into the starting state.

        Args:
            page: Page that has finished loading the framework's index.html.
            framework: Framework under test.
        """
        ...

    @abstractmethod
    async def run(self, page: "Page", framework: FrameworkData) -> None:
        """Perform the measured action and wait until the page reflects it.

        Args:
            page: Page prepared by init().
            framework: Framework under test.
        """
        ...

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.info.id!r}, {self.info.type})"


class CPUBenchmark(Benchmark):
    """Benchmark measured by tracing the run step."""

    pass


class MemBenchmark(Benchmark):
    """Benchmark measured by sampling page memory after the run step."""

    pass
