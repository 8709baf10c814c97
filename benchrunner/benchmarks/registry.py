"""Registry resolving benchmark ids to catalog benchmarks.

Usage:
    from benchrunner.benchmarks.registry import BenchmarkRegistry

    registry = BenchmarkRegistry()

    # Exactly one match or BenchmarkLookupError
    benchmark = registry.find("01_run1k")
"""

from collections.abc import Iterable
from typing import Any

from benchrunner.benchmarks.base import Benchmark
from benchrunner.errors import BenchmarkNotFoundError, BenchmarkNotUniqueError
from benchrunner.models.constants import BenchmarkType


class BenchmarkRegistry:
    """Lookup table over a static list of benchmarks.

    Duplicate ids are accepted at construction time and reported when the
    duplicated id is looked up, so one bad entry does not block the rest of
    the catalog.

    Example:
        >>> registry = BenchmarkRegistry()
        >>> registry.find("22_run-memory").type
        <BenchmarkType.MEMORY: 'memory'>
    """

    RUNNABLE_TYPES: tuple[BenchmarkType, ...] = (BenchmarkType.CPU, BenchmarkType.MEMORY)

    def __init__(self, benchmarks: Iterable[Benchmark] | None = None) -> None:
        """Initialize the registry.

        Args:
            benchmarks: Benchmarks to register. Defaults to the built-in
                catalog.
        """
        if benchmarks is None:
            from benchrunner.benchmarks.catalog import default_benchmarks

            benchmarks = default_benchmarks()
        self._benchmarks: list[Benchmark] = list(benchmarks)

    def find(self, benchmark_id: str) -> Benchmark:
        """Resolve a benchmark id to exactly one runnable benchmark.

        Args:
            benchmark_id: Catalog id (e.g., "01_run1k").

        Returns:
            The single matching benchmark.

        Raises:
            BenchmarkNotFoundError: If nothing matches.
            BenchmarkNotUniqueError: If more than one benchmark matches.
        """
        matches = [
            b
            for b in self._benchmarks
            if b.id == benchmark_id and b.type in self.RUNNABLE_TYPES
        ]
        if not matches:
            raise BenchmarkNotFoundError(benchmark_id)
        if len(matches) > 1:
            raise BenchmarkNotUniqueError(benchmark_id, len(matches))
        return matches[0]

    def get_all_benchmarks(self) -> list[Benchmark]:
        """Get all registered benchmarks."""
        return list(self._benchmarks)

    def list_benchmarks(self) -> list[dict[str, Any]]:
        """Get a summary of all registered benchmarks sorted by id.

        Returns:
            List of dicts with id, type, label and description.
        """
        return [
            {
                "id": b.id,
                "type": str(b.type),
                "label": b.info.label,
                "description": b.info.description,
            }
            for b in sorted(self._benchmarks, key=lambda b: b.id)
        ]

    def __len__(self) -> int:
        """Return number of registered benchmarks."""
        return len(self._benchmarks)

    def __contains__(self, benchmark_id: str) -> bool:
        """Check if any benchmark has this id."""
        return any(b.id == benchmark_id for b in self._benchmarks)
