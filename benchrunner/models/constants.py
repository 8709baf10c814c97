"""Constants for benchrunner models and executors."""

from enum import StrEnum, auto


class BenchmarkType(StrEnum):
    """Kinds of benchmark the runner knows how to execute."""

    CPU = auto()
    MEMORY = auto()


# Trace categories consumed by the trace analyzer. Changing this set changes
# which events the analyzer can see.
TRACE_CATEGORIES: tuple[str, ...] = (
    "disabled-by-default-v8.cpu_profiler",
    "blink.user_timing",
    "devtools.timeline",
    "disabled-by-default-devtools.timeline",
)

# Settle delays in milliseconds
SETTLE_BEFORE_RUN_MS = 50
SETTLE_AFTER_RUN_MS = 100
MEMORY_SETTLE_MS = 40

# Known instrumentation race in click-driven benchmarks
CLICK_EVENT_FAULT_MESSAGE = "exactly one click event is expected"
DEFAULT_MAX_MEASUREMENT_RETRIES = 5

# Page-side hooks; the browser must be started with --js-flags=--expose-gc
FORCE_GC_SCRIPT = "window.gc({type:'major',execution:'sync',flavor:'last-resort'})"
MEASURE_MEMORY_SCRIPT = "performance.measureUserAgentSpecificMemory()"

BYTES_PER_MEGABYTE = 1024 * 1024

UNTHROTTLED_RATE = 1.0
