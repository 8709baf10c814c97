"""Exceptions raised by the runner and normalization of job failures.

Any value that ends a job (an exception, a bare string handed back by a
trace analyzer, or something else entirely) is reduced to a plain string by
``convert_error`` before it leaves the job process.
"""

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Any

from benchrunner.models.constants import CLICK_EVENT_FAULT_MESSAGE
from benchrunner.utils.logger import Logger


class BenchmarkRunnerError(Exception):
    """Base exception for runner errors."""

    pass


# -----------------------------------------------------------------------------
# Configuration faults
# -----------------------------------------------------------------------------


class BenchmarkLookupError(BenchmarkRunnerError):
    """Raised when a benchmark id does not resolve to exactly one benchmark."""

    def __init__(self, benchmark_id: str, matches: int) -> None:
        self.benchmark_id = benchmark_id
        self.matches = matches
        super().__init__(
            f"Benchmark name {benchmark_id} is not unique ({matches} matches)"
        )


class BenchmarkNotFoundError(BenchmarkLookupError):
    """Raised when no catalog benchmark has the requested id."""

    def __init__(self, benchmark_id: str) -> None:
        super().__init__(benchmark_id, 0)


class BenchmarkNotUniqueError(BenchmarkLookupError):
    """Raised when several catalog benchmarks share the requested id."""

    pass


class TraceAnalyzerLoadError(BenchmarkRunnerError):
    """Raised when the configured trace analyzer cannot be imported."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot load trace analyzer '{path}': {reason}")


# -----------------------------------------------------------------------------
# Measurement faults
# -----------------------------------------------------------------------------


class MeasurementError(BenchmarkRunnerError):
    """Base exception for faults found while measuring."""

    pass


class NegativeMeasurementError(MeasurementError):
    """Raised when a measured duration or memory sample is below zero."""

    def __init__(self, what: str, value: float) -> None:
        self.what = what
        self.value = value
        super().__init__(f"{what} {value} < 0")


class ClickEventCountError(MeasurementError):
    """The trace did not contain exactly one click event.

    Trace analyzers raise this for a known race in click-driven benchmarks.
    The iteration is repeated instead of failing the job.
    """

    def __init__(self) -> None:
        super().__init__(CLICK_EVENT_FAULT_MESSAGE)


class RetryLimitExceededError(MeasurementError):
    """Raised when one iteration slot keeps hitting the click-event fault."""

    def __init__(self, iteration: int, attempts: int) -> None:
        self.iteration = iteration
        self.attempts = attempts
        super().__init__(
            f"iteration {iteration} repeated {attempts} times because "
            f"'{CLICK_EVENT_FAULT_MESSAGE}'"
        )


def is_click_event_fault(error: Any) -> bool:
    """Check whether ``error`` is the recognized click-event race.

    Analyzers may raise ClickEventCountError or any exception carrying the
    same message. The bare message string is recognized too.
    """
    if isinstance(error, ClickEventCountError):
        return True
    if isinstance(error, str):
        return error == CLICK_EVENT_FAULT_MESSAGE
    if isinstance(error, BaseException):
        return str(error) == CLICK_EVENT_FAULT_MESSAGE
    return False


# -----------------------------------------------------------------------------
# Classification
# -----------------------------------------------------------------------------


class ErrorKind(StrEnum):
    """Shape of a value that ended a job."""

    STRING = auto()
    EXCEPTION = auto()
    UNKNOWN = auto()


@dataclass(frozen=True)
class ClassifiedError:
    """A job failure reduced to a reportable message."""

    message: str
    kind: ErrorKind


def classify_error(error: Any) -> ClassifiedError:
    """Reduce ``error`` to a message and the shape it arrived in."""
    if isinstance(error, str):
        return ClassifiedError(error, ErrorKind.STRING)
    if isinstance(error, BaseException):
        # Exceptions raised without arguments stringify to ""
        message = str(error) or error.__class__.__name__
        return ClassifiedError(message, ErrorKind.EXCEPTION)
    return ClassifiedError(str(error), ErrorKind.UNKNOWN)


def convert_error(error: Any) -> str:
    """Convert a job failure to the string carried by JobResult.error."""
    classified = classify_error(error)
    Logger.get("errors").error(
        f"ERROR in run benchmark: {classified.message!r} "
        f"(type: {type(error).__name__}, kind: {classified.kind})"
    )
    return classified.message
