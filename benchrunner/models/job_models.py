"""Pydantic models for job messages and job results.

Field names are snake_case. The inbound job message uses camelCase keys for
framework, options and message fields and upper-case keys for the run
configuration, so every model accepts either spelling.
"""

from pathlib import Path
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from benchrunner.models.constants import DEFAULT_MAX_MEASUREMENT_RETRIES, BenchmarkType

ResultT = TypeVar("ResultT")


# ============================================================================
# Job Inputs
# ============================================================================


class FrameworkData(BaseModel):
    """The software variant under test."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    name: str = Field(..., description="Display name (e.g., 'vanillajs')")
    uri: str = Field(..., description="Path segment the variant is served under")
    start_logic_event_name: str | None = Field(
        None, description="User timing marker handed to the trace analyzer"
    )


class BenchmarkOptions(BaseModel):
    """Where the variant is served and how the job is run."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    host: str = Field("localhost", description="Host serving the variant")
    port: int = Field(8080, ge=1, le=65535, description="Port serving the variant")
    batch_size: int = Field(1, ge=1, description="Iterations per job")
    allow_throttling: bool = Field(
        False, description="Apply per-benchmark CPU slowdown factors"
    )
    headless: bool = Field(True, description="Launch the browser headless")
    chrome_binary_path: str | None = Field(
        None, description="Chrome executable; Playwright's bundled Chromium if unset"
    )
    traces_directory: Path = Field(
        Path("traces"), description="Directory that receives trace files"
    )
    puppeteer_sleep: int | None = Field(
        None, ge=0, description="Browser wait in milliseconds copied into RunConfig"
    )


class RunConfig(BaseModel):
    """Process-level run configuration, applied once per job."""

    model_config = ConfigDict(alias_generator=str.upper, populate_by_name=True)

    log_progress: bool = Field(True, description="Log after init/run steps")
    log_details: bool = Field(False, description="Forward page console output")
    log_debug: bool = Field(False, description="Dump the job result at the end")
    log_level: str = Field("INFO", description="Log level for the job process")
    write_results: bool = Field(True, description="Whether results get persisted")
    puppeteer_wait_ms: int = Field(
        1000, ge=0, description="Browser wait in milliseconds"
    )
    max_measurement_retries: int = Field(
        DEFAULT_MAX_MEASUREMENT_RETRIES,
        ge=0,
        description="Repeats allowed per iteration slot on the click-event fault",
    )
    trace_analyzer: str | None = Field(
        None, description="Trace analyzer as 'module:attribute'"
    )


# ============================================================================
# Benchmark Catalog
# ============================================================================


class BenchmarkInfo(BaseModel):
    """Identity of one catalog benchmark."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique benchmark id (e.g., '01_run1k')")
    type: BenchmarkType = Field(..., description="CPU or MEMORY")
    label: str = Field("", description="Short human-readable label")
    description: str = Field("", description="What the benchmark does in the page")


# ============================================================================
# Measurements
# ============================================================================


class CPUDurationResult(BaseModel):
    """Total duration derived from a trace, plus analyzer-specific extras."""

    model_config = ConfigDict(extra="allow")

    duration: float = Field(..., description="Total duration in milliseconds")


class CPUBenchmarkResult(BaseModel):
    """One CPU iteration measurement in milliseconds."""

    total: float = Field(..., description="Total duration of the measured action")
    script: float = Field(..., description="Time spent in script")
    paint: float = Field(..., description="Time spent painting")


# ============================================================================
# Job Envelope
# ============================================================================


class JobResult(BaseModel, Generic[ResultT]):
    """Outcome of one job.

    A completed job has exactly one of ``error`` and ``result`` set.
    """

    error: str | None = Field(None, description="Set when the job failed")
    warnings: list[str] = Field(default_factory=list, description="Non-fatal notices")
    result: list[ResultT] | None = Field(
        None, description="One measurement per iteration"
    )

    @model_validator(mode="after")
    def _check_exclusive(self) -> "JobResult[ResultT]":
        if self.error is not None and self.result is not None:
            raise ValueError("a job result cannot carry both an error and a result")
        return self

    @property
    def failed(self) -> bool:
        """True if the job ended with an error."""
        return self.error is not None


class JobMessage(BaseModel):
    """The single inbound message of a forked job process."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    config: RunConfig = Field(default_factory=RunConfig)
    framework: FrameworkData
    benchmark_id: str
    benchmark_options: BenchmarkOptions = Field(default_factory=BenchmarkOptions)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with the keys the job process expects."""
        return self.model_dump(mode="json", by_alias=True)
