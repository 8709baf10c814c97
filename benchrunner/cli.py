#!/usr/bin/env python3
"""benchrunner CLI - run one browser benchmark job."""

import json
import sys
from pathlib import Path
from typing import Any

import click
import yaml  # type: ignore[import-untyped, unused-ignore]

from benchrunner.utils.env import EnvVarTypeError, get_env
from benchrunner.utils.logger import Logger


def _load_config(config_path: str | None) -> dict[str, Any]:
    """Load a run configuration file (JSON or YAML).

    The file may hold a ``config`` section (RunConfig keys) and an
    ``options`` section (BenchmarkOptions keys).
    """
    if not config_path:
        return {}

    path = Path(config_path)
    try:
        content = path.read_text()
        if path.suffix in (".yaml", ".yml"):
            data = yaml.safe_load(content)
        else:
            data = json.loads(content)
    except (OSError, ValueError, yaml.YAMLError) as e:
        click.echo(f"Error: Failed to parse config file {config_path}: {e}", err=True)
        sys.exit(1)

    if not isinstance(data, dict):
        click.echo(f"Error: Config file {config_path} must be a dictionary", err=True)
        sys.exit(1)
    return data


@click.group()
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write logs to a file instead of stderr",
)
def benchrunner(log_file):
    """Run browser benchmarks against framework builds."""
    if log_file or not Logger.is_configured():
        Logger.configure(
            level=get_env("BENCHRUNNER_LOG_LEVEL", default="INFO"),
            output=log_file or "stderr",
            timestamps=True,
        )


@benchrunner.command()
@click.option(
    "--framework", "-f", "framework_name", required=True, help="Framework name"
)
@click.option(
    "--uri", default=None, help="Path the framework is served under (default: name)"
)
@click.option("--start-event", default=None, help="Start marker for the trace analyzer")
@click.option(
    "--benchmark",
    "-b",
    "benchmark_id",
    required=True,
    help="Benchmark id (e.g. 01_run1k)",
)
@click.option("--host", default=None, help="Host serving the frameworks")
@click.option(
    "--port",
    type=int,
    default=None,
    help="Port serving the frameworks (env: BENCHRUNNER_PORT)",
)
@click.option(
    "--batch-size", "-n", type=int, default=None, help="Iterations in the job"
)
@click.option(
    "--allow-throttling/--no-throttling",
    default=None,
    help="Apply per-benchmark CPU slowdown",
)
@click.option(
    "--headless/--headed",
    default=None,
    help="Run the browser headless (env: BENCHRUNNER_HEADLESS)",
)
@click.option(
    "--chrome-binary",
    default=lambda: get_env("BENCHRUNNER_CHROME_BINARY"),
    help="Chrome executable (env: BENCHRUNNER_CHROME_BINARY)",
)
@click.option(
    "--traces-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Trace output directory",
)
@click.option("--analyzer", default=None, help="Trace analyzer as module:attribute")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="YAML or JSON run configuration",
)
@click.option(
    "--timeout",
    type=float,
    default=None,
    help="Seconds to wait for the job (env: BENCHRUNNER_JOB_TIMEOUT)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="Write the job result to a JSON file",
)
def run(
    framework_name,
    uri,
    start_event,
    benchmark_id,
    host,
    port,
    batch_size,
    allow_throttling,
    headless,
    chrome_binary,
    traces_dir,
    analyzer,
    config_path,
    timeout,
    output,
):
    r"""Run one benchmark job in a separate process.

    \b
    Examples:
      benchrunner run -f vanillajs -b 01_run1k -n 2 --analyzer mytraces:Analyzer
      benchrunner run -f vanillajs -b 22_run-memory
      benchrunner run -f vanillajs -b 01_run1k --config run.yaml -o result.json
    """
    from pydantic import ValidationError

    from benchrunner.channel import run_forked_job
    from benchrunner.models.job_models import (
        BenchmarkOptions,
        FrameworkData,
        JobMessage,
        RunConfig,
    )

    try:
        if port is None:
            port = get_env("BENCHRUNNER_PORT", as_type=int)
        if headless is None:
            headless = get_env("BENCHRUNNER_HEADLESS", as_type=bool)
        if timeout is None:
            timeout = get_env("BENCHRUNNER_JOB_TIMEOUT", as_type=float)
    except EnvVarTypeError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    data = _load_config(config_path)
    config_data = dict(data.get("config") or {})
    options_data = dict(data.get("options") or {})

    if analyzer is not None:
        config_data["trace_analyzer"] = analyzer
    overrides = {
        "host": host,
        "port": port,
        "batch_size": batch_size,
        "allow_throttling": allow_throttling,
        "headless": headless,
        "chrome_binary_path": chrome_binary,
        "traces_directory": traces_dir,
    }
    options_data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        message = JobMessage(
            config=RunConfig.model_validate(config_data),
            framework=FrameworkData(
                name=framework_name,
                uri=uri or framework_name,
                start_logic_event_name=start_event,
            ),
            benchmark_id=benchmark_id,
            benchmark_options=BenchmarkOptions.model_validate(options_data),
        )
    except ValidationError as e:
        click.echo(f"Error: Invalid run configuration: {e}", err=True)
        sys.exit(1)

    result = run_forked_job(message, timeout=timeout)
    payload = json.dumps(result.model_dump(mode="json"), indent=2)

    if output:
        Path(output).write_text(payload)
        click.echo(f"Result written to {output}", err=True)
    else:
        click.echo(payload)

    if result.failed:
        sys.exit(1)


@benchrunner.command(name="list")
def list_cmd():
    """List the benchmarks in the catalog."""
    from benchrunner.benchmarks.catalog import SLOW_DOWN_FACTORS
    from benchrunner.benchmarks.registry import BenchmarkRegistry

    registry = BenchmarkRegistry()
    click.echo("Available Benchmarks:")
    click.echo("-" * 50)
    for bench in registry.list_benchmarks():
        slowdown = SLOW_DOWN_FACTORS.get(bench["id"])
        throttle = f"  (x{slowdown:g} throttled)" if slowdown else ""
        click.echo(f"  {bench['id']:<26} {bench['type']:<7}{throttle}")
        click.echo(f"      {bench['description']}")
    click.echo("-" * 50)
    click.echo(f"Total: {len(registry)} benchmarks registered")


@benchrunner.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed version information")
def version(verbose):
    """Display benchrunner version information."""
    from benchrunner.version.runner_version import RUNNER_VERSION

    if verbose:
        click.echo(f"benchrunner {RUNNER_VERSION.full_version()}")
    else:
        click.echo(f"benchrunner {RUNNER_VERSION}")


if __name__ == "__main__":
    benchrunner()
