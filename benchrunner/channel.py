"""One-shot job channel between a supervisor and a forked job process.

The job process receives exactly one message, runs the job, sends exactly
one message back and exits with code 0, whatever happened in between. A
failed job is reported as data (``{"error": ...}``), never as a crash.

Usage:
    from benchrunner.channel import run_forked_job
    from benchrunner.models import FrameworkData, JobMessage

    message = JobMessage(
        framework=FrameworkData(name="vanillajs", uri="vanillajs"),
        benchmark_id="01_run1k",
    )
    result = run_forked_job(message)
"""

import asyncio
import logging
import multiprocessing
import os
from collections.abc import Callable
from multiprocessing.connection import Connection
from typing import Any

from benchrunner import __version__
from benchrunner.errors import convert_error
from benchrunner.executor import BenchmarkExecutor
from benchrunner.models.job_models import JobMessage, JobResult, RunConfig
from benchrunner.utils.env import get_env
from benchrunner.utils.logger import Logger

LOG_LEVEL_ENV = "BENCHRUNNER_LOG_LEVEL"

ExecutorFactory = Callable[[RunConfig], BenchmarkExecutor]


def apply_config(message: JobMessage) -> RunConfig:
    """Make the message's run configuration the job process configuration.

    The browser wait from the benchmark options, when given, overrides the
    configured one. Logging goes to stderr at the configured level unless
    BENCHRUNNER_LOG_LEVEL is set.
    """
    config = message.config
    sleep = message.benchmark_options.puppeteer_sleep
    if sleep is not None:
        config = config.model_copy(update={"puppeteer_wait_ms": sleep})

    level = get_env(LOG_LEVEL_ENV, default=config.log_level, log=True)
    Logger.configure(level=level, output="stderr")
    return config


def handle_message(
    raw: dict[str, Any],
    executor_factory: ExecutorFactory = BenchmarkExecutor,
) -> dict[str, Any]:
    """Run the job described by ``raw`` and build the outbound message.

    Never raises: a job that cannot even be dispatched is reported as
    ``{"error": <message>}``.
    """
    if not Logger.is_configured():
        Logger.configure(level=get_env(LOG_LEVEL_ENV, default="INFO"), output="stderr")
    log = Logger.get("channel")

    try:
        message = JobMessage.model_validate(raw)
        config = apply_config(message)
        log.info(
            f"START BENCHMARK (benchrunner {__version__}). "
            f"Write results? {config.write_results}"
        )
        log.info(f"forked runner using sleep for browser {config.puppeteer_wait_ms}")

        executor = executor_factory(config)
        result = asyncio.run(
            executor.execute(
                message.framework, message.benchmark_id, message.benchmark_options
            )
        )
        return result.model_dump(mode="json")
    except Exception as e:
        log.error("CATCH: Error in forked benchmark runner")
        return {"error": convert_error(e)}


def forked_main(conn: Connection) -> None:
    """Entry point of the job process: one message in, one message out, exit."""
    try:
        raw = conn.recv()
        conn.send(handle_message(raw))
    finally:
        conn.close()
        logging.shutdown()
        os._exit(0)


def run_forked_job(message: JobMessage, timeout: float | None = None) -> JobResult[Any]:
    """Run one job in a fresh process and wait for its result.

    Args:
        message: The job to run.
        timeout: Seconds to wait for the result; None waits forever. On
            timeout the job process is killed.

    Returns:
        The job's result. If the process ends without answering, or times
        out, an error result describing that is returned instead.
    """
    ctx = multiprocessing.get_context("spawn")
    parent_conn, child_conn = ctx.Pipe()
    process = ctx.Process(
        target=forked_main,
        args=(child_conn,),
        name=f"benchrunner-{message.benchmark_id}",
    )
    process.start()
    child_conn.close()

    payload: dict[str, Any] | None = None
    timed_out = False
    try:
        parent_conn.send(message.to_wire())
        if parent_conn.poll(timeout):
            payload = parent_conn.recv()
        else:
            timed_out = True
            process.kill()
    except (EOFError, ConnectionError):
        payload = None
    finally:
        parent_conn.close()
        process.join()

    if payload is None:
        if timed_out:
            return JobResult(error=f"job produced no result within {timeout}s")
        return JobResult(
            error=f"job process exited with code {process.exitcode} without a result"
        )
    return JobResult.model_validate(payload)
