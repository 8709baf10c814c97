"""benchrunner utilities - logging and environment helpers."""

from benchrunner.utils.env import EnvVarError, EnvVarTypeError, get_env
from benchrunner.utils.logger import (
    Logger,
    LoggerNotConfiguredError,
    LogLevel,
)

__all__ = [
    # Env
    "EnvVarError",
    "EnvVarTypeError",
    "LogLevel",
    # Logger
    "Logger",
    "LoggerNotConfiguredError",
    "get_env",
]
