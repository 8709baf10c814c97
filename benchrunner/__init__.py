"""benchrunner - single-job browser benchmark execution engine."""

from benchrunner.version.runner_version import RUNNER_VERSION, Version

__version__ = str(RUNNER_VERSION)
__version_info__ = RUNNER_VERSION

__all__ = [
    "RUNNER_VERSION",
    "Version",
    "__version__",
    "__version_info__",
]
