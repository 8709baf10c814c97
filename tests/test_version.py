"""Tests for the benchrunner version information."""

from datetime import datetime

from benchrunner.version.runner_version import Version


def test_version_methods():
    """Test Version class methods."""
    v = Version(major=1, minor=2, patch=3, date=datetime(2023, 1, 1))

    assert str(v) == "1.2.3"
    assert v.semver() == (1, 2, 3)
    assert v.date_string("%Y") == "2023"
    assert v.full_version() == "1.2.3 (date: 2023-01-01)"


def test_runner_version_instance():
    """Test the package-level version."""
    import benchrunner
    from benchrunner.version.runner_version import RUNNER_VERSION

    assert isinstance(RUNNER_VERSION, Version)
    assert benchrunner.__version__ == str(RUNNER_VERSION)
