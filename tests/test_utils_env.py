"""Tests for the environment variable utility."""

import pytest

from benchrunner.utils.env import EnvVarTypeError, get_env


def test_get_env_basic(monkeypatch):
    """Test getting set variables and missing variables with defaults."""
    monkeypatch.setenv("BENCHRUNNER_TEST_VAR", "test_value")
    monkeypatch.delenv("BENCHRUNNER_MISSING_VAR", raising=False)

    assert get_env("BENCHRUNNER_TEST_VAR") == "test_value"
    assert get_env("BENCHRUNNER_MISSING_VAR", default="default") == "default"
    assert get_env("BENCHRUNNER_MISSING_VAR") is None


def test_get_env_coercion(monkeypatch):
    """Test type coercion for common types."""
    monkeypatch.setenv("BENCHRUNNER_BOOL_TRUE", "true")
    monkeypatch.setenv("BENCHRUNNER_BOOL_FALSE", "0")
    monkeypatch.setenv("BENCHRUNNER_INT", "8080")
    monkeypatch.setenv("BENCHRUNNER_FLOAT", "1.5")

    assert get_env("BENCHRUNNER_BOOL_TRUE", as_type=bool) is True
    assert get_env("BENCHRUNNER_BOOL_FALSE", as_type=bool) is False
    assert get_env("BENCHRUNNER_INT", as_type=int) == 8080
    assert get_env("BENCHRUNNER_FLOAT", as_type=float) == 1.5


def test_get_env_unsupported_type(monkeypatch):
    """Test that only scalar conversions are offered."""
    monkeypatch.setenv("BENCHRUNNER_LIST", "a,b")

    with pytest.raises(TypeError):
        get_env("BENCHRUNNER_LIST", as_type=list)


def test_get_env_coercion_failure(monkeypatch):
    """Test that an unconvertible value raises EnvVarTypeError."""
    monkeypatch.setenv("BENCHRUNNER_INT", "not-a-number")

    with pytest.raises(EnvVarTypeError):
        get_env("BENCHRUNNER_INT", as_type=int)


def test_get_env_logged(monkeypatch, log_output):
    """Test that logged lookups go to the env logger."""
    monkeypatch.setenv("BENCHRUNNER_LOG_LEVEL", "DEBUG")

    get_env("BENCHRUNNER_LOG_LEVEL", log=True)

    assert "ENV GET BENCHRUNNER_LOG_LEVEL=DEBUG" in log_output.getvalue()
