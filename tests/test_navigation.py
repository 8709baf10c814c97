"""Tests for page navigation."""

import asyncio

import pytest

from benchrunner.navigation import navigate
from fakes import FakePage

URL = "http://localhost:8080/vanillajs/index.html"


def test_navigate_first_try(calls):
    """Test a navigation that succeeds immediately."""
    page = FakePage(calls)
    asyncio.run(navigate(page, URL))

    assert page.goto_attempts == 1


def test_navigate_retries_once(calls, log_output):
    """Test that a failed navigation is retried with the same URL."""
    page = FakePage(calls, goto_failures=1)
    asyncio.run(navigate(page, URL))

    assert page.goto_attempts == 2
    assert calls == [f"goto:{URL}", f"goto:{URL}"]
    assert "retrying" in log_output.getvalue()


def test_navigate_second_failure_propagates(calls):
    """Test that the retry does not swallow a second failure."""
    page = FakePage(calls, goto_failures=3)
    with pytest.raises(TimeoutError):
        asyncio.run(navigate(page, URL))

    assert page.goto_attempts == 2
