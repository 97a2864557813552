"""Pytest configuration and shared fixtures."""

from datetime import datetime

import pytest
from pytz import timezone


@pytest.fixture
def now():
    """Fixed end of the reporting window."""
    return datetime(2026, 10, 19, 8, 30, 0, tzinfo=timezone("UTC"))
