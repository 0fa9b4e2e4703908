"""Shared fixtures for the test suite."""

from datetime import datetime, timezone

import pytest

from pr_engagement.models import AnalysisWindow


@pytest.fixture
def window():
    """Analysis window from 2026-01-05 to 2026-01-10 (UTC)."""
    return AnalysisWindow(
        start=datetime(2026, 1, 5, tzinfo=timezone.utc),
        end=datetime(2026, 1, 10, tzinfo=timezone.utc)
    )
