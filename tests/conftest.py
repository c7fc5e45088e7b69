"""
Pytest configuration and shared fixtures.
"""

import numpy as np
import pytest

from seasonal_watch.models import PipelineConfig, Series

WEEKLY_PATTERN = [100.0, 100.0, 100.0, 100.0, 100.0, 50.0, 50.0]


@pytest.fixture
def weekly_pattern():
    """Five weekdays at 100, weekend at 50."""
    return list(WEEKLY_PATTERN)


@pytest.fixture
def perfect_training():
    """42 days of the weekly pattern: no trend, no noise."""
    values = WEEKLY_PATTERN * 6
    return Series(np.arange(len(values)), values)


@pytest.fixture
def perfect_series():
    """49 days of the weekly pattern: 42 training days plus a 7-day holdout."""
    values = WEEKLY_PATTERN * 7
    return Series(np.arange(len(values)), values)


@pytest.fixture
def noisy_series():
    """Ten weeks of a weekly pattern on a rising trend with gaussian noise."""
    rng = np.random.default_rng(42)
    n = 70
    t = np.arange(n)
    values = 200 + 0.8 * t + 30 * np.sin(2 * np.pi * t / 7) + rng.normal(0, 4, n)
    return Series(t, values)


@pytest.fixture
def default_config():
    """Weekly period, 7-day horizon, 95% interval."""
    return PipelineConfig()
