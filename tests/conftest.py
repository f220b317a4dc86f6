"""Pytest configuration and shared fixtures."""

import pytest

# The metric_time testing plugin is registered via a ``pytest11`` entry
# point (pyproject.toml) for external consumers.  In our own test
# suite we disable it (``-p no:metric_time``) and load explicitly here
# instead, so the metric_time import chain happens after coverage
# tracing starts.
pytest_plugins = ["metric_time.testing._plugin"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: Unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests (real threads and timing)"
    )
