"""Shared fixtures."""

import pytest

from fides_vera.observability import reset_config, reset_tracer


@pytest.fixture(autouse=True)
def _fresh_tracer():
    """Each test resolves the tracer from its own environment."""
    reset_config()
    reset_tracer()
    yield
    reset_config()
    reset_tracer()
