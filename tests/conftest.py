"""Pytest configuration and shared fixtures for the refold test suite."""

import os

import pytest
from hypothesis import Phase, Verbosity, settings

from refold.options import BRACE_DIALECT, PYTHON_DIALECT, RenderOptions

settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=30)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "integration: Integration tests - component interaction tests")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")


@pytest.fixture
def python_options() -> RenderOptions:
    """Render options for Python sources indented by four spaces."""
    return RenderOptions(dialect=PYTHON_DIALECT, indentation_step=4)


@pytest.fixture
def brace_options() -> RenderOptions:
    """Render options for brace-delimited sources indented by two spaces."""
    return RenderOptions(dialect=BRACE_DIALECT, indentation_step=2)
